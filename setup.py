"""
Setup script for AWS EC2 Audit
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="aws-ec2audit",
    version="1.0",
    author="Aswanth",
    author_email="aswanthrajan97@gmail.com",
    description="A compliance checker for AWS EC2 and EBS resources",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "boto3>=1.20.0",
        "click>=8.0.0",
        "prettytable>=2.0.0",
        "colorama>=0.4.4",
    ],
    extras_require={
        "test": [
            "moto[ec2,iam,kms]>=5.0.0",
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "aws-ec2audit=aws_ec2audit.cli:main",
        ],
    },
)
