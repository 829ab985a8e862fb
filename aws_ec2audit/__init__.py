"""
AWS EC2 Audit - Compliance checks for EC2 and EBS

A command-line tool that inspects EC2 instances, AMIs and EBS volumes
and reports each one as Secure or Warning.
"""

__version__ = '1.0'
__author__ = 'Aswanth'
__email__ = 'aswanthrajan97@gmail.com'
__description__ = 'Compliance checker for AWS EC2 and EBS'
__url__ = 'https://github.com/'

from .exceptions import CollaboratorError
from .models import RULE_SCOPE, AuditTally, EmptyPolicy, Finding, Outcome, Rule
from .core import Ec2Collaborator
from .rules import build_ec2_rules, select_rules
from .runner import run_audit, run_rule
from .sinks import JsonLinesSink, MemorySink, TextSink
