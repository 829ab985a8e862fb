"""
Utility functions for AWS EC2 Audit
"""
from datetime import datetime

import boto3
from botocore.config import Config
from prettytable import PrettyTable


def create_pretty_table(title, headers, rows):
    """
    Create a prettytable for displaying results.

    Args:
        title: Table title
        headers: Column headers
        rows: Row data

    Returns:
        PrettyTable: Formatted table
    """
    table = PrettyTable()
    table.title = title
    table.field_names = headers
    for row in rows:
        table.add_row(row)
    table.align = 'l'  # Left-align text
    return table


def create_summary_table(tally):
    """Tabulate the counters of a finished audit run."""
    return create_pretty_table(
        "Audit Summary",
        ["Checked", "Secure", "Warnings", "Errors"],
        [[tally.total, tally.passed, tally.warned, tally.errors]],
    )


def current_timestamp():
    """
    Get current datetime in ISO format for JSON output.

    Returns:
        str: Current datetime in ISO format
    """
    return datetime.now().isoformat()


def get_session(profile=None, region=None):
    """Return a boto3 Session, passing the profile only when one is set."""
    if profile:
        return boto3.Session(profile_name=profile, region_name=region)
    return boto3.Session(region_name=region)


def create_clients(session, max_attempts=None):
    """
    Create the EC2 and KMS clients used by the audit.

    Args:
        session: boto3 Session
        max_attempts: Optional total attempts per API call, handed to botocore's retry handler

    Returns:
        tuple: (ec2_client, kms_client)
    """
    config = Config(retries={'max_attempts': max_attempts, 'mode': 'standard'}) if max_attempts else None
    return session.client('ec2', config=config), session.client('kms', config=config)
