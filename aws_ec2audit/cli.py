"""
CLI interface for AWS EC2 Audit
"""
import json
import logging
import sys

import click
import colorama
from botocore.exceptions import BotoCoreError

from . import __version__
from .ascii_art import BANNER
from .core import Ec2Collaborator
from .rules import build_ec2_rules, select_rules
from .runner import run_audit
from .sinks import JsonLinesSink, TextSink
from .utils import create_clients, create_pretty_table, create_summary_table, current_timestamp, get_session

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger('aws_ec2audit').setLevel(level)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(
    version=__version__,
    prog_name='AWS EC2 Audit',
    message='%(prog)s v%(version)s - A compliance checker for EC2 and EBS'
)
def main():
    """
    \b
    ╔═══════════════════════════════════════════════╗
    ║               AWS EC2 AUDIT                   ║
    ║     Compliance Checks for EC2 and EBS         ║
    ╚═══════════════════════════════════════════════╝

    Inspects EC2 instances, AMIs and EBS volumes and reports each one as
    Secure or Warning. Nothing in the account is modified.

    \b
    Commands:
      audit           Run the compliance checks
      rules           List the available checks
      version         Show the version and exit

    \b
    Examples:
      aws-ec2audit audit --profile production --region us-west-2
      aws-ec2audit audit --checks ebs --output json
      aws-ec2audit audit -v
    """
    pass


@main.command('audit')
@click.option('--profile', envvar='AWS_PROFILE', default=None,
              help='AWS profile to use for authentication (from ~/.aws/credentials)')
@click.option('--region', envvar='AWS_DEFAULT_REGION', default='us-east-1', show_default=True,
              help='AWS region to audit')
@click.option('--checks', default='all', show_default=True,
              help='Comma-separated rule ids or groups (ec2, ebs) to run, or "all"')
@click.option('--output', type=click.Choice(['text', 'json']), default='text', show_default=True,
              help='Output format for findings')
@click.option('--verbose', '-v', is_flag=True, help='Print remediation commands after each warning')
@click.option('--color/--no-color', default=None, help='Colourise status labels (default: when writing to a terminal)')
@click.option('--summary/--no-summary', default=True, help='Print a summary table after a text audit')
@click.option('--fail-on-warning', is_flag=True, help='Exit with status 1 if any warning was reported')
@click.option('--fail-on-error', is_flag=True, help='Exit with status 1 if any check could not be completed')
@click.option('--max-attempts', type=click.IntRange(min=1), default=None,
              help='Maximum attempts per AWS API call')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default='WARNING', show_default=True, help='Logging level for diagnostics on stderr')
def audit(profile, region, checks, output, verbose, color, summary, fail_on_warning, fail_on_error,
          max_attempts, log_level):
    """
    Run the EC2 and EBS compliance checks.

    \b
    Checks:
    • ec2-default-sg  - instances attached to the default security group
    • ec2-iam-profile - instances without an IAM instance profile
    • ec2-public-ami  - AMIs owned by the account that are publicly shared
    • ebs-encrypted   - unencrypted EBS volumes
    • ebs-kms-cmk     - EBS volumes not using a customer-managed KMS key

    \b
    Examples:
    aws-ec2audit audit --checks ec2-public-ami,ebs
    aws-ec2audit audit --profile prod --region eu-west-1 --output json
    """
    configure_logging(log_level.upper())
    if color is None:
        color = sys.stdout.isatty()
    if color:
        colorama.init()

    try:
        session = get_session(profile, region)
        ec2_client, kms_client = create_clients(session, max_attempts)
    except BotoCoreError as e:
        click.echo(f"Error connecting to AWS: {str(e)}", err=True)
        sys.exit(1)

    collaborator = Ec2Collaborator(ec2_client, kms_client)
    try:
        rules = select_rules(build_ec2_rules(collaborator, region), checks.split(','))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--checks')

    if output == 'text':
        print(BANNER)
        click.echo(f"Auditing AWS account using profile: {profile or 'default'} in region: {region}")
        click.echo(f"Running checks: {', '.join(rule.rule_id for rule in rules)}\n")
        sink = TextSink(sys.stdout, show_remediation=verbose, color=color)
    else:
        sink = JsonLinesSink(sys.stdout)

    logger.info("Starting audit of %d rules in %s", len(rules), region)
    tally = run_audit(rules, sink)

    if output == 'text':
        if summary:
            click.echo("")
            print(create_summary_table(tally))
        click.echo(f"\nAudit complete. {tally.passed} secure, {tally.warned} warnings, {tally.errors} errors.")
    else:
        print(json.dumps({
            'summary': {
                'profile': profile,
                'region': region,
                'scan_time': current_timestamp(),
                **tally.to_dict(),
            }
        }, ensure_ascii=False))

    if (fail_on_warning and tally.warned) or (fail_on_error and tally.errors):
        sys.exit(1)


@main.command('rules')
def list_rules():
    """List the available checks in the order they run."""
    rules = build_ec2_rules(Ec2Collaborator(None), '<region>')
    table = create_pretty_table(
        "AWS EC2 Audit Checks",
        ["Rule", "Group", "Title", "When nothing is found"],
        [[rule.rule_id, rule.group, rule.title, rule.empty_policy.value] for rule in rules]
    )
    print(table)


@main.command('version')
def version():
    """Display the version of AWS EC2 Audit."""
    click.echo(f"AWS EC2 Audit v{__version__}")


if __name__ == '__main__':
    main()
