"""
The EC2/EBS compliance checklist.

Rules are registered in a fixed order and that order is the order findings
are reported in.
"""
from .models import EmptyPolicy, Rule

RULE_GROUPS = ('ec2', 'ebs')


def build_ec2_rules(collaborator, region):
    """
    Build the checklist against one region.

    Args:
        collaborator: Ec2Collaborator bound to the region's clients
        region: AWS region name, used in remediation commands

    Returns:
        list: Rule objects in registration order
    """
    return [
        Rule(
            rule_id='ec2-default-sg',
            title='Default security group usage',
            lister=collaborator.list_default_sg_instances,
            predicate=lambda instance_id: not collaborator.uses_default_security_group(instance_id),
            empty_policy=EmptyPolicy.EMPTY_MEANS_PASS,
            empty_message='There are no instances using the default security group',
            pass_message='The instance {resource_id} is no longer using the default security group',
            warn_message='The instance {resource_id} is using the default security group',
            remediation=(
                f"aws ec2 modify-instance-attribute --region {region} "
                "--instance-id {resource_id} --groups <security-group-id>"
            ),
        ),
        Rule(
            rule_id='ec2-iam-profile',
            title='IAM instance profile',
            lister=collaborator.list_instances,
            predicate=collaborator.has_instance_profile,
            pass_message='Instance {resource_id} uses an IAM profile',
            warn_message='Instance {resource_id} does not use an IAM profile',
            remediation=(
                f"aws ec2 associate-iam-instance-profile --region {region} "
                "--instance-id {resource_id} --iam-instance-profile Name=<instance-profile-name>"
            ),
        ),
        Rule(
            rule_id='ec2-public-ami',
            title='Public AMI sharing',
            lister=collaborator.list_owned_images,
            predicate=lambda image_id: not collaborator.is_image_public(image_id),
            pass_message='Image {resource_id} is not publicly shared',
            warn_message='Image {resource_id} is publicly shared',
            remediation=(
                f"aws ec2 modify-image-attribute --region {region} --image-id {{resource_id}} "
                "--launch-permission '{{\"Remove\":[{{\"Group\":\"all\"}}]}}'"
            ),
        ),
        Rule(
            rule_id='ebs-encrypted',
            title='EBS encryption',
            lister=collaborator.list_volumes,
            predicate=collaborator.is_volume_encrypted,
            pass_message='EBS Volume {resource_id} is encrypted',
            warn_message='EBS Volume {resource_id} is not encrypted',
            remediation=f"aws ec2 enable-ebs-encryption-by-default --region {region}",
            group='ebs',
        ),
        Rule(
            rule_id='ebs-kms-cmk',
            title='EBS KMS customer-managed key',
            lister=collaborator.list_volumes,
            predicate=collaborator.uses_customer_managed_key,
            pass_message='EBS Volume {resource_id} is encrypted with a KMS customer-managed key',
            warn_message='EBS Volume {resource_id} is not encrypted with a KMS customer-managed key',
            remediation=f"aws ec2 modify-ebs-default-kms-key-id --region {region} --kms-key-id <customer-key-id>",
            group='ebs',
        ),
    ]


def select_rules(rules, names):
    """
    Filter the checklist by rule id or group name, keeping registration order.

    Args:
        rules: Rules from build_ec2_rules
        names: Iterable of rule ids, group names ('ec2', 'ebs') or 'all'

    Returns:
        list: Selected rules

    Raises:
        ValueError: If a name matches no rule or group
    """
    wanted = {name.strip().lower() for name in names if name.strip()}
    if not wanted or 'all' in wanted:
        return list(rules)

    known = {rule.rule_id for rule in rules} | set(RULE_GROUPS)
    unknown = sorted(wanted - known)
    if unknown:
        raise ValueError(f"Unknown checks: {', '.join(unknown)}")

    return [rule for rule in rules if rule.rule_id in wanted or rule.group in wanted]
