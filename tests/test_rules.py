"""
Tests for the EC2/EBS rule catalogue
"""
import unittest
from unittest.mock import Mock

from aws_ec2audit.models import RULE_SCOPE, EmptyPolicy, Outcome
from aws_ec2audit.rules import build_ec2_rules, select_rules
from aws_ec2audit.runner import run_audit
from aws_ec2audit.sinks import MemorySink

RULE_IDS = ['ec2-default-sg', 'ec2-iam-profile', 'ec2-public-ami', 'ebs-encrypted', 'ebs-kms-cmk']


def fake_collaborator(default_sg=(), instances=(), images=(), volumes=(), profiles=(),
                      public_images=(), encrypted=(), customer_keys=()):
    collaborator = Mock()
    collaborator.list_default_sg_instances.return_value = list(default_sg)
    collaborator.uses_default_security_group.side_effect = lambda i: i in default_sg
    collaborator.list_instances.return_value = list(instances)
    collaborator.has_instance_profile.side_effect = lambda i: i in profiles
    collaborator.list_owned_images.return_value = list(images)
    collaborator.is_image_public.side_effect = lambda i: i in public_images
    collaborator.list_volumes.return_value = list(volumes)
    collaborator.is_volume_encrypted.side_effect = lambda v: v in encrypted
    collaborator.uses_customer_managed_key.side_effect = lambda v: v in customer_keys
    return collaborator


class TestRuleCatalogue(unittest.TestCase):

    def test_rules_are_registered_in_order(self):
        rules = build_ec2_rules(fake_collaborator(), 'us-east-1')

        self.assertEqual([rule.rule_id for rule in rules], RULE_IDS)
        self.assertEqual(rules[0].empty_policy, EmptyPolicy.EMPTY_MEANS_PASS)
        for rule in rules[1:]:
            self.assertEqual(rule.empty_policy, EmptyPolicy.EMPTY_MEANS_NOOP)

    def test_empty_account(self):
        sink = MemorySink()

        tally = run_audit(build_ec2_rules(fake_collaborator(), 'us-east-1'), sink)

        self.assertEqual(len(sink.findings), 1)
        self.assertEqual(sink.findings[0].rule_id, 'ec2-default-sg')
        self.assertEqual(sink.findings[0].resource_id, RULE_SCOPE)
        self.assertEqual(sink.findings[0].message, 'There are no instances using the default security group')
        self.assertEqual((tally.total, tally.passed), (1, 1))

    def test_full_account(self):
        collaborator = fake_collaborator(
            default_sg=['i-1'],
            instances=['i-1', 'i-2'],
            profiles=['i-2'],
            images=['ami-1', 'ami-2'],
            public_images=['ami-2'],
            volumes=['vol-1', 'vol-2'],
            encrypted=['vol-1'],
            customer_keys=['vol-1'],
        )
        sink = MemorySink()

        tally = run_audit(build_ec2_rules(collaborator, 'eu-west-1'), sink)

        self.assertEqual([(f.outcome, f.message) for f in sink.findings], [
            (Outcome.WARN, 'The instance i-1 is using the default security group'),
            (Outcome.WARN, 'Instance i-1 does not use an IAM profile'),
            (Outcome.PASS, 'Instance i-2 uses an IAM profile'),
            (Outcome.PASS, 'Image ami-1 is not publicly shared'),
            (Outcome.WARN, 'Image ami-2 is publicly shared'),
            (Outcome.PASS, 'EBS Volume vol-1 is encrypted'),
            (Outcome.WARN, 'EBS Volume vol-2 is not encrypted'),
            (Outcome.PASS, 'EBS Volume vol-1 is encrypted with a KMS customer-managed key'),
            (Outcome.WARN, 'EBS Volume vol-2 is not encrypted with a KMS customer-managed key'),
        ])
        self.assertEqual((tally.total, tally.passed, tally.warned), (9, 4, 5))

    def test_public_ami_remediation(self):
        collaborator = fake_collaborator(images=['ami-2'], public_images=['ami-2'])
        sink = MemorySink()

        run_audit(select_rules(build_ec2_rules(collaborator, 'eu-west-1'), ['ec2-public-ami']), sink)

        self.assertEqual(
            sink.findings[0].remediation,
            "aws ec2 modify-image-attribute --region eu-west-1 --image-id ami-2 "
            "--launch-permission '{\"Remove\":[{\"Group\":\"all\"}]}'"
        )

    def test_every_warning_has_a_remediation(self):
        rules = build_ec2_rules(fake_collaborator(), 'us-west-2')

        for rule in rules:
            rendered = rule.render(rule.remediation, 'res-1')
            self.assertIn('--region us-west-2', rendered)
            self.assertNotIn('{', rendered.replace('{"Remove"', '').replace('{"Group"', ''))


class TestSelectRules(unittest.TestCase):

    def setUp(self):
        self.rules = build_ec2_rules(fake_collaborator(), 'us-east-1')

    def test_all(self):
        self.assertEqual(select_rules(self.rules, ['all']), self.rules)
        self.assertEqual(select_rules(self.rules, ['']), self.rules)

    def test_group_selection(self):
        selected = select_rules(self.rules, ['ebs'])
        self.assertEqual([rule.rule_id for rule in selected], ['ebs-encrypted', 'ebs-kms-cmk'])

    def test_selection_keeps_registration_order(self):
        selected = select_rules(self.rules, ['ebs-kms-cmk', ' EC2-DEFAULT-SG '])
        self.assertEqual([rule.rule_id for rule in selected], ['ec2-default-sg', 'ebs-kms-cmk'])

    def test_unknown_check(self):
        with self.assertRaises(ValueError) as ctx:
            select_rules(self.rules, ['ec2', 's3'])
        self.assertIn('s3', str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
