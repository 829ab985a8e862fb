"""
EC2 and EBS lookups used by the audit rules.

Each lister returns resource ids in the order AWS returns them and each
predicate answers a single yes/no question about one resource. AWS errors and
unusable responses are raised as CollaboratorError.
"""
import logging
from contextlib import contextmanager

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_GROUP_NAME = 'default'
INACTIVE_INSTANCE_STATES = ('terminated', 'terminating')
CUSTOMER_KEY_MANAGER = 'CUSTOMER'


@contextmanager
def aws_call(action, resource_id=None):
    """
    Translate botocore failures, and responses missing the fields read inside
    the block, into CollaboratorError.
    """
    try:
        yield
    except ClientError as e:
        code = e.response.get('Error', {}).get('Code', 'Unknown')
        raise CollaboratorError(f"{action} failed ({code}): {e}", resource_id) from e
    except BotoCoreError as e:
        raise CollaboratorError(f"{action} failed: {e}", resource_id) from e
    except (KeyError, TypeError) as e:
        raise CollaboratorError(f"Malformed response from {action}: {e!r}", resource_id) from e


def decode_bool(record, field, resource_id):
    """
    Read a boolean field from an AWS response record.

    Args:
        record: Response dictionary (an instance, image or volume)
        field: Key to read
        resource_id: Resource the record describes, for error reporting

    Returns:
        bool: The field value

    Raises:
        CollaboratorError: If the field is missing or not a boolean
    """
    value = record.get(field)
    if not isinstance(value, bool):
        raise CollaboratorError(f"Malformed response for {resource_id}: {field}={value!r}", resource_id)
    return value


def key_id_from_arn(kms_key_arn):
    """
    Return the key id part of a KMS key ARN, or None when there is no key.

    ``arn:aws:kms:us-east-1:123456789012:key/1234abcd-...`` -> ``1234abcd-...``
    """
    if not kms_key_arn:
        return None
    return kms_key_arn.rsplit('/', 1)[-1] or None


def _is_active(instance):
    return instance.get('State', {}).get('Name') not in INACTIVE_INSTANCE_STATES


class Ec2Collaborator:
    """
    Boto3-backed source of EC2 resource ids and compliance answers.

    Args:
        ec2_client: Boto3 EC2 client
        kms_client: Optional Boto3 KMS client. When given, the customer-managed
            key check asks KMS who manages the volume's key; otherwise any key
            id on the volume counts.
    """

    def __init__(self, ec2_client, kms_client=None):
        self.ec2_client = ec2_client
        self.kms_client = kms_client

    # ---------- instances ----------

    def _iter_instances(self, **kwargs):
        with aws_call('DescribeInstances'):
            paginator = self.ec2_client.get_paginator('describe_instances')
            for page in paginator.paginate(**kwargs):
                for reservation in page.get('Reservations', []):
                    for instance in reservation.get('Instances', []):
                        yield instance

    def _describe_instance(self, instance_id):
        with aws_call('DescribeInstances', instance_id):
            reservations = self.ec2_client.describe_instances(InstanceIds=[instance_id])['Reservations']
            for reservation in reservations:
                for instance in reservation.get('Instances', []):
                    if instance.get('InstanceId') == instance_id:
                        return instance
        raise CollaboratorError(f"Instance {instance_id} not found", instance_id)

    def list_instances(self):
        """
        List every instance that is not terminated.

        Returns:
            list: Instance ids
        """
        with aws_call('DescribeInstances'):
            return [i['InstanceId'] for i in self._iter_instances() if _is_active(i)]

    def list_default_sg_instances(self):
        """
        List instances attached to a security group named ``default``.

        Returns:
            list: Instance ids
        """
        with aws_call('DescribeInstances'):
            return [
                i['InstanceId'] for i in self._iter_instances()
                if _is_active(i) and self._in_default_group(i)
            ]

    @staticmethod
    def _in_default_group(instance):
        return any(
            sg.get('GroupName') == DEFAULT_SECURITY_GROUP_NAME
            for sg in instance.get('SecurityGroups', [])
        )

    def uses_default_security_group(self, instance_id):
        return self._in_default_group(self._describe_instance(instance_id))

    def has_instance_profile(self, instance_id):
        profile = self._describe_instance(instance_id).get('IamInstanceProfile')
        return bool(profile and profile.get('Arn'))

    # ---------- images ----------

    def list_owned_images(self):
        """
        List AMIs owned by the calling account.

        Returns:
            list: Image ids
        """
        with aws_call('DescribeImages'):
            images = self.ec2_client.describe_images(Owners=['self'])['Images']
            return [image['ImageId'] for image in images]

    def is_image_public(self, image_id):
        with aws_call('DescribeImages', image_id):
            images = self.ec2_client.describe_images(ImageIds=[image_id], Owners=['self'])['Images']
        if not images:
            raise CollaboratorError(f"Image {image_id} not found", image_id)
        return decode_bool(images[0], 'Public', image_id)

    # ---------- volumes ----------

    def list_volumes(self):
        """
        List every EBS volume in the region.

        Returns:
            list: Volume ids
        """
        volume_ids = []
        with aws_call('DescribeVolumes'):
            paginator = self.ec2_client.get_paginator('describe_volumes')
            for page in paginator.paginate():
                volume_ids.extend(volume['VolumeId'] for volume in page.get('Volumes', []))
        return volume_ids

    def _describe_volume(self, volume_id):
        with aws_call('DescribeVolumes', volume_id):
            volumes = self.ec2_client.describe_volumes(VolumeIds=[volume_id])['Volumes']
        if not volumes:
            raise CollaboratorError(f"Volume {volume_id} not found", volume_id)
        return volumes[0]

    def is_volume_encrypted(self, volume_id):
        return decode_bool(self._describe_volume(volume_id), 'Encrypted', volume_id)

    def uses_customer_managed_key(self, volume_id):
        """
        Check whether a volume is encrypted with a customer-managed KMS key.

        Args:
            volume_id: EBS volume id

        Returns:
            bool: True if the volume's key is customer managed
        """
        volume = self._describe_volume(volume_id)
        kms_key_arn = volume.get('KmsKeyId')
        if not key_id_from_arn(kms_key_arn):
            return False
        if self.kms_client is None:
            return True

        with aws_call('DescribeKey', volume_id):
            metadata = self.kms_client.describe_key(KeyId=kms_key_arn)['KeyMetadata']
        key_manager = metadata.get('KeyManager')
        if key_manager is None:
            raise CollaboratorError(f"Malformed response for key of {volume_id}: KeyManager missing", volume_id)
        logger.debug("Volume %s key %s is managed by %s", volume_id, metadata.get('KeyId'), key_manager)
        return key_manager == CUSTOMER_KEY_MANAGER
