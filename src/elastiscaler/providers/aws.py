"""AWS Elastigroup adapter."""

from .base import ProviderAdapter, CloudProvider


class AWSAdapter(ProviderAdapter):
    """Adapter for AWS EC2 Elastigroups."""

    provider = CloudProvider.AWS
    group_path = "/aws/ec2/group/{group_id}"
    identifier_key = "instanceId"
    state_key = "status"
