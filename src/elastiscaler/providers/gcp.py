"""GCP Elastigroup adapter."""

from .base import ProviderAdapter, CloudProvider


class GCPAdapter(ProviderAdapter):
    """Adapter for GCP GCE Elastigroups."""

    provider = CloudProvider.GCP
    group_path = "/gcp/gce/group/{group_id}"
    identifier_key = "instanceName"
    state_key = "statusName"
