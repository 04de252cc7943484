"""Azure Elastigroup adapter."""

from .base import ProviderAdapter, CloudProvider


class AzureAdapter(ProviderAdapter):
    """Adapter for Azure compute Elastigroups."""

    provider = CloudProvider.AZURE
    group_path = "/compute/azure/group/{group_id}"
    identifier_key = "vmName"
    state_key = "state"
