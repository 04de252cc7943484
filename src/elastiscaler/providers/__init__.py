"""Elastigroup provider adapters."""

from typing import Optional

from ..client import SpotinstClient
from .base import (
    CloudProvider,
    GroupCapacity,
    GroupHandle,
    NodeStatus,
    ProviderAdapter,
)
from .aws import AWSAdapter
from .azure import AzureAdapter
from .gcp import GCPAdapter

ADAPTERS = {
    CloudProvider.AWS: AWSAdapter,
    CloudProvider.AZURE: AzureAdapter,
    CloudProvider.GCP: GCPAdapter,
}


def get_adapter(provider: Optional[str], client: SpotinstClient) -> ProviderAdapter:
    """
    Create the adapter for a provider tag.

    Raises:
        UnknownProviderError: If the tag is not 'aws', 'azure' or 'gcp'
    """
    return ADAPTERS[CloudProvider.parse(provider)](client)


__all__ = [
    "CloudProvider",
    "GroupCapacity",
    "GroupHandle",
    "NodeStatus",
    "ProviderAdapter",
    "AWSAdapter",
    "AzureAdapter",
    "GCPAdapter",
    "get_adapter",
]
