"""Reads the current state of the target Elastigroup."""

from typing import Tuple
import logging

from .client import SpotinstClient
from .config import Config, TargetConfig
from .providers import GroupCapacity, GroupHandle, get_adapter

logger = logging.getLogger(__name__)


class GroupStateReader:
    """Produces a capacity snapshot and a handle for the configured group."""

    def __init__(self, config: TargetConfig, client: SpotinstClient):
        self.config = config
        self.client = client

    async def read(self) -> Tuple[GroupCapacity, GroupHandle]:
        """
        Read the group's current capacity.

        Returns:
            The capacity and the handle needed to update the group within the
            same operation

        Raises:
            ConfigError: If the provider or group_id is missing
            UnknownProviderError: If the provider tag is not supported
            ProviderReadError: If the provider call fails
        """
        provider = self.config.require(Config.KEY_PROVIDER)
        group_id = self.config.require(Config.KEY_GROUP_ID)

        adapter = get_adapter(provider, self.client)
        return await adapter.read(group_id)
