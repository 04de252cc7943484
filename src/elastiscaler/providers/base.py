"""Base provider adapter interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Type
import logging

import aiohttp

from ..client import SpotinstClient
from ..config import Config
from ..errors import (
    ProviderError,
    ProviderReadError,
    ProviderStatusError,
    ProviderUpdateError,
    SpotinstAPIError,
    TypeMismatchError,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)

# Errors from the API layer that get wrapped into provider errors
API_ERRORS = (SpotinstAPIError, aiohttp.ClientError, ValueError, KeyError, TypeError)


class CloudProvider(Enum):
    """Elastigroup cloud variants."""

    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"

    @classmethod
    def parse(cls, tag: Optional[str]) -> "CloudProvider":
        """Match a provider tag exactly, raising UnknownProviderError otherwise."""
        for provider in cls:
            if provider.value == tag:
                return provider
        raise UnknownProviderError(tag)


@dataclass(frozen=True)
class GroupCapacity:
    """Provider-reported capacity of a group."""

    target: int
    minimum: int
    maximum: int


@dataclass(frozen=True)
class GroupHandle:
    """
    Reference to a fetched remote group.

    Only valid for the read-then-update operation that produced it.
    """

    provider: CloudProvider
    group_id: str
    group: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class NodeStatus:
    """State of one instance in a group."""

    identifier: str
    raw_state: str

    @property
    def is_running(self) -> bool:
        return self.raw_state.casefold() == Config.RUNNING_STATE


class ProviderAdapter(ABC):
    """
    Abstract base class for Elastigroup provider adapters.

    Subclasses set ``provider``, ``group_path`` and the keys naming the
    instance identifier and state in the status response.
    """

    provider: CloudProvider
    group_path: str
    identifier_key: str
    state_key: str

    def __init__(self, client: SpotinstClient):
        """
        Initialize the adapter.

        Args:
            client: Spotinst API client shared across invocations
        """
        self.client = client
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def name(self) -> str:
        return self.provider.value

    def _path(self, group_id: str) -> str:
        return self.group_path.format(group_id=group_id)

    def _wrap(self, error_cls: Type[ProviderError], group_id: str, e: Exception):
        self.logger.error(f"{self.name} elastigroup {group_id}: {e}")
        return error_cls(self.name, group_id, e)

    def parse_capacity(self, group: Dict[str, Any]) -> GroupCapacity:
        """Extract the canonical capacity from a native group document."""
        capacity = group["capacity"]
        return GroupCapacity(
            target=int(capacity["target"]),
            minimum=int(capacity["minimum"]),
            maximum=int(capacity["maximum"]),
        )

    def parse_node(self, item: Dict[str, Any]) -> NodeStatus:
        """Extract a NodeStatus from one status response item."""
        return NodeStatus(
            identifier=str(item.get(self.identifier_key) or ""),
            raw_state=str(item.get(self.state_key) or ""),
        )

    async def read(self, group_id: str) -> Tuple[GroupCapacity, GroupHandle]:
        """
        Read a group's capacity.

        Args:
            group_id: Elastigroup identifier

        Returns:
            The capacity and a handle for a subsequent update

        Raises:
            ProviderReadError: If the API call fails or the answer is malformed
        """
        try:
            items = await self.client.get(self._path(group_id))
            if not items:
                raise SpotinstAPIError(404, f"group {group_id} not found")
            group = items[0]
            capacity = self.parse_capacity(group)
        except API_ERRORS as e:
            raise self._wrap(ProviderReadError, group_id, e) from e

        self.logger.debug(
            f"{self.name} elastigroup {group_id}: target={capacity.target}, "
            f"min={capacity.minimum}, max={capacity.maximum}"
        )
        return capacity, GroupHandle(provider=self.provider, group_id=group_id, group=group)

    async def status(self, group_id: str) -> List[NodeStatus]:
        """
        List the state of every instance in a group.

        Raises:
            ProviderStatusError: If the API call fails
        """
        try:
            items = await self.client.get(f"{self._path(group_id)}/status")
            return [self.parse_node(item) for item in items]
        except API_ERRORS as e:
            raise self._wrap(ProviderStatusError, group_id, e) from e

    async def update(self, handle: GroupHandle, target_count: int) -> None:
        """
        Set the group's target capacity.

        Success only means the API accepted the request; the group converges
        on its own.

        Raises:
            TypeMismatchError: If the handle belongs to another provider
            ProviderUpdateError: If the API call fails
        """
        if handle.provider is not self.provider:
            raise TypeMismatchError(self.name, handle.provider.value)

        body = {"group": {"capacity": {"target": int(target_count)}}}
        try:
            await self.client.put(self._path(handle.group_id), body)
        except API_ERRORS as e:
            raise self._wrap(ProviderUpdateError, handle.group_id, e) from e

        self.logger.info(
            f"Set {self.name} elastigroup {handle.group_id} target capacity to {target_count}"
        )
