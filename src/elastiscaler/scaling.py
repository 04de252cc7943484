"""Scaling direction, capacity bounds and execution of scaling actions."""

from enum import Enum
from typing import Optional
import logging

from .client import SpotinstClient
from .config import Config, TargetConfig
from .errors import BoundsViolation
from .providers import GroupHandle, get_adapter

logger = logging.getLogger(__name__)


class ScaleDirection(Enum):
    """Direction of a scaling action."""

    NONE = "none"
    IN = "in"
    OUT = "out"


def calculate_direction(current: int, desired: int) -> ScaleDirection:
    """
    Determine the scaling direction.

    Args:
        current: Current target capacity
        desired: Desired instance count

    Returns:
        ScaleDirection.IN when shrinking, OUT when growing, NONE otherwise
    """
    if desired < current:
        return ScaleDirection.IN
    if desired > current:
        return ScaleDirection.OUT
    return ScaleDirection.NONE


def validate_bounds(
    direction: ScaleDirection,
    desired: int,
    minimum: int,
    maximum: int,
) -> Optional[BoundsViolation]:
    """
    Check a desired count against the group's capacity limits.

    Args:
        direction: Direction of the action
        desired: Desired instance count
        minimum: Group minimum capacity
        maximum: Group maximum capacity

    Returns:
        A BoundsViolation describing the breach, or None
    """
    if direction is ScaleDirection.OUT and desired > maximum:
        return BoundsViolation(direction, desired, maximum)
    if direction is ScaleDirection.IN and desired < minimum:
        return BoundsViolation(direction, desired, minimum)
    return None


class ScaleExecutor:
    """Applies a desired count to the configured group."""

    def __init__(self, config: TargetConfig, client: SpotinstClient):
        self.config = config
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    async def update(self, handle: GroupHandle, desired_count: int) -> None:
        """
        Set the group's target capacity.

        Args:
            handle: Handle from a GroupStateReader read in the same operation
            desired_count: New target capacity

        Raises:
            UnknownProviderError: If the provider tag is not supported
            TypeMismatchError: If the handle belongs to another provider
            ProviderUpdateError: If the provider call fails
        """
        provider = self.config.require(Config.KEY_PROVIDER)
        adapter = get_adapter(provider, self.client)

        self.logger.info(
            f"Updating {adapter.name} elastigroup {handle.group_id} to {desired_count}"
        )
        await adapter.update(handle, desired_count)
