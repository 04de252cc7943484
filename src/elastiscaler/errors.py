"""Error types raised by the Elastigroup target adapter."""

from typing import Optional


class ElastiscalerError(Exception):
    """Base class for all adapter errors."""


class ConfigError(ElastiscalerError):
    """A required configuration value is missing or unusable."""


class UnknownProviderError(ElastiscalerError):
    """The configured provider tag is not one of the supported clouds."""

    def __init__(self, provider: Optional[str]):
        self.provider = provider
        super().__init__(
            f"expected provider of 'aws', 'azure', or 'gcp'. Received {provider!r}"
        )


class SpotinstAPIError(ElastiscalerError):
    """The Spotinst API answered with a non-success status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"Spotinst API returned {status}: {message}")


class ProviderError(ElastiscalerError):
    """A provider call failed. Tagged with the provider and group."""

    operation = "call"

    def __init__(self, provider: str, group_id: str, cause: Exception):
        self.provider = provider
        self.group_id = group_id
        self.cause = cause
        super().__init__(
            f"could not {self.operation} {provider} elastigroup {group_id}: {cause}"
        )


class ProviderReadError(ProviderError):
    operation = "read"


class ProviderStatusError(ProviderError):
    operation = "read status of"


class ProviderUpdateError(ProviderError):
    operation = "update"


class TypeMismatchError(ElastiscalerError):
    """A group handle was passed to another provider's update path."""

    def __init__(self, expected: str, received: str):
        self.expected = expected
        self.received = received
        super().__init__(
            f"Group type assertion failed. Group is not of type {expected} "
            f"(handle belongs to {received})"
        )


class BoundsViolation(ElastiscalerError):
    """
    The desired count falls outside the group's capacity limits.

    Returned by the bounds validator and logged; it does not abort scaling.
    """

    def __init__(self, direction, desired: int, limit: int):
        self.direction = direction
        self.desired = desired
        self.limit = limit
        if direction.value == "out":
            detail = f"desired {desired} is above maximum {limit}"
        else:
            detail = f"desired {desired} is below minimum {limit}"
        super().__init__(
            f"cannot scale {direction.value} due to capacity limits: {detail}"
        )


class ScalingError(ElastiscalerError):
    """Outer error for a failed scaling action."""


class PoolReadinessError(ElastiscalerError):
    """The cluster pool readiness check could not be completed."""


class NodeLookupError(ElastiscalerError):
    """A cluster node has no usable provider instance identifier."""
