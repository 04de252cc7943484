"""Target controller: the Scale and Status operations exposed to the orchestrator."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping, Sequence
import logging

from .client import SpotinstClient
from .cluster import ClusterPool
from .config import Config, TargetConfig
from .credentials import CredentialSource, default_sources, resolve_credentials
from .errors import ElastiscalerError, PoolReadinessError, ScalingError
from .group import GroupStateReader
from .readiness import ReadinessChecker
from .scaling import ScaleDirection, ScaleExecutor, calculate_direction, validate_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalingAction:
    """A request to set the group's capacity."""

    desired_count: int
    dry_run: bool = False

    @classmethod
    def from_count(cls, count: int) -> "ScalingAction":
        """Build an action from an orchestrator count, where -1 means dry run."""
        return cls(desired_count=count, dry_run=count == Config.DRY_RUN_COUNT)


@dataclass
class TargetStatus:
    """Status reported back to the orchestrator."""

    ready: bool
    count: int = 0
    meta: Dict[str, str] = field(default_factory=dict)


class TargetController:
    """
    Orchestrates scaling and status checks for one Elastigroup target.

    The configuration and API client are fixed at construction and shared
    by every invocation. No locking is done here; the orchestrator must keep
    at most one scaling operation in flight per group.
    """

    def __init__(self, config: TargetConfig, client: SpotinstClient, pool: ClusterPool):
        self.config = config
        self.client = client
        self.pool = pool
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        pool: ClusterPool,
        sources: Optional[Sequence[CredentialSource]] = None,
    ) -> "TargetController":
        """
        Build a controller from a raw configuration mapping.

        Args:
            config: String-keyed configuration
            pool: Cluster pool readiness collaborator
            sources: Credential sources, defaults to file, environment, config

        Returns:
            TargetController instance

        Raises:
            ConfigError: If no credentials can be found
        """
        target_config = TargetConfig.from_mapping(config)
        if sources is None:
            sources = default_sources(target_config)
        credentials = resolve_credentials(sources)
        return cls(target_config, SpotinstClient(credentials), pool)

    def _resolve(self, config: Optional[Mapping[str, Any]]) -> TargetConfig:
        return self.config.with_overrides(config)

    async def scale(
        self,
        action: ScalingAction,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Set the group's target capacity to ``action.desired_count``.

        Args:
            action: Scaling action from the orchestrator
            config: Per-target configuration overriding the controller's

        Raises:
            ConfigError, UnknownProviderError, ProviderReadError: If the
                group cannot be read
            ScalingError: If the update fails
        """
        # Elastigroups have no dry-run mode, so there is nothing to do
        if action.dry_run:
            self.logger.info("Dry run requested, skipping scaling action")
            return

        target_config = self._resolve(config)

        try:
            capacity, handle = await GroupStateReader(target_config, self.client).read()
        except ElastiscalerError as e:
            self.logger.error(f"failed to describe Elastigroup: {e}")
            raise

        direction = calculate_direction(capacity.target, action.desired_count)
        if direction is ScaleDirection.NONE:
            self.logger.info(
                f"Scaling not required: current_count={capacity.target}, "
                f"strategy_count={action.desired_count}"
            )
            return

        violation = validate_bounds(
            direction, action.desired_count, capacity.minimum, capacity.maximum
        )
        if violation is not None:
            # Reported only; the update below still runs
            self.logger.error(
                f"{violation}: current_count={capacity.target}, "
                f"strategy_count={action.desired_count}"
            )

        self.logger.info(
            f"Scaling {direction.value} elastigroup {handle.group_id} "
            f"from {capacity.target} to {action.desired_count}"
        )

        try:
            await ScaleExecutor(target_config, self.client).update(
                handle, action.desired_count
            )
        except ElastiscalerError as e:
            raise ScalingError(f"failed to perform scaling action: {e}") from e

    async def status(self, config: Optional[Mapping[str, Any]] = None) -> TargetStatus:
        """
        Report whether the group is ready and how many instances it has.

        The cluster pool is checked first; when it is not ready the cloud
        provider is not contacted.

        Args:
            config: Per-target configuration overriding the controller's

        Returns:
            TargetStatus

        Raises:
            PoolReadinessError: If the pool check fails
            ConfigError, UnknownProviderError, ProviderStatusError: If the
                group status cannot be read
        """
        target_config = self._resolve(config)

        try:
            ready = self.pool.is_pool_ready(target_config)
        except PoolReadinessError:
            raise
        except Exception as e:
            raise PoolReadinessError(f"failed to run node readiness check: {e}") from e

        if not ready:
            self.logger.info("Cluster pool is not ready, skipping provider status check")
            return TargetStatus(ready=False)

        try:
            report = await ReadinessChecker(target_config, self.client).check()
        except ElastiscalerError as e:
            self.logger.error(f"failed to describe Elastigroup: {e}")
            raise

        return TargetStatus(ready=report.ready, count=report.count, meta={})

    async def close(self):
        """Release the API client."""
        await self.client.close()
