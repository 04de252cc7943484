"""Aggregate readiness of the instances in an Elastigroup."""

from dataclasses import dataclass
from typing import List
import logging

from .client import SpotinstClient
from .config import Config, TargetConfig
from .providers import NodeStatus, get_adapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadinessReport:
    """Instance count and whether every instance is running."""

    count: int
    ready: bool


def summarize(nodes: List[NodeStatus]) -> ReadinessReport:
    """
    Fold instance states into one verdict.

    A group with no instances is ready.
    """
    return ReadinessReport(
        count=len(nodes),
        ready=all(node.is_running for node in nodes),
    )


class ReadinessChecker:
    """Checks whether every instance of the configured group is running."""

    def __init__(self, config: TargetConfig, client: SpotinstClient):
        self.config = config
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    async def check(self) -> ReadinessReport:
        """
        Query instance states and aggregate them.

        Raises:
            ConfigError: If the provider or group_id is missing
            UnknownProviderError: If the provider tag is not supported
            ProviderStatusError: If the provider call fails
        """
        provider = self.config.require(Config.KEY_PROVIDER)
        group_id = self.config.require(Config.KEY_GROUP_ID)

        adapter = get_adapter(provider, self.client)
        nodes = await adapter.status(group_id)

        for node in nodes:
            if not node.is_running:
                self.logger.debug(
                    f"Instance {node.identifier} of {provider} elastigroup {group_id} "
                    f"is not running (state={node.raw_state!r})"
                )

        report = summarize(nodes)
        self.logger.info(
            f"Elastigroup {group_id} readiness: count={report.count}, ready={report.ready}"
        )
        return report
