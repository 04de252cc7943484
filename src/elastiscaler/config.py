"""Configuration management for the Elastigroup target adapter."""

import os
import logging
from typing import Optional, Mapping, Any
from pydantic import BaseModel, ConfigDict
from pythonjsonlogger import jsonlogger

from .errors import ConfigError


def setup_logging():
    """Configure structured logging for the adapter."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    logger = logging.getLogger()
    logger.setLevel(log_level)

    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class Config:
    """Adapter constants."""

    # Spotinst API
    API_BASE_URL = os.getenv("SPOTINST_API_URL", "https://api.spotinst.io")

    # Configuration keys
    KEY_PROVIDER = "provider"
    KEY_GROUP_ID = "group_id"
    KEY_GROUP_ID_ALIAS = "elastigroup_id"
    KEY_ACCOUNT_ID = "account_id"
    KEY_TOKEN = "token"
    KEY_NODE_SELECTOR = "node_selector"
    KEY_NODE_ID_LABEL = "node_id_label"

    # Count the orchestrator sends for a dry-run scaling action
    DRY_RUN_COUNT = -1

    # Node label holding the provider instance identifier
    DEFAULT_NODE_ID_LABEL = "kubernetes.io/hostname"

    # Instance state considered ready
    RUNNING_STATE = "running"


class TargetConfig(BaseModel):
    """Immutable per-target configuration."""

    model_config = ConfigDict(frozen=True)

    provider: Optional[str] = None
    group_id: Optional[str] = None
    account_id: Optional[str] = None
    token: Optional[str] = None
    node_selector: Optional[str] = None
    node_id_label: str = Config.DEFAULT_NODE_ID_LABEL

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "TargetConfig":
        """
        Build a config from a string-keyed mapping.

        Args:
            config: Raw configuration, e.g. from the orchestrator

        Returns:
            TargetConfig instance
        """
        return cls().with_overrides(config)

    def with_overrides(self, config: Optional[Mapping[str, Any]]) -> "TargetConfig":
        """Return a copy with the non-empty values of ``config`` applied."""
        if not config:
            return self

        updates = {}
        group_id = config.get(Config.KEY_GROUP_ID) or config.get(Config.KEY_GROUP_ID_ALIAS)
        if group_id:
            updates["group_id"] = str(group_id)

        for key in (
            Config.KEY_PROVIDER,
            Config.KEY_ACCOUNT_ID,
            Config.KEY_TOKEN,
            Config.KEY_NODE_SELECTOR,
            Config.KEY_NODE_ID_LABEL,
        ):
            value = config.get(key)
            if value:
                updates[key] = str(value)

        return self.model_copy(update=updates)

    def require(self, key: str) -> str:
        """Return a required value or raise ConfigError naming it."""
        value = getattr(self, key)
        if not value:
            raise ConfigError(f"{key} is a required field")
        return value
