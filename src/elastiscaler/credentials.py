"""Spotinst credential resolution."""

import os
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .config import TargetConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_TOKEN = "SPOTINST_TOKEN"
ENV_ACCOUNT = "SPOTINST_ACCOUNT"
ENV_CREDENTIALS_FILE = "SPOTINST_SHARED_CREDENTIALS_FILE"
ENV_PROFILE = "SPOTINST_PROFILE"

DEFAULT_CREDENTIALS_FILE = Path("~/.spotinst/credentials")
DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class Credentials:
    """A Spotinst API token and optional account ID."""

    token: str
    account: Optional[str] = None


class CredentialSource(ABC):
    """A single place credentials may come from."""

    name = "source"

    @abstractmethod
    def load(self) -> Optional[Credentials]:
        """
        Load credentials from this source.

        Returns:
            Credentials with a non-empty token, or None if this source has none
        """
        pass


class FileCredentialSource(CredentialSource):
    """
    Credentials from the shared YAML credentials file.

    The file holds either a flat ``token``/``account`` mapping or one such
    mapping per profile.
    """

    name = "file"

    def __init__(self, path: Optional[str] = None, profile: Optional[str] = None):
        self.path = Path(
            path or os.getenv(ENV_CREDENTIALS_FILE) or DEFAULT_CREDENTIALS_FILE
        ).expanduser()
        self.profile = profile or os.getenv(ENV_PROFILE) or DEFAULT_PROFILE

    def load(self) -> Optional[Credentials]:
        if not self.path.is_file():
            return None

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read credentials file {self.path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Credentials file {self.path} is not a mapping")
            return None

        section = data.get(self.profile)
        if isinstance(section, dict):
            data = section

        token = data.get("token")
        if not token:
            return None
        account = data.get("account")
        return Credentials(token=str(token), account=str(account) if account else None)


class EnvCredentialSource(CredentialSource):
    """Credentials from SPOTINST_TOKEN and SPOTINST_ACCOUNT."""

    name = "environment"

    def load(self) -> Optional[Credentials]:
        token = os.getenv(ENV_TOKEN)
        if not token:
            return None
        return Credentials(token=token, account=os.getenv(ENV_ACCOUNT) or None)


class StaticCredentialSource(CredentialSource):
    """Credentials given directly in the target configuration."""

    name = "config"

    def __init__(self, config: TargetConfig):
        self.config = config

    def load(self) -> Optional[Credentials]:
        if not self.config.token:
            return None
        return Credentials(token=self.config.token, account=self.config.account_id)


def default_sources(config: TargetConfig) -> Sequence[CredentialSource]:
    """File first, then environment, then static config values."""
    return [FileCredentialSource(), EnvCredentialSource(), StaticCredentialSource(config)]


def resolve_credentials(sources: Sequence[CredentialSource]) -> Credentials:
    """
    Return the first credentials found, trying sources in order.

    Args:
        sources: Credential sources in priority order

    Returns:
        The first resolved Credentials

    Raises:
        ConfigError: If no source yields a token
    """
    for source in sources:
        credentials = source.load()
        if credentials is not None and credentials.token:
            logger.debug(f"Using Spotinst credentials from {source.name}")
            return credentials

    tried = ", ".join(source.name for source in sources)
    raise ConfigError(f"unable to find Spotinst token (tried: {tried})")
