"""Unit tests for credential resolution."""

import pytest
from elastiscaler.config import TargetConfig
from elastiscaler.credentials import (
    Credentials,
    CredentialSource,
    EnvCredentialSource,
    FileCredentialSource,
    StaticCredentialSource,
    resolve_credentials,
)
from elastiscaler.errors import ConfigError


class StubSource(CredentialSource):
    def __init__(self, name, credentials):
        self.name = name
        self.credentials = credentials
        self.calls = 0

    def load(self):
        self.calls += 1
        return self.credentials


class TestResolveCredentials:
    """Tests for the ordered source loop."""

    def test_first_non_empty_source_wins(self):
        first = StubSource("first", None)
        second = StubSource("second", Credentials(token="t2", account="a2"))
        third = StubSource("third", Credentials(token="t3"))

        credentials = resolve_credentials([first, second, third])

        assert credentials == Credentials(token="t2", account="a2")
        assert third.calls == 0

    def test_empty_token_is_skipped(self):
        empty = StubSource("empty", Credentials(token=""))
        static = StubSource("static", Credentials(token="t3"))

        assert resolve_credentials([empty, static]).token == "t3"

    def test_all_sources_exhausted(self):
        """Test ConfigError is raised only after every source is tried."""
        sources = [StubSource("file", None), StubSource("environment", None)]

        with pytest.raises(ConfigError, match="file, environment"):
            resolve_credentials(sources)

        assert all(source.calls == 1 for source in sources)


class TestFileCredentialSource:
    """Tests for the shared credentials file."""

    def test_missing_file(self, tmp_path):
        source = FileCredentialSource(path=str(tmp_path / "missing"))
        assert source.load() is None

    def test_flat_file(self, tmp_path):
        path = tmp_path / "credentials"
        path.write_text("token: file-token\naccount: act-file\n")

        credentials = FileCredentialSource(path=str(path)).load()

        assert credentials == Credentials(token="file-token", account="act-file")

    def test_profile_file(self, tmp_path):
        path = tmp_path / "credentials"
        path.write_text(
            "default:\n  token: default-token\n"
            "staging:\n  token: staging-token\n  account: act-staging\n"
        )

        credentials = FileCredentialSource(path=str(path), profile="staging").load()

        assert credentials == Credentials(token="staging-token", account="act-staging")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "credentials"
        path.write_text("token: [unclosed\n")

        assert FileCredentialSource(path=str(path)).load() is None

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "creds.yaml"
        path.write_text("token: env-file-token\n")
        monkeypatch.setenv("SPOTINST_SHARED_CREDENTIALS_FILE", str(path))

        assert FileCredentialSource().load().token == "env-file-token"


class TestEnvAndStaticSources:
    """Tests for environment and config sources."""

    def test_env_source(self, monkeypatch):
        monkeypatch.setenv("SPOTINST_TOKEN", "env-token")
        monkeypatch.setenv("SPOTINST_ACCOUNT", "act-env")

        assert EnvCredentialSource().load() == Credentials(token="env-token", account="act-env")

    def test_env_source_empty(self, monkeypatch):
        monkeypatch.delenv("SPOTINST_TOKEN", raising=False)
        assert EnvCredentialSource().load() is None

    def test_static_source(self):
        config = TargetConfig(token="cfg-token", account_id="act-cfg")
        assert StaticCredentialSource(config).load() == Credentials(
            token="cfg-token", account="act-cfg"
        )

    def test_static_source_without_token(self):
        assert StaticCredentialSource(TargetConfig(account_id="act-cfg")).load() is None

    def test_file_beats_environment_beats_config(self, tmp_path, monkeypatch):
        path = tmp_path / "credentials"
        monkeypatch.setenv("SPOTINST_TOKEN", "env-token")
        config = TargetConfig(token="cfg-token")
        sources = [
            FileCredentialSource(path=str(path)),
            EnvCredentialSource(),
            StaticCredentialSource(config),
        ]

        assert resolve_credentials(sources).token == "env-token"

        path.write_text("token: file-token\n")
        assert resolve_credentials(sources).token == "file-token"
