"""Tests for configuration and command line handling."""

import pytest

from provider_registry.__main__ import build_config, parse_args
from provider_registry.config import LogLevel, RegistryConfig, TransportMode


class TestRegistryConfig:
    """Test RegistryConfig."""

    def test_defaults(self) -> None:
        config = RegistryConfig(_env_file=None)

        assert config.transport == TransportMode.STDIO
        assert config.database_url is None
        assert config.adapter_timeout == 30
        assert config.hide_default_models is False
        assert config.admin_access is True

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROVIDER_REGISTRY_DATABASE_URL", "sqlite:///catalog.db")
        monkeypatch.setenv("PROVIDER_REGISTRY_HIDE_DEFAULT_MODELS", "true")

        config = RegistryConfig(_env_file=None)

        assert config.database_url == "sqlite:///catalog.db"
        assert config.hide_default_models is True

    def test_replicate_url_gets_trailing_slash(self) -> None:
        config = RegistryConfig(_env_file=None, replicate_api_url="http://replicate.test/v1/models")

        assert config.replicate_api_url == "http://replicate.test/v1/models/"

    @pytest.mark.parametrize(
        ("settings", "operation", "allowed"),
        [
            ({}, "create", True),
            ({}, "update", True),
            ({}, "delete", False),
            ({"enable_dangerous_operations": True}, "delete", True),
            ({"read_only_mode": True}, "create", False),
            ({"read_only_mode": True, "enable_dangerous_operations": True}, "delete", False),
            ({"read_only_mode": True}, "read", True),
        ],
    )
    def test_is_operation_allowed(
        self, settings: dict[str, bool], operation: str, allowed: bool
    ) -> None:
        config = RegistryConfig(_env_file=None, **settings)

        result, reason = config.is_operation_allowed(operation)

        assert result is allowed
        assert (reason is None) is allowed


class TestBuildConfig:
    """Test argument parsing into config."""

    def test_flags(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir("/")
        args = parse_args(
            [
                "--transport",
                "sse",
                "--port",
                "9000",
                "--database-url",
                "sqlite://",
                "--read-only",
                "--log-level",
                "DEBUG",
            ]
        )

        config = build_config(args)

        assert config.transport == TransportMode.SSE
        assert config.port == 9000
        assert config.database_url == "sqlite://"
        assert config.read_only_mode is True
        assert config.enable_dangerous_operations is False
        assert config.log_level == LogLevel.DEBUG
