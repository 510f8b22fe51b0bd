"""Unit tests for config module."""

import os
from unittest.mock import patch

import pytest

from nuvolock.core.config import Config
from nuvolock.core.exceptions import ConfigurationError
from nuvolock.core.types import MIN_LOCK_DURATION


class TestConfig:
    """Tests for Config class."""

    def test_create_config_directly(self) -> None:
        config = Config(owner="0xowner")

        assert config.owner == "0xowner"
        assert config.min_lock_duration == MIN_LOCK_DURATION
        assert config.storage_backend == "memory"
        assert config.require_participant is False

    def test_config_is_immutable(self) -> None:
        config = Config(owner="0xowner")

        with pytest.raises(AttributeError):
            config.min_lock_duration = 1  # type: ignore

    def test_missing_owner_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="owner is required"):
            Config(owner="")

    @pytest.mark.parametrize("value", [0, -1, 1.5])
    def test_invalid_min_lock_duration(self, value) -> None:
        with pytest.raises(ConfigurationError):
            Config(owner="0xowner", min_lock_duration=value)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ConfigurationError):
            Config(owner="0xowner", request_timeout=0)

    def test_from_env(self) -> None:
        env_vars = {
            "NUVOLOCK_OWNER": "0xenvowner",
            "NUVOLOCK_MIN_LOCK_PERIOD": "1209600",
            "NUVOLOCK_STORAGE_BACKEND": "redis",
            "NUVOLOCK_REDIS_URL": "redis://cache:6379/0",
            "NUVOLOCK_CUSTODIAN_URL": "https://tokens.test/v1",
            "NUVOLOCK_REQUIRE_PARTICIPANT": "yes",
            "NUVOLOCK_REQUEST_TIMEOUT": "5",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = Config.from_env()

        assert config.owner == "0xenvowner"
        assert config.min_lock_duration == 1209600
        assert config.storage_backend == "redis"
        assert config.redis_url == "redis://cache:6379/0"
        assert config.custodian_url == "https://tokens.test/v1"
        assert config.require_participant is True
        assert config.request_timeout == 5.0

    def test_from_env_missing_owner(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="NUVOLOCK_OWNER"):
                Config.from_env()

    def test_from_env_bad_integer(self) -> None:
        env_vars = {"NUVOLOCK_OWNER": "0xowner", "NUVOLOCK_MIN_LOCK_PERIOD": "a week"}
        with patch.dict(os.environ, env_vars, clear=True):
            with pytest.raises(ConfigurationError, match="must be an integer"):
                Config.from_env()

    def test_from_env_bad_bool(self) -> None:
        env_vars = {"NUVOLOCK_OWNER": "0xowner", "NUVOLOCK_REQUIRE_PARTICIPANT": "maybe"}
        with patch.dict(os.environ, env_vars, clear=True):
            with pytest.raises(ConfigurationError, match="must be a boolean"):
                Config.from_env()

    def test_overrides_win(self) -> None:
        with patch.dict(os.environ, {"NUVOLOCK_OWNER": "0xenv"}, clear=True):
            config = Config.from_env(owner="0xoverride", min_lock_duration=86400)

        assert config.owner == "0xoverride"
        assert config.min_lock_duration == 86400

    def test_with_updates(self) -> None:
        config = Config(owner="0xowner")
        updated = config.with_updates(require_participant=True)

        assert updated.require_participant is True
        assert updated.owner == "0xowner"
        assert config.require_participant is False
