"""
Configuration management for NuvoLock.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from nuvolock.core.exceptions import ConfigurationError
from nuvolock.core.types import MIN_LOCK_DURATION

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {name} is not set")
    return value


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Config:
    """NuvoLock configuration."""

    owner: str
    min_lock_duration: int = MIN_LOCK_DURATION  # seconds
    storage_backend: str = "memory"
    redis_url: str | None = None
    # Remote token service; None means a custodian must be passed explicitly
    custodian_url: str | None = None
    custodian_api_key: str | None = None
    request_timeout: float = 30.0
    # Gate lock/unlock on the participant allow-list
    require_participant: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.owner:
            raise ConfigurationError("owner is required")
        if isinstance(self.min_lock_duration, bool) or not isinstance(self.min_lock_duration, int):
            raise ConfigurationError("min_lock_duration must be an integer number of seconds")
        if self.min_lock_duration <= 0:
            raise ConfigurationError(
                "min_lock_duration must be positive",
                details={"min_lock_duration": self.min_lock_duration},
            )
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        owner = overrides.get("owner") or _get_env_var("NUVOLOCK_OWNER", required=True)

        min_lock_duration = overrides.get("min_lock_duration")
        if min_lock_duration is None:
            min_lock_duration = _parse_int(
                "NUVOLOCK_MIN_LOCK_PERIOD",
                _get_env_var("NUVOLOCK_MIN_LOCK_PERIOD", default=str(MIN_LOCK_DURATION)),
            )

        request_timeout = overrides.get("request_timeout")
        if request_timeout is None:
            request_timeout = _parse_float(
                "NUVOLOCK_REQUEST_TIMEOUT",
                _get_env_var("NUVOLOCK_REQUEST_TIMEOUT", default=str(cls.request_timeout)),
            )

        require_participant = overrides.get("require_participant")
        if require_participant is None:
            require_participant = _parse_bool(
                "NUVOLOCK_REQUIRE_PARTICIPANT",
                _get_env_var("NUVOLOCK_REQUIRE_PARTICIPANT", default="false"),
            )

        storage_backend = overrides.get("storage_backend") or _get_env_var(
            "NUVOLOCK_STORAGE_BACKEND", default="memory"
        )
        redis_url = overrides.get("redis_url") or _get_env_var("NUVOLOCK_REDIS_URL")
        custodian_url = overrides.get("custodian_url") or _get_env_var("NUVOLOCK_CUSTODIAN_URL")
        custodian_api_key = overrides.get("custodian_api_key") or _get_env_var(
            "NUVOLOCK_CUSTODIAN_API_KEY"
        )
        log_level = overrides.get("log_level") or _get_env_var(
            "NUVOLOCK_LOG_LEVEL", default="INFO"
        )

        return cls(
            owner=owner,  # type: ignore
            min_lock_duration=min_lock_duration,
            storage_backend=storage_backend,  # type: ignore
            redis_url=redis_url,
            custodian_url=custodian_url,
            custodian_api_key=custodian_api_key,
            request_timeout=request_timeout,
            require_participant=require_participant,
            log_level=log_level,  # type: ignore
        )

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(updates)
        return Config(**current)
