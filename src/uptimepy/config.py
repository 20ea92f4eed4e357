"""Process configuration loaded from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from uptimepy.core.errors import ConfigError


@dataclass(frozen=True)
class MonitorConfig:
    target_url: str = "http://localhost:3000"
    health_path: str = "/api/status"
    check_interval_ms: int = 30000
    timezone_name: str = "UTC"
    log_directory: str = "logs"
    port: int = 3000
    probe_timeout_ms: int = 5000
    max_partitions: int = 7

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_ms / 1000


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_config(env: Mapping[str, str] | None = None) -> MonitorConfig:
    """Build a MonitorConfig from environment variables.

    When ``env`` is omitted, an env file (``UPTIMEPY_ENV_FILE``, default
    ``.env``) is loaded first without overriding variables already set.

    Raises:
        ConfigError: If a numeric setting is malformed or not positive.
    """
    if env is None:
        env_file = os.getenv("UPTIMEPY_ENV_FILE", ".env")
        if env_file and Path(env_file).exists():
            load_dotenv(env_file, override=False)
        env = os.environ

    defaults = MonitorConfig()
    return MonitorConfig(
        target_url=env.get("HEALTHCHECK_HOST") or defaults.target_url,
        health_path=env.get("HEALTHCHECK_URL") or defaults.health_path,
        check_interval_ms=_int_setting(env, "CHECK_INTERVAL_MS", defaults.check_interval_ms),
        timezone_name=env.get("TIMEZONE") or defaults.timezone_name,
        log_directory=env.get("LOG_DIR") or defaults.log_directory,
        port=_int_setting(env, "PORT", defaults.port),
        probe_timeout_ms=_int_setting(env, "PROBE_TIMEOUT_MS", defaults.probe_timeout_ms),
        max_partitions=_int_setting(env, "MAX_PARTITIONS", defaults.max_partitions),
    )
