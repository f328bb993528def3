"""Settings for `run_server`, read from environment variables.

Environment variables (all optional):
- PROBE_TARGETS: comma-separated `name=url` entries to poll
  (e.g. "api=http://localhost:8080/health,db=http://localhost:8081/health")
- PROBE_DELAYS_MS: comma-separated delay progression (default "500,1000,2000,5000")
- PROBE_TIMEOUT_MS: per-request timeout (default 2000)
- HOST / PORT: where the control API listens (default 0.0.0.0:8000)
- LOG_LEVEL: logging level name (default "INFO")
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from waiting_interval.errors import ConfigError
from waiting_interval.progression import validate_delays


def parse_targets(env: str) -> Dict[str, str]:
    """Parse `PROBE_TARGETS` (e.g., "api=http://api:8080/health")."""
    targets = {}
    for kv in env.split(","):
        kv = kv.strip()
        if not kv:
            continue
        name, sep, url = kv.partition("=")
        if not sep or not name or not url:
            raise ConfigError(f"PROBE_TARGETS entry must look like name=url, got {kv!r}")
        targets[name.strip()] = url.strip()
    return targets


def parse_delays(env: str) -> Tuple[float, ...]:
    """Parse `PROBE_DELAYS_MS` (e.g., "500,1000,2000")."""
    try:
        delays = [float(part) for part in env.split(",") if part.strip()]
        return validate_delays(delays)
    except ValueError as exc:
        raise ConfigError(f"invalid PROBE_DELAYS_MS {env!r}: {exc}") from exc


def _int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


@dataclass
class ServerSettings:
    targets: Dict[str, str] = field(default_factory=dict)
    delays_ms: Tuple[float, ...] = (500, 1000, 2000, 5000)
    timeout_ms: int = 2000
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        environ = os.environ if environ is None else environ
        settings = cls()
        if environ.get("PROBE_TARGETS"):
            settings.targets = parse_targets(environ["PROBE_TARGETS"])
        if environ.get("PROBE_DELAYS_MS"):
            settings.delays_ms = parse_delays(environ["PROBE_DELAYS_MS"])
        settings.timeout_ms = _int(environ, "PROBE_TIMEOUT_MS", settings.timeout_ms)
        settings.host = environ.get("HOST", settings.host)
        settings.port = _int(environ, "PORT", settings.port)
        level = environ.get("LOG_LEVEL", settings.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"unknown LOG_LEVEL {level!r}")
        settings.log_level = level
        return settings
