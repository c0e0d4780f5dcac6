# =============================================================================
# core/config.py  —  Process-wide Settings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds ONE immutable Settings object at startup.  Everything that needs
#   the base URL or the default API key receives this object explicitly;
#   nothing in core/ reads os.environ on its own.
#
# ENVIRONMENT VARIABLES:
#   UNIPILE_DSN      (required)  Base URL of the Unipile API,
#                                e.g. "https://api8.unipile.com:13851/api/v1"
#   UNIPILE_API_KEY  (optional)  Default key, used when the host does not
#                                pass one with the tool call
#   UNIPILE_TIMEOUT  (optional)  Per-request timeout in seconds (default 30)
#   LOG_LEVEL        (optional)  Python logging level name (default INFO)
#
#   main.py loads a .env file (python-dotenv) before calling load_settings(),
#   so any of these can live there instead of the real environment.
# =============================================================================

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from core.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Settings:
    """Read-only configuration shared by the whole process."""

    base_url: str                         # No trailing slash
    default_api_key: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks.
        key = "set" if self.default_api_key else "unset"
        return (
            f"Settings(base_url={self.base_url!r}, default_api_key=<{key}>, "
            f"timeout_seconds={self.timeout_seconds}, log_level={self.log_level!r})"
        )


def _clean(value: str | None) -> str | None:
    """Strip whitespace; treat blank strings as missing."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass
                 a plain dict.

    Returns:
        A frozen Settings instance.

    Raises:
        ConfigurationError: UNIPILE_DSN is missing, UNIPILE_TIMEOUT is not a
            positive number, or LOG_LEVEL is not a logging level name.
    """
    env = os.environ if environ is None else environ

    base_url = _clean(env.get("UNIPILE_DSN"))
    if not base_url:
        raise ConfigurationError("Missing UNIPILE_DSN in .env")

    raw_timeout = _clean(env.get("UNIPILE_TIMEOUT"))
    timeout = DEFAULT_TIMEOUT_SECONDS
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"UNIPILE_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None
        if timeout <= 0:
            raise ConfigurationError(f"UNIPILE_TIMEOUT must be positive, got {raw_timeout!r}")

    log_level = (_clean(env.get("LOG_LEVEL")) or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL {log_level!r}")

    return Settings(
        base_url=base_url.rstrip("/"),
        default_api_key=_clean(env.get("UNIPILE_API_KEY")),
        timeout_seconds=timeout,
        log_level=log_level,
    )
