"""Audit logging configuration.

The configuration is resolved once (usually at application startup) from the
environment and then passed to the AuditLogger:

    AUDIT_LOG_ENABLED        "false" disables audit logging, anything else enables it
    AUDIT_LOG_DESTINATION    "stdout" (default) or "database"
    AUDIT_RETENTION_DAYS     integer, default 90 (recorded only, never enforced)
    AUDIT_INCLUDE_METADATA   "false" drops event metadata, anything else keeps it

Missing or invalid values fall back to the defaults; configuration never
raises.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


class AuditDestination(str, Enum):
    """Where audit events are written.

    STREAM: One JSON line per event on stdout (also the fallback sink)
    PERSISTENT: Parameterized insert into the audit_log table
    """

    STREAM = "stdout"
    PERSISTENT = "database"


@dataclass(frozen=True)
class AuditConfig:
    """Configuration for the audit pipeline."""

    enabled: bool = True
    destination: AuditDestination = AuditDestination.STREAM
    retention_days: int = DEFAULT_RETENTION_DAYS
    include_metadata: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AuditConfig":
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ).

        Returns:
            AuditConfig with defaults applied for missing or invalid values.
        """
        env = os.environ if environ is None else environ

        raw_destination = env.get("AUDIT_LOG_DESTINATION", AuditDestination.STREAM.value)
        try:
            destination = AuditDestination(raw_destination.strip().lower())
        except ValueError:
            logger.warning(
                "Unknown AUDIT_LOG_DESTINATION %r, using %s",
                raw_destination,
                AuditDestination.STREAM.value,
            )
            destination = AuditDestination.STREAM

        raw_retention = env.get("AUDIT_RETENTION_DAYS", str(DEFAULT_RETENTION_DAYS))
        try:
            retention_days = int(raw_retention)
        except ValueError:
            logger.warning(
                "Invalid AUDIT_RETENTION_DAYS %r, using %d",
                raw_retention,
                DEFAULT_RETENTION_DAYS,
            )
            retention_days = DEFAULT_RETENTION_DAYS

        return cls(
            enabled=env.get("AUDIT_LOG_ENABLED") != "false",
            destination=destination,
            retention_days=retention_days,
            include_metadata=env.get("AUDIT_INCLUDE_METADATA") != "false",
        )


# Global config instance
_config: AuditConfig | None = None


def get_config() -> AuditConfig:
    """Get the process-wide audit config, reading the environment on first use."""
    global _config
    if _config is None:
        _config = AuditConfig.from_env()
    return _config


def set_config(config: AuditConfig) -> None:
    """Set the process-wide audit config (startup code and tests)."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the process-wide config so the next get_config() re-reads the environment."""
    global _config
    _config = None
