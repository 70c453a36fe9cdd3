"""
Configuration - Environment-driven settings.

    SANTASPIN_ENV                    development | production (informational)
    SANTASPIN_DB_PATH                SQLite file; unset means in-memory stores
    SANTASPIN_PRIOR_RECEIVER_POLICY  forbid | allow
    SANTASPIN_SPIN_ATTEMPTS          spin retries when a receiver is taken
    SANTASPIN_LOG_LEVEL              logging level name
    ALLOWED_ORIGINS                  comma-separated CORS origins
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping
import logging
import os

from .engine import DEFAULT_SPIN_ATTEMPTS, PriorReceiverPolicy


@dataclass(frozen=True)
class AppConfig:
    env: str = "development"
    db_path: str | None = None
    prior_receiver_policy: PriorReceiverPolicy = PriorReceiverPolicy.FORBID
    spin_attempts: int = DEFAULT_SPIN_ATTEMPTS
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """
        Read configuration from environment variables.

        Raises ValueError on an unknown policy, log level, or a
        non-positive attempt count.
        """
        environ = os.environ if environ is None else environ

        policy_name = environ.get("SANTASPIN_PRIOR_RECEIVER_POLICY", "forbid").strip().lower()
        try:
            policy = PriorReceiverPolicy(policy_name)
        except ValueError:
            valid = ", ".join(p.value for p in PriorReceiverPolicy)
            raise ValueError(
                f"SANTASPIN_PRIOR_RECEIVER_POLICY must be one of {valid}, got {policy_name!r}"
            )

        attempts_raw = environ.get("SANTASPIN_SPIN_ATTEMPTS", str(DEFAULT_SPIN_ATTEMPTS))
        try:
            attempts = int(attempts_raw)
        except ValueError:
            raise ValueError(f"SANTASPIN_SPIN_ATTEMPTS must be an integer, got {attempts_raw!r}")
        if attempts < 1:
            raise ValueError(f"SANTASPIN_SPIN_ATTEMPTS must be at least 1, got {attempts}")

        log_level = environ.get("SANTASPIN_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown SANTASPIN_LOG_LEVEL {log_level!r}")

        origins = [
            origin.strip()
            for origin in environ.get("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        return cls(
            env=environ.get("SANTASPIN_ENV", "development"),
            db_path=environ.get("SANTASPIN_DB_PATH") or None,
            prior_receiver_policy=policy,
            spin_attempts=attempts,
            log_level=log_level,
            allowed_origins=origins or ["*"],
        )


def configure_logging(config: AppConfig) -> None:
    """Root logging setup for the CLI and the server process."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
