"""
Runtime Configuration

Central configuration for the claim ledger, manifest output and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "DISTRIBUTOR_"

# Fixed-point scale of entitlement shares (1e18 == 100%)
DEFAULT_SCALE = 10**18


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LedgerConfig:
    """Configuration for the claim ledger."""
    scale: int = DEFAULT_SCALE
    enforce_supply_conservation: bool = True
    # Claim events kept in memory; listeners see every event
    max_events: int = 10_000

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError(f"Ledger scale must be positive, got {self.scale}")
        if self.max_events < 0:
            raise ValueError(f"Ledger max_events must not be negative, got {self.max_events}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class OutputConfig:
    """Configuration for written manifests."""
    indent: Optional[int] = 2


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the distribution engine.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - DISTRIBUTOR_SCALE: fixed-point scale of entitlement shares
        - DISTRIBUTOR_ENFORCE_SUPPLY: reject claims exceeding the aggregate (true/false)
        - DISTRIBUTOR_LOG_LEVEL: log level
        - DISTRIBUTOR_LOG_FILE: optional log file
        - DISTRIBUTOR_OUTPUT_INDENT: JSON indent of written manifests (0 for compact)
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}SCALE"):
            overrides.setdefault("ledger", {})["scale"] = int(os.getenv(f"{ENV_PREFIX}SCALE", ""))
        if os.getenv(f"{ENV_PREFIX}ENFORCE_SUPPLY"):
            overrides.setdefault("ledger", {})["enforce_supply_conservation"] = _env_bool(
                f"{ENV_PREFIX}ENFORCE_SUPPLY", "true"
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        if os.getenv(f"{ENV_PREFIX}OUTPUT_INDENT"):
            indent = int(os.getenv(f"{ENV_PREFIX}OUTPUT_INDENT", "2"))
            overrides.setdefault("output", {})["indent"] = indent or None

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        ledger_data = dict(data.get("ledger") or {})
        logging_data = data.get("logging") or {}
        output_data = data.get("output") or {}

        if "scale" in ledger_data:
            ledger_data["scale"] = int(ledger_data["scale"])

        return cls(
            ledger=LedgerConfig(**ledger_data),
            logging=LoggingConfig(**logging_data),
            output=OutputConfig(**output_data),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            # replace() re-runs section validation
            setattr(new_config, section, replace(getattr(new_config, section), **values))
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "ledger": {
                "scale": self.ledger.scale,
                "enforce_supply_conservation": self.ledger.enforce_supply_conservation,
                "max_events": self.ledger.max_events,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "output": {
                "indent": self.output.indent,
            },
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """
    Get the process-wide configuration, loaded from the environment on first use.

    Used by components constructed without an explicit config (ClaimLedger).
    """
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_SCALE",
    "LedgerConfig",
    "LoggingConfig",
    "OutputConfig",
    "RuntimeConfig",
    "get_default_config",
]
