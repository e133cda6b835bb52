"""
Module 07 - CLI Configuration

Resolves the RuntimeConfig used by CLI commands.

Resolution order (later wins):
1. Defaults
2. YAML file (--config, or the first default location that exists)
3. DISTRIBUTOR_* environment variables
"""

from __future__ import annotations

from pathlib import Path

from distributor_core.config import RuntimeConfig


DEFAULT_CONFIG_PATHS = (
    Path("distributor.yaml"),
    Path(".distributor.yaml"),
    Path.home() / ".config" / "distributor" / "config.yaml",
)


def find_config_file() -> Path | None:
    """Return the first default config location that exists."""
    for path in DEFAULT_CONFIG_PATHS:
        if path.exists():
            return path
    return None


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Args:
        config_path: Explicit YAML file; must exist when given

    Returns:
        Merged configuration
    """
    path = config_path or find_config_file()
    config = RuntimeConfig.from_yaml(path) if path is not None else RuntimeConfig()
    return config.with_env_overrides()


def get_default_config_template() -> str:
    """YAML template written by `distributor config --init`."""
    return """\
# Distributor configuration
# Environment variables (DISTRIBUTOR_* prefix) override these values.

ledger:
  # Fixed-point scale of entitlement shares (1e18 == 100%)
  scale: 1000000000000000000
  # Reject claims larger than the unclaimed aggregate
  enforce_supply_conservation: true
  # Claim events kept in memory by a ledger
  max_events: 10000

logging:
  level: INFO
  file: null

output:
  # JSON indent of written manifests (null for compact)
  indent: 2
"""


__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "find_config_file",
    "load_config",
    "get_default_config_template",
]
