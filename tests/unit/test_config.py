"""
Runtime Configuration Unit Tests
Tests for distributor_core/config/runtime.py

Tests:
- defaults and partial dictionaries
- YAML loading
- DISTRIBUTOR_* environment overrides
"""
import pytest

from distributor_core.config import (
    DEFAULT_SCALE,
    LedgerConfig,
    RuntimeConfig,
    get_default_config,
)


class TestDefaults:
    """Default configuration values."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.ledger.scale == DEFAULT_SCALE == 10**18
        assert config.ledger.enforce_supply_conservation is True
        assert config.logging.level == "INFO"
        assert config.logging.file is None
        assert config.output.indent == 2
        assert config.ledger.max_events == 10_000

    def test_negative_max_events_rejected(self):
        with pytest.raises(ValueError, match="max_events"):
            LedgerConfig(max_events=-1)

    @pytest.mark.parametrize("scale", [0, -1])
    def test_non_positive_scale_rejected(self, scale):
        with pytest.raises(ValueError, match="scale"):
            LedgerConfig(scale=scale)


class TestFromDict:
    """RuntimeConfig.from_dict() and to_dict()."""

    def test_partial(self):
        config = RuntimeConfig.from_dict({"ledger": {"enforce_supply_conservation": False}})

        assert config.ledger.enforce_supply_conservation is False
        assert config.ledger.scale == DEFAULT_SCALE
        assert config.output.indent == 2

    def test_scale_as_string(self):
        assert RuntimeConfig.from_dict({"ledger": {"scale": "1000"}}).ledger.scale == 1000

    def test_round_trip(self):
        config = RuntimeConfig.from_dict({
            "ledger": {"scale": 10_000, "enforce_supply_conservation": False, "max_events": 5},
            "logging": {"level": "DEBUG", "file": "run.log"},
            "output": {"indent": None},
        })
        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"ledger": {"precision": 3}})


class TestFromYaml:
    """RuntimeConfig.from_yaml()."""

    def test_load(self, tmp_path):
        path = tmp_path / "distributor.yaml"
        path.write_text(
            "ledger:\n"
            "  scale: 1000000\n"
            "  enforce_supply_conservation: false\n"
            "output:\n"
            "  indent: null\n"
        )
        config = RuntimeConfig.from_yaml(path)

        assert config.ledger.scale == 1_000_000
        assert config.ledger.enforce_supply_conservation is False
        assert config.output.indent is None
        assert config.logging.level == "INFO"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "absent.yaml")


class TestEnvOverrides:
    """DISTRIBUTOR_* environment variables."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DISTRIBUTOR_SCALE", "1000")
        monkeypatch.setenv("DISTRIBUTOR_ENFORCE_SUPPLY", "false")
        monkeypatch.setenv("DISTRIBUTOR_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("DISTRIBUTOR_LOG_FILE", "distributor.log")
        monkeypatch.setenv("DISTRIBUTOR_OUTPUT_INDENT", "0")

        config = RuntimeConfig.from_env()

        assert config.ledger.scale == 1000
        assert config.ledger.enforce_supply_conservation is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file == "distributor.log"
        assert config.output.indent is None

    def test_no_env_returns_same_config(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_env_overlays_file_values(self, monkeypatch):
        config = RuntimeConfig.from_dict({"ledger": {"scale": 5}, "logging": {"level": "ERROR"}})
        monkeypatch.setenv("DISTRIBUTOR_LOG_LEVEL", "DEBUG")

        merged = config.with_env_overrides()

        assert merged.logging.level == "DEBUG"
        assert merged.ledger.scale == 5
        assert config.logging.level == "ERROR"

    def test_env_scale_validated(self, monkeypatch):
        monkeypatch.setenv("DISTRIBUTOR_SCALE", "-5")
        with pytest.raises(ValueError, match="scale"):
            RuntimeConfig().with_env_overrides()

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("1", True),
        ("YES", True),
        ("off", False),
        ("no", False),
    ])
    def test_boolean_parsing(self, monkeypatch, value, expected):
        monkeypatch.setenv("DISTRIBUTOR_ENFORCE_SUPPLY", value)
        assert RuntimeConfig.from_env().ledger.enforce_supply_conservation is expected


class TestDefaultConfig:
    """Module-level default configuration."""

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("DISTRIBUTOR_SCALE", "500")
        assert get_default_config().ledger.scale == 500

    def test_cached_after_first_use(self, monkeypatch):
        first = get_default_config()
        monkeypatch.setenv("DISTRIBUTOR_SCALE", "500")

        assert get_default_config() is first
        assert first.ledger.scale == DEFAULT_SCALE
