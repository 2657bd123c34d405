"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from atm_app.config.defaults import get_default_config
from atm_app.config.loader import ConfigLoader
from atm_app.config.validation import ConfigValidator
from atm_app.errors import InvalidInput


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config is not None
        assert config.dispenser.strategy == "minimal_notes"
        assert config.dispenser.initial_inventory == {2000: 10, 500: 20, 100: 50, 50: 30, 20: 40}
        assert config.session.max_pin_attempts == 3
        assert config.proxy.balance_cache_ttl_seconds == 60.0
        assert config.deposit.timeout_seconds == 30.0

    def test_inventory_not_shared(self) -> None:
        """Test that each default config gets its own inventory mapping."""
        first = get_default_config()
        second = get_default_config()
        assert first.dispenser.initial_inventory is not second.dispenser.initial_inventory


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert loader is not None
        assert isinstance(loader.config_dir, Path)

    def test_merge_config_defaults_only(self, tmp_path) -> None:
        """Test config merging with defaults only."""
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config()

        assert config["session"]["max_pin_attempts"] == 3
        assert config["remote"]["failure_rate"] == 0.1

    def test_site_config_overrides_defaults(self, tmp_path) -> None:
        """Test that atm.yaml values win over built-in defaults."""
        (tmp_path / "atm.yaml").write_text(
            "atm:\n"
            "  atm_id: ATM042\n"
            "dispenser:\n"
            "  strategy: balanced_small_notes\n"
            "  initial_inventory:\n"
            "    100: 5\n"
            "    20: 10\n"
        )
        config = ConfigLoader.create(tmp_path).load()

        assert config.atm.atm_id == "ATM042"
        assert config.atm.location == "Main Street Branch"
        assert config.dispenser.strategy == "balanced_small_notes"
        # Inventories replace the default stock rather than merging into it
        assert config.dispenser.initial_inventory == {100: 5, 20: 10}

    def test_merge_config_with_overrides(self, tmp_path) -> None:
        """Test config merging with explicit overrides."""
        (tmp_path / "atm.yaml").write_text("session:\n  max_pin_attempts: 5\n")
        loader = ConfigLoader.create(tmp_path)
        overrides = {
            "session": {
                "max_pin_attempts": 2,
            }
        }

        config = loader.merge_config(overrides)

        assert config["session"]["max_pin_attempts"] == 2
        # Other defaults should remain
        assert config["session"]["pin_length"] == 4

    def test_empty_site_file(self, tmp_path) -> None:
        """Test that an empty atm.yaml is treated as no overrides."""
        (tmp_path / "atm.yaml").write_text("")
        config = ConfigLoader.create(tmp_path).load()
        assert config == get_default_config()

    def test_inventory_keys_coerced(self, tmp_path) -> None:
        """Test that string denominations from YAML become integers."""
        (tmp_path / "atm.yaml").write_text(
            "dispenser:\n  initial_inventory:\n    '500': 4\n"
        )
        config = ConfigLoader.create(tmp_path).load()
        assert config.dispenser.initial_inventory == {500: 4}

    def test_unknown_keys_ignored(self, tmp_path) -> None:
        """Test that keys with no matching parameter are dropped."""
        config = ConfigLoader.create(tmp_path).load({"proxy": {"colour": "blue"}})
        assert config.proxy.balance_cache_ttl_seconds == 60.0

    def test_invalid_config_rejected(self, tmp_path) -> None:
        """Test that a merged config failing validation is refused."""
        with pytest.raises(InvalidInput) as exc_info:
            ConfigLoader.create(tmp_path).load({"remote": {"failure_rate": 1.5}})
        assert "failure_rate" in exc_info.value.message

    def test_shipped_site_config_is_valid(self) -> None:
        """Test that the repository's atm.yaml loads cleanly."""
        config = ConfigLoader.create().load()
        assert config.atm.atm_id == "ATM001"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        """Test that the defaults validate."""
        loader = ConfigLoader.create()
        errors = ConfigValidator.validate_config(loader._dataclass_to_dict(get_default_config()))
        assert errors == []

    def test_unknown_strategy(self) -> None:
        """Test that only known strategies are accepted."""
        errors = ConfigValidator.validate_dispenser_params({"strategy": "fewest_coins"})
        assert [e.field for e in errors] == ["strategy"]

    def test_bad_inventory(self) -> None:
        """Test that negative counts and non-numeric denominations are flagged."""
        errors = ConfigValidator.validate_dispenser_params(
            {"initial_inventory": {100: -1, "fifty": 3}}
        )
        assert len(errors) == 2
        assert all(e.field == "initial_inventory" for e in errors)

    def test_session_params(self) -> None:
        """Test that PIN settings must be positive integers."""
        errors = ConfigValidator.validate_session_params({"max_pin_attempts": 0, "pin_length": "4"})
        assert {e.field for e in errors} == {"max_pin_attempts", "pin_length"}

    def test_timing_params(self) -> None:
        """Test that durations must be positive numbers."""
        errors = ConfigValidator.validate_config({
            "deposit": {"timeout_seconds": 0},
            "proxy": {"balance_cache_ttl_seconds": -1},
        })
        assert {e.field for e in errors} == {"timeout_seconds", "balance_cache_ttl_seconds"}

    def test_remote_params(self) -> None:
        """Test the simulated bank settings."""
        errors = ConfigValidator.validate_remote_params({
            "failure_rate": -0.1,
            "min_latency_ms": 100,
            "max_latency_ms": 50,
            "default_pin": "12ab",
            "statement_size": 0,
        })
        assert {e.field for e in errors} == {
            "failure_rate", "max_latency_ms", "default_pin", "statement_size"
        }
