"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import InvalidInput
from .defaults import (
    AtmParams,
    DefaultConfig,
    DepositParams,
    DispenserParams,
    ProxyParams,
    RemoteParams,
    SessionParams,
    get_default_config,
)
from .validation import ConfigValidator

_SECTIONS = {
    "atm": AtmParams,
    "dispenser": DispenserParams,
    "session": SessionParams,
    "deposit": DepositParams,
    "proxy": ProxyParams,
    "remote": RemoteParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_site_config(self) -> dict[str, Any]:
        """Load machine-specific overrides from atm.yaml."""
        site_file = self.config_dir / "atm.yaml"

        if not site_file.exists():
            return {}

        with open(site_file) as f:
            site_config = yaml.safe_load(f)

        return site_config or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Site overrides from atm.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_site_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge, validate and build the typed configuration."""
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise InvalidInput(
                "Configuration validation failed: " + "; ".join(error_msgs),
                field="config",
                value=error_msgs
            )

        return self._build(merged)

    def _build(self, config: dict[str, Any]) -> DefaultConfig:
        sections = {}
        for name, params_cls in _SECTIONS.items():
            known = params_cls.__dataclass_fields__
            values = {k: v for k, v in config.get(name, {}).items() if k in known}
            if "initial_inventory" in values:
                values["initial_inventory"] = {
                    int(denomination): int(count)
                    for denomination, count in values["initial_inventory"].items()
                }
            sections[name] = params_cls(**values)
        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, dict):
                    result[field_name] = dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries. Note inventories are replaced whole."""
        result = base.copy()

        for key, value in override.items():
            if (key in result and isinstance(result[key], dict) and isinstance(value, dict)
                    and key != "initial_inventory"):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
