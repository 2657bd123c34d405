"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

STRATEGY_NAMES = ("minimal_notes", "balanced_small_notes")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_dispenser_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate cash dispenser parameters."""
        errors = []

        if "strategy" in params and params["strategy"] not in STRATEGY_NAMES:
            errors.append(ValidationError(
                field="strategy",
                message=f"Must be one of {', '.join(STRATEGY_NAMES)}",
                value=params["strategy"]
            ))

        if "initial_inventory" in params:
            inventory = params["initial_inventory"]
            if not isinstance(inventory, dict):
                errors.append(ValidationError(
                    field="initial_inventory",
                    message="Must be a mapping of denomination to count",
                    value=inventory
                ))
            else:
                for denomination, count in inventory.items():
                    try:
                        denomination_ok = int(denomination) > 0
                    except (TypeError, ValueError):
                        denomination_ok = False
                    if not denomination_ok:
                        errors.append(ValidationError(
                            field="initial_inventory",
                            message="Denominations must be positive integers",
                            value=denomination
                        ))
                    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                        errors.append(ValidationError(
                            field="initial_inventory",
                            message=f"Count for {denomination} must be a non-negative integer",
                            value=count
                        ))

        for name in ("small_note_max_denomination", "small_note_limit",
                     "medium_note_max_denomination", "medium_note_limit"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate session parameters."""
        errors = []

        for name in ("max_pin_attempts", "pin_length"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_timing_params(params: dict[str, Any], fields: tuple) -> list[ValidationError]:
        """Validate positive durations such as timeouts and TTLs."""
        errors = []

        for name in fields:
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number of seconds",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_remote_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate simulated remote service parameters."""
        errors = []

        if "failure_rate" in params:
            value = params["failure_rate"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="failure_rate",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        min_latency = params.get("min_latency_ms", 0)
        max_latency = params.get("max_latency_ms", 0)
        if not _is_number(min_latency) or not _is_number(max_latency) or min_latency < 0 \
                or max_latency < min_latency:
            errors.append(ValidationError(
                field="max_latency_ms",
                message="Latency bounds must be non-negative with min <= max",
                value=(min_latency, max_latency)
            ))

        if "default_pin" in params:
            value = params["default_pin"]
            if not isinstance(value, str) or not value.isdigit():
                errors.append(ValidationError(
                    field="default_pin",
                    message="Must be a string of digits",
                    value=value
                ))

        if "statement_size" in params and not _is_positive_int(params["statement_size"]):
            errors.append(ValidationError(
                field="statement_size",
                message="Must be a positive integer",
                value=params["statement_size"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "dispenser" in config:
            errors.extend(ConfigValidator.validate_dispenser_params(config["dispenser"]))

        if "session" in config:
            errors.extend(ConfigValidator.validate_session_params(config["session"]))

        if "deposit" in config:
            errors.extend(ConfigValidator.validate_timing_params(
                config["deposit"], ("timeout_seconds",)))

        if "proxy" in config:
            errors.extend(ConfigValidator.validate_timing_params(
                config["proxy"], ("balance_cache_ttl_seconds",)))

        if "remote" in config:
            errors.extend(ConfigValidator.validate_remote_params(config["remote"]))

        return errors
