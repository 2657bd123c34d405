"""Default configuration parameters for the ATM core."""

from dataclasses import dataclass, field
from typing import Optional


def _default_inventory() -> dict[int, int]:
    return {2000: 10, 500: 20, 100: 50, 50: 30, 20: 40}


@dataclass(frozen=True)
class AtmParams:
    """Machine identification."""
    atm_id: str = "ATM001"
    location: str = "Main Street Branch"


@dataclass(frozen=True)
class DispenserParams:
    """Cash dispenser parameters."""
    strategy: str = "minimal_notes"                  # minimal_notes | balanced_small_notes
    initial_inventory: dict[int, int] = field(default_factory=_default_inventory)

    # Balanced strategy caps
    small_note_max_denomination: int = 20            # Denominations treated as small
    small_note_limit: int = 10                       # Max small notes per denomination
    medium_note_max_denomination: int = 50           # Denominations treated as medium
    medium_note_limit: int = 5                       # Max medium notes per denomination


@dataclass(frozen=True)
class SessionParams:
    """Session state machine parameters."""
    max_pin_attempts: int = 3
    pin_length: int = 4


@dataclass(frozen=True)
class DepositParams:
    """Deposit slot parameters."""
    timeout_seconds: float = 30.0                    # Collection window after the slot opens


@dataclass(frozen=True)
class ProxyParams:
    """Account service proxy parameters."""
    balance_cache_ttl_seconds: float = 60.0


@dataclass(frozen=True)
class RemoteParams:
    """Simulated remote account service parameters."""
    bank_name: str = "HDFC Bank"
    default_pin: str = "1234"
    failure_rate: float = 0.1                        # Share of transactions declined at random
    min_latency_ms: int = 500
    max_latency_ms: int = 2000
    statement_size: int = 5
    min_opening_balance: float = 100.0
    max_opening_balance: float = 10000.0
    seed: Optional[int] = None                               # Random seed, None for nondeterministic


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    atm: AtmParams
    dispenser: DispenserParams
    session: SessionParams
    deposit: DepositParams
    proxy: ProxyParams
    remote: RemoteParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        atm=AtmParams(),
        dispenser=DispenserParams(),
        session=SessionParams(),
        deposit=DepositParams(),
        proxy=ProxyParams(),
        remote=RemoteParams(),
    )
