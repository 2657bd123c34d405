"""Pytest configuration and shared fixtures."""

import pytest
from datetime import date, datetime, timedelta, timezone

from atm_app.bank.proxy import AccountServiceProxy
from atm_app.bank.remote import SimulatedRemoteAccountService
from atm_app.config.defaults import RemoteParams
from atm_app.dispensing.dispenser import CashDispenser
from atm_app.hardware.deposit_slot import DepositSlot
from atm_app.models.banking import Account, Bank, Card
from atm_app.session.machine import SessionStateMachine

CARD_NUMBER = "4111222233334444"
ACCOUNT_NUMBER = "987654321012"
CARD_PIN = "1234"
OPENING_BALANCE = 5000.0


class ManualClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> ManualClock:
    """Clock frozen at a fixed business-hours instant."""
    return ManualClock(datetime(2026, 1, 15, 9, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def bank() -> Bank:
    return Bank(bank_id="HDFC001", name="HDFC Bank")


@pytest.fixture
def card(bank) -> Card:
    """Valid card expiring well after the test clock."""
    return Card(CARD_NUMBER, date(2028, 12, 31), bank)


@pytest.fixture
def expired_card(bank) -> Card:
    return Card("5500111122223333", date(2025, 12, 31), bank)


@pytest.fixture
def account(bank) -> Account:
    return Account(ACCOUNT_NUMBER, bank)


@pytest.fixture
def default_inventory() -> dict:
    """Note stock the machine ships with."""
    return {2000: 10, 500: 20, 100: 50, 50: 30, 20: 40}


@pytest.fixture
def remote_params() -> RemoteParams:
    """Deterministic bank: no latency, no random declines."""
    return RemoteParams(failure_rate=0.0, min_latency_ms=0, max_latency_ms=0, seed=7)


@pytest.fixture
def remote(remote_params, card) -> SimulatedRemoteAccountService:
    service = SimulatedRemoteAccountService(remote_params)
    service.register_card(card, CARD_PIN, account_number=ACCOUNT_NUMBER, balance=OPENING_BALANCE)
    return service


@pytest.fixture
def proxy(remote, clock) -> AccountServiceProxy:
    return AccountServiceProxy(remote, clock=clock)


@pytest.fixture
def dispenser(default_inventory) -> CashDispenser:
    return CashDispenser(dict(default_inventory))


@pytest.fixture
def machine(proxy, dispenser, clock) -> SessionStateMachine:
    """Machine in IDLE wired to the deterministic bank."""
    return SessionStateMachine(
        account_service=proxy,
        dispenser=dispenser,
        deposit_slot=DepositSlot(timeout_seconds=30.0, clock=clock),
        clock=clock,
    )


@pytest.fixture
def authenticated_machine(machine, card) -> SessionStateMachine:
    """Machine in OPERATION_SELECTION with the test card authenticated."""
    machine.insert_card(card)
    machine.authenticate(CARD_PIN)
    return machine
