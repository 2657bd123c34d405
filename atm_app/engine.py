"""
ATM assembly.

Wires configuration, devices, the cash dispenser, the account service proxy
and the session state machine into one ready-to-use machine.
"""

from pathlib import Path
from typing import Any, Optional

import structlog

from .bank.proxy import AccountServiceProxy
from .bank.remote import SimulatedRemoteAccountService
from .bank.service import AccountService
from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .dispensing.dispenser import CashDispenser
from .dispensing.strategies import get_strategy
from .hardware.card_reader import CardReader
from .hardware.deposit_slot import DepositSlot
from .hardware.display import Printer, Screen
from .session.machine import SessionStateMachine
from .utils.time import Clock, get_clock

logger = structlog.get_logger(__name__)


def build_session_machine(
    config: Optional[DefaultConfig] = None,
    config_dir: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
    remote: Optional[AccountService] = None,
    clock: Optional[Clock] = None
) -> SessionStateMachine:
    """
    Build a session state machine from configuration.

    Args:
        config: Fully built configuration; loaded from config_dir when omitted
        config_dir: Directory holding atm.yaml
        overrides: Highest-precedence configuration overrides
        remote: Account service to put behind the proxy; simulated bank by default
        clock: Clock shared by the cache, the deposit slot and the machine

    Returns:
        A machine in the IDLE state
    """
    if config is None:
        config = ConfigLoader.create(config_dir).load(overrides)

    clock = get_clock(clock)

    dispenser = CashDispenser(
        inventory=config.dispenser.initial_inventory,
        strategy=get_strategy(config.dispenser.strategy, config.dispenser),
    )

    if remote is None:
        remote = SimulatedRemoteAccountService(config.remote)

    proxy = AccountServiceProxy(
        remote,
        params=config.proxy,
        pin_length=config.session.pin_length,
        clock=clock,
    )

    machine = SessionStateMachine(
        account_service=proxy,
        dispenser=dispenser,
        card_reader=CardReader(),
        deposit_slot=DepositSlot(timeout_seconds=config.deposit.timeout_seconds, clock=clock),
        screen=Screen(),
        printer=Printer(),
        params=config.session,
        clock=clock,
    )

    logger.info(
        "ATM initialized",
        atm_id=config.atm.atm_id,
        location=config.atm.location,
        strategy=config.dispenser.strategy,
        cash_available=dispenser.total_cash_available()
    )
    return machine
