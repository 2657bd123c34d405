#!/usr/bin/env python3
"""Scripted walkthrough of an ATM session.

Runs the same scenarios a teller would show at a branch: a withdrawal, a
balance inquiry, both dispensing strategies, a PIN change, a mini statement
and a deposit. Pauses between screens are a presentation concern and live
here, not in the session machine.

Usage:
    python scripts/atm_demo.py            # paced, human-readable
    ATM_DEMO_PAUSE=0 python scripts/atm_demo.py
"""

import os
import sys
import time
from datetime import date, timedelta
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from atm_app.dispensing.strategies import balanced_small_notes, minimal_notes
from atm_app.engine import build_session_machine
from atm_app.logging.config import configure_logging
from atm_app.models.banking import Bank, Card, TransactionType
from atm_app.session.machine import SessionStateMachine

PAUSE_SECONDS = float(os.environ.get("ATM_DEMO_PAUSE", "2"))


def pause() -> None:
    if PAUSE_SECONDS > 0:
        time.sleep(PAUSE_SECONDS)


def demo_card() -> Card:
    bank = Bank(bank_id="HDFC001", name="HDFC Bank")
    return Card("1234567890123456", date.today() + timedelta(days=365), bank)


def show(label: str, result) -> None:
    marker = "✅" if result.success else "❌"
    print(f"{marker} {label}: {result.message} [{result.state.value}]")


def start_session(atm: SessionStateMachine) -> None:
    show("Insert card", atm.insert_card(demo_card()))
    show("Authenticate", atm.authenticate("1234"))


def withdrawal(atm: SessionStateMachine) -> None:
    start_session(atm)
    show("Select withdrawal", atm.select_operation(TransactionType.WITHDRAWAL))
    result = atm.perform_transaction({"amount": 500})
    show("Withdraw $500", result)
    if result.success:
        print(f"   Notes: {result.payload['plan']}")
    show("Cancel", atm.cancel())


def balance_inquiry(atm: SessionStateMachine) -> None:
    start_session(atm)
    show("Balance inquiry", atm.select_operation(TransactionType.BALANCE_INQUIRY))
    pause()
    show("Eject", atm.eject())


def strategies(atm: SessionStateMachine) -> None:
    dispenser = atm.dispenser
    print(f"   Inventory: {dispenser.note_inventory}")

    dispenser.set_strategy(minimal_notes)
    print(f"   minimal_notes $1200 -> {dispenser.dispense_cash(1200)}")

    dispenser.add_notes(20, 20)
    dispenser.add_notes(50, 15)
    dispenser.add_notes(100, 10)

    dispenser.set_strategy(balanced_small_notes)
    print(f"   balanced_small_notes $1200 -> {dispenser.dispense_cash(1200)}")

    dispenser.set_strategy(minimal_notes)


def pin_change(atm: SessionStateMachine) -> None:
    start_session(atm)
    show("Select PIN change", atm.select_operation(TransactionType.PIN_CHANGE))
    show("Change PIN", atm.perform_transaction({"old_pin": "1234", "new_pin": "5678"}))
    show("Cancel", atm.cancel())


def mini_statement(atm: SessionStateMachine) -> None:
    card = demo_card()
    show("Insert card", atm.insert_card(card))
    show("Authenticate", atm.authenticate("5678"))
    result = atm.select_operation(TransactionType.MINI_STATEMENT)
    show("Mini statement", result)
    if result.success:
        print(result.payload["slip"])
    pause()
    show("Cancel", atm.cancel())


def deposit(atm: SessionStateMachine) -> None:
    card = demo_card()
    show("Insert card", atm.insert_card(card))
    show("Authenticate", atm.authenticate("5678"))
    show("Select deposit", atm.select_operation(TransactionType.DEPOSIT))
    show("Deposit $250", atm.perform_transaction({"amount": 250}))
    show("Eject", atm.eject())


SCENARIOS = [
    ("Successful Cash Withdrawal", withdrawal),
    ("Balance Inquiry", balance_inquiry),
    ("Dispensing Strategies", strategies),
    ("PIN Change", pin_change),
    ("Mini Statement", mini_statement),
    ("Cash Deposit", deposit),
]


def main() -> int:
    configure_logging(level=os.environ.get("ATM_LOG_LEVEL", "WARNING"))

    print("🏧 ATM System Demo")
    atm = build_session_machine(overrides={"remote": {"min_latency_ms": 0, "max_latency_ms": 0}})

    for title, scenario in SCENARIOS:
        print("\n" + "=" * 60)
        print(f"📋 {title}")
        print("=" * 60)
        scenario(atm)

    print("\n🎉 ATM System Demo complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
