"""Tests for the card reader, deposit slot, screen and printer ports."""

import pytest
from datetime import datetime, timezone

from atm_app.errors import DeviceError, InvalidInput
from atm_app.hardware.card_reader import CardReader
from atm_app.hardware.deposit_slot import DepositSlot
from atm_app.hardware.display import MENU_OPTIONS, Printer, Screen
from atm_app.models.banking import Transaction, TransactionStatus, TransactionType


class TestCardReader:
    """Test card insertion and ejection."""

    def test_insert_and_eject(self, card):
        """Test the normal card cycle."""
        reader = CardReader()
        reader.insert_card(card)
        assert reader.is_card_inserted() is True
        assert reader.current_card is card

        assert reader.eject_card() is card
        assert reader.is_card_inserted() is False
        assert reader.current_card is None

    def test_second_card_rejected(self, card):
        """Test that the reader holds one card at a time."""
        reader = CardReader()
        reader.insert_card(card)
        with pytest.raises(DeviceError):
            reader.insert_card(card)

    def test_eject_empty_reader(self):
        """Test that ejecting with no card is a device error."""
        with pytest.raises(DeviceError) as exc_info:
            CardReader().eject_card()
        assert exc_info.value.device == "card_reader"


class TestDepositSlot:
    """Test the deposit slot and its collection window."""

    def test_open_accept_close(self, clock):
        """Test a normal deposit cycle."""
        slot = DepositSlot(clock=clock)
        slot.open_slot()
        slot.accept_cash(250)
        assert slot.get_deposit_amount() == 250.0

        slot.close_slot()
        slot.reset_deposit()
        assert slot.is_open() is False
        assert slot.get_deposit_amount() == 0.0

    def test_accept_requires_open_slot(self, clock):
        """Test that cash cannot be accepted through a closed slot."""
        with pytest.raises(DeviceError):
            DepositSlot(clock=clock).accept_cash(100)

    @pytest.mark.parametrize("amount", [0, -20, True])
    def test_accept_rejects_invalid_amount(self, clock, amount):
        """Test that the sensor ignores non-positive readings."""
        slot = DepositSlot(clock=clock)
        slot.open_slot()
        with pytest.raises(InvalidInput):
            slot.accept_cash(amount)

    def test_out_of_sequence(self, clock):
        """Test that double open and double close are device errors."""
        slot = DepositSlot(clock=clock)
        with pytest.raises(DeviceError):
            slot.close_slot()
        slot.open_slot()
        with pytest.raises(DeviceError):
            slot.open_slot()

    def test_timeout(self, clock):
        """Test that the window expires strictly after the timeout."""
        slot = DepositSlot(timeout_seconds=30, clock=clock)
        slot.open_slot()

        clock.advance(30)
        assert slot.is_deposit_timed_out() is False
        clock.advance(0.5)
        assert slot.is_deposit_timed_out() is True

    def test_closed_slot_never_times_out(self, clock):
        """Test that the window only runs while the slot is open."""
        slot = DepositSlot(timeout_seconds=30, clock=clock)
        clock.advance(120)
        assert slot.is_deposit_timed_out() is False


class TestScreenAndPrinter:
    """Test the output ports."""

    def test_screen_records_messages(self):
        """Test that every message is kept in order."""
        screen = Screen()
        screen.display_welcome()
        screen.display_balance(1234.5)
        assert screen.messages == [
            "Welcome. Please insert your card",
            "Your current balance is: $1234.50",
        ]
        assert screen.last_message == "Your current balance is: $1234.50"

    def test_options_list_every_operation(self):
        """Test that the menu shows all five operations."""
        screen = Screen()
        screen.display_options()
        for option in MENU_OPTIONS:
            assert option in screen.last_message

    def test_receipt_masks_account(self, account):
        """Test that a receipt shows only the last four account digits."""
        tx = Transaction.create(account, TransactionType.WITHDRAWAL, 500,
                                datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc))
        receipt = Printer().print_receipt(tx.settle(TransactionStatus.SUCCESS))

        assert "****1012" in receipt
        assert account.account_number not in receipt
        assert "Amount: $500.00" in receipt
        assert "Status: success" in receipt
        assert "Date: 2026-01-15 09:30:00" in receipt

    def test_empty_mini_statement(self, account):
        """Test the slip for an account with no history."""
        slip = Printer().print_mini_statement([], account)
        assert "No recent transactions found" in slip

    def test_no_paper(self, account):
        """Test that printing without paper is a device error."""
        printer = Printer(paper_available=False)
        with pytest.raises(DeviceError):
            printer.print_mini_statement([], account)
        assert printer.printed == []
