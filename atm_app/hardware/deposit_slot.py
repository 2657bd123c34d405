"""
Deposit slot port.

A one-shot cash sensor with a collection window. The window is checked
cooperatively against the injected clock; nothing is interrupted when it
elapses.
"""

from datetime import datetime
from typing import Optional

import structlog

from ..errors import DeviceError, InvalidInput
from ..utils.time import Clock, elapsed_seconds, get_clock

logger = structlog.get_logger(__name__)


class DepositSlot:
    """Deposit slot with a timed collection window."""

    def __init__(self, timeout_seconds: float = 30.0, clock: Optional[Clock] = None):
        self.timeout_seconds = timeout_seconds
        self.clock = get_clock(clock)
        self._open = False
        self._amount = 0.0
        self._opened_at: Optional[datetime] = None

    def is_open(self) -> bool:
        return self._open

    def open_slot(self) -> None:
        if self._open:
            raise DeviceError("Deposit slot is already open", device="deposit_slot")
        self._open = True
        self._opened_at = self.clock.now()
        logger.info("Deposit slot opened", timeout_seconds=self.timeout_seconds)

    def close_slot(self) -> None:
        if not self._open:
            raise DeviceError("Deposit slot is already closed", device="deposit_slot")
        self._open = False
        self._opened_at = None
        logger.info("Deposit slot closed")

    def accept_cash(self, amount: float) -> None:
        if not self._open:
            raise DeviceError("Deposit slot is not open", device="deposit_slot")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise InvalidInput("Deposit amount must be positive", field="amount", value=amount)
        self._amount = float(amount)
        logger.info("Cash deposit accepted", amount=self._amount)

    def is_deposit_timed_out(self) -> bool:
        if not self._open or self._opened_at is None:
            return False
        return elapsed_seconds(self._opened_at, self.clock.now()) > self.timeout_seconds

    def get_deposit_amount(self) -> float:
        return self._amount

    def reset_deposit(self) -> None:
        self._amount = 0.0
