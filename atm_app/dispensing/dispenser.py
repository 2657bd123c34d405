"""
Cash dispenser.

Owns the note inventory and the active dispensing strategy. A withdrawal is
served in three steps: total-value sufficiency, strategy planning, and an
atomic debit that re-checks the plan against stock.
"""

from collections.abc import Mapping
from typing import Optional, Union

import structlog

from ..errors import DispensingError, InsufficientFunds, InvalidInput, NoFeasiblePlan
from .inventory import NoteInventory
from .strategies import DispensingPlan, DispensingStrategy, minimal_notes, plan_value

logger = structlog.get_logger(__name__)


class CashDispenser:
    """Dispenses cash from a note inventory using a swappable strategy."""

    def __init__(
        self,
        inventory: Union[NoteInventory, Mapping[int, int], None] = None,
        strategy: DispensingStrategy = minimal_notes
    ):
        if isinstance(inventory, NoteInventory):
            self._inventory = inventory
        else:
            self._inventory = NoteInventory(inventory)
        self._strategy = strategy
        self.logger = logger

        self.logger.info(
            "Cash dispenser initialized",
            inventory=self._inventory.snapshot(),
            strategy=getattr(strategy, "__name__", repr(strategy))
        )

    @property
    def strategy(self) -> DispensingStrategy:
        return self._strategy

    def set_strategy(self, strategy: DispensingStrategy) -> None:
        """Swap the dispensing strategy used for subsequent withdrawals."""
        self._strategy = strategy
        self.logger.info(
            "Cash dispensing strategy updated",
            strategy=getattr(strategy, "__name__", repr(strategy))
        )

    @property
    def note_inventory(self) -> dict[int, int]:
        """Copy of the current note stock."""
        return self._inventory.snapshot()

    def total_cash_available(self) -> int:
        return self._inventory.total_value

    def has_sufficient_cash(self, amount: int) -> bool:
        """Whether the total value in stock covers the amount."""
        return self._inventory.total_value >= amount

    def plan_for(self, amount: int) -> DispensingPlan:
        """
        Compute the plan for an amount without touching the inventory.

        Raises:
            InvalidInput: amount is not a positive integer
            InsufficientFunds: total stock value is below the amount
            NoFeasiblePlan: the strategy cannot form the amount exactly
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidInput("Amount must be a positive integer", field="amount", value=amount)

        available = self._inventory.total_value
        if available < amount:
            raise InsufficientFunds(
                f"Insufficient cash available for {amount}",
                requested=amount,
                available=available
            )

        plan = self._strategy(amount, self._inventory.snapshot())
        if not plan:
            raise NoFeasiblePlan(
                f"Cannot dispense {amount} with available notes",
                requested=amount
            )

        if plan_value(plan) != amount:
            raise NoFeasiblePlan(
                f"Strategy plan does not sum to {amount}",
                requested=amount,
                remaining=amount - plan_value(plan),
                context={"plan": plan}
            )

        return plan

    def dispense_cash(self, amount: int) -> DispensingPlan:
        """
        Dispense an amount and debit the inventory.

        Returns:
            The plan that was dispensed
        """
        plan = self.plan_for(amount)

        try:
            self._inventory.debit(plan)
        except DispensingError as e:
            self.logger.error(
                "Strategy plan disagrees with note stock",
                amount=amount,
                plan=plan,
                context=e.context
            )
            raise NoFeasiblePlan(
                f"Cannot dispense {amount}: plan exceeds note stock",
                requested=amount,
                context={"plan": plan}
            ) from e

        self.logger.info(
            "Cash dispensed",
            amount=amount,
            plan=dict(sorted(plan.items(), reverse=True)),
            remaining_inventory=self._inventory.snapshot()
        )
        return plan

    def add_notes(self, denomination: int, count: int) -> None:
        """Credit notes to the inventory (refill)."""
        self._inventory.credit(denomination, count)
        self.logger.info("Notes added to inventory", denomination=denomination, count=count)

    def __repr__(self) -> str:
        name: Optional[str] = getattr(self._strategy, "__name__", None)
        return f"CashDispenser({self._inventory!r}, strategy={name})"
