"""
Note inventory for the cash dispenser.

Maps denomination to note count. Every count stays non-negative: a debit is
applied only after every line item has been checked against stock, and a
plan naming a denomination the inventory does not hold is refused.
"""

from collections.abc import Mapping
from typing import Optional

from ..errors import DispensingError, InvalidInput


class NoteInventory:
    """Denomination to count mapping with query, debit and credit."""

    def __init__(self, notes: Optional[Mapping[int, int]] = None):
        self._notes: dict[int, int] = {}
        for denomination, count in (notes or {}).items():
            self.credit(denomination, count)

    def count(self, denomination: int) -> int:
        return self._notes.get(denomination, 0)

    @property
    def denominations(self) -> list[int]:
        """Denominations held, ascending."""
        return sorted(self._notes)

    @property
    def total_value(self) -> int:
        return sum(denomination * count for denomination, count in self._notes.items())

    def snapshot(self) -> dict[int, int]:
        """Copy of the current stock for strategies and reporting."""
        return dict(self._notes)

    def _covers_line(self, denomination: int, count: int) -> bool:
        return (
            denomination in self._notes
            and isinstance(count, int)
            and 0 <= count <= self._notes[denomination]
        )

    def can_cover(self, plan: Mapping[int, int]) -> bool:
        """Whether every line item of a plan is a held denomination in stock."""
        return all(self._covers_line(d, count) for d, count in plan.items())

    def credit(self, denomination: int, count: int) -> None:
        if not isinstance(denomination, int) or denomination <= 0:
            raise InvalidInput(
                "Denomination must be a positive integer",
                field="denomination",
                value=denomination
            )
        if not isinstance(count, int) or count < 0:
            raise InvalidInput(
                "Note count must be a non-negative integer",
                field="count",
                value=count
            )
        self._notes[denomination] = self.count(denomination) + count

    def debit(self, plan: Mapping[int, int]) -> None:
        """Remove all notes in the plan, or none of them."""
        if not self.can_cover(plan):
            short = {
                denomination: count
                for denomination, count in plan.items()
                if not self._covers_line(denomination, count)
            }
            raise DispensingError(
                "Plan exceeds note stock",
                context={"short_lines": short, "stock": self.snapshot()}
            )

        updated = dict(self._notes)
        for denomination, count in plan.items():
            updated[denomination] -= count
        self._notes = updated

    def __repr__(self) -> str:
        return f"NoteInventory({dict(sorted(self._notes.items(), reverse=True))})"
