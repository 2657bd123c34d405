"""Card reader port: holds at most one card at a time."""

from typing import Optional

import structlog

from ..errors import DeviceError
from ..models.banking import Card

logger = structlog.get_logger(__name__)


class CardReader:
    """Stateful holder for the inserted card."""

    def __init__(self):
        self._card: Optional[Card] = None

    def is_card_inserted(self) -> bool:
        return self._card is not None

    @property
    def current_card(self) -> Optional[Card]:
        return self._card

    def insert_card(self, card: Card) -> None:
        if self._card is not None:
            raise DeviceError("Card already inserted", device="card_reader")
        self._card = card
        logger.info("Card inserted", card=card.masked_number)

    def eject_card(self) -> Optional[Card]:
        if self._card is None:
            raise DeviceError("No card to eject", device="card_reader")
        card, self._card = self._card, None
        logger.info("Card ejected", card=card.masked_number)
        return card
