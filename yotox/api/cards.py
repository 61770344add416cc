"""Card content endpoints."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

import httpx

from ..errors import CardFetchError, CardListError, CardSaveError
from ..logging import get_logger
from .transport import YotoTransport

logger = get_logger(__name__)

Card = Dict[str, Any]


class CardRepository:
    """Reads and writes card documents.

    Cards are handled as plain dicts so fields this package does not know
    about survive a read-modify-write unchanged.
    """

    def __init__(self, transport: YotoTransport):
        self.transport = transport

    def fetch_card(self, card_id: str) -> Card:
        """Fetch the full card document.

        Raises:
            CardFetchError: On a network error or non-success status
        """
        try:
            response = self.transport.get(f"/content/{card_id}")
        except httpx.RequestError as e:
            raise CardFetchError(card_id) from e

        if response.status_code >= 400:
            raise CardFetchError(card_id, status_code=response.status_code)

        try:
            card = response.json().get("card")
        except (ValueError, AttributeError) as e:
            raise CardFetchError(card_id, status_code=response.status_code) from e
        if not isinstance(card, dict):
            raise CardFetchError(card_id, status_code=response.status_code)

        logger.debug("Card fetched", card_id=card_id)
        return card

    def save_card(self, card: Card) -> Card:
        """Create or update a card; returns the persisted document.

        Raises:
            CardSaveError: On a non-success status, with the response body, or
                when a successful response is not JSON
        """
        try:
            response = self.transport.post("/content", json=card)
        except httpx.RequestError as e:
            raise CardSaveError(f"Network error: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Card update rejected",
                card_id=card.get("cardId"),
                status_code=response.status_code,
            )
            raise CardSaveError(response.text, status_code=response.status_code)

        try:
            saved = response.json()
        except ValueError as e:
            raise CardSaveError(
                f"invalid response body: {response.text}", status_code=response.status_code
            ) from e

        logger.info("Card saved", card_id=card.get("cardId"))
        return saved

    def list_card_summaries(self) -> List[Card]:
        """List summary records of the user's own cards.

        Raises:
            CardListError: If the listing request fails
        """
        try:
            response = self.transport.get("/content/mine")
        except httpx.RequestError as e:
            raise CardListError(f"Network error listing cards: {e}") from e

        if response.status_code >= 400:
            raise CardListError(
                f"Failed to fetch cards: HTTP {response.status_code} {response.reason_phrase}"
            )
        try:
            cards = response.json().get("cards") or []
        except (ValueError, AttributeError) as e:
            raise CardListError("Failed to fetch cards: invalid response body") from e
        if not isinstance(cards, list):
            raise CardListError("Failed to fetch cards: invalid response body")
        return cards

    def _fetch_details_or_summary(self, summary: Card) -> Card:
        card_id = summary.get("cardId", "")
        try:
            return self.fetch_card(card_id)
        except CardFetchError as e:
            logger.warning("Failed to fetch card details", card_id=card_id, error=str(e))
            return summary

    def list_cards(self, max_workers: int = 8) -> List[Card]:
        """List the user's cards with full details.

        Details are fetched concurrently, one request per card. A card whose
        detail request fails is returned as its summary record, so the result
        always has the same length and order as the summary listing.
        """
        summaries = self.list_card_summaries()
        if not summaries:
            return []

        with ThreadPoolExecutor(max_workers=min(max_workers, len(summaries))) as pool:
            cards = list(pool.map(self._fetch_details_or_summary, summaries))

        logger.info("Cards listed", count=len(cards))
        return cards
