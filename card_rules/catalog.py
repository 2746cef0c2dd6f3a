"""Immutable, validated collection of card definitions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .errors import CardNotFoundError
from .schema import CardBase, Faction, UnitCard
from .validators import assert_valid_catalog


class CardCatalog:
    """Read-only card registry indexed by card id.

    The catalog is validated once, when constructed, and raises
    :class:`~card_rules.errors.CatalogValidationError` listing every problem
    if any card is malformed.  Hosts build one instance at start-up and pass
    it to the runtime; nothing mutates it afterwards.
    """

    def __init__(self, cards: Iterable[CardBase]) -> None:
        cards = tuple(cards)
        assert_valid_catalog(cards)
        self._cards: Tuple[CardBase, ...] = cards
        self._by_id: Mapping[str, CardBase] = MappingProxyType({card.id: card for card in cards})

    # ------------------------------------------------------------------- access
    def get(self, card_id: str) -> Optional[CardBase]:
        return self._by_id.get(card_id)

    def require(self, card_id: str) -> CardBase:
        try:
            return self._by_id[card_id]
        except KeyError as exc:
            raise CardNotFoundError(card_id) from exc

    def unit(self, card_id: str) -> Optional[UnitCard]:
        """Return the unit card for ``card_id``, or ``None`` for unknown and non-unit cards."""

        card = self._by_id.get(card_id)
        if isinstance(card, UnitCard):
            return card
        return None

    def by_faction(self, *factions: Faction) -> List[CardBase]:
        wanted = set(factions)
        return [card for card in self._cards if card.faction in wanted]

    def ids(self) -> List[str]:
        return [card.id for card in self._cards]

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._by_id

    def __iter__(self) -> Iterator[CardBase]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"CardCatalog(cards={len(self._cards)})"


def merge_card_lists(base: Iterable[CardBase], overrides: Iterable[CardBase]) -> List[CardBase]:
    """Combine two card lists; later definitions replace earlier ones with the same id.

    Order follows the first appearance of each id, so overriding a card keeps
    its original position.
    """

    merged: Dict[str, CardBase] = {}
    for card in base:
        merged[card.id] = card
    for card in overrides:
        merged[card.id] = card
    return list(merged.values())


__all__ = ["CardCatalog", "merge_card_lists"]
