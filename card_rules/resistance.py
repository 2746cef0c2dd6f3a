"""Per-card resistance profiles derived from ``resistance`` specials."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

from .catalog import CardCatalog
from .schema import StatusKind, UnitCard

NO_RESISTANCE_SUMMARY = "Resistance: none."
NON_UNIT_SUMMARY = "Resistance: n/a (non-unit card)."


def format_pct(chance: float) -> str:
    # Halves round up.
    return f"{math.floor(chance * 100 + 0.5)}%"


@dataclass(frozen=True)
class ResistanceProfile:
    stun: float = 0.0
    exposed: float = 0.0
    atk_down: float = 0.0
    summary: str = NO_RESISTANCE_SUMMARY

    @property
    def has_any(self) -> bool:
        return self.stun > 0 or self.exposed > 0 or self.atk_down > 0

    def chance(self, kind: StatusKind) -> float:
        if kind is StatusKind.STUN:
            return self.stun
        if kind is StatusKind.EXPOSED:
            return self.exposed
        return self.atk_down


def _build_summary(stun: float, exposed: float, atk_down: float) -> str:
    parts: List[str] = []
    if stun > 0:
        parts.append(f"stun {format_pct(stun)}")
    if exposed > 0:
        parts.append(f"exposed {format_pct(exposed)}")
    if atk_down > 0:
        parts.append(f"atk-down {format_pct(atk_down)}")
    if not parts:
        return NO_RESISTANCE_SUMMARY
    return f"Resistance: {' | '.join(parts)}."


class ResistanceTable:
    """Computes and caches resistance profiles for the cards of one catalog."""

    def __init__(self, catalog: CardCatalog) -> None:
        self._catalog = catalog
        self._cache: Dict[str, ResistanceProfile] = {}

    def profile(self, card_id: str) -> ResistanceProfile:
        cached = self._cache.get(card_id)
        if cached is None:
            cached = self._compute(card_id)
            self._cache[card_id] = cached
        return cached

    def chance(self, card_id: str, kind: StatusKind) -> float:
        return self.profile(card_id).chance(kind)

    def summary(self, card_id: str) -> str:
        return self.profile(card_id).summary

    def _compute(self, card_id: str) -> ResistanceProfile:
        card = self._catalog.get(card_id)
        if card is None:
            return ResistanceProfile()
        if not isinstance(card, UnitCard):
            return ResistanceProfile(summary=NON_UNIT_SUMMARY)
        special = card.resistance()
        if special is None:
            return ResistanceProfile()
        stun = special.stun or 0.0
        exposed = special.exposed or 0.0
        atk_down = special.atk_down or 0.0
        return ResistanceProfile(stun, exposed, atk_down, _build_summary(stun, exposed, atk_down))


__all__ = ["NON_UNIT_SUMMARY", "NO_RESISTANCE_SUMMARY", "format_pct", "ResistanceProfile", "ResistanceTable"]
