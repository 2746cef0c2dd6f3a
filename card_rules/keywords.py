"""Display metadata for card keywords."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .schema import CardKeyword


@dataclass(frozen=True)
class KeywordDefinition:
    key: CardKeyword
    label: str
    summary: str


KEYWORD_DEFINITIONS: Dict[CardKeyword, KeywordDefinition] = {
    CardKeyword.RUSH: KeywordDefinition(CardKeyword.RUSH, "Rush", "Can attack immediately."),
    CardKeyword.REACH: KeywordDefinition(CardKeyword.REACH, "Reach", "Can attack enemy back row."),
    CardKeyword.RANGED: KeywordDefinition(
        CardKeyword.RANGED, "Ranged", "Backline attacker that can pressure protected targets."
    ),
    CardKeyword.FLIP: KeywordDefinition(
        CardKeyword.FLIP, "Flip", "Can deploy onto an occupied ally slot at extra cost."
    ),
    CardKeyword.DIRTY: KeywordDefinition(
        CardKeyword.DIRTY, "Dirty", "Increases Judge catch risk and corruption synergies."
    ),
    CardKeyword.PROSECUTOR: KeywordDefinition(CardKeyword.PROSECUTOR, "Prosecutor", "Judge green synergy keyword."),
    CardKeyword.NEGOTIATOR: KeywordDefinition(CardKeyword.NEGOTIATOR, "Negotiator", "Judge green synergy keyword."),
}


def describe_keywords(keywords: Iterable[CardKeyword]) -> List[str]:
    """Return ``"Label: summary"`` lines for ``keywords`` in the given order."""

    lines = []
    for keyword in keywords:
        definition = KEYWORD_DEFINITIONS[keyword]
        lines.append(f"{definition.label}: {definition.summary}")
    return lines


__all__ = ["KEYWORD_DEFINITIONS", "KeywordDefinition", "describe_keywords"]
