"""Static checks enforcing the card DSL invariants.

The pydantic models in :mod:`card_rules.schema` only guarantee the shape of a
card.  The functions here check the rules that span several fields (taunt
needs the front lane, ``hit_target`` only inside combat triggers, amounts must
be positive ...) and report them as :class:`CardValidationIssue` records.
Nothing stops at the first problem: callers get the complete list and
:func:`assert_valid_catalog` turns it into a single
:class:`~card_rules.errors.CatalogValidationError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import CatalogValidationError
from .schema import (
    ApplyStatusAction,
    CardBase,
    CleanseAction,
    DrawCardAction,
    GainSharesAction,
    GainShieldAction,
    HealAction,
    LaneSpec,
    ModifyAttackAction,
    NonUnitCard,
    ResistanceSpecial,
    ShieldOnSummonSpecial,
    TargetSelector,
    TauntSpecial,
    UnitCard,
)


@dataclass(frozen=True)
class CardValidationIssue:
    """A single invariant violation found in a card definition."""

    path: str
    message: str
    card_id: Optional[str] = None

    def format(self) -> str:
        prefix = f"[{self.card_id}] " if self.card_id else ""
        return f"{prefix}{self.path}: {self.message}"


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _duplicate_issues(values: Sequence[str], path: str, card_id: str) -> List[CardValidationIssue]:
    issues: List[CardValidationIssue] = []
    seen = set()
    for value in values:
        if value in seen:
            issues.append(CardValidationIssue(path, f'Duplicate value "{value}".', card_id))
            continue
        seen.add(value)
    return issues


def _validate_resistance(special: ResistanceSpecial, card_id: str) -> List[CardValidationIssue]:
    issues: List[CardValidationIssue] = []
    has_value = False
    for key, value in special.as_mapping().items():
        if value is None:
            continue
        has_value = True
        path = f"specials.resistance.{key}"
        if value < 0:
            issues.append(CardValidationIssue(path, "Resistance cannot be negative.", card_id))
        if value > 1:
            issues.append(
                CardValidationIssue(
                    path, "Resistance must be in range 0..1 (fractional, e.g. 0.2 = 20%).", card_id
                )
            )
    if not has_value:
        issues.append(
            CardValidationIssue(
                "specials.resistance", "Resistance special must define at least one value.", card_id
            )
        )
    return issues


def _validate_specials(card: CardBase) -> List[CardValidationIssue]:
    issues: List[CardValidationIssue] = []
    taunt_count = 0
    resistance_count = 0

    for index, special in enumerate(card.specials):
        path = f"specials[{index}]"
        if isinstance(special, TauntSpecial):
            taunt_count += 1
            if not isinstance(card, UnitCard):
                issues.append(CardValidationIssue(path, "Taunt special is only valid on unit cards.", card.id))
            elif card.lane is not LaneSpec.FRONT:
                issues.append(CardValidationIssue(path, "Taunt units must use the front lane.", card.id))
        elif isinstance(special, ShieldOnSummonSpecial):
            if not isinstance(card, UnitCard):
                issues.append(
                    CardValidationIssue(path, "Shield-on-summon special is only valid on unit cards.", card.id)
                )
            if not _is_positive_int(special.amount):
                issues.append(
                    CardValidationIssue(f"{path}.amount", "Shield amount must be a positive integer.", card.id)
                )
        elif isinstance(special, ResistanceSpecial):
            resistance_count += 1
            issues.extend(_validate_resistance(special, card.id))
        else:  # pragma: no cover - exhaustive guard
            raise TypeError(f"Unsupported special: {type(special)!r}")

    if taunt_count > 1:
        issues.append(CardValidationIssue("specials", "Only one taunt special is allowed per card.", card.id))
    if resistance_count > 1:
        issues.append(
            CardValidationIssue("specials", "Only one resistance special is allowed per card.", card.id)
        )
    return issues


def _validate_action(action: object, card_id: str, path: str) -> List[CardValidationIssue]:
    if isinstance(action, (GainShieldAction, HealAction, GainSharesAction, DrawCardAction)):
        if not _is_positive_int(action.amount):
            return [CardValidationIssue(f"{path}.amount", "Amount must be a positive integer.", card_id)]
        return []
    if isinstance(action, CleanseAction):
        if action.statuses:
            return _duplicate_issues([status.value for status in action.statuses], f"{path}.statuses", card_id)
        return []
    if isinstance(action, ApplyStatusAction):
        if not _is_positive_int(action.turns):
            return [CardValidationIssue(f"{path}.turns", "Status turns must be a positive integer.", card_id)]
        return []
    if isinstance(action, ModifyAttackAction):
        if not isinstance(action.amount, int) or isinstance(action.amount, bool) or action.amount == 0:
            return [CardValidationIssue(f"{path}.amount", "Attack modifier must be a non-zero integer.", card_id)]
        return []
    raise TypeError(f"Unsupported action: {type(action)!r}")  # pragma: no cover - exhaustive guard


def _validate_triggers(card: CardBase) -> List[CardValidationIssue]:
    issues: List[CardValidationIssue] = []
    for i, trigger in enumerate(card.triggers):
        if not trigger.actions:
            issues.append(
                CardValidationIssue(f"triggers[{i}].actions", "Trigger must contain at least one action.", card.id)
            )
        if trigger.requires and not trigger.when.is_combat:
            issues.append(
                CardValidationIssue(
                    f"triggers[{i}].requires", "Trigger conditions are only valid for combat triggers.", card.id
                )
            )
        for j, action in enumerate(trigger.actions):
            path = f"triggers[{i}].actions[{j}]"
            if action.target is TargetSelector.HIT_TARGET and not trigger.when.is_combat:
                issues.append(
                    CardValidationIssue(f"{path}.target", "hit_target can only be used in combat triggers.", card.id)
                )
            issues.extend(_validate_action(action, card.id, path))
    return issues


def validate_card(card: CardBase) -> List[CardValidationIssue]:
    """Return every invariant violation found in a single card."""

    issues: List[CardValidationIssue] = []

    if not card.id.strip():
        issues.append(CardValidationIssue("id", "Card id is required.", card.id))
    if not card.name.strip():
        issues.append(CardValidationIssue("name", "Card name is required.", card.id))
    if not card.description.strip():
        issues.append(CardValidationIssue("description", "Card description is required.", card.id))
    if card.court_case is None or not card.court_case.strip():
        issues.append(CardValidationIssue("court_case", "Card court_case is required.", card.id))
    if card.mechanics_summary is not None and not card.mechanics_summary.strip():
        issues.append(
            CardValidationIssue("mechanicsSummary", "mechanicsSummary cannot be empty when provided.", card.id)
        )
    if card.cost_shares < 0:
        issues.append(CardValidationIssue("costShares", "costShares must be an integer >= 0.", card.id))

    issues.extend(_duplicate_issues([keyword.value for keyword in card.keywords], "keywords", card.id))

    if isinstance(card, UnitCard):
        if not _is_positive_int(card.stats.attack):
            issues.append(CardValidationIssue("stats.attack", "Unit attack must be a positive integer.", card.id))
        if not _is_positive_int(card.stats.health):
            issues.append(CardValidationIssue("stats.health", "Unit health must be a positive integer.", card.id))
    elif isinstance(card, NonUnitCard):
        if any(not isinstance(special, ResistanceSpecial) for special in card.specials):
            issues.append(CardValidationIssue("specials", "Non-unit cards cannot use unit-only specials.", card.id))

    issues.extend(_validate_specials(card))
    issues.extend(_validate_triggers(card))
    return issues


def validate_catalog(cards: Iterable[CardBase]) -> List[CardValidationIssue]:
    """Validate every card and the catalog-wide id uniqueness."""

    issues: List[CardValidationIssue] = []
    ids = set()
    for index, card in enumerate(cards):
        if card.id in ids:
            issues.append(
                CardValidationIssue(f"cards[{index}].id", f'Duplicate card id "{card.id}" in catalog.', card.id)
            )
        else:
            ids.add(card.id)
        issues.extend(validate_card(card))
    return issues


def assert_valid_catalog(cards: Iterable[CardBase]) -> None:
    """Raise :class:`CatalogValidationError` listing every issue, if any."""

    issues = validate_catalog(cards)
    if issues:
        raise CatalogValidationError(issues)


__all__ = [
    "CardValidationIssue",
    "assert_valid_catalog",
    "validate_card",
    "validate_catalog",
]
