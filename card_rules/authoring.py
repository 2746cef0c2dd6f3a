"""Presets for writing common card shapes with less boilerplate."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from .schema import (
    CardKeyword,
    CardRole,
    CardSpecial,
    CleanseAction,
    Faction,
    HealAction,
    ImpactTargetRule,
    LaneSpec,
    NonUnitCard,
    StatusKind,
    TargetSelector,
    TauntSpecial,
    TriggerDef,
    TriggerEvent,
    UnitCard,
    UnitStats,
)


def _unique_keywords(*groups: Sequence[CardKeyword]) -> tuple:
    seen: Dict[CardKeyword, None] = {}
    for group in groups:
        for keyword in group:
            seen.setdefault(keyword, None)
    return tuple(seen)


def unit_card(
    *,
    id: str,
    name: str,
    faction: Faction,
    role: CardRole,
    cost_shares: int,
    lane: LaneSpec,
    attack: int,
    health: int,
    description: str,
    court_case: Optional[str] = None,
    mechanics_summary: Optional[str] = None,
    impact_target_rule: Optional[ImpactTargetRule] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
    triggers: Sequence[TriggerDef] = (),
) -> UnitCard:
    return UnitCard(
        id=id,
        name=name,
        faction=faction,
        description=description,
        court_case=court_case,
        mechanics_summary=mechanics_summary,
        impact_target_rule=impact_target_rule,
        role=role,
        cost_shares=cost_shares,
        dirty_power=dirty_power,
        lane=lane,
        stats=UnitStats(attack=attack, health=health),
        keywords=tuple(keywords),
        specials=tuple(specials),
        triggers=tuple(triggers),
    )


def spell_card(
    *,
    id: str,
    name: str,
    faction: Faction,
    role: CardRole,
    cost_shares: int,
    description: str,
    kind: str = "instrument",
    court_case: Optional[str] = None,
    mechanics_summary: Optional[str] = None,
    impact_target_rule: Optional[ImpactTargetRule] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
    triggers: Sequence[TriggerDef] = (),
) -> NonUnitCard:
    return NonUnitCard(
        id=id,
        name=name,
        faction=faction,
        kind=kind,
        description=description,
        court_case=court_case,
        mechanics_summary=mechanics_summary,
        impact_target_rule=impact_target_rule,
        role=role,
        cost_shares=cost_shares,
        dirty_power=dirty_power,
        keywords=tuple(keywords),
        specials=tuple(specials),
        triggers=tuple(triggers),
    )


def upgrade_card(**fields) -> NonUnitCard:
    fields.pop("kind", None)
    return spell_card(kind="upgrade", **fields)


def cheap_taunt(
    *,
    id: str,
    name: str,
    faction: Faction,
    cost_shares: int,
    attack: int,
    health: int,
    description: str,
    court_case: Optional[str] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
) -> UnitCard:
    """Front-lane defender whose only special is taunt."""

    return unit_card(
        id=id,
        name=name,
        faction=faction,
        role=CardRole.DEFENSE,
        cost_shares=cost_shares,
        lane=LaneSpec.FRONT,
        attack=attack,
        health=health,
        description=description,
        court_case=court_case,
        dirty_power=dirty_power,
        keywords=keywords,
        specials=(TauntSpecial(),),
    )


def taunt_tank(
    *,
    id: str,
    name: str,
    faction: Faction,
    cost_shares: int,
    attack: int,
    health: int,
    description: str,
    role: CardRole = CardRole.DEFENSE,
    court_case: Optional[str] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
    triggers: Sequence[TriggerDef] = (),
) -> UnitCard:
    """Taunt front-liner that may carry extra specials and triggers."""

    if role not in (CardRole.DEFENSE, CardRole.CONTROL):
        raise ValueError(f"taunt_tank role must be defense or control, got '{role.value}'")
    return unit_card(
        id=id,
        name=name,
        faction=faction,
        role=role,
        cost_shares=cost_shares,
        lane=LaneSpec.FRONT,
        attack=attack,
        health=health,
        description=description,
        court_case=court_case,
        dirty_power=dirty_power,
        keywords=keywords,
        specials=(TauntSpecial(), *specials),
        triggers=triggers,
    )


def ranged_support(
    *,
    id: str,
    name: str,
    faction: Faction,
    cost_shares: int,
    attack: int,
    health: int,
    description: str,
    role: CardRole = CardRole.SUPPORT,
    court_case: Optional[str] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
    triggers: Sequence[TriggerDef] = (),
) -> UnitCard:
    return unit_card(
        id=id,
        name=name,
        faction=faction,
        role=role,
        cost_shares=cost_shares,
        lane=LaneSpec.BACK,
        attack=attack,
        health=health,
        description=description,
        court_case=court_case,
        dirty_power=dirty_power,
        keywords=_unique_keywords((CardKeyword.RANGED,), keywords),
        specials=specials,
        triggers=triggers,
    )


def rush_attacker(
    *,
    id: str,
    name: str,
    faction: Faction,
    cost_shares: int,
    attack: int,
    health: int,
    description: str,
    lane: LaneSpec = LaneSpec.BOTH,
    court_case: Optional[str] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
    triggers: Sequence[TriggerDef] = (),
) -> UnitCard:
    return unit_card(
        id=id,
        name=name,
        faction=faction,
        role=CardRole.OFFENSE,
        cost_shares=cost_shares,
        lane=lane,
        attack=attack,
        health=health,
        description=description,
        court_case=court_case,
        dirty_power=dirty_power,
        keywords=_unique_keywords((CardKeyword.RUSH,), keywords),
        specials=specials,
        triggers=triggers,
    )


def support_cleaner(
    *,
    id: str,
    name: str,
    faction: Faction,
    cost_shares: int,
    attack: int,
    health: int,
    description: str,
    lane: LaneSpec = LaneSpec.BACK,
    heal_amount: int = 2,
    statuses: Sequence[StatusKind] = (StatusKind.STUN, StatusKind.EXPOSED),
    court_case: Optional[str] = None,
    dirty_power: Optional[int] = None,
    keywords: Sequence[CardKeyword] = (),
    specials: Sequence[CardSpecial] = (),
) -> UnitCard:
    """Support unit that heals an ally on summon and then cleanses that same ally."""

    trigger = TriggerDef(
        when=TriggerEvent.ON_SUMMON,
        actions=(
            HealAction(target=TargetSelector.ALLY, amount=heal_amount),
            CleanseAction(target=TargetSelector.ALLY, statuses=tuple(statuses)),
        ),
    )
    return unit_card(
        id=id,
        name=name,
        faction=faction,
        role=CardRole.SUPPORT,
        cost_shares=cost_shares,
        lane=lane,
        attack=attack,
        health=health,
        description=description,
        court_case=court_case,
        dirty_power=dirty_power,
        keywords=keywords,
        specials=specials,
        triggers=(trigger,),
    )


AUTHORING_PRESETS: Dict[str, Callable[..., object]] = {
    "unit_card": unit_card,
    "spell_card": spell_card,
    "upgrade_card": upgrade_card,
    "cheap_taunt": cheap_taunt,
    "taunt_tank": taunt_tank,
    "ranged_support": ranged_support,
    "rush_attacker": rush_attacker,
    "support_cleaner": support_cleaner,
}


__all__ = [
    "AUTHORING_PRESETS",
    "cheap_taunt",
    "ranged_support",
    "rush_attacker",
    "spell_card",
    "support_cleaner",
    "taunt_tank",
    "unit_card",
    "upgrade_card",
]
