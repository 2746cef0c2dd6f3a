"""Status predicates and target resolution for card actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .api import UnitView
from .context import CombatContext
from .schema import CleanseAction, GainShieldAction, HealAction, StatusKind, TargetSelector

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .effects import ActionCall

logger = logging.getLogger(__name__)


def unit_has_status(unit: UnitView, status: StatusKind, turn: int) -> bool:
    """Return whether ``unit`` currently carries ``status``.

    A stun lasts while its expiry is after the current turn; exposure and the
    attack penalty last through their expiry turn.
    """

    if status is StatusKind.STUN:
        return unit.stunned_until_turn is not None and unit.stunned_until_turn > turn
    if status is StatusKind.EXPOSED:
        return unit.exposed_until_turn is not None and unit.exposed_until_turn >= turn
    if status is StatusKind.ATK_DOWN:
        until = unit.temp_attack_penalty_until_turn
        return unit.temp_attack_penalty > 0 and until is not None and until >= turn
    raise ValueError(f"Unsupported status: {status!r}")  # pragma: no cover - exhaustive guard


def unit_matches_statuses(unit: UnitView, statuses: Optional[Sequence[StatusKind]], turn: int) -> bool:
    """An empty or missing filter matches every unit."""

    if not statuses:
        return True
    return any(unit_has_status(unit, status, turn) for status in statuses)


def living_allies(call: "ActionCall") -> List[UnitView]:
    api = call.ctx.api
    allies: List[UnitView] = []
    for unit_id in api.list_side_unit_ids(call.ctx.side):
        unit = api.get_unit(unit_id)
        if unit is not None and unit.health > 0:
            allies.append(unit)
    return allies


def _cached_ally(call: "ActionCall") -> Optional[UnitView]:
    cached_id = call.state.ally_target_id
    if cached_id is None:
        return None
    unit = call.ctx.api.get_unit(cached_id)
    if unit is None:
        return None
    action = call.action
    if isinstance(action, CleanseAction) and not unit_matches_statuses(unit, action.statuses, call.ctx.turn):
        return None
    return unit


def resolve_ally(call: "ActionCall") -> Optional[UnitView]:
    """Pick the ally an ``ally``-targeted action applies to, reusing the trigger's earlier pick."""

    cached = _cached_ally(call)
    if cached is not None:
        return cached

    api = call.ctx.api
    action = call.action
    allies = living_allies(call)
    chosen_id: Optional[str]
    if isinstance(action, HealAction):
        candidates = [unit.id for unit in allies if unit.health < unit.max_health]
        chosen_id = api.pick_lowest_health_unit_id(candidates) if candidates else None
    elif isinstance(action, CleanseAction):
        candidates = [
            unit.id for unit in allies if unit_matches_statuses(unit, action.statuses, call.ctx.turn)
        ]
        chosen_id = api.random_unit_id(candidates, call.label("cleanse:ally")) if candidates else None
    elif isinstance(action, GainShieldAction):
        candidates = [unit.id for unit in allies if unit.id != call.ctx.unit.id]
        chosen_id = api.random_unit_id(candidates, call.label("shield:ally")) if candidates else None
    else:
        candidates = [unit.id for unit in allies]
        chosen_id = api.random_unit_id(candidates, call.label("ally")) if candidates else None

    if chosen_id is None:
        logger.debug("No ally candidate for %s on %s", action.kind, call.card.id)
        return None
    unit = api.get_unit(chosen_id)
    if unit is None:
        return None
    call.state.ally_target_id = unit.id
    return unit


def resolve_unit_target(call: "ActionCall") -> Optional[UnitView]:
    """Resolve the unit an action targets; ``None`` means the action is skipped."""

    target = call.action.target
    if target is TargetSelector.SELF:
        return call.ctx.unit
    if target is TargetSelector.HIT_TARGET:
        if isinstance(call.ctx, CombatContext):
            return call.ctx.target
        return None
    if target is TargetSelector.ALLY:
        return resolve_ally(call)
    return None


__all__ = [
    "living_allies",
    "resolve_ally",
    "resolve_unit_target",
    "unit_has_status",
    "unit_matches_statuses",
]
