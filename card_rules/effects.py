"""Action handler registry and the built-in handlers for every action kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Protocol, TypeVar

from .api import UnitView
from .context import RuntimeConfig, TriggerContext, TriggerExecutionState
from .errors import ActionExecutionError
from .schema import (
    ApplyStatusAction,
    CardAction,
    CleanseAction,
    DrawCardAction,
    GainSharesAction,
    GainShieldAction,
    HealAction,
    ModifyAttackAction,
    StatusKind,
    TargetSelector,
    TriggerEvent,
    UnitCard,
)
from .targeting import resolve_unit_target


@dataclass
class ActionCall:
    """Everything a handler needs to execute one action of one trigger."""

    ctx: TriggerContext
    card: UnitCard
    event: TriggerEvent
    action: CardAction
    state: TriggerExecutionState
    config: RuntimeConfig

    @property
    def source_label(self) -> str:
        return f"{self.ctx.unit.name} {self.config.log_tag}"

    def label(self, suffix: str) -> str:
        """Reproducibility label for a random pick made by this action."""

        return f"{self.card.id}:{self.event.value}:{suffix}"

    def log(self, text: str) -> None:
        self.ctx.api.push_log(f"{self.source_label}: {text}")

    def resolve_unit(self) -> Optional[UnitView]:
        return resolve_unit_target(self)


class ActionHandler(Protocol):
    """Callable protocol for action handlers."""

    def __call__(self, call: ActionCall) -> None:  # pragma: no cover - protocol
        ...


HandlerT = TypeVar("HandlerT", bound=Callable[[ActionCall], None])


class ActionRegistry:
    """Maps action model classes to the callables executing them."""

    def __init__(self) -> None:
        self._handlers: Dict[type, ActionHandler] = {}

    def register(self, action_type: type) -> Callable[[HandlerT], HandlerT]:
        def decorator(func: HandlerT) -> HandlerT:
            if action_type in self._handlers:
                raise ValueError(f"Handler already registered for action '{action_type.__name__}'")
            self._handlers[action_type] = func
            return func

        return decorator

    def get(self, action_type: type) -> ActionHandler:
        try:
            return self._handlers[action_type]
        except KeyError as exc:
            raise ActionExecutionError(f"No handler for action '{action_type.__name__}'") from exc

    def missing(self, action_types: Iterable[type]) -> List[type]:
        return [action_type for action_type in action_types if action_type not in self._handlers]

    def apply(self, call: ActionCall) -> None:
        self.get(type(call.action))(call)


registry = ActionRegistry()


@registry.register(GainShieldAction)
def gain_shield(call: ActionCall) -> None:
    unit = call.resolve_unit()
    if unit is None:
        return
    amount = call.action.amount
    call.ctx.api.add_unit_shield(unit, amount)
    call.log(f"{unit.name} gained {amount} shield.")


@registry.register(HealAction)
def heal(call: ActionCall) -> None:
    """Heal the leader or a unit; only a positive heal is logged."""

    api = call.ctx.api
    amount = call.action.amount
    if call.action.target is TargetSelector.LEADER:
        healed = api.heal_leader(call.ctx.side, amount)
        if healed > 0:
            call.log(f"leader healed for {healed}.")
        return
    unit = call.resolve_unit()
    if unit is None:
        return
    healed = api.heal_unit(unit, amount)
    if healed > 0:
        call.log(f"healed {unit.name} for {healed}.")


@registry.register(GainSharesAction)
def gain_shares(call: ActionCall) -> None:
    amount = call.action.amount
    call.ctx.api.gain_shares(call.ctx.side, amount)
    call.log(f"+{amount} shares.")


@registry.register(ModifyAttackAction)
def modify_attack(call: ActionCall) -> None:
    unit = call.resolve_unit()
    if unit is None:
        return
    applied = call.ctx.api.modify_attack(unit, call.action.amount)
    if applied == 0:
        return
    sign = "+" if applied > 0 else ""
    call.log(f"{unit.name} attack {sign}{applied}.")


@registry.register(CleanseAction)
def cleanse(call: ActionCall) -> None:
    unit = call.resolve_unit()
    if unit is None:
        return
    statuses = list(call.action.statuses) if call.action.statuses else None
    removed = call.ctx.api.cleanse_unit(unit, statuses)
    if removed > 0:
        call.log(f"cleansed {unit.name} ({removed}).")


@registry.register(ApplyStatusAction)
def apply_status(call: ActionCall) -> None:
    """Apply stun, exposure or the fixed attack penalty until ``turn + turns``."""

    unit = call.resolve_unit()
    if unit is None:
        return
    api = call.ctx.api
    action = call.action
    until_turn = call.ctx.turn + max(0, action.turns)
    if action.status is StatusKind.STUN:
        if api.stun_unit_until(unit, until_turn, call.source_label):
            call.log(f"stunned {unit.name}.")
    elif action.status is StatusKind.EXPOSED:
        if api.expose_unit_until(unit, until_turn, call.source_label):
            call.log(f"exposed {unit.name}.")
    elif action.status is StatusKind.ATK_DOWN:
        api.apply_temporary_attack_penalty(
            unit, call.config.attack_penalty_magnitude, until_turn, call.source_label
        )
    else:  # pragma: no cover - exhaustive guard
        raise ActionExecutionError(f"Unsupported status '{action.status}'")


@registry.register(DrawCardAction)
def draw_card(call: ActionCall) -> None:
    """Attempt every draw; a failed draw (empty deck, burned card) does not stop the rest."""

    drawn = 0
    for _ in range(call.action.amount):
        if call.ctx.api.draw_one(call.ctx.side) is not None:
            drawn += 1
    if drawn > 0:
        call.log(f"drew {drawn} card{'' if drawn == 1 else 's'}.")


__all__ = ["ActionCall", "ActionHandler", "ActionRegistry", "registry"]

