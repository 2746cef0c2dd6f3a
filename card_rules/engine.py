"""Event-driven interpreter running card triggers against a host capability API."""

from __future__ import annotations

import logging
from typing import Optional

from .catalog import CardCatalog
from .context import CombatContext, RuntimeConfig, TriggerContext, TriggerExecutionState
from .effects import ActionCall, ActionRegistry, registry
from .errors import ActionExecutionError
from .schema import ACTION_TYPES, TriggerCondition, TriggerDef, TriggerEvent, UnitCard

logger = logging.getLogger(__name__)


class TriggerRuntime:
    """Fires the triggers a unit's card declares for summon, turn start and combat.

    The runtime holds no match state.  It reads the unit's card from the
    catalog, checks each trigger's conditions and runs its actions in order
    through ``ctx.api``.  Actions whose target cannot be resolved are skipped
    without affecting the rest of the trigger.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        config: Optional[RuntimeConfig] = None,
        action_registry: Optional[ActionRegistry] = None,
    ) -> None:
        self._catalog = catalog
        self._config = config or RuntimeConfig()
        self._registry = action_registry or registry
        missing = self._registry.missing(ACTION_TYPES)
        if missing:
            names = ", ".join(action_type.__name__ for action_type in missing)
            raise ActionExecutionError(f"Action registry has no handler for: {names}")

    @property
    def catalog(self) -> CardCatalog:
        return self._catalog

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    # ---------------------------------------------------------------- Public API
    def on_summon(self, ctx: TriggerContext) -> bool:
        return self._run_event(ctx, TriggerEvent.ON_SUMMON)

    def on_turn_start(self, ctx: TriggerContext) -> bool:
        return self._run_event(ctx, TriggerEvent.TURN_START)

    def on_combat(self, ctx: CombatContext) -> bool:
        """Run ``on_hit``, then ``on_kill`` and ``after_combat_survived`` when they apply.

        Returns ``True`` whenever the card declares any combat trigger, even
        if conditions end up suppressing all of them.
        """

        card = self._unit_card(ctx)
        if card is None or not card.has_combat_triggers():
            return False
        self._fire(card, TriggerEvent.ON_HIT, ctx)
        if ctx.target_died:
            self._fire(card, TriggerEvent.ON_KILL, ctx)
        if not ctx.attacker_died:
            self._fire(card, TriggerEvent.AFTER_COMBAT_SURVIVED, ctx)
        return True

    # ------------------------------------------------------------------ helpers
    def _unit_card(self, ctx: TriggerContext) -> Optional[UnitCard]:
        card = self._catalog.unit(ctx.unit.card_id)
        if card is None:
            logger.debug("Unit %s has no unit card %r; skipping", ctx.unit.id, ctx.unit.card_id)
        return card

    def _run_event(self, ctx: TriggerContext, event: TriggerEvent) -> bool:
        card = self._unit_card(ctx)
        if card is None or not card.triggers_for(event):
            return False
        self._fire(card, event, ctx)
        return True

    def _fire(self, card: UnitCard, event: TriggerEvent, ctx: TriggerContext) -> None:
        for trigger in card.triggers_for(event):
            if not self._conditions_met(trigger, ctx):
                logger.debug("Trigger %s:%s suppressed by %s", card.id, event.value, list(trigger.requires))
                continue
            self._execute_trigger(card, event, trigger, ctx)

    def _execute_trigger(
        self, card: UnitCard, event: TriggerEvent, trigger: TriggerDef, ctx: TriggerContext
    ) -> None:
        state = TriggerExecutionState()
        for action in trigger.actions:
            call = ActionCall(ctx=ctx, card=card, event=event, action=action, state=state, config=self._config)
            self._registry.apply(call)

    def _conditions_met(self, trigger: TriggerDef, ctx: TriggerContext) -> bool:
        for condition in trigger.requires:
            if condition is TriggerCondition.SOURCE_SURVIVED:
                if ctx.unit.health <= 0:
                    return False
                if isinstance(ctx, CombatContext) and ctx.attacker_died:
                    return False
            elif condition is TriggerCondition.TARGET_SURVIVED:
                if not isinstance(ctx, CombatContext):
                    return False
                if ctx.target is None or ctx.target_died or ctx.target.health <= 0:
                    return False
            else:  # pragma: no cover - exhaustive guard
                raise ActionExecutionError(f"Unsupported trigger condition '{condition}'")
        return True


__all__ = ["TriggerRuntime"]
