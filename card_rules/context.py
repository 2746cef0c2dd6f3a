"""Context objects handed to the trigger runtime and its action handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api import RuntimeApi, SideId, UnitView


@dataclass(frozen=True)
class RuntimeConfig:
    """Tunables for log formatting and the fixed-size attack penalty."""

    log_tag: str = "[V2]"
    attack_penalty_magnitude: int = 1


@dataclass
class TriggerContext:
    """Acting side, acting unit and current turn for one event."""

    side: SideId
    unit: UnitView
    turn: int
    api: RuntimeApi


@dataclass
class CombatContext(TriggerContext):
    """A :class:`TriggerContext` extended with the outcome of one combat exchange."""

    target: Optional[UnitView] = None
    target_died: bool = False
    attacker_died: bool = False


@dataclass
class TriggerExecutionState:
    """Scratch state for a single trigger firing.

    Only the ally chosen by an earlier action is remembered, so that
    "heal an ally, then cleanse it" lands on the same unit.
    """

    ally_target_id: Optional[str] = None


__all__ = ["CombatContext", "RuntimeConfig", "TriggerContext", "TriggerExecutionState"]
