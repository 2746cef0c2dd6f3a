"""Sandbox match host for exercising card triggers end to end."""

from .match import Match
from .types import CombatResult, LeaderState, MatchConfig, Side, SideState, UnitState

__all__ = ["CombatResult", "LeaderState", "Match", "MatchConfig", "Side", "SideState", "UnitState"]
