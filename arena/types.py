"""Dataclasses describing in-memory match state for the sandbox host."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from card_rules.schema import LaneSpec


class Side(str, Enum):
    A = "A"
    B = "B"

    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A


@dataclass(frozen=True)
class MatchConfig:
    """Tunable constants used by :class:`~arena.match.Match`."""

    leader_hp: int = 30
    starting_shares: int = 1000
    max_hand_size: int = 20
    board_width: int = 5
    max_log: int = 200


@dataclass
class UnitState:
    """A unit on the board; satisfies :class:`card_rules.api.UnitView`."""

    id: str
    side: Side
    card_id: str
    name: str
    attack: int
    health: int
    max_health: int
    lane: LaneSpec
    slot: int
    shield_charges: int = 0
    stunned_until_turn: Optional[int] = None
    exposed_until_turn: Optional[int] = None
    temp_attack_penalty: int = 0
    temp_attack_penalty_until_turn: Optional[int] = None

    @property
    def alive(self) -> bool:
        return self.health > 0


@dataclass
class LeaderState:
    hp: int
    max_hp: int


@dataclass
class SideState:
    leader: LeaderState
    shares: int
    deck: List[str] = field(default_factory=list)
    hand: List[str] = field(default_factory=list)
    discard: List[str] = field(default_factory=list)
    front: List[Optional[str]] = field(default_factory=list)
    back: List[Optional[str]] = field(default_factory=list)

    @classmethod
    def new(cls, config: MatchConfig) -> "SideState":
        return cls(
            leader=LeaderState(hp=config.leader_hp, max_hp=config.leader_hp),
            shares=config.starting_shares,
            front=[None] * config.board_width,
            back=[None] * config.board_width,
        )

    def row(self, lane: LaneSpec) -> List[Optional[str]]:
        if lane is LaneSpec.FRONT:
            return self.front
        if lane is LaneSpec.BACK:
            return self.back
        raise ValueError("A board row is either front or back")


@dataclass(frozen=True)
class CombatResult:
    """Outcome of one attack between two units."""

    damage_dealt: int
    damage_taken: int
    target_died: bool
    attacker_died: bool
    had_combat_triggers: bool


def side_payload(state: SideState) -> Dict[str, object]:
    return {
        "leader": {"hp": state.leader.hp, "max_hp": state.leader.max_hp},
        "shares": state.shares,
        "deck": list(state.deck),
        "hand": list(state.hand),
        "discard": list(state.discard),
        "front": list(state.front),
        "back": list(state.back),
    }


__all__ = [
    "CombatResult",
    "LeaderState",
    "MatchConfig",
    "Side",
    "SideState",
    "UnitState",
    "side_payload",
]
