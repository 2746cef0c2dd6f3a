import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Ensure the project root is available on the Python path when running the tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from card_rules.schema import CARD_ADAPTER, StatusKind  # noqa: E402
from card_rules.targeting import unit_has_status  # noqa: E402


@dataclass
class StubUnit:
    id: str
    card_id: str
    name: str
    health: int
    max_health: int
    attack: int = 2
    shield: int = 0
    stunned_until_turn: Optional[int] = None
    exposed_until_turn: Optional[int] = None
    temp_attack_penalty: int = 0
    temp_attack_penalty_until_turn: Optional[int] = None


@dataclass
class StubApi:
    """Recording capability API with predictable choices.

    ``random_unit_id`` always takes ``pick_index`` (clamped) so tests can
    steer random picks; every mutating call is appended to ``mutations``.
    A ``None`` entry in a deck is a draw that fails (e.g. a burned card).
    """

    units: Dict[str, StubUnit] = field(default_factory=dict)
    board: Dict[str, List[str]] = field(default_factory=dict)
    decks: Dict[str, List[str]] = field(default_factory=dict)
    shares: Dict[str, int] = field(default_factory=dict)
    leader_hp: Dict[str, int] = field(default_factory=dict)
    leader_max_hp: int = 30
    current_turn: int = 1
    resist: bool = False
    pick_index: int = 0
    logs: List[str] = field(default_factory=list)
    mutations: List[Tuple[str, Any]] = field(default_factory=list)
    random_labels: List[str] = field(default_factory=list)
    random_candidates: List[List[str]] = field(default_factory=list)

    def add(self, side: str, unit: StubUnit) -> StubUnit:
        self.units[unit.id] = unit
        self.board.setdefault(side, []).append(unit.id)
        return unit

    # capability API
    def list_side_unit_ids(self, side, lane=None):
        return list(self.board.get(side, []))

    def get_unit(self, unit_id):
        return self.units.get(unit_id)

    def random_unit_id(self, unit_ids, label):
        self.random_labels.append(label)
        self.random_candidates.append(list(unit_ids))
        if not unit_ids:
            return None
        return unit_ids[min(self.pick_index, len(unit_ids) - 1)]

    def pick_lowest_health_unit_id(self, unit_ids):
        best = None
        for unit_id in unit_ids:
            unit = self.units[unit_id]
            if best is None or unit.health < best.health:
                best = unit
        return best.id if best is not None else None

    def heal_unit(self, unit, amount):
        before = unit.health
        unit.health = min(unit.max_health, unit.health + amount)
        self.mutations.append(("heal_unit", unit.id))
        return unit.health - before

    def add_unit_shield(self, unit, charges):
        unit.shield += charges
        self.mutations.append(("add_unit_shield", unit.id))

    def cleanse_unit(self, unit, statuses=None):
        wanted = set(statuses) if statuses else set(StatusKind)
        removed = 0
        turn = self.current_turn
        if StatusKind.STUN in wanted and unit_has_status(unit, StatusKind.STUN, turn):
            unit.stunned_until_turn = turn
            removed += 1
        if StatusKind.EXPOSED in wanted and unit_has_status(unit, StatusKind.EXPOSED, turn):
            unit.exposed_until_turn = None
            removed += 1
        if StatusKind.ATK_DOWN in wanted and unit_has_status(unit, StatusKind.ATK_DOWN, turn):
            unit.temp_attack_penalty = 0
            removed += 1
        self.mutations.append(("cleanse_unit", unit.id))
        return removed

    def stun_unit_until(self, unit, until_turn, source_label):
        self.mutations.append(("stun_unit_until", (unit.id, until_turn, source_label)))
        if self.resist:
            return False
        unit.stunned_until_turn = max(unit.stunned_until_turn or 0, until_turn)
        return True

    def expose_unit_until(self, unit, until_turn, source_label):
        self.mutations.append(("expose_unit_until", (unit.id, until_turn, source_label)))
        if self.resist:
            return False
        unit.exposed_until_turn = max(unit.exposed_until_turn or 0, until_turn)
        return True

    def apply_temporary_attack_penalty(self, unit, amount, until_turn, source_label):
        self.mutations.append(("apply_temporary_attack_penalty", (unit.id, amount, until_turn, source_label)))
        unit.temp_attack_penalty += amount
        unit.temp_attack_penalty_until_turn = until_turn
        return amount

    def modify_attack(self, unit, amount):
        before = unit.attack
        unit.attack = max(1, unit.attack + amount)
        self.mutations.append(("modify_attack", (unit.id, amount)))
        return unit.attack - before

    def gain_shares(self, side, amount):
        self.shares[side] = self.shares.get(side, 0) + amount
        self.mutations.append(("gain_shares", (side, amount)))

    def heal_leader(self, side, amount):
        before = self.leader_hp.get(side, self.leader_max_hp)
        after = min(self.leader_max_hp, before + amount)
        self.leader_hp[side] = after
        self.mutations.append(("heal_leader", (side, amount)))
        return after - before

    def draw_one(self, side):
        deck = self.decks.get(side, [])
        self.mutations.append(("draw_one", side))
        if not deck:
            return None
        return deck.pop(0)

    def push_log(self, text):
        self.logs.append(text)


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi()


@pytest.fixture
def make_unit():
    counter = {"n": 0}

    def factory(card_id: str = "filler", *, name: Optional[str] = None, health: int = 4, max_health: Optional[int] = None, **extra: Any) -> StubUnit:
        counter["n"] += 1
        return StubUnit(
            id=f"u{counter['n']}",
            card_id=card_id,
            name=name or f"Unit{counter['n']}",
            health=health,
            max_health=max_health if max_health is not None else health,
            **extra,
        )

    return factory


def unit_payload(card_id: str, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": card_id,
        "name": card_id.replace("_", " ").title(),
        "faction": "sec",
        "kind": "unit",
        "description": "Test unit.",
        "court_case": "Filed for testing purposes.",
        "role": "support",
        "costShares": 100,
        "lane": "back",
        "stats": {"attack": 2, "health": 4},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def card_payload():
    return unit_payload


@pytest.fixture
def build_card():
    def factory(card_id: str, **overrides: Any):
        return CARD_ADAPTER.validate_python(unit_payload(card_id, **overrides))

    return factory
