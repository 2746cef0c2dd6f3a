"""In-memory match host implementing the card runtime's capability API."""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from card_rules.catalog import CardCatalog
from card_rules.context import CombatContext, TriggerContext
from card_rules.engine import TriggerRuntime
from card_rules.resistance import ResistanceTable, format_pct
from card_rules.schema import LaneSpec, StatusKind, UnitCard
from card_rules.targeting import unit_has_status
from core.errors import IllegalActionError, UnitNotFoundError
from core.random_control import spawn_seed_sequence, uniform_for_label

from .types import CombatResult, MatchConfig, Side, SideState, UnitState, side_payload

logger = logging.getLogger(__name__)

_RESIST_NAMES = {
    StatusKind.STUN: "stun",
    StatusKind.EXPOSED: "expose",
    StatusKind.ATK_DOWN: "attack-down",
}


class Match:
    """Two-sided board that runs card triggers through :class:`TriggerRuntime`.

    The match owns every :class:`UnitState` and exposes the operations of
    :class:`card_rules.api.RuntimeApi`.  Random picks are drawn from
    generators keyed by the match seed, the pick's label, the turn and a roll
    counter, so a match replays identically from the same seed and inputs.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        *,
        config: Optional[MatchConfig] = None,
        runtime: Optional[TriggerRuntime] = None,
        seed: Optional[int] = None,
        decks: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self._catalog = catalog
        self._config = config or MatchConfig()
        self._runtime = runtime or TriggerRuntime(catalog)
        self._resistance = ResistanceTable(catalog)
        self._seed_sequence = np.random.SeedSequence(seed) if seed is not None else spawn_seed_sequence()
        self.turn = 1
        self.active_side = Side.A
        self.rng_counter = 0
        self.sides: Dict[Side, SideState] = {side: SideState.new(self._config) for side in Side}
        self.units: Dict[str, UnitState] = {}
        self.log: List[str] = []
        self._unit_counter = 0
        for side, deck in (decks or {}).items():
            self.sides[Side(side)].deck = list(deck)

    @property
    def config(self) -> MatchConfig:
        return self._config

    # ------------------------------------------------------------------
    # Capability API
    # ------------------------------------------------------------------
    def list_side_unit_ids(self, side: str, lane: Optional[LaneSpec] = None) -> List[str]:
        state = self.sides[Side(side)]
        if lane is LaneSpec.FRONT:
            rows: Iterable[List[Optional[str]]] = (state.front,)
        elif lane is LaneSpec.BACK:
            rows = (state.back,)
        else:
            rows = (state.front, state.back)
        return [unit_id for row in rows for unit_id in row if unit_id is not None]

    def get_unit(self, unit_id: str) -> Optional[UnitState]:
        return self.units.get(unit_id)

    def random_unit_id(self, unit_ids: Sequence[str], label: str) -> Optional[str]:
        if not unit_ids:
            return None
        index = int(self.next_roll(label) * len(unit_ids))
        return unit_ids[min(index, len(unit_ids) - 1)]

    def pick_lowest_health_unit_id(self, unit_ids: Sequence[str]) -> Optional[str]:
        best: Optional[UnitState] = None
        for unit_id in unit_ids:
            unit = self.units.get(unit_id)
            if unit is None:
                continue
            if best is None or unit.health < best.health:
                best = unit
        return best.id if best is not None else None

    def heal_unit(self, unit: UnitState, amount: int) -> int:
        state = self._require_unit(unit.id)
        if amount <= 0:
            return 0
        before = state.health
        state.health = min(state.max_health, state.health + amount)
        return state.health - before

    def add_unit_shield(self, unit: UnitState, charges: int) -> None:
        state = self._require_unit(unit.id)
        state.shield_charges += max(0, charges)

    def cleanse_unit(self, unit: UnitState, statuses: Optional[Iterable[StatusKind]] = None) -> int:
        state = self._require_unit(unit.id)
        wanted = set(statuses) if statuses else set(StatusKind)
        removed = 0
        if StatusKind.STUN in wanted and unit_has_status(state, StatusKind.STUN, self.turn):
            state.stunned_until_turn = self.turn
            removed += 1
        if StatusKind.EXPOSED in wanted and unit_has_status(state, StatusKind.EXPOSED, self.turn):
            state.exposed_until_turn = None
            removed += 1
        if StatusKind.ATK_DOWN in wanted and unit_has_status(state, StatusKind.ATK_DOWN, self.turn):
            state.attack += state.temp_attack_penalty
            state.temp_attack_penalty = 0
            state.temp_attack_penalty_until_turn = None
            removed += 1
        return removed

    def stun_unit_until(self, unit: UnitState, until_turn: int, source_label: str) -> bool:
        state = self._require_unit(unit.id)
        if self._resisted(state, StatusKind.STUN, source_label):
            return False
        state.stunned_until_turn = max(state.stunned_until_turn or 0, until_turn)
        return True

    def expose_unit_until(self, unit: UnitState, until_turn: int, source_label: str) -> bool:
        state = self._require_unit(unit.id)
        if self._resisted(state, StatusKind.EXPOSED, source_label):
            return False
        state.exposed_until_turn = max(state.exposed_until_turn or 0, until_turn)
        return True

    def apply_temporary_attack_penalty(
        self, unit: UnitState, amount: int, until_turn: int, source_label: str
    ) -> int:
        state = self._require_unit(unit.id)
        if self._resisted(state, StatusKind.ATK_DOWN, source_label):
            return 0
        allowed = max(0, state.attack - 1)
        applied = min(max(0, amount), allowed)
        if applied <= 0:
            return 0
        state.attack -= applied
        state.temp_attack_penalty += applied
        state.temp_attack_penalty_until_turn = max(state.temp_attack_penalty_until_turn or 0, until_turn)
        self.push_log(f"{state.name} lost {applied} attack ({source_label}) until turn {until_turn}.")
        return applied

    def modify_attack(self, unit: UnitState, amount: int) -> int:
        state = self._require_unit(unit.id)
        before = state.attack
        state.attack = max(1, state.attack + amount)
        return state.attack - before

    def gain_shares(self, side: str, amount: int) -> None:
        self.sides[Side(side)].shares += amount

    def heal_leader(self, side: str, amount: int) -> int:
        leader = self.sides[Side(side)].leader
        if amount <= 0:
            return 0
        before = leader.hp
        leader.hp = min(leader.max_hp, leader.hp + amount)
        return leader.hp - before

    def draw_one(self, side: str) -> Optional[str]:
        side = Side(side)
        state = self.sides[side]
        if not state.deck:
            return None
        card_id = state.deck.pop(0)
        if len(state.hand) >= self._config.max_hand_size:
            state.discard.append(card_id)
            self.push_log(f"{side.value} burned {self._card_name(card_id)} (hand limit {self._config.max_hand_size}).")
            return None
        state.hand.append(card_id)
        return card_id

    def push_log(self, text: str) -> None:
        self.log.append(text)
        if len(self.log) > self._config.max_log:
            del self.log[: len(self.log) - self._config.max_log]

    # ------------------------------------------------------------------
    # Match flow
    # ------------------------------------------------------------------
    def summon(self, side: str, card_id: str, lane: Optional[LaneSpec] = None, slot: Optional[int] = None) -> UnitState:
        """Place a unit for ``side``, grant its summon shield and run its on-summon triggers."""

        side = Side(side)
        card = self._catalog.unit(card_id)
        if card is None:
            raise IllegalActionError(f"Card '{card_id}' is not a unit card")
        row_lane = self._deploy_lane(card, lane)
        row = self.sides[side].row(row_lane)
        slot = self._free_slot(row, slot, row_lane)

        self._unit_counter += 1
        unit = UnitState(
            id=f"{side.value}-u{self._unit_counter}",
            side=side,
            card_id=card.id,
            name=card.name,
            attack=card.stats.attack,
            health=card.stats.health,
            max_health=card.stats.health,
            lane=row_lane,
            slot=slot,
        )
        row[slot] = unit.id
        self.units[unit.id] = unit
        self.push_log(f"{side.value} summoned {unit.name}.")
        shield = card.summon_shield()
        if shield > 0:
            self.add_unit_shield(unit, shield)
        self._runtime.on_summon(TriggerContext(side=side.value, unit=unit, turn=self.turn, api=self))
        return unit

    def start_turn(self, side: Optional[str] = None) -> None:
        """Expire attack penalties and run turn-start triggers for every unit of ``side``."""

        side = Side(side) if side is not None else self.active_side
        self._expire_attack_penalties()
        for unit_id in self.list_side_unit_ids(side.value):
            unit = self.units.get(unit_id)
            if unit is None or not unit.alive:
                continue
            self._runtime.on_turn_start(TriggerContext(side=side.value, unit=unit, turn=self.turn, api=self))

    def end_turn(self) -> None:
        """Pass play to the other side, advance the turn counter and start its turn."""

        self.active_side = self.active_side.opponent
        self.turn += 1
        self.start_turn(self.active_side.value)

    def resolve_combat(self, attacker_id: str, defender_id: str) -> CombatResult:
        """Trade damage between two units, run the attacker's combat triggers, then clear the dead."""

        attacker = self._require_unit(attacker_id)
        defender = self._require_unit(defender_id)
        if attacker.side is defender.side:
            raise IllegalActionError("Units on the same side cannot fight each other")
        if unit_has_status(attacker, StatusKind.STUN, self.turn):
            raise IllegalActionError(f"{attacker.name} is stunned")

        damage = attacker.attack + (1 if unit_has_status(defender, StatusKind.EXPOSED, self.turn) else 0)
        counter = defender.attack + (1 if unit_has_status(attacker, StatusKind.EXPOSED, self.turn) else 0)
        dealt = self._apply_damage(defender, damage, attacker.name)
        taken = self._apply_damage(attacker, counter, defender.name)

        ctx = CombatContext(
            side=attacker.side.value,
            unit=attacker,
            turn=self.turn,
            api=self,
            target=defender,
            target_died=not defender.alive,
            attacker_died=not attacker.alive,
        )
        fired = self._runtime.on_combat(ctx)
        result = CombatResult(
            damage_dealt=dealt,
            damage_taken=taken,
            target_died=ctx.target_died,
            attacker_died=ctx.attacker_died,
            had_combat_triggers=fired,
        )
        self._remove_dead((attacker, defender))
        return result

    def state_hash(self) -> str:
        """Return a deterministic hash for the current match state."""

        payload = {
            "turn": self.turn,
            "active_side": self.active_side.value,
            "rng_counter": self.rng_counter,
            "seed": {
                "entropy": str(self._seed_sequence.entropy),
                "spawn_key": list(self._seed_sequence.spawn_key),
            },
            "sides": {side.value: side_payload(state) for side, state in self.sides.items()},
            "units": {
                unit_id: {
                    "side": unit.side.value,
                    "card_id": unit.card_id,
                    "attack": unit.attack,
                    "health": unit.health,
                    "max_health": unit.max_health,
                    "lane": unit.lane.value,
                    "slot": unit.slot,
                    "shield": unit.shield_charges,
                    "stunned_until": unit.stunned_until_turn,
                    "exposed_until": unit.exposed_until_turn,
                    "penalty": unit.temp_attack_penalty,
                    "penalty_until": unit.temp_attack_penalty_until_turn,
                }
                for unit_id, unit in sorted(self.units.items())
            },
            "log": self.log,
        }
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf8")).hexdigest()

    def next_roll(self, label: str) -> float:
        salted = f"{label}:{self.turn}:{self.rng_counter}"
        self.rng_counter += 1
        return uniform_for_label(self._seed_sequence, salted)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_unit(self, unit_id: str) -> UnitState:
        unit = self.units.get(unit_id)
        if unit is None:
            raise UnitNotFoundError(unit_id)
        return unit

    def _card_name(self, card_id: str) -> str:
        card = self._catalog.get(card_id)
        return card.name if card is not None else card_id

    def _deploy_lane(self, card: UnitCard, lane: Optional[LaneSpec]) -> LaneSpec:
        if card.lane is LaneSpec.BOTH:
            if lane is None or lane is LaneSpec.BOTH:
                return LaneSpec.FRONT
            return lane
        if lane is not None and lane is not card.lane:
            raise IllegalActionError(f"{card.name} can only be deployed to the {card.lane.value} lane")
        return card.lane

    def _free_slot(self, row: List[Optional[str]], slot: Optional[int], lane: LaneSpec) -> int:
        if slot is None:
            for index, occupant in enumerate(row):
                if occupant is None:
                    return index
            raise IllegalActionError(f"No free slot in the {lane.value} lane")
        if not 0 <= slot < len(row):
            raise IllegalActionError(f"Slot {slot} is outside the board")
        if row[slot] is not None:
            raise IllegalActionError(f"Slot {slot} in the {lane.value} lane is occupied")
        return slot

    def _resisted(self, unit: UnitState, kind: StatusKind, source_label: str) -> bool:
        chance = self._resistance.chance(unit.card_id, kind)
        if chance <= 0:
            return False
        roll = self.next_roll(f"resist:{kind.value}:{unit.id}:{source_label}")
        if roll < chance:
            self.push_log(f"{unit.name} resisted {_RESIST_NAMES[kind]} ({format_pct(chance)}).")
            return True
        return False

    def _apply_damage(self, unit: UnitState, damage: int, source_name: str) -> int:
        if damage <= 0:
            return 0
        if unit.shield_charges > 0:
            unit.shield_charges -= 1
            self.push_log(f"{unit.name} blocked {source_name} with shield.")
            return 0
        unit.health -= damage
        return damage

    def _expire_attack_penalties(self) -> None:
        for unit in self.units.values():
            if unit.temp_attack_penalty <= 0:
                continue
            until = unit.temp_attack_penalty_until_turn
            if until is not None and until > self.turn:
                continue
            unit.attack += unit.temp_attack_penalty
            self.push_log(f"{unit.name} recovered {unit.temp_attack_penalty} temporary attack.")
            unit.temp_attack_penalty = 0
            unit.temp_attack_penalty_until_turn = None

    def _remove_dead(self, units: Iterable[UnitState]) -> None:
        for unit in units:
            if unit.alive or unit.id not in self.units:
                continue
            state = self.sides[unit.side]
            row = state.row(unit.lane)
            row[unit.slot] = None
            state.discard.append(unit.card_id)
            del self.units[unit.id]
            self.push_log(f"{unit.name} was destroyed.")
            logger.debug("Removed unit %s (%s)", unit.id, unit.card_id)


__all__ = ["Match"]
