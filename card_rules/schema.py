"""Pydantic models describing the card DSL: cards, triggers, actions and specials."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, FrozenSet, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

_MODEL_CONFIG = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class Faction(str, Enum):
    """Factions a card can belong to."""

    WALLSTREET = "wallstreet"
    SEC = "sec"
    MARKET_MAKERS = "market_makers"
    SHORT_HEDGEFUND = "short_hedgefund"
    RETAIL_MOB = "retail_mob"
    NEUTRAL = "neutral"
    UTILITY = "utility"


class CardRole(str, Enum):
    """Authoring role used for deck building and balance reports."""

    OFFENSE = "offense"
    DEFENSE = "defense"
    SUPPORT = "support"
    CONTROL = "control"
    ECONOMY = "economy"
    UTILITY = "utility"


class LaneSpec(str, Enum):
    """Board rows a unit may be deployed into."""

    FRONT = "front"
    BACK = "back"
    BOTH = "both"


class CardKeyword(str, Enum):
    RUSH = "rush"
    REACH = "reach"
    RANGED = "ranged"
    FLIP = "flip"
    DIRTY = "dirty"
    PROSECUTOR = "prosecutor"
    NEGOTIATOR = "negotiator"


class ImpactTargetRule(str, Enum):
    NONE = "none"
    ALLY_UNIT = "ally-unit"
    ENEMY_UNIT = "enemy-unit"
    ALLY_UNIT_OR_LEADER = "ally-unit-or-leader"
    ENEMY_UNIT_OR_LEADER = "enemy-unit-or-leader"


class StatusKind(str, Enum):
    """Negative statuses that actions can apply or cleanse."""

    STUN = "stun"
    EXPOSED = "exposed"
    ATK_DOWN = "atk_down"


class TriggerEvent(str, Enum):
    """Game events that can fire a trigger."""

    ON_SUMMON = "on_summon"
    TURN_START = "turn_start"
    ON_HIT = "on_hit"
    ON_KILL = "on_kill"
    AFTER_COMBAT_SURVIVED = "after_combat_survived"

    @property
    def is_combat(self) -> bool:
        return self in COMBAT_EVENTS


COMBAT_EVENTS: FrozenSet[TriggerEvent] = frozenset(
    {TriggerEvent.ON_HIT, TriggerEvent.ON_KILL, TriggerEvent.AFTER_COMBAT_SURVIVED}
)


class TriggerCondition(str, Enum):
    """Situational gates evaluated before a combat trigger fires."""

    SOURCE_SURVIVED = "source_survived"
    TARGET_SURVIVED = "target_survived"


class TargetSelector(str, Enum):
    """Who an action applies to."""

    SELF = "self"
    ALLY = "ally"
    HIT_TARGET = "hit_target"
    LEADER = "leader"
    SELF_PLAYER = "self_player"


# --------------------------------------------------------------------- actions
class _ActionBase(BaseModel):
    """Common behaviour for action nodes: each kind accepts a fixed set of targets."""

    model_config = _MODEL_CONFIG
    allowed_targets: ClassVar[FrozenSet[TargetSelector]] = frozenset()

    @model_validator(mode="after")
    def _validate_target(self) -> "_ActionBase":
        target = getattr(self, "target")
        if target not in type(self).allowed_targets:
            allowed = ", ".join(sorted(item.value for item in type(self).allowed_targets))
            raise ValueError(
                f"target '{target.value}' is not valid for '{getattr(self, 'kind')}' (expected one of: {allowed})"
            )
        return self


class GainShieldAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF, TargetSelector.ALLY, TargetSelector.HIT_TARGET})
    kind: Literal["gain_shield"] = "gain_shield"
    target: TargetSelector
    amount: int


class HealAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF, TargetSelector.ALLY, TargetSelector.LEADER})
    kind: Literal["heal"] = "heal"
    target: TargetSelector
    amount: int


class GainSharesAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF_PLAYER})
    kind: Literal["gain_shares"] = "gain_shares"
    target: TargetSelector = TargetSelector.SELF_PLAYER
    amount: int


class ModifyAttackAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF, TargetSelector.HIT_TARGET})
    kind: Literal["modify_attack"] = "modify_attack"
    target: TargetSelector
    amount: int


class CleanseAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF, TargetSelector.ALLY})
    kind: Literal["cleanse"] = "cleanse"
    target: TargetSelector
    statuses: Optional[Tuple[StatusKind, ...]] = Field(
        default=None,
        description="Statuses to remove. Omitted means every cleansable status.",
    )


class ApplyStatusAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF, TargetSelector.ALLY, TargetSelector.HIT_TARGET})
    kind: Literal["apply_status"] = "apply_status"
    target: TargetSelector
    status: StatusKind
    turns: int


class DrawCardAction(_ActionBase):
    allowed_targets = frozenset({TargetSelector.SELF_PLAYER})
    kind: Literal["draw_card"] = "draw_card"
    target: TargetSelector = TargetSelector.SELF_PLAYER
    amount: int


CardAction = Annotated[
    Union[
        GainShieldAction,
        HealAction,
        GainSharesAction,
        ModifyAttackAction,
        CleanseAction,
        ApplyStatusAction,
        DrawCardAction,
    ],
    Field(discriminator="kind"),
]

ACTION_TYPES: Tuple[type, ...] = (
    GainShieldAction,
    HealAction,
    GainSharesAction,
    ModifyAttackAction,
    CleanseAction,
    ApplyStatusAction,
    DrawCardAction,
)


# -------------------------------------------------------------------- triggers
class TriggerDef(BaseModel):
    """Binds one game event to an ordered list of actions."""

    model_config = _MODEL_CONFIG
    when: TriggerEvent
    actions: Tuple[CardAction, ...] = ()
    requires: Tuple[TriggerCondition, ...] = ()
    note: Optional[str] = Field(default=None, description="Authoring note, never read at runtime.")


# -------------------------------------------------------------------- specials
class TauntSpecial(BaseModel):
    model_config = _MODEL_CONFIG
    kind: Literal["taunt"] = "taunt"


class ShieldOnSummonSpecial(BaseModel):
    model_config = _MODEL_CONFIG
    kind: Literal["shield_on_summon"] = "shield_on_summon"
    amount: int


class ResistanceSpecial(BaseModel):
    """Fractional chances (0..1) that a status fails to apply."""

    model_config = _MODEL_CONFIG
    kind: Literal["resistance"] = "resistance"
    stun: Optional[float] = None
    exposed: Optional[float] = None
    atk_down: Optional[float] = Field(default=None, alias="atkDown")

    def as_mapping(self) -> Dict[str, Optional[float]]:
        """Return the resistance values keyed by their JSON names."""

        return {"stun": self.stun, "exposed": self.exposed, "atkDown": self.atk_down}


CardSpecial = Annotated[
    Union[TauntSpecial, ShieldOnSummonSpecial, ResistanceSpecial],
    Field(discriminator="kind"),
]


# ----------------------------------------------------------------------- cards
class UnitStats(BaseModel):
    model_config = _MODEL_CONFIG
    attack: int
    health: int


class CardBase(BaseModel):
    model_config = _MODEL_CONFIG
    id: str
    name: str
    faction: Faction
    description: str = ""
    court_case: Optional[str] = None
    mechanics_summary: Optional[str] = Field(default=None, alias="mechanicsSummary")
    impact_target_rule: Optional[ImpactTargetRule] = Field(default=None, alias="impactTargetRule")
    role: CardRole
    cost_shares: int = Field(alias="costShares")
    dirty_power: Optional[int] = Field(default=None, alias="dirtyPower")
    keywords: Tuple[CardKeyword, ...] = ()
    specials: Tuple[CardSpecial, ...] = ()
    triggers: Tuple[TriggerDef, ...] = ()

    @property
    def is_unit(self) -> bool:
        return False

    def triggers_for(self, event: TriggerEvent) -> Tuple[TriggerDef, ...]:
        """Return the triggers bound to ``event`` in declaration order."""

        return tuple(trigger for trigger in self.triggers if trigger.when is event)

    def has_combat_triggers(self) -> bool:
        return any(trigger.when.is_combat for trigger in self.triggers)

    def resistance(self) -> Optional[ResistanceSpecial]:
        for special in self.specials:
            if isinstance(special, ResistanceSpecial):
                return special
        return None


class UnitCard(CardBase):
    """A card that becomes a unit on the board."""

    kind: Literal["unit"] = "unit"
    lane: LaneSpec
    stats: UnitStats

    @property
    def is_unit(self) -> bool:
        return True

    @property
    def has_taunt(self) -> bool:
        return any(isinstance(special, TauntSpecial) for special in self.specials)

    def summon_shield(self) -> int:
        """Total shield charges granted by ``shield_on_summon`` specials."""

        return sum(special.amount for special in self.specials if isinstance(special, ShieldOnSummonSpecial))


class NonUnitCard(CardBase):
    """Instruments (one-shot plays) and upgrades."""

    kind: Literal["instrument", "upgrade"] = "instrument"


Card = Annotated[Union[UnitCard, NonUnitCard], Field(discriminator="kind")]

CARD_ADAPTER: TypeAdapter[Any] = TypeAdapter(Card)


def get_card_json_schema() -> Dict[str, Any]:
    """Return the JSON schema used to validate raw card payloads."""

    return CARD_ADAPTER.json_schema(by_alias=True)


__all__ = [
    "ACTION_TYPES",
    "COMBAT_EVENTS",
    "ApplyStatusAction",
    "CARD_ADAPTER",
    "Card",
    "CardAction",
    "CardBase",
    "CardKeyword",
    "CardRole",
    "CardSpecial",
    "CleanseAction",
    "DrawCardAction",
    "Faction",
    "GainShieldAction",
    "GainSharesAction",
    "HealAction",
    "ImpactTargetRule",
    "LaneSpec",
    "ModifyAttackAction",
    "NonUnitCard",
    "ResistanceSpecial",
    "ShieldOnSummonSpecial",
    "StatusKind",
    "TargetSelector",
    "TauntSpecial",
    "TriggerCondition",
    "TriggerDef",
    "TriggerEvent",
    "UnitCard",
    "UnitStats",
    "get_card_json_schema",
]
