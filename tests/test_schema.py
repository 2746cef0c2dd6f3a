import pytest
from pydantic import ValidationError

from card_rules.schema import (
    CARD_ADAPTER,
    CleanseAction,
    GainSharesAction,
    LaneSpec,
    NonUnitCard,
    StatusKind,
    TargetSelector,
    TriggerEvent,
    UnitCard,
    get_card_json_schema,
)


def test_unit_card_parses_camel_case_aliases(card_payload) -> None:
    card = CARD_ADAPTER.validate_python(
        card_payload(
            "broker",
            costShares=115,
            dirtyPower=1,
            specials=[{"kind": "resistance", "atkDown": 0.2}],
        )
    )
    assert isinstance(card, UnitCard)
    assert card.cost_shares == 115
    assert card.dirty_power == 1
    assert card.lane is LaneSpec.BACK
    assert card.resistance().atk_down == pytest.approx(0.2)
    assert card.is_unit is True


def test_non_unit_card_kind_discriminator() -> None:
    card = CARD_ADAPTER.validate_python(
        {
            "id": "fine_schedule",
            "name": "Fine Schedule",
            "faction": "sec",
            "kind": "upgrade",
            "role": "utility",
            "costShares": 90,
            "impactTargetRule": "enemy-unit",
        }
    )
    assert isinstance(card, NonUnitCard)
    assert card.kind == "upgrade"
    assert card.is_unit is False


def test_action_target_must_match_kind(card_payload) -> None:
    payload = card_payload(
        "bad",
        triggers=[{"when": "on_summon", "actions": [{"kind": "heal", "target": "hit_target", "amount": 1}]}],
    )
    with pytest.raises(ValidationError) as excinfo:
        CARD_ADAPTER.validate_python(payload)
    assert "not valid for 'heal'" in str(excinfo.value)


def test_unknown_action_kind_is_rejected(card_payload) -> None:
    payload = card_payload(
        "bad", triggers=[{"when": "on_summon", "actions": [{"kind": "explode", "target": "self"}]}]
    )
    with pytest.raises(ValidationError):
        CARD_ADAPTER.validate_python(payload)


def test_extra_fields_are_forbidden(card_payload) -> None:
    with pytest.raises(ValidationError):
        CARD_ADAPTER.validate_python(card_payload("bad", flavor="nope"))


def test_player_actions_default_to_self_player() -> None:
    action = GainSharesAction(amount=3)
    assert action.target is TargetSelector.SELF_PLAYER


def test_cleanse_statuses_are_optional() -> None:
    assert CleanseAction(target=TargetSelector.SELF).statuses is None
    cleanse = CleanseAction(target=TargetSelector.ALLY, statuses=["stun"])
    assert cleanse.statuses == (StatusKind.STUN,)


def test_triggers_for_keeps_declaration_order(build_card) -> None:
    card = build_card(
        "ordered",
        triggers=[
            {"when": "turn_start", "actions": [{"kind": "heal", "target": "self", "amount": 1}], "note": "first"},
            {"when": "on_hit", "actions": [{"kind": "gain_shares", "amount": 2}]},
            {"when": "turn_start", "actions": [{"kind": "heal", "target": "self", "amount": 2}], "note": "second"},
        ],
    )
    notes = [trigger.note for trigger in card.triggers_for(TriggerEvent.TURN_START)]
    assert notes == ["first", "second"]
    assert card.has_combat_triggers() is True
    assert TriggerEvent.ON_KILL.is_combat and not TriggerEvent.ON_SUMMON.is_combat


def test_cards_are_frozen(build_card) -> None:
    card = build_card("frozen")
    with pytest.raises(ValidationError):
        card.name = "Thawed"


def test_summon_shield_and_taunt_helpers(build_card) -> None:
    card = build_card(
        "wall",
        lane="front",
        specials=[{"kind": "taunt"}, {"kind": "shield_on_summon", "amount": 2}],
    )
    assert card.has_taunt is True
    assert card.summon_shield() == 2


def test_json_schema_uses_aliases() -> None:
    schema = get_card_json_schema()
    rendered = str(schema)
    assert "costShares" in rendered
    assert "cost_shares" not in rendered
