import pytest

from card_rules.errors import CatalogValidationError
from card_rules.loader import load_default_catalog
from card_rules.schema import CARD_ADAPTER
from card_rules.validators import assert_valid_catalog, validate_card, validate_catalog


def issue_paths(issues):
    return [issue.path for issue in issues]


def test_packaged_catalog_is_valid() -> None:
    catalog = load_default_catalog()
    assert validate_catalog(list(catalog)) == []


@pytest.mark.parametrize("lane", ["back", "both"])
def test_taunt_requires_front_lane(build_card, lane) -> None:
    card = build_card("wall", lane=lane, specials=[{"kind": "taunt"}])
    issues = validate_card(card)
    assert [issue.message for issue in issues] == ["Taunt units must use the front lane."]
    assert issues[0].path == "specials[0]"


def test_taunt_on_front_lane_is_accepted(build_card) -> None:
    assert validate_card(build_card("wall", lane="front", specials=[{"kind": "taunt"}])) == []


def test_resistance_out_of_range_mentions_fraction(build_card) -> None:
    card = build_card("tough", specials=[{"kind": "resistance", "stun": 50}])
    issues = validate_card(card)
    assert issue_paths(issues) == ["specials.resistance.stun"]
    assert "0..1" in issues[0].message


def test_resistance_needs_a_value(build_card) -> None:
    issues = validate_card(build_card("tough", specials=[{"kind": "resistance"}]))
    assert issue_paths(issues) == ["specials.resistance"]


def test_duplicate_specials_are_flagged(build_card) -> None:
    card = build_card(
        "double",
        lane="front",
        specials=[
            {"kind": "taunt"},
            {"kind": "taunt"},
            {"kind": "resistance", "stun": 0.1},
            {"kind": "resistance", "exposed": 0.1},
        ],
    )
    messages = [issue.message for issue in validate_card(card)]
    assert "Only one taunt special is allowed per card." in messages
    assert "Only one resistance special is allowed per card." in messages


def test_requires_only_on_combat_triggers(build_card) -> None:
    card = build_card(
        "gated",
        triggers=[
            {"when": "turn_start", "requires": ["source_survived"], "actions": [{"kind": "heal", "target": "self", "amount": 1}]},
            {"when": "after_combat_survived", "requires": ["source_survived"], "actions": [{"kind": "heal", "target": "self", "amount": 1}]},
        ],
    )
    assert issue_paths(validate_card(card)) == ["triggers[0].requires"]


def test_hit_target_only_in_combat_triggers(build_card) -> None:
    card = build_card(
        "sniper",
        triggers=[
            {"when": "on_summon", "actions": [{"kind": "apply_status", "target": "hit_target", "status": "stun", "turns": 1}]},
        ],
    )
    issues = validate_card(card)
    assert issue_paths(issues) == ["triggers[0].actions[0].target"]
    assert issues[0].message == "hit_target can only be used in combat triggers."


def test_numeric_payload_rules(build_card) -> None:
    card = build_card(
        "numbers",
        triggers=[
            {
                "when": "on_hit",
                "actions": [
                    {"kind": "heal", "target": "self", "amount": 0},
                    {"kind": "modify_attack", "target": "self", "amount": 0},
                    {"kind": "apply_status", "target": "hit_target", "status": "exposed", "turns": -1},
                    {"kind": "draw_card", "amount": -2},
                ],
            }
        ],
    )
    assert issue_paths(validate_card(card)) == [
        "triggers[0].actions[0].amount",
        "triggers[0].actions[1].amount",
        "triggers[0].actions[2].turns",
        "triggers[0].actions[3].amount",
    ]


def test_negative_attack_modifier_is_valid(build_card) -> None:
    card = build_card(
        "debuffer",
        triggers=[{"when": "on_hit", "actions": [{"kind": "modify_attack", "target": "hit_target", "amount": -2}]}],
    )
    assert validate_card(card) == []


def test_empty_trigger_and_card_fields(build_card) -> None:
    card = build_card(
        "sloppy",
        description=" ",
        court_case=None,
        costShares=-5,
        keywords=["rush", "rush"],
        stats={"attack": 0, "health": 3},
        triggers=[{"when": "on_summon", "actions": []}],
    )
    assert issue_paths(validate_card(card)) == [
        "description",
        "court_case",
        "costShares",
        "keywords",
        "stats.attack",
        "triggers[0].actions",
    ]


def test_non_unit_cards_reject_unit_specials(card_payload) -> None:
    card = CARD_ADAPTER.validate_python(
        {
            **{key: value for key, value in card_payload("spell").items() if key not in {"lane", "stats"}},
            "kind": "instrument",
            "specials": [{"kind": "shield_on_summon", "amount": 1}],
        }
    )
    paths = issue_paths(validate_card(card))
    assert "specials" in paths
    assert "specials[0]" in paths


def test_duplicate_ids_and_aggregate_error(build_card) -> None:
    cards = [
        build_card("twin"),
        build_card("twin"),
        build_card("broken", specials=[{"kind": "resistance", "exposed": 2}]),
    ]
    issues = validate_catalog(cards)
    assert issue_paths(issues) == ["cards[1].id", "specials.resistance.exposed"]

    with pytest.raises(CatalogValidationError) as excinfo:
        assert_valid_catalog(cards)
    message = str(excinfo.value)
    assert message.splitlines()[0] == "Invalid card catalog:"
    assert '[twin] cards[1].id: Duplicate card id "twin" in catalog.' in message
    assert "[broken] specials.resistance.exposed:" in message
    assert len(excinfo.value.issues) == 2


def test_validator_is_idempotent(build_card) -> None:
    cards = [build_card("wall", lane="back", specials=[{"kind": "taunt"}]), build_card("wall")]
    assert validate_catalog(cards) == validate_catalog(cards)
