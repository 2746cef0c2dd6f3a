import json
import os
from pathlib import Path

import pytest

from card_rules.errors import CatalogLoadError, CatalogValidationError
from card_rules.loader import (
    CATALOG_ENV_VAR,
    CatalogRepository,
    build_catalog,
    default_catalog_path,
    load_catalog_from_json,
    load_catalog_from_records,
    load_default_catalog,
    parse_cards,
)


def write_catalog(path: Path, cards) -> Path:
    path.write_text(json.dumps({"cards": cards}), encoding="utf8")
    return path


def test_load_from_json_accepts_list_or_mapping(tmp_path: Path, card_payload) -> None:
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps([card_payload("alpha")]))
    as_mapping = write_catalog(tmp_path / "mapping.json", [card_payload("beta")])

    assert load_catalog_from_json(as_list).ids() == ["alpha"]
    assert load_catalog_from_json(as_mapping).ids() == ["beta"]


def test_load_from_records_reads_payload_column(card_payload) -> None:
    catalog = load_catalog_from_records([{"payload": card_payload("alpha"), "version": "1"}, card_payload("beta")])
    assert catalog.ids() == ["alpha", "beta"]


def test_records_with_non_mapping_payload_fail() -> None:
    with pytest.raises(CatalogLoadError):
        load_catalog_from_records([{"payload": "alpha"}])


def test_structural_and_semantic_issues_are_reported_together(card_payload) -> None:
    payload = [
        card_payload("no_stats", stats={"attack": 1}),
        card_payload("wall", lane="back", specials=[{"kind": "taunt"}]),
        card_payload("bad_target", triggers=[{"when": "on_summon", "actions": [{"kind": "gain_shares", "target": "ally", "amount": 1}]}]),
    ]
    with pytest.raises(CatalogValidationError) as excinfo:
        build_catalog(payload)

    formatted = [issue.format() for issue in excinfo.value.issues]
    assert "[no_stats] stats.health: Field required" in formatted
    assert "[wall] specials[0]: Taunt units must use the front lane." in formatted
    assert any(line.startswith("[bad_target] triggers[0].actions[0]") for line in formatted)


def test_parse_cards_skips_broken_entries(card_payload) -> None:
    cards, issues = parse_cards([card_payload("alpha"), 42])
    assert [card.id for card in cards] == ["alpha"]
    assert [issue.path for issue in issues] == ["cards[1]"]


def test_bad_payload_shape_raises_load_error() -> None:
    with pytest.raises(CatalogLoadError):
        build_catalog({"not_cards": []})
    with pytest.raises(CatalogLoadError):
        build_catalog("cards")


def test_unreadable_file_raises_load_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(CatalogLoadError):
        load_catalog_from_json(broken)
    with pytest.raises(CatalogLoadError):
        load_catalog_from_json(tmp_path / "missing.json")


def test_repository_caches_until_file_changes(tmp_path: Path, card_payload) -> None:
    repo = CatalogRepository()
    path = write_catalog(tmp_path / "cards.json", [card_payload("alpha", name="Old")])
    first = repo.load(path)
    assert first.require("alpha").name == "Old"

    write_catalog(path, [card_payload("alpha", name="New")])
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns - 10_000_000_000))
    assert repo.load(path) is first

    assert repo.load(path, force=True).require("alpha").name == "New"

    write_catalog(path, [card_payload("alpha", name="Newest")])
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 20_000_000_000))
    assert repo.load(path).require("alpha").name == "Newest"

    repo.clear()
    assert repo.load(path) is not first


def test_default_catalog_honours_environment(tmp_path: Path, monkeypatch, card_payload) -> None:
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)
    default = load_default_catalog()
    assert "compliance_clerk" in default

    custom = write_catalog(tmp_path / "custom.json", [card_payload("only_card")])
    monkeypatch.setenv(CATALOG_ENV_VAR, str(custom))
    assert default_catalog_path() == custom
    assert load_default_catalog().ids() == ["only_card"]
