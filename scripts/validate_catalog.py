"""Validate a card catalog JSON file and report every invariant violation."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from card_rules.errors import CatalogLoadError, CatalogValidationError  # noqa: E402  - local path injection happens above
from card_rules.keywords import describe_keywords  # noqa: E402
from card_rules.loader import default_catalog_path, load_catalog_from_json  # noqa: E402
from card_rules.resistance import ResistanceTable  # noqa: E402
from card_rules.schema import get_card_json_schema  # noqa: E402
from core.logging_config import setup_logging  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load a card catalog and check the card DSL invariants")
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Catalog JSON file (defaults to $CARD_RULES_CATALOG or the packaged sample catalog)",
    )
    parser.add_argument("--schema", action="store_true", help="Print the card JSON schema and exit")
    parser.add_argument("--details", action="store_true", help="List every card with its keywords and resistance")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging for the card runtime")
    args = parser.parse_args(argv)

    logger = setup_logging(logging.INFO, verbose_modules=("card_rules",) if args.verbose else ())

    if args.schema:
        print(json.dumps(get_card_json_schema(), indent=2, sort_keys=True))
        return 0

    path = Path(args.path) if args.path else default_catalog_path()
    try:
        catalog = load_catalog_from_json(path)
    except CatalogLoadError as exc:
        logger.error("%s", exc)
        return 2
    except CatalogValidationError as exc:
        print(exc, file=sys.stderr)
        print(f"{len(exc.issues)} issue(s) found in {path}", file=sys.stderr)
        return 1

    units = sum(1 for card in catalog if card.is_unit)
    print(f"{path}: {len(catalog)} cards ({units} units, {len(catalog) - units} non-unit) OK")
    if args.details:
        resistance = ResistanceTable(catalog)
        for card in catalog:
            print(f"- {card.id} [{card.faction.value}/{card.role.value}] {resistance.summary(card.id)}")
            for line in describe_keywords(card.keywords):
                print(f"    {line}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
