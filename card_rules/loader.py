"""Helpers for building card catalogs from JSON files and database-like records."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from .catalog import CardCatalog
from .errors import CatalogLoadError, CatalogValidationError
from .schema import CARD_ADAPTER, CardBase
from .validators import CardValidationIssue, validate_catalog

logger = logging.getLogger(__name__)

CATALOG_ENV_VAR = "CARD_RULES_CATALOG"
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.json"

_CARD_KINDS = {"unit", "instrument", "upgrade"}


def _format_location(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _CARD_KINDS:
        parts = parts[1:]
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "card"


def _structural_issues(exc: ValidationError, card_id: Optional[str]) -> List[CardValidationIssue]:
    return [
        CardValidationIssue(_format_location(error["loc"]), error["msg"], card_id)
        for error in exc.errors()
    ]


def _card_entries(payload: Any) -> Sequence[Any]:
    if isinstance(payload, Mapping) and "cards" in payload:
        payload = payload["cards"]
    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        raise CatalogLoadError("Card payload must be a list of cards or a mapping with a 'cards' list")
    return payload


def parse_cards(payload: Any) -> Tuple[List[CardBase], List[CardValidationIssue]]:
    """Parse raw card mappings without stopping at the first malformed entry.

    Returns the cards that parsed and the structural issues of those that did
    not.  Semantic invariants are not checked here.
    """

    cards: List[CardBase] = []
    issues: List[CardValidationIssue] = []
    for index, entry in enumerate(_card_entries(payload)):
        if isinstance(entry, CardBase):
            cards.append(entry)
            continue
        if not isinstance(entry, Mapping):
            issues.append(CardValidationIssue(f"cards[{index}]", "Card entry must be a mapping."))
            continue
        raw_id = entry.get("id")
        card_id = raw_id if isinstance(raw_id, str) else None
        try:
            cards.append(CARD_ADAPTER.validate_python(entry))
        except ValidationError as exc:
            issues.extend(_structural_issues(exc, card_id))
    return cards, issues


def build_catalog(payload: Any) -> CardCatalog:
    """Parse and validate ``payload`` into a :class:`CardCatalog`.

    Structural and semantic issues are reported together in one
    :class:`CatalogValidationError`; a catalog is never partially built.
    """

    cards, issues = parse_cards(payload)
    if issues:
        raise CatalogValidationError(issues + validate_catalog(cards))
    return CardCatalog(cards)


def load_catalog_from_json(path: Path) -> CardCatalog:
    """Load a catalog from a JSON file on disk."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogLoadError(f"Cannot read card catalog from {path}: {exc}") from exc
    catalog = build_catalog(payload)
    logger.debug("Loaded %d cards from %s", len(catalog), path)
    return catalog


def load_catalog_from_records(records: Iterable[Mapping[str, Any]]) -> CardCatalog:
    """Load a catalog from database-like rows carrying the card under ``payload``."""

    entries: List[Any] = []
    for record in records:
        data = dict(record).get("payload", record)
        if not isinstance(data, Mapping):
            raise CatalogLoadError("Database record payload must be a mapping")
        entries.append(data)
    return build_catalog(entries)


def default_catalog_path() -> Path:
    override = os.environ.get(CATALOG_ENV_VAR)
    if override:
        return Path(override)
    return DEFAULT_CATALOG_PATH


def load_default_catalog() -> CardCatalog:
    """Load the packaged sample catalog, or the file named by ``CARD_RULES_CATALOG``."""

    return load_catalog_from_json(default_catalog_path())


class CatalogRepository:
    """Caches catalogs loaded from JSON files until the file changes on disk."""

    def __init__(self) -> None:
        self._catalogs: Dict[Path, CardCatalog] = {}
        self._timestamps: Dict[Path, int] = {}

    def load(self, path: Path, *, force: bool = False) -> CardCatalog:
        path = Path(path)
        try:
            current_timestamp = path.stat().st_mtime_ns
        except OSError as exc:
            raise CatalogLoadError(f"Cannot read card catalog from {path}: {exc}") from exc
        cached = self._catalogs.get(path)
        if cached is not None and not force and self._timestamps[path] >= current_timestamp:
            return cached
        catalog = load_catalog_from_json(path)
        self._catalogs[path] = catalog
        self._timestamps[path] = current_timestamp
        return catalog

    def clear(self) -> None:
        self._catalogs.clear()
        self._timestamps.clear()


__all__ = [
    "CATALOG_ENV_VAR",
    "CatalogRepository",
    "DEFAULT_CATALOG_PATH",
    "build_catalog",
    "default_catalog_path",
    "load_catalog_from_json",
    "load_catalog_from_records",
    "load_default_catalog",
    "parse_cards",
]
