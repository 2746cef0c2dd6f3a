"""Public package interface for the card rules subsystem."""

from .api import RuntimeApi, SideId, UnitView
from .catalog import CardCatalog, merge_card_lists
from .context import CombatContext, RuntimeConfig, TriggerContext, TriggerExecutionState
from .effects import ActionCall, ActionRegistry, registry
from .engine import TriggerRuntime
from .errors import ActionExecutionError, CardNotFoundError, CatalogLoadError, CatalogValidationError
from .loader import (
    CatalogRepository,
    build_catalog,
    load_catalog_from_json,
    load_catalog_from_records,
    load_default_catalog,
    parse_cards,
)
from .resistance import ResistanceProfile, ResistanceTable
from .schema import (
    Card,
    CardAction,
    CardBase,
    NonUnitCard,
    StatusKind,
    TargetSelector,
    TriggerCondition,
    TriggerDef,
    TriggerEvent,
    UnitCard,
    get_card_json_schema,
)
from .targeting import unit_has_status, unit_matches_statuses
from .validators import CardValidationIssue, assert_valid_catalog, validate_card, validate_catalog

__all__ = [
    "ActionCall",
    "ActionExecutionError",
    "ActionRegistry",
    "Card",
    "CardAction",
    "CardBase",
    "CardCatalog",
    "CardNotFoundError",
    "CardValidationIssue",
    "CatalogLoadError",
    "CatalogRepository",
    "CatalogValidationError",
    "CombatContext",
    "NonUnitCard",
    "ResistanceProfile",
    "ResistanceTable",
    "RuntimeApi",
    "RuntimeConfig",
    "SideId",
    "StatusKind",
    "TargetSelector",
    "TriggerCondition",
    "TriggerContext",
    "TriggerDef",
    "TriggerEvent",
    "TriggerExecutionState",
    "TriggerRuntime",
    "UnitCard",
    "UnitView",
    "assert_valid_catalog",
    "build_catalog",
    "get_card_json_schema",
    "load_catalog_from_json",
    "load_catalog_from_records",
    "load_default_catalog",
    "merge_card_lists",
    "parse_cards",
    "registry",
    "unit_has_status",
    "unit_matches_statuses",
    "validate_card",
    "validate_catalog",
]
