"""Custom exceptions raised by the card rules subsystem."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .validators import CardValidationIssue


class CatalogValidationError(ValueError):
    """Raised when a card catalog violates one or more DSL invariants.

    Every issue found across the whole catalog is attached, so a single
    failed load reports all problems at once.
    """

    def __init__(self, issues: Sequence["CardValidationIssue"]) -> None:
        lines = "\n".join(issue.format() for issue in issues)
        super().__init__(f"Invalid card catalog:\n{lines}")
        self.issues: Tuple["CardValidationIssue", ...] = tuple(issues)


class CatalogLoadError(RuntimeError):
    """Raised when a catalog source cannot be read or has an unexpected shape."""


class CardNotFoundError(KeyError):
    """Raised when a requested card identifier is not part of the catalog."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card '{card_id}' not found")
        self.card_id = card_id


class ActionExecutionError(RuntimeError):
    """Raised when the runtime meets an action node it has no handler for."""


__all__ = [
    "ActionExecutionError",
    "CardNotFoundError",
    "CatalogLoadError",
    "CatalogValidationError",
]
