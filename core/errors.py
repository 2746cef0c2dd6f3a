"""Custom exception types raised by match hosts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ErrorDetails:
    """Structured metadata associated with an exception."""

    code: str
    message: str


class GameRuleViolation(Exception):
    """Base class for match rule exceptions."""

    error_code = "ERR_RULE_VIOLATION"

    def __init__(self, message: str, *, details: ErrorDetails | None = None) -> None:
        super().__init__(message)
        self.details = details or ErrorDetails(code=self.error_code, message=message)

    @property
    def code(self) -> str:
        return self.details.code


class IllegalActionError(GameRuleViolation):
    """Raised when a host is asked to perform an operation the board does not allow."""

    error_code = "ERR_ILLEGAL_ACTION"


class UnitNotFoundError(IllegalActionError):
    """Raised when an operation names a unit that is not on the board."""

    error_code = "ERR_UNIT_NOT_FOUND"

    def __init__(self, unit_id: str) -> None:
        super().__init__(f"Unit '{unit_id}' is not on the board")
        self.unit_id = unit_id


__all__ = ["ErrorDetails", "GameRuleViolation", "IllegalActionError", "UnitNotFoundError"]
