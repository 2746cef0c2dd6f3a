"""Shared helpers: error types, logging setup, randomness and judge risk."""

from .errors import ErrorDetails, GameRuleViolation, IllegalActionError, UnitNotFoundError
from .judge_risk import JudgeCatchChanceInput, compute_judge_catch_chance
from .logging_config import setup_logging
from .random_control import generator_for_label, seed_everything, spawn_seed_sequence

__all__ = [
    "ErrorDetails",
    "GameRuleViolation",
    "IllegalActionError",
    "JudgeCatchChanceInput",
    "UnitNotFoundError",
    "compute_judge_catch_chance",
    "generator_for_label",
    "seed_everything",
    "setup_logging",
    "spawn_seed_sequence",
]
