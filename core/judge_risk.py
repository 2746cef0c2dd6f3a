"""Judge catch chance for dirty plays."""

from __future__ import annotations

from dataclasses import dataclass

MIN_CATCH_CHANCE = 0.05
MAX_CATCH_CHANCE = 0.95


@dataclass(frozen=True)
class JudgeCatchChanceInput:
    dirty_power: float
    probation: float = 0.0
    judge_mood: float = 0.0
    judge_hostility: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_judge_catch_chance(params: JudgeCatchChanceInput) -> float:
    """Probability that the Judge catches a play with the given dirty power.

    Probation stacks without limit, mood is capped at +/-5 and hostility at 8;
    the total always stays within ``[0.05, 0.95]``.
    """

    base = 0.08 + params.dirty_power * 0.09
    probation = max(0.0, params.probation) * 0.07
    mood = _clamp(params.judge_mood, -5, 5) * 0.02
    hostility = _clamp(params.judge_hostility, 0, 8) * 0.025
    return _clamp(base + probation + mood + hostility, MIN_CATCH_CHANCE, MAX_CATCH_CHANCE)


__all__ = ["JudgeCatchChanceInput", "MAX_CATCH_CHANCE", "MIN_CATCH_CHANCE", "compute_judge_catch_chance"]
