"""Utilities that centralise the project's randomness handling.

Random picks made by card effects are keyed by a stable label instead of
drawing from one shared stream.  :func:`generator_for_label` turns a root
seed plus a label into its own generator, so the same match seed replays
the same choices no matter how many unrelated rolls happened before.
"""

from __future__ import annotations

import hashlib
import os
import random
from typing import List, Optional, Union

import numpy as np

SeedLike = Union[int, np.random.SeedSequence]

_GLOBAL_SEED: Optional[int] = None
_GLOBAL_SEED_SEQUENCE: np.random.SeedSequence = np.random.SeedSequence()


def seed_everything(seed: Optional[int]) -> int:
    """Seed Python's ``random`` module, NumPy and the root seed sequence.

    Parameters
    ----------
    seed:
        The value to seed every RNG with.  When *None*, a seed derived from
        :func:`os.urandom` is used which keeps the RNGs in a valid state but
        does not guarantee reproducibility.

    Returns the seed that was applied.
    """

    global _GLOBAL_SEED, _GLOBAL_SEED_SEQUENCE

    if seed is None:
        seed = int.from_bytes(os.urandom(8), "big")

    _GLOBAL_SEED = int(seed)
    random.seed(seed)
    np.random.seed(seed % 2**32)
    _GLOBAL_SEED_SEQUENCE = np.random.SeedSequence(_GLOBAL_SEED)
    return _GLOBAL_SEED


def current_seed() -> Optional[int]:
    return _GLOBAL_SEED


def spawn_seed_sequence() -> np.random.SeedSequence:
    """Return a child seed sequence derived from the global configuration."""

    return _GLOBAL_SEED_SEQUENCE.spawn(1)[0]


def generator_from_seed_sequence(seed_sequence: np.random.SeedSequence) -> np.random.Generator:
    """Create a new generator initialised with ``seed_sequence``."""

    return np.random.Generator(np.random.PCG64(seed_sequence))


def label_entropy(label: str) -> int:
    """Stable 64-bit integer derived from ``label`` (independent of ``PYTHONHASHSEED``)."""

    digest = hashlib.sha256(label.encode("utf8")).digest()
    return int.from_bytes(digest[:8], "big")


def _root_entropy(root: SeedLike) -> List[int]:
    if isinstance(root, np.random.SeedSequence):
        entropy = root.entropy
        if entropy is None:  # pragma: no cover - SeedSequence always fills entropy
            raise ValueError("Seed sequence has no entropy")
        base = [entropy] if isinstance(entropy, int) else [int(value) for value in entropy]
        return base + [int(key) for key in root.spawn_key]
    return [int(root)]


def generator_for_label(root: SeedLike, label: str) -> np.random.Generator:
    """Return a generator determined only by ``root`` and ``label``."""

    sequence = np.random.SeedSequence([*_root_entropy(root), label_entropy(label)])
    return generator_from_seed_sequence(sequence)


def uniform_for_label(root: SeedLike, label: str) -> float:
    """Single float in ``[0, 1)`` keyed by ``label``."""

    return float(generator_for_label(root, label).random())


__all__ = [
    "SeedLike",
    "current_seed",
    "generator_for_label",
    "generator_from_seed_sequence",
    "label_entropy",
    "seed_everything",
    "spawn_seed_sequence",
    "uniform_for_label",
]
