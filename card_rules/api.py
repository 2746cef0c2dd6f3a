"""Capability interface the host match engine exposes to the trigger runtime.

The runtime never touches match state directly.  Every read goes through
:meth:`RuntimeApi.get_unit` / :meth:`RuntimeApi.list_side_unit_ids` and every
mutation through one of the methods below, so the runtime can be exercised
against a small recording stub in tests and against :class:`arena.Match`
in the sandbox.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence

from .schema import LaneSpec, StatusKind

SideId = str


class UnitView(Protocol):
    """Read-only view of a unit on the board."""

    id: str
    card_id: str
    name: str
    health: int
    max_health: int
    stunned_until_turn: Optional[int]
    exposed_until_turn: Optional[int]
    temp_attack_penalty: int
    temp_attack_penalty_until_turn: Optional[int]


class RuntimeApi(Protocol):
    """Operations a host must provide to run card triggers."""

    def list_side_unit_ids(self, side: SideId, lane: Optional[LaneSpec] = None) -> List[str]:  # pragma: no cover - protocol
        ...

    def get_unit(self, unit_id: str) -> Optional[UnitView]:  # pragma: no cover - protocol
        ...

    def random_unit_id(self, unit_ids: Sequence[str], label: str) -> Optional[str]:  # pragma: no cover - protocol
        """Pick one id uniformly; ``label`` keys the pick for reproducible replays."""
        ...

    def pick_lowest_health_unit_id(self, unit_ids: Sequence[str]) -> Optional[str]:  # pragma: no cover - protocol
        ...

    def heal_unit(self, unit: UnitView, amount: int) -> int:  # pragma: no cover - protocol
        """Heal ``unit`` and return the amount actually restored."""
        ...

    def add_unit_shield(self, unit: UnitView, charges: int) -> None:  # pragma: no cover - protocol
        ...

    def cleanse_unit(
        self, unit: UnitView, statuses: Optional[Iterable[StatusKind]] = None
    ) -> int:  # pragma: no cover - protocol
        """Remove ``statuses`` (every cleansable status when ``None``); return how many were removed."""
        ...

    def stun_unit_until(self, unit: UnitView, until_turn: int, source_label: str) -> bool:  # pragma: no cover - protocol
        ...

    def expose_unit_until(self, unit: UnitView, until_turn: int, source_label: str) -> bool:  # pragma: no cover - protocol
        ...

    def apply_temporary_attack_penalty(
        self, unit: UnitView, amount: int, until_turn: int, source_label: str
    ) -> int:  # pragma: no cover - protocol
        ...

    def modify_attack(self, unit: UnitView, amount: int) -> int:  # pragma: no cover - protocol
        """Apply a signed attack delta and return the delta actually applied."""
        ...

    def gain_shares(self, side: SideId, amount: int) -> None:  # pragma: no cover - protocol
        ...

    def heal_leader(self, side: SideId, amount: int) -> int:  # pragma: no cover - protocol
        ...

    def draw_one(self, side: SideId) -> Optional[str]:  # pragma: no cover - protocol
        """Draw the top card for ``side``; ``None`` when nothing was drawn."""
        ...

    def push_log(self, text: str) -> None:  # pragma: no cover - protocol
        ...


__all__ = ["RuntimeApi", "SideId", "UnitView"]
