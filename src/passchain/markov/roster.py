"""Frozen player ordering shared by every matrix and vector of a run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from passchain.exceptions import RosterError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from passchain.adapters.schemas import PassEvent


@dataclass(frozen=True, slots=True)
class RosterSnapshot:
    """The ordered set of players active in one analysis window.

    Matrix row/column ``i`` and vector entry ``i`` always refer to
    ``players[i]``. The identifier -> index map is only consulted at
    the boundary, when translating passes or queries.

    Attributes:
        players: Player identifiers in index order.
    """

    players: tuple[str, ...]
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate uniqueness and build the identifier -> index map."""
        if len(set(self.players)) != len(self.players):
            msg = f"Roster contains duplicate players: {self.players}"
            raise RosterError(msg)
        object.__setattr__(
            self, "_index", {player: i for i, player in enumerate(self.players)}
        )

    @classmethod
    def from_passes(cls, passes: Iterable[PassEvent]) -> RosterSnapshot:
        """Build a roster from every actor and recipient in *passes*.

        Players are ordered by identifier so the same window always
        yields the same ordering.
        """
        players: set[str] = set()
        for p in passes:
            players.add(p.actor)
            if p.recipient is not None:
                players.add(p.recipient)
        return cls(tuple(sorted(players)))

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self) -> Iterator[str]:
        return iter(self.players)

    def __contains__(self, player: object) -> bool:
        return player in self._index

    def index_of(self, player: str) -> int:
        """Return the matrix index of *player*.

        Raises:
            RosterError: If *player* is not in the roster.
        """
        try:
            return self._index[player]
        except KeyError:
            msg = f"Player {player!r} is not part of the roster snapshot"
            raise RosterError(msg) from None

    def without(self, excluded: Iterable[str]) -> RosterSnapshot:
        """Return a new roster with *excluded* players removed."""
        dropped = set(excluded)
        return RosterSnapshot(tuple(p for p in self.players if p not in dropped))
