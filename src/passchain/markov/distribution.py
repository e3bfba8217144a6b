"""Player-indexed probability vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from passchain.exceptions import AlignmentError
from passchain.markov.roster import RosterSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from passchain.adapters.lineups import PlayerLookup


@dataclass(frozen=True, slots=True, eq=False)
class Distribution:
    """A probability vector indexed by a :class:`RosterSnapshot`.

    ``values[i]`` is the probability mass of ``roster.players[i]``. The
    array is copied and made read-only on construction.

    Attributes:
        roster: Player ordering of the vector.
        values: Array of shape ``(len(roster),)``.
    """

    roster: RosterSnapshot
    values: np.ndarray

    def __post_init__(self) -> None:
        """Freeze the value array and check its shape."""
        values = np.array(self.values, dtype=float)
        if values.shape != (len(self.roster),):
            msg = (
                f"Distribution values have shape {values.shape}, "
                f"expected ({len(self.roster)},)"
            )
            raise ValueError(msg)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def players(self) -> tuple[str, ...]:
        """Player identifiers in vector order."""
        return self.roster.players

    @property
    def total(self) -> float:
        """Sum of all entries."""
        return float(self.values.sum())

    def __len__(self) -> int:
        return len(self.roster)

    def __getitem__(self, player: str) -> float:
        return float(self.values[self.roster.index_of(player)])

    def as_dict(self) -> dict[str, float]:
        """Return ``{player: probability}`` in vector order."""
        return {p: float(v) for p, v in zip(self.players, self.values, strict=True)}

    def reindex(self, players: Iterable[str]) -> Distribution:
        """Return the entries for *players*, in that order.

        The result is not renormalised: restricting to a subset of
        players keeps the original probability masses.

        Raises:
            AlignmentError: If any of *players* is absent.
        """
        order = tuple(players)
        missing = [p for p in order if p not in self.roster]
        if missing:
            msg = f"Players {missing} are absent from the distribution"
            raise AlignmentError(msg)
        idx = [self.roster.index_of(p) for p in order]
        return Distribution(RosterSnapshot(order), self.values[idx])

    def to_frame(
        self,
        value_name: str = "probability",
        decimals: int | None = None,
        sort_descending: bool = False,
        lookup: PlayerLookup | None = None,
    ) -> pl.DataFrame:
        """Render the distribution as a two- or three-column table.

        Args:
            value_name: Name of the probability column.
            decimals: Round values for display; ``None`` keeps full
                precision.
            sort_descending: Sort rows by probability, highest first.
            lookup: If given, add a ``player_nickname`` column.

        Returns:
            Table with ``player_name`` [, ``player_nickname``] and
            *value_name* columns.
        """
        values = self.values if decimals is None else np.round(self.values, decimals)
        columns: dict[str, list[object]] = {"player_name": list(self.players)}
        if lookup is not None:
            columns["player_nickname"] = lookup.nicknames(self.players)
        columns[value_name] = [float(v) for v in values]
        frame = pl.DataFrame(columns)
        if sort_descending:
            frame = frame.sort(value_name, descending=True, maintain_order=True)
        return frame
