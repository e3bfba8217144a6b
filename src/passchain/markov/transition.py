"""Transition probability matrix estimation from filtered passes.

The matrix is built in two pure steps: a fold of the pass sequence into
pairwise counts, then a row-wise normalisation of the counts into
probabilities ``P[i, j] = sent(i, j) / sent(i)``.

A player with no outgoing passes in the window would leave an all-zero
row (a *dangling state*) and break the row-stochastic invariant that the
steady-state analysis relies on. Such rows are never zero-filled: the
builder either raises :class:`DanglingStateError` or, under the
``"exclude"`` policy, drops the players from the roster and rebuilds.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from passchain.config import DANGLING_POLICIES
from passchain.exceptions import DanglingStateError, EmptyWindowError
from passchain.markov.roster import RosterSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from passchain.adapters.lineups import PlayerLookup
    from passchain.adapters.schemas import PassEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class TransitionMatrix:
    """Row-stochastic pass transition matrix over a roster snapshot.

    ``probabilities[i, j]`` estimates P(next recipient = j | current
    holder = i). Full precision is kept; rounding happens only in
    :meth:`to_frame`.

    Attributes:
        roster: Player ordering of rows and columns.
        counts: Pairwise pass counts, shape ``(n, n)``.
        probabilities: Row-normalised counts, shape ``(n, n)``.
        excluded_players: Players dropped as dangling states under the
            ``"exclude"`` policy.
    """

    roster: RosterSnapshot
    counts: np.ndarray
    probabilities: np.ndarray
    excluded_players: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Freeze the arrays."""
        for name in ("counts", "probabilities"):
            array = np.array(getattr(self, name))
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    @property
    def players(self) -> tuple[str, ...]:
        """Player identifiers in row/column order."""
        return self.roster.players

    @property
    def sent(self) -> np.ndarray:
        """Total outgoing passes per player."""
        return self.counts.sum(axis=1)

    @property
    def row_sums(self) -> np.ndarray:
        """Row sums of the probability matrix (all 1 for a valid TPM)."""
        return self.probabilities.sum(axis=1)

    def probability(self, source: str, target: str) -> float:
        """Return the one-step probability of a pass from *source* to *target*."""
        i = self.roster.index_of(source)
        j = self.roster.index_of(target)
        return float(self.probabilities[i, j])

    def to_frame(
        self,
        decimals: int = 4,
        lookup: PlayerLookup | None = None,
    ) -> pl.DataFrame:
        """Render the matrix with one row per passer.

        Recipient columns are keyed by player name, which is unique per
        roster; nicknames only fill the ``player_nickname`` column.

        Args:
            decimals: Display rounding.
            lookup: If given, adds a ``player_nickname`` column.

        Returns:
            Table with ``player_name`` [, ``player_nickname``] and one
            probability column per recipient.
        """
        rounded = np.round(self.probabilities, decimals)
        columns: dict[str, list[object]] = {"player_name": list(self.players)}
        if lookup is not None:
            columns["player_nickname"] = lookup.nicknames(self.players)
        for j, player in enumerate(self.players):
            columns[player] = [float(v) for v in rounded[:, j]]
        return pl.DataFrame(columns)


def count_passes(passes: Iterable[PassEvent], roster: RosterSnapshot) -> np.ndarray:
    """Fold passes into a ``(n, n)`` matrix of pairwise counts.

    Passes without a recipient are ignored.

    Raises:
        RosterError: If a pass names a player outside *roster*.
    """
    pair_counts = Counter(
        (roster.index_of(p.actor), roster.index_of(p.recipient))
        for p in passes
        if p.recipient is not None
    )
    n = len(roster)
    return np.array(
        [[pair_counts.get((i, j), 0) for j in range(n)] for i in range(n)],
        dtype=np.int64,
    ).reshape(n, n)


def _dangling_players(roster: RosterSnapshot, counts: np.ndarray) -> list[str]:
    return [roster.players[i] for i in np.flatnonzero(counts.sum(axis=1) == 0)]


def build_transition_matrix(
    passes: Sequence[PassEvent],
    roster: RosterSnapshot | None = None,
    dangling_policy: str = "raise",
) -> TransitionMatrix:
    """Estimate the transition probability matrix from *passes*.

    Args:
        passes: Filtered passes of the estimation window.
        roster: Player ordering. Defaults to every actor and recipient
            appearing in *passes*.
        dangling_policy: ``"raise"`` to reject players with no outgoing
            passes, ``"exclude"`` to drop them (and the passes they
            receive) until every row is stochastic.

    Returns:
        A :class:`TransitionMatrix` whose rows each sum to 1.

    Raises:
        ValueError: If *dangling_policy* is unknown.
        EmptyWindowError: If there are no passes to count.
        DanglingStateError: If a dangling row remains under ``"raise"``,
            or exclusion empties the roster.
        RosterError: If a pass names a player outside *roster*.
    """
    if dangling_policy not in DANGLING_POLICIES:
        msg = (
            f"dangling_policy must be one of {DANGLING_POLICIES}, "
            f"got {dangling_policy!r}"
        )
        raise ValueError(msg)

    if roster is None:
        roster = RosterSnapshot.from_passes(passes)
    if not passes or len(roster) == 0:
        msg = "No qualifying passes in the window; cannot build a transition matrix"
        raise EmptyWindowError(msg)

    excluded: list[str] = []
    counts = count_passes(passes, roster)
    dangling = _dangling_players(roster, counts)

    while dangling:
        if dangling_policy == "raise":
            msg = (
                f"Dangling states: {dangling} made no outgoing passes in the "
                "window, so their transition rows cannot sum to 1. Choose a "
                "different cutoff or use dangling_policy='exclude'."
            )
            raise DanglingStateError(msg)

        logger.warning("Excluding dangling players from the roster: %s", dangling)
        excluded.extend(dangling)
        roster = roster.without(dangling)
        passes = [
            p for p in passes if p.actor in roster and p.recipient in roster
        ]
        if len(roster) == 0 or not passes:
            msg = f"Excluding dangling players {excluded} left no valid transitions"
            raise DanglingStateError(msg)
        counts = count_passes(passes, roster)
        dangling = _dangling_players(roster, counts)

    sent = counts.sum(axis=1)
    probabilities = counts / sent[:, np.newaxis]
    logger.debug(
        "Transition matrix over %d players from %d passes",
        len(roster),
        int(sent.sum()),
    )
    return TransitionMatrix(
        roster=roster,
        counts=counts,
        probabilities=probabilities,
        excluded_players=tuple(excluded),
    )
