"""Empirical pass-reception distribution over a time window.

The same vector serves as the initial state of the Markov chain and as
the per-draw sampling distribution of the Monte Carlo simulator, and,
computed at later cutoffs, as the empirical target the model is
validated against.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

import numpy as np

from passchain.exceptions import EmptyWindowError
from passchain.markov.distribution import Distribution
from passchain.markov.roster import RosterSnapshot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from passchain.adapters.schemas import PassEvent

logger = logging.getLogger(__name__)


def count_receptions(passes: Sequence[PassEvent], roster: RosterSnapshot) -> np.ndarray:
    """Return the number of passes received by each roster player.

    Raises:
        RosterError: If a recipient is outside *roster*.
    """
    received = Counter(
        roster.index_of(p.recipient) for p in passes if p.recipient is not None
    )
    return np.array([received.get(i, 0) for i in range(len(roster))], dtype=np.int64)


def build_initial_distribution(
    passes: Sequence[PassEvent],
    roster: RosterSnapshot | None = None,
) -> Distribution:
    """Compute ``q[i] = receptions(i) / total receptions``.

    A player who received no pass has ``q[i] = 0``; only the vector as a
    whole must sum to 1.

    Args:
        passes: Filtered passes of the window.
        roster: Player ordering. Defaults to every actor and recipient
            appearing in *passes*.

    Returns:
        The empirical reception distribution.

    Raises:
        EmptyWindowError: If no pass in the window has a recipient.
        RosterError: If a recipient is outside *roster*.
    """
    if roster is None:
        roster = RosterSnapshot.from_passes(passes)
    receptions = count_receptions(passes, roster)
    total = int(receptions.sum())
    if total == 0:
        msg = "No pass receptions in the window; the initial distribution is undefined"
        raise EmptyWindowError(msg)
    logger.debug("Initial distribution from %d receptions", total)
    return Distribution(roster, receptions / total)
