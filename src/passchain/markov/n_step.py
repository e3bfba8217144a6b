"""N-step transition probabilities and forward projections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from passchain.exceptions import AlignmentError
from passchain.markov.distribution import Distribution

if TYPE_CHECKING:
    from passchain.markov.transition import TransitionMatrix


def _check_steps(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        msg = f"n must be a positive integer, got {n!r}"
        raise ValueError(msg)


def matrix_power(tpm: TransitionMatrix, n: int) -> np.ndarray:
    """Return ``P^n`` (exponentiation by squaring).

    Entry ``(i, j)`` is the probability that the ball, held by player
    ``i``, is with player ``j`` after exactly ``n`` passes.

    Raises:
        ValueError: If *n* is not a positive integer.
    """
    _check_steps(n)
    return np.linalg.matrix_power(tpm.probabilities, int(n))


def n_step_probability(
    tpm: TransitionMatrix,
    n: int,
    source: str,
    target: str,
) -> float:
    """Return ``P^n[source, target]`` looked up by player identity."""
    i = tpm.roster.index_of(source)
    j = tpm.roster.index_of(target)
    return float(matrix_power(tpm, n)[i, j])


def project_distribution(
    tpm: TransitionMatrix,
    initial: Distribution,
    n: int,
) -> Distribution:
    """Return ``q^T P^n``, the recipient distribution after *n* passes.

    Args:
        tpm: Row-stochastic transition matrix.
        initial: Distribution of the ball holder at step 0.
        n: Number of transitions.

    Returns:
        The projected distribution; it sums to 1 whenever *initial*
        does.

    Raises:
        AlignmentError: If *initial* uses a different roster.
        ValueError: If *n* is not a positive integer.
    """
    if initial.roster != tpm.roster:
        msg = (
            "Initial distribution and transition matrix use different rosters: "
            f"{initial.players} vs {tpm.players}"
        )
        raise AlignmentError(msg)
    return Distribution(tpm.roster, initial.values @ matrix_power(tpm, n))
