"""Steady-state (stationary) distribution of a pass transition matrix.

For an ergodic (irreducible and aperiodic) chain the Perron-Frobenius
theorem guarantees a unique stationary distribution ``pi = pi P``: the
left eigenvector of ``P`` for the simple eigenvalue 1, which is also the
unique eigenvalue of largest magnitude. Ergodicity is a precondition of
this module. It is not proven up front, but the symptoms of its absence
(a repeated or complex dominant eigenvalue, further eigenvalues on the
unit circle, mixed-sign or zero components) are detected and raised as
:class:`~passchain.exceptions.ErgodicityError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from passchain.exceptions import AlignmentError, ErgodicityError
from passchain.markov.distribution import Distribution

if TYPE_CHECKING:
    from passchain.markov.transition import TransitionMatrix

logger = logging.getLogger(__name__)


def solve_steady_state(tpm: TransitionMatrix, atol: float = 1e-8) -> Distribution:
    """Compute the stationary distribution by eigen-decomposition of ``P^T``.

    The eigenvector of the eigenvalue closest to 1 is taken, reduced to
    its real part and divided by its sum, which also undoes a uniform
    sign flip of the raw eigenvector.

    Args:
        tpm: Row-stochastic transition matrix of an ergodic chain.
        atol: Absolute tolerance for the eigenvalue and sign checks.

    Returns:
        Distribution ``pi`` with ``sum(pi) == 1`` and ``pi > 0``.

    Raises:
        ErgodicityError: If the chain violates the ergodicity
            preconditions.
    """
    eigenvalues, eigenvectors = np.linalg.eig(tpm.probabilities.T)
    logger.debug("Eigenvalues of P^T: %s", np.round(eigenvalues, 6))

    k = int(np.argmin(np.abs(eigenvalues - 1.0)))
    dominant = eigenvalues[k]
    if abs(dominant.imag) > atol or abs(dominant.real - 1.0) > atol:
        msg = (
            f"Dominant eigenvalue {dominant} is not 1; the matrix is not a "
            "valid stochastic matrix"
        )
        raise ErgodicityError(msg)

    on_unit_circle = int(np.sum(np.abs(np.abs(eigenvalues) - 1.0) <= atol))
    if on_unit_circle > 1:
        msg = (
            f"{on_unit_circle} eigenvalues lie on the unit circle; the chain is "
            "reducible or periodic and has no unique limiting distribution. "
            "Choose a different cutoff or roster filter."
        )
        raise ErgodicityError(msg)

    vector = np.real(eigenvectors[:, k])
    total = vector.sum()
    if abs(total) <= atol:
        msg = "Dominant eigenvector sums to zero and cannot be normalised"
        raise ErgodicityError(msg)
    pi = vector / total

    if np.any(pi < -atol):
        msg = f"Dominant eigenvector has mixed signs: {np.round(pi, 6)}"
        raise ErgodicityError(msg)
    transient = [tpm.players[i] for i in np.flatnonzero(pi <= atol)]
    if transient:
        msg = (
            f"Players {transient} have zero stationary mass; the chain is not "
            "irreducible. Choose a different cutoff or roster filter."
        )
        raise ErgodicityError(msg)

    pi = np.clip(pi, 0.0, None)
    return Distribution(tpm.roster, pi / pi.sum())


def power_iteration_steady_state(
    tpm: TransitionMatrix,
    initial: Distribution | None = None,
    tol: float = 1e-12,
    max_iter: int = 100_000,
) -> Distribution:
    """Compute the stationary distribution by repeated ``x <- x P``.

    Converges to the same fixed point as :func:`solve_steady_state` for
    ergodic chains.

    Args:
        tpm: Row-stochastic transition matrix.
        initial: Starting distribution; uniform when ``None``.
        tol: Convergence threshold on the max absolute change.
        max_iter: Iteration budget.

    Returns:
        The stationary distribution.

    Raises:
        AlignmentError: If *initial* uses a different roster.
        ErgodicityError: If the iteration does not converge.
    """
    n = len(tpm.roster)
    if initial is None:
        x = np.full(n, 1.0 / n)
    else:
        if initial.roster != tpm.roster:
            msg = "Initial distribution and transition matrix use different rosters"
            raise AlignmentError(msg)
        x = np.array(initial.values, dtype=float)

    p = tpm.probabilities
    for iteration in range(1, max_iter + 1):
        nxt = x @ p
        if np.max(np.abs(nxt - x)) < tol:
            logger.debug("Power iteration converged after %d steps", iteration)
            return Distribution(tpm.roster, nxt / nxt.sum())
        x = nxt

    msg = (
        f"Power iteration did not converge within {max_iter} steps; "
        "the chain may be periodic"
    )
    raise ErgodicityError(msg)


def stationarity_residual(tpm: TransitionMatrix, distribution: Distribution) -> float:
    """Return ``max |pi P - pi|`` for a candidate stationary distribution.

    Raises:
        AlignmentError: If the rosters differ.
    """
    if distribution.roster != tpm.roster:
        msg = "Distribution and transition matrix use different rosters"
        raise AlignmentError(msg)
    pi = distribution.values
    return float(np.max(np.abs(pi @ tpm.probabilities - pi)))
