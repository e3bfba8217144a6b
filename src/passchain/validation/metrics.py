"""Distribution comparison metrics.

Distributions are always compared player by player: two
:class:`~passchain.markov.distribution.Distribution` objects are aligned
by identity before any arithmetic, and comparing different player sets
is an error rather than something silently tolerated. Comparisons over
windows with different rosters go through :func:`restrict_to_common`
first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from passchain.exceptions import AlignmentError
from passchain.markov.distribution import Distribution

if TYPE_CHECKING:
    from collections.abc import Mapping

    from numpy.typing import ArrayLike

    from passchain.simulation.monte_carlo import SimulationResult

logger = logging.getLogger(__name__)


def rmse(a: Distribution | ArrayLike, b: Distribution | ArrayLike) -> float:
    """Root-mean-square error ``sqrt(mean((a_i - b_i)^2))``.

    Symmetric in its inputs and zero iff they are identical.

    Args:
        a: First distribution, or a plain vector.
        b: Second distribution, or a plain vector of the same length.

    Returns:
        The RMSE as a float.

    Raises:
        AlignmentError: If two distributions cover different players,
            a distribution is compared to a plain vector, or two vectors
            differ in length.
        ValueError: If the inputs are empty.
    """
    if isinstance(a, Distribution) and isinstance(b, Distribution):
        if set(a.players) != set(b.players):
            only_a = sorted(set(a.players) - set(b.players))
            only_b = sorted(set(b.players) - set(a.players))
            msg = (
                "Cannot compare distributions over different players: "
                f"only in first {only_a}, only in second {only_b}"
            )
            raise AlignmentError(msg)
        x = a.values
        y = b.reindex(a.players).values
    elif isinstance(a, Distribution) or isinstance(b, Distribution):
        msg = "Cannot align a Distribution with an unlabelled vector"
        raise AlignmentError(msg)
    else:
        x = np.asarray(a, dtype=float)
        y = np.asarray(b, dtype=float)
        if x.shape != y.shape:
            msg = f"Vectors have different shapes: {x.shape} vs {y.shape}"
            raise AlignmentError(msg)

    if x.size == 0:
        msg = "Cannot compute RMSE of empty vectors"
        raise ValueError(msg)
    return float(np.sqrt(np.mean((x - y) ** 2)))


def common_players(a: Distribution, b: Distribution) -> tuple[str, ...]:
    """Players present in both distributions, in the order of *a*."""
    return tuple(p for p in a.players if p in b.roster)


def restrict_to_common(
    a: Distribution,
    b: Distribution,
) -> tuple[Distribution, Distribution]:
    """Restrict both distributions to their shared players.

    Masses are not renormalised, so the restricted vectors may sum to
    less than 1.

    Raises:
        AlignmentError: If the distributions share no player.
    """
    shared = common_players(a, b)
    if not shared:
        msg = "Distributions have no player in common"
        raise AlignmentError(msg)
    if len(shared) < max(len(a), len(b)):
        logger.debug(
            "Comparing over %d common players (%d and %d in inputs)",
            len(shared),
            len(a),
            len(b),
        )
    return a.reindex(shared), b.reindex(shared)


def _common_rmse(a: Distribution, b: Distribution) -> float:
    return rmse(*restrict_to_common(a, b))


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Ordered metric name -> RMSE pairs.

    Attributes:
        metrics: ``(name, value)`` pairs in insertion order.
    """

    metrics: tuple[tuple[str, float], ...]

    def as_dict(self) -> dict[str, float]:
        """Return the metrics as an ordered dictionary."""
        return dict(self.metrics)

    def __getitem__(self, name: str) -> float:
        return self.as_dict()[name]

    def __len__(self) -> int:
        return len(self.metrics)

    def to_frame(self, decimals: int | None = None) -> pl.DataFrame:
        """Render as a ``metric`` / ``rmse`` table."""
        names = [name for name, _ in self.metrics]
        values = [
            value if decimals is None else round(value, decimals)
            for _, value in self.metrics
        ]
        return pl.DataFrame(
            {"metric": names, "rmse": values},
            schema={"metric": pl.Utf8, "rmse": pl.Float64},
        )


def build_validation_report(
    steady_state: Distribution,
    initial: Distribution,
    empirical: Mapping[str, Distribution],
    simulation: SimulationResult | None = None,
) -> ValidationReport:
    """Compare the model against empirical reception frequencies.

    Each comparison runs over the players common to both sides. For
    every empirical window label ``w`` the report contains
    ``steady_state_vs_empirical[w]`` and ``initial_vs_empirical[w]``;
    for every simulated repetition count ``R`` it contains
    ``simulation[R=R]_vs_initial`` and ``simulation[R=R]_vs_empirical[w]``.

    Args:
        steady_state: Stationary distribution of the fitted chain.
        initial: Empirical distribution of the estimation window.
        empirical: Label -> empirical distribution of a later window.
        simulation: Optional Monte Carlo result over *initial*.

    Returns:
        The :class:`ValidationReport`.
    """
    metrics: list[tuple[str, float]] = []
    for label, observed in empirical.items():
        metrics.append(
            (
                f"steady_state_vs_empirical[{label}]",
                _common_rmse(steady_state, observed),
            )
        )
        metrics.append(
            (f"initial_vs_empirical[{label}]", _common_rmse(initial, observed))
        )

    if simulation is not None:
        for repetitions, simulated in simulation.levels():
            prefix = f"simulation[{simulation.column_name(repetitions)}]"
            metrics.append((f"{prefix}_vs_initial", _common_rmse(simulated, initial)))
            for label, observed in empirical.items():
                metrics.append(
                    (
                        f"{prefix}_vs_empirical[{label}]",
                        _common_rmse(simulated, observed),
                    )
                )

    for name, value in metrics:
        logger.info("RMSE %-48s %.6f", name, value)
    return ValidationReport(tuple(metrics))
