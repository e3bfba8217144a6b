"""Tabular views of analysis outputs for external rendering.

Every table is a :class:`polars.DataFrame` keyed by ``player_name``,
with an optional ``player_nickname`` column resolved through a
:class:`~passchain.adapters.lineups.PlayerLookup`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from passchain.markov.n_step import project_distribution

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from passchain.adapters.lineups import PlayerLookup
    from passchain.markov.distribution import Distribution
    from passchain.markov.transition import TransitionMatrix


def _round(value: float, decimals: int | None) -> float:
    return float(value) if decimals is None else float(np.round(value, decimals))


def steady_state_table(
    steady_state: Distribution,
    decimals: int | None = 4,
    lookup: PlayerLookup | None = None,
) -> pl.DataFrame:
    """Steady-state distribution sorted by probability, highest first."""
    return steady_state.to_frame(
        value_name="steady_state",
        decimals=decimals,
        sort_descending=True,
        lookup=lookup,
    )


def projection_table(
    tpm: TransitionMatrix,
    initial: Distribution,
    steps: Sequence[int],
    decimals: int | None = 4,
    lookup: PlayerLookup | None = None,
) -> pl.DataFrame:
    """Initial distribution and its projections ``q^T P^n``, one column per n.

    Args:
        tpm: Transition matrix.
        initial: Distribution of the ball holder at step 0.
        steps: Horizons to project, e.g. ``(1, 2, 3)``.
        decimals: Display rounding; ``None`` keeps full precision.
        lookup: Optional nickname lookup.

    Returns:
        Table with ``player_name`` [, ``player_nickname``], ``initial``
        and one ``n=<k>`` column per horizon.
    """
    frame = initial.to_frame(value_name="initial", decimals=decimals, lookup=lookup)
    for n in steps:
        projected = project_distribution(tpm, initial, n)
        frame = frame.with_columns(
            pl.Series(
                f"n={n}",
                [_round(v, decimals) for v in projected.values],
                dtype=pl.Float64,
            )
        )
    return frame


def comparison_table(
    distributions: Mapping[str, Distribution],
    decimals: int | None = 4,
    lookup: PlayerLookup | None = None,
) -> pl.DataFrame:
    """Side-by-side distributions over the union of their players.

    Players missing from a distribution get a null entry in its column.

    Args:
        distributions: Column label -> distribution.
        decimals: Display rounding; ``None`` keeps full precision.
        lookup: Optional nickname lookup.

    Returns:
        Table with ``player_name`` [, ``player_nickname``] and one
        column per label.
    """
    players: list[str] = []
    for dist in distributions.values():
        players.extend(p for p in dist.players if p not in players)

    columns: dict[str, list[object]] = {"player_name": players}
    if lookup is not None:
        columns["player_nickname"] = lookup.nicknames(players)
    for label, dist in distributions.items():
        columns[label] = [
            _round(dist[p], decimals) if p in dist.roster else None for p in players
        ]
    schema: dict[str, type[pl.DataType]] = {name: pl.Utf8 for name in columns}
    schema.update({label: pl.Float64 for label in distributions})
    return pl.DataFrame(columns, schema=schema)
