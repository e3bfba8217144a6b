"""Monte Carlo resampling of the empirical reception distribution.

Each trial draws ``sample_size`` recipients i.i.d. with replacement
from the initial distribution ``q`` and records the empirical frequency
of every player. Frequencies are averaged over ``R`` independent trials
for each requested repetition count ``R``.

The draws are independent, not a walk along the chain, so by the law of
large numbers the averaged frequencies converge to ``q`` itself (not to
the steady-state distribution) as ``R`` grows.

Every repetition level runs on its own child stream spawned from a
single :class:`numpy.random.SeedSequence`, so levels are independent
tasks whose results depend only on the seed, never on execution order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import polars as pl
from tqdm import tqdm

from passchain.markov.distribution import Distribution

if TYPE_CHECKING:
    from collections.abc import Sequence

    from passchain.adapters.lineups import PlayerLookup
    from passchain.markov.roster import RosterSnapshot

logger = logging.getLogger(__name__)

DEFAULT_REPETITION_COUNTS: tuple[int, ...] = (10, 100, 1000, 10000)


@dataclass(frozen=True, slots=True, eq=False)
class SimulationResult:
    """Repetition-averaged reception frequencies.

    Attributes:
        roster: Player ordering of the frequency columns.
        repetition_counts: Number of trials per level, in run order.
        frequencies: Array of shape ``(len(repetition_counts),
            len(roster))``; row ``k`` holds the averaged frequencies
            for ``repetition_counts[k]``.
        sample_size: Draws per trial.
    """

    roster: RosterSnapshot
    repetition_counts: tuple[int, ...]
    frequencies: np.ndarray
    sample_size: int

    def __post_init__(self) -> None:
        """Freeze the frequency array."""
        frequencies = np.array(self.frequencies, dtype=float)
        frequencies.setflags(write=False)
        object.__setattr__(self, "frequencies", frequencies)

    @staticmethod
    def column_name(repetitions: int) -> str:
        """Table column name of a repetition level, e.g. ``"R=100"``."""
        return f"R={repetitions}"

    def level(self, repetitions: int) -> Distribution:
        """Return the averaged frequencies for one repetition count.

        Raises:
            KeyError: If *repetitions* was not simulated.
        """
        if repetitions not in self.repetition_counts:
            msg = f"No simulation level with {repetitions} repetitions"
            raise KeyError(msg)
        k = self.repetition_counts.index(repetitions)
        return Distribution(self.roster, self.frequencies[k])

    def levels(self) -> list[tuple[int, Distribution]]:
        """Return ``(repetitions, distribution)`` pairs in run order."""
        return [(r, self.level(r)) for r in self.repetition_counts]

    def to_frame(
        self,
        decimals: int | None = None,
        lookup: PlayerLookup | None = None,
    ) -> pl.DataFrame:
        """One row per player, one column per repetition count."""
        columns: dict[str, list[object]] = {"player_name": list(self.roster.players)}
        if lookup is not None:
            columns["player_nickname"] = lookup.nicknames(self.roster.players)
        values = self.frequencies
        if decimals is not None:
            values = np.round(values, decimals)
        for k, repetitions in enumerate(self.repetition_counts):
            columns[self.column_name(repetitions)] = [float(v) for v in values[k]]
        return pl.DataFrame(columns)


def _average_trial_frequencies(
    probabilities: np.ndarray,
    sample_size: int,
    repetitions: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Run *repetitions* independent trials and average their frequencies.

    A trial's per-player counts of ``sample_size`` i.i.d. categorical
    draws follow a multinomial distribution, so each trial is sampled
    as one multinomial row.
    """
    counts = rng.multinomial(sample_size, probabilities, size=repetitions)
    return (counts / sample_size).mean(axis=0)


def simulate_reception_frequencies(
    initial: Distribution,
    sample_size: int,
    repetition_counts: Sequence[int] = DEFAULT_REPETITION_COUNTS,
    random_state: int | None = 42,
    progress: bool = False,
) -> SimulationResult:
    """Average i.i.d. resampling frequencies at increasing repetition counts.

    Args:
        initial: Sampling distribution ``q``.
        sample_size: Draws per trial.
        repetition_counts: Trials per level, e.g. ``(10, 100, 1000)``.
        random_state: Seed of the root :class:`~numpy.random.SeedSequence`;
            ``None`` draws fresh entropy.
        progress: Show a ``tqdm`` progress bar over levels.

    Returns:
        A :class:`SimulationResult` over the roster of *initial*.

    Raises:
        ValueError: If *sample_size* or any repetition count is not a
            positive integer, a repetition count repeats, or *initial*
            is not a distribution.
    """
    if sample_size < 1:
        msg = f"sample_size must be >= 1, got {sample_size}"
        raise ValueError(msg)
    levels = tuple(int(r) for r in repetition_counts)
    if not levels or min(levels) < 1:
        msg = f"repetition_counts must be non-empty positive integers, got {levels}"
        raise ValueError(msg)
    if len(set(levels)) != len(levels):
        msg = f"repetition_counts must not repeat a level, got {levels}"
        raise ValueError(msg)

    q = np.asarray(initial.values, dtype=float)
    if np.any(q < 0.0) or not np.isclose(q.sum(), 1.0, atol=1e-6):
        msg = f"initial must be a probability distribution, sums to {q.sum()}"
        raise ValueError(msg)
    q = q / q.sum()

    streams = np.random.SeedSequence(random_state).spawn(len(levels))
    averaged = [
        _average_trial_frequencies(
            q, sample_size, repetitions, np.random.default_rng(stream)
        )
        for repetitions, stream in tqdm(
            list(zip(levels, streams, strict=True)),
            desc="Monte Carlo levels",
            unit="level",
            disable=not progress,
        )
    ]
    logger.debug(
        "Simulated %d levels of %d draws over %d players",
        len(levels),
        sample_size,
        len(initial),
    )
    return SimulationResult(
        roster=initial.roster,
        repetition_counts=levels,
        frequencies=np.vstack(averaged),
        sample_size=sample_size,
    )
