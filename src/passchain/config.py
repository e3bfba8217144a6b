"""Configuration dataclasses for the pass-chain possession engine.

All configuration containers are frozen (immutable) and slotted for
memory efficiency and safety. Each dataclass provides sensible defaults
so that only the team name has to be supplied to build a valid
``AnalysisConfig``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DANGLING_POLICIES: tuple[str, ...] = ("raise", "exclude")


@dataclass(frozen=True, slots=True, order=True)
class Cutoff:
    """A ``(period, minute)`` point in a match.

    Events of the same period recorded at or before ``minute`` fall
    inside the window ending at this cutoff.

    Attributes:
        period: Match period (1 = first half, 2 = second half, ...).
        minute: Last match minute (inclusive) inside the window.
    """

    period: int = 1
    minute: int = 30

    def __post_init__(self) -> None:
        """Validate the cutoff coordinates."""
        if self.period < 1:
            msg = f"period must be >= 1, got {self.period}"
            raise ValueError(msg)
        if self.minute < 0:
            msg = f"minute must be >= 0, got {self.minute}"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Short label such as ``"p1_m30"`` used in table and metric names."""
        return f"p{self.period}_m{self.minute}"


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Configuration for qualifying-pass extraction.

    Attributes:
        excluded_sub_types: Pass sub types treated as set pieces and
            dropped from the chain.
    """

    excluded_sub_types: tuple[str, ...] = ("Throw-in", "Corner", "Goal Kick")


@dataclass(frozen=True, slots=True)
class MarkovConfig:
    """Configuration for transition matrix construction and analysis.

    Attributes:
        dangling_policy: How to treat players with no outgoing passes
            (``"raise"`` or ``"exclude"``).
        display_decimals: Rounding applied to rendered tables only.
        n_steps: Horizons reported by the n-step projection table.
        eigen_tolerance: Absolute tolerance used by the steady-state
            solver when checking its preconditions.
    """

    dangling_policy: str = "raise"
    display_decimals: int = 4
    n_steps: tuple[int, ...] = (1, 2, 3, 5)
    eigen_tolerance: float = 1e-8

    def __post_init__(self) -> None:
        """Validate configuration invariants after initialization."""
        if self.dangling_policy not in DANGLING_POLICIES:
            msg = (
                f"dangling_policy must be one of {DANGLING_POLICIES}, "
                f"got {self.dangling_policy!r}"
            )
            raise ValueError(msg)
        if self.display_decimals < 0:
            msg = f"display_decimals must be >= 0, got {self.display_decimals}"
            raise ValueError(msg)
        if not self.n_steps or min(self.n_steps) < 1:
            msg = f"n_steps must be non-empty positive integers, got {self.n_steps}"
            raise ValueError(msg)
        if self.eigen_tolerance <= 0.0:
            msg = f"eigen_tolerance must be positive, got {self.eigen_tolerance}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Configuration for the Monte Carlo reception simulator.

    Attributes:
        repetition_counts: Number of independent trials per level.
        sample_size: Draws per trial. ``None`` uses the number of
            receptions observed in the estimation window.
        random_state: Seed for reproducibility.
    """

    repetition_counts: tuple[int, ...] = (10, 100, 1000, 10000)
    sample_size: int | None = None
    random_state: int = 42

    def __post_init__(self) -> None:
        """Validate configuration invariants after initialization."""
        if not self.repetition_counts or min(self.repetition_counts) < 1:
            msg = (
                "repetition_counts must be non-empty positive integers, "
                f"got {self.repetition_counts}"
            )
            raise ValueError(msg)
        if len(set(self.repetition_counts)) != len(self.repetition_counts):
            msg = (
                "repetition_counts must not repeat a level, "
                f"got {self.repetition_counts}"
            )
            raise ValueError(msg)
        if self.sample_size is not None and self.sample_size < 1:
            msg = f"sample_size must be >= 1, got {self.sample_size}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Master configuration for one possession analysis run.

    Aggregates all sub-configurations and global settings. Validation
    is performed in ``__post_init__`` to ensure invariants hold.

    Attributes:
        team: Name of the focal team, as recorded in the event table.
        estimation_cutoff: End of the window used to estimate the
            transition matrix and the initial distribution.
        validation_cutoffs: Later cutoffs whose empirical reception
            frequencies are compared against the model.
        filtering: Pass filtering configuration.
        markov: Transition matrix configuration.
        simulation: Monte Carlo configuration.
        cache_dir: Directory for caching raw data downloads.
        output_dir: Directory for analysis outputs.

    Raises:
        ValueError: If any configuration invariant is violated.
    """

    team: str
    estimation_cutoff: Cutoff = field(default_factory=Cutoff)
    validation_cutoffs: tuple[Cutoff, ...] = (
        Cutoff(period=1, minute=45),
        Cutoff(period=2, minute=90),
    )
    filtering: FilterConfig = field(default_factory=FilterConfig)
    markov: MarkovConfig = field(default_factory=MarkovConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    cache_dir: Path = field(default_factory=lambda: Path("data/statsbomb_cache"))
    output_dir: Path = field(default_factory=lambda: Path("data/output"))

    def __post_init__(self) -> None:
        """Validate configuration invariants after initialization."""
        if not self.team:
            msg = "team must be a non-empty team name"
            raise ValueError(msg)

        for cutoff in self.validation_cutoffs:
            if cutoff < self.estimation_cutoff:
                msg = (
                    f"validation cutoff {cutoff.label} precedes the "
                    f"estimation cutoff {self.estimation_cutoff.label}"
                )
                raise ValueError(msg)
