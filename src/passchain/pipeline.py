"""End-to-end possession analysis for one team and one match.

Wires pass filtering to the Markov chain layer, the Monte Carlo
simulator and the validation metrics:

1. Filter the estimation window's passes and check every player
   against the lineup table.
2. Build the transition matrix and the initial (reception)
   distribution over the same frozen roster.
3. Solve the steady state and project the initial distribution
   ``n`` passes ahead.
4. Compute empirical reception distributions at each later cutoff.
5. Resample the initial distribution with the Monte Carlo simulator.
6. Compare everything with RMSE.

Public API
----------
.. function:: run_analysis

    Run the analysis and return a frozen :class:`AnalysisResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from passchain.adapters.lineups import PlayerLookup
from passchain.adapters.schemas import validate_event_table
from passchain.exceptions import EmptyWindowError
from passchain.filtering.passes import filter_passes
from passchain.markov.initial import build_initial_distribution
from passchain.markov.steady_state import solve_steady_state, stationarity_residual
from passchain.markov.transition import build_transition_matrix
from passchain.reporting.tables import (
    comparison_table,
    projection_table,
    steady_state_table,
)
from passchain.simulation.monte_carlo import simulate_reception_frequencies
from passchain.validation.metrics import build_validation_report

if TYPE_CHECKING:
    from collections.abc import Sequence

    import polars as pl

    from passchain.adapters.schemas import PassEvent
    from passchain.config import AnalysisConfig, Cutoff
    from passchain.markov.distribution import Distribution
    from passchain.markov.transition import TransitionMatrix
    from passchain.simulation.monte_carlo import SimulationResult
    from passchain.validation.metrics import ValidationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Every output of one possession analysis run.

    Attributes:
        config: Configuration the run used.
        lookup: Player nickname lookup built from the lineup table.
        passes: Passes of the estimation window used for the model.
        transition_matrix: Estimated transition matrix.
        initial: Empirical reception distribution of the estimation
            window.
        steady_state: Stationary distribution of the chain.
        stationarity_residual: ``max |pi P - pi|`` of *steady_state*.
        empirical: Cutoff label -> empirical reception distribution of
            each validation window that produced one.
        simulation: Monte Carlo result over *initial*.
        validation: RMSE comparisons.
    """

    config: AnalysisConfig
    lookup: PlayerLookup
    passes: tuple[PassEvent, ...]
    transition_matrix: TransitionMatrix
    initial: Distribution
    steady_state: Distribution
    stationarity_residual: float
    empirical: dict[str, Distribution]
    simulation: SimulationResult
    validation: ValidationReport

    def tables(self) -> dict[str, pl.DataFrame]:
        """Render every output as a named polars table."""
        decimals = self.config.markov.display_decimals
        distributions = {
            "steady_state": self.steady_state,
            f"initial[{self.config.estimation_cutoff.label}]": self.initial,
            **{f"empirical[{k}]": v for k, v in self.empirical.items()},
        }
        return {
            "transition_matrix": self.transition_matrix.to_frame(
                decimals=decimals, lookup=self.lookup
            ),
            "initial_distribution": self.initial.to_frame(
                value_name="initial", decimals=decimals, lookup=self.lookup
            ),
            "steady_state": steady_state_table(
                self.steady_state, decimals=decimals, lookup=self.lookup
            ),
            "n_step_projection": projection_table(
                self.transition_matrix,
                self.initial,
                self.config.markov.n_steps,
                decimals=decimals,
                lookup=self.lookup,
            ),
            "distribution_comparison": comparison_table(
                distributions, decimals=decimals, lookup=self.lookup
            ),
            "monte_carlo": self.simulation.to_frame(
                decimals=decimals, lookup=self.lookup
            ),
            "validation": self.validation.to_frame(),
        }


def _window_passes(
    events: pl.DataFrame,
    config: AnalysisConfig,
    cutoff: Cutoff,
    lookup: PlayerLookup,
) -> tuple[PassEvent, ...]:
    """Filter one window and reject players unknown to the lineup."""
    passes = filter_passes(
        events,
        team=config.team,
        cutoff=cutoff,
        excluded_sub_types=config.filtering.excluded_sub_types,
    )
    players = {p.actor for p in passes} | {p.recipient for p in passes if p.recipient}
    lookup.validate(players)
    return passes


def _empirical_distributions(
    events: pl.DataFrame,
    config: AnalysisConfig,
    lookup: PlayerLookup,
    cutoffs: Sequence[Cutoff],
) -> dict[str, Distribution]:
    empirical: dict[str, Distribution] = {}
    for cutoff in cutoffs:
        passes = _window_passes(events, config, cutoff, lookup)
        try:
            empirical[cutoff.label] = build_initial_distribution(passes)
        except EmptyWindowError:
            logger.warning(
                "No qualifying receptions up to %s -- skipping validation window",
                cutoff.label,
            )
    return empirical


def run_analysis(
    events: pl.DataFrame,
    lineups: pl.DataFrame,
    config: AnalysisConfig,
    progress: bool = False,
) -> AnalysisResult:
    """Run the full possession analysis for ``config.team``.

    Args:
        events: Canonical event table of one match.
        lineups: Lineup table (player name -> nickname) of the match.
        config: Analysis configuration.
        progress: Show a progress bar over Monte Carlo levels.

    Returns:
        A frozen :class:`AnalysisResult`.

    Raises:
        SchemaError: If an input table lacks required columns.
        LineupLookupError: If a pass names a player absent from the
            lineup table.
        EmptyWindowError: If the estimation window has no qualifying
            passes.
        DanglingStateError: If a player makes no outgoing pass and the
            dangling policy is ``"raise"``.
        ErgodicityError: If the chain has no unique steady state.
    """
    table = validate_event_table(events)
    lookup = PlayerLookup.from_frame(lineups)
    cutoff = config.estimation_cutoff
    logger.info("Analysing %s up to %s", config.team, cutoff.label)

    window = _window_passes(table, config, cutoff, lookup)
    tpm = build_transition_matrix(window, dangling_policy=config.markov.dangling_policy)
    roster = tpm.roster
    passes = tuple(p for p in window if p.actor in roster and p.recipient in roster)
    logger.info(
        "Transition matrix over %d players from %d passes", len(roster), len(passes)
    )

    initial = build_initial_distribution(passes, roster)
    steady_state = solve_steady_state(tpm, atol=config.markov.eigen_tolerance)
    residual = stationarity_residual(tpm, steady_state)
    logger.info("Steady state solved (residual %.2e)", residual)

    empirical = _empirical_distributions(
        table, config, lookup, config.validation_cutoffs
    )

    sample_size = config.simulation.sample_size or len(passes)
    simulation = simulate_reception_frequencies(
        initial,
        sample_size=sample_size,
        repetition_counts=config.simulation.repetition_counts,
        random_state=config.simulation.random_state,
        progress=progress,
    )

    validation = build_validation_report(steady_state, initial, empirical, simulation)

    return AnalysisResult(
        config=config,
        lookup=lookup,
        passes=passes,
        transition_matrix=tpm,
        initial=initial,
        steady_state=steady_state,
        stationarity_residual=residual,
        empirical=empirical,
        simulation=simulation,
        validation=validation,
    )
