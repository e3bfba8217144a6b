"""Markov chain layer of the pass-chain possession engine.

Provides the frozen roster ordering, player-indexed distributions, the
transition matrix builder, the initial distribution builder, the
steady-state solver and the n-step evaluator.
"""

from passchain.markov.distribution import Distribution
from passchain.markov.initial import build_initial_distribution, count_receptions
from passchain.markov.n_step import (
    matrix_power,
    n_step_probability,
    project_distribution,
)
from passchain.markov.roster import RosterSnapshot
from passchain.markov.steady_state import (
    power_iteration_steady_state,
    solve_steady_state,
    stationarity_residual,
)
from passchain.markov.transition import (
    TransitionMatrix,
    build_transition_matrix,
    count_passes,
)

__all__ = [
    "Distribution",
    "RosterSnapshot",
    "TransitionMatrix",
    "build_initial_distribution",
    "build_transition_matrix",
    "count_passes",
    "count_receptions",
    "matrix_power",
    "n_step_probability",
    "power_iteration_steady_state",
    "project_distribution",
    "solve_steady_state",
    "stationarity_residual",
]
