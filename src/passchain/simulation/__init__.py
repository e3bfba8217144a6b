"""Monte Carlo simulation for the pass-chain possession engine."""

from passchain.simulation.monte_carlo import (
    DEFAULT_REPETITION_COUNTS,
    SimulationResult,
    simulate_reception_frequencies,
)

__all__ = [
    "DEFAULT_REPETITION_COUNTS",
    "SimulationResult",
    "simulate_reception_frequencies",
]
