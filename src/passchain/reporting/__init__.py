"""Reporting layer: polars tables and matplotlib figures."""

from passchain.reporting.plots import (
    plot_distributions,
    plot_simulation_convergence,
    plot_transition_matrix,
)
from passchain.reporting.tables import (
    comparison_table,
    projection_table,
    steady_state_table,
)

__all__ = [
    "comparison_table",
    "plot_distributions",
    "plot_simulation_convergence",
    "plot_transition_matrix",
    "projection_table",
    "steady_state_table",
]
