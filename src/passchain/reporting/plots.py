"""Matplotlib figures for pass-chain analysis outputs.

Provides a transition matrix heatmap, a grouped bar chart comparing
player distributions, and a Monte Carlo convergence plot. Each function
returns the :class:`matplotlib.figure.Figure` and can optionally save
it to disk.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from passchain.validation.metrics import restrict_to_common, rmse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from matplotlib.figure import Figure

    from passchain.adapters.lineups import PlayerLookup
    from passchain.markov.distribution import Distribution
    from passchain.markov.transition import TransitionMatrix
    from passchain.simulation.monte_carlo import SimulationResult

logger = logging.getLogger(__name__)

# Use non-interactive backend so figures can be created without a display
matplotlib.use("Agg")


def _labels(players: tuple[str, ...], lookup: PlayerLookup | None) -> list[str]:
    return list(players) if lookup is None else lookup.nicknames(players)


def _finish(fig: Figure, save_path: Path | None, what: str) -> Figure:
    fig.tight_layout()
    if save_path is not None:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        logger.info("%s saved to %s", what, save_path)
    plt.close(fig)
    return fig


def plot_transition_matrix(
    tpm: TransitionMatrix,
    title: str = "Pass Transition Matrix",
    save_path: Path | None = None,
    figsize: tuple[float, float] = (9.0, 7.5),
    lookup: PlayerLookup | None = None,
) -> Figure:
    """Render a transition matrix as an annotated heatmap.

    Args:
        tpm: Transition matrix; cell ``(i, j)`` is the probability that
            player ``i`` passes to player ``j``.
        title: Figure title.
        save_path: If provided, the figure is saved to this path
            (PNG/PDF/SVG depending on extension).
        figsize: Width and height in inches.
        lookup: Optional nickname lookup for axis labels.

    Returns:
        The :class:`matplotlib.figure.Figure` object.
    """
    matrix = tpm.probabilities
    k = matrix.shape[0]
    labels = _labels(tpm.players, lookup)
    fig, ax = plt.subplots(figsize=figsize)

    im = ax.imshow(matrix, cmap="YlOrRd", vmin=0.0, vmax=1.0)

    for i in range(k):
        for j in range(k):
            val = matrix[i, j]
            ax.text(
                j,
                i,
                f"{val:.2f}",
                ha="center",
                va="center",
                color="white" if val > 0.5 else "black",
                fontsize=max(6, 12 - k // 2),
            )

    ax.set_xticks(range(k))
    ax.set_yticks(range(k))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_yticklabels(labels)
    ax.set_xlabel("Recipient")
    ax.set_ylabel("Passer")
    ax.set_title(title)

    fig.colorbar(im, ax=ax, label="Transition Probability")
    return _finish(fig, save_path, "Transition matrix")


def plot_distributions(
    distributions: Mapping[str, Distribution],
    title: str = "Possession Distributions",
    save_path: Path | None = None,
    figsize: tuple[float, float] = (11.0, 5.5),
    lookup: PlayerLookup | None = None,
) -> Figure:
    """Grouped bar chart of several player distributions.

    Bars are drawn over the union of players; a player missing from a
    distribution gets a zero-height bar.

    Args:
        distributions: Legend label -> distribution.
        title: Figure title.
        save_path: Optional output path.
        figsize: Width and height in inches.
        lookup: Optional nickname lookup for tick labels.

    Returns:
        The :class:`matplotlib.figure.Figure` object.
    """
    players: list[str] = []
    for dist in distributions.values():
        players.extend(p for p in dist.players if p not in players)

    fig, ax = plt.subplots(figsize=figsize)
    x = np.arange(len(players))
    width = 0.8 / max(1, len(distributions))
    for offset, (label, dist) in enumerate(distributions.items()):
        heights = [dist[p] if p in dist.roster else 0.0 for p in players]
        ax.bar(x + offset * width, heights, width=width, label=label)

    ax.set_xticks(x + width * (len(distributions) - 1) / 2)
    ax.set_xticklabels(_labels(tuple(players), lookup), rotation=45, ha="right")
    ax.set_ylabel("Probability")
    ax.set_title(title)
    ax.legend()
    return _finish(fig, save_path, "Distribution chart")


def plot_simulation_convergence(
    simulation: SimulationResult,
    reference: Distribution,
    title: str = "Monte Carlo Convergence",
    save_path: Path | None = None,
    figsize: tuple[float, float] = (7.0, 4.5),
) -> Figure:
    """Plot RMSE to *reference* against the number of repetitions.

    Args:
        simulation: Monte Carlo result.
        reference: Distribution the averages should converge to,
            normally the sampling distribution itself.
        title: Figure title.
        save_path: Optional output path.
        figsize: Width and height in inches.

    Returns:
        The :class:`matplotlib.figure.Figure` object.
    """
    repetitions = list(simulation.repetition_counts)
    errors = [
        rmse(*restrict_to_common(dist, reference)) for _, dist in simulation.levels()
    ]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(repetitions, errors, marker="o")
    ax.set_xscale("log")
    ax.set_xlabel("Repetitions (R)")
    ax.set_ylabel("RMSE")
    ax.set_title(title)
    ax.grid(visible=True, which="both", alpha=0.3)
    return _finish(fig, save_path, "Convergence plot")
