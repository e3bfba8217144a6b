"""Run the Markov chain possession analysis on a cached StatsBomb match.

Loads the events and lineups of one match, fits the pass transition
matrix for the focal team over the estimation window, solves its steady
state, projects the reception distribution a few passes ahead, runs the
Monte Carlo resampling and scores everything against later windows.

Outputs
-------
* One parquet file per result table under ``data/output/``.
* Transition matrix heatmap, distribution comparison and Monte Carlo
  convergence plots.
* ``possession_summary.json`` with the steady state and RMSE metrics.

Usage::

    python scripts/run_possession_analysis.py
"""

from __future__ import annotations

import logging
import sys
import warnings
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

# ---------------------------------------------------------------------------
# Ensure the src package is importable when running as a standalone script.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_PROJECT_ROOT / "src"))

from statsbombpy.api_client import (  # type: ignore[import-untyped]  # noqa: E402
    NoAuthWarning,
)

warnings.filterwarnings("ignore", category=NoAuthWarning)

from passchain.adapters import StatsBombAdapter  # noqa: E402
from passchain.config import AnalysisConfig, Cutoff  # noqa: E402
from passchain.exceptions import PassChainError  # noqa: E402
from passchain.pipeline import run_analysis  # noqa: E402
from passchain.reporting import (  # noqa: E402
    plot_distributions,
    plot_simulation_convergence,
    plot_transition_matrix,
)

if TYPE_CHECKING:
    from passchain.pipeline import AnalysisResult

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------

MATCH_ID = "8658"
TEAM = "France"
CACHE_DIR = _PROJECT_ROOT / "data" / "statsbomb_cache"
OUTPUT_DIR = _PROJECT_ROOT / "data" / "output" / "possession"

CONFIG = AnalysisConfig(
    team=TEAM,
    estimation_cutoff=Cutoff(period=1, minute=30),
    validation_cutoffs=(Cutoff(period=1, minute=45), Cutoff(period=2, minute=90)),
    cache_dir=CACHE_DIR,
    output_dir=OUTPUT_DIR,
)


# ------------------------------------------------------------------
# Serialisation helpers
# ------------------------------------------------------------------


def _result_to_json(result: AnalysisResult) -> bytes:
    """Serialise the headline numbers of a run to indented JSON."""
    lookup = result.lookup
    payload = {
        "match_id": MATCH_ID,
        "team": result.config.team,
        "estimation_cutoff": result.config.estimation_cutoff.label,
        "n_passes": len(result.passes),
        "players": [
            {"player_name": p, "player_nickname": lookup.nickname(p)}
            for p in result.transition_matrix.players
        ],
        "excluded_players": list(result.transition_matrix.excluded_players),
        "steady_state": result.steady_state.as_dict(),
        "stationarity_residual": result.stationarity_residual,
        "initial_distribution": result.initial.as_dict(),
        "empirical": {k: v.as_dict() for k, v in result.empirical.items()},
        "monte_carlo": {
            "sample_size": result.simulation.sample_size,
            "repetition_counts": list(result.simulation.repetition_counts),
        },
        "validation": result.validation.as_dict(),
    }
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def _write_tables(result: AnalysisResult, output_dir: Path) -> None:
    for name, table in result.tables().items():
        path = output_dir / f"{name}.parquet"
        table.write_parquet(path)
        logger.info("Wrote %s (%d rows)", path.name, table.height)


def _write_plots(result: AnalysisResult, output_dir: Path) -> None:
    cutoff = result.config.estimation_cutoff.label
    plot_transition_matrix(
        result.transition_matrix,
        title=f"{TEAM} pass transition matrix (up to {cutoff})",
        save_path=output_dir / "transition_matrix.png",
        lookup=result.lookup,
    )
    plot_distributions(
        {
            "steady state": result.steady_state,
            f"initial [{cutoff}]": result.initial,
            **{f"empirical [{k}]": v for k, v in result.empirical.items()},
        },
        title=f"{TEAM} possession distributions",
        save_path=output_dir / "distributions.png",
        lookup=result.lookup,
    )
    plot_simulation_convergence(
        result.simulation,
        result.initial,
        title=f"{TEAM} Monte Carlo convergence to the initial distribution",
        save_path=output_dir / "monte_carlo_convergence.png",
    )


def _log_summary(result: AnalysisResult) -> None:
    logger.info("=" * 60)
    logger.info("Steady state for %s", TEAM)
    logger.info("%-28s  %10s  %10s", "Player", "pi", "initial")
    logger.info("-" * 60)
    ordered = sorted(
        result.steady_state.as_dict().items(), key=lambda kv: kv[1], reverse=True
    )
    for player, value in ordered:
        logger.info(
            "%-28s  %10.4f  %10.4f",
            result.lookup.nickname(player),
            value,
            result.initial[player],
        )
    logger.info("-" * 60)
    for name, value in result.validation.metrics:
        logger.info("%-48s  %.6f", name, value)
    logger.info("=" * 60)


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main() -> None:
    """Run the possession analysis and write every output."""
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    adapter = StatsBombAdapter(cache_dir=CONFIG.cache_dir)

    events = adapter.load_event_table(MATCH_ID)
    lineups = adapter.load_lineup_table(MATCH_ID)

    try:
        result = run_analysis(events, lineups, CONFIG, progress=True)
    except PassChainError:
        logger.exception("Possession analysis failed for %s", TEAM)
        sys.exit(1)

    _write_tables(result, OUTPUT_DIR)
    _write_plots(result, OUTPUT_DIR)

    summary_path = OUTPUT_DIR / "possession_summary.json"
    summary_path.write_bytes(_result_to_json(result))
    logger.info("Summary written to %s", summary_path)

    _log_summary(result)


if __name__ == "__main__":
    main()
