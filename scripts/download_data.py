"""Download and cache StatsBomb event and lineup data for analysis teams.

Lists the matches of each configured competition-season, keeps those
played by the configured team, fetches their events and lineups (caching
raw payloads to disk) and logs a short data-quality summary per match.

Usage::

    python scripts/download_data.py
"""

from __future__ import annotations

import logging
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path

import polars as pl
from tqdm import tqdm

# ---------------------------------------------------------------------------
# Ensure the src package is importable when running as a standalone script.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_PROJECT_ROOT / "src"))

from statsbombpy.api_client import (  # type: ignore[import-untyped]  # noqa: E402
    NoAuthWarning,
)

warnings.filterwarnings("ignore", category=NoAuthWarning)

from passchain.adapters import (  # noqa: E402
    DataAdapter,
    MatchInfo,
    PayloadCache,
    StatsBombAdapter,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

CACHE_DIR = _PROJECT_ROOT / "data" / "statsbomb_cache"


# ------------------------------------------------------------------
# Dataset definitions
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Dataset:
    """One team's matches in a single competition-season.

    Attributes:
        label: Human-readable label for log output.
        competition_id: StatsBomb competition identifier.
        season_id: StatsBomb season identifier.
        team: Team whose matches are downloaded.
    """

    label: str
    competition_id: int
    season_id: int
    team: str


DATASETS: tuple[Dataset, ...] = (
    Dataset("France, 2018 World Cup", competition_id=43, season_id=3, team="France"),
    Dataset("Belgium, 2018 World Cup", competition_id=43, season_id=3, team="Belgium"),
)


# ------------------------------------------------------------------
# Summary helpers
# ------------------------------------------------------------------


def _summarize(label: str, events: pl.DataFrame, lineups: pl.DataFrame) -> None:
    """Log event, pass and substitution counts per team for one match.

    Args:
        label: Human-readable match label.
        events: Canonical event table.
        lineups: Canonical lineup table.
    """
    logger.info("%s: %d events, %d lineup rows", label, events.height, lineups.height)
    per_team = (
        events.filter(pl.col("team_name").is_not_null())
        .group_by("team_name")
        .agg(
            (pl.col("type_name") == "Pass").sum().alias("passes"),
            (
                (pl.col("type_name") == "Pass") & pl.col("outcome_name").is_null()
            ).sum().alias("completed"),
            (pl.col("type_name") == "Substitution").sum().alias("substitutions"),
        )
        .sort("team_name")
    )
    for row in per_team.iter_rows(named=True):
        logger.info(
            "  %-30s passes=%4d  completed=%4d  substitutions=%d",
            row["team_name"],
            row["passes"],
            row["completed"],
            row["substitutions"],
        )


def _match_label(match: MatchInfo) -> str:
    return (
        f"{match.match_date} {match.home_team_name} {match.home_score}-"
        f"{match.away_score} {match.away_team_name} ({match.match_id})"
    )


# ------------------------------------------------------------------
# Download
# ------------------------------------------------------------------


def _download_dataset(
    adapter: DataAdapter,
    cache: PayloadCache,
    dataset: Dataset,
) -> int:
    """Download every match of one team in a competition-season.

    Args:
        adapter: Data provider adapter.
        cache: Payload cache the adapter writes to, used to report
            which matches were already on disk.
        dataset: Competition-season and team to download.

    Returns:
        Number of matches downloaded or read from the cache.
    """
    logger.info("Listing matches for %s ...", dataset.label)
    matches = [
        m
        for m in adapter.list_matches(
            competition_id=dataset.competition_id,
            season_id=dataset.season_id,
        )
        if dataset.team in (m.home_team_name, m.away_team_name)
    ]
    cached = sum(
        1
        for m in matches
        if cache.exists(m.match_id, "events") and cache.exists(m.match_id, "lineups")
    )
    logger.info("Found %d matches (%d already cached)", len(matches), cached)

    for match in tqdm(matches, desc=dataset.label, unit="match"):
        events = adapter.load_event_table(match.match_id)
        lineups = adapter.load_lineup_table(match.match_id)
        _summarize(_match_label(match), events, lineups)

    return len(matches)


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main() -> None:
    """Download and cache every configured dataset."""
    adapter = StatsBombAdapter(cache_dir=CACHE_DIR)
    cache = PayloadCache(CACHE_DIR)

    total = sum(_download_dataset(adapter, cache, ds) for ds in DATASETS)

    logger.info("%d matches available in %s", total, CACHE_DIR)


if __name__ == "__main__":
    main()
