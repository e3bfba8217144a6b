"""StatsBomb data adapter for the pass-chain possession engine.

Implements the :class:`~passchain.adapters.base.DataAdapter` protocol by
fetching match, event and lineup data from the StatsBomb open-data API
via ``statsbombpy``, mapping the flattened provider columns onto the
canonical event and lineup tables, and caching raw results to disk.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

import pandas as pd
import polars as pl
from statsbombpy import sb  # type: ignore[import-untyped]

from passchain.adapters.cache import PayloadCache
from passchain.adapters.schemas import (
    EVENT_COLUMNS,
    LINEUP_COLUMNS,
    MatchInfo,
    validate_event_table,
)
from passchain.exceptions import AdapterError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Flattened statsbombpy column -> canonical event-table column.
STATSBOMB_COLUMN_MAP: dict[str, str] = {
    "period": "period",
    "minute": "minute",
    "second": "second",
    "type": "type_name",
    "team": "team_name",
    "player": "player_name",
    "pass_recipient": "pass_recipient_name",
    "pass_type": "sub_type_name",
    "pass_outcome": "outcome_name",
    "substitution_replacement": "substitution_replacement_name",
}

_REQUIRED_RAW_COLUMNS: tuple[str, ...] = ("period", "minute", "second", "type", "team")

_INTEGER_COLUMNS: frozenset[str] = frozenset({"period", "minute", "second"})


def _is_nan(value: object) -> bool:
    """Return True if *value* is NaN or None."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _clean_text(value: object) -> str | None:
    """Convert a raw cell to ``str``, mapping NaN/None to ``None``."""
    if _is_nan(value):
        return None
    return str(value)


class StatsBombAdapter:
    """Adapter for loading StatsBomb event and lineup tables.

    Satisfies the :class:`~passchain.adapters.base.DataAdapter`
    protocol. Fetches data via ``statsbombpy`` and caches raw API
    responses to disk.

    Attributes:
        _cache: Disk-based cache for raw provider payloads.
    """

    __slots__ = ("_cache",)

    def __init__(self, cache_dir: Path) -> None:
        """Initialize the adapter with a cache directory.

        Args:
            cache_dir: Directory for caching raw API responses.
        """
        self._cache = PayloadCache(cache_dir)

    def list_matches(self, competition_id: int, season_id: int) -> list[MatchInfo]:
        """Return metadata for every match in a competition season.

        Args:
            competition_id: StatsBomb competition identifier.
            season_id: StatsBomb season identifier.

        Returns:
            List of :class:`MatchInfo` sorted by ``match_date``.
        """
        raw: dict[str, Any] = sb.matches(
            competition_id=competition_id,
            season_id=season_id,
            fmt="json",
        )
        matches = [
            MatchInfo(
                match_id=str(match_data["match_id"]),
                competition=match_data["competition"]["competition_name"],
                season=match_data["season"]["season_name"],
                home_team_name=match_data["home_team"]["home_team_name"],
                away_team_name=match_data["away_team"]["away_team_name"],
                home_score=int(match_data["home_score"]),
                away_score=int(match_data["away_score"]),
                match_date=match_data["match_date"],
            )
            for match_data in raw.values()
        ]
        matches.sort(key=lambda m: m.match_date)
        return matches

    def load_event_table(self, match_id: str) -> pl.DataFrame:
        """Load the canonical event table for a single match.

        Checks the disk cache first. On a cache miss the raw event
        data is fetched from the StatsBomb API and cached for future
        calls.

        Args:
            match_id: StatsBomb match identifier (as string).

        Returns:
            Event table sorted by ``(period, minute, second)``.

        Raises:
            AdapterError: If the raw payload lacks core columns.
        """
        cached = self._cache.get(match_id, "events")
        if cached is not None:
            raw_df = pd.DataFrame.from_dict(cached)
        else:
            raw_df = sb.events(match_id=int(match_id), flatten_attrs=True)
            self._cache.put(match_id, "events", raw_df.to_dict(orient="list"))
        return self._normalize_events(raw_df, match_id)

    def load_lineup_table(self, match_id: str) -> pl.DataFrame:
        """Load the canonical lineup table for both teams of a match.

        Args:
            match_id: StatsBomb match identifier (as string).

        Returns:
            Table with ``player_name``, ``player_nickname`` and
            ``team_name`` columns.
        """
        raw_lineups: dict[str, Any]
        cached = self._cache.get(match_id, "lineups")
        if cached is not None:
            raw_lineups = cached
        else:
            raw_lineups = sb.lineups(match_id=int(match_id), fmt="dict")
            self._cache.put(match_id, "lineups", raw_lineups)
        return self._normalize_lineups(raw_lineups)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_events(raw_df: pd.DataFrame, match_id: str) -> pl.DataFrame:
        """Map a flattened statsbombpy events frame to the event table.

        Provider columns absent from a match (e.g. no substitutions were
        made) become all-null columns.

        Args:
            raw_df: Flattened events DataFrame from ``statsbombpy``.
            match_id: Match identifier, used for error messages.

        Returns:
            Canonical event table.

        Raises:
            AdapterError: If a core column is missing.
        """
        missing = [c for c in _REQUIRED_RAW_COLUMNS if c not in raw_df.columns]
        if missing:
            msg = f"StatsBomb events for match {match_id} lack columns {missing}"
            raise AdapterError(msg)

        sort_keys = ["period", "minute", "second"]
        if "index" in raw_df.columns:
            sort_keys.append("index")
        ordered = raw_df.sort_values(by=sort_keys, ascending=True)

        data: dict[str, list[Any]] = {}
        for raw_col, col in STATSBOMB_COLUMN_MAP.items():
            if raw_col not in ordered.columns:
                data[col] = [None] * len(ordered)
            elif raw_col in _INTEGER_COLUMNS:
                data[col] = [int(v) for v in ordered[raw_col].tolist()]
            else:
                data[col] = [_clean_text(v) for v in ordered[raw_col].tolist()]

        table = pl.DataFrame(data, schema=EVENT_COLUMNS)
        logger.info("Loaded %d events for match %s", table.height, match_id)
        return validate_event_table(table)

    @staticmethod
    def _normalize_lineups(raw_lineups: dict[str, Any]) -> pl.DataFrame:
        """Convert raw StatsBomb lineup dicts to the lineup table.

        Args:
            raw_lineups: Dictionary keyed by team-ID string, each value
                a dict with ``team_name`` and ``lineup`` as returned by
                ``statsbombpy``.

        Returns:
            Lineup table with one row per roster member of both teams.
        """
        rows: list[dict[str, str | None]] = []
        for team_data in raw_lineups.values():
            for player_data in team_data.get("lineup", []):
                rows.append(
                    {
                        "player_name": player_data["player_name"],
                        "player_nickname": _clean_text(
                            player_data.get("player_nickname")
                        ),
                        "team_name": team_data["team_name"],
                    }
                )
        schema = {**LINEUP_COLUMNS, "team_name": pl.Utf8}
        return pl.DataFrame(rows, schema=schema)
