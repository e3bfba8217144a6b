"""Internal data schemas for the pass-chain possession engine.

Defines the canonical event and lineup table layouts consumed by the
analytical core, and the immutable record types derived from them.
Every record is a frozen, slotted dataclass to guarantee immutability
and memory efficiency.
"""

from __future__ import annotations

from dataclasses import dataclass

import polars as pl

from passchain.exceptions import SchemaError

EVENT_COLUMNS: dict[str, type[pl.DataType]] = {
    "period": pl.Int64,
    "minute": pl.Int64,
    "second": pl.Int64,
    "type_name": pl.Utf8,
    "team_name": pl.Utf8,
    "player_name": pl.Utf8,
    "pass_recipient_name": pl.Utf8,
    "sub_type_name": pl.Utf8,
    "outcome_name": pl.Utf8,
    "substitution_replacement_name": pl.Utf8,
}

LINEUP_COLUMNS: dict[str, type[pl.DataType]] = {
    "player_name": pl.Utf8,
    "player_nickname": pl.Utf8,
}

PASS_TYPE: str = "Pass"
SUBSTITUTION_TYPE: str = "Substitution"


@dataclass(frozen=True, slots=True)
class PassEvent:
    """A single recorded pass by the focal team.

    Attributes:
        period: Match period of the pass.
        minute: Match minute of the pass.
        second: Second within the minute.
        team: Name of the passing team.
        actor: Identifier of the passer.
        recipient: Identifier of the intended recipient, or ``None``
            when the provider did not record one.
        sub_type: Provider pass sub type (``"Corner"``, ``"Throw-in"``,
            ...), or ``None`` for an open-play pass.
        outcome_failed: Whether a failure outcome was recorded.
    """

    period: int
    minute: int
    second: int
    team: str
    actor: str
    recipient: str | None
    sub_type: str | None
    outcome_failed: bool

    @property
    def time(self) -> tuple[int, int, int]:
        """Ordered ``(period, minute, second)`` triple."""
        return (self.period, self.minute, self.second)


@dataclass(frozen=True, slots=True)
class MatchInfo:
    """High-level metadata for a single match.

    Attributes:
        match_id: Unique identifier of the match.
        competition: Competition name (e.g. ``"FIFA World Cup"``).
        season: Season label (e.g. ``"2018"``).
        home_team_name: Display name of the home team.
        away_team_name: Display name of the away team.
        home_score: Final score of the home team.
        away_score: Final score of the away team.
        match_date: Match date in ISO 8601 format (``YYYY-MM-DD``).
    """

    match_id: str
    competition: str
    season: str
    home_team_name: str
    away_team_name: str
    home_score: int
    away_score: int
    match_date: str


def _missing_columns(
    df: pl.DataFrame,
    required: dict[str, type[pl.DataType]],
) -> list[str]:
    return [name for name in required if name not in df.columns]


def validate_event_table(events: pl.DataFrame) -> pl.DataFrame:
    """Check and coerce an event table to the canonical schema.

    Args:
        events: Event table with at least the :data:`EVENT_COLUMNS`.

    Returns:
        The table restricted to the canonical columns, cast to their
        canonical dtypes.

    Raises:
        SchemaError: If any required column is missing or cannot be
            cast.
    """
    missing = _missing_columns(events, EVENT_COLUMNS)
    if missing:
        msg = f"Event table is missing required columns: {missing}"
        raise SchemaError(msg)
    try:
        return events.select(
            pl.col(name).cast(dtype) for name, dtype in EVENT_COLUMNS.items()
        )
    except pl.exceptions.PolarsError as exc:
        msg = f"Event table columns could not be cast to the canonical schema: {exc}"
        raise SchemaError(msg) from exc


def validate_lineup_table(lineups: pl.DataFrame) -> pl.DataFrame:
    """Check and coerce a lineup table to the canonical schema.

    An optional ``team_name`` column is preserved when present.

    Args:
        lineups: Lineup table with at least the :data:`LINEUP_COLUMNS`.

    Returns:
        The coerced lineup table.

    Raises:
        SchemaError: If any required column is missing.
    """
    missing = _missing_columns(lineups, LINEUP_COLUMNS)
    if missing:
        msg = f"Lineup table is missing required columns: {missing}"
        raise SchemaError(msg)
    columns = [pl.col(name).cast(dtype) for name, dtype in LINEUP_COLUMNS.items()]
    if "team_name" in lineups.columns:
        columns.append(pl.col("team_name").cast(pl.Utf8))
    return lineups.select(columns)
