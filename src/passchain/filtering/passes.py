"""Extraction of successful, in-play passes for the possession chain.

A pass qualifies for the chain when it was made by the focal team in
the cutoff's period at or before the cutoff minute, is not a set piece
(throw-in, corner, goal kick), carries no failure outcome, and names a
recipient.

Substitution policy
-------------------
Every pass involving a player substituted on or off at any point up to
the cutoff is dropped from the *whole* window, including passes made
before the substitution. The chain is defined over the players active
for the entire window, so a substituted player is removed outright
rather than truncated at the substitution time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import polars as pl

from passchain.adapters.schemas import PASS_TYPE, PassEvent, validate_event_table
from passchain.filtering.substitutions import substituted_players

if TYPE_CHECKING:
    from collections.abc import Iterable

    from passchain.config import Cutoff

logger = logging.getLogger(__name__)

SET_PIECE_SUB_TYPES: frozenset[str] = frozenset({"Throw-in", "Corner", "Goal Kick"})


def _qualifying_rows(
    table: pl.DataFrame,
    team: str,
    cutoff: Cutoff,
    excluded_sub_types: Iterable[str],
) -> pl.DataFrame:
    """Apply the per-row pass predicates to a validated event table."""
    excluded = sorted(excluded_sub_types)
    return table.filter(
        (pl.col("type_name") == PASS_TYPE)
        & (pl.col("team_name") == team)
        & (pl.col("period") == cutoff.period)
        & (pl.col("minute") <= cutoff.minute)
        & (pl.col("sub_type_name").is_null() | ~pl.col("sub_type_name").is_in(excluded))
        & pl.col("outcome_name").is_null()
        & pl.col("player_name").is_not_null()
        & pl.col("pass_recipient_name").is_not_null()
    ).sort(["period", "minute", "second"], maintain_order=True)


def filter_passes(
    events: pl.DataFrame,
    team: str,
    cutoff: Cutoff,
    excluded_sub_types: Iterable[str] = SET_PIECE_SUB_TYPES,
) -> tuple[PassEvent, ...]:
    """Return the successful, in-play passes of *team* up to *cutoff*.

    Args:
        events: Canonical event table (see
            :data:`~passchain.adapters.schemas.EVENT_COLUMNS`).
        team: Name of the focal team.
        cutoff: End of the window; only events of ``cutoff.period``
            are considered.
        excluded_sub_types: Pass sub types treated as set pieces.

    Returns:
        Qualifying passes in chronological order. An empty tuple is a
        valid result when nothing matches.

    Raises:
        SchemaError: If the event table lacks required columns.
    """
    table = validate_event_table(events)
    rows = _qualifying_rows(table, team, cutoff, excluded_sub_types)

    removed = substituted_players(table, team, cutoff)
    if removed:
        rows = rows.filter(
            ~pl.col("player_name").is_in(sorted(removed))
            & ~pl.col("pass_recipient_name").is_in(sorted(removed))
        )

    passes = tuple(
        PassEvent(
            period=row["period"],
            minute=row["minute"],
            second=row["second"],
            team=row["team_name"],
            actor=row["player_name"],
            recipient=row["pass_recipient_name"],
            sub_type=row["sub_type_name"],
            outcome_failed=False,
        )
        for row in rows.iter_rows(named=True)
    )
    logger.info(
        "%d qualifying passes for %s up to %s (%d substituted players removed)",
        len(passes),
        team,
        cutoff.label,
        len(removed),
    )
    return passes


def pass_pairs(passes: Iterable[PassEvent]) -> list[tuple[str, str]]:
    """Project passes onto ``(actor, recipient)`` pairs.

    Passes without a recipient are skipped.
    """
    return [(p.actor, p.recipient) for p in passes if p.recipient is not None]
