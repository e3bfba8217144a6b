"""Detection of substituted players within a time window."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import polars as pl

from passchain.adapters.schemas import SUBSTITUTION_TYPE, validate_event_table

if TYPE_CHECKING:
    from passchain.config import Cutoff

logger = logging.getLogger(__name__)


def substituted_players(
    events: pl.DataFrame,
    team: str,
    cutoff: Cutoff,
) -> frozenset[str]:
    """Return every player substituted on or off up to *cutoff*.

    A player counts as substituted when a ``Substitution`` event of
    *team* in ``cutoff.period`` at or before ``cutoff.minute`` names
    them, either as the player leaving (``player_name``) or as the
    replacement coming on (``substitution_replacement_name``).

    Args:
        events: Canonical event table.
        team: Name of the focal team.
        cutoff: End of the window.

    Returns:
        Frozen set of player identifiers.
    """
    table = validate_event_table(events)
    subs = table.filter(
        (pl.col("type_name") == SUBSTITUTION_TYPE)
        & (pl.col("team_name") == team)
        & (pl.col("period") == cutoff.period)
        & (pl.col("minute") <= cutoff.minute)
    )
    outgoing = subs["player_name"].drop_nulls().to_list()
    incoming = subs["substitution_replacement_name"].drop_nulls().to_list()
    players = frozenset(outgoing) | frozenset(incoming)
    if players:
        logger.debug(
            "%d substitution(s) for %s up to %s: %s",
            subs.height,
            team,
            cutoff.label,
            sorted(players),
        )
    return players
