"""Player name to nickname lookup built from a lineup table.

Player identity throughout the engine is the official ``player_name``
recorded by the provider. Nicknames are a presentation concern only;
:class:`PlayerLookup` resolves them when rendering tables and figures,
and also acts as the data-quality gate that rejects events naming
players absent from the lineup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from passchain.adapters.schemas import validate_lineup_table
from passchain.exceptions import LineupLookupError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    import polars as pl

logger = logging.getLogger(__name__)


class PlayerLookup:
    """Immutable mapping from official player names to display nicknames.

    Attributes:
        _nicknames: Official name -> nickname (``None`` when the
            provider records no nickname).
    """

    __slots__ = ("_nicknames",)

    def __init__(self, nicknames: Mapping[str, str | None]) -> None:
        """Initialize the lookup.

        Args:
            nicknames: Official player name -> nickname or ``None``.
        """
        self._nicknames: dict[str, str | None] = dict(nicknames)

    @classmethod
    def from_frame(cls, lineups: pl.DataFrame, team: str | None = None) -> PlayerLookup:
        """Build a lookup from a lineup table.

        Args:
            lineups: Table with ``player_name`` and ``player_nickname``
                columns, one row per roster member of both teams.
            team: If given and the table carries a ``team_name``
                column, restrict the lookup to that team.

        Returns:
            A new :class:`PlayerLookup`.

        Raises:
            SchemaError: If required columns are missing.
        """
        table = validate_lineup_table(lineups)
        if team is not None and "team_name" in table.columns:
            table = table.filter(table["team_name"] == team)
        names = table["player_name"].to_list()
        nicknames = table["player_nickname"].to_list()
        logger.debug("Built player lookup with %d players", len(names))
        return cls(dict(zip(names, nicknames, strict=True)))

    def __contains__(self, player: object) -> bool:
        return player in self._nicknames

    def __len__(self) -> int:
        return len(self._nicknames)

    @property
    def players(self) -> tuple[str, ...]:
        """All official names known to the lookup, sorted."""
        return tuple(sorted(self._nicknames))

    def nickname(self, player: str) -> str:
        """Return the display name of *player*.

        Falls back to the official name when no nickname is recorded.

        Raises:
            LineupLookupError: If *player* is not in the lineup.
        """
        if player not in self._nicknames:
            msg = f"Player {player!r} is not present in the lineup table"
            raise LineupLookupError(msg)
        nickname = self._nicknames[player]
        return nickname if nickname else player

    def nicknames(self, players: Iterable[str]) -> list[str]:
        """Resolve display names for several players, preserving order."""
        return [self.nickname(p) for p in players]

    def validate(self, players: Iterable[str]) -> None:
        """Ensure every player in *players* appears in the lineup.

        Raises:
            LineupLookupError: Listing every unknown player.
        """
        unknown = sorted({p for p in players if p not in self._nicknames})
        if unknown:
            msg = f"Players not present in the lineup table: {unknown}"
            raise LineupLookupError(msg)
