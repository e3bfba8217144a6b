"""Abstract adapter protocol for data providers.

Defines the :class:`DataAdapter` structural interface that every
concrete data-provider adapter must satisfy. Adapters are responsible
for mapping provider-specific event and lineup payloads onto the
canonical tables defined in :mod:`passchain.adapters.schemas`:

* **Event table** -- one row per match event with the
  :data:`~passchain.adapters.schemas.EVENT_COLUMNS` columns.
* **Lineup table** -- one row per roster member of both teams with the
  :data:`~passchain.adapters.schemas.LINEUP_COLUMNS` columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import polars as pl

    from passchain.adapters.schemas import MatchInfo


@runtime_checkable
class DataAdapter(Protocol):
    """Structural interface for match-data providers.

    Any class that implements the three methods below is a valid
    ``DataAdapter`` without needing to inherit from this class.
    """

    def list_matches(self, competition_id: int, season_id: int) -> list[MatchInfo]:
        """Return metadata for every match in a competition season.

        Args:
            competition_id: Provider-specific competition identifier.
            season_id: Provider-specific season identifier.

        Returns:
            List of :class:`MatchInfo` instances, one per match.
        """
        ...

    def load_event_table(self, match_id: str) -> pl.DataFrame:
        """Load the canonical event table for a single match.

        Args:
            match_id: Unique match identifier as used by the provider.

        Returns:
            Event table sorted by ``(period, minute, second)``.
        """
        ...

    def load_lineup_table(self, match_id: str) -> pl.DataFrame:
        """Load the canonical lineup table for a single match.

        Args:
            match_id: Unique match identifier as used by the provider.

        Returns:
            Lineup table covering both teams.
        """
        ...
