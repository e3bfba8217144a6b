"""Data adapter layer for the pass-chain possession engine.

Re-exports the canonical table schemas, the adapter protocol, the
StatsBomb concrete adapter, the payload cache and the player lookup so
that downstream code can import everything from
:mod:`passchain.adapters`.
"""

from passchain.adapters.base import DataAdapter
from passchain.adapters.cache import PayloadCache
from passchain.adapters.lineups import PlayerLookup
from passchain.adapters.schemas import (
    EVENT_COLUMNS,
    LINEUP_COLUMNS,
    MatchInfo,
    PassEvent,
    validate_event_table,
    validate_lineup_table,
)
from passchain.adapters.statsbomb import StatsBombAdapter

__all__ = [
    "EVENT_COLUMNS",
    "LINEUP_COLUMNS",
    "DataAdapter",
    "MatchInfo",
    "PassEvent",
    "PayloadCache",
    "PlayerLookup",
    "StatsBombAdapter",
    "validate_event_table",
    "validate_lineup_table",
]
