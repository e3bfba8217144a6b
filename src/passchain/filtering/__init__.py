"""Pass filtering for the pass-chain possession engine.

Extracts qualifying passes from the canonical event table and detects
substituted players.
"""

from passchain.filtering.passes import SET_PIECE_SUB_TYPES, filter_passes, pass_pairs
from passchain.filtering.substitutions import substituted_players

__all__ = [
    "SET_PIECE_SUB_TYPES",
    "filter_passes",
    "pass_pairs",
    "substituted_players",
]
