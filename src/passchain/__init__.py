"""Pass-chain possession engine.

Estimates long-run ball-possession probabilities among the players of
a football team from observed pass events with a discrete-time Markov
chain, and validates them against empirical reception frequencies.
"""

from passchain.config import AnalysisConfig, Cutoff
from passchain.exceptions import PassChainError

__version__ = "0.1.0"

__all__ = ["AnalysisConfig", "Cutoff", "PassChainError", "__version__"]
