"""Custom exceptions for the pass-chain possession engine.

All exceptions inherit from :class:`PassChainError` so callers can catch
the full family with a single ``except PassChainError`` clause.
"""


class PassChainError(Exception):
    """Base exception for all pass-chain errors."""


class AdapterError(PassChainError):
    """Raised when a data adapter fails to load or transform data."""


class SchemaError(AdapterError):
    """Raised when an event or lineup table is missing required columns."""


class LineupLookupError(AdapterError, KeyError):
    """Raised when a player referenced by an event is absent from the lineup."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class RosterError(PassChainError):
    """Raised when a pass references a player outside the roster snapshot."""


class EmptyWindowError(PassChainError):
    """Raised when a time window contains no qualifying pass receptions."""


class DanglingStateError(PassChainError):
    """Raised when a transition matrix row has no outgoing passes."""


class ErgodicityError(PassChainError):
    """Raised when steady-state preconditions do not hold for a chain."""


class AlignmentError(PassChainError):
    """Raised when distributions are compared over different player sets."""
