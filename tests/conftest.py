"""Shared test fixtures for the pass-chain possession engine.

Provides reusable fixtures used across multiple test modules:

* :func:`make_event` / :func:`make_events` -- builders for canonical
  event rows and event tables.
* :func:`make_passes` -- builder for passes from ``(actor, recipient)``
  pairs.
* :func:`three_player_events` -- a small match for ``Home FC`` whose
  first-half passes up to minute 30 form a three-player ergodic chain,
  padded with events that every filter must drop.
* :func:`three_player_passes` -- the twelve qualifying passes of that
  chain as :class:`PassEvent` records.
* :func:`three_player_tpm` / :func:`three_player_initial` -- the fitted
  transition matrix and reception distribution.
* :func:`lineups` -- a lineup table covering both teams.

The chain is ``A -> B`` x3, ``A -> C`` x1, ``B -> A`` x2, ``B -> C`` x2
and ``C -> A`` x4, with ``A``, ``B``, ``C`` being Alice, Bob and Cara::

    P = [[0.00, 0.75, 0.25],
         [0.50, 0.00, 0.50],
         [1.00, 0.00, 0.00]]

    q  = [6/12, 3/12, 3/12]
    pi = [8/19, 6/19, 5/19]
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
import polars as pl
import pytest

from passchain.adapters.schemas import EVENT_COLUMNS, PassEvent
from passchain.markov.distribution import Distribution
from passchain.markov.initial import build_initial_distribution
from passchain.markov.transition import TransitionMatrix, build_transition_matrix

HOME = "Home FC"
AWAY = "Away FC"
ALICE = "Alice Ace"
BOB = "Bob Back"
CARA = "Cara Centre"

THREE_PLAYER_PAIRS: tuple[tuple[str, str], ...] = (
    (ALICE, BOB),
    (BOB, ALICE),
    (ALICE, BOB),
    (BOB, CARA),
    (CARA, ALICE),
    (ALICE, CARA),
    (CARA, ALICE),
    (ALICE, BOB),
    (BOB, CARA),
    (CARA, ALICE),
    (BOB, ALICE),
    (CARA, ALICE),
)

THREE_PLAYER_PI: tuple[float, ...] = (8 / 19, 6 / 19, 5 / 19)


# ------------------------------------------------------------------
# Builders
# ------------------------------------------------------------------


def _event(
    type_name: str = "Pass",
    team_name: str | None = HOME,
    player_name: str | None = None,
    recipient: str | None = None,
    period: int = 1,
    minute: int = 0,
    second: int = 0,
    sub_type: str | None = None,
    outcome: str | None = None,
    replacement: str | None = None,
) -> dict[str, Any]:
    return {
        "period": period,
        "minute": minute,
        "second": second,
        "type_name": type_name,
        "team_name": team_name,
        "player_name": player_name,
        "pass_recipient_name": recipient,
        "sub_type_name": sub_type,
        "outcome_name": outcome,
        "substitution_replacement_name": replacement,
    }


def _frame(rows: Sequence[dict[str, Any]]) -> pl.DataFrame:
    return pl.DataFrame(list(rows), schema=EVENT_COLUMNS)


def _passes(pairs: Sequence[tuple[str, str | None]]) -> tuple[PassEvent, ...]:
    return tuple(
        PassEvent(
            period=1,
            minute=k,
            second=0,
            team=HOME,
            actor=actor,
            recipient=recipient,
            sub_type=None,
            outcome_failed=False,
        )
        for k, (actor, recipient) in enumerate(pairs)
    )


@pytest.fixture()
def make_event() -> Callable[..., dict[str, Any]]:
    """Return a builder for one canonical event row."""
    return _event


@pytest.fixture()
def make_events() -> Callable[[Sequence[dict[str, Any]]], pl.DataFrame]:
    """Return a builder for a canonical event table from rows."""
    return _frame


@pytest.fixture()
def make_passes() -> Callable[..., tuple[PassEvent, ...]]:
    """Return a builder for qualifying passes from (actor, recipient) pairs."""
    return _passes


# ------------------------------------------------------------------
# Three-player match
# ------------------------------------------------------------------


@pytest.fixture()
def three_player_events() -> pl.DataFrame:
    """Event table of the three-player chain plus noise and later passes.

    Qualifying passes up to ``p1_m30``: the twelve chain passes.
    Up to ``p1_m45`` two more passes are added (``A -> B``, ``C -> A``).
    In the second half a single ``B -> A`` pass qualifies.
    """
    rows = [_event("Starting XI", player_name=None)]
    for k, (actor, recipient) in enumerate(THREE_PLAYER_PAIRS):
        rows.append(_event(player_name=actor, recipient=recipient, minute=2 * k + 1))
    rows.extend(
        [
            # Dropped: opposing team, set piece, failed, no recipient.
            _event(
                team_name=AWAY, player_name="Zed Zero", recipient="Yan Yolo", minute=3
            ),
            _event(player_name=ALICE, recipient=BOB, minute=5, sub_type="Corner"),
            _event(player_name=BOB, recipient=CARA, minute=7, outcome="Incomplete"),
            _event(player_name=CARA, recipient=None, minute=9),
            _event("Ball Receipt*", player_name=BOB, minute=11),
            # Later windows.
            _event(player_name=ALICE, recipient=BOB, minute=38),
            _event(player_name=CARA, recipient=ALICE, minute=41),
            _event("Half Start", period=2, minute=45),
            _event(player_name=BOB, recipient=ALICE, period=2, minute=50),
        ]
    )
    return _frame(rows)


@pytest.fixture()
def three_player_passes() -> tuple[PassEvent, ...]:
    """The twelve qualifying passes of the three-player chain."""
    return _passes(THREE_PLAYER_PAIRS)


@pytest.fixture()
def three_player_tpm(three_player_passes: tuple[PassEvent, ...]) -> TransitionMatrix:
    """Transition matrix fitted on the three-player chain."""
    return build_transition_matrix(three_player_passes)


@pytest.fixture()
def three_player_initial(three_player_passes: tuple[PassEvent, ...]) -> Distribution:
    """Reception distribution of the three-player chain."""
    return build_initial_distribution(three_player_passes)


@pytest.fixture()
def three_player_pi() -> np.ndarray:
    """Exact stationary distribution of the three-player chain."""
    return np.array(THREE_PLAYER_PI)


@pytest.fixture()
def lineups() -> pl.DataFrame:
    """Lineup table for both teams of the three-player match."""
    return pl.DataFrame(
        {
            "player_name": [ALICE, BOB, CARA, "Dan Deep", "Zed Zero", "Yan Yolo"],
            "player_nickname": ["Ace", None, "Cara", "Dan", None, "Yan"],
            "team_name": [HOME, HOME, HOME, HOME, AWAY, AWAY],
        },
        schema={
            "player_name": pl.Utf8,
            "player_nickname": pl.Utf8,
            "team_name": pl.Utf8,
        },
    )
