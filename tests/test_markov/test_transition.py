"""Tests for transition matrix estimation.

Covers the pairwise count fold, row normalisation, the row-stochastic
invariant, dangling-state handling under both policies, explicit
rosters, and table rendering for
:func:`passchain.markov.transition.build_transition_matrix`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np
import pytest

from passchain.adapters.lineups import PlayerLookup
from passchain.exceptions import DanglingStateError, EmptyWindowError, RosterError
from passchain.markov.roster import RosterSnapshot
from passchain.markov.transition import (
    TransitionMatrix,
    build_transition_matrix,
    count_passes,
)

MakePasses = Callable[..., tuple]

EXPECTED_P = np.array(
    [
        [0.00, 0.75, 0.25],
        [0.50, 0.00, 0.50],
        [1.00, 0.00, 0.00],
    ]
)


class TestThreePlayerChain:
    """The fixture chain's counts and probabilities."""

    def test_roster(self, three_player_tpm: TransitionMatrix) -> None:
        assert three_player_tpm.players == ("Alice Ace", "Bob Back", "Cara Centre")
        assert three_player_tpm.excluded_players == ()

    def test_counts(self, three_player_tpm: TransitionMatrix) -> None:
        np.testing.assert_array_equal(
            three_player_tpm.counts, [[0, 3, 1], [2, 0, 2], [4, 0, 0]]
        )
        np.testing.assert_array_equal(three_player_tpm.sent, [4, 4, 4])

    def test_probabilities(self, three_player_tpm: TransitionMatrix) -> None:
        np.testing.assert_allclose(three_player_tpm.probabilities, EXPECTED_P)
        assert three_player_tpm.probability("Alice Ace", "Bob Back") == 0.75

    def test_rows_sum_to_one(self, three_player_tpm: TransitionMatrix) -> None:
        np.testing.assert_allclose(three_player_tpm.row_sums, 1.0, atol=1e-6)

    def test_arrays_read_only(self, three_player_tpm: TransitionMatrix) -> None:
        with pytest.raises(ValueError):
            three_player_tpm.probabilities[0, 0] = 1.0


class TestCountPasses:
    """The count fold ignores passes without a recipient."""

    def test_missing_recipient_ignored(self, make_passes: MakePasses) -> None:
        roster = RosterSnapshot(("A", "B"))
        counts = count_passes(make_passes([("A", "B"), ("A", None)]), roster)
        np.testing.assert_array_equal(counts, [[0, 1], [0, 0]])

    def test_unknown_player_raises(self, make_passes: MakePasses) -> None:
        with pytest.raises(RosterError, match="C"):
            count_passes(make_passes([("A", "C")]), RosterSnapshot(("A", "B")))


class TestDanglingStates:
    """Players without outgoing passes are never zero-filled."""

    def test_raise_policy(self, make_passes: MakePasses) -> None:
        passes = make_passes([("A", "B"), ("B", "A"), ("A", "C")])
        with pytest.raises(DanglingStateError, match=r"\['C'\]"):
            build_transition_matrix(passes)

    def test_exclude_policy(
        self, make_passes: MakePasses, caplog: pytest.LogCaptureFixture
    ) -> None:
        passes = make_passes([("A", "B"), ("B", "A"), ("A", "C"), ("A", "B")])
        with caplog.at_level(logging.WARNING):
            tpm = build_transition_matrix(passes, dangling_policy="exclude")

        assert tpm.players == ("A", "B")
        assert tpm.excluded_players == ("C",)
        np.testing.assert_allclose(tpm.probabilities, [[0.0, 1.0], [1.0, 0.0]])
        assert any("dangling" in rec.message for rec in caplog.records)

    def test_exclude_cascades(self, make_passes: MakePasses) -> None:
        """Dropping one player can leave another without outgoing passes."""
        passes = make_passes([("A", "B"), ("B", "A"), ("C", "D"), ("A", "C")])
        tpm = build_transition_matrix(passes, dangling_policy="exclude")
        assert tpm.players == ("A", "B")
        assert tpm.excluded_players == ("D", "C")

    def test_exclude_leaving_nothing(self, make_passes: MakePasses) -> None:
        passes = make_passes([("A", "B"), ("B", "C")])
        with pytest.raises(DanglingStateError, match="no valid transitions"):
            build_transition_matrix(passes, dangling_policy="exclude")

    def test_roster_player_without_passes(self, make_passes: MakePasses) -> None:
        passes = make_passes([("A", "B"), ("B", "A")])
        with pytest.raises(DanglingStateError):
            build_transition_matrix(passes, roster=RosterSnapshot(("A", "B", "C")))


class TestBuildErrors:
    """Invalid inputs."""

    def test_empty_window(self) -> None:
        with pytest.raises(EmptyWindowError):
            build_transition_matrix(())

    def test_unknown_policy(self, make_passes: MakePasses) -> None:
        with pytest.raises(ValueError, match="dangling_policy"):
            build_transition_matrix(make_passes([("A", "B")]), dangling_policy="fill")

    def test_pass_outside_roster(self, make_passes: MakePasses) -> None:
        passes = make_passes([("A", "B"), ("B", "A"), ("A", "C")])
        with pytest.raises(RosterError):
            build_transition_matrix(passes, roster=RosterSnapshot(("A", "B")))


class TestToFrame:
    """Table rendering keeps full precision in the matrix itself."""

    def test_columns(self, three_player_tpm: TransitionMatrix) -> None:
        frame = three_player_tpm.to_frame()
        assert frame.columns == [
            "player_name",
            "Alice Ace",
            "Bob Back",
            "Cara Centre",
        ]
        assert frame.row(0) == ("Alice Ace", 0.0, 0.75, 0.25)

    def test_nicknames_in_row_column(self, three_player_tpm: TransitionMatrix) -> None:
        lookup = PlayerLookup(
            {"Alice Ace": "Ace", "Bob Back": None, "Cara Centre": "Cara"}
        )
        frame = three_player_tpm.to_frame(decimals=2, lookup=lookup)
        assert frame.columns == [
            "player_name",
            "player_nickname",
            "Alice Ace",
            "Bob Back",
            "Cara Centre",
        ]
        assert frame["player_nickname"].to_list() == ["Ace", "Bob Back", "Cara"]

    def test_shared_nickname_keeps_every_column(self, make_passes: MakePasses) -> None:
        tpm = build_transition_matrix(
            make_passes([("A", "B"), ("B", "C"), ("C", "A"), ("A", "C")])
        )
        lookup = PlayerLookup({"A": "Ze", "B": "Ze", "C": None})
        frame = tpm.to_frame(lookup=lookup)
        assert frame.shape == (3, 5)
        assert frame.columns[2:] == ["A", "B", "C"]
        assert frame["player_nickname"].to_list() == ["Ze", "Ze", "C"]
        assert frame.row(2) == ("C", "C", 1.0, 0.0, 0.0)
        np.testing.assert_allclose(
            frame.select(["A", "B", "C"]).to_numpy().sum(axis=1), 1.0
        )
