"""Tests for n-step transition probabilities and projections."""

from __future__ import annotations

import numpy as np
import pytest

from passchain.exceptions import AlignmentError
from passchain.markov.distribution import Distribution
from passchain.markov.n_step import (
    matrix_power,
    n_step_probability,
    project_distribution,
)
from passchain.markov.roster import RosterSnapshot
from passchain.markov.transition import TransitionMatrix


class TestMatrixPower:
    """P^n behaves as repeated transitions."""

    def test_one_step_is_p(self, three_player_tpm: TransitionMatrix) -> None:
        np.testing.assert_allclose(
            matrix_power(three_player_tpm, 1), three_player_tpm.probabilities
        )

    @pytest.mark.parametrize(("a", "b"), [(1, 1), (2, 3), (4, 1)])
    def test_chapman_kolmogorov(
        self, three_player_tpm: TransitionMatrix, a: int, b: int
    ) -> None:
        np.testing.assert_allclose(
            matrix_power(three_player_tpm, a + b),
            matrix_power(three_player_tpm, a) @ matrix_power(three_player_tpm, b),
            atol=1e-12,
        )

    @pytest.mark.parametrize("n", [1, 2, 5, 20])
    def test_rows_stay_stochastic(
        self, three_player_tpm: TransitionMatrix, n: int
    ) -> None:
        np.testing.assert_allclose(
            matrix_power(three_player_tpm, n).sum(axis=1), 1.0, atol=1e-9
        )

    @pytest.mark.parametrize("n", [0, -1, 1.5, True])
    def test_invalid_n(self, three_player_tpm: TransitionMatrix, n: object) -> None:
        with pytest.raises(ValueError, match="positive integer"):
            matrix_power(three_player_tpm, n)  # type: ignore[arg-type]

    def test_n_step_probability(self, three_player_tpm: TransitionMatrix) -> None:
        # A -> B -> A (0.75 * 0.5) plus A -> C -> A (0.25 * 1.0)
        assert n_step_probability(
            three_player_tpm, 2, "Alice Ace", "Alice Ace"
        ) == pytest.approx(0.625)


class TestProjection:
    """q^T P^n projections of the reception distribution."""

    def test_one_step(
        self,
        three_player_tpm: TransitionMatrix,
        three_player_initial: Distribution,
    ) -> None:
        projected = project_distribution(three_player_tpm, three_player_initial, 1)
        np.testing.assert_allclose(projected.values, [0.375, 0.375, 0.25])

    @pytest.mark.parametrize("n", [1, 2, 3, 10])
    def test_sums_to_one(
        self,
        three_player_tpm: TransitionMatrix,
        three_player_initial: Distribution,
        n: int,
    ) -> None:
        projected = project_distribution(three_player_tpm, three_player_initial, n)
        assert projected.total == pytest.approx(1.0, abs=1e-6)

    def test_converges_to_steady_state(
        self,
        three_player_tpm: TransitionMatrix,
        three_player_initial: Distribution,
        three_player_pi: np.ndarray,
    ) -> None:
        projected = project_distribution(three_player_tpm, three_player_initial, 200)
        np.testing.assert_allclose(projected.values, three_player_pi, atol=1e-8)

    def test_roster_mismatch(self, three_player_tpm: TransitionMatrix) -> None:
        other = Distribution(RosterSnapshot(("X", "Y", "Z")), [0.2, 0.3, 0.5])
        with pytest.raises(AlignmentError):
            project_distribution(three_player_tpm, other, 1)
