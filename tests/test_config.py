"""Tests for passchain.config dataclasses.

Verifies frozen/slotted invariants, default values, cutoff ordering and
the validation logic of every configuration container.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from passchain.config import (
    AnalysisConfig,
    Cutoff,
    FilterConfig,
    MarkovConfig,
    SimulationConfig,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_CONFIGS: list[tuple[type, dict[str, Any]]] = [
    (Cutoff, {}),
    (FilterConfig, {}),
    (MarkovConfig, {}),
    (SimulationConfig, {}),
    (AnalysisConfig, {"team": "Home FC"}),
]


# ---------------------------------------------------------------------------
# Structural invariants
# ---------------------------------------------------------------------------


class TestFrozenSlottedInvariants:
    """All config dataclasses must be frozen and slotted."""

    @pytest.mark.parametrize(("cls", "kwargs"), ALL_CONFIGS)
    def test_frozen(self, cls: type, kwargs: dict[str, Any]) -> None:
        """Assigning to a field on a frozen dataclass must raise."""
        instance = cls(**kwargs)
        first_field = next(iter(instance.__dataclass_fields__))
        with pytest.raises(AttributeError):
            setattr(instance, first_field, None)

    @pytest.mark.parametrize(("cls", "kwargs"), ALL_CONFIGS)
    def test_no_instance_dict(self, cls: type, kwargs: dict[str, Any]) -> None:
        """Slotted instances must not have a __dict__."""
        assert hasattr(cls, "__slots__")
        assert not hasattr(cls(**kwargs), "__dict__")


# ---------------------------------------------------------------------------
# Cutoff
# ---------------------------------------------------------------------------


class TestCutoff:
    """Cutoff points order by (period, minute) and render short labels."""

    def test_defaults(self) -> None:
        cutoff = Cutoff()
        assert cutoff.period == 1
        assert cutoff.minute == 30

    def test_label(self) -> None:
        assert Cutoff(period=2, minute=75).label == "p2_m75"

    def test_ordering_by_period_first(self) -> None:
        assert Cutoff(1, 90) < Cutoff(2, 46)
        assert Cutoff(1, 30) < Cutoff(1, 45)
        assert Cutoff(1, 30) == Cutoff(1, 30)

    @pytest.mark.parametrize("period", [0, -1])
    def test_invalid_period(self, period: int) -> None:
        with pytest.raises(ValueError, match="period"):
            Cutoff(period=period, minute=10)

    def test_invalid_minute(self) -> None:
        with pytest.raises(ValueError, match="minute"):
            Cutoff(period=1, minute=-1)


# ---------------------------------------------------------------------------
# Default values
# ---------------------------------------------------------------------------


class TestSubConfigDefaults:
    """Sub-configurations should expose correct defaults."""

    def test_filter_defaults(self) -> None:
        cfg = FilterConfig()
        assert set(cfg.excluded_sub_types) == {"Throw-in", "Corner", "Goal Kick"}

    def test_markov_defaults(self) -> None:
        cfg = MarkovConfig()
        assert cfg.dangling_policy == "raise"
        assert cfg.display_decimals == 4
        assert cfg.n_steps == (1, 2, 3, 5)
        assert cfg.eigen_tolerance == 1e-8

    def test_simulation_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.repetition_counts == (10, 100, 1000, 10000)
        assert cfg.sample_size is None
        assert cfg.random_state == 42


class TestAnalysisConfigDefaults:
    """AnalysisConfig should expose correct defaults and sub-configs."""

    def test_scalar_defaults(self) -> None:
        cfg = AnalysisConfig(team="Home FC")
        assert cfg.team == "Home FC"
        assert cfg.estimation_cutoff == Cutoff(1, 30)
        assert cfg.validation_cutoffs == (Cutoff(1, 45), Cutoff(2, 90))
        assert cfg.cache_dir == Path("data/statsbomb_cache")
        assert cfg.output_dir == Path("data/output")

    def test_nested_config_types(self) -> None:
        cfg = AnalysisConfig(team="Home FC")
        assert isinstance(cfg.filtering, FilterConfig)
        assert isinstance(cfg.markov, MarkovConfig)
        assert isinstance(cfg.simulation, SimulationConfig)

    def test_nested_configs_are_independent_instances(self) -> None:
        """Each AnalysisConfig must get its own sub-config instances."""
        a = AnalysisConfig(team="Home FC")
        b = AnalysisConfig(team="Home FC")
        assert a.markov is not b.markov
        assert a.simulation is not b.simulation


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestConfigValidation:
    """__post_init__ must reject invalid inputs."""

    def test_empty_team(self) -> None:
        with pytest.raises(ValueError, match="team"):
            AnalysisConfig(team="")

    def test_validation_cutoff_before_estimation(self) -> None:
        with pytest.raises(ValueError, match="precedes"):
            AnalysisConfig(
                team="Home FC",
                estimation_cutoff=Cutoff(1, 30),
                validation_cutoffs=(Cutoff(1, 20),),
            )

    def test_validation_cutoff_equal_to_estimation(self) -> None:
        cfg = AnalysisConfig(
            team="Home FC",
            estimation_cutoff=Cutoff(1, 30),
            validation_cutoffs=(Cutoff(1, 30),),
        )
        assert cfg.validation_cutoffs == (Cutoff(1, 30),)

    def test_no_validation_cutoffs(self) -> None:
        cfg = AnalysisConfig(team="Home FC", validation_cutoffs=())
        assert cfg.validation_cutoffs == ()

    @pytest.mark.parametrize("policy", ["", "zero_fill", "RAISE"])
    def test_invalid_dangling_policy(self, policy: str) -> None:
        with pytest.raises(ValueError, match="dangling_policy"):
            MarkovConfig(dangling_policy=policy)

    @pytest.mark.parametrize("policy", ["raise", "exclude"])
    def test_valid_dangling_policy(self, policy: str) -> None:
        assert MarkovConfig(dangling_policy=policy).dangling_policy == policy

    def test_negative_display_decimals(self) -> None:
        with pytest.raises(ValueError, match="display_decimals"):
            MarkovConfig(display_decimals=-1)

    @pytest.mark.parametrize("steps", [(), (0,), (1, -2)])
    def test_invalid_n_steps(self, steps: tuple[int, ...]) -> None:
        with pytest.raises(ValueError, match="n_steps"):
            MarkovConfig(n_steps=steps)

    def test_non_positive_eigen_tolerance(self) -> None:
        with pytest.raises(ValueError, match="eigen_tolerance"):
            MarkovConfig(eigen_tolerance=0.0)

    @pytest.mark.parametrize("counts", [(), (0,), (10, -1)])
    def test_invalid_repetition_counts(self, counts: tuple[int, ...]) -> None:
        with pytest.raises(ValueError, match="repetition_counts"):
            SimulationConfig(repetition_counts=counts)

    @pytest.mark.parametrize("counts", [(10, 10), (10, 100, 10)])
    def test_repeated_repetition_counts(self, counts: tuple[int, ...]) -> None:
        with pytest.raises(ValueError, match="repeat"):
            SimulationConfig(repetition_counts=counts)

    def test_invalid_sample_size(self) -> None:
        with pytest.raises(ValueError, match="sample_size"):
            SimulationConfig(sample_size=0)
