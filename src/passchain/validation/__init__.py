"""Validation metrics for the pass-chain possession engine."""

from passchain.validation.metrics import (
    ValidationReport,
    build_validation_report,
    common_players,
    restrict_to_common,
    rmse,
)

__all__ = [
    "ValidationReport",
    "build_validation_report",
    "common_players",
    "restrict_to_common",
    "rmse",
]
