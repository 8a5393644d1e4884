"""Derived workout metrics."""

from .splits import (
    DEFAULT_SPLIT_DISTANCE_M,
    DISTANCE_TOLERANCE_M,
    METERS_PER_KILOMETER,
    METERS_PER_MILE,
    SplitCalculator,
    SplitCalculatorState,
    SplitUnit,
    calculate_splits,
    finish,
    prerecorded_paces,
    step,
    validate_split_distance,
)

__all__ = [
    "DEFAULT_SPLIT_DISTANCE_M",
    "DISTANCE_TOLERANCE_M",
    "METERS_PER_KILOMETER",
    "METERS_PER_MILE",
    "SplitCalculator",
    "SplitCalculatorState",
    "SplitUnit",
    "calculate_splits",
    "finish",
    "prerecorded_paces",
    "step",
    "validate_split_distance",
]
