"""Numeric helpers shared by the compatibility scoring."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp a value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return float(pd.Series(values, dtype="float64").mean())


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation coefficient of two paired samples.

    Returns 0.0 when the samples differ in length, hold fewer than two points,
    or either sample has zero variance. The result is clamped to [-1, 1] to
    absorb floating point drift.
    """
    if len(xs) != len(ys) or len(xs) < 2:
        return 0.0

    x = pd.Series(xs, dtype="float64")
    y = pd.Series(ys, dtype="float64")
    if x.nunique() < 2 or y.nunique() < 2:
        return 0.0

    coefficient = float(x.corr(y, method="pearson"))
    if math.isnan(coefficient):
        return 0.0
    return clamp(coefficient, -1.0, 1.0)
