"""Floating point helpers with IEEE-754 semantics."""

import math


def ieee_divide(numerator: float, denominator: float) -> float:
    """
    Divide with IEEE-754 semantics instead of raising ZeroDivisionError.

    x/0 gives +/-inf and 0/0 gives nan, so degenerate statistics (constant
    data, zero mean) propagate as nan or inf rather than aborting.

    Args:
        numerator: Dividend
        denominator: Divisor

    Returns:
        Quotient
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def is_nan(value: float) -> bool:
    """Whether value is a float nan."""
    return isinstance(value, float) and math.isnan(value)
