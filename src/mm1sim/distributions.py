"""Inverse-CDF sampling on top of an arbitrary uniform source."""

from __future__ import annotations

import math
from typing import Callable

UniformSource = Callable[[], float]


class InvalidParameterError(ValueError):
    """Raised when a rate or horizon falls outside its valid domain."""


def exponential_sample(uniform: UniformSource, rate: float) -> float:
    """
    Draw one exponential duration with the given rate.

    Consumes exactly one value from ``uniform``. A draw of exactly 0 maps to a
    zero-length duration; it is not rejected.

    Raises:
        InvalidParameterError: when ``rate`` is not a finite positive number.
            No value is drawn in that case.
    """
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidParameterError(f"Rate must be strictly positive, got {rate!r}.")
    u = uniform()
    return -math.log(1.0 - u) / rate
