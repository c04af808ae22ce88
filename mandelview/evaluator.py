"""Escape-time evaluation of single points of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

DEFAULT_ITERATION_CAP = 1000
DEFAULT_DIVERGENCE_RADIUS = 2.0

# Integer encoding of ``BOUND`` used by the array based paths.
BOUND_COUNT = -1


@dataclass(frozen=True)
class Escaped:
    """The orbit left the divergence radius during update ``iteration``."""

    iteration: int


@dataclass(frozen=True)
class Bound:
    """The orbit stayed inside the divergence radius for the whole cap."""


BOUND = Bound()

EscapeResult = Union[Escaped, Bound]


def evaluate(
    c: complex,
    iteration_cap: int = DEFAULT_ITERATION_CAP,
    divergence_radius: float = DEFAULT_DIVERGENCE_RADIUS,
) -> EscapeResult:
    """Iterate ``z = z*z + c`` from zero and report when ``|z|`` exceeds the radius."""

    z = 0j
    for iteration in range(iteration_cap):
        z = z * z + c
        try:
            magnitude = abs(z)
        except OverflowError:
            # Finite components whose norm does not fit in a double.
            return Escaped(iteration)
        if magnitude > divergence_radius:
            return Escaped(iteration)
    return BOUND


def escape_count(result: EscapeResult) -> int:
    if isinstance(result, Escaped):
        return result.iteration
    return BOUND_COUNT


def from_escape_count(count: int) -> EscapeResult:
    if count < 0:
        return BOUND
    return Escaped(int(count))
