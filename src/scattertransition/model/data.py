"""
Data Dimensions
===============
Defines a data point and the dimensions a data point is measured in.

Why is this file needed?
------------------------
1. Normalization: Every view plots its dimensions in the unit square [0, 1].
   A Dimension knows its domain and maps values into (and out of) it.
2. Identity: Views are validated against each other by comparing dimensions,
   so equality has to be well defined (name + domain bounds).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import math
from typing import Any, Iterable, Mapping

# A data point of arbitrary dimensions (dimension name -> value).
DataPoint = Mapping[str, float]


class DimensionMapping(StrEnum):
    LINEAR = "linear"
    LOG = "log"


def _linear_to_normalized(domain: tuple[float, float], value: float) -> float:
    lo, hi = domain
    return (value - lo) / (hi - lo)


def _linear_to_domain(domain: tuple[float, float], value: float) -> float:
    lo, hi = domain
    return lo + value * (hi - lo)


def _log_to_normalized(domain: tuple[float, float], value: float) -> float:
    lo, hi = domain
    if value - lo <= -1:
        raise ValueError(f"Value {value} is out of range for a log mapping of [{lo}, {hi}].")
    return math.log(value - lo + 1) / math.log(hi - lo + 1)


def _log_to_domain(domain: tuple[float, float], value: float) -> float:
    lo, hi = domain
    return lo + math.exp(value * math.log(hi - lo + 1)) - 1


_MAPPINGS = {
    DimensionMapping.LINEAR: (_linear_to_normalized, _linear_to_domain),
    DimensionMapping.LOG: (_log_to_normalized, _log_to_domain),
}


@dataclass(frozen=True, eq=False)
class Dimension:
    """
    A data dimension.

    In general, dimensions are assumed to be usable as a dimension in euclidean space.
    """
    name: str
    domain: tuple[float, float]
    mapping: DimensionMapping = DimensionMapping.LINEAR

    Linear = DimensionMapping.LINEAR
    Log = DimensionMapping.LOG

    def __post_init__(self) -> None:
        lo, hi = (float(v) for v in self.domain)
        if lo > hi:
            raise ValueError(f"Dimension '{self.name}' has an inverted domain [{lo}, {hi}].")
        object.__setattr__(self, "domain", (lo, hi))
        object.__setattr__(self, "mapping", DimensionMapping(self.mapping))

    @property
    def min(self) -> float:
        return self.domain[0]

    @property
    def max(self) -> float:
        return self.domain[1]

    def normalize(self, value: float) -> float:
        """
        Normalizes a value from this dimension's domain to 0..1.
        A degenerate domain (min == max) maps every value to the center, 0.5.
        """
        if self.domain[0] == self.domain[1]:
            return 0.5
        to_normalized, _ = _MAPPINGS[self.mapping]
        return to_normalized(self.domain, value)

    def expand(self, value: float) -> float:
        """Expands a normalized value [0..1] to a value in the regular domain range."""
        _, to_domain = _MAPPINGS[self.mapping]
        return to_domain(self.domain, value)

    def eq(self, other: Dimension) -> bool:
        """Returns True if this dimension equals the other dimension."""
        return (
            self.name == other.name
            and self.domain[0] == other.domain[0]
            and self.domain[1] == other.domain[1]
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dimension):
            return NotImplemented
        return self.eq(other)

    def __hash__(self) -> int:
        return hash((self.name, self.domain))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "domain": list(self.domain), "mapping": str(self.mapping)}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Dimension:
        return Dimension(
            name=data["name"],
            domain=(data["domain"][0], data["domain"][1]),
            mapping=DimensionMapping(data.get("mapping", DimensionMapping.LINEAR)),
        )

    @staticmethod
    def from_data(name: str, data: Iterable[DataPoint], padding: float = 0.0) -> Dimension:
        """
        Creates a new dimension from the given data.

        Args:
            name: The key in the data points that contains this dimension's data.
            data: The data with which to calculate the domain.
            padding: Additional multiplicative padding; the domain will be scaled by (padding + 1).

        Returns:
            A linear Dimension spanning the finite extent of the data ([0, 0] if there is none).
        """
        lo = math.inf
        hi = -math.inf
        for point in data:
            value = point[name]
            if not math.isfinite(value):
                continue
            if value < lo:
                lo = value
            if value > hi:
                hi = value
        if not math.isfinite(lo):
            lo = 0.0
        if not math.isfinite(hi):
            hi = 0.0
        if padding:
            extent = hi - lo
            lo -= extent * padding / 2
            hi += extent * padding / 2
        return Dimension(name, (lo, hi))
