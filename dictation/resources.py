"""
Resource vector value type.

A fixed-key quantity of water, food, energy and population with the
element-wise arithmetic used by planets and the trade ledger.
"""

from dataclasses import dataclass, fields
from typing import Dict

import numpy as np

from .constants import RESOURCE_NAMES


@dataclass
class ResourceVector:
    """
    Quantity of each tracked resource.

    Attributes:
        water: Liters
        food: Kilograms
        energy: Joules
        population: Persons (integral in practice)
    """
    water: float = 0.0
    food: float = 0.0
    energy: float = 0.0
    population: float = 0.0

    @classmethod
    def zero(cls) -> 'ResourceVector':
        return cls()

    def invert(self) -> 'ResourceVector':
        """Element-wise negation (outgoing flow as mirror of incoming)."""
        return ResourceVector(-self.water, -self.food, -self.energy, -self.population)

    def copy(self) -> 'ResourceVector':
        return ResourceVector(self.water, self.food, self.energy, self.population)

    def __getitem__(self, name: str) -> float:
        _check_name(name)
        return getattr(self, name)

    def __setitem__(self, name: str, value: float):
        _check_name(name)
        setattr(self, name, value)

    def __add__(self, other: 'ResourceVector') -> 'ResourceVector':
        return ResourceVector.from_array(self.to_array() + other.to_array())

    def __sub__(self, other: 'ResourceVector') -> 'ResourceVector':
        return ResourceVector.from_array(self.to_array() - other.to_array())

    def __neg__(self) -> 'ResourceVector':
        return self.invert()

    def to_array(self) -> np.ndarray:
        """Values as float64 array in RESOURCE_NAMES order."""
        return np.array([getattr(self, name) for name in RESOURCE_NAMES], dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> 'ResourceVector':
        return cls(*(float(v) for v in values))

    def to_dict(self) -> Dict[str, float]:
        """Serialize to a plain dict (builtin floats only)."""
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'ResourceVector':
        """
        Build from a partial mapping; missing keys default to 0.

        Raises:
            KeyError: if data names an untracked resource
        """
        for name in data:
            _check_name(name)
        return cls(**{name: float(value) for name, value in data.items()})


def _check_name(name: str):
    if name not in RESOURCE_NAMES:
        raise KeyError(f"Unknown resource: {name!r}")


def zero() -> ResourceVector:
    """Resource vector with every tracked key at 0."""
    return ResourceVector.zero()


def invert(vector: ResourceVector) -> ResourceVector:
    """Element-wise negation of a resource vector."""
    return vector.invert()


def total(vectors) -> ResourceVector:
    """Element-wise sum of an iterable of resource vectors."""
    result = np.zeros(len(RESOURCE_NAMES), dtype=np.float64)
    for vector in vectors:
        result += vector.to_array()
    return ResourceVector.from_array(result)
