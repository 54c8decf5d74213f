"""
Data types mirroring YAML schema structures.

These dataclasses are populated by loader.py from YAML files, plus the
plain result records the simulation hands to its presentation layer.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any

from .resources import ResourceVector
from .constants import (
    GAIN_FACTOR_DEFAULT,
    BIRTH_RATE_DEFAULT,
    THIRST_FACTOR_DEFAULT,
    HUNGER_FACTOR_DEFAULT,
    QUENCH_DIE_OFF_DEFAULT,
    HUNGER_DIE_OFF_DEFAULT,
    TRANSFER_FACTOR_DEFAULT,
    DAYS_PER_YEAR,
    REFERENCE_ORBIT,
)


# ============================================================================
# Planet Definition
# ============================================================================

@dataclass(frozen=True)
class PlanetaryState:
    """Physical facts used to seed a Planet"""
    gravity: float  # m/s^2
    distance: float  # Orbital radius (Gm)
    period: float  # Days per revolution
    theta: float  # Orbital angle (rad)
    initial_resources: ResourceVector


@dataclass
class PlanetDefinition:
    """Planet file contents"""
    name: str
    state: PlanetaryState
    available: Optional[ResourceVector] = None  # Starting usable stock override
    description: Optional[str] = None


# ============================================================================
# Solar System Definition
# ============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """Tuning constants for planet dynamics and trade"""
    gain_factor: float = GAIN_FACTOR_DEFAULT
    birth_rate: float = BIRTH_RATE_DEFAULT
    thirst_factor: float = THIRST_FACTOR_DEFAULT
    hunger_factor: float = HUNGER_FACTOR_DEFAULT
    quench_die_off: float = QUENCH_DIE_OFF_DEFAULT
    hunger_die_off: float = HUNGER_DIE_OFF_DEFAULT
    transfer_factor: float = TRANSFER_FACTOR_DEFAULT
    days_per_year: int = DAYS_PER_YEAR


@dataclass
class ReferenceConfig:
    """Canonical resource baseline and orbit of the reference planet"""
    resources: ResourceVector
    gravity: float = REFERENCE_ORBIT['gravity']
    distance: float = REFERENCE_ORBIT['distance']
    period: float = REFERENCE_ORBIT['period']
    theta: float = REFERENCE_ORBIT['theta']

    def to_state(self) -> PlanetaryState:
        return PlanetaryState(
            gravity=self.gravity,
            distance=self.distance,
            period=self.period,
            theta=self.theta,
            initial_resources=self.resources.copy()
        )


@dataclass
class PlanetReference:
    """Reference to a planet file"""
    planet_id: str
    file_path: str
    enabled: bool = True


@dataclass
class SolarSystem:
    """Solar system configuration"""
    system_id: str
    name: str
    simulation: SimulationConfig
    reference: ReferenceConfig
    planets: List[PlanetReference] = field(default_factory=list)
    description: Optional[str] = None


# ============================================================================
# Simulation Results
# ============================================================================

@dataclass
class DaySummary:
    """Aggregate view of the simulation after a day"""
    day: int
    qol_score: float
    alive: bool
    totals: ResourceVector  # Sum of available resources over all planets
    planet_qol: Dict[str, float]  # name -> total QOL
    planet_qol_rate: Dict[str, float]  # name -> fractional change

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (builtin types only)."""
        return {
            'day': int(self.day),
            'qol_score': float(self.qol_score),
            'alive': bool(self.alive),
            'totals': self.totals.to_dict(),
            'planet_qol': {k: float(v) for k, v in self.planet_qol.items()},
            'planet_qol_rate': {k: float(v) for k, v in self.planet_qol_rate.items()},
        }


@dataclass
class FinalReport:
    """Game-over report"""
    days_survived: int
    qol_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'days_survived': int(self.days_survived),
            'qol_score': float(self.qol_score),
        }
