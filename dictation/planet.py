"""
Planet runtime representation.

Planets are built from planet definitions at game start and mutated once
per simulated day by step(). All quality-of-life and growth formulas are
normalized against a ReferenceBaseline passed in by the caller.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .resources import ResourceVector
from .data_types import PlanetaryState, PlanetDefinition, ReferenceConfig, SimulationConfig
from .geometry import orbital_position, distance_2d, wrap_angle, TWO_PI
from .constants import CONSUMABLE_RESOURCES, BASELINE_ATTRITION


@dataclass(frozen=True)
class ReferenceBaseline:
    """
    Per-capita constants taken from the reference planet.

    Attributes:
        water_per_capita: Daily water requirement per person
        food_per_capita: Daily food requirement per person
        energy_per_capita: Daily energy requirement per person
        qol_per_capita: Reference quality of life per person
        config: Tuning constants shared by every planet
    """
    water_per_capita: float
    food_per_capita: float
    energy_per_capita: float
    qol_per_capita: float
    config: SimulationConfig = SimulationConfig()

    def per_capita(self, resource: str) -> float:
        return getattr(self, f"{resource}_per_capita")

    @classmethod
    def from_planet(cls, planet: 'Planet', config: SimulationConfig) -> 'ReferenceBaseline':
        """Measure a (reference) planet's current per-capita values."""
        partial = cls(
            water_per_capita=planet.water_per_capita,
            food_per_capita=planet.food_per_capita,
            energy_per_capita=planet.energy_per_capita,
            qol_per_capita=0.0,
            config=config
        )
        # Quench and fullness never read qol_per_capita
        return replace(partial, qol_per_capita=planet.qol_per_capita(partial))

    @classmethod
    def from_config(cls, reference: ReferenceConfig, config: SimulationConfig) -> 'ReferenceBaseline':
        return cls.from_planet(Planet.reference(reference), config)


@dataclass
class Planet:
    """
    One simulated body.

    Attributes:
        name: Unique identifier (map key everywhere)
        state: Physical facts and initial endowment
        raw: Unmined reserves remaining
        available: Resources currently usable by the population
        rate: Most recent day's fractional change per resource
        angle: Current orbital angle (rad), in [0, 2*pi)
        qol_rate: Most recent day's fractional change in total QOL
    """
    name: str
    state: PlanetaryState
    raw: Optional[ResourceVector] = None
    available: Optional[ResourceVector] = None
    rate: Optional[ResourceVector] = None
    angle: Optional[float] = None
    qol_rate: float = 0.0

    def __post_init__(self):
        """Seed reserves and stock from the initial endowment"""
        initial = self.state.initial_resources
        if self.raw is None:
            self.raw = initial.copy()
        if self.available is None:
            self.available = ResourceVector(population=initial.population)
        if self.rate is None:
            self.rate = ResourceVector.zero()
        if self.angle is None:
            self.angle = wrap_angle(self.state.theta)

    @classmethod
    def from_definition(cls, definition: PlanetDefinition) -> 'Planet':
        planet = cls(name=definition.name, state=definition.state)
        if definition.available is not None:
            planet.available = definition.available.copy()
        return planet

    @classmethod
    def reference(cls, reference: ReferenceConfig) -> 'Planet':
        """Reference planet: canonical orbit, stock equal to the baseline."""
        planet = cls(name="reference", state=reference.to_state())
        planet.available = reference.resources.copy()
        return planet

    @property
    def initial(self) -> ResourceVector:
        return self.state.initial_resources

    @property
    def dead(self) -> bool:
        """True if no population exists."""
        return self.available.population == 0

    # ------------------------------------------------------------------
    # Depletion & consumption
    # ------------------------------------------------------------------

    def abundance(self, resource: str) -> float:
        """Fraction of the original reserve still unmined (0 if none existed)."""
        original = self.initial[resource]
        if original == 0:
            return 0.0
        return self.raw[resource] / original

    def mu(self, resource: str, ref: ReferenceBaseline) -> float:
        """
        Mine and consume one day of a resource.

        Returns:
            Fractional change of the available stock, 0 if it was empty
        """
        required = self.available.population * ref.per_capita(resource)

        mining = required * (1.0 + ref.config.gain_factor) * self.abundance(resource)
        mining = min(self.raw[resource], mining)
        self.raw[resource] = max(0.0, self.raw[resource] - mining)

        previous = self.available[resource]
        self.available[resource] = max(0.0, previous + mining - required)

        if previous == 0:
            return 0.0
        return (mining - required) / previous

    # ------------------------------------------------------------------
    # Quality of life
    # ------------------------------------------------------------------

    def _per_capita(self, resource: str) -> float:
        population = self.available.population
        if population == 0:
            return 0.0
        return self.available[resource] / population

    @property
    def water_per_capita(self) -> float:
        return self._per_capita('water')

    @property
    def food_per_capita(self) -> float:
        return self._per_capita('food')

    @property
    def energy_per_capita(self) -> float:
        return self._per_capita('energy')

    def quench(self, ref: ReferenceBaseline) -> float:
        """How much the people's thirst is quenched."""
        return math.sqrt(self.water_per_capita / ref.water_per_capita) - ref.config.thirst_factor

    def fullness(self, ref: ReferenceBaseline) -> float:
        """How much the people's hunger is satisfied."""
        return math.sqrt(self.food_per_capita / ref.food_per_capita) - ref.config.hunger_factor

    def qol_per_capita(self, ref: ReferenceBaseline) -> float:
        if self.available.population == 0:
            return 0.0
        return self.quench(ref) + self.fullness(ref)

    def productivity(self, ref: ReferenceBaseline) -> float:
        return self.qol_per_capita(ref) / ref.qol_per_capita

    def total_qol(self, ref: ReferenceBaseline) -> float:
        return self.qol_per_capita(ref) * self.available.population

    # ------------------------------------------------------------------
    # Population dynamics
    # ------------------------------------------------------------------

    def birth_rate(self, ref: ReferenceBaseline) -> float:
        """Birth rate per day."""
        config = ref.config
        if self.quench(ref) < 0:
            return -config.quench_die_off
        if self.fullness(ref) < 0:
            return -config.hunger_die_off
        productivity = self.productivity(ref)
        return float(np.sign(productivity)) * productivity ** 2 * config.birth_rate

    def birth(self, ref: ReferenceBaseline) -> float:
        """Perform a day of births and deaths, returning the birth rate used."""
        rate = self.birth_rate(ref)
        population = (self.available.population - BASELINE_ATTRITION) * (1.0 + rate)
        # Half-up rounding
        self.available.population = float(max(0, math.floor(population + 0.5)))
        return rate

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        return orbital_position(self.state.distance, self.angle)

    @property
    def degrees(self) -> float:
        return math.degrees(self.angle)

    def distance_to(self, other: 'Planet') -> float:
        return distance_2d(self.position, other.position)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def step(self, ref: ReferenceBaseline):
        """
        Step forward a single day.

        Dead planets are frozen: nothing changes, not even the orbit.
        """
        if self.dead:
            return

        old_qol = self.total_qol(ref)

        for resource in CONSUMABLE_RESOURCES:
            self.rate[resource] = self.mu(resource, ref)

        self.rate.population = self.birth(ref)

        self.angle = wrap_angle(self.angle + TWO_PI / self.state.period)

        if old_qol == 0:
            self.qol_rate = 0.0
        else:
            self.qol_rate = self.total_qol(ref) / old_qol - 1.0

    def forward(self, days: int, ref: ReferenceBaseline):
        """Simulate this planet alone forward in time."""
        for _ in range(days):
            self.step(ref)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Serialize planet to JSON-compatible dict.

        Returns:
            Dict with all planet fields
        """
        return {
            'name': self.name,
            'gravity': float(self.state.gravity),
            'distance': float(self.state.distance),
            'period': float(self.state.period),
            'theta': float(self.state.theta),
            'initial_resources': self.initial.to_dict(),
            'raw': self.raw.to_dict(),
            'available': self.available.to_dict(),
            'rate': self.rate.to_dict(),
            'angle': float(self.angle),
            'qol_rate': float(self.qol_rate)
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Planet':
        """
        Deserialize planet from dict.

        Args:
            data: Dict with planet fields

        Returns:
            Planet instance
        """
        state = PlanetaryState(
            gravity=data['gravity'],
            distance=data['distance'],
            period=data['period'],
            theta=data['theta'],
            initial_resources=ResourceVector.from_dict(data['initial_resources'])
        )
        return cls(
            name=data['name'],
            state=state,
            raw=ResourceVector.from_dict(data['raw']),
            available=ResourceVector.from_dict(data['available']),
            rate=ResourceVector.from_dict(data.get('rate', {})),
            angle=data.get('angle'),
            qol_rate=data.get('qol_rate', 0.0)
        )
