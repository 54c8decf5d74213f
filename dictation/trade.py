"""
Standing resource transfers between planets.

The ledger keeps planet names, never planet copies, and resolves them
against the simulation's planet store each day. forward() runs once per
day after every planet has stepped.

Loss model:
    delivered = sent * (1 - transfer_factor * distance)

The loss fraction is clamped to [0, 1] and lost cargo is destroyed, not
refunded. Sends are clamped to the source's available stock; the unmet
part is recorded as shortfall.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .planet import Planet
from .resources import ResourceVector, total
from .data_types import SimulationConfig
from .geometry import pairwise_distances
from .constants import RESOURCE_NAMES


@dataclass
class Transfer:
    """
    Standing annual flow from one planet to another.

    Attributes:
        source: Sending planet name
        destination: Receiving planet name
        annual: Resources moved per year
        transfer_id: Assigned by the ledger on registration
        population_carry: Fraction of a person owed but not yet sent
    """
    source: str
    destination: str
    annual: ResourceVector
    transfer_id: Optional[int] = None
    population_carry: float = 0.0

    @classmethod
    def between(cls, source: Planet, destination: Planet, annual: ResourceVector) -> 'Transfer':
        return cls(source=source.name, destination=destination.name, annual=annual.copy())

    def daily(self, days_per_year: int) -> ResourceVector:
        return ResourceVector.from_array(self.annual.to_array() / days_per_year)

    def to_dict(self) -> dict:
        return {
            'transfer_id': self.transfer_id,
            'source': self.source,
            'destination': self.destination,
            'annual': self.annual.to_dict(),
        }


class TradeLedger:
    """
    Registry of standing transfers, applied once per simulated day.

    Transfers are additive: registering the same flow twice creates two
    independent entries that both execute every day.
    """

    def __init__(self, planets: Dict[str, Planet], config: Optional[SimulationConfig] = None):
        """
        Args:
            planets: Authoritative planet store (name -> Planet), shared with the driver
            config: Tuning constants (transfer factor, days per year)
        """
        self._planets = planets
        self.config = config or SimulationConfig()
        self.transfers: List[Transfer] = []
        self._next_id: int = 1

        self._telemetry: Dict = {}
        self._reset_day_telemetry()
        self._total_shortfall = ResourceVector.zero()
        self._total_lost = ResourceVector.zero()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def apply_transfer(self, transfer: Transfer) -> Transfer:
        """
        Register a new standing flow.

        Distinct endpoints and non-negative amounts are not checked here.

        Raises:
            KeyError: if either planet is not in the store
        """
        for name in (transfer.source, transfer.destination):
            if name not in self._planets:
                raise KeyError(f"Unknown planet: {name!r}")

        transfer.transfer_id = self._next_id
        self._next_id += 1
        self.transfers.append(transfer)
        return transfer

    def remove_transfer(self, transfer_id: int) -> Transfer:
        """
        End one standing flow.

        Raises:
            KeyError: if no transfer has this id
        """
        for i, transfer in enumerate(self.transfers):
            if transfer.transfer_id == transfer_id:
                return self.transfers.pop(i)
        raise KeyError(f"Unknown transfer id: {transfer_id}")

    def clear_transfers(self, source: str, destination: str) -> int:
        """Remove every source -> destination entry, returning how many went."""
        before = len(self.transfers)
        self.transfers = [
            t for t in self.transfers
            if not (t.source == source and t.destination == destination)
        ]
        return before - len(self.transfers)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def transfers_between(self, source: str, destination: str) -> List[Transfer]:
        """Entries registered for exactly this ordered pair."""
        return [
            t for t in self.transfers
            if t.source == source and t.destination == destination
        ]

    def get_transfer(self, a: str, b: str) -> ResourceVector:
        """Aggregate annual flow of the a -> b entries only."""
        return total(t.annual for t in self.transfers_between(a, b))

    def net_transfer(self, a: str, b: str) -> ResourceVector:
        """
        Net annual flow from a to b.

        Entries b -> a count as their inversion.
        """
        return self.get_transfer(a, b) + self.get_transfer(b, a).invert()

    def distance_table(self) -> Tuple[List[str], np.ndarray]:
        """
        Current distances between every pair of planets.

        Returns:
            (names, matrix) where matrix[i, j] is the distance between names[i] and names[j]
        """
        names = sorted(self._planets)
        positions = [self._planets[name].position for name in names]
        return names, pairwise_distances(positions)

    def loss_fraction(self, distance: float) -> float:
        """Fraction of cargo destroyed in transit over a distance."""
        return min(1.0, max(0.0, self.config.transfer_factor * distance))

    # ------------------------------------------------------------------
    # Daily update
    # ------------------------------------------------------------------

    def forward(self):
        """
        Apply one day of every standing transfer.

        Distances are measured once, from the orbital positions at the
        start of the transfer phase.
        """
        self._reset_day_telemetry()
        if not self.transfers:
            return

        names, distances = self.distance_table()
        row_of_name = {name: i for i, name in enumerate(names)}

        for transfer in self.transfers:
            source = self._planets[transfer.source]
            destination = self._planets[transfer.destination]

            # Dead planets are frozen records
            if source.dead or destination.dead:
                self._telemetry['transfers_skipped'] += 1
                continue

            distance = distances[row_of_name[transfer.source], row_of_name[transfer.destination]]
            loss = self.loss_fraction(float(distance))
            daily = transfer.daily(self.config.days_per_year)

            for name in RESOURCE_NAMES:
                amount = daily[name]
                if name == 'population':
                    amount = self._whole_persons(transfer, amount)
                self._move(source, destination, name, amount, loss)

            self._telemetry['transfers_applied'] += 1

        self._total_shortfall = self._total_shortfall + self._telemetry['shortfall']
        self._total_lost = self._total_lost + self._telemetry['lost_in_transit']

    @staticmethod
    def _whole_persons(transfer: Transfer, amount: float) -> float:
        """Accumulate a fractional daily head count, releasing whole persons."""
        transfer.population_carry += amount
        whole = float(math.trunc(transfer.population_carry))
        transfer.population_carry -= whole
        return whole

    def _move(self, source: Planet, destination: Planet, name: str, amount: float, loss: float):
        """Move one resource, clamped to what the sender has."""
        # Negative amounts flow the other way
        if amount < 0:
            source, destination, amount = destination, source, -amount
        if amount == 0:
            return

        sent = min(amount, source.available[name])
        delivered = sent * (1.0 - loss)
        if name == 'population':
            delivered = float(math.floor(delivered + 0.5))

        source.available[name] = source.available[name] - sent
        destination.available[name] = destination.available[name] + delivered

        self._telemetry['shortfall'][name] += amount - sent
        self._telemetry['lost_in_transit'][name] += sent - delivered

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def _reset_day_telemetry(self):
        self._telemetry = {
            'transfers_applied': 0,
            'transfers_skipped': 0,
            'shortfall': ResourceVector.zero(),
            'lost_in_transit': ResourceVector.zero(),
        }

    def get_telemetry(self) -> dict:
        """
        Trade statistics for the most recent day plus running totals.

        Returns:
            Dict of builtin types (resource vectors as dicts)
        """
        return {
            'transfer_count': len(self.transfers),
            'transfers_applied': self._telemetry['transfers_applied'],
            'transfers_skipped': self._telemetry['transfers_skipped'],
            'shortfall': self._telemetry['shortfall'].to_dict(),
            'lost_in_transit': self._telemetry['lost_in_transit'].to_dict(),
            'total_shortfall': self._total_shortfall.to_dict(),
            'total_lost_in_transit': self._total_lost.to_dict(),
        }
