"""
Dictation simulation driver.

Owns the planet store, the reference baseline and the trade ledger, and
advances the whole solar system one day at a time.
"""

import math
import numbers
import time
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .planet import Planet, ReferenceBaseline
from .trade import TradeLedger, Transfer
from .resources import ResourceVector, total
from .data_types import SimulationConfig, ReferenceConfig, DaySummary, FinalReport
from .loader import load_all_data
from .errors import InvalidCommand, OutOfRangeParameter
from .constants import RESOURCE_NAMES, UNITS, DAY_TIME_WINDOW, DAY_SUMMARY_INTERVAL


class DictationSimulation:
    """
    Main simulation class for the solar system.

    Manages the planet store, the daily update and the game-wide score.
    """

    def __init__(
        self,
        planets: Iterable[Planet],
        reference: ReferenceConfig,
        config: Optional[SimulationConfig] = None,
        name: str = "custom"
    ):
        """
        Initialize simulation from already-built planets.

        Args:
            planets: Planets to simulate (names must be unique)
            reference: Reference resource baseline and orbit
            config: Tuning constants (defaults from constants.py)
            name: Display name of the solar system
        """
        self.name = name
        self.config = config or SimulationConfig()
        self.ref = ReferenceBaseline.from_config(reference, self.config)

        self.planets: Dict[str, Planet] = {}
        for planet in planets:
            if planet.name in self.planets:
                raise ValueError(f"Duplicate planet name: {planet.name!r}")
            self.planets[planet.name] = planet

        # Ledger shares the planet store, never copies it
        self.trade = TradeLedger(self.planets, self.config)

        # Simulation state
        self.day: int = 0
        self.qol_score: float = 0.0
        self.game_over: bool = False

        # Performance metrics
        self._day_times: List[float] = []
        self._day_time_sum: float = 0.0
        self._day_time_window: int = DAY_TIME_WINDOW  # Rolling average window

        alive = sum(1 for p in self.planets.values() if not p.dead)
        print(f"[OK] Simulation initialized: {len(self.planets)} planets "
              f"({alive} inhabited), system={self.name}")

    @classmethod
    def from_data_pack(cls, data_root: Path, schema_dir: Optional[Path] = None) -> 'DictationSimulation':
        """
        Initialize simulation from data pack.

        Args:
            data_root: Path to data directory
            schema_dir: Optional path to JSON schemas
        """
        print("Loading data pack...")
        data = load_all_data(data_root, schema_dir)
        system = data['system']

        planets = []
        for definition in data['planets'].values():
            planets.append(Planet.from_definition(definition))
            print(f"  {definition.name}: population {definition.state.initial_resources.population:.0f}")

        return cls(planets, system.reference, system.simulation, name=system.name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_planet(self, name: str) -> Planet:
        """
        Raises:
            InvalidCommand: if no planet has this name
        """
        planet = self.planets.get(name)
        if planet is None:
            valid = ", ".join(sorted(self.planets))
            raise InvalidCommand(f"Unknown planet {name!r} (valid planets: {valid})")
        return planet

    @property
    def alive(self) -> bool:
        """True while any planet still has population."""
        return any(not planet.dead for planet in self.planets.values())

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def advance_one_day(self) -> bool:
        """
        Advance the solar system by one day.

        TWO-PHASE DAY CONTRACT:

        Phase A: every planet steps using only its own state, and its
        total QOL is added to the running score.

        Phase B: the trade ledger applies every standing transfer.

        Transfers never interleave with planet steps, so the result does
        not depend on planet order.

        Returns:
            True if any planet still has population
        """
        start_time = time.perf_counter()

        # Phase A: planets
        for planet in self.planets.values():
            planet.step(self.ref)
            self.qol_score += planet.total_qol(self.ref)

        # Phase B: transfers
        self.trade.forward()

        self.day += 1

        alive = self.alive
        if not alive and not self.game_over:
            self.game_over = True
            print(f"[INFO] All the planets are dead after {self.day} days "
                  f"(total QOL {self.qol_score:.5e})")

        self._record_day_time(time.perf_counter() - start_time)
        return alive

    def advance(self, days) -> bool:
        """
        Advance a whole number of days.

        Every requested day runs, even after the game is over.

        Raises:
            InvalidCommand: if days is not a number
            OutOfRangeParameter: if days is not a positive integer

        Returns:
            Liveness after the last day
        """
        days = _check_day_count(days)
        alive = self.alive
        for _ in range(days):
            alive = self.advance_one_day()
        return alive

    def iter_advance(self, days, refresh_interval: int = DAY_SUMMARY_INTERVAL) -> Iterator[DaySummary]:
        """
        Advance day by day, yielding a summary every refresh_interval days.

        A final summary is yielded after the last day if it did not fall on
        an interval. Callers cancel by no longer resuming the generator;
        no partial day is ever left behind.

        Raises:
            InvalidCommand: if days is not a number
            OutOfRangeParameter: if days or refresh_interval is not a positive integer
        """
        days = _check_day_count(days)
        if isinstance(refresh_interval, bool) or not isinstance(refresh_interval, numbers.Integral) \
                or refresh_interval <= 0:
            raise OutOfRangeParameter(f"Refresh interval {refresh_interval!r} must be a positive integer")
        return self._iter_days(days, int(refresh_interval))

    def _iter_days(self, days: int, refresh_interval: int) -> Iterator[DaySummary]:
        for i in range(1, days + 1):
            self.advance_one_day()
            if i % refresh_interval == 0 or i == days:
                yield self.summarize()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def transfer(self, resource: str, amount, source_name: str, destination_name: str) -> Transfer:
        """
        Set up a continual annual transfer of one resource.

        Raises:
            InvalidCommand: unknown resource or planet, non-numeric amount,
                or the same planet at both ends
        """
        if resource not in RESOURCE_NAMES:
            raise InvalidCommand(f"Unknown resource {resource!r} (valid resources: {', '.join(RESOURCE_NAMES)})")
        amount = _check_amount(amount)
        source = self.get_planet(source_name)
        destination = self.get_planet(destination_name)
        if source is destination:
            raise InvalidCommand(f"Cannot transfer from {source.name!r} to itself")

        annual = ResourceVector.zero()
        annual[resource] = amount
        return self.trade.apply_transfer(Transfer.between(source, destination, annual))

    def remove_transfer(self, transfer_id: int) -> Transfer:
        """
        Raises:
            InvalidCommand: if no transfer has this id
        """
        try:
            return self.trade.remove_transfer(transfer_id)
        except KeyError as e:
            raise InvalidCommand(str(e.args[0]))

    def inspect(self, name: str, other_name: Optional[str] = None) -> dict:
        """
        Current state of a planet and, optionally, its link to a second one.

        Raises:
            InvalidCommand: if either planet name is unknown
        """
        planet = self.get_planet(name)
        other = self.get_planet(other_name) if other_name is not None else None

        report = {'planet': self.planet_view(planet)}
        if other is not None:
            report['other'] = self.planet_view(other)
            report['distance'] = planet.distance_to(other)
            report['transfer'] = self.trade.get_transfer(planet.name, other.name).to_dict()
            report['net_transfer'] = self.trade.net_transfer(planet.name, other.name).to_dict()
        return report

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def planet_view(self, planet: Planet) -> dict:
        """Display state of one planet (builtin types only)."""
        x, y = planet.position
        return {
            'name': planet.name,
            'dead': planet.dead,
            'angle_deg': planet.degrees,
            'position': [float(x), float(y)],
            'total_qol': planet.total_qol(self.ref),
            'qol_rate': float(planet.qol_rate),
            'available': planet.available.to_dict(),
            'rate': planet.rate.to_dict(),
        }

    def sum_all(self) -> ResourceVector:
        """Available resources summed over every planet."""
        return total(planet.available for planet in self.planets.values())

    def summarize(self) -> DaySummary:
        return DaySummary(
            day=self.day,
            qol_score=self.qol_score,
            alive=self.alive,
            totals=self.sum_all(),
            planet_qol={name: p.total_qol(self.ref) for name, p in self.planets.items()},
            planet_qol_rate={name: p.qol_rate for name, p in self.planets.items()}
        )

    def final_report(self) -> FinalReport:
        return FinalReport(days_survived=self.day, qol_score=self.qol_score)

    def get_day_stats(self) -> dict:
        """
        Get current day timing statistics.

        Returns:
            Dict with day, avg_day_time_ms, last_day_time_ms
        """
        if not self._day_times:
            return {
                'day': self.day,
                'avg_day_time_ms': 0.0,
                'last_day_time_ms': 0.0
            }

        avg_time = self._day_time_sum / len(self._day_times)
        last_time = self._day_times[-1]

        return {
            'day': self.day,
            'avg_day_time_ms': avg_time * 1000.0,
            'last_day_time_ms': last_time * 1000.0
        }

    def _record_day_time(self, elapsed: float):
        """
        Record day timing for rolling average.

        Args:
            elapsed: Day time in seconds
        """
        self._day_times.append(elapsed)
        self._day_time_sum += elapsed

        # Maintain rolling window
        if len(self._day_times) > self._day_time_window:
            removed = self._day_times.pop(0)
            self._day_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with day, score, liveness, planets, transfers, timing
        """
        return {
            'day': self.day,
            'qol_score': float(self.qol_score),
            'alive': self.alive,
            'game_over': self.game_over,
            'planets': [self.planets[name].to_dict() for name in sorted(self.planets)],
            'transfers': [t.to_dict() for t in self.trade.transfers],
            'trade': self.trade.get_telemetry(),
            'timing': self.get_day_stats(),
            'units': dict(UNITS)
        }

    def print_day_summary(self):
        """Print day summary to console (lightweight monitoring)"""
        stats = self.get_day_stats()
        living = sum(1 for p in self.planets.values() if not p.dead)
        print(f"Day {stats['day']:6d} | "
              f"QOL: {self.qol_score:.3e} | "
              f"Avg: {stats['avg_day_time_ms']:6.3f} ms | "
              f"Last: {stats['last_day_time_ms']:6.3f} ms | "
              f"Alive: {living}/{len(self.planets)}")


def _check_day_count(days) -> int:
    if isinstance(days, str):
        try:
            days = float(days)
        except ValueError:
            raise InvalidCommand(f"{days!r} is not a number")
    if isinstance(days, bool) or not isinstance(days, numbers.Real):
        raise InvalidCommand(f"{days!r} is not a number")
    if not math.isfinite(days) or days != int(days) or days <= 0:
        raise OutOfRangeParameter(f"Day count {days!r} must be a positive integer")
    return int(days)


def _check_amount(amount) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise InvalidCommand(f"{amount!r} is not a number")
    if isinstance(amount, bool) or not math.isfinite(value):
        raise InvalidCommand(f"{amount!r} is not a finite number")
    return value
