"""
Trade ledger: standing transfers, transit loss, clamping, net views.

No fixtures - uses inline helpers per project conventions.
"""

import math

import pytest

from dictation.planet import Planet
from dictation.trade import TradeLedger, Transfer
from dictation.resources import ResourceVector
from dictation.data_types import PlanetaryState, SimulationConfig


def make_planet(name, population=100, water=1000.0, food=1000.0, distance=100.0, theta=0.0) -> Planet:
    state = PlanetaryState(
        gravity=1.0,
        distance=distance,
        period=365.0,
        theta=theta,
        initial_resources=ResourceVector(water=1.0e9, food=1.0e9, energy=1.0e9, population=population)
    )
    planet = Planet(name=name, state=state)
    planet.available = ResourceVector(water=water, food=food, energy=0.0, population=population)
    return planet


def make_ledger(*planets, **config) -> TradeLedger:
    store = {p.name: p for p in planets}
    return TradeLedger(store, SimulationConfig(**config))


def test_colocated_transfer_moves_exactly_one_unit_per_day():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    ledger.forward()

    assert a.available.water == 999.0
    assert b.available.water == 1001.0


def test_transit_loss_is_linear_in_distance():
    a = make_planet("a", distance=100.0, theta=0.0)
    b = make_planet("b", distance=100.0, theta=math.pi)
    ledger = make_ledger(a, b)
    assert a.distance_to(b) == pytest.approx(200.0)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    ledger.forward()

    expected = 1.0 - 2.0e-6 * 200.0
    assert a.available.water == pytest.approx(999.0)
    assert b.available.water == pytest.approx(1000.0 + expected)

    telemetry = ledger.get_telemetry()
    assert telemetry['lost_in_transit']['water'] == pytest.approx(1.0 - expected)
    assert telemetry['transfers_applied'] == 1


def test_loss_fraction_is_clamped():
    a = make_planet("a")
    ledger = make_ledger(a, transfer_factor=0.01)
    assert ledger.loss_fraction(50.0) == pytest.approx(0.5)
    assert ledger.loss_fraction(1.0e6) == 1.0
    assert ledger.loss_fraction(0.0) == 0.0


def test_send_clamped_to_source_stock():
    a = make_planet("a", water=0.25)
    b = make_planet("b")
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    ledger.forward()

    assert a.available.water == 0.0
    assert b.available.water == pytest.approx(1000.25)
    assert ledger.get_telemetry()['shortfall']['water'] == pytest.approx(0.75)

    # Next day nothing left to send, nothing goes negative
    ledger.forward()
    assert a.available.water == 0.0
    assert ledger.get_telemetry()['total_shortfall']['water'] == pytest.approx(1.75)


def test_negative_amount_flows_backwards():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(food=-730.0)))
    ledger.forward()

    assert a.available.food == 1002.0
    assert b.available.food == 998.0


def test_duplicate_registrations_are_independent():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    first = ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    second = ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    assert first.transfer_id != second.transfer_id
    assert len(ledger.transfers) == 2

    ledger.forward()
    assert b.available.water == 1002.0


def test_population_moves_in_whole_persons():
    a = make_planet("a", population=100)
    b = make_planet("b", population=100)
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(population=100.0)))

    # 100 per year is ~0.27 per day: first person leaves on day 4
    for _ in range(3):
        ledger.forward()
    assert a.available.population == 100
    assert b.available.population == 100

    ledger.forward()
    assert a.available.population == 99
    assert b.available.population == 101


def test_transfers_touching_dead_planets_are_skipped():
    a = make_planet("a")
    dead = make_planet("dead", population=0)
    ledger = make_ledger(a, dead)
    before = dead.to_dict()

    ledger.apply_transfer(Transfer.between(a, dead, ResourceVector(water=365.0)))
    ledger.apply_transfer(Transfer.between(dead, a, ResourceVector(water=365.0)))
    ledger.forward()

    assert dead.to_dict() == before
    assert a.available.water == 1000.0
    assert ledger.get_telemetry()['transfers_skipped'] == 2


def test_get_transfer_covers_exactly_the_ordered_pair():
    a = make_planet("a")
    b = make_planet("b")
    c = make_planet("c")
    ledger = make_ledger(a, b, c)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=100.0)))
    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=50.0, food=5.0)))
    ledger.apply_transfer(Transfer.between(b, a, ResourceVector(water=30.0)))
    ledger.apply_transfer(Transfer.between(a, c, ResourceVector(energy=9.0)))

    assert ledger.get_transfer("a", "b").to_dict() == {
        'water': 150.0, 'food': 5.0, 'energy': 0.0, 'population': 0.0
    }
    assert ledger.get_transfer("b", "a").water == 30.0
    assert ledger.get_transfer("b", "c").to_dict() == ResourceVector.zero().to_dict()
    assert len(ledger.transfers_between("a", "b")) == 2

    # Read-only
    assert a.available.water == 1000.0


def test_opposite_flows_both_stay_visible():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    ledger.apply_transfer(Transfer.between(b, a, ResourceVector(water=365.0)))

    assert ledger.get_transfer("a", "b").water == 365.0
    assert ledger.get_transfer("b", "a").water == 365.0
    assert ledger.net_transfer("a", "b").water == 0.0


def test_net_transfer_subtracts_reverse_flows():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=150.0, food=5.0)))
    ledger.apply_transfer(Transfer.between(b, a, ResourceVector(water=30.0)))

    assert ledger.net_transfer("a", "b").to_dict() == {
        'water': 120.0, 'food': 5.0, 'energy': 0.0, 'population': 0.0
    }
    assert ledger.net_transfer("b", "a").water == -120.0


def test_remove_and_clear_transfers():
    a = make_planet("a")
    b = make_planet("b")
    ledger = make_ledger(a, b)

    t1 = ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))
    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(food=365.0)))
    ledger.apply_transfer(Transfer.between(b, a, ResourceVector(food=365.0)))

    removed = ledger.remove_transfer(t1.transfer_id)
    assert removed is t1
    with pytest.raises(KeyError):
        ledger.remove_transfer(t1.transfer_id)

    assert ledger.clear_transfers("a", "b") == 1
    assert len(ledger.transfers) == 1

    ledger.forward()
    assert a.available.water == 1000.0
    assert a.available.food == 1001.0


def test_apply_transfer_rejects_unknown_planet():
    a = make_planet("a")
    ledger = make_ledger(a)
    with pytest.raises(KeyError):
        ledger.apply_transfer(Transfer("a", "nowhere", ResourceVector(water=1.0)))
    assert ledger.transfers == []


def test_ledger_sees_planet_store_not_copies():
    a = make_planet("a")
    b = make_planet("b")
    store = {"a": a, "b": b}
    ledger = TradeLedger(store)
    ledger.apply_transfer(Transfer.between(a, b, ResourceVector(water=365.0)))

    ledger.forward()
    assert store["b"].available.water == 1001.0

    names, matrix = ledger.distance_table()
    assert names == ["a", "b"]
    assert matrix.shape == (2, 2)
