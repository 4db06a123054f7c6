"""
Volume, crew and rate resolver tests.

Tests:
1-5.   Move size → cubic feet (table, custom, inventory)
6-11.  Base crew size bands and forced crew
12-13. Required trucks
14-19. Hourly rate lookup and extrapolation
20-21. Table validation at load time
"""

import math

import pytest

from movequote import tables
from movequote.calculators.rates import (
    additional_mover_rate, get_rate_table, has_service_type, hourly_rate, list_service_types,
)
from movequote.calculators.volume import (
    base_crew_size, cubic_feet_for, inventory_cubic_feet, required_trucks,
)
from movequote.errors import ConfigurationError, InvalidInput, InvalidServiceType
from movequote.schemas import InventoryItem


# --- Cubic feet ---

def test_cubic_feet_from_move_size():
    assert cubic_feet_for("2 Bedroom Apartment") == 743
    assert cubic_feet_for("5 Bedroom House (Large)") == 3816
    assert cubic_feet_for("10 x 20 Storage Unit") == 1600


def test_custom_cubic_feet_wins():
    assert cubic_feet_for("2 Bedroom Apartment", custom_cubic_feet=900) == 900


@pytest.mark.parametrize("bad", [0, -10])
def test_custom_cubic_feet_must_be_positive(bad):
    with pytest.raises(InvalidInput):
        cubic_feet_for(custom_cubic_feet=bad)


def test_unknown_move_size_raises():
    with pytest.raises(InvalidInput, match="Unknown move size"):
        cubic_feet_for("Castle")


def test_inventory_cubic_feet_sums_quantity():
    items = [
        InventoryItem(name="Sofa", cubic_feet=35, quantity=2),
        InventoryItem(name="Medium box", cubic_feet=3, quantity=100),
    ]
    assert inventory_cubic_feet(items) == 370


# --- Crew bands ---

@pytest.mark.parametrize("cubic_feet,crew", [
    (1, 2),
    (1009, 2),
    (1010, 3),
    (1500, 3),
    (1501, 4),
    (2000, 4),
    (3200, 5),
    (3201, 6),
    (10000, 6),
])
def test_base_crew_bands(cubic_feet, crew):
    assert base_crew_size(cubic_feet) == crew


def test_crew_never_decreases_with_volume():
    crews = [base_crew_size(cuft) for cuft in range(1, 5000, 7)]
    assert crews == sorted(crews)


def test_forced_crew_is_returned():
    assert base_crew_size(3000, forced_crew_size=2) == 2
    assert base_crew_size(100, forced_crew_size=7) == 7


@pytest.mark.parametrize("forced", [1, 8, 2.5, True])
def test_forced_crew_out_of_range(forced):
    with pytest.raises(InvalidInput):
        base_crew_size(1000, forced_crew_size=forced)


@pytest.mark.parametrize("bad", [0, -5])
def test_crew_needs_positive_volume(bad):
    with pytest.raises(InvalidInput):
        base_crew_size(bad)


def test_crew_past_last_band_uses_largest():
    assert base_crew_size(math.inf) == tables.CREW_SIZE_BANDS[-1][1]


# --- Trucks ---

def test_required_trucks():
    assert required_trucks(75) == 1
    assert required_trucks(1600) == 1
    assert required_trucks(1601) == 2
    assert required_trucks(3816) == 3


def test_required_trucks_minimum_one():
    assert required_trucks(0.5) == 1


# --- Rates ---

def test_exact_rate_hits():
    assert hourly_rate("Moving", 2) == 169
    assert hourly_rate("Full Service", 4) == 289
    assert hourly_rate("White Glove", 7) == 574
    assert hourly_rate("Labor Only", 3) == 189


def test_rate_extrapolates_past_table():
    assert hourly_rate("Moving", 9) == 469 + 2 * 60
    assert hourly_rate("White Glove", 8) == 574 + 75


def test_rate_below_table_rounds_up_to_next_size():
    assert hourly_rate("Moving", 1) == 169


def test_unknown_service_type_rate():
    with pytest.raises(InvalidServiceType, match="Available"):
        hourly_rate("Teleport", 2)


def test_additional_mover_rates():
    assert additional_mover_rate("White Glove") == 75
    assert additional_mover_rate("Staging") == 60
    assert additional_mover_rate("Unknown") == tables.DEFAULT_ADDITIONAL_MOVER_RATE


def test_rate_table_registry():
    assert has_service_type("Commercial")
    assert not has_service_type("Teleport")
    assert "Unload Only" in list_service_types()
    assert get_rate_table("Staging")[2] == 129
    with pytest.raises(InvalidServiceType):
        get_rate_table("Teleport")


# --- Table validation ---

def test_shipped_tables_validate():
    tables.validate_tables()


def test_bad_bands_rejected(monkeypatch):
    monkeypatch.setattr(tables, "CREW_SIZE_BANDS", ((1500, 3), (1009, 2), (math.inf, 6)))
    with pytest.raises(ConfigurationError, match="ascending"):
        tables.validate_tables()


def test_partial_allocation_rejected(monkeypatch):
    broken = dict(tables.ROOM_BOX_ALLOCATIONS)
    broken["Kitchen"] = {"Small": 4}
    monkeypatch.setattr(tables, "ROOM_BOX_ALLOCATIONS", broken)
    with pytest.raises(ConfigurationError):
        tables.validate_tables()
