"""
Configuration tables for the quote engine.

Every lookup the calculators make goes through one of these dicts or ordered
band tuples. validate_tables() runs at import so a malformed table fails loudly
at startup instead of producing a wrong quote.
"""

import math

from .errors import ConfigurationError

# --- Box categories -------------------------------------------------------

BOX_TYPES = (
    "Small",
    "Medium",
    "Large",
    "Wardrobe",
    "Dish Pack",
    "Mattress Bag",
    "TV Box",
)


def _boxes(small, medium, large, wardrobe, dish_pack, mattress_bag, tv_box) -> dict:
    return dict(zip(BOX_TYPES, (small, medium, large, wardrobe, dish_pack, mattress_bag, tv_box)))


# --- Move sizes → cubic feet ----------------------------------------------

MOVE_SIZE_CUBIC_FEET = {
    "Room or Less": 75,
    "Studio Apartment": 288,
    "1 Bedroom Apartment": 432,
    "2 Bedroom Apartment": 743,
    "3 Bedroom Apartment": 1296,
    "1 Bedroom House": 576,
    "1 Bedroom House (Large)": 720,
    "2 Bedroom House": 1008,
    "2 Bedroom House (Large)": 1152,
    "3 Bedroom House": 1440,
    "3 Bedroom House (Large)": 1584,
    "4 Bedroom House": 1872,
    "4 Bedroom House (Large)": 2016,
    "5 Bedroom House": 3168,
    "5 Bedroom House (Large)": 3816,
    "5 x 10 Storage Unit": 400,
    "5 x 15 Storage Unit": 600,
    "10 x 10 Storage Unit": 800,
    "10 x 15 Storage Unit": 1200,
    "10 x 20 Storage Unit": 1600,
    "Office (Small)": 1000,
    "Office (Medium)": 2000,
    "Office (Large)": 3000,
}

# (max cubic feet inclusive, movers), ascending
CREW_SIZE_BANDS = (
    (1009, 2),
    (1500, 3),
    (2000, 4),
    (3200, 5),
    (math.inf, 6),
)

MIN_CREW_SIZE = 2
MAX_CREW_SIZE = 7

CUBIC_FEET_PER_TRUCK = 1600

# --- Service tiers (speed) and service types (billing) --------------------

# cubic feet per hour per mover
SERVICE_TIER_SPEED = {
    "Grab-n-Go": 95,
    "Full Service": 80,
    "White Glove": 70,
    "Labor Only": 90,
}

MOVING = "moving"
PACKING = "packing"
UNPACKING = "unpacking"

# Which time components are billed for each service type
SERVICE_COMPONENTS = {
    "Moving": (MOVING,),
    "Packing": (PACKING,),
    "Unpacking": (UNPACKING,),
    "Moving and Packing": (MOVING, PACKING),
    "Full Service": (MOVING, PACKING, UNPACKING),
    "White Glove": (MOVING, PACKING, UNPACKING),
    "Load Only": (MOVING,),
    "Unload Only": (MOVING,),
    "Labor Only": (MOVING,),
    "Staging": (MOVING,),
    "Commercial": (MOVING,),
}

# Moving time scale for single-direction work
MOVING_TIME_SCALE = {
    "Load Only": 0.6,
    "Unload Only": 0.4,
}

LOAD_SHARE = 0.6
UNLOAD_SHARE = 0.4

_STANDARD_RATES = {2: 169, 3: 229, 4: 289, 5: 349, 6: 409, 7: 469}
_LABOR_RATES = {2: 129, 3: 189, 4: 249, 5: 309, 6: 369, 7: 429}

HOURLY_RATES = {
    "Moving": dict(_STANDARD_RATES),
    "Packing": dict(_STANDARD_RATES),
    "Unpacking": dict(_STANDARD_RATES),
    "Moving and Packing": dict(_STANDARD_RATES),
    "Full Service": dict(_STANDARD_RATES),
    "Commercial": dict(_STANDARD_RATES),
    "White Glove": {2: 199, 3: 274, 4: 349, 5: 424, 6: 499, 7: 574},
    "Load Only": dict(_LABOR_RATES),
    "Unload Only": dict(_LABOR_RATES),
    "Labor Only": dict(_LABOR_RATES),
    "Staging": dict(_LABOR_RATES),
}

DEFAULT_ADDITIONAL_MOVER_RATE = 60
ADDITIONAL_MOVER_RATES = {
    "Moving": 60,
    "Packing": 60,
    "Unpacking": 60,
    "Moving and Packing": 60,
    "Full Service": 60,
    "Commercial": 60,
    "White Glove": 75,
    "Load Only": 60,
    "Unload Only": 60,
    "Labor Only": 60,
    "Staging": 60,
}

# Tier used for moving speed when a job only names its billing service type
DEFAULT_TIER_FOR_SERVICE = {
    "White Glove": "White Glove",
    "Load Only": "Labor Only",
    "Unload Only": "Labor Only",
    "Labor Only": "Labor Only",
    "Staging": "Labor Only",
}
DEFAULT_SERVICE_TIER = "Full Service"

MINIMUM_BILLABLE_HOURS = 2.0

# --- Handicap / accessibility ---------------------------------------------

HANDICAP_CUBIC_FEET_THRESHOLD = 400
STAIRS_PER_FLIGHT = 0.09
WALK_PER_100_FEET = 0.09
ELEVATOR_PENALTY = 0.18

# (lower cuft inclusive, upper cuft exclusive, first extra, second extra, label)
CREW_ADJUSTMENT_BANDS = (
    (0, 300, 0.36, 0.72, "0-299 cuft"),
    (300, 600, 0.27, 0.54, "300-599 cuft"),
    (600, math.inf, 0.18, 0.36, "600+ cuft"),
)

# --- Travel ---------------------------------------------------------------

LOCAL = "LOCAL"
REGIONAL = "REGIONAL"
LONG_DISTANCE = "LONG_DISTANCE"

LOCAL_MAX_MILES = 30
REGIONAL_MAX_MILES = 120

LONG_DISTANCE_THRESHOLD_MILES = 30
MILEAGE_RATE_PER_MILE = 4.29
FUEL_RATE_PER_MILE = 2.00
ADDITIONAL_TRUCK_HOURLY = 30
EMERGENCY_SERVICE_HOURLY = 30
TRAVEL_SPEED_MPH = 30

SINGLE_DAY_MAX_HOURS = {
    LOCAL: 9,
    REGIONAL: 14,
    LONG_DISTANCE: 14,
}

# Distance fallbacks
POSTAL_CODE_MILES_DIVISOR = 100
POSTAL_CODE_FALLBACK_MPH = 45
DEFAULT_STOP_MILES = 5
DEFAULT_STOP_MINUTES = 15
METERS_PER_MILE = 1609.34

SPECIALTY_ITEM_TIERS = {
    "tier1": 150,
    "tier2": 250,
    "tier3": 350,
}

# --- Estimation -----------------------------------------------------------

PACKING_INTENSITY_MULTIPLIERS = {
    "Less than Normal": 0.75,
    "Normal": 1.0,
    "More than Normal": 1.5,
}

ROOM_TYPES = (
    "Bedroom",
    "Living Room",
    "Kitchen",
    "Dining Room",
    "Garage",
    "Office",
    "Patio/Shed",
    "Attic/Basement",
)

PROPERTY_TYPES = {
    "Apartment": {
        "base_rooms": ("Living Room", "Kitchen"),
        "min_bedrooms": 0,
        "max_bedrooms": 5,
    },
    "Normal Home": {
        "base_rooms": ("Living Room", "Kitchen", "Dining Room", "Garage"),
        "min_bedrooms": 1,
        "max_bedrooms": 5,
    },
    "Large Home": {
        "base_rooms": (
            "Living Room", "Kitchen", "Dining Room", "Garage",
            "Office", "Patio/Shed", "Attic/Basement",
        ),
        "min_bedrooms": 1,
        "max_bedrooms": 5,
    },
}

ROOM_BOX_ALLOCATIONS = {
    "Bedroom": _boxes(4, 6, 2, 2, 1, 1, 1),
    "Living Room": _boxes(3, 5, 3, 1, 1, 0, 1),
    "Kitchen": _boxes(4, 6, 2, 0, 3, 0, 0),
    "Dining Room": _boxes(2, 3, 2, 0, 1, 0, 0),
    "Garage": _boxes(5, 7, 3, 0, 1, 0, 0),
    "Office": _boxes(3, 4, 2, 0, 1, 0, 1),
    "Patio/Shed": _boxes(2, 3, 3, 0, 1, 0, 0),
    "Attic/Basement": _boxes(3, 5, 3, 0, 1, 0, 0),
}

FIXED_ESTIMATES = {
    "Room or Less": _boxes(2, 3, 1, 0, 1, 0, 0),
    "Studio Apartment": _boxes(8, 12, 6, 2, 2, 1, 1),
    "Office (Small)": _boxes(10, 15, 8, 0, 2, 0, 2),
    "Office (Medium)": _boxes(20, 30, 15, 0, 4, 0, 4),
    "Office (Large)": _boxes(35, 50, 25, 0, 8, 0, 6),
    "5 x 10 Storage Unit": _boxes(6, 8, 4, 1, 1, 0, 1),
    "5 x 15 Storage Unit": _boxes(9, 12, 6, 2, 2, 0, 1),
    "10 x 10 Storage Unit": _boxes(12, 16, 8, 2, 2, 1, 2),
    "10 x 15 Storage Unit": _boxes(18, 24, 12, 3, 3, 1, 2),
    "10 x 20 Storage Unit": _boxes(24, 32, 16, 4, 4, 2, 3),
}

# minutes per box per worker
PACKING_MINUTES = _boxes(5, 7, 9, 10, 14, 5, 6)
UNPACKING_MINUTES = _boxes(4, 6, 8, 8, 12, 4, 5)

PACKING_ROOM_PENALTY_MINUTES = 15
UNPACKING_ROOM_PENALTY_MINUTES = 15
FIXED_ESTIMATE_ROOM_COUNT = 1

WHITE_GLOVE_TIME_MODIFIER = 0.20

# Full material catalog, USD each
MATERIAL_PRICES = {
    # Standard boxes
    "Small": 1.85,
    "Medium": 2.66,
    "Large": 3.33,
    "Extra Large": 4.68,
    # Specialty boxes
    "Wardrobe": 29.03,
    "Medium TV Box": 27.34,
    "Large TV Box": 40.49,
    "Extra Large TV Box": 53.93,
    "Lamp Box": 8.03,
    "Mirror Box": 9.38,
    "Large Mirror Box": 11.14,
    "4-Way Mirror Box": 13.43,
    "Dish Pack": 10.94,
    # Mattress bags
    "Twin Mattress Bag": 10.73,
    "Full Mattress Bag": 11.46,
    "Queen Mattress Bag": 12.49,
    "King Mattress Bag": 13.43,
    # Protection
    "Skin Blanket": 12.00,
    "Paper Pad": 4.59,
}

# Estimation box category → catalog item priced for it
BOX_MATERIAL_ITEMS = {
    "Small": "Small",
    "Medium": "Medium",
    "Large": "Large",
    "Wardrobe": "Wardrobe",
    "Dish Pack": "Dish Pack",
    "Mattress Bag": "Queen Mattress Bag",
    "TV Box": "Large TV Box",
}

BOX_DISPLAY_NAMES = {"TV Box": "TV Box (Large)"}

TV_RENTAL_RATE = 0.5
RENTABLE_BOX_TYPES = ("TV Box",)

CUSTOM_ROOM_COUNT_MAX = 10
MIN_WORKERS = 1
MAX_WORKERS = 8

# (max total boxes inclusive, crew), ascending
BOX_COUNT_CREW_BANDS = (
    (30, 2),
    (60, 3),
    (90, 4),
    (120, 5),
    (math.inf, 6),
)

LARGE_JOB_CREW_WARNING = 5
MULTI_DAY_WARNING_HOURS = 8

# Service complexity base, keyed by packing intensity
COMPLEXITY_MODIFIERS = {
    "Less than Normal": 0.9,
    "Normal": 1.0,
    "More than Normal": 1.2,
}
LARGE_BOX_COUNT_THRESHOLD = 100
LARGE_BOX_COUNT_MODIFIER = 1.1
WHITE_GLOVE_COMPLEXITY_MODIFIER = 1.2
LARGE_HOME_COMPLEXITY_MODIFIER = 1.05


# --- Load-time validation -------------------------------------------------

def _check_bands(name: str, bands) -> None:
    if not bands:
        raise ConfigurationError(f"{name} is empty")
    previous = -math.inf
    for upper, value in bands:
        if upper <= previous:
            raise ConfigurationError(f"{name} bands must be strictly ascending (at {upper})")
        if value <= 0:
            raise ConfigurationError(f"{name} band at {upper} has non-positive value {value}")
        previous = upper
    if bands[-1][0] != math.inf:
        raise ConfigurationError(f"{name} must end with an open-ended band")


def _check_allocation(name: str, allocation: dict) -> None:
    if tuple(allocation.keys()) != BOX_TYPES:
        raise ConfigurationError(f"{name} must list exactly {BOX_TYPES}")
    for box_type, count in allocation.items():
        if not isinstance(count, int) or count < 0:
            raise ConfigurationError(f"{name}[{box_type}] must be a non-negative integer")


def validate_tables() -> None:
    """Raise ConfigurationError if any table is malformed."""
    _check_bands("CREW_SIZE_BANDS", CREW_SIZE_BANDS)
    _check_bands("BOX_COUNT_CREW_BANDS", BOX_COUNT_CREW_BANDS)

    for room, allocation in ROOM_BOX_ALLOCATIONS.items():
        _check_allocation(f"ROOM_BOX_ALLOCATIONS[{room}]", allocation)
    for fixed_type, allocation in FIXED_ESTIMATES.items():
        _check_allocation(f"FIXED_ESTIMATES[{fixed_type}]", allocation)
    _check_allocation("PACKING_MINUTES", PACKING_MINUTES)
    _check_allocation("UNPACKING_MINUTES", UNPACKING_MINUTES)

    if set(ROOM_BOX_ALLOCATIONS) != set(ROOM_TYPES):
        raise ConfigurationError("ROOM_BOX_ALLOCATIONS must cover every room type")
    for prop, cfg in PROPERTY_TYPES.items():
        for room in cfg["base_rooms"]:
            if room not in ROOM_BOX_ALLOCATIONS:
                raise ConfigurationError(f"{prop} references unknown room {room}")
        if cfg["min_bedrooms"] > cfg["max_bedrooms"]:
            raise ConfigurationError(f"{prop} has min_bedrooms > max_bedrooms")

    for box_type in BOX_TYPES:
        item = BOX_MATERIAL_ITEMS.get(box_type)
        if item not in MATERIAL_PRICES:
            raise ConfigurationError(f"No material price for box type {box_type}")

    if set(COMPLEXITY_MODIFIERS) != set(PACKING_INTENSITY_MULTIPLIERS):
        raise ConfigurationError("COMPLEXITY_MODIFIERS must cover every packing intensity")

    if set(HOURLY_RATES) != set(SERVICE_COMPONENTS):
        raise ConfigurationError("HOURLY_RATES and SERVICE_COMPONENTS must name the same service types")
    for service, rates in HOURLY_RATES.items():
        sizes = sorted(rates)
        if not sizes or sizes[0] > MIN_CREW_SIZE:
            raise ConfigurationError(f"HOURLY_RATES[{service}] must start at crew size {MIN_CREW_SIZE}")
        if any(rates[a] >= rates[b] for a, b in zip(sizes, sizes[1:])):
            raise ConfigurationError(f"HOURLY_RATES[{service}] must increase with crew size")
    for tier in DEFAULT_TIER_FOR_SERVICE.values():
        if tier not in SERVICE_TIER_SPEED:
            raise ConfigurationError(f"Unknown default tier {tier}")

    lower = 0
    for band_lower, band_upper, first, second, _label in CREW_ADJUSTMENT_BANDS:
        if band_lower != lower or band_upper <= band_lower:
            raise ConfigurationError("CREW_ADJUSTMENT_BANDS must be contiguous and ascending")
        if not 0 < first < second:
            raise ConfigurationError("CREW_ADJUSTMENT_BANDS thresholds must satisfy 0 < first < second")
        lower = band_upper
    if lower != math.inf:
        raise ConfigurationError("CREW_ADJUSTMENT_BANDS must end with an open-ended band")

    for move_type in (LOCAL, REGIONAL, LONG_DISTANCE):
        if SINGLE_DAY_MAX_HOURS.get(move_type, 0) <= 0:
            raise ConfigurationError(f"SINGLE_DAY_MAX_HOURS missing {move_type}")


validate_tables()
