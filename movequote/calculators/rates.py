"""
Rate resolver: maps service type strings to hourly rate tables.

Exact crew sizes come straight from the table; anything larger extrapolates
at the service's per-additional-mover rate.
"""

from ..errors import InvalidServiceType
from ..tables import HOURLY_RATES, ADDITIONAL_MOVER_RATES, DEFAULT_ADDITIONAL_MOVER_RATE


def get_rate_table(service_type: str) -> dict:
    """Returns {crew_size: hourly_rate} for a service type, or raises InvalidServiceType."""
    if service_type not in HOURLY_RATES:
        raise InvalidServiceType(
            f"No rate table for service type: {service_type}. "
            f"Available: {list(HOURLY_RATES.keys())}"
        )
    return HOURLY_RATES[service_type]


def has_service_type(service_type: str) -> bool:
    return service_type in HOURLY_RATES


def list_service_types() -> list[str]:
    return list(HOURLY_RATES.keys())


def additional_mover_rate(service_type: str) -> float:
    return ADDITIONAL_MOVER_RATES.get(service_type, DEFAULT_ADDITIONAL_MOVER_RATE)


def hourly_rate(service_type: str, crew_size: int) -> float:
    rates = get_rate_table(service_type)
    if crew_size in rates:
        return float(rates[crew_size])

    sizes = sorted(rates)
    largest = sizes[-1]
    if crew_size > largest:
        extra = crew_size - largest
        return float(rates[largest] + extra * additional_mover_rate(service_type))

    # Between (or below) defined sizes: bill at the next size up
    for size in sizes:
        if size >= crew_size:
            return float(rates[size])
    return float(rates[largest])
