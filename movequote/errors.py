"""
Typed failures raised by the quote calculators.

Calculators raise these; the orchestrators (estimation_engine, pricing_engine)
catch them and report CALCULATION_ERROR in the result envelope.
"""

# Stable error codes surfaced in ValidationIssue.code
MISSING_REQUIRED_INPUTS = "MISSING_REQUIRED_INPUTS"
INVALID_PROPERTY_TYPE = "INVALID_PROPERTY_TYPE"
INVALID_FIXED_ESTIMATE_TYPE = "INVALID_FIXED_ESTIMATE_TYPE"
INVALID_BEDROOM_COUNT = "INVALID_BEDROOM_COUNT"
INVALID_PACKING_INTENSITY = "INVALID_PACKING_INTENSITY"
INVALID_CUSTOM_ROOMS = "INVALID_CUSTOM_ROOMS"
INVALID_MOVE_SIZE = "INVALID_MOVE_SIZE"
INVALID_CUBIC_FEET = "INVALID_CUBIC_FEET"
INVALID_SERVICE_TIER = "INVALID_SERVICE_TIER"
INVALID_SERVICE_TYPE = "INVALID_SERVICE_TYPE"
INVALID_DISTANCE = "INVALID_DISTANCE"
INVALID_CREW_SIZE = "INVALID_CREW_SIZE"
INVALID_HANDICAP_FACTORS = "INVALID_HANDICAP_FACTORS"
INVALID_TRUCK_COUNT = "INVALID_TRUCK_COUNT"
INVALID_SPECIAL_ITEMS = "INVALID_SPECIAL_ITEMS"
CALCULATION_ERROR = "CALCULATION_ERROR"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class CalculationError(ValueError):
    """Base class for failures inside the calculation pipeline."""

    code = CALCULATION_ERROR


class InvalidInput(CalculationError):
    """A value reached a calculator that it cannot work with (zero crew, negative distance...)."""


class InvalidServiceType(CalculationError):
    """Service type or tier has no entry in the rate/speed tables."""


class ConfigurationError(CalculationError):
    """A configuration table failed its load-time checks."""

    code = CONFIGURATION_ERROR
