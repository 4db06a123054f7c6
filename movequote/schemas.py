from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict

from .tracked_value import TrackedValue


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Inputs ---------------------------------------------------------------

class HandicapFactors(BaseModel):
    stairs: int = 0
    walk_feet: int = 0
    elevator: bool = False


class InventoryItem(BaseModel):
    name: str
    cubic_feet: float
    quantity: int = 1


class SpecialItem(BaseModel):
    name: str
    price: float
    quantity: int = 1


class SpecialtyItem(BaseModel):
    name: str
    tier: str = "tier1"
    quantity: int = 1


class EstimationInputs(BaseModel):
    property_type: Optional[str] = None
    fixed_estimate_type: Optional[str] = None
    bedrooms: Optional[int] = None
    packing_intensity: str = "Normal"
    white_glove_service: bool = False
    custom_room_counts: Optional[Dict[str, int]] = None


class PricingInputs(BaseModel):
    move_size: Optional[str] = None
    custom_cubic_feet: Optional[float] = None
    inventory: Optional[List[InventoryItem]] = None
    service_tier: Optional[str] = None
    service_type: str = "Moving"
    distance_miles: float = 0.0
    travel_duration_minutes: Optional[float] = None
    handicap_factors: HandicapFactors = Field(default_factory=HandicapFactors)
    destination_handicap_factors: Optional[HandicapFactors] = None
    forced_crew_size: Optional[int] = None
    additional_trucks: int = 0
    emergency_service: bool = False
    estimation: Optional[EstimationInputs] = None
    special_items: List[SpecialItem] = []
    specialty_items: List[SpecialtyItem] = []


class Address(BaseModel):
    full_address: str = ""
    zip: Optional[str] = None
    stairs: int = 0
    elevator: bool = False
    walk_distance: int = 0


class JobEstimateParams(BaseModel):
    """Job-level request: addresses instead of a resolved distance."""
    job_id: Optional[str] = None
    addresses: List[Address] = []
    move_size: Optional[str] = None
    custom_cubic_feet: Optional[float] = None
    inventory: Optional[List[InventoryItem]] = None
    service_tier: Optional[str] = None
    service_type: str = "Moving"
    forced_crew_size: Optional[int] = None
    additional_trucks: int = 0
    emergency_service: bool = False
    estimation: Optional[EstimationInputs] = None
    special_items: List[SpecialItem] = []
    specialty_items: List[SpecialtyItem] = []


class ValidationIssue(_Frozen):
    field: str
    message: str
    code: str


# --- Stage results --------------------------------------------------------

class BoxEstimate(_Frozen):
    mode: str  # "fixed" | "dynamic"
    estimate_type: str
    bedrooms: Optional[int] = None
    packing_intensity: str
    intensity_multiplier: float
    room_counts: Dict[str, int]
    room_count: int
    base_boxes: Dict[str, int]
    boxes: Dict[str, int]
    total_boxes: int


class MaterialLine(_Frozen):
    box_type: str
    name: str
    quantity: int
    unit_price: float
    total: float
    rental_price: Optional[float] = None
    rental_total: Optional[float] = None


class MaterialCost(_Frozen):
    lines: List[MaterialLine]
    total: float
    rental_option_total: float
    rental_savings: float


class WorkTime(_Frozen):
    """Packing or unpacking time. per_box_minutes is display-only and not rounded."""
    workers: int
    per_box_minutes: Dict[str, float]
    room_penalty_minutes: float
    white_glove_minutes: float
    total_minutes: float
    total_hours: float


class HandicapResult(_Frozen):
    modifier: float
    origin_percent: float
    destination_percent: float
    applied: bool
    warnings: List[str] = []


class CrewAdjustment(_Frozen):
    base_crew: int
    adjusted_crew: int
    movers_added: int
    band: Optional[str] = None
    reasoning: str


class ServiceTime(_Frozen):
    moving_hours: float
    packing_hours: float
    unpacking_hours: float
    combined_hours: float
    billed_hours: float
    minimum_applied: bool


class TravelCharges(_Frozen):
    distance_miles: float
    move_type: str
    is_long_distance: bool
    travel_time_hours: float
    travel_cost: float
    mileage_cost: float
    fuel_cost: float
    truck_count: int


class DaySplit(_Frozen):
    move_type: str
    total_hours: float
    days: int
    hours_per_day: float
    single_day_limit: float
    reasoning: str


# --- Charges --------------------------------------------------------------

class JobChargeItem(_Frozen):
    type: str
    hourly_rate: Optional[float] = None
    hours: Optional[float] = None
    number_of_crew: Optional[int] = None
    driving_time_mins: Optional[float] = None
    amount: TrackedValue
    is_billable: TrackedValue


class JobChargeData(_Frozen):
    job_id: Optional[str] = None
    number_of_crew: TrackedValue
    number_of_trucks: TrackedValue
    hourly_rate: TrackedValue
    hours: TrackedValue
    packing_hours: TrackedValue
    unpacking_hours: TrackedValue
    origin_handicaps: TrackedValue
    destination_handicaps: TrackedValue
    minimum_time: Optional[TrackedValue] = None
    fuel_cost: TrackedValue
    mileage_cost: TrackedValue
    item_cost: TrackedValue
    charges: List[JobChargeItem] = []


# --- Engine outputs -------------------------------------------------------

class EstimationResultData(_Frozen):
    box_estimate: BoxEstimate
    materials: MaterialCost
    packing_time: WorkTime
    unpacking_time: WorkTime
    recommended_crew_size: int
    total_hours: float


class EstimationResult(BaseModel):
    success: bool
    data: Optional[EstimationResultData] = None
    errors: List[ValidationIssue] = []
    warnings: List[str] = []


class QuickEstimation(BaseModel):
    success: bool
    total_boxes: int = 0
    estimated_hours: float = 0.0
    material_cost: float = 0.0
    crew_size: int = 0
    error: Optional[str] = None


class EstimationBreakdown(BaseModel):
    success: bool
    boxes: Dict[str, int] = {}
    materials: List[MaterialLine] = []
    packing_minutes: Dict[str, float] = {}
    unpacking_minutes: Dict[str, float] = {}
    totals: Dict[str, float] = {}
    error: Optional[str] = None


class PricingIntegrationData(BaseModel):
    success: bool
    material_cost: float = 0.0
    packing_hours: float = 0.0
    unpacking_hours: float = 0.0
    total_boxes: int = 0
    recommended_crew_size: int = 0
    service_complexity_modifier: float = 1.0
    errors: List[ValidationIssue] = []


class PricingResultData(_Frozen):
    move_size: Optional[str] = None
    cubic_feet: float
    service_tier: str
    service_type: str
    service_tier_speed: float
    base_crew_size: int
    crew_size: int
    crew_adjustment: CrewAdjustment
    recommended_crew_from_boxes: Optional[int] = None
    handicap: HandicapResult
    hourly_rate: float
    time: ServiceTime
    travel: TravelCharges
    move_distance: float
    move_type: str
    total_hours: float
    day_split: DaySplit
    truck_count: int
    labor_cost: float
    travel_cost: float
    mileage_cost: float
    fuel_cost: float
    additional_truck_cost: float
    emergency_service_cost: float
    materials_cost: float
    special_items_cost: float
    origin_handicap_cost: float = 0.0
    destination_handicap_cost: float = 0.0
    additional_mover_cost: float = 0.0
    total_cost: float
    box_estimate: Optional[BoxEstimate] = None
    materials: Optional[MaterialCost] = None
    job_charges: Optional[JobChargeData] = None


class PricingResult(BaseModel):
    success: bool
    data: Optional[PricingResultData] = None
    errors: List[ValidationIssue] = []
    warnings: List[str] = []
    distance_source: Optional[str] = None


class QuickPrice(BaseModel):
    success: bool
    price: float = 0.0
    time_hours: float = 0.0
    crew_size: int = 0
    error: Optional[str] = None


class PricingBreakdown(BaseModel):
    success: bool
    labor_cost: float = 0.0
    travel_costs: Dict[str, float] = {}
    additional_services: Dict[str, float] = {}
    total: float = 0.0
    time_estimate: Dict[str, float] = {}
    crew_size: int = 0
    day_split: Optional[DaySplit] = None
    error: Optional[str] = None


class RerateRequest(BaseModel):
    inputs: PricingInputs
    existing: JobChargeData


class JobRerateRequest(BaseModel):
    params: JobEstimateParams
    existing: JobChargeData
