from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, Field, field_validator
import logging

LOGGER = logging.getLogger(__name__)

# Brazilian states (UF) grouped by macro-region
REGIONS = {
    "north": {"AC", "AM", "AP", "PA", "RO", "RR", "TO"},
    "northeast": {"AL", "BA", "CE", "MA", "PB", "PE", "PI", "RN", "SE"},
    "center_west": {"DF", "GO", "MS", "MT"},
    "southeast": {"ES", "MG", "RJ", "SP"},
    "south": {"PR", "RS", "SC"},
}
STATE_REGIONS = {state: region for region, states in REGIONS.items() for state in states}

CENTS = Decimal("0.01")
MAX_WEIGHT_KG = 1000
MAX_QUANTITY = 10000


def region_of(state: str) -> str:
    return STATE_REGIONS[state]


class ShippingRequest(BaseModel):
    origin: str = Field(description="Two-letter code (UF) of the state the order ships from, e.g. SP")
    destination: str = Field(description="Two-letter code (UF) of the state the order ships to, e.g. BA")
    weight_kg: float = Field(gt=0, le=MAX_WEIGHT_KG, allow_inf_nan=False, description="Total package weight in kilograms")
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY, description="Number of products in the package")

    @field_validator("origin", "destination")
    @classmethod
    def known_state(cls, value: str) -> str:
        state = value.strip().upper()
        if state not in STATE_REGIONS:
            raise ValueError(f"unknown state code '{value}'")
        return state


class ShippingCalculator:

    def __init__(self,
                 base_fee: Decimal = Decimal("4.50"),
                 item_fee: Decimal = Decimal("1.50"),
                 kg_fee: Decimal = Decimal("2.00"),
                 same_state_factor: Decimal = Decimal("1.0"),
                 same_region_factor: Decimal = Decimal("1.5"),
                 other_region_factor: Decimal = Decimal("2.5")):
        self.base_fee = base_fee
        self.item_fee = item_fee
        self.kg_fee = kg_fee
        self.same_state_factor = same_state_factor
        self.same_region_factor = same_region_factor
        self.other_region_factor = other_region_factor

    def distance_factor(self, origin: str, destination: str) -> Decimal:
        if origin == destination:
            return self.same_state_factor
        if region_of(origin) == region_of(destination):
            return self.same_region_factor
        return self.other_region_factor

    def calculate(self, request: ShippingRequest) -> Decimal:
        weight = Decimal(str(request.weight_kg))
        subtotal = self.base_fee + self.item_fee * request.quantity + self.kg_fee * weight
        price = (subtotal * self.distance_factor(request.origin, request.destination)).quantize(CENTS, rounding=ROUND_HALF_UP)
        LOGGER.debug(f"Shipping {request.origin}->{request.destination} {request.weight_kg}kg x{request.quantity}: {price}")
        return price
