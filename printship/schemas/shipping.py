"""
Shipping Schemas

Pydantic models for the quote, weight and shipment APIs. Field names are
snake_case in Python and camelCase on the wire.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from printship.modules.printing.weight import WeightSpec
from printship.modules.shipping.carriers.base import (
    ShipmentAddress,
    ShipmentItem,
    ShipmentPayload,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Quote Schemas ====================


class QuoteRequest(CamelModel):
    """Aggregate shipping quotes for one parcel."""
    destination_pincode: str = Field(..., pattern=r"^[0-9]{6}$")
    weight_grams: float = Field(..., gt=0, allow_inf_nan=False)
    courier_ids: Optional[List[str]] = Field(None, description="Only query these couriers")


# Client-facing message per invalid quote field
QUOTE_FIELD_ERRORS = {
    "destinationPincode": "destinationPincode must be a 6-digit string",
    "weightGrams": "weightGrams must be a positive number",
    "courierIds": "courierIds must be an array of strings",
}


# ==================== Weight Schemas ====================


class WeightRequest(CamelModel):
    """Print spec for weight calculation."""
    page_count: int
    print_side: Literal["single", "double"]
    page_size: str
    gsm: str
    binding_type: str
    packaging_type: str

    @field_validator("gsm", mode="before")
    @classmethod
    def coerce_gsm(cls, v):
        # Accept 80 as well as "80"
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v

    def to_spec(self) -> WeightSpec:
        return WeightSpec(
            page_count=self.page_count,
            print_side=self.print_side,
            page_size=self.page_size,
            gsm=self.gsm,
            binding_type=self.binding_type,
            packaging_type=self.packaging_type,
        )


# ==================== Shipment Schemas ====================


class AddressSchema(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    pincode: str = Field(..., pattern=r"^[0-9]{6}$")
    address: str = ""

    def to_address(self) -> ShipmentAddress:
        return ShipmentAddress(name=self.name, phone=self.phone, pincode=self.pincode, address=self.address)


class ShipmentItemSchema(CamelModel):
    title: str
    quantity: int = Field(1, ge=1)
    price: float = Field(0.0, ge=0)


class ShipmentCreateRequest(CamelModel):
    """Book a shipment. pickupAddress defaults to the configured origin."""
    order_id: str = Field(..., min_length=1)
    courier_id: str = Field(..., min_length=1)
    pickup_address: Optional[AddressSchema] = None
    delivery_address: AddressSchema
    items: List[ShipmentItemSchema] = []
    weight_grams: float = Field(500, gt=0)
    payment_method: Literal["prepaid", "cod"] = "prepaid"
    amount: float = Field(0.0, ge=0)

    def to_payload(self, default_pickup: ShipmentAddress) -> ShipmentPayload:
        return ShipmentPayload(
            order_id=self.order_id,
            courier_id=self.courier_id,
            pickup_address=self.pickup_address.to_address() if self.pickup_address else default_pickup,
            delivery_address=self.delivery_address.to_address(),
            items=[ShipmentItem(title=i.title, quantity=i.quantity, price=i.price) for i in self.items],
            weight_grams=self.weight_grams,
            payment_method=self.payment_method,
            amount=self.amount,
        )


class ShipmentCancelRequest(CamelModel):
    courier_id: str = Field(..., min_length=1)
    tracking_id: str = Field(..., min_length=1)
    order_id: Optional[str] = None
