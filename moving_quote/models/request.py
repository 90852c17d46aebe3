from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from moving_quote.models.quote_form import MoveType
from moving_quote.services.pricing_service import ItemVolume, PropertyType


class AddressPatch(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None


class QuoteFormPatch(BaseModel):
    """Partial form edit; only the fields present in the body are applied."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    move_date: Optional[date] = None
    move_type: Optional[MoveType] = None
    description: Optional[str] = None
    origin: Optional[AddressPatch] = None
    destination: Optional[AddressPatch] = None


class EstimateRequest(BaseModel):
    distance_km: float = Field(..., ge=0, description="Distance between origin and destination in km")
    property_type: PropertyType = PropertyType.APARTMENT
    item_volume: ItemVolume = ItemVolume.FEW
    has_helpers: bool = False
