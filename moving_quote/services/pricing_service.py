import math
from enum import Enum
from typing import Tuple

from pydantic import BaseModel

from moving_quote.models.quote_form import MoveType, QuoteForm

BASE_FEE = 250.0
PER_KM_RATE = 3.5
HOUSE_SURCHARGE = 80.0
HELPER_SURCHARGE = 150.0

# Descriptions longer than this are priced as a large load
LONG_DESCRIPTION_CHARS = 80


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"


class ItemVolume(str, Enum):
    FEW = "few"
    MEDIUM = "medium"
    MANY = "many"


ITEM_VOLUME_SURCHARGE = {
    ItemVolume.FEW: 0.0,
    ItemVolume.MEDIUM: 120.0,
    ItemVolume.MANY: 250.0,
}

# Only commercial is mapped; anything else falls back to apartment
PROPERTY_TYPE_BY_MOVE_TYPE = {
    MoveType.COMMERCIAL: PropertyType.APARTMENT,
}


class PriceBreakdown(BaseModel):
    base_fee: float
    distance_km: float
    distance_charge: float
    property_surcharge: float
    item_volume_surcharge: float
    helper_surcharge: float
    total: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def price_breakdown(
    distance_km: float,
    property_type: PropertyType,
    item_volume: ItemVolume,
    has_helpers: bool,
) -> PriceBreakdown:
    distance_charge = distance_km * PER_KM_RATE
    property_surcharge = HOUSE_SURCHARGE if property_type == PropertyType.HOUSE else 0.0
    volume_surcharge = ITEM_VOLUME_SURCHARGE[item_volume]
    helper_surcharge = HELPER_SURCHARGE if has_helpers else 0.0

    raw = BASE_FEE + distance_charge + property_surcharge + volume_surcharge + helper_surcharge
    return PriceBreakdown(
        base_fee=BASE_FEE,
        distance_km=distance_km,
        distance_charge=distance_charge,
        property_surcharge=property_surcharge,
        item_volume_surcharge=volume_surcharge,
        helper_surcharge=helper_surcharge,
        total=_round_half_up(raw),
    )


def estimate(
    distance_km: float,
    property_type: PropertyType,
    item_volume: ItemVolume,
    has_helpers: bool,
) -> int:
    """Estimated price of a move, in whole currency units."""
    return price_breakdown(distance_km, property_type, item_volume, has_helpers).total


def pricing_inputs_for(form: QuoteForm) -> Tuple[PropertyType, ItemVolume]:
    """
    Derive (property type, item volume) from what the wizard collects.

    Only "commercial" has an explicit mapping and it maps to apartment;
    residential, office and unset fall through to apartment as well, so the
    house surcharge is never applied from the wizard. Item volume never
    resolves to "few". Both rules are placeholders kept as-is.
    """
    property_type = PROPERTY_TYPE_BY_MOVE_TYPE.get(form.move_type, PropertyType.APARTMENT)

    if len(form.description) > LONG_DESCRIPTION_CHARS:
        item_volume = ItemVolume.MANY
    else:
        item_volume = ItemVolume.MEDIUM

    return property_type, item_volume


def format_brl(amount: float) -> str:
    """1080 -> 'R$ 1.080,00'"""
    text = f"{amount:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")
