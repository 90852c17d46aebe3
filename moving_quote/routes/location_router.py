from fastapi import APIRouter, Depends, HTTPException

from moving_quote.core.dependencies import get_geocoder
from moving_quote.core.exceptions import GeocodingUnavailableError, PostalCodeNotFoundError
from moving_quote.core.logger import get_logger
from moving_quote.models.response import LocationResponse
from moving_quote.services.geocoding_service import CepGeocoder

location_router = APIRouter(prefix="/location", tags=["Location"])
logger = get_logger(__name__)


@location_router.get("/{postal_code}", response_model=LocationResponse)
async def get_location(postal_code: str, geocoder: CepGeocoder = Depends(get_geocoder)):
    """
    Return street, district, city and state for a postal code (CEP).
    """
    try:
        address = await geocoder.lookup_postal_code(postal_code)
    except PostalCodeNotFoundError:
        raise HTTPException(status_code=404, detail="Invalid or unknown postal code")
    except GeocodingUnavailableError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return LocationResponse(
        postal_code=address.postal_code,
        street=address.street or None,
        district=address.district or None,
        city=address.city or None,
        state=address.state or None,
    )
