from moving_quote.core.config import settings
from moving_quote.services.geocoding_service import CepGeocoder
from moving_quote.services.session_store import QuoteSessionStore, session_store


def get_session_store() -> QuoteSessionStore:
    return session_store


def get_geocoder() -> CepGeocoder:
    return CepGeocoder(settings)
