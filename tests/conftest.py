"""
Shared test fixtures: an in-memory geocoder, a fresh session store and a
FastAPI test client wired to both.
"""

import pytest
from fastapi.testclient import TestClient

from moving_quote.core.dependencies import get_geocoder, get_session_store
from moving_quote.core.exceptions import PostalCodeNotFoundError
from moving_quote.main import app
from moving_quote.models.geo import Coordinate, PostalAddress
from moving_quote.services.session_store import QuoteSessionStore
from moving_quote.services.wizard_service import QuoteWizard

ORIGIN_CEP = "01001000"       # Praça da Sé, São Paulo
DESTINATION_CEP = "04538133"  # Av. Brigadeiro Faria Lima, São Paulo

COORDINATES = {
    ORIGIN_CEP: Coordinate(lat=-23.5503, lon=-46.6340),
    DESTINATION_CEP: Coordinate(lat=-23.5869, lon=-46.6822),
}

ADDRESSES = {
    ORIGIN_CEP: PostalAddress(
        postal_code=ORIGIN_CEP, street="Praça da Sé", district="Sé", city="São Paulo", state="SP"
    ),
    DESTINATION_CEP: PostalAddress(
        postal_code=DESTINATION_CEP,
        street="Avenida Brigadeiro Faria Lima",
        district="Itaim Bibi",
        city="São Paulo",
        state="SP",
    ),
}


class FakeGeocoder:
    """Stands in for CepGeocoder; unknown postal codes are 'not found'."""

    def __init__(self, failures=None):
        self.coordinates = dict(COORDINATES)
        self.failures = dict(failures or {})
        self.calls = []

    async def resolve(self, postal_code):
        self.calls.append(postal_code)
        if postal_code in self.failures:
            raise self.failures[postal_code]
        if postal_code not in self.coordinates:
            raise PostalCodeNotFoundError(postal_code)
        return self.coordinates[postal_code]

    async def lookup_postal_code(self, postal_code):
        if postal_code in self.failures:
            raise self.failures[postal_code]
        if postal_code not in ADDRESSES:
            raise PostalCodeNotFoundError(postal_code)
        return ADDRESSES[postal_code]


CONTACT = {"name": "Ana Souza", "email": "ana@example.com", "phone": "(11) 98765-4321"}
MOVE_DETAILS = {"move_date": "2026-11-20", "move_type": "residential", "description": "Two-bedroom flat"}
ADDRESS_FIELDS = {
    "origin": {"street": "Praça da Sé, 100", "city": "São Paulo", "postal_code": ORIGIN_CEP},
    "destination": {"street": "Av. Brigadeiro Faria Lima, 3477", "city": "São Paulo", "postal_code": DESTINATION_CEP},
}


async def walk_to_addresses(wizard: QuoteWizard) -> None:
    """Fill steps 1-3 and stop on the address step."""
    wizard.apply_changes(CONTACT)
    assert await wizard.advance()
    wizard.apply_changes(MOVE_DETAILS)
    assert await wizard.advance()
    wizard.apply_changes(ADDRESS_FIELDS)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def wizard(geocoder):
    return QuoteWizard(geocoder)


@pytest.fixture
def store():
    return QuoteSessionStore()


@pytest.fixture
def client(store, geocoder):
    """FastAPI test client with the geocoder and session store swapped out."""
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
