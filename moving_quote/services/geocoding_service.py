import re
from typing import List, Optional

import httpx

from moving_quote.core.config import Settings, settings
from moving_quote.core.exceptions import (
    AddressNotGeocodedError,
    GeocodingUnavailableError,
    PostalCodeNotFoundError,
)
from moving_quote.core.logger import get_logger
from moving_quote.models.geo import Coordinate, PostalAddress

logger = get_logger(__name__)

POSTAL_CODE_LENGTH = 8


def clean_postal_code(postal_code: str) -> str:
    """'01001-000' -> '01001000'"""
    return re.sub(r"\D", "", postal_code or "")


def is_valid_postal_code(postal_code: str) -> bool:
    """Exactly eight ASCII digits, nothing else."""
    return (
        isinstance(postal_code, str)
        and len(postal_code) == POSTAL_CODE_LENGTH
        and postal_code.isascii()
        and postal_code.isdigit()
    )


class CepGeocoder:
    """
    Resolve a Brazilian postal code (CEP) to coordinates.

    Two sequential calls per postal code:
      1. ViaCEP turns the CEP into a street / city / state address.
      2. Nominatim (OpenStreetMap) turns that address into candidate
         coordinates; the first candidate is used.
    """

    def __init__(self, config: Settings = settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.viacep_base_url = config.VIACEP_BASE_URL.rstrip("/")
        self.nominatim_base_url = config.NOMINATIM_BASE_URL.rstrip("/")
        self.user_agent = config.GEOCODER_USER_AGENT
        self.timeout = config.GEOCODER_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        # Nominatim's usage policy rejects requests without a User-Agent
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    async def lookup_postal_code(self, postal_code: str) -> PostalAddress:
        async with self._client() as client:
            return await self._fetch_postal_address(client, postal_code)

    async def search_address(self, query: str) -> List[Coordinate]:
        async with self._client() as client:
            return await self._search(client, query, postal_code="")

    async def resolve(self, postal_code: str) -> Coordinate:
        async with self._client() as client:
            address = await self._fetch_postal_address(client, postal_code)
            query = address.search_query()
            candidates = await self._search(client, query, postal_code=address.postal_code)

        if not candidates:
            logger.warning(f"Geocoding returned no candidates for '{query}'")
            raise AddressNotGeocodedError(address.postal_code, query)

        logger.info(f"Resolved postal code {address.postal_code} to {candidates[0]}")
        return candidates[0]

    async def _fetch_postal_address(self, client: httpx.AsyncClient, postal_code: str) -> PostalAddress:
        cep = clean_postal_code(postal_code)
        if not is_valid_postal_code(cep):
            raise PostalCodeNotFoundError(postal_code)

        url = f"{self.viacep_base_url}/{cep}/json/"
        logger.info(f"Calling ViaCEP for postal code {cep}")
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"ViaCEP request failed for {cep}: {e}")
            raise GeocodingUnavailableError(cep, f"Postal code service unreachable: {e}")

        # ViaCEP answers 400 for malformed codes
        if response.status_code == 400:
            raise PostalCodeNotFoundError(cep)

        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPStatusError, ValueError) as e:
            logger.error(f"ViaCEP returned an unusable response for {cep}: {e}")
            raise GeocodingUnavailableError(cep, f"Postal code service error: {e}")

        # Unknown codes come back as 200 with {"erro": true} (or "true")
        if not isinstance(data, dict) or str(data.get("erro", "")).lower() == "true":
            raise PostalCodeNotFoundError(cep)

        return PostalAddress(
            postal_code=cep,
            street=data.get("logradouro") or "",
            district=data.get("bairro") or "",
            city=data.get("localidade") or "",
            state=data.get("uf") or "",
        )

    async def _search(self, client: httpx.AsyncClient, query: str, postal_code: str) -> List[Coordinate]:
        url = f"{self.nominatim_base_url}/search"
        logger.info(f"Calling Nominatim for '{query}'")
        try:
            response = await client.get(url, params={"format": "json", "q": query})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Nominatim request failed for '{query}': {e}")
            raise GeocodingUnavailableError(postal_code, f"Geocoding service error: {e}")

        if not isinstance(data, list):
            raise GeocodingUnavailableError(postal_code, f"Unexpected geocoding response: {data}")

        try:
            return [Coordinate(lat=float(item["lat"]), lon=float(item["lon"])) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingUnavailableError(postal_code, f"Unexpected geocoding response structure: {e}")
