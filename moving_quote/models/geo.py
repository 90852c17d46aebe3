from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class PostalAddress(BaseModel):
    postal_code: str
    street: str = ""
    district: str = ""
    city: str = ""
    state: str = ""

    def search_query(self) -> str:
        """Free-text query for the geocoder: 'street, city, state' without blanks."""
        parts = [self.street, self.city, self.state]
        return ", ".join(part.strip() for part in parts if part and part.strip())
