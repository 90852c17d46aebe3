from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MoveType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    OFFICE = "office"


class Address(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    street: str = ""
    city: str = ""
    postal_code: str = ""


class QuoteForm(BaseModel):
    """Everything the customer types into the quote wizard."""

    model_config = ConfigDict(validate_assignment=True)

    # Step 1: contact
    name: str = ""
    email: str = ""
    phone: str = ""

    # Step 2: move details
    move_date: Optional[date] = None
    move_type: Optional[MoveType] = None
    description: str = ""

    # Step 3: addresses
    origin: Address = Field(default_factory=Address)
    destination: Address = Field(default_factory=Address)
