from datetime import datetime
from enum import Enum, IntEnum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from moving_quote.models.quote_form import QuoteForm


class WizardStep(IntEnum):
    CONTACT = 1
    MOVE_DETAILS = 2
    ADDRESSES = 3
    REVIEW = 4
    CONFIRMATION = 5

    @property
    def label(self) -> str:
        return STEP_LABELS[self]


STEP_LABELS = {
    WizardStep.CONTACT: "Contact details",
    WizardStep.MOVE_DETAILS: "Move details",
    WizardStep.ADDRESSES: "Addresses",
    WizardStep.REVIEW: "Review",
    WizardStep.CONFIRMATION: "Confirmation",
}

TOTAL_STEPS = len(WizardStep)


class LookupStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class LookupErrorInfo(BaseModel):
    kind: str
    message: str
    postal_code: str
    field: Optional[str] = None


class WizardState(BaseModel):
    form: QuoteForm = Field(default_factory=QuoteForm)
    step: WizardStep = WizardStep.CONTACT
    errors: Dict[str, str] = Field(default_factory=dict)

    # Populated by the step 3 -> 4 transition only
    estimate: Optional[int] = None
    distance_km: Optional[float] = None
    lookup_status: LookupStatus = LookupStatus.IDLE
    lookup_error: Optional[LookupErrorInfo] = None

    submitted_at: Optional[datetime] = None
