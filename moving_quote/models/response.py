from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

from moving_quote.models.quote_form import QuoteForm
from moving_quote.models.wizard import TOTAL_STEPS, LookupErrorInfo, LookupStatus
from moving_quote.services.pricing_service import format_brl
from moving_quote.services.wizard_service import QuoteWizard


class LocationResponse(BaseModel):
    postal_code: str
    street: Optional[str]
    district: Optional[str]
    city: Optional[str]
    state: Optional[str]


class QuoteSessionResponse(BaseModel):
    session_id: str
    step: int
    step_name: str
    step_label: str
    total_steps: int = TOTAL_STEPS
    form: QuoteForm
    errors: Dict[str, str]
    estimate: Optional[int] = None
    estimate_display: Optional[str] = None
    distance_km: Optional[float] = None
    lookup_status: LookupStatus
    lookup_error: Optional[LookupErrorInfo] = None
    submitted_at: Optional[datetime] = None

    @classmethod
    def from_wizard(cls, session_id: str, wizard: QuoteWizard) -> "QuoteSessionResponse":
        state = wizard.state
        return cls(
            session_id=session_id,
            step=int(state.step),
            step_name=state.step.name.lower(),
            step_label=state.step.label,
            form=state.form,
            errors=dict(state.errors),
            estimate=state.estimate,
            estimate_display=format_brl(state.estimate) if state.estimate is not None else None,
            distance_km=state.distance_km,
            lookup_status=state.lookup_status,
            lookup_error=state.lookup_error,
            submitted_at=state.submitted_at,
        )
