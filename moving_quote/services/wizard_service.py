import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from moving_quote.core.exceptions import (
    InvalidTransitionError,
    LookupDiscardedError,
    LookupFailure,
    UnknownFieldError,
    WizardBusyError,
)
from moving_quote.core.logger import get_logger
from moving_quote.models.geo import Coordinate
from moving_quote.models.quote_form import Address, QuoteForm
from moving_quote.models.wizard import LookupErrorInfo, LookupStatus, WizardState, WizardStep
from moving_quote.services.distance_service import distance_km
from moving_quote.services.geocoding_service import POSTAL_CODE_LENGTH, clean_postal_code, is_valid_postal_code
from moving_quote.services.pricing_service import estimate, pricing_inputs_for

logger = get_logger(__name__)

REQUIRED = "Required"
INVALID_POSTAL_CODE = "Invalid postal code"
INVALID_VALUE = "Invalid value"

ADDRESS_FIELDS = tuple(Address.model_fields)
FORM_FIELDS = tuple(name for name in QuoteForm.model_fields if name not in ("origin", "destination"))
FIELD_PATHS = FORM_FIELDS + tuple(
    f"{side}.{field}" for side in ("origin", "destination") for field in ADDRESS_FIELDS
)


def _blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class QuoteWizard:
    """
    Five-step quote request: contact -> move details -> addresses -> review
    -> confirmation.

    Leaving the addresses step geocodes both postal codes and prices the
    move. That transition is asynchronous and tracked in
    ``state.lookup_status``; a reset, close or retreat while it is in flight
    bumps the generation so the late result is dropped.
    """

    def __init__(self, geocoder, has_helpers: bool = True):
        self.geocoder = geocoder
        self.has_helpers = has_helpers
        self.state = WizardState()
        self._generation = 0

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------
    def _target(self, path: str) -> Tuple[Any, str]:
        if path not in FIELD_PATHS:
            raise UnknownFieldError(path)
        if "." in path:
            side, field = path.split(".", 1)
            return getattr(self.state.form, side), field
        return self.state.form, path

    def update_field(self, path: str, value: Any) -> None:
        if self.state.lookup_status == LookupStatus.PENDING:
            raise WizardBusyError("Address lookup still in progress")
        target, field = self._target(path)
        if field == "postal_code" and isinstance(value, str):
            # Keep digits only, at most eight of them
            value = clean_postal_code(value)[:POSTAL_CODE_LENGTH]
        try:
            setattr(target, field, value)
        except ValidationError:
            self.state.errors[path] = INVALID_VALUE
            return
        self.state.errors.pop(path, None)

        lookup_error = self.state.lookup_error
        if lookup_error is not None and lookup_error.field == path:
            self.state.lookup_error = None
            self.state.lookup_status = LookupStatus.IDLE

    def apply_changes(self, changes: Dict[str, Any]) -> None:
        """Apply a nested dict of edits, e.g. {"name": "Ana", "origin": {"postal_code": "01001000"}}."""
        for key, value in changes.items():
            if key in ("origin", "destination") and value is None:
                continue
            if key in ("origin", "destination") and isinstance(value, dict):
                for field, field_value in value.items():
                    self.update_field(f"{key}.{field}", field_value)
            else:
                self.update_field(key, value)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_step(self, step: WizardStep) -> Dict[str, str]:
        form = self.state.form
        errors: Dict[str, str] = {}

        if step == WizardStep.CONTACT:
            for field in ("name", "email", "phone"):
                if _blank(getattr(form, field)):
                    errors[field] = REQUIRED
        elif step == WizardStep.MOVE_DETAILS:
            for field in ("move_date", "move_type"):
                if _blank(getattr(form, field)):
                    errors[field] = REQUIRED
        elif step == WizardStep.ADDRESSES:
            for side in ("origin", "destination"):
                address = getattr(form, side)
                if _blank(address.street):
                    errors[f"{side}.street"] = REQUIRED
                if not is_valid_postal_code(address.postal_code):
                    errors[f"{side}.postal_code"] = INVALID_POSTAL_CODE

        return errors

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    async def advance(self) -> bool:
        """Move one step forward. Returns False when the current step has validation errors."""
        step = self.state.step

        if step == WizardStep.CONFIRMATION:
            raise InvalidTransitionError("Quote already submitted; reset to start a new one")
        if self.state.lookup_status == LookupStatus.PENDING:
            raise WizardBusyError("Address lookup still in progress")

        self.state.errors = self.validate_step(step)
        if self.state.errors:
            logger.info(f"Step {step.name} blocked by {sorted(self.state.errors)}")
            return False

        if step == WizardStep.ADDRESSES:
            await self._estimate_move()
        elif step == WizardStep.REVIEW:
            self._submit()

        self.state.step = WizardStep(step + 1)
        return True

    def retreat(self) -> None:
        if self.state.step == WizardStep.CONFIRMATION:
            raise InvalidTransitionError("Quote already submitted; reset to start a new one")
        self._invalidate_lookup()
        self.state.step = WizardStep(max(WizardStep.CONTACT, self.state.step - 1))

    def reset(self) -> None:
        self._generation += 1
        self.state = WizardState()

    def close(self) -> None:
        self.reset()

    # ------------------------------------------------------------------
    # Step 3 -> 4 side effect
    # ------------------------------------------------------------------
    def _invalidate_lookup(self) -> None:
        if self.state.lookup_status == LookupStatus.PENDING:
            self._generation += 1
            self.state.lookup_status = LookupStatus.IDLE

    async def _resolve(self, field: str, postal_code: str) -> Coordinate:
        try:
            return await self.geocoder.resolve(postal_code)
        except LookupFailure as e:
            e.field = field
            raise

    async def _estimate_move(self) -> None:
        state = self.state
        generation = self._generation
        form = state.form

        state.lookup_status = LookupStatus.PENDING
        state.lookup_error = None
        state.estimate = None
        state.distance_km = None

        # Both lookups run to completion so the first failure is reported deterministically
        results = await asyncio.gather(
            self._resolve("origin.postal_code", form.origin.postal_code),
            self._resolve("destination.postal_code", form.destination.postal_code),
            return_exceptions=True,
        )

        if generation != self._generation:
            logger.info("Discarding address lookup for a wizard that was reset or moved")
            raise LookupDiscardedError("Quote was reset while the address lookup was running")

        for result in results:
            if isinstance(result, LookupFailure):
                logger.warning(f"Address lookup failed ({result.kind}) for {result.field}: {result.message}")
                state.lookup_status = LookupStatus.FAILED
                state.lookup_error = LookupErrorInfo(
                    kind=result.kind,
                    message=result.message,
                    postal_code=result.postal_code,
                    field=result.field,
                )
                raise result
            if isinstance(result, BaseException):
                state.lookup_status = LookupStatus.FAILED
                raise result

        origin, destination = results
        km = distance_km(origin, destination)
        property_type, item_volume = pricing_inputs_for(form)
        price = estimate(km, property_type, item_volume, self.has_helpers)

        state.distance_km = round(km, 2)
        state.estimate = price
        state.lookup_status = LookupStatus.SUCCEEDED
        logger.info(
            f"Estimated {price} for {km:.2f} km "
            f"({property_type.value}, {item_volume.value}, helpers={self.has_helpers})"
        )

    def _submit(self) -> None:
        self.state.submitted_at = datetime.now(timezone.utc)
        form = self.state.form
        logger.info(
            f"Quote request submitted by {form.name} <{form.email}>: "
            f"{form.origin.postal_code} -> {form.destination.postal_code}, "
            f"estimate={self.state.estimate}"
        )
