from fastapi import APIRouter, Depends, HTTPException, Response

from moving_quote.core.dependencies import get_geocoder, get_session_store
from moving_quote.core.exceptions import (
    AddressNotGeocodedError,
    InvalidTransitionError,
    LookupDiscardedError,
    LookupFailure,
    PostalCodeNotFoundError,
    SessionNotFoundError,
    UnknownFieldError,
    WizardBusyError,
)
from moving_quote.core.logger import get_logger
from moving_quote.models.request import EstimateRequest, QuoteFormPatch
from moving_quote.models.response import QuoteSessionResponse
from moving_quote.services.pricing_service import PriceBreakdown, price_breakdown
from moving_quote.services.session_store import QuoteSessionStore
from moving_quote.services.wizard_service import QuoteWizard

quote_router = APIRouter(prefix="/quote", tags=["Quote"])

logger = get_logger(__name__)


def _wizard(session_id: str, store: QuoteSessionStore) -> QuoteWizard:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _lookup_status_code(error: LookupFailure) -> int:
    if isinstance(error, (PostalCodeNotFoundError, AddressNotGeocodedError)):
        return 422
    return 502


@quote_router.post("/sessions", response_model=QuoteSessionResponse, status_code=201)
async def open_session(
    store: QuoteSessionStore = Depends(get_session_store),
    geocoder=Depends(get_geocoder),
):
    session_id, wizard = store.create(geocoder)
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.get("/sessions/{session_id}", response_model=QuoteSessionResponse)
async def get_session(session_id: str, store: QuoteSessionStore = Depends(get_session_store)):
    wizard = _wizard(session_id, store)
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.patch("/sessions/{session_id}/form", response_model=QuoteSessionResponse)
async def update_form(
    session_id: str,
    payload: QuoteFormPatch,
    store: QuoteSessionStore = Depends(get_session_store),
):
    """
    Apply the fields present in the body. Each edited field loses its
    validation error; values of the wrong shape are recorded as field errors.
    """
    wizard = _wizard(session_id, store)
    try:
        wizard.apply_changes(payload.model_dump(exclude_unset=True))
    except WizardBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnknownFieldError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.post("/sessions/{session_id}/advance", response_model=QuoteSessionResponse)
async def advance(session_id: str, store: QuoteSessionStore = Depends(get_session_store)):
    """
    Validate the current step and move forward. Leaving the address step
    geocodes both postal codes and computes the estimate; when that fails
    the wizard stays put and the request can simply be retried.
    """
    wizard = _wizard(session_id, store)
    try:
        moved = await wizard.advance()
    except LookupFailure as e:
        raise HTTPException(
            status_code=_lookup_status_code(e),
            detail={
                "kind": e.kind,
                "field": e.field,
                "postal_code": e.postal_code,
                "message": e.message,
                "retry": True,
            },
        )
    except (InvalidTransitionError, WizardBusyError, LookupDiscardedError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not moved:
        raise HTTPException(
            status_code=422,
            detail={"step": int(wizard.state.step), "errors": wizard.state.errors},
        )
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.post("/sessions/{session_id}/retreat", response_model=QuoteSessionResponse)
async def retreat(session_id: str, store: QuoteSessionStore = Depends(get_session_store)):
    wizard = _wizard(session_id, store)
    try:
        wizard.retreat()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.post("/sessions/{session_id}/reset", response_model=QuoteSessionResponse)
async def reset(session_id: str, store: QuoteSessionStore = Depends(get_session_store)):
    wizard = _wizard(session_id, store)
    wizard.reset()
    logger.info(f"Quote session {session_id} reset")
    return QuoteSessionResponse.from_wizard(session_id, wizard)


@quote_router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, store: QuoteSessionStore = Depends(get_session_store)):
    try:
        store.close(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@quote_router.post("/estimate", response_model=PriceBreakdown)
async def quick_estimate(payload: EstimateRequest):
    """
    Price a move directly from its pricing inputs, without the wizard.
    """
    return price_breakdown(
        payload.distance_km,
        payload.property_type,
        payload.item_volume,
        payload.has_helpers,
    )
