from typing import Optional


class QuoteError(Exception):
    """Base class for errors raised by the quote services."""


class SessionNotFoundError(QuoteError):
    def __init__(self, session_id: str):
        super().__init__(f"Quote session {session_id} not found")
        self.session_id = session_id


# -------------------------------------------------------------------
# Lookup failures (step 3 -> 4 transition and /location)
# -------------------------------------------------------------------
class LookupFailure(QuoteError):
    """A postal code could not be turned into coordinates."""

    kind = "lookup_failed"

    def __init__(self, postal_code: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.postal_code = postal_code
        self.message = message
        self.field = field


class PostalCodeNotFoundError(LookupFailure):
    kind = "not_found"

    def __init__(self, postal_code: str, field: Optional[str] = None):
        super().__init__(postal_code, f"Postal code {postal_code} not found", field)


class AddressNotGeocodedError(LookupFailure):
    kind = "no_coordinates"

    def __init__(self, postal_code: str, query: str, field: Optional[str] = None):
        super().__init__(
            postal_code, f"No coordinates found for '{query}' (postal code {postal_code})", field
        )
        self.query = query


class GeocodingUnavailableError(LookupFailure):
    kind = "network"


# -------------------------------------------------------------------
# Wizard errors
# -------------------------------------------------------------------
class WizardError(QuoteError):
    pass


class InvalidTransitionError(WizardError):
    pass


class WizardBusyError(WizardError):
    pass


class LookupDiscardedError(WizardError):
    """The wizard was reset or moved while its lookup was in flight."""


class UnknownFieldError(WizardError):
    def __init__(self, path: str):
        super().__init__(f"Unknown form field '{path}'")
        self.path = path
