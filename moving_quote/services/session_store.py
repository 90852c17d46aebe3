import uuid
from typing import Dict, Tuple

from moving_quote.core.exceptions import SessionNotFoundError
from moving_quote.core.logger import get_logger
from moving_quote.services.wizard_service import QuoteWizard

logger = get_logger(__name__)


class QuoteSessionStore:
    """In-memory registry of open quote wizards, one per client session."""

    def __init__(self):
        self._sessions: Dict[str, QuoteWizard] = {}

    def create(self, geocoder) -> Tuple[str, QuoteWizard]:
        session_id = uuid.uuid4().hex
        wizard = QuoteWizard(geocoder)
        self._sessions[session_id] = wizard
        logger.info(f"Opened quote session {session_id}")
        return session_id, wizard

    def get(self, session_id: str) -> QuoteWizard:
        wizard = self._sessions.get(session_id)
        if wizard is None:
            raise SessionNotFoundError(session_id)
        return wizard

    def close(self, session_id: str) -> None:
        wizard = self._sessions.pop(session_id, None)
        if wizard is None:
            raise SessionNotFoundError(session_id)
        wizard.close()
        logger.info(f"Closed quote session {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)


session_store = QuoteSessionStore()
