import logging
import uuid

from app.services.presenter import SessionPresenter
from app.utils.exceptions import AppException

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory presenters keyed by session id; nothing outlives the process."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionPresenter] = {}

    def create(self) -> SessionPresenter:
        session_id = str(uuid.uuid4())
        presenter = SessionPresenter(session_id)
        self._sessions[session_id] = presenter
        logger.info("Created session %s", session_id)
        return presenter

    def get(self, session_id: str) -> SessionPresenter:
        presenter = self._sessions.get(session_id)
        if presenter is None:
            raise AppException("Session not found", status_code=404)
        return presenter

    def __len__(self) -> int:
        return len(self._sessions)


session_store = SessionStore()
