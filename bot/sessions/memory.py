"""
In-memory session store.

Process-lifetime only: sessions are never destroyed and are lost on restart.
"""

import copy
import logging
import uuid
from typing import Callable, Dict, Optional

from bot.sessions.base import SessionStore
from bot.sessions.types import Context, Session, SessionNotFoundError

logger = logging.getLogger(__name__)


def _new_session_id() -> str:
    return str(uuid.uuid4())


class InMemorySessionStore(SessionStore):
    """
    Dict-backed session store.

    Keeps a direct external_user_id -> session_id index next to the
    session table, so lookups never scan. Both maps are only written
    together in find_or_create.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        self._sessions: Dict[str, Session] = {}
        self._by_user: Dict[str, str] = {}
        self._id_factory = id_factory or _new_session_id

    def find_or_create(self, external_user_id: str) -> str:
        session_id = self._by_user.get(external_user_id)
        if session_id is not None:
            return session_id

        session_id = self._id_factory()
        if session_id in self._sessions:
            raise ValueError(f"Session id collision: {session_id}")

        self._sessions[session_id] = Session(id=session_id, external_user_id=external_user_id)
        self._by_user[external_user_id] = session_id
        logger.info(f"Created session {session_id} for user {external_user_id}")
        return session_id

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            logger.error(f"Lookup on unknown session: {session_id}")
            raise SessionNotFoundError(session_id) from None

    def get_context(self, session_id: str) -> Context:
        # Copy so an in-flight NLU turn can't touch the stored context
        return copy.deepcopy(self.get(session_id).context)

    def set_context(self, session_id: str, context: Context) -> None:
        self.get(session_id).context = copy.deepcopy(context)

    def __len__(self) -> int:
        return len(self._sessions)
