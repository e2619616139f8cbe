"""
Abstract session store interface.

The bot depends only on this interface, not on specific implementations,
so a persistent backend can replace the in-memory one without touching
call sites.
"""

from abc import ABC, abstractmethod

from bot.sessions.types import Context, Session


class SessionStore(ABC):
    """
    Abstract session boundary.

    Key properties:
    - At most one session per external user id
    - Session ids are only produced by find_or_create
    - Unknown session ids raise SessionNotFoundError
    """

    @abstractmethod
    def find_or_create(self, external_user_id: str) -> str:
        """
        Return the session id for a user, creating the session on first contact.

        Args:
            external_user_id: Messenger sender id

        Returns:
            Session id (stable for the lifetime of the store)
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> Session:
        """Return the session, or raise SessionNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def get_context(self, session_id: str) -> Context:
        """Return a copy of the session's context."""
        raise NotImplementedError

    @abstractmethod
    def set_context(self, session_id: str, context: Context) -> None:
        """Replace the session's context."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of sessions held."""
        raise NotImplementedError
