"""
Session module exports.

Clean interface for the bot to import session components.
"""

from bot.sessions.base import SessionStore
from bot.sessions.memory import InMemorySessionStore
from bot.sessions.types import Context, Session, SessionNotFoundError

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "Session",
    "Context",
    "SessionNotFoundError",
]
