"""
Session types and contracts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

# Free-form slot-filling state, mutated by NLU actions across turns
Context = Dict[str, Any]


class SessionNotFoundError(KeyError):
    """Lookup on a session id this store never produced."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No session {session_id}")


@dataclass
class Session:
    """Association between one external user and its conversation state."""

    id: str                           # Opaque, collision-free
    external_user_id: str             # Messenger page-scoped user id (PSID)
    context: Context = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
