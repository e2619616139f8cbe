"""
NLU boundary types and contracts.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from bot.sessions.types import Context

StepType = Literal["msg", "action", "stop", "error"]


class NLUError(Exception):
    """The intent engine failed or returned something the loop can't run."""
    pass


@dataclass
class ConverseStep:
    """One answer of the converse endpoint: what the bot should do next."""

    type: str                          # msg | action | stop | error
    msg: Optional[str] = None          # set for "msg"
    action: Optional[str] = None       # set for "action"
    entities: Dict[str, Any] = field(default_factory=dict)
    confidence: Optional[float] = None
    quickreplies: Optional[List[str]] = None
    error: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ConverseStep":
        return cls(
            type=str(data.get("type", "")),
            msg=data.get("msg"),
            action=data.get("action"),
            entities=data.get("entities") or {},
            confidence=data.get("confidence"),
            quickreplies=data.get("quickreplies"),
            error=data.get("error"),
        )


@dataclass
class ActionRequest:
    """What every action receives."""

    session_id: str
    context: Context
    text: Optional[str]                # The user's message for this turn
    entities: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ActionResponse:
    """Bot message handed to the send action."""

    text: str
    quickreplies: Optional[List[str]] = None
