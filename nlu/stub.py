import re
from typing import Iterable, Optional

from bot.sessions.types import Context
from .base import NLUBackend
from .types import ConverseStep, NLUError

_LOCATION_RE = re.compile(r"\bin\s+([A-Za-z][\w\s-]*?)\s*[?.!]*$", re.IGNORECASE)


class StubNLUBackend(NLUBackend):
    """
    Deterministic fake intent engine for testing and offline runs.

    Two modes:
    - scripted: replays the given steps in order (tests)
    - default: a tiny forecast conversation, so the bot works without Wit
      ("weather in Madrid" -> getForecast, then a reply, then stop)
    """

    def __init__(self, steps: Optional[Iterable[ConverseStep]] = None):
        self._script = list(steps) if steps is not None else None
        self._turns: dict[str, list[ConverseStep]] = {}
        self.calls: list[tuple[str, Optional[str], Context]] = []

    async def converse(
        self,
        session_id: str,
        text: Optional[str],
        context: Context,
    ) -> ConverseStep:
        self.calls.append((session_id, text, dict(context)))

        if self._script is not None:
            if not self._script:
                raise NLUError("Stub script exhausted")
            return self._script.pop(0)

        if text is not None:
            self._turns[session_id] = self._plan(text)

        pending = self._turns.get(session_id) or []
        if not pending:
            return ConverseStep(type="stop")

        step = pending.pop(0)
        if step.type == "msg" and step.msg is None:
            # Reply is rendered from the context the action just produced
            step.msg = self._render(context)
        return step

    def _plan(self, text: str) -> list[ConverseStep]:
        lowered = text.lower()
        if "weather" not in lowered and "forecast" not in lowered:
            return [ConverseStep(type="stop")]

        entities = {}
        match = _LOCATION_RE.search(text.strip())
        if match:
            entities["location"] = [{"value": match.group(1).strip(), "confidence": 1.0}]

        return [
            ConverseStep(type="action", action="getForecast", entities=entities),
            ConverseStep(type="msg"),
            ConverseStep(type="stop"),
        ]

    @staticmethod
    def _render(context: Context) -> str:
        if context.get("forecast"):
            return f"The weather will be {context['forecast']}"
        return "Where would you like the forecast for?"
