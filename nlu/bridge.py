"""
NLU Bridge

Connects the session store, the intent engine and the outbound sender.
Supplies the two bot actions (send, getForecast) and persists the context
a turn produces.

Failure policy: an engine error drops the turn. The stored context stays
exactly as it was and the user gets no error message.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from bot.sessions import SessionNotFoundError, SessionStore
from bot.sessions.types import Context
from transport.messenger.sender import MessengerSender
from .base import NLUBackend
from .engine import DEFAULT_MAX_STEPS, ActionEngine
from .types import ActionRequest, ActionResponse

logger = logging.getLogger(__name__)

ECHO_PREFIX = "echo: "


def first_entity_value(entities: Optional[Dict[str, Any]], entity: str) -> Optional[Any]:
    """
    First value of an entity, unwrapping the {"value": ...} form.

    Returns None when the entity is missing, empty or falsy.
    """
    values = (entities or {}).get(entity)
    if not isinstance(values, list) or not values:
        return None
    first = values[0]
    value = first.get("value") if isinstance(first, dict) else first
    if isinstance(value, dict):
        value = value.get("value")
    return value or None


class NLUBridge:
    """Runs NLU turns for sessions and owns the bot's actions."""

    def __init__(
        self,
        store: SessionStore,
        sender: MessengerSender,
        backend: NLUBackend,
        max_steps: int = DEFAULT_MAX_STEPS,
    ):
        self.store = store
        self.sender = sender
        self.backend = backend
        self.engine = ActionEngine(
            backend,
            {"send": self.send, "getForecast": self.get_forecast},
            max_steps=max_steps,
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._pending: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def send(self, request: ActionRequest, response: ActionResponse) -> None:
        """Forward the bot's reply to the session's user without waiting for delivery."""
        try:
            recipient_id = self.store.get(request.session_id).external_user_id
        except SessionNotFoundError:
            recipient_id = None

        if not recipient_id:
            logger.error(f"Couldn't find user for session: {request.session_id}")
            return

        logger.info(f"User said... {request.text!r}, sending... {response.text!r}")

        def on_sent(error, body):
            if error is not None:
                logger.error(f"Error while forwarding the response to {recipient_id}: {error}")

        self.sender.send(recipient_id, {"text": f"{ECHO_PREFIX}{response.text}"}, on_sent)

    async def get_forecast(self, request: ActionRequest) -> Context:
        """Fill the forecast slot, or flag the location as missing."""
        context = request.context
        location = first_entity_value(request.entities, "location")
        if location:
            # TODO: call a weather API once one is configured
            context["forecast"] = f"sunny in {location}"
            context.pop("missingLocation", None)
        else:
            context["missingLocation"] = True
            context.pop("forecast", None)
        return context

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def run(self, session_id: str, text: str, context: Context) -> Context:
        """Run the engine for one message; the context passed in may be mutated."""
        return await self.engine.run(session_id, text, context)

    async def run_turn(self, session_id: str, text: str) -> bool:
        """
        Run one turn and persist the resulting context.

        Turns of the same session are serialized.

        Returns:
            True if the context was updated, False if the turn was dropped
        """
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            try:
                context = await self.run(session_id, text, self.store.get_context(session_id))
            except Exception as e:
                logger.error(
                    f"Oops! Got an error from Wit: {e}",
                    exc_info=True,
                    extra={"session_id": session_id},
                )
                return False

            self.store.set_context(session_id, context)
            logger.info("Waiting for next user messages", extra={"session_id": session_id})
            return True

    def submit(self, session_id: str, text: str) -> asyncio.Task:
        """Schedule a turn on the running loop and return immediately."""
        task = asyncio.create_task(self.run_turn(session_id, text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled turn."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self.backend.aclose()
