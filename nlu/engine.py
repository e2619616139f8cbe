"""
Action execution loop.

Drives one conversation turn against the intent engine: keep asking for the
next step and run it until the engine says stop.

  msg    -> actions["send"](request, response)
  action -> context = actions[name](request)
  stop   -> return context
"""

import logging
from typing import Any, Mapping, Optional

from bot.sessions.types import Context
from .base import NLUBackend
from .types import ActionRequest, ActionResponse, NLUError

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 5


class ActionEngine:
    """Runs registered actions for the steps an NLUBackend returns."""

    def __init__(
        self,
        backend: NLUBackend,
        actions: Mapping[str, Any],
        max_steps: int = DEFAULT_MAX_STEPS,
    ):
        if "send" not in actions:
            raise ValueError("The 'send' action is required")
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")

        self.backend = backend
        self.actions = dict(actions)
        self.max_steps = max_steps

    async def run(
        self,
        session_id: str,
        text: str,
        context: Context,
        max_steps: Optional[int] = None,
    ) -> Context:
        """
        Run one turn.

        Returns:
            The context produced by the last action (or the input context)

        Raises:
            NLUError: engine error, unknown step type, missing action,
                or the turn didn't stop within max_steps
        """
        steps = max_steps or self.max_steps
        step_text: Optional[str] = text

        for _ in range(steps):
            step = await self.backend.converse(session_id, step_text, context)
            step_text = None

            if step.type == "stop":
                return context

            request = ActionRequest(
                session_id=session_id,
                context=context,
                text=text,
                entities=step.entities,
            )

            if step.type == "msg":
                response = ActionResponse(text=step.msg or "", quickreplies=step.quickreplies)
                logger.debug(f"Executing send for {session_id}: {response.text!r}")
                await self.actions["send"](request, response)

            elif step.type == "action":
                action = self.actions.get(step.action or "")
                if action is None:
                    raise NLUError(f"No '{step.action}' action found")
                logger.debug(f"Executing action {step.action} for {session_id}")
                result = await action(request)
                context = result if result is not None else {}

            elif step.type == "error":
                raise NLUError(f"Wit returned an error step: {step.error or 'unknown'}")

            else:
                raise NLUError(f"Unknown step type: {step.type!r}")

        raise NLUError(f"Max steps ({steps}) reached, stopping")
