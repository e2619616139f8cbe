from abc import ABC, abstractmethod
from typing import Optional

from bot.sessions.types import Context
from .types import ConverseStep


class NLUBackend(ABC):
    """
    Abstract intent-engine boundary.
    Bot code must depend ONLY on this interface.
    """

    @abstractmethod
    async def converse(
        self,
        session_id: str,
        text: Optional[str],
        context: Context,
    ) -> ConverseStep:
        """
        Ask the engine for the next step of a conversation turn.

        text is the user's message on the first step and None afterwards.

        Raises:
            NLUError: engine unreachable or returned an error
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources, if any."""
        return None
