import logging
from typing import Optional

import httpx

from bot.sessions.types import Context
from .base import NLUBackend
from .types import ConverseStep, NLUError

logger = logging.getLogger(__name__)


class WitBackend(NLUBackend):
    """
    Wit.ai backend.

    Uses the /converse endpoint: each call returns the next step of the
    turn (send a message, run an action, or stop). The action loop itself
    lives in ActionEngine.
    """

    def __init__(
        self,
        access_token: str,
        api_url: str = "https://api.wit.ai",
        api_version: str = "20160526",
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Wit backend.

        Args:
            access_token: Server access token of the Wit app
            api_url:      Base URL of the Wit API
            api_version:  Value of the v= query parameter
            timeout_s:    Per-request timeout
            client:       Optional shared httpx client (tests inject one)
        """
        if not access_token:
            raise NLUError("WIT_TOKEN not configured")

        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.api_version = api_version
        self.timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": f"application/vnd.wit.{self.api_version}+json",
            "Content-Type": "application/json",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def converse(
        self,
        session_id: str,
        text: Optional[str],
        context: Context,
    ) -> ConverseStep:
        params = {"session_id": session_id, "v": self.api_version}
        if text:
            params["q"] = text

        try:
            response = await self._get_client().post(
                f"{self.api_url}/converse",
                params=params,
                json=context,
                headers=self.headers,
            )
        except httpx.HTTPError as e:
            raise NLUError(f"Wit request failed: {e}") from e

        if response.is_error:
            logger.error(
                f"Wit API error: {response.status_code} - {response.text}",
                extra={"session_id": session_id, "status_code": response.status_code},
            )
            raise NLUError(f"Wit API returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise NLUError(f"Invalid Wit response: {e}") from e

        if "error" in data and not data.get("type"):
            raise NLUError(f"Wit error: {data['error']}")

        step = ConverseStep.from_json(data)
        logger.debug(f"Wit step for {session_id}: {step.type}")
        return step

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
