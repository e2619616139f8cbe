"""
Messenger Outbound Sender

Delivers payloads through the Graph Send API.
No formatting intelligence. No retries. No logic.

send() is fire-and-forget: it schedules delivery on the running event loop
and returns at once. The outcome is reported to an optional callback, which
callers use for logging only.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from .schemas import SendApiResponse, UserProfile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_FIELDS = ("first_name", "last_name", "profile_pic", "locale", "timezone", "gender")

# callback(error, body): exactly one of the two is set
SendCallback = Callable[[Optional[Exception], Optional[dict]], None]


class MessengerSenderError(Exception):
    """Failed to talk to the Graph API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MessengerSender:
    """
    Graph API client for a single page.

    Pending deliveries are held until they finish so they are not
    garbage collected mid-flight; drain() waits for all of them.
    """

    def __init__(
        self,
        page_access_token: str,
        api_url: str = "https://graph.facebook.com",
        api_version: str = "v19.0",
        notification_type: str = "REGULAR",
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not page_access_token:
            raise MessengerSenderError("PAGE_ACCESS_TOKEN not configured")

        self.page_access_token = page_access_token
        self.base_url = f"{api_url.rstrip('/')}/{api_version}"
        self.notification_type = notification_type
        self.timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        query = {"access_token": self.page_access_token, **(params or {})}

        try:
            response = await self._get_client().request(method, url, json=json, params=query)
        except httpx.HTTPError as e:
            raise MessengerSenderError(f"HTTP request failed: {e}") from e

        if response.is_error:
            raise MessengerSenderError(
                f"Graph API returned {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json() if response.content else {}
        except ValueError as e:
            raise MessengerSenderError(f"Invalid Graph API response: {e}") from e

    # ------------------------------------------------------------------
    # Send API
    # ------------------------------------------------------------------

    async def send_api_message(self, recipient_id: str, message: dict[str, Any]) -> SendApiResponse:
        """
        Send one message and wait for the Send API to accept it.

        Raises:
            MessengerSenderError: transport failure or non-2xx status
        """
        payload = {
            "recipient": {"id": recipient_id},
            "message": message,
            "messaging_type": "RESPONSE",
            "notification_type": self.notification_type,
        }
        result = await self._request("POST", "/me/messages", json=payload)
        logger.debug(
            f"Message sent to {recipient_id}",
            extra={"recipient_id": recipient_id, "message_id": result.get("message_id")},
        )
        return SendApiResponse(**result)

    def send(
        self,
        recipient_id: str,
        message: dict[str, Any],
        callback: Optional[SendCallback] = None,
    ) -> asyncio.Task:
        """
        Schedule a message and return immediately.

        Must be called with a running event loop.

        Returns:
            The delivery task (callers normally ignore it)
        """
        task = asyncio.create_task(self._deliver(recipient_id, message, callback))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(
        self,
        recipient_id: str,
        message: dict[str, Any],
        callback: Optional[SendCallback],
    ) -> None:
        error: Optional[Exception] = None
        body: Optional[dict] = None
        try:
            body = (await self.send_api_message(recipient_id, message)).model_dump()
        except MessengerSenderError as e:
            error = e
            logger.error(
                f"Error while sending to {recipient_id}: {e}",
                extra={"recipient_id": recipient_id, "status_code": e.status_code, "error_body": e.body},
            )

        if callback is None:
            return
        try:
            callback(error, body)
        except Exception:
            logger.error(f"Send callback failed for {recipient_id}", exc_info=True)

    async def drain(self) -> None:
        """Wait for every pending delivery, including ones scheduled meanwhile."""
        if self.pending:
            logger.debug(f"Waiting for {self.pending} pending deliveries")
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # User profile
    # ------------------------------------------------------------------

    async def get_user_profile(
        self,
        user_id: str,
        fields: tuple[str, ...] = DEFAULT_PROFILE_FIELDS,
    ) -> UserProfile:
        """Fetch public profile fields for a user."""
        result = await self._request("GET", f"/{user_id}", params={"fields": ",".join(fields)})
        return UserProfile(**result)

    # ------------------------------------------------------------------
    # Page profile (persistent menu, get started, greeting)
    # ------------------------------------------------------------------

    async def set_persistent_menu(self, menu: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._request("POST", "/me/messenger_profile", json={"persistent_menu": menu})

    async def set_get_started_button(self, payload: str) -> dict[str, Any]:
        return await self._request("POST", "/me/messenger_profile", json={"get_started": {"payload": payload}})

    async def delete_greeting_text(self) -> dict[str, Any]:
        return await self._request("DELETE", "/me/messenger_profile", json={"fields": ["greeting"]})

    async def aclose(self) -> None:
        """Drain pending deliveries and close the HTTP client if we own it."""
        await self.drain()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
