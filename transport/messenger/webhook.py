"""
Messenger Webhook Receiver

FastAPI router for the Messenger Platform callbacks.
Verifies, decodes and hands events to the bot; replies are never awaited.
"""

import json
import logging
from typing import TYPE_CHECKING, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from .schemas import MessengerWebhookPayload
from .security import verify_signature, verify_webhook_challenge

if TYPE_CHECKING:
    from bot.handler import MessengerBot
    from config import Config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["Messenger Transport"])


def get_bot(request: Request) -> "MessengerBot":
    """Bot built at startup (or injected by tests)."""
    return request.app.state.bot


def get_settings(request: Request) -> "Config":
    return request.app.state.config


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("", response_class=PlainTextResponse)
async def messenger_webhook_challenge(
    request: Request,
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        The challenge string (plain text)

    Raises:
        HTTPException(403): Invalid token
        HTTPException(400): Invalid mode
    """
    config = get_settings(request)
    challenge = verify_webhook_challenge(
        hub_mode,
        hub_challenge,
        hub_verify_token,
        expected_token=config.app_verify_token,
    )
    logger.info("Webhook verified")
    return challenge


# ============================================================================
# WEBHOOK RECEIVER (Event processing)
# ============================================================================

@router.post("")
async def messenger_webhook_receiver(request: Request) -> dict[str, str]:
    """
    Receive Messenger callbacks.

    Flow:
    1. Verify signature (401 if missing, 403 if invalid)
    2. Decode payload (422 only if the body is not JSON)
    3. Hand each messaging event to the bot
    4. Acknowledge with 200, whatever happens downstream

    Returns:
        {"status": "ok"}
    """
    body = await request.body()

    # Security boundary
    try:
        await verify_signature(request, body, get_settings(request).app_secret)
    except HTTPException as e:
        logger.warning(f"Signature verification failed: {e.detail}")
        raise
    logger.debug("Signature verified for Messenger webhook")

    try:
        payload = MessengerWebhookPayload(**json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid JSON payload"
        )
    except (ValidationError, TypeError) as e:
        # Valid JSON is always acknowledged
        logger.warning(f"Dropping unrecognized webhook payload: {e}")
        return {"status": "ok"}

    try:
        handled = get_bot(request).handle_payload(payload)
        logger.debug(f"Handled {handled} messaging events")
    except Exception as e:
        # Meta retries non-200 answers, so errors are only logged
        logger.error(f"Error handling webhook payload: {e}", exc_info=True)

    return {"status": "ok"}
