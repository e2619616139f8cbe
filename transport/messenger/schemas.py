"""
Messenger Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Decodes the Messenger Platform callback once at the boundary.

ref: https://developers.facebook.com/docs/messenger-platform/webhooks
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# ============================================================================
# MESSAGING EVENT PARTS (INPUT)
# ============================================================================

class Participant(BaseModel):
    """Sender or recipient of a messaging event."""
    id: str


class QuickReply(BaseModel):
    """Quick reply tapped by the user."""
    payload: str


class Attachment(BaseModel):
    """Attachment on an inbound message."""
    type: str  # image, audio, video, file, location, fallback, ...
    payload: Optional[dict[str, Any]] = None


class Message(BaseModel):
    """Inbound message (or echo of a message sent by the page)."""
    mid: Optional[str] = None
    seq: Optional[int] = None
    text: Optional[str] = None
    is_echo: bool = False
    app_id: Optional[int] = None
    quick_reply: Optional[QuickReply] = None
    attachments: Optional[list[Attachment]] = None


class Optin(BaseModel):
    """Send-to-Messenger plugin authentication."""
    ref: Optional[str] = None


class Delivery(BaseModel):
    """Delivery confirmation."""
    mids: Optional[list[str]] = None
    watermark: int
    seq: Optional[int] = None


class Postback(BaseModel):
    """Postback button, Get Started button or persistent menu item."""
    payload: Optional[str] = None
    title: Optional[str] = None


class Read(BaseModel):
    """Message read receipt."""
    watermark: int
    seq: Optional[int] = None


class AccountLinking(BaseModel):
    """Account linking status change."""
    status: str  # linked | unlinked
    authorization_code: Optional[str] = None


class MessagingEvent(BaseModel):
    """
    A single entry of entry[].messaging[].

    Exactly one of the optional parts is expected; the classifier decides
    which one wins when the platform sends more.
    """
    sender: Participant
    recipient: Participant
    timestamp: Optional[int] = None

    message: Optional[Message] = None
    optin: Optional[Optin] = None
    delivery: Optional[Delivery] = None
    postback: Optional[Postback] = None
    read: Optional[Read] = None
    account_linking: Optional[AccountLinking] = None

    class Config:
        extra = "allow"  # Messenger may add fields


# ============================================================================
# MESSENGER WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================

class Entry(BaseModel):
    """One page entry. Events are kept raw and decoded one by one."""
    id: Optional[str] = None
    time: Optional[int] = None
    messaging: list[Any] = Field(default_factory=list)

    class Config:
        extra = "allow"


class MessengerWebhookPayload(BaseModel):
    """Full Messenger webhook payload."""

    object: Optional[str] = Field(None, description="'page' for Messenger callbacks")
    # Raw entries, decoded one by one by the bot
    entry: list[Any] = Field(default_factory=list, description="Webhook entries")

    class Config:
        extra = "allow"


# ============================================================================
# SEND API (OUTPUT)
# ============================================================================

class SendApiResponse(BaseModel):
    """Response from the Send API."""
    recipient_id: Optional[str] = None
    message_id: Optional[str] = None


class UserProfile(BaseModel):
    """User profile fields returned by the Graph API."""
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_pic: Optional[str] = None
    locale: Optional[str] = None
    timezone: Optional[float] = None
    gender: Optional[str] = None

    class Config:
        extra = "allow"
