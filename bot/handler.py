"""
Messenger event handling.

One listener per event category. The webhook hands every decoded event to
MessengerBot.handle_event, which:
  1. finds or creates the sender's session (non-echo messages only)
  2. classifies the event
  3. runs the category listener

Listeners never block: replies are scheduled on the sender, NLU turns on
the bridge. Nothing here raises to the webhook for delivery or NLU failures.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from bot.commands import CommandDispatcher
from bot.events import ClassifiedEvent, EventCategory, classify_event
from bot.sessions import SessionStore
from nlu.bridge import NLUBridge
from transport.messenger.schemas import Entry, MessagingEvent, MessengerWebhookPayload
from transport.messenger.sender import MessengerSender, MessengerSenderError

logger = logging.getLogger(__name__)

UNSUPPORTED_REPLY = {"text": "Sorry I can only process text messages for now."}

START_PAYLOAD = "Start"

# Log labels for keyword replies
COMMAND_LABELS = {
    "generic": "Generic message",
    "image": "Image message",
    "audio": "Audio message",
    "video": "Video message",
    "file": "File message",
    "button": "Button message",
    "receipt": "Receipt message",
    "quick": "Quick normal message",
    "quickImage": "Quick message with image",
    "quickLocation": "Quick message with location",
    "itinerary": "Airline Itinerary message",
    "checkin": "Airline Check-In message",
    "boardingpass": "Airline Boarding Pass message",
    "flightupdate": "Airline Flight update message",
}

Listener = Callable[[ClassifiedEvent, Optional[str]], None]


class MessengerBot:
    """Routes classified events to listeners."""

    def __init__(
        self,
        store: SessionStore,
        sender: MessengerSender,
        dispatcher: CommandDispatcher,
        bridge: NLUBridge,
    ):
        self.store = store
        self.sender = sender
        self.dispatcher = dispatcher
        self.bridge = bridge
        self._pending: set[asyncio.Task] = set()

        self._listeners: dict[EventCategory, Listener] = {
            EventCategory.MESSAGE: self.on_message,
            EventCategory.QUICK_REPLY: self.on_quick_reply,
            EventCategory.ECHO_MESSAGE: self.on_echo_message,
            EventCategory.AUTHENTICATION: self.on_authentication,
            EventCategory.DELIVERY: self.on_delivery,
            EventCategory.POSTBACK: self.on_postback,
            EventCategory.READ: self.on_read,
            EventCategory.ACCOUNT_LINKED: self.on_account_linked,
            EventCategory.ACCOUNT_UNLINKED: self.on_account_unlinked,
            EventCategory.IMAGE: self.on_attachment,
            EventCategory.AUDIO: self.on_attachment,
            EventCategory.VIDEO: self.on_attachment,
            EventCategory.FILE: self.on_attachment,
            EventCategory.LOCATION: self.on_attachment,
            EventCategory.ATTACHMENT: self.on_attachment,
            EventCategory.UNKNOWN: self.on_unknown,
        }
        missing = set(EventCategory) - set(self._listeners)
        if missing:
            raise RuntimeError(f"No listener for: {sorted(c.value for c in missing)}")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_payload(self, payload: MessengerWebhookPayload) -> int:
        """
        Handle every messaging event of a webhook payload.

        Returns:
            Number of events seen (0 for non-page payloads)
        """
        if payload.object != "page":
            logger.warning(f"Ignoring webhook for object: {payload.object}")
            return 0

        handled = 0
        for raw_entry in payload.entry:
            try:
                entry = Entry(**raw_entry)
            except (ValidationError, TypeError) as e:
                logger.error(
                    f"Webhook received an unknown entry: {json.dumps(raw_entry, default=str)}",
                    extra={"error": str(e)},
                )
                continue
            for raw_event in entry.messaging:
                self.handle_raw_event(raw_event)
                handled += 1
        return handled

    def handle_raw_event(self, raw_event: Any) -> list[ClassifiedEvent]:
        """Decode one raw event and handle it; undecodable events are unknown."""
        try:
            event = MessagingEvent(**raw_event)
        except (ValidationError, TypeError) as e:
            logger.debug(f"Event failed validation: {e}")
            unknown = ClassifiedEvent(EventCategory.UNKNOWN, None)
            self.on_unknown(unknown, None, raw_event)
            return [unknown]
        return self.handle_event(event)

    def handle_event(self, event: MessagingEvent) -> list[ClassifiedEvent]:
        """Find-or-create the session, classify, and run the listeners."""
        session_id = None
        if event.message is not None and not event.message.is_echo:
            session_id = self.store.find_or_create(event.sender.id)

        classified = classify_event(event)
        for item in classified:
            self._listeners[item.category](item, session_id)
        return classified

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def on_message(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        message = event.message
        sender_id = event.sender.id
        text = message.text

        logger.info(
            f"{message.seq}-{message.mid}-{event.timestamp}: Received message from user "
            f"{sender_id} and page {event.recipient.id} with text {text}"
        )

        # Free text always goes through the NLU engine
        self.bridge.submit(session_id, text)

        keyword = self.dispatcher.resolve(text)
        payload = self.dispatcher.dispatch(text)
        if payload is None:
            return

        label = COMMAND_LABELS.get(keyword, keyword)

        def on_sent(error, body):
            if error is not None:
                logger.error(f"{label} failed: {error}")
            else:
                logger.info(f"{label} sent successfully")

        self.sender.send(sender_id, payload, on_sent)

    def on_quick_reply(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        logger.info(
            f"Quick reply for user {event.sender.id} and page {event.recipient.id} "
            f"with payload {event.message.quick_reply.payload}"
        )

    def on_attachment(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        sender_id = item.event.sender.id

        def on_sent(error, body):
            if error is not None:
                logger.error(f"Attachment received. unsupported behaviour: {error}")

        self.sender.send(sender_id, dict(UNSUPPORTED_REPLY), on_sent)
        logger.info(f"{item.category.value.capitalize()} received from user {sender_id}")

    def on_echo_message(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        logger.info("Echo message received from a user")

    # ------------------------------------------------------------------
    # Platform notifications
    # ------------------------------------------------------------------

    def on_authentication(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        logger.info(
            f"Authentication received for user {event.sender.id} and page {event.recipient.id} "
            f"with pass-through param {event.optin.ref} at {event.timestamp}"
        )

    def on_delivery(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        delivery = event.delivery
        for mid in delivery.mids or []:
            logger.info(
                f"Received delivery confirmation from user {event.sender.id} and page "
                f"{event.recipient.id} with mid {mid} and sequence #{delivery.seq}"
            )
        logger.info(f"All messages before {delivery.watermark} were delivered")

    def on_read(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        logger.info(
            f"{event.read.seq}-{event.timestamp}: All messages were read from user "
            f"{event.sender.id} and page {event.recipient.id} before {event.read.watermark}"
        )

    def on_account_linked(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        logger.info(
            f"{event.timestamp}: The user {event.sender.id} and page {event.recipient.id} "
            f"linked their account with authorization code {event.account_linking.authorization_code}"
        )

    def on_account_unlinked(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        logger.info(
            f"{event.timestamp}: The user {event.sender.id} and page {event.recipient.id} "
            f"unlinked their account"
        )

    def on_unknown(
        self,
        item: ClassifiedEvent,
        session_id: Optional[str],
        raw_event: Optional[dict] = None,
    ) -> None:
        if raw_event is None and item.event is not None:
            raw_event = item.event.model_dump(exclude_none=True)
        logger.error(f"Webhook received an unknown messaging event: {json.dumps(raw_event, default=str)}")

    # ------------------------------------------------------------------
    # Postbacks
    # ------------------------------------------------------------------

    def on_postback(self, item: ClassifiedEvent, session_id: Optional[str]) -> None:
        event = item.event
        payload = event.postback.payload
        logger.info(
            f"Received postback for user {event.sender.id} and page {event.recipient.id} "
            f"with payload {payload} at {event.timestamp}"
        )

        if payload == START_PAYLOAD:
            self._schedule(self.welcome(event.sender.id))
            logger.info(f"Postback {payload} caught successfully")
        elif payload in ("Help", "Buy"):
            logger.info(f"Postback {payload} caught successfully")
        else:
            logger.info("Postback failed to catch")

    async def welcome(self, user_id: str) -> bool:
        """
        Greet a user who pressed Get Started.

        Returns:
            True if every welcome message was accepted
        """
        try:
            profile = await self.sender.get_user_profile(user_id)
        except MessengerSenderError as e:
            logger.error(f"User Profile call failed for {user_id}: {e}")
            return False

        logger.info(
            f"User Profile call was successful: {profile.first_name} {profile.last_name} "
            f"with profile pic ({profile.profile_pic}), gender: {profile.gender}, "
            f"locale: {profile.locale} and timezone: {profile.timezone}"
        )

        messages = [
            f"Welcome {profile.first_name or ''}! Jincana is a bot to try out what the "
            f"Messenger Platform can do.\nType any of the following commands:",
            "\n".join(f"- {keyword}" for keyword in self.dispatcher.keywords),
            'You can also ask me about the weather, for example "weather in Madrid".',
        ]
        # In order: each message waits for the previous one
        for text in messages:
            try:
                await self.sender.send_api_message(user_id, {"text": text})
            except MessengerSenderError as e:
                logger.error(f"Welcome message to {user_id} failed: {e}")
                return False
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _schedule(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for scheduled work: postback flows, NLU turns, deliveries."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self.bridge.drain()
        await self.sender.drain()

    async def aclose(self) -> None:
        await self.drain()
        await self.bridge.aclose()
        await self.sender.aclose()
