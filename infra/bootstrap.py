"""
Bot initialization and bootstrap.

Builds every component from configuration and configures the page
profile at startup.
"""

import logging
from typing import Optional

from bot.commands import CommandDispatcher, get_menu
from bot.handler import START_PAYLOAD, MessengerBot
from bot.sessions import InMemorySessionStore, SessionStore
from config import Config
from nlu import NLUBackend, NLUBridge, StubNLUBackend, WitBackend
from transport.messenger.sender import MessengerSender, MessengerSenderError

logger = logging.getLogger(__name__)


def create_nlu_backend(config: Config) -> NLUBackend:
    """Create the NLU backend selected by NLU_BACKEND."""
    if config.nlu_backend == "stub":
        return StubNLUBackend()
    if config.nlu_backend != "wit":
        logger.warning(f"Unknown NLU_BACKEND {config.nlu_backend!r}, using wit")
    return WitBackend(
        access_token=config.wit_token,
        api_url=config.wit_api_url,
        api_version=config.wit_api_version,
        timeout_s=config.http_timeout_s,
    )


def create_sender(config: Config) -> MessengerSender:
    return MessengerSender(
        page_access_token=config.page_access_token,
        api_url=config.graph_api_url,
        api_version=config.graph_api_version,
        notification_type=config.notification_type,
        timeout_s=config.http_timeout_s,
    )


def build_bot(
    config: Config,
    store: Optional[SessionStore] = None,
    sender: Optional[MessengerSender] = None,
    backend: Optional[NLUBackend] = None,
) -> MessengerBot:
    """
    Wire store, sender, dispatcher and NLU bridge into a MessengerBot.

    Args:
        config: Validated configuration
        store, sender, backend: Optional overrides (tests)
    """
    store = store if store is not None else InMemorySessionStore()
    sender = sender or create_sender(config)
    bridge = NLUBridge(store, sender, backend or create_nlu_backend(config))
    bot = MessengerBot(store, sender, CommandDispatcher(), bridge)
    logger.info(f"Bot ready (nlu={config.nlu_backend}, graph={config.graph_api_version})")
    return bot


async def configure_page(sender: MessengerSender) -> None:
    """
    Set the persistent menu and Get Started button, and drop the greeting.

    Best effort: failures are logged and startup goes on.
    """
    steps = (
        ("persistent menu", lambda: sender.set_persistent_menu(get_menu())),
        ("get started button", lambda: sender.set_get_started_button(START_PAYLOAD)),
        ("greeting text removal", sender.delete_greeting_text),
    )
    for name, call in steps:
        try:
            result = await call()
            logger.info(f"Page profile {name}: {result}")
        except MessengerSenderError as e:
            logger.error(f"Page profile {name} failed: {e}")
