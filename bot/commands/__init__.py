"""Keyword commands and the static reply catalog."""

from bot.commands.catalog import KEYWORDS, ReplyPayload, get_menu
from bot.commands.dispatcher import CommandDispatcher, first_token

__all__ = [
    "CommandDispatcher",
    "first_token",
    "KEYWORDS",
    "ReplyPayload",
    "get_menu",
]
