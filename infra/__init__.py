"""
Infrastructure module exports.

Bootstrap for the bot and its service backends.
"""

from .bootstrap import build_bot, configure_page, create_nlu_backend, create_sender

__all__ = [
    "build_bot",
    "configure_page",
    "create_nlu_backend",
    "create_sender",
]
