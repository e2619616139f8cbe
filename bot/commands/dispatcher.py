"""
Keyword command dispatcher.

Maps the first word of a message to a pre-built reply from the catalog.
Unmatched keywords produce no reply at all.
"""

import copy
import logging
from typing import Mapping, Optional

from bot.commands.catalog import KEYWORDS, ReplyPayload

logger = logging.getLogger(__name__)


def first_token(text: Optional[str]) -> str:
    """First whitespace-delimited token, lowercased ('' for blank text)."""
    parts = (text or "").split(maxsplit=1)
    return parts[0].lower() if parts else ""


class CommandDispatcher:
    """
    Keyword -> ReplyPayload lookup.

    The table is matched case-insensitively, so camel-cased keywords
    such as quickImage stay reachable after the token is lowercased.
    """

    def __init__(self, table: Optional[Mapping[str, ReplyPayload]] = None):
        table = KEYWORDS if table is None else table
        self._keywords = {key.lower(): key for key in table}
        self._table = table

    @property
    def keywords(self) -> list[str]:
        return list(self._table)

    def resolve(self, text: Optional[str]) -> Optional[str]:
        """Catalog keyword matched by the message, or None."""
        return self._keywords.get(first_token(text))

    def dispatch(self, text: Optional[str]) -> Optional[ReplyPayload]:
        """
        Reply for the message's leading keyword.

        Returns:
            A fresh copy of the catalog payload, or None when nothing matches
        """
        keyword = self.resolve(text)
        if keyword is None:
            logger.debug(f"No command for: {first_token(text)!r}")
            return None
        return copy.deepcopy(self._table[keyword])
