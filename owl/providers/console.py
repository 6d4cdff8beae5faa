"""Console provider for local debugging."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Optional, TextIO

from .base import EmailProvider

if TYPE_CHECKING:  # pragma: no cover
    from ..message import Message, Params

logger = logging.getLogger(__name__)


class ConsoleProvider(EmailProvider):
    """Prints messages instead of delivering them."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    def send(self, message: "Message", params: "Params") -> None:
        stream = self.stream or sys.stdout
        print(f"From: {message.from_}", file=stream)
        print(f"To: {message.recipient}", file=stream)
        print(f"Subject: {message.subject}", file=stream)
        print(message.body, file=stream)
        logger.debug("Printed message to %s instead of sending it", message.recipient)
