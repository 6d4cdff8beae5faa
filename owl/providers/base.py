"""Base interfaces for email delivery providers."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from ..message import Message, Params


class Provider(str, Enum):
    """Selector for the delivery backend. The empty tag means direct SMTP."""

    SMTP = ""
    AWS_SMTP = "aws-smtp"
    AWS_SES = "aws-ses"
    CONSOLE = "console"


SMTP_FAMILY = frozenset({Provider.SMTP, Provider.AWS_SMTP})


class EmailProvider(Protocol):
    """Protocol for providers used by the dispatcher."""

    def send(self, message: "Message", params: "Params") -> None:
        """Deliver ``message`` or raise an :class:`~owl.errors.OwlError`."""
