"""Placeholder for the AWS SMTP relay."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ProviderNotImplemented
from .base import EmailProvider

if TYPE_CHECKING:  # pragma: no cover
    from ..message import Message, Params


class AWSSMTPProvider(EmailProvider):
    def send(self, message: "Message", params: "Params") -> None:
        raise ProviderNotImplemented("AWS SMTP not implemented yet.")
