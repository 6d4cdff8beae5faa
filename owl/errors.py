"""Errors raised while delivering a message."""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """Named points of a send where a failure can be attributed."""

    DISPATCH = "dispatch"
    TLS_DIAL = "tls.Dial"
    NEW_CLIENT = "smtp.NewClient"
    AUTH = "c.Auth"
    MAIL = "c.Mail"
    RCPT = "c.Rcpt"
    DATA = "c.Data"
    WRITE = "w.Write"
    CLOSE = "w.Close"
    SES_SEND = "ses.SendEmail"

    def __str__(self) -> str:
        return self.value


class OwlError(Exception):
    """Base class for every error raised by owl."""


class NoProviderSelected(OwlError):
    """Raised when ``Params.provider`` does not name a known provider."""

    def __init__(self, provider: object) -> None:
        self.provider = provider
        super().__init__(f"No email provider was provided (got {provider!r}).")


class ProviderNotImplemented(OwlError):
    """Raised by providers that exist only as placeholders."""


class StageError(OwlError):
    """An error tagged with the stage it happened in and its underlying cause."""

    def __init__(self, stage: Stage, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage.value} | {cause}")


class TransportError(StageError):
    """The TLS connection to the server could not be established."""


class ProtocolClientError(StageError):
    """The SMTP session could not be started over the transport."""


class AuthError(StageError):
    """The server rejected the credentials or does not offer AUTH."""


class EnvelopeError(StageError):
    """Sender or recipient rejected by the server."""


class DataError(StageError):
    """Opening, writing or closing the message data failed."""


class DelegateError(StageError):
    """Failure reported by an external email API."""


class DispatchError(StageError):
    """Wraps any provider failure as it leaves the dispatcher."""

    def __init__(self, cause: OwlError) -> None:
        super().__init__(Stage.DISPATCH, cause)
