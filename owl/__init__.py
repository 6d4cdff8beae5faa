"""Send email through interchangeable delivery providers."""

from .errors import (
    AuthError,
    DataError,
    DelegateError,
    DispatchError,
    EnvelopeError,
    NoProviderSelected,
    OwlError,
    ProtocolClientError,
    ProviderNotImplemented,
    Stage,
    StageError,
    TransportError,
)
from .message import Message, Params
from .providers.base import Provider
from .sender import Dispatcher, send

__all__ = [
    "AuthError",
    "DataError",
    "DelegateError",
    "DispatchError",
    "Dispatcher",
    "EnvelopeError",
    "Message",
    "NoProviderSelected",
    "OwlError",
    "Params",
    "ProtocolClientError",
    "Provider",
    "ProviderNotImplemented",
    "Stage",
    "StageError",
    "TransportError",
    "send",
]
