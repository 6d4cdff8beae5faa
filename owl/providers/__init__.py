"""Email delivery providers."""

from .base import EmailProvider, Provider
from .console import ConsoleProvider
from .relay import AWSSMTPProvider
from .ses import SESProvider
from .smtp import SMTPProvider

__all__ = [
    "AWSSMTPProvider",
    "ConsoleProvider",
    "EmailProvider",
    "Provider",
    "SESProvider",
    "SMTPProvider",
]
