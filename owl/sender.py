"""Dispatch of a message to the provider chosen in its parameters."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from .errors import DispatchError, NoProviderSelected, OwlError
from .message import Message, Params
from .providers.base import EmailProvider, Provider
from .providers.console import ConsoleProvider
from .providers.relay import AWSSMTPProvider
from .providers.ses import SESProvider
from .providers.smtp import SMTPProvider

logger = logging.getLogger(__name__)


def default_providers() -> Dict[Provider, EmailProvider]:
    return {
        Provider.SMTP: SMTPProvider(),
        Provider.AWS_SMTP: AWSSMTPProvider(),
        Provider.AWS_SES: SESProvider(),
        Provider.CONSOLE: ConsoleProvider(),
    }


class Dispatcher:
    """Routes each send to exactly one provider and tags its failures."""

    def __init__(self, providers: Optional[Mapping[Provider, EmailProvider]] = None) -> None:
        self.providers: Dict[Provider, EmailProvider] = (
            dict(providers) if providers is not None else default_providers()
        )

    def select(self, selector: Provider | str) -> EmailProvider:
        provider = self.providers.get(selector)
        if provider is None:
            raise NoProviderSelected(selector)
        return provider

    def send(self, message: Message, params: Params) -> None:
        """Send ``message`` using ``params.provider``.

        Every failure is raised as :class:`DispatchError` whose ``cause`` is the
        provider's own error. Returns ``None`` on success.
        """
        try:
            provider = self.select(params.provider)
            logger.debug("Selected %s for provider %r", type(provider).__name__, params.provider)
            provider.send(message, params)
        except OwlError as exc:
            logger.error("Sending via provider %r failed: %s", params.provider, exc)
            raise DispatchError(exc) from exc


_dispatcher: Dispatcher | None = None


def get_dispatcher() -> Dispatcher:
    global _dispatcher

    if _dispatcher is None:
        _dispatcher = Dispatcher()
    return _dispatcher


def send(message: Message, params: Params) -> None:
    """Send ``message`` with the provider named in ``params``.

    ``message.to`` must contain at least one address.
    """
    get_dispatcher().send(message, params)
