"""Amazon SES implementation of the email provider."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import config
from ..errors import DelegateError, Stage
from .base import EmailProvider

if TYPE_CHECKING:  # pragma: no cover
    from ..message import Message, Params

logger = logging.getLogger(__name__)

_CHARSET = "UTF-8"


@dataclass(frozen=True)
class SESConfig:
    region: str
    endpoint: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"SESConfig(region={self.region!r}, endpoint={self.endpoint!r}, "
            f"access_key={self.access_key!r}, secret_key={'***' if self.secret_key else None})"
        )


def ses_config_from_env() -> SESConfig:
    """Build the configuration from ``AWS_*`` environment variables.

    Keys that are not set are left to boto3's default credential chain.
    """
    return SESConfig(
        region=os.getenv("AWS_REGION", config.SES_REGION),
        endpoint=os.getenv("AWS_SES_ENDPOINT") or None,
        access_key=os.getenv("AWS_ACCESS_KEY_ID") or None,
        secret_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
    )


def resolve_ses_config(params: "Params") -> SESConfig:
    """Use the credentials in ``params`` when both are given, else the environment."""
    if not params.id or not params.password:
        logger.debug("No explicit SES credentials, using the environment")
        return ses_config_from_env()
    return SESConfig(
        region=os.getenv("AWS_REGION", config.SES_REGION),
        endpoint=params.server or None,
        access_key=params.id,
        secret_key=params.password,
    )


def _default_client(cfg: SESConfig) -> Any:
    return boto3.client(
        "ses",
        endpoint_url=cfg.endpoint,
        aws_access_key_id=cfg.access_key,
        aws_secret_access_key=cfg.secret_key,
        region_name=cfg.region,
    )


class SESProvider(EmailProvider):
    """Email provider backed by the SES ``SendEmail`` API."""

    def __init__(self, client_factory: Callable[[SESConfig], Any] | None = None) -> None:
        self._client_factory = client_factory or _default_client

    def send(self, message: "Message", params: "Params") -> None:
        self.send_message(message, params)

    def send_message(self, message: "Message", params: "Params") -> str:
        """Send ``message`` and return the id SES assigned to it."""
        cfg = resolve_ses_config(params)
        body: dict[str, Any] = {"Text": {"Data": message.body, "Charset": _CHARSET}}
        if message.html:
            body["Html"] = {"Data": message.body, "Charset": _CHARSET}

        try:
            client = self._client_factory(cfg)
            response = client.send_email(
                Source=message.from_,
                Destination={"ToAddresses": [message.recipient]},
                Message={
                    "Subject": {"Data": message.subject, "Charset": _CHARSET},
                    "Body": body,
                },
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("SES refused message to %s: %s", message.recipient, exc)
            raise DelegateError(Stage.SES_SEND, exc) from exc

        message_id = response.get("MessageId", "")
        logger.info("Sent message to %s via SES (%s)", message.recipient, message_id)
        return message_id
