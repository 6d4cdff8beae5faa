"""Value objects describing what to send and how to send it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .providers.base import SMTP_FAMILY, Provider


def _as_tuple(values: Sequence[str] | None) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class Message:
    """A single email.

    ``to`` must hold at least one address before the message is sent; only the
    first address is used as the delivery recipient. ``cc`` and ``bcc`` are
    carried along but never transmitted. ``error`` keeps a diagnostic from a
    previous attempt and has no effect on delivery.
    """

    from_: str = ""
    to: tuple[str, ...] = field(default_factory=tuple)
    cc: tuple[str, ...] = field(default_factory=tuple)
    bcc: tuple[str, ...] = field(default_factory=tuple)
    subject: str = ""
    body: str = ""
    html: bool = False
    error: str | None = None

    def __post_init__(self) -> None:
        for name in ("to", "cc", "bcc"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    @property
    def recipient(self) -> str:
        """First address of ``to``; raises ``IndexError`` when ``to`` is empty."""
        return self.to[0]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        to = _as_tuple(data.get("to"))
        if not to:
            raise ValueError("Message requires at least one 'to' address.")
        error = data.get("error")
        return cls(
            from_=data.get("from") or "",
            to=to,
            cc=_as_tuple(data.get("cc")),
            bcc=_as_tuple(data.get("bcc")),
            subject=data.get("subject") or "",
            body=data.get("body") or "",
            html=bool(data.get("html", False)),
            error=str(error) if error else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_,
            "to": list(self.to),
            "cc": list(self.cc),
            "bcc": list(self.bcc),
            "subject": self.subject,
            "body": self.body,
            "html": self.html,
            "error": self.error,
        }


@dataclass(frozen=True)
class Params:
    """Delivery settings for one send.

    ``provider`` is a :class:`Provider` or its string tag; the empty string
    selects direct SMTP. ``id`` and ``password`` are the username/password or
    access key pair. ``server`` is the ``host:port`` of the SMTP endpoint; the
    SES provider reads it as an optional endpoint URL.
    """

    provider: Provider | str = Provider.SMTP
    id: str = ""
    password: str = ""
    server: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Params":
        provider = data.get("provider") or ""
        server = data.get("server") or ""
        if provider in SMTP_FAMILY and not server:
            raise ValueError(f"Provider {provider!r} requires a 'server' (host:port).")
        return cls(
            provider=provider,
            id=data.get("id") or "",
            password=data.get("password") or "",
            server=server,
        )

    def to_dict(self) -> dict[str, Any]:
        provider = self.provider.value if isinstance(self.provider, Provider) else self.provider
        return {
            "provider": provider,
            "id": self.id,
            "password": self.password,
            "server": self.server,
        }

    def __repr__(self) -> str:
        return (
            f"Params(provider={self.provider!r}, id={self.id!r}, "
            f"password='***', server={self.server!r})"
        )
