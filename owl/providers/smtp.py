"""SMTP implementation of the email provider."""

from __future__ import annotations

import logging
import smtplib
import socket
import ssl
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Protocol

from .. import config
from ..errors import (
    AuthError,
    DataError,
    EnvelopeError,
    ProtocolClientError,
    Stage,
    StageError,
    TransportError,
)
from .base import EmailProvider

if TYPE_CHECKING:  # pragma: no cover
    from ..message import Message, Params

logger = logging.getLogger(__name__)

CRLF = b"\r\n"

# smtplib encodes commands as ASCII, so non-ASCII addresses fail with UnicodeEncodeError.
_SESSION_ERRORS = (smtplib.SMTPException, OSError, UnicodeError)
_DIAL_ERRORS = (OSError, ValueError)


def build_payload(message: "Message") -> str:
    """Render the headers and body that go out during the DATA phase."""
    headers = (
        ("From", message.from_),
        ("To", message.recipient),
        ("Subject", message.subject),
    )
    rendered = "".join(f"{name}: {value}\r\n" for name, value in headers)
    return rendered + "\r\n" + message.body


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into its parts.

    Raises ``ValueError`` when the port is missing or the address is ambiguous.
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {address!r}")
        host, rest = address[1:end], address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"missing port in address {address!r}")
        port = rest[1:]
        if "[" in host or "]" in port or "[" in port:
            raise ValueError(f"unexpected bracket in address {address!r}")
        return host, port

    colon = address.rfind(":")
    if colon < 0:
        raise ValueError(f"missing port in address {address!r}")
    host, port = address[:colon], address[colon + 1 :]
    if ":" in host:
        raise ValueError(f"too many colons in address {address!r}")
    if "[" in host or "]" in host:
        raise ValueError(f"unexpected bracket in address {address!r}")
    return host, port


def extract_host(server: str) -> str:
    """Return the host of ``server``, or an empty string if it cannot be parsed."""
    try:
        host, _ = split_host_port(server)
    except ValueError as exc:
        logger.debug("Could not extract host from %r: %s", server, exc)
        return ""
    return host


def dial_tls(server: str, host: str, timeout: Optional[float] = None) -> ssl.SSLSocket:
    """Open an implicit TLS connection to ``server``.

    Certificates are not verified; ``host`` is only used for SNI.
    """
    address_host, port = split_host_port(server)
    port_number = int(port) if port.isdigit() else socket.getservbyname(port, "tcp")

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    sock = socket.create_connection((address_host, port_number), timeout=timeout)
    try:
        return context.wrap_socket(sock, server_hostname=host or None)
    except OSError:
        sock.close()
        raise


class DataWriter:
    """Streams the payload of an open DATA command.

    Each ``write`` is expected to start on a line boundary.
    """

    def __init__(self, session: smtplib.SMTP) -> None:
        self._session = session
        self._tail = CRLF

    def write(self, payload: str) -> int:
        data = smtplib.quotedata(payload).encode("utf-8")
        if data:
            self._session.send(data)
            self._tail = data[-2:]
        return len(payload)

    def close(self) -> None:
        terminator = b"." + CRLF
        if self._tail != CRLF:
            terminator = CRLF + terminator
        self._session.send(terminator)
        code, resp = self._session.getreply()
        if code != 250:
            raise smtplib.SMTPDataError(code, resp)


class Session(Protocol):
    """Command-level view of an SMTP session used by :class:`SMTPProvider`."""

    def open(self) -> None: ...

    def authenticate(self, username: str, password: str) -> None: ...

    def mail_from(self, sender: str) -> None: ...

    def rcpt_to(self, recipient: str) -> None: ...

    def open_data(self) -> DataWriter: ...

    def quit(self) -> object: ...

    def close(self) -> None: ...


class SMTPSession(smtplib.SMTP):
    """``smtplib.SMTP`` running over a socket that is already connected."""

    def __init__(self, conn: socket.socket, host: str) -> None:
        self._conn = conn
        self.server_name = host
        super().__init__(local_hostname="localhost")

    def _get_socket(self, host, port, timeout):  # type: ignore[override]
        return self._conn

    def open(self) -> None:
        """Read the server greeting."""
        code, msg = self.connect(self.server_name)
        if code != 220:
            self.close()
            raise smtplib.SMTPConnectError(code, msg)

    def authenticate(self, username: str, password: str) -> None:
        self.ehlo_or_helo_if_needed()
        if not self.has_extn("auth"):
            raise smtplib.SMTPNotSupportedError("SMTP AUTH extension not supported by server.")
        self.user, self.password = username, password
        self.auth("PLAIN", self.auth_plain)

    def mail_from(self, sender: str) -> None:
        code, resp = self.mail(sender)
        if code != 250:
            raise smtplib.SMTPSenderRefused(code, resp, sender)

    def rcpt_to(self, recipient: str) -> None:
        code, resp = self.rcpt(recipient)
        if code not in (250, 251):
            raise smtplib.SMTPRecipientsRefused({recipient: (code, resp)})

    def open_data(self) -> DataWriter:
        self.putcmd("data")
        code, resp = self.getreply()
        if code != 354:
            raise smtplib.SMTPDataError(code, resp)
        return DataWriter(self)


Dialer = Callable[[str, str, Optional[float]], socket.socket]
SessionFactory = Callable[[socket.socket, str], Session]


@contextmanager
def _stage(
    error_cls: type[StageError], stage: Stage, errors: tuple[type[BaseException], ...] = _SESSION_ERRORS
) -> Iterator[None]:
    try:
        yield
    except errors as exc:
        raise error_cls(stage, exc) from exc


class SMTPProvider(EmailProvider):
    """Email provider that sends one message per connection over implicit TLS."""

    def __init__(
        self,
        *,
        timeout: Optional[float] = config.SMTP_TIMEOUT,
        dialer: Dialer | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.timeout = timeout
        self._dial = dialer or dial_tls
        self._new_session = session_factory or SMTPSession

    def send(self, message: "Message", params: "Params") -> None:
        payload = build_payload(message)
        host = extract_host(params.server)

        logger.info("Connecting to %s as %s", params.server, params.id)
        with _stage(TransportError, Stage.TLS_DIAL, _DIAL_ERRORS):
            conn = self._dial(params.server, host, self.timeout)

        try:
            with _stage(ProtocolClientError, Stage.NEW_CLIENT):
                session = self._new_session(conn, host)
                session.open()
        except BaseException:
            conn.close()
            raise

        try:
            self._transact(session, message, params, payload)
        except BaseException as exc:
            logger.error("Failed to send message to %s: %s", message.recipient, exc)
            session.close()
            raise

        self._quit(session)
        logger.info("Sent message to %s", message.recipient)

    def _transact(
        self, session: Session, message: "Message", params: "Params", payload: str
    ) -> None:
        with _stage(AuthError, Stage.AUTH):
            session.authenticate(params.id, params.password)

        with _stage(EnvelopeError, Stage.MAIL):
            session.mail_from(message.from_)
        with _stage(EnvelopeError, Stage.RCPT):
            session.rcpt_to(message.recipient)

        with _stage(DataError, Stage.DATA):
            writer = session.open_data()
        with _stage(DataError, Stage.WRITE):
            writer.write(payload)
        with _stage(DataError, Stage.CLOSE):
            writer.close()

    def _quit(self, session: Session) -> None:
        # The server already accepted the message at this point.
        try:
            session.quit()
        except _SESSION_ERRORS as exc:
            logger.warning("QUIT failed after the message was accepted: %s", exc)
            session.close()
