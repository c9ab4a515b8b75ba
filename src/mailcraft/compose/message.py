from __future__ import annotations

import io
import logging
from datetime import datetime
from email.utils import format_datetime
from pathlib import Path
from typing import Any, BinaryIO

from mailcraft.core.address import AddrHeader, AddressBook, AddressEntry
from mailcraft.core.encoding import (
    Charset,
    ContentType,
    Encoding,
    Importance,
    MIMEVersion,
    WordEncoder,
    charset_label,
    python_codec,
)
from mailcraft.core.headers import Header, HeaderStore, canonical_name
from mailcraft.core.identity import IdentityProvider, SystemIdentity
from mailcraft.errors import HeaderFormatError, MessageWriteError
from mailcraft.sources import Producer, Sink, text_producer

from .parts import File, Part, apply_file_options, file_from_path, file_from_reader
from .plan import has_alternative, has_mixed, has_related
from .writer import ENGINE_HEADERS, MessageWriter

_RESERVED_HEADERS = {kind.value.lower() for kind in AddrHeader} | {name.lower() for name in ENGINE_HEADERS}


def _format_mailbox(name: str, address: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}" <{address}>'


class Message:
    """An outgoing mail message.

    The message is the only object callers mutate. Serialization reads the
    current state and can be repeated; boundaries are random on every pass
    unless a fixed one is set.
    """

    def __init__(
        self,
        *,
        charset: Charset | str = Charset.UTF8,
        encoding: Encoding | str = Encoding.QP,
        mime_version: MIMEVersion | str = MIMEVersion.MIME10,
        boundary: str | None = None,
        identity: IdentityProvider | None = None,
    ):
        self._addresses = AddressBook()
        self._headers = HeaderStore()
        self._charset = charset_label(charset)
        self._encoding = Encoding.parse(encoding)
        self._mime_version = str(mime_version)
        self._boundary = boundary or None
        self._identity: IdentityProvider = identity or SystemIdentity()
        self._parts: list[Part] = []
        self._attachments: list[File] = []
        self._embeds: list[File] = []
        self._encoder = WordEncoder.for_message(self._charset, self._encoding)

    # configuration

    @property
    def charset(self) -> str:
        return self._charset

    @property
    def encoding(self) -> str:
        return self._encoding.value

    @property
    def mime_version(self) -> str:
        return self._mime_version

    @property
    def boundary(self) -> str | None:
        return self._boundary

    @property
    def encoder(self) -> WordEncoder:
        return self._encoder

    def _set_encoder(self) -> None:
        self._encoder = WordEncoder.for_message(self._charset, self._encoding)

    def set_charset(self, charset: Charset | str) -> None:
        self._charset = charset_label(charset)
        self._set_encoder()

    def set_encoding(self, encoding: Encoding | str) -> None:
        self._encoding = Encoding.parse(encoding)
        self._set_encoder()

    def set_boundary(self, boundary: str | None) -> None:
        self._boundary = boundary or None

    def set_mime_version(self, mime_version: MIMEVersion | str) -> None:
        self._mime_version = str(mime_version)

    # generic headers

    @property
    def header_store(self) -> HeaderStore:
        return self._headers

    def set_header(self, name: Header | str, *values: str) -> None:
        key = canonical_name(name).lower()
        if key in _RESERVED_HEADERS:
            raise HeaderFormatError(f"header {str(name)!r} is written by the engine and cannot be set directly")
        self._headers.set(name, values, self._encoder)

    def header(self, name: Header | str) -> tuple[str, ...]:
        return self._headers.get(name)

    def set_subject(self, subject: str) -> None:
        self.set_header(Header.SUBJECT, subject)

    def set_message_id(self, value: str | None = None) -> None:
        message_id = (value or self._identity.message_id()).strip("<>")
        self.set_header(Header.MESSAGE_ID, f"<{message_id}>")

    def set_date(self, value: datetime | None = None) -> None:
        moment = value or self._identity.now()
        if moment.tzinfo is None:
            moment = moment.astimezone()
        self.set_header(Header.DATE, format_datetime(moment))

    def set_bulk(self) -> None:
        """Mark the message as automated mail (RFC 2076, section 3.9)."""
        self.set_header(Header.PRECEDENCE, "bulk")

    def set_importance(self, importance: Importance | str) -> None:
        importance = Importance.parse(importance)
        if importance is Importance.NORMAL:
            return
        self.set_header(Header.IMPORTANCE, str(importance))
        self.set_header(Header.PRIORITY, importance.num_string)
        self.set_header(Header.X_PRIORITY, importance.x_priority)
        self.set_header(Header.X_MS_MAIL_PRIORITY, importance.num_string)

    # address headers

    @property
    def address_book(self) -> AddressBook:
        return self._addresses

    def addresses(self, kind: AddrHeader | str) -> tuple[AddressEntry, ...]:
        return self._addresses.entries(kind)

    def set_address_header(self, kind: AddrHeader | str, *addresses: str) -> None:
        self._addresses.set_addresses(kind, *addresses)

    def set_address_header_lenient(self, kind: AddrHeader | str, *addresses: str) -> None:
        self._addresses.set_addresses_lenient(kind, *addresses)

    def set_from(self, address: str) -> None:
        self.set_address_header(AddrHeader.FROM, address)

    def set_from_format(self, name: str, address: str) -> None:
        self.set_from(_format_mailbox(name, address))

    def set_to(self, *addresses: str) -> None:
        self.set_address_header(AddrHeader.TO, *addresses)

    def add_to(self, address: str) -> None:
        self._addresses.add_address(AddrHeader.TO, address)

    def add_to_format(self, name: str, address: str) -> None:
        self.add_to(_format_mailbox(name, address))

    def set_to_lenient(self, *addresses: str) -> None:
        self.set_address_header_lenient(AddrHeader.TO, *addresses)

    def set_cc(self, *addresses: str) -> None:
        self.set_address_header(AddrHeader.CC, *addresses)

    def add_cc(self, address: str) -> None:
        self._addresses.add_address(AddrHeader.CC, address)

    def add_cc_format(self, name: str, address: str) -> None:
        self.add_cc(_format_mailbox(name, address))

    def set_cc_lenient(self, *addresses: str) -> None:
        self.set_address_header_lenient(AddrHeader.CC, *addresses)

    def set_bcc(self, *addresses: str) -> None:
        self.set_address_header(AddrHeader.BCC, *addresses)

    def add_bcc(self, address: str) -> None:
        self._addresses.add_address(AddrHeader.BCC, address)

    def add_bcc_format(self, name: str, address: str) -> None:
        self.add_bcc(_format_mailbox(name, address))

    def set_bcc_lenient(self, *addresses: str) -> None:
        self.set_address_header_lenient(AddrHeader.BCC, *addresses)

    def set_reply_to(self, *addresses: str) -> None:
        self.set_address_header(AddrHeader.REPLY_TO, *addresses)

    def set_reply_to_format(self, name: str, address: str) -> None:
        self.set_reply_to(_format_mailbox(name, address))

    def get_sender(self, full: bool = False) -> str:
        return self._addresses.get_sender(full)

    def get_recipients(self) -> list[str]:
        return self._addresses.get_recipients()

    # body parts

    @property
    def parts(self) -> tuple[Part, ...]:
        return tuple(self._parts)

    def _new_part(
        self,
        content_type: ContentType | str,
        producer: Producer,
        encoding: Encoding | str | None,
    ) -> Part:
        return Part(
            content_type=str(content_type),
            charset=self._charset,
            encoding=Encoding.parse(encoding) if encoding is not None else self._encoding,
            producer=producer,
        )

    def set_body_writer(
        self,
        content_type: ContentType | str,
        producer: Producer,
        *,
        encoding: Encoding | str | None = None,
    ) -> None:
        self._parts = [self._new_part(content_type, producer, encoding)]

    def set_body_string(
        self,
        content_type: ContentType | str,
        body: str,
        *,
        encoding: Encoding | str | None = None,
    ) -> None:
        self.set_body_writer(content_type, text_producer(body, python_codec(self._charset)), encoding=encoding)

    def add_alternative_writer(
        self,
        content_type: ContentType | str,
        producer: Producer,
        *,
        encoding: Encoding | str | None = None,
    ) -> None:
        self._parts.append(self._new_part(content_type, producer, encoding))

    def add_alternative_string(
        self,
        content_type: ContentType | str,
        body: str,
        *,
        encoding: Encoding | str | None = None,
    ) -> None:
        self.add_alternative_writer(
            content_type, text_producer(body, python_codec(self._charset)), encoding=encoding
        )

    # files

    @property
    def attachments(self) -> tuple[File, ...]:
        return tuple(self._attachments)

    @property
    def embeds(self) -> tuple[File, ...]:
        return tuple(self._embeds)

    def attach_file(self, path: Path | str, **options: Any) -> None:
        self._attachments.append(apply_file_options(file_from_path(path), **options))

    def attach_reader(self, name: str, stream: BinaryIO, **options: Any) -> None:
        self._attachments.append(apply_file_options(file_from_reader(name, stream), **options))

    def embed_file(self, path: Path | str, **options: Any) -> None:
        self._embeds.append(apply_file_options(file_from_path(path), **options))

    def embed_reader(self, name: str, stream: BinaryIO, **options: Any) -> None:
        self._embeds.append(apply_file_options(file_from_reader(name, stream), **options))

    # structure

    @property
    def has_alternative(self) -> bool:
        return has_alternative(self._parts)

    @property
    def has_mixed(self) -> bool:
        return has_mixed(self._parts, self._attachments)

    @property
    def has_related(self) -> bool:
        return has_related(self._parts, self._embeds)

    # serialization

    def write_to(
        self,
        sink: Sink,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> int:
        """Serialize the message into ``sink`` and return the number of bytes written.

        Raises:
            MessageWriteError: the first error of the pass, with the byte count
                the sink accepted before it.
        """
        writer = MessageWriter(sink, logger=logger)
        writer.write_message(self)
        if writer.error is not None:
            raise MessageWriteError(
                f"failed to write message: {writer.error}", bytes_written=writer.bytes_written
            ) from writer.error
        return writer.bytes_written

    def as_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write_to(buffer)
        return buffer.getvalue()
