from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from mailcraft.core.address import AddrHeader, format_address_list
from mailcraft.core.encoding import WordEncoder, encode_body
from mailcraft.core.headers import Header
from mailcraft.errors import HeaderFormatError
from mailcraft.sources import Sink, collect
from mailcraft.version import PRODUCT_BANNER

from .parts import File, Part
from .plan import Envelope, Leaf, NestingPlan, build_plan

if TYPE_CHECKING:
    from .message import Message

default_logger = logging.getLogger(__name__)

CRLF = "\r\n"
MAX_HEADER_LINE_LEN = 76

ADDRESS_HEADER_ORDER = (AddrHeader.FROM, AddrHeader.TO, AddrHeader.CC, AddrHeader.BCC)
PRIORITY_HEADER_ORDER = (
    Header.PRECEDENCE,
    Header.IMPORTANCE,
    Header.PRIORITY,
    Header.X_PRIORITY,
    Header.X_MS_MAIL_PRIORITY,
)
IDENTIFICATION_HEADERS = (Header.USER_AGENT, Header.X_MAILER)
# Written by the engine itself from message state.
ENGINE_HEADERS = {
    Header.MIME_VERSION.value,
    Header.CONTENT_TYPE.value,
    Header.CONTENT_TRANSFER_ENCODING.value,
}


class WriterState(str, Enum):
    IDLE = "idle"
    HEADERS = "headers"
    BODY = "body"
    DONE = "done"
    FAILED = "failed"


def fold_header(name: str, value: str) -> str:
    """Render ``name: value`` folded at spaces so lines stay within 76 characters."""
    tokens = value.split(" ")
    lines: list[str] = []
    line = f"{name}: {tokens[0]}"
    for token in tokens[1:]:
        if token and line.strip() and len(line) + 1 + len(token) > MAX_HEADER_LINE_LEN:
            lines.append(line)
            line = f" {token}"
        else:
            line = f"{line} {token}"
    lines.append(line)
    return CRLF.join(lines) + CRLF


def _quote_param(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class MessageWriter:
    """Serializes one message snapshot into a byte sink.

    The first error of a pass is sticky: once the writer has failed, every
    following write is a no-op and ``error`` keeps the original cause.
    """

    def __init__(self, sink: Sink, logger: logging.Logger | logging.LoggerAdapter | None = None):
        self.sink = sink
        self.logger = logger or default_logger
        self.bytes_written = 0
        self.error: Exception | None = None
        self.state = WriterState.IDLE
        self.plan: NestingPlan | None = None
        self._encoder = WordEncoder()
        self._embed_ids: set[int] = set()

    def _enter(self, state: WriterState) -> None:
        if self.state is not WriterState.FAILED:
            self.state = state

    def fail(self, exc: Exception) -> None:
        if self.error is None:
            self.error = exc
            self.logger.warning(
                "Message serialization failed after %s bytes: %s",
                self.bytes_written,
                exc,
                extra={"bytes_written": self.bytes_written, "writer_state": self.state.value},
            )
        self.state = WriterState.FAILED

    def write(self, data: bytes) -> int:
        """Write all of ``data`` to the sink, retrying short writes."""
        if self.error is not None:
            return 0
        view = memoryview(data)
        total = 0
        while total < len(view):
            try:
                written = self.sink.write(view[total:])
            except Exception as exc:  # noqa: BLE001
                self.fail(exc)
                return total
            # A sink that returns None follows the io contract of a full write.
            count = len(view) - total if written is None else written
            if count <= 0:
                self.fail(OSError(f"sink accepted no bytes after {self.bytes_written} bytes"))
                return total
            total += count
            self.bytes_written += count
        return total

    def write_string(self, value: str) -> int:
        return self.write(value.encode("utf-8"))

    def write_header(self, name: str, *values: str) -> None:
        value = ", ".join(values)
        if "\r" in value or "\n" in value:
            self.fail(HeaderFormatError(f"header {name!r} contains a line break"))
            return
        self.write_string(fold_header(name, value))

    def write_message(self, message: Message) -> None:
        self._encoder = message.encoder
        self._embed_ids = {id(unit) for unit in message.embeds}
        self.plan = build_plan(
            list(message.parts),
            list(message.attachments),
            list(message.embeds),
            boundary=message.boundary,
        )

        self._enter(WriterState.HEADERS)
        self._write_message_headers(message)

        self._enter(WriterState.BODY)
        self._write_body(self.plan)

        self._enter(WriterState.DONE)
        if self.error is None:
            self.logger.debug(
                "Message serialized: structure=%s bytes=%s",
                self.plan.structure.value,
                self.bytes_written,
                extra={"structure": self.plan.structure.value, "bytes_written": self.bytes_written},
            )

    def _write_message_headers(self, message: Message) -> None:
        store = message.header_store
        book = message.address_book
        written: set[str] = set(ENGINE_HEADERS)
        written.update(kind.value for kind in AddrHeader)

        self.write_header(Header.MIME_VERSION.value, message.mime_version)

        if store.get(Header.DATE):
            self.write_header(Header.DATE.value, *store.get(Header.DATE))
        written.add(Header.DATE.value)

        for kind in ADDRESS_HEADER_ORDER:
            entries = book.entries(kind)
            if entries:
                self.write_header(
                    kind.value, format_address_list(entries, self._encoder, len(kind.value) + 2)
                )

        reply_to = book.entries(AddrHeader.REPLY_TO)
        if reply_to:
            self.write_header(
                AddrHeader.REPLY_TO.value,
                format_address_list(reply_to, self._encoder, len(AddrHeader.REPLY_TO.value) + 2),
            )

        for name in (Header.MESSAGE_ID, Header.SUBJECT, *PRIORITY_HEADER_ORDER):
            values = store.get(name)
            if values:
                self.write_header(name.value, *values)
            written.add(name.value)

        written.update(name.value for name in IDENTIFICATION_HEADERS)
        for name, values in store.items():
            if name not in written and values:
                self.write_header(name, *values)

        for name in IDENTIFICATION_HEADERS:
            self.write_header(name.value, *(store.get(name) or (PRODUCT_BANNER,)))

    def _write_body(self, plan: NestingPlan) -> None:
        if plan.envelopes:
            self._write_envelope_headers(plan.envelopes[0])
            self.write_string(CRLF)
            self._write_envelope(plan, 0)
            return

        if plan.leaves:
            leaf = plan.leaves[0]
            for name, value in self._leaf_headers(leaf):
                self.write_header(name, value)
            self.write_string(CRLF)
            self._write_leaf_body(leaf)
            return

        self.write_string(CRLF)

    def _write_envelope_headers(self, envelope: Envelope) -> None:
        self.write_header(
            Header.CONTENT_TYPE.value,
            f'{envelope.content_type}; boundary="{envelope.boundary}"',
        )

    def _write_envelope(self, plan: NestingPlan, index: int) -> None:
        envelope = plan.envelopes[index]
        opened = False

        def open_child() -> None:
            nonlocal opened
            prefix = "--" if not opened else CRLF + "--"
            self.write_string(f"{prefix}{envelope.boundary}{CRLF}")
            opened = True

        if index + 1 < len(plan.envelopes):
            open_child()
            self._write_envelope_headers(plan.envelopes[index + 1])
            self.write_string(CRLF)
            self._write_envelope(plan, index + 1)
        else:
            for leaf in plan.leaves:
                open_child()
                self._write_leaf(leaf)

        for unit in envelope.trailing:
            open_child()
            self._write_leaf(unit)

        self.write_string(f"{CRLF}--{envelope.boundary}--{CRLF}")

    def _write_leaf(self, leaf: Leaf) -> None:
        for name, value in self._leaf_headers(leaf):
            self.write_header(name, value)
        self.write_string(CRLF)
        self._write_leaf_body(leaf)

    def _leaf_headers(self, leaf: Leaf) -> list[tuple[str, str]]:
        if isinstance(leaf, Part):
            return [
                (Header.CONTENT_TYPE.value, f"{leaf.content_type}; charset={leaf.charset}"),
                (Header.CONTENT_TRANSFER_ENCODING.value, leaf.encoding.value),
            ]
        return self._file_headers(leaf)

    def _file_headers(self, unit: File) -> list[tuple[str, str]]:
        inline = id(unit) in self._embed_ids
        filename = _quote_param(self._encoder.encode(unit.name))
        disposition = unit.header(Header.CONTENT_DISPOSITION) or ("inline" if inline else "attachment")

        headers = [
            (Header.CONTENT_TYPE.value, f'{unit.content_type}; name="{filename}"'),
            (Header.CONTENT_TRANSFER_ENCODING.value, unit.encoding.value),
            (Header.CONTENT_DISPOSITION.value, f'{disposition}; filename="{filename}"'),
        ]
        content_id = unit.header(Header.CONTENT_ID) or (unit.name if inline else None)
        if content_id:
            headers.append((Header.CONTENT_ID.value, f"<{content_id}>"))

        handled = {name for name, _ in headers} | {Header.CONTENT_ID.value}
        for name, values in unit.headers.items():
            if name in handled:
                continue
            headers.extend((name, self._encoder.encode(value, len(name) + 2)) for value in values)
        return headers

    def _write_leaf_body(self, leaf: Leaf) -> None:
        if self.error is not None:
            return
        try:
            data = collect(leaf.producer)
        except Exception as exc:  # noqa: BLE001
            self.fail(exc)
            return
        self.write(encode_body(data, leaf.encoding))
