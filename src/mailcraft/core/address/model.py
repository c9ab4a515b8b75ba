from __future__ import annotations

from dataclasses import dataclass
from email import errors as email_errors
from email.headerregistry import HeaderRegistry
from enum import Enum
from typing import Iterable

from mailcraft.core.encoding import WordEncoder, needs_encoding
from mailcraft.errors import AddressParseError, NoRecipientsError, NoSenderError

_registry = HeaderRegistry()


class AddrHeader(str, Enum):
    FROM = "From"
    TO = "To"
    CC = "Cc"
    BCC = "Bcc"
    REPLY_TO = "Reply-To"

    def __str__(self) -> str:
        return self.value


RECIPIENT_HEADERS = (AddrHeader.TO, AddrHeader.CC, AddrHeader.BCC)


@dataclass(frozen=True, slots=True)
class AddressEntry:
    address: str
    display_name: str = ""


def parse_address(raw: str) -> AddressEntry:
    """Parse one RFC 5322 mailbox (``"Name" <addr>``, ``Name <addr>`` or ``addr``)."""
    if "\r" in raw or "\n" in raw:
        raise AddressParseError(raw, "line breaks are not allowed")
    try:
        header = _registry("to", raw)
    except (email_errors.HeaderParseError, ValueError, IndexError, AttributeError, TypeError) as exc:
        raise AddressParseError(raw, str(exc)) from exc

    defects = [d for d in header.defects if not isinstance(d, email_errors.ObsoleteHeaderDefect)]
    if defects:
        raise AddressParseError(raw, str(defects[0]))
    if any(group.display_name is not None for group in header.groups):
        raise AddressParseError(raw, "group syntax is not a single mailbox")
    if len(header.addresses) != 1:
        raise AddressParseError(raw, f"expected one mailbox, got {len(header.addresses)}")

    parsed = header.addresses[0]
    if not parsed.username or not parsed.domain:
        raise AddressParseError(raw, "missing local part or domain")
    return AddressEntry(address=parsed.addr_spec, display_name=parsed.display_name or "")


def _quote_display_name(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_address(
    entry: AddressEntry,
    encoder: WordEncoder | None = None,
    first_line_offset: int = 0,
) -> str:
    """Render an entry as ``"Name" <addr>`` or a bare ``addr``.

    With an encoder, display names that are not printable ASCII are written as
    RFC 2047 encoded words instead of a quoted string.
    """
    if not entry.display_name:
        return entry.address
    if encoder is not None and needs_encoding(entry.display_name):
        return f"{encoder.encode(entry.display_name, first_line_offset)} <{entry.address}>"
    return f"{_quote_display_name(entry.display_name)} <{entry.address}>"


def format_address_list(
    entries: Iterable[AddressEntry],
    encoder: WordEncoder | None = None,
    first_line_offset: int = 0,
) -> str:
    rendered = [
        format_address(entry, encoder, first_line_offset if index == 0 else 0)
        for index, entry in enumerate(entries)
    ]
    return ", ".join(rendered)


class AddressBook:
    """Validated address entries per address header kind."""

    def __init__(self) -> None:
        self._entries: dict[AddrHeader, list[AddressEntry]] = {}

    @staticmethod
    def _store_list(kind: AddrHeader, entries: list[AddressEntry]) -> list[AddressEntry]:
        if kind is AddrHeader.FROM:
            return entries[:1]
        return entries

    def set_addresses(self, kind: AddrHeader | str, *raw: str) -> None:
        kind = AddrHeader(kind)
        entries = [parse_address(value) for value in raw]
        self._entries[kind] = self._store_list(kind, entries)

    def set_addresses_lenient(self, kind: AddrHeader | str, *raw: str) -> None:
        kind = AddrHeader(kind)
        entries: list[AddressEntry] = []
        for value in raw:
            try:
                entries.append(parse_address(value))
            except AddressParseError:
                continue
        self._entries[kind] = self._store_list(kind, entries)

    def add_address(self, kind: AddrHeader | str, raw: str) -> None:
        kind = AddrHeader(kind)
        current = [format_address(entry) for entry in self._entries.get(kind, [])]
        self.set_addresses(kind, *current, raw)

    def entries(self, kind: AddrHeader | str) -> tuple[AddressEntry, ...]:
        return tuple(self._entries.get(AddrHeader(kind), []))

    def get_sender(self, full: bool = False) -> str:
        senders = self._entries.get(AddrHeader.FROM)
        if not senders:
            raise NoSenderError()
        if full:
            return format_address(senders[0])
        return senders[0].address

    def get_recipients(self) -> list[str]:
        recipients = [
            entry.address for kind in RECIPIENT_HEADERS for entry in self._entries.get(kind, [])
        ]
        if not recipients:
            raise NoRecipientsError()
        return recipients
