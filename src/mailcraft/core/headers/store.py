from __future__ import annotations

from enum import Enum
from typing import Iterator

from mailcraft.core.encoding import WordEncoder


class Header(str, Enum):
    CONTENT_DESCRIPTION = "Content-Description"
    CONTENT_DISPOSITION = "Content-Disposition"
    CONTENT_ID = "Content-ID"
    CONTENT_LANGUAGE = "Content-Language"
    CONTENT_LOCATION = "Content-Location"
    CONTENT_TRANSFER_ENCODING = "Content-Transfer-Encoding"
    CONTENT_TYPE = "Content-Type"
    DATE = "Date"
    IMPORTANCE = "Importance"
    IN_REPLY_TO = "In-Reply-To"
    LIST_UNSUBSCRIBE = "List-Unsubscribe"
    LIST_UNSUBSCRIBE_POST = "List-Unsubscribe-Post"
    MESSAGE_ID = "Message-ID"
    MIME_VERSION = "MIME-Version"
    ORGANIZATION = "Organization"
    PRECEDENCE = "Precedence"
    PRIORITY = "Priority"
    REFERENCES = "References"
    SUBJECT = "Subject"
    USER_AGENT = "User-Agent"
    X_MAILER = "X-Mailer"
    X_MS_MAIL_PRIORITY = "X-MSMail-Priority"
    X_PRIORITY = "X-Priority"

    def __str__(self) -> str:
        return self.value


_CANONICAL_NAMES = {member.value.lower(): member.value for member in Header}


def canonical_name(name: Header | str) -> str:
    value = str(name).strip()
    if not value or any(char in value for char in ":\r\n \t"):
        raise ValueError(f"invalid header name: {name!r}")
    return _CANONICAL_NAMES.get(value.lower(), value)


class HeaderStore:
    """Generic (non-address) header values, kept in their encoded form.

    Values are encoded when they are set. The store never sees the encoder
    again, so later charset changes on the message do not touch stored values.
    """

    def __init__(self) -> None:
        self._values: dict[str, list[str]] = {}

    def set(self, name: Header | str, values: tuple[str, ...] | list[str], encoder: WordEncoder) -> None:
        key = canonical_name(name)
        self._values[key] = [encoder.encode(value, first_line_offset=len(key) + 2) for value in values]

    def get(self, name: Header | str) -> tuple[str, ...]:
        return tuple(self._values.get(canonical_name(name), []))

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return canonical_name(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def items(self) -> list[tuple[str, tuple[str, ...]]]:
        return [(name, tuple(values)) for name, values in self._values.items()]
