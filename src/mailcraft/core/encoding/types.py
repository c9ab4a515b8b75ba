from __future__ import annotations

import codecs
from enum import Enum


class Encoding(str, Enum):
    """Content-Transfer-Encoding values supported for bodies and headers."""

    QP = "quoted-printable"
    BASE64 = "base64"
    NONE = "8bit"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Encoding | str | None) -> Encoding:
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        if normalized in {"b64", "b"}:
            return cls.BASE64
        if normalized in {"none", "7bit", "binary"}:
            return cls.NONE
        # Encoding is a presentation choice, quoted-printable is always safe.
        return cls.QP


class Charset(str, Enum):
    ASCII = "US-ASCII"
    UTF7 = "UTF-7"
    UTF8 = "UTF-8"
    ISO_8859_1 = "ISO-8859-1"
    ISO_8859_2 = "ISO-8859-2"
    ISO_8859_3 = "ISO-8859-3"
    ISO_8859_4 = "ISO-8859-4"
    ISO_8859_5 = "ISO-8859-5"
    ISO_8859_6 = "ISO-8859-6"
    ISO_8859_7 = "ISO-8859-7"
    ISO_8859_9 = "ISO-8859-9"
    ISO_8859_13 = "ISO-8859-13"
    ISO_8859_14 = "ISO-8859-14"
    ISO_8859_15 = "ISO-8859-15"
    ISO_8859_16 = "ISO-8859-16"
    ISO_2022_JP = "ISO-2022-JP"
    ISO_2022_KR = "ISO-2022-KR"
    WINDOWS_1250 = "windows-1250"
    WINDOWS_1251 = "windows-1251"
    WINDOWS_1252 = "windows-1252"
    WINDOWS_1255 = "windows-1255"
    WINDOWS_1256 = "windows-1256"
    KOI8_R = "KOI8-R"
    KOI8_U = "KOI8-U"
    BIG5 = "Big5"
    GB18030 = "GB18030"
    GB2312 = "GB2312"
    GBK = "GBK"
    TIS_620 = "TIS-620"
    EUC_KR = "EUC-KR"
    SHIFT_JIS = "Shift_JIS"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


def charset_label(value: Charset | str | None) -> str:
    if value is None:
        return Charset.UTF8.value
    label = str(value).strip()
    return label or Charset.UTF8.value


def python_codec(charset: Charset | str) -> str:
    """Return the Python codec name for a charset label, UTF-8 when unknown."""
    try:
        return codecs.lookup(charset_label(charset)).name
    except LookupError:
        return "utf-8"


class ContentType(str, Enum):
    TEXT_PLAIN = "text/plain"
    TEXT_HTML = "text/html"
    OCTET_STREAM = "application/octet-stream"
    MULTIPART_ALTERNATIVE = "multipart/alternative"
    MULTIPART_MIXED = "multipart/mixed"
    MULTIPART_RELATED = "multipart/related"

    def __str__(self) -> str:
        return self.value


class MIMEVersion(str, Enum):
    MIME10 = "1.0"

    def __str__(self) -> str:
        return self.value


class Importance(Enum):
    NON_URGENT = "non-urgent"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    def __str__(self) -> str:
        return "" if self is Importance.NORMAL else self.value

    @property
    def num_string(self) -> str:
        """Value for the ``Priority`` and ``X-MSMail-Priority`` headers."""
        if self in (Importance.NON_URGENT, Importance.LOW):
            return "0"
        if self in (Importance.HIGH, Importance.URGENT):
            return "1"
        return ""

    @property
    def x_priority(self) -> str:
        if self in (Importance.NON_URGENT, Importance.LOW):
            return "5"
        if self in (Importance.HIGH, Importance.URGENT):
            return "1"
        return ""

    @classmethod
    def parse(cls, value: Importance | str) -> Importance:
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"unknown importance: {value!r}")
