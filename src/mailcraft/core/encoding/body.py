from __future__ import annotations

import re
from email import base64mime, quoprimime

from .types import Encoding

CRLF = "\r\n"
MAX_LINE_LEN = 76

_NEWLINE_PATTERN = re.compile(rb"\r\n|\r|\n")


def normalize_newlines(data: bytes) -> bytes:
    return _NEWLINE_PATTERN.sub(b"\r\n", data)


def encode_quoted_printable(data: bytes) -> bytes:
    # latin-1 maps every byte to exactly one code point below 256,
    # which is the range the quoted-printable body map escapes.
    encoded = quoprimime.body_encode(data.decode("latin-1"), maxlinelen=MAX_LINE_LEN, eol=CRLF)
    return encoded.encode("ascii")


def encode_base64(data: bytes) -> bytes:
    return base64mime.body_encode(data, maxlinelen=MAX_LINE_LEN, eol=CRLF).encode("ascii")


def encode_body(data: bytes, encoding: Encoding | str) -> bytes:
    resolved = Encoding.parse(encoding)
    if resolved is Encoding.BASE64:
        return encode_base64(data)
    if resolved is Encoding.NONE:
        return normalize_newlines(data)
    return encode_quoted_printable(data)
