from __future__ import annotations

from dataclasses import dataclass
from email import base64mime, quoprimime

from .types import Charset, Encoding, charset_label, python_codec

# RFC 2047 section 2: an encoded-word may not be more than 75 characters long.
MAX_ENCODED_WORD_LEN = 75
MAX_HEADER_LINE_LEN = 76


def needs_encoding(value: str) -> bool:
    return any(char != "\t" and not (" " <= char <= "~") for char in value)


@dataclass(frozen=True, slots=True)
class WordEncoder:
    """RFC 2047 encoder bound to one charset and one encoding.

    Instances are immutable, so a header value encoded with an encoder keeps
    that charset even when the owning message switches to another one later.
    """

    charset: str = Charset.UTF8.value
    encoding: Encoding = Encoding.QP

    @classmethod
    def for_message(cls, charset: Charset | str, encoding: Encoding | str) -> WordEncoder:
        # Only B encoding has a distinct word form, everything else uses Q words.
        word_encoding = Encoding.BASE64 if Encoding.parse(encoding) is Encoding.BASE64 else Encoding.QP
        return cls(charset=charset_label(charset), encoding=word_encoding)

    def _encode_chunk(self, chunk: str) -> str:
        raw = chunk.encode(python_codec(self.charset), errors="replace")
        if self.encoding is Encoding.BASE64:
            return base64mime.header_encode(raw, self.charset)
        return quoprimime.header_encode(raw, self.charset)

    def encode(self, value: str, first_line_offset: int = 0) -> str:
        """Encode ``value`` as space separated encoded words.

        ``first_line_offset`` is the number of characters already on the line
        (for example ``len("Subject: ")``); the first word is shortened so that
        line stays within 76 characters. Later words start continuation lines.
        """
        if not needs_encoding(value):
            return value

        words: list[str] = []
        chunk = ""
        limit = min(MAX_ENCODED_WORD_LEN, MAX_HEADER_LINE_LEN - first_line_offset)
        for char in value:
            candidate = chunk + char
            if chunk and len(self._encode_chunk(candidate)) > limit:
                words.append(self._encode_chunk(chunk))
                chunk = char
                limit = MAX_ENCODED_WORD_LEN
            else:
                chunk = candidate
        if chunk:
            words.append(self._encode_chunk(chunk))
        return " ".join(words)
