from .body import encode_base64, encode_body, encode_quoted_printable, normalize_newlines
from .types import Charset, ContentType, Encoding, Importance, MIMEVersion, charset_label, python_codec
from .word import WordEncoder, needs_encoding

__all__ = [
    "Charset",
    "ContentType",
    "Encoding",
    "Importance",
    "MIMEVersion",
    "WordEncoder",
    "charset_label",
    "encode_base64",
    "encode_body",
    "encode_quoted_printable",
    "needs_encoding",
    "normalize_newlines",
    "python_codec",
]
