from .compose import Message, MessageWriter, Structure
from .core.address import AddrHeader, AddressEntry
from .core.encoding import Charset, ContentType, Encoding, Importance, MIMEVersion
from .core.headers import Header
from .core.identity import FixedIdentity, SystemIdentity
from .errors import (
    AddressParseError,
    HeaderFormatError,
    MailcraftError,
    MessageWriteError,
    NoRecipientsError,
    NoSenderError,
)
from .version import __version__

__all__ = [
    "AddrHeader",
    "AddressEntry",
    "AddressParseError",
    "Charset",
    "ContentType",
    "Encoding",
    "FixedIdentity",
    "Header",
    "HeaderFormatError",
    "Importance",
    "MIMEVersion",
    "MailcraftError",
    "Message",
    "MessageWriteError",
    "MessageWriter",
    "NoRecipientsError",
    "NoSenderError",
    "Structure",
    "SystemIdentity",
    "__version__",
]
