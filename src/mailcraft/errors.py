from __future__ import annotations


class MailcraftError(Exception):
    """Base class for every error raised by mailcraft."""


class AddressParseError(MailcraftError, ValueError):
    def __init__(self, raw: str, reason: str):
        super().__init__(f"failed to parse mail address {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class NoSenderError(MailcraftError):
    def __init__(self) -> None:
        super().__init__("no FROM address set")


class NoRecipientsError(MailcraftError):
    def __init__(self) -> None:
        super().__init__("no recipient addresses set")


class HeaderFormatError(MailcraftError, ValueError):
    """A header cannot be written without breaking the message framing."""


class MessageWriteError(MailcraftError):
    """Terminal error of one serialization pass.

    ``bytes_written`` holds the number of bytes the sink accepted before the
    failure. The original error is chained as ``__cause__``.
    """

    def __init__(self, message: str, bytes_written: int):
        super().__init__(message)
        self.bytes_written = bytes_written
