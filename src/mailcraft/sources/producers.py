from __future__ import annotations

import io
import shutil
from pathlib import Path
from typing import BinaryIO, Callable, Protocol


class Sink(Protocol):
    def write(self, data: bytes, /) -> int | None: ...


Producer = Callable[[Sink], None]


def bytes_producer(data: bytes) -> Producer:
    payload = bytes(data)

    def produce(sink: Sink) -> None:
        sink.write(payload)

    return produce


def text_producer(text: str, codec: str = "utf-8") -> Producer:
    """Encode ``text`` once with ``codec``.

    Raises:
        UnicodeEncodeError: the codec cannot represent some character of ``text``.
    """
    return bytes_producer(text.encode(codec))


def file_producer(path: Path | str) -> Producer:
    """Stream a file from disk. The file is opened anew on every call."""
    source = Path(path)

    def produce(sink: Sink) -> None:
        with source.open("rb") as fh:
            shutil.copyfileobj(fh, sink)

    return produce


class StreamProducer:
    """Replayable producer over a binary stream.

    Seekable streams are rewound to the position they had when the producer
    was created. Other streams are read once and replayed from memory.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._buffer: bytes | None = None
        self._start: int | None = None
        try:
            if stream.seekable():
                self._start = stream.tell()
        except (AttributeError, OSError, ValueError):
            self._start = None

    def __call__(self, sink: Sink) -> None:
        if self._start is not None:
            self._stream.seek(self._start)
            shutil.copyfileobj(self._stream, sink)
            return
        if self._buffer is None:
            self._buffer = self._stream.read()
        sink.write(self._buffer)


def collect(producer: Producer) -> bytes:
    buffer = io.BytesIO()
    producer(buffer)
    return buffer.getvalue()
