from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import BinaryIO, Mapping

from mailcraft.core.encoding import ContentType, Encoding
from mailcraft.core.headers import Header, canonical_name
from mailcraft.sources import Producer, StreamProducer, file_producer


@dataclass(slots=True)
class Part:
    """One body alternative."""

    content_type: str
    charset: str
    encoding: Encoding
    producer: Producer


@dataclass(slots=True)
class File:
    """An attachment or an embedded resource."""

    name: str
    producer: Producer
    headers: dict[str, list[str]] = field(default_factory=dict)

    def header(self, name: Header | str) -> str | None:
        values = self.headers.get(canonical_name(name))
        return values[0] if values else None

    @property
    def encoding(self) -> Encoding:
        return Encoding.parse(self.header(Header.CONTENT_TRANSFER_ENCODING) or Encoding.BASE64)

    @property
    def content_type(self) -> str:
        override = self.header(Header.CONTENT_TYPE)
        if override:
            return override
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or ContentType.OCTET_STREAM.value


def file_from_path(path: Path | str) -> File:
    return File(name=Path(path).name, producer=file_producer(path))


def file_from_reader(name: str, stream: BinaryIO) -> File:
    return File(name=PurePath(name).name, producer=StreamProducer(stream))


def apply_file_options(
    unit: File,
    *,
    name: str | None = None,
    content_type: ContentType | str | None = None,
    disposition: str | None = None,
    encoding: Encoding | str | None = None,
    content_id: str | None = None,
    description: str | None = None,
    headers: Mapping[str, str | list[str]] | None = None,
) -> File:
    """Apply caller overrides to a file unit before it joins a message."""
    if name:
        unit.name = PurePath(name).name
    if content_type:
        unit.headers[Header.CONTENT_TYPE.value] = [str(content_type)]
    if disposition:
        unit.headers[Header.CONTENT_DISPOSITION.value] = [disposition]
    if encoding is not None:
        unit.headers[Header.CONTENT_TRANSFER_ENCODING.value] = [Encoding.parse(encoding).value]
    if content_id:
        unit.headers[Header.CONTENT_ID.value] = [content_id.strip("<>")]
    if description:
        unit.headers[Header.CONTENT_DESCRIPTION.value] = [description]
    for header_name, value in (headers or {}).items():
        unit.headers[canonical_name(header_name)] = [value] if isinstance(value, str) else list(value)
    return unit
