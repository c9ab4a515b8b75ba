from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

from mailcraft.compose import Message
from mailcraft.core.headers import Header

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._@-]+")


def _default_filename(message: Message) -> str:
    message_id = next(iter(message.header(Header.MESSAGE_ID)), "")
    stem = _UNSAFE_NAME_CHARS.sub("_", message_id.strip("<>"))[:120]
    if not stem:
        stem = datetime.now(timezone.utc).strftime("message-%Y%m%dT%H%M%S%fZ")
    return f"{stem}.eml"


def export_message(message: Message, out_dir: Path, filename: str | None = None) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    target = (out_dir / (filename or _default_filename(message))).resolve()
    partial = target.with_name(target.name + ".part")
    try:
        with partial.open("wb") as fh:
            message.write_to(fh)
        partial.replace(target)
    finally:
        partial.unlink(missing_ok=True)
    return target
