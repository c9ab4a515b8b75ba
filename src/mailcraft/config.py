from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from mailcraft.core.encoding import Charset, Encoding, MIMEVersion, charset_label
from mailcraft.core.identity import SystemIdentity


@dataclass(slots=True)
class Settings:
    root_dir: Path
    logs_dir: Path
    outbox_dir: Path
    charset: str = Charset.UTF8.value
    encoding: Encoding = Encoding.QP
    mime_version: str = MIMEVersion.MIME10.value
    boundary: str | None = None
    hostname: str | None = None

    @classmethod
    def load(cls, base_dir: Path | None = None) -> Settings:
        load_dotenv(override=False)

        root_env = os.getenv("MAILCRAFT_HOME")
        root_dir = Path(root_env).expanduser().resolve() if root_env else (base_dir or Path.cwd()).resolve()

        logs_dir = Path(os.getenv("MAILCRAFT_LOG_DIR", root_dir / "logs")).expanduser().resolve()
        outbox_dir = Path(os.getenv("MAILCRAFT_OUTBOX_DIR", root_dir / "outbox")).expanduser().resolve()

        return cls(
            root_dir=root_dir,
            logs_dir=logs_dir,
            outbox_dir=outbox_dir,
            charset=charset_label(os.getenv("MAILCRAFT_CHARSET")),
            # Unknown values fall back to quoted-printable.
            encoding=Encoding.parse(os.getenv("MAILCRAFT_ENCODING", Encoding.QP.value)),
            mime_version=os.getenv("MAILCRAFT_MIME_VERSION", MIMEVersion.MIME10.value),
            boundary=os.getenv("MAILCRAFT_BOUNDARY") or None,
            hostname=os.getenv("MAILCRAFT_HOSTNAME") or None,
        )

    def message_options(self) -> dict[str, Any]:
        return {
            "charset": self.charset,
            "encoding": self.encoding,
            "mime_version": self.mime_version,
            "boundary": self.boundary,
            "identity": SystemIdentity(hostname=self.hostname),
        }

    def ensure_directories(self) -> None:
        for path in [self.root_dir, self.logs_dir, self.outbox_dir]:
            path.mkdir(parents=True, exist_ok=True)
