from __future__ import annotations

import codecs
import platform
import socket
import sys

from mailcraft.config import Settings


def run_doctor_checks(settings: Settings) -> list[dict[str, str]]:
    checks: list[dict[str, str]] = []

    checks.append(
        {
            "check": "python_version",
            "status": "ok" if sys.version_info >= (3, 10) else "warn",
            "detail": platform.python_version(),
        }
    )

    try:
        codec = codecs.lookup(settings.charset).name
        checks.append({"check": "charset", "status": "ok", "detail": f"{settings.charset} ({codec})"})
    except LookupError:
        checks.append(
            {
                "check": "charset",
                "status": "warn",
                "detail": f"{settings.charset}: no Python codec, bodies are encoded as UTF-8",
            }
        )

    checks.append(
        {
            "check": "encoding",
            "status": "ok",
            "detail": settings.encoding.value,
        }
    )

    checks.append(
        {
            "check": "outbox_dir",
            "status": "ok" if settings.outbox_dir.exists() else "warn",
            "detail": str(settings.outbox_dir),
        }
    )

    hostname = settings.hostname or socket.gethostname()
    try:
        socket.getaddrinfo(hostname, None)
        checks.append({"check": "hostname", "status": "ok", "detail": hostname})
    except OSError as exc:
        checks.append(
            {
                "check": "hostname",
                "status": "warn",
                "detail": f"{hostname}: {exc}",
            }
        )

    return checks
