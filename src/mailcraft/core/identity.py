from __future__ import annotations

import os
import random
import socket
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol

DEFAULT_HOSTNAME = "localhost.localdomain"


class IdentityProvider(Protocol):
    def now(self) -> datetime: ...

    def message_id(self) -> str: ...


def _system_hostname() -> str:
    try:
        return socket.gethostname() or DEFAULT_HOSTNAME
    except OSError:
        return DEFAULT_HOSTNAME


@dataclass(slots=True)
class SystemIdentity:
    """Host name, process id and wall clock of the running process."""

    hostname: str | None = None
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc).astimezone())

    def now(self) -> datetime:
        return self.clock()

    def message_id(self) -> str:
        hostname = self.hostname or _system_hostname()
        timestamp = int(self.now().timestamp())
        return f"{os.getpid()}.{random.getrandbits(63)}.{timestamp}@{hostname}"


@dataclass(slots=True)
class FixedIdentity:
    moment: datetime
    id_value: str = "fixed@localhost.localdomain"

    def now(self) -> datetime:
        return self.moment

    def message_id(self) -> str:
        return self.id_value
