from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from mailcraft.compose import Message
from mailcraft.config import Settings
from mailcraft.core.identity import FixedIdentity


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch) -> Settings:  # noqa: ANN001
    for key in ["MAILCRAFT_HOME", "MAILCRAFT_CHARSET", "MAILCRAFT_ENCODING", "MAILCRAFT_BOUNDARY"]:
        monkeypatch.delenv(key, raising=False)
    root = tmp_path / "project"
    root.mkdir(parents=True, exist_ok=True)
    s = Settings.load(base_dir=root)
    s.ensure_directories()
    return s


@pytest.fixture()
def identity() -> FixedIdentity:
    return FixedIdentity(
        moment=datetime(2023, 5, 15, 14, 30, 0, tzinfo=timezone.utc),
        id_value="1234.5678.1684161000@mail.example.com",
    )


@pytest.fixture()
def message(identity: FixedIdentity) -> Message:
    msg = Message(identity=identity)
    msg.set_from('"Toni Tester" <test@example.com>')
    msg.set_to('"Toni Receiver" <receiver@example.com>')
    msg.set_subject("This is a subject")
    return msg


@pytest.fixture()
def test_logger() -> logging.Logger:
    logger = logging.getLogger("mailcraft-test")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)
    return logger
