from __future__ import annotations

import subprocess
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import typer
from dateutil import parser as dt_parser
from rich import print

from mailcraft.compose import Message
from mailcraft.config import Settings
from mailcraft.core.encoding import ContentType, Encoding, Importance
from mailcraft.core.logging import configure_logging, get_logger
from mailcraft.errors import MailcraftError
from mailcraft.services import export_message, run_doctor_checks

app = typer.Typer(no_args_is_help=True, help="mailcraft CLI: compose RFC 5322 messages")

IMPORTANCE_VALUES = [member.value for member in Importance]


def _load_settings(base_dir: Path | None = None) -> Settings:
    settings = Settings.load(base_dir=base_dir)
    settings.ensure_directories()
    return settings


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = dt_parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_text(path: Path | None) -> str | None:
    if path is None:
        return None
    return path.read_text(encoding="utf-8")


@app.command("compose")
def compose_command(
    sender: str = typer.Option(..., "--from", help="Sender mailbox, e.g. 'Toni <toni@example.com>'"),
    to: list[str] | None = typer.Option(None, "--to", help="Recipient (repeatable)"),
    cc: list[str] | None = typer.Option(None, "--cc", help="Cc recipient (repeatable)"),
    bcc: list[str] | None = typer.Option(None, "--bcc", help="Bcc recipient (repeatable)"),
    reply_to: list[str] | None = typer.Option(None, "--reply-to", help="Reply-To mailbox (repeatable)"),
    subject: str = typer.Option("", help="Subject line"),
    text: str | None = typer.Option(None, help="Plain text body"),
    text_file: Path | None = typer.Option(None, help="File with the plain text body"),
    html_file: Path | None = typer.Option(None, help="File with the HTML body"),
    attach: list[Path] | None = typer.Option(None, help="File to attach (repeatable)"),
    embed: list[Path] | None = typer.Option(None, help="File to embed inline (repeatable)"),
    charset: str | None = typer.Option(None, help="Message charset (default from MAILCRAFT_CHARSET)"),
    encoding: str | None = typer.Option(None, help="quoted-printable|base64|8bit"),
    boundary: str | None = typer.Option(None, help="Fixed boundary for the outermost envelope"),
    bulk: bool = typer.Option(False, "--bulk/--no-bulk", help="Add 'Precedence: bulk'"),
    importance: str = typer.Option("normal", help=f"Importance: {', '.join(IMPORTANCE_VALUES)}"),
    date: str | None = typer.Option(None, help="Date header value (default: now)"),
    out: Path | None = typer.Option(None, help="Target .eml file (default: outbox directory)"),
    stdout: bool = typer.Option(False, "--stdout", help="Write the message to stdout instead of a file"),
) -> None:
    if importance not in IMPORTANCE_VALUES:
        raise typer.BadParameter(f"Unknown importance: {importance}")

    settings = _load_settings()
    correlation_id = uuid.uuid4().hex
    configure_logging(settings.logs_dir, correlation_id=correlation_id)
    logger = get_logger("mailcraft.compose", correlation_id)

    options = settings.message_options()
    if charset:
        options["charset"] = charset
    if encoding:
        options["encoding"] = Encoding.parse(encoding)
    if boundary:
        options["boundary"] = boundary
    message = Message(**options)

    try:
        message.set_from(sender)
        if to:
            message.set_to(*to)
        if cc:
            message.set_cc(*cc)
        if bcc:
            message.set_bcc(*bcc)
        if reply_to:
            message.set_reply_to(*reply_to)
    except MailcraftError as exc:
        raise typer.BadParameter(str(exc)) from exc

    message.set_subject(subject)
    message.set_date(_parse_date(date))
    message.set_message_id()
    if bulk:
        message.set_bulk()
    message.set_importance(importance)

    plain_body = text if text is not None else _read_text(text_file)
    html_body = _read_text(html_file)
    try:
        if plain_body is not None:
            message.set_body_string(ContentType.TEXT_PLAIN, plain_body)
        if html_body is not None:
            if message.parts:
                message.add_alternative_string(ContentType.TEXT_HTML, html_body)
            else:
                message.set_body_string(ContentType.TEXT_HTML, html_body)
    except UnicodeEncodeError as exc:
        raise typer.BadParameter(f"body text does not fit charset {message.charset}: {exc}") from exc

    for path in attach or []:
        message.attach_file(path)
    for path in embed or []:
        message.embed_file(path)

    try:
        if stdout:
            message.write_to(sys.stdout.buffer, logger=logger)
            sys.stdout.buffer.flush()
            return
        if out is not None:
            target = export_message(message, out.parent.resolve(), filename=out.name)
        else:
            target = export_message(message, settings.outbox_dir)
    except MailcraftError as exc:
        logger.error("Compose failed: %s", exc)
        print(f"[red]Compose failed[/red]: {exc}")
        raise typer.Exit(1) from exc

    print(f"[green]Message written[/green]: {target}")
    print(f"- sender: {message.get_sender(full=True)}")
    try:
        print(f"- recipients: {', '.join(message.get_recipients())}")
    except MailcraftError:
        print("[yellow]- recipients: none[/yellow]")


@app.command("doctor")
def doctor_command() -> None:
    settings = _load_settings()
    checks = run_doctor_checks(settings)

    print("Doctor results:")
    for check in checks:
        status = check["status"].upper()
        print(f"- [{status}] {check['check']}: {check['detail']}")


@app.command("tests")
def tests_command() -> None:
    result = subprocess.run([sys.executable, "-m", "pytest", "-q"], check=False)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)
    print("[green]Tests passed[/green]")


if __name__ == "__main__":
    app()
