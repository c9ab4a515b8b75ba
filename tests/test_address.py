from __future__ import annotations

import pytest

from mailcraft.compose import Message
from mailcraft.core.address import AddrHeader, AddressBook, AddressEntry, format_address, parse_address
from mailcraft.core.encoding import WordEncoder
from mailcraft.errors import AddressParseError, NoRecipientsError, NoSenderError


@pytest.mark.parametrize(
    ("raw", "display_name", "address"),
    [
        ("toni@example.com", "", "toni@example.com"),
        ("<toni@example.com>", "", "toni@example.com"),
        ('"Toni Tester" <test@example.com>', "Toni Tester", "test@example.com"),
        ("Toni Tester <test@example.com>", "Toni Tester", "test@example.com"),
        ('"Garcia, Maria" <maria@example.com>', "Garcia, Maria", "maria@example.com"),
        ('"José Martín" <jose@example.com>', "José Martín", "jose@example.com"),
    ],
)
def test_parse_address_round_trip(raw: str, display_name: str, address: str) -> None:
    book = AddressBook()
    book.set_addresses(AddrHeader.TO, raw)

    assert book.entries(AddrHeader.TO) == (AddressEntry(address=address, display_name=display_name),)
    assert parse_address(format_address(book.entries(AddrHeader.TO)[0])) == book.entries(AddrHeader.TO)[0]


@pytest.mark.parametrize(
    "raw",
    ["", "not an address", "toni@", "@example.com", "a@[", "a@example.com, b@example.com", "team: a@example.com;"],
)
def test_parse_address_rejects_invalid_input(raw: str) -> None:
    with pytest.raises(AddressParseError) as exc_info:
        parse_address(raw)
    assert exc_info.value.raw == raw


def test_parse_address_rejects_line_breaks() -> None:
    with pytest.raises(AddressParseError):
        parse_address("toni@example.com\r\nBcc: victim@example.com")


def test_set_addresses_is_all_or_nothing(message: Message) -> None:
    with pytest.raises(AddressParseError) as exc_info:
        message.set_to("first@example.com", "broken", "third@example.com")

    assert "broken" in str(exc_info.value)
    assert [entry.address for entry in message.addresses(AddrHeader.TO)] == ["receiver@example.com"]


def test_lenient_setter_drops_invalid_entries(message: Message) -> None:
    message.set_cc_lenient("first@example.com", "broken", "third@example.com")

    assert [entry.address for entry in message.addresses(AddrHeader.CC)] == [
        "first@example.com",
        "third@example.com",
    ]


def test_from_keeps_most_recent_address(message: Message) -> None:
    message.set_from("first@example.com")
    message.set_from("second@example.com")

    assert message.get_sender() == "second@example.com"
    assert len(message.addresses(AddrHeader.FROM)) == 1


def test_from_collapses_multiple_values_to_first() -> None:
    book = AddressBook()
    book.set_addresses(AddrHeader.FROM, "one@example.com", "two@example.com")

    assert book.entries(AddrHeader.FROM) == (AddressEntry(address="one@example.com"),)


def test_add_address_appends_and_keeps_duplicates(message: Message) -> None:
    message.add_to("second@example.com")
    message.add_to_format("Third Person", "third@example.com")
    message.add_to("second@example.com")

    assert [entry.address for entry in message.addresses(AddrHeader.TO)] == [
        "receiver@example.com",
        "second@example.com",
        "third@example.com",
        "second@example.com",
    ]
    assert message.addresses(AddrHeader.TO)[0].display_name == "Toni Receiver"
    assert message.addresses(AddrHeader.TO)[2].display_name == "Third Person"


def test_add_address_with_invalid_value_keeps_existing(message: Message) -> None:
    with pytest.raises(AddressParseError):
        message.add_cc("broken")
    assert message.addresses(AddrHeader.CC) == ()


def test_get_sender_full_form(message: Message) -> None:
    assert message.get_sender() == "test@example.com"
    assert message.get_sender(full=True) == '"Toni Tester" <test@example.com>'


def test_get_sender_without_from_fails() -> None:
    with pytest.raises(NoSenderError):
        Message().get_sender()


def test_get_recipients_order_is_to_cc_bcc(message: Message) -> None:
    message.set_bcc("hidden@example.com")
    message.set_cc("Copy <copy@example.com>")

    assert message.get_recipients() == ["receiver@example.com", "copy@example.com", "hidden@example.com"]


def test_get_recipients_with_only_from_fails() -> None:
    message = Message()
    message.set_from("test@example.com")

    with pytest.raises(NoRecipientsError):
        message.get_recipients()


def test_format_address_encodes_non_ascii_names() -> None:
    entry = AddressEntry(address="soren@example.com", display_name="Søren Kierkegård")

    rendered = format_address(entry, WordEncoder())

    assert rendered.startswith("=?UTF-8?q?")
    assert rendered.endswith(" <soren@example.com>")


def test_format_address_escapes_quotes() -> None:
    entry = AddressEntry(address="maria@example.com", display_name='Maria "Admin" Garcia')
    assert format_address(entry) == '"Maria \\"Admin\\" Garcia" <maria@example.com>'


def test_lenient_setter_drops_unparsable_domain_literal(message: Message) -> None:
    message.set_to_lenient("a@[", "second@example.com")

    assert [entry.address for entry in message.addresses(AddrHeader.TO)] == ["second@example.com"]


def test_strict_setter_reports_unparsable_domain_literal(message: Message) -> None:
    with pytest.raises(AddressParseError) as exc_info:
        message.set_bcc("a@[")

    assert exc_info.value.raw == "a@["
    assert message.addresses(AddrHeader.BCC) == ()
