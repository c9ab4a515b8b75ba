from .model import (
    RECIPIENT_HEADERS,
    AddrHeader,
    AddressBook,
    AddressEntry,
    format_address,
    format_address_list,
    parse_address,
)

__all__ = [
    "AddrHeader",
    "AddressBook",
    "AddressEntry",
    "RECIPIENT_HEADERS",
    "format_address",
    "format_address_list",
    "parse_address",
]
