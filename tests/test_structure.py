from __future__ import annotations

import io

import pytest

from mailcraft.compose import (
    File,
    Message,
    Part,
    Structure,
    build_plan,
    has_alternative,
    has_mixed,
    has_related,
)
from mailcraft.core.encoding import ContentType, Encoding
from mailcraft.sources import bytes_producer


def _parts(count: int) -> list[Part]:
    return [
        Part(
            content_type=ContentType.TEXT_PLAIN.value,
            charset="UTF-8",
            encoding=Encoding.QP,
            producer=bytes_producer(b"body"),
        )
        for _ in range(count)
    ]


def _files(prefix: str, count: int) -> list[File]:
    return [File(name=f"{prefix}{index}.bin", producer=bytes_producer(b"data")) for index in range(count)]


# (parts, attachments, embeds, alternative, mixed, related, structure)
STRUCTURE_TABLE = [
    (0, 0, 0, False, False, False, Structure.EMPTY),
    (0, 0, 1, False, False, False, Structure.PLAIN),
    (0, 0, 2, False, False, True, Structure.RELATED),
    (0, 1, 0, False, False, False, Structure.PLAIN),
    (0, 1, 1, False, False, False, Structure.MIXED),
    (0, 1, 2, False, False, True, Structure.RELATED),
    (0, 2, 0, False, True, False, Structure.MIXED),
    (0, 2, 1, False, True, False, Structure.MIXED),
    (0, 2, 2, False, True, True, Structure.MIXED_RELATED),
    (1, 0, 0, False, False, False, Structure.PLAIN),
    (1, 0, 1, False, False, True, Structure.RELATED),
    (1, 0, 2, False, False, True, Structure.RELATED),
    (1, 1, 0, False, True, False, Structure.MIXED),
    (1, 1, 1, False, True, True, Structure.MIXED_RELATED),
    (1, 1, 2, False, True, True, Structure.MIXED_RELATED),
    (1, 2, 0, False, True, False, Structure.MIXED),
    (1, 2, 1, False, True, True, Structure.MIXED_RELATED),
    (1, 2, 2, False, True, True, Structure.MIXED_RELATED),
    (2, 0, 0, True, False, False, Structure.ALTERNATIVE),
    (2, 0, 1, True, False, True, Structure.RELATED_ALTERNATIVE),
    (2, 0, 2, True, False, True, Structure.RELATED_ALTERNATIVE),
    (2, 1, 0, True, True, False, Structure.MIXED_ALTERNATIVE),
    (2, 1, 1, True, True, True, Structure.MIXED_RELATED_ALTERNATIVE),
    (2, 1, 2, True, True, True, Structure.MIXED_RELATED_ALTERNATIVE),
    (2, 2, 0, True, True, False, Structure.MIXED_ALTERNATIVE),
    (2, 2, 1, True, True, True, Structure.MIXED_RELATED_ALTERNATIVE),
    (2, 2, 2, True, True, True, Structure.MIXED_RELATED_ALTERNATIVE),
]


@pytest.mark.parametrize(
    ("n_parts", "n_attachments", "n_embeds", "alternative", "mixed", "related", "structure"),
    STRUCTURE_TABLE,
)
def test_structure_predicates_and_plan(
    n_parts: int,
    n_attachments: int,
    n_embeds: int,
    alternative: bool,
    mixed: bool,
    related: bool,
    structure: Structure,
) -> None:
    parts = _parts(n_parts)
    attachments = _files("attachment", n_attachments)
    embeds = _files("embed", n_embeds)

    assert has_alternative(parts) is alternative
    assert has_mixed(parts, attachments) is mixed
    assert has_related(parts, embeds) is related

    plan = build_plan(parts, attachments, embeds)
    assert plan.structure is structure

    placed = list(plan.leaves)
    for envelope in plan.envelopes:
        placed.extend(envelope.trailing)
    assert sorted(map(id, placed)) == sorted(map(id, [*parts, *attachments, *embeds]))


def test_plan_nesting_order_is_mixed_related_alternative() -> None:
    plan = build_plan(_parts(2), _files("a", 1), _files("e", 1))

    assert [envelope.content_type for envelope in plan.envelopes] == [
        "multipart/mixed",
        "multipart/related",
        "multipart/alternative",
    ]
    assert [unit.name for unit in plan.envelopes[0].trailing] == ["a0.bin"]
    assert [unit.name for unit in plan.envelopes[1].trailing] == ["e0.bin"]
    assert plan.envelopes[2].trailing == []
    assert len(plan.leaves) == 2


def test_plan_boundaries_are_unique() -> None:
    plan = build_plan(_parts(2), _files("a", 2), _files("e", 2))

    assert len(plan.boundaries) == 3
    assert len(set(plan.boundaries)) == 3
    assert all(len(boundary) == 60 for boundary in plan.boundaries)


def test_fixed_boundary_applies_to_outermost_envelope_only() -> None:
    plan = build_plan(_parts(2), _files("a", 1), [], boundary="fixed-boundary")

    assert plan.boundaries[0] == "fixed-boundary"
    assert plan.boundaries[1] != "fixed-boundary"


def test_plan_without_envelopes_ignores_fixed_boundary() -> None:
    plan = build_plan(_parts(1), [], [], boundary="fixed-boundary")

    assert plan.structure is Structure.PLAIN
    assert plan.envelopes == []


def test_message_has_alternative_transition(message: Message) -> None:
    assert message.has_alternative is False

    message.set_body_string(ContentType.TEXT_PLAIN, "Plain")
    assert message.has_alternative is False

    message.add_alternative_string(ContentType.TEXT_HTML, "<p>HTML</p>")
    assert message.has_alternative is True

    message.set_body_string(ContentType.TEXT_PLAIN, "Plain again")
    assert message.has_alternative is False
    assert len(message.parts) == 1


def test_message_mixed_and_related_predicates(message: Message) -> None:
    message.attach_reader("one.txt", io.BytesIO(b"1"))
    assert message.has_mixed is False

    message.set_body_string(ContentType.TEXT_PLAIN, "Body")
    assert message.has_mixed is True
    assert message.has_related is False

    message.embed_reader("logo.png", io.BytesIO(b"png"))
    assert message.has_related is True


def test_parts_capture_charset_and_encoding_when_added(message: Message) -> None:
    message.set_body_string(ContentType.TEXT_PLAIN, "Plain")
    message.set_charset("ISO-8859-1")
    message.set_encoding(Encoding.BASE64)
    message.add_alternative_string(ContentType.TEXT_HTML, "<p>HTML</p>")

    first, second = message.parts
    assert (first.charset, first.encoding) == ("UTF-8", Encoding.QP)
    assert (second.charset, second.encoding) == ("ISO-8859-1", Encoding.BASE64)


def test_part_encoding_override(message: Message) -> None:
    message.set_body_string(ContentType.TEXT_PLAIN, "Plain", encoding="8bit")
    assert message.parts[0].encoding is Encoding.NONE


def test_body_text_outside_charset_is_rejected() -> None:
    message = Message(charset="ISO-8859-1")

    with pytest.raises(UnicodeEncodeError):
        message.set_body_string(ContentType.TEXT_PLAIN, "Привет")
    assert message.parts == ()
