"""MIME nesting plan.

The structure of a message body is decided once per serialization pass from
the counts of parts, attachments and embeds::

    multipart/mixed          (attachments trail the nested content)
      multipart/related      (embeds trail the nested content)
        multipart/alternative
          part, part, ...

Each level is present only when its predicate holds. The plan is a flat list
of envelopes, outermost first, plus the leaves that sit inside the innermost
envelope (or form the whole body when there is no envelope).
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .parts import File, Part

Leaf = Union[Part, File]


class Structure(str, Enum):
    EMPTY = "empty"
    PLAIN = "plain"
    ALTERNATIVE = "alternative"
    RELATED = "related"
    RELATED_ALTERNATIVE = "related+alternative"
    MIXED = "mixed"
    MIXED_ALTERNATIVE = "mixed+alternative"
    MIXED_RELATED = "mixed+related"
    MIXED_RELATED_ALTERNATIVE = "mixed+related+alternative"


def has_alternative(parts: list[Part]) -> bool:
    return len(parts) > 1


def has_mixed(parts: list[Part], attachments: list[File]) -> bool:
    return (len(parts) > 0 and len(attachments) > 0) or len(attachments) > 1


def has_related(parts: list[Part], embeds: list[File]) -> bool:
    return (len(parts) > 0 and len(embeds) > 0) or len(embeds) > 1


def random_boundary() -> str:
    return secrets.token_hex(30)


@dataclass(slots=True)
class Envelope:
    subtype: str
    boundary: str
    trailing: list[File] = field(default_factory=list)

    @property
    def content_type(self) -> str:
        return f"multipart/{self.subtype}"


@dataclass(slots=True)
class NestingPlan:
    structure: Structure
    envelopes: list[Envelope]
    leaves: list[Leaf]

    @property
    def boundaries(self) -> list[str]:
        return [envelope.boundary for envelope in self.envelopes]


def _structure_for(subtypes: list[str], leaves: list[Leaf]) -> Structure:
    if not subtypes:
        return Structure.PLAIN if leaves else Structure.EMPTY
    return Structure("+".join(subtypes))


def build_plan(
    parts: list[Part],
    attachments: list[File],
    embeds: list[File],
    boundary: str | None = None,
) -> NestingPlan:
    mixed = has_mixed(parts, attachments)
    related = has_related(parts, embeds)
    alternative = has_alternative(parts)

    leaves: list[Leaf] = list(parts)
    # A lone embed or attachment without any body part is not wrapped by its
    # own envelope and becomes a leaf.
    if not related:
        leaves.extend(embeds)
    if not mixed:
        leaves.extend(attachments)

    levels: list[tuple[str, list[File]]] = []
    if mixed:
        levels.append(("mixed", list(attachments)))
    if related:
        levels.append(("related", list(embeds)))
    if alternative:
        levels.append(("alternative", []))
    if not levels and len(leaves) > 1:
        # One embed plus one attachment and no body: siblings still need a container.
        levels.append(("mixed", []))

    envelopes: list[Envelope] = []
    used: set[str] = set()
    for index, (subtype, trailing) in enumerate(levels):
        value = boundary if index == 0 and boundary else random_boundary()
        while value in used:
            value = random_boundary()
        used.add(value)
        envelopes.append(Envelope(subtype=subtype, boundary=value, trailing=trailing))

    return NestingPlan(
        structure=_structure_for([subtype for subtype, _ in levels], leaves),
        envelopes=envelopes,
        leaves=leaves,
    )
