from .message import Message
from .parts import File, Part
from .plan import Envelope, NestingPlan, Structure, build_plan, has_alternative, has_mixed, has_related
from .writer import MessageWriter, WriterState, fold_header

__all__ = [
    "Envelope",
    "File",
    "Message",
    "MessageWriter",
    "NestingPlan",
    "Part",
    "Structure",
    "WriterState",
    "build_plan",
    "fold_header",
    "has_alternative",
    "has_mixed",
    "has_related",
]
