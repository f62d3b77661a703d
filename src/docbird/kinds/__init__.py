"""Per-kind validate/coerce capabilities used by field definitions."""

from .base import KindBase
from .date import DateKind
from .reference import ReferenceKind
from .scalar import BooleanKind, NumberKind, TextKind

__all__ = [
    "KindBase",
    "TextKind",
    "BooleanKind",
    "DateKind",
    "NumberKind",
    "ReferenceKind",
]
