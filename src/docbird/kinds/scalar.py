"""Text, boolean and number kinds."""

from __future__ import annotations

from typing import Any

from .base import KindBase


class TextKind(KindBase):
    label = "Text"

    @classmethod
    def validate(cls, value: Any) -> bool:
        return isinstance(value, str)

    @classmethod
    def get_value(cls, value: Any) -> str:
        return str(value)


class BooleanKind(KindBase):
    label = "Boolean"

    @classmethod
    def validate(cls, value: Any) -> bool:
        return isinstance(value, bool)

    @classmethod
    def get_value(cls, value: Any) -> bool:
        return bool(value)


class NumberKind(KindBase):
    label = "Number"

    @classmethod
    def validate(cls, value: Any) -> bool:
        # bool is an int subclass but never a number here
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    @classmethod
    def get_value(cls, value: Any) -> int | float:
        return value
