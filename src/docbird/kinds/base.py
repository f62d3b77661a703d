"""Base class for per-kind value capabilities."""

from __future__ import annotations

from typing import Any


class KindBase:
    """
    Validate/coerce capability for one value kind.

    Subclasses implement `validate` and `get_value` for a single value; the
    array forms are derived from them.
    """

    label: str = "Value"

    @classmethod
    def validate(cls, value: Any) -> bool:
        raise NotImplementedError

    @classmethod
    def get_value(cls, value: Any) -> Any:
        raise NotImplementedError

    @classmethod
    def validate_array(cls, values: Any) -> bool:
        """Return True if `values` is a list/tuple whose every element is valid."""
        if not isinstance(values, (list, tuple)):
            return False
        return all(cls.validate(v) for v in values)

    @classmethod
    def get_value_array(cls, values: Any) -> list[Any]:
        """Coerce every element, preserving order."""
        return [cls.get_value(v) for v in values]
