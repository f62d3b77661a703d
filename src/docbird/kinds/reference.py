"""Document ID kind used by reference fields."""

from __future__ import annotations

import re
from typing import Any

from .base import KindBase

MAX_ID_BYTES = 1500

# IDs of the form __foo__ are reserved by the store
_RESERVED_ID = re.compile(r"^__.*__$")


class ReferenceKind(KindBase):
    """
    Identity strings of referenced documents.

    A valid ID is a non-empty string of at most 1500 UTF-8 bytes that contains
    no ``/``, is not ``.`` or ``..`` and does not match ``__.*__``.
    """

    label = "Document ID"

    @classmethod
    def validate(cls, value: Any) -> bool:
        if not isinstance(value, str) or not value:
            return False
        if len(value.encode("utf-8")) > MAX_ID_BYTES:
            return False
        if "/" in value or value in (".", ".."):
            return False
        return _RESERVED_ID.match(value) is None

    @classmethod
    def get_value(cls, value: Any) -> str:
        return value
