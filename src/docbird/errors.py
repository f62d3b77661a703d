"""Exceptions raised while validating and building documents."""

from typing import Any


class FieldValidationError(ValueError):
    """A field value does not satisfy its declared type."""

    def __init__(self, model_name: str, key: str, expected: str, value: Any):
        self.model_name = model_name
        self.key = key
        self.expected = expected
        self.value = value
        super().__init__(
            f"{model_name} property '{key}' is invalid. "
            f"Expected {expected}. Value: {value}."
        )


class BuildError(ValueError):
    """
    Building a document failed.

    Raised from the underlying `FieldValidationError`, which stays reachable
    as `cause` and through ``__cause__``.
    """

    def __init__(self, model_name: str, cause: Exception):
        self.model_name = model_name
        self.cause = cause
        super().__init__(
            f"Error processing {model_name}. Operation Failed. "
            f"Inner Exception: {cause}"
        )
