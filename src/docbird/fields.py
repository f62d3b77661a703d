"""Field definitions for document schemas."""

from datetime import date, datetime
from typing import Any, Mapping, get_args, get_origin

import polars as pl
from loguru import logger

from .kinds import (
    BooleanKind,
    DateKind,
    KindBase,
    NumberKind,
    ReferenceKind,
    TextKind,
)


class _Unset:
    """Type of the `UNSET` sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Explicit "unset" value: the key is present but carries no value. With
# include_deletes it becomes the store's delete marker on build.
UNSET: Any = _Unset()

# Type mapping from Python types to scalar Field classes (populated at module end)
_TYPE_MAP: dict[type, type["FieldBase"]] = {}


class FieldBase:
    """
    Base class for a declared field shape.

    Every field definition owns a validate/coerce pair. Subclasses form a
    closed set: `Text`, `Boolean`, `Date`, `Number`, `Reference`, `ArrayOf`,
    `Opaque`, and `Unrecognized` for shapes that match none of them.

    Parameters
    ----------
    description : str, optional
        Human-readable description of this field.
    """

    # Only recognized shapes raise on validation failure
    recognized: bool = True

    def __init__(self, *, description: str | None = None):
        self.description = description
        self.name: str | None = None  # Set by Schema

    @property
    def label(self) -> str:
        """Human-readable type label used in validation errors."""
        raise NotImplementedError

    def validate(self, value: Any) -> bool:
        raise NotImplementedError

    def get_value(self, value: Any) -> Any:
        raise NotImplementedError

    def get_python_type(self) -> Any:
        """Return the Python type for this field."""
        raise NotImplementedError

    def get_polars_dtype(self):
        """Return the Polars dtype for this field, or None if it has no column form."""
        return None

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._identity() == other._identity()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._identity()))

    def _identity(self) -> tuple:
        return ()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class _ScalarField(FieldBase):
    """Scalar field delegating to a kind capability."""

    kind: type[KindBase]

    @property
    def label(self) -> str:
        return self.kind.label

    def validate(self, value: Any) -> bool:
        return self.kind.validate(value)

    def get_value(self, value: Any) -> Any:
        return self.kind.get_value(value)


class Text(_ScalarField):
    """
    Text field.

    Examples
    --------
        >>> from docbird import Schema, Text
        >>> schema = Schema({"title": Text(), "subtitle": str})
    """

    kind = TextKind

    def get_python_type(self):
        return str

    def get_polars_dtype(self):
        return pl.Utf8


class Boolean(_ScalarField):
    """Boolean field."""

    kind = BooleanKind

    def get_python_type(self):
        return bool

    def get_polars_dtype(self):
        return pl.Boolean


class Date(_ScalarField):
    """
    Date field.

    Accepts `datetime`, `date` or ISO-8601 strings and stores a `datetime`.
    """

    kind = DateKind

    def get_python_type(self):
        return datetime

    def get_polars_dtype(self):
        return pl.Datetime


class Number(_ScalarField):
    """Numeric field (int or float, never bool)."""

    kind = NumberKind

    def get_python_type(self):
        return float

    def get_polars_dtype(self):
        return pl.Float64


class Reference(FieldBase):
    """
    Reference to a document in another model's collection.

    The stored value is the referenced document's ID. Reads may replace it
    with the full document through `Schema.populate()`.

    Parameters
    ----------
    model : str
        Name of the target model in the model registry.

    Examples
    --------
        >>> from docbird import ArrayOf, Reference, Schema
        >>> schema = Schema({
        ...     "author": Reference("User"),
        ...     "tags": ArrayOf(Reference("Tag")),
        ... })
    """

    def __init__(self, model: str, **kwargs):
        super().__init__(**kwargs)
        self.model = model

    @property
    def label(self) -> str:
        return ReferenceKind.label

    def validate(self, value: Any) -> bool:
        return ReferenceKind.validate(value)

    def get_value(self, value: Any) -> Any:
        return ReferenceKind.get_value(value)

    def get_python_type(self):
        return str

    def get_polars_dtype(self):
        return pl.Utf8

    def _identity(self) -> tuple:
        return (self.model,)

    def __repr__(self) -> str:
        return f"Reference({self.model!r})"


class ArrayOf(FieldBase):
    """
    Array of a scalar kind or of references.

    Parameters
    ----------
    inner : FieldBase
        Element definition. Must be a scalar field or a `Reference`.
    """

    def __init__(self, inner: FieldBase, **kwargs):
        if not isinstance(inner, (_ScalarField, Reference)):
            raise TypeError(
                f"ArrayOf() takes a scalar or Reference element, got {inner!r}"
            )
        super().__init__(**kwargs)
        self.inner = inner

    @property
    def is_reference(self) -> bool:
        return isinstance(self.inner, Reference)

    @property
    def _kind(self) -> type[KindBase]:
        if isinstance(self.inner, Reference):
            return ReferenceKind
        return self.inner.kind  # type: ignore[union-attr]

    @property
    def label(self) -> str:
        return f"Array<{self.inner.label}>"

    def validate(self, value: Any) -> bool:
        return self._kind.validate_array(value)

    def get_value(self, value: Any) -> list[Any]:
        return self._kind.get_value_array(value)

    def get_python_type(self):
        return list[self.inner.get_python_type()]  # type: ignore[misc]

    def get_polars_dtype(self):
        return pl.List(self.inner.get_polars_dtype())

    def _identity(self) -> tuple:
        return (self.inner,)

    def __repr__(self) -> str:
        return f"ArrayOf({self.inner!r})"


class Opaque(FieldBase):
    """Free-form nested object. Always valid, stored unchanged."""

    @property
    def label(self) -> str:
        return "Object"

    def validate(self, value: Any) -> bool:
        return True

    def get_value(self, value: Any) -> Any:
        return value

    def get_python_type(self):
        return Any


class Unrecognized(FieldBase):
    """
    A declared shape that matches none of the known forms.

    Validation yields False and coercion yields None, without raising.
    """

    recognized = False

    def __init__(self, shape: Any):
        super().__init__()
        self.shape = shape

    @property
    def label(self) -> str:
        return "Unknown"

    def validate(self, value: Any) -> bool:
        return False

    def get_value(self, value: Any) -> None:
        return None

    def get_python_type(self):
        return None

    def _identity(self) -> tuple:
        return (repr(self.shape),)

    def __repr__(self) -> str:
        return f"Unrecognized({self.shape!r})"


# Populate type mapping from Python types to Field classes
# This is used by resolve_field to accept bare types as shorthand
_TYPE_MAP.update(
    {
        str: Text,
        bool: Boolean,
        datetime: Date,
        date: Date,
        int: Number,
        float: Number,
        dict: Opaque,
    }
)


def get_field_class_for_type(python_type: Any) -> type[FieldBase] | None:
    """
    Get the Field class for a Python type.

    Parameters
    ----------
    python_type : type
        A Python type (str, bool, datetime, date, int, float, dict).

    Returns
    -------
    type[FieldBase] | None
        The corresponding Field class, or None if not found.
    """
    try:
        return _TYPE_MAP.get(python_type)
    except TypeError:  # unhashable shapes
        return None


def resolve_field(shape: Any) -> FieldBase:
    """
    Turn a declared shape into a field definition.

    Accepts field instances, bare Python types, ``{"ref": "Model"}`` for
    references, and ``[shape]`` or ``list[shape]`` for arrays of scalars or
    references. Other list shapes (``[dict]``, ``[[str]]``) are `Opaque`.
    Anything else resolves to `Unrecognized`.

    Examples
    --------
        >>> resolve_field(str)
        Text()
        >>> resolve_field([{"ref": "User"}])
        ArrayOf(Reference('User'))
        >>> resolve_field(list[int])
        ArrayOf(Number())
    """
    if isinstance(shape, FieldBase):
        return shape

    field_class = get_field_class_for_type(shape)
    if field_class is not None:
        return field_class()

    if isinstance(shape, Mapping):
        if "ref" in shape:
            return Reference(shape["ref"])
        # Plain nested objects are free-form
        return Opaque()

    # list[str] / typing.List[str]
    if get_origin(shape) is list:
        args = get_args(shape)
        shape = [args[0]] if args else shape

    if isinstance(shape, list):
        if len(shape) == 1:
            inner = resolve_field(shape[0])
            if isinstance(inner, (_ScalarField, Reference)):
                return ArrayOf(inner)
        # Any other array shape holds free-form values
        return Opaque()

    logger.debug(f"Unrecognized field shape: {shape!r}")
    return Unrecognized(shape)
