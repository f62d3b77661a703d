"""Tests for field definitions and shape resolution."""

from datetime import date, datetime
from typing import List

import polars as pl
import pytest

from docbird import (
    ArrayOf,
    Boolean,
    Date,
    Number,
    Opaque,
    Reference,
    Text,
    Unrecognized,
    resolve_field,
)


class TestFieldTypes:
    """Test basic field type functionality."""

    def test_text_type_definitions(self):
        """Text field getter methods return correct type information."""
        field = Text()
        assert field.get_python_type() is str
        assert field.get_polars_dtype() == pl.Utf8
        assert field.label == "Text"

    def test_boolean_type_definitions(self):
        field = Boolean()
        assert field.get_python_type() is bool
        assert field.get_polars_dtype() == pl.Boolean
        assert field.label == "Boolean"

    def test_date_type_definitions(self):
        field = Date()
        assert field.get_python_type() is datetime
        assert field.get_polars_dtype() == pl.Datetime
        assert field.label == "Date"

    def test_number_type_definitions(self):
        field = Number()
        assert field.get_python_type() is float
        assert field.get_polars_dtype() == pl.Float64
        assert field.label == "Number"

    def test_reference_type_definitions(self):
        """References are stored as document ID strings."""
        field = Reference("User")
        assert field.model == "User"
        assert field.get_python_type() is str
        assert field.get_polars_dtype() == pl.Utf8
        assert field.label == "Document ID"

    def test_array_type_definitions(self):
        """Array labels and dtypes wrap the element's."""
        field = ArrayOf(Reference("Tag"))
        assert field.is_reference
        assert field.label == "Array<Document ID>"
        assert field.get_python_type() == list[str]
        assert field.get_polars_dtype() == pl.List(pl.Utf8)
        assert not ArrayOf(Text()).is_reference

    def test_opaque_always_valid(self):
        """Opaque fields accept and keep anything."""
        field = Opaque()
        nested = {"a": [1, {"b": 2}]}
        assert field.validate(nested)
        assert field.validate(None)
        assert field.get_value(nested) is nested
        assert field.get_polars_dtype() is None

    def test_unrecognized_is_a_no_op(self):
        """Unrecognized shapes never validate and produce no value."""
        field = Unrecognized(set)
        assert not field.recognized
        assert not field.validate("anything")
        assert field.get_value("anything") is None

    def test_array_rejects_nested_arrays(self):
        """Only scalars and references can be array elements."""
        with pytest.raises(TypeError, match="scalar or Reference"):
            ArrayOf(ArrayOf(Text()))  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            ArrayOf(Opaque())  # type: ignore[arg-type]


class TestFieldValidation:
    """Test validate/get_value dispatch on field instances."""

    def test_scalar_array_validation(self):
        field = ArrayOf(Number())
        assert field.validate([1, 2.5])
        assert not field.validate([1, True])
        assert field.get_value([1, 2.5]) == [1, 2.5]

    def test_date_array_coercion(self):
        field = ArrayOf(Date())
        assert field.get_value([date(2024, 1, 1)]) == [datetime(2024, 1, 1)]

    def test_reference_array_validation(self):
        field = ArrayOf(Reference("Tag"))
        assert field.validate(["a", "b"])
        assert not field.validate(["a", {"_id": "b"}])


class TestResolveField:
    """Test shorthand shape resolution."""

    @pytest.mark.parametrize(
        "shape, expected",
        [
            (str, Text()),
            (bool, Boolean()),
            (datetime, Date()),
            (date, Date()),
            (int, Number()),
            (float, Number()),
            (dict, Opaque()),
            ({"ref": "User"}, Reference("User")),
            ([str], ArrayOf(Text())),
            ([{"ref": "Tag"}], ArrayOf(Reference("Tag"))),
            (list[int], ArrayOf(Number())),
            (List[bool], ArrayOf(Boolean())),  # noqa: UP006
            ({"nested": str}, Opaque()),
            ([dict], Opaque()),
            ([[str]], Opaque()),
            ([str, int], Opaque()),
            ([], Opaque()),
        ],
    )
    def test_shorthand_shapes(self, shape, expected):
        assert resolve_field(shape) == expected

    def test_field_instances_pass_through(self):
        field = Text(description="Title")
        assert resolve_field(field) is field

    @pytest.mark.parametrize("shape", [set, "text", 42, None])
    def test_unknown_shapes_are_unrecognized(self, shape):
        assert isinstance(resolve_field(shape), Unrecognized)
