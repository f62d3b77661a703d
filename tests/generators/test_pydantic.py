"""Tests for Pydantic model generation."""

import sys
from datetime import datetime

import pytest
from pydantic import ValidationError

from docbird import Schema, Text
from docbird.generators import DocumentModel

# Skip Pydantic tests on Python 3.14+ due to compatibility issues with Pydantic v2
PYTHON_314_PLUS = sys.version_info >= (3, 14)

pytestmark = pytest.mark.skipif(
    PYTHON_314_PLUS, reason="Pydantic v2 compatibility issue with Python 3.14+"
)


class TestPydanticModelGeneration:
    """Test Pydantic model generation from schemas."""

    def test_model_named_after_owning_model(self, post_schema):
        PostDocument = post_schema.to_pydantic()
        assert PostDocument.__name__ == "PostDocument"
        assert issubclass(PostDocument, DocumentModel)

    def test_explicit_name(self, post_schema):
        assert post_schema.to_pydantic(name="Article").__name__ == "Article"

    def test_unattached_schema_default_name(self):
        assert Schema({"a": str}).to_pydantic().__name__ == "Document"

    def test_document_round_trips_through_aliases(self, post_schema):
        """Structural keys are read and written under their stored names."""
        PostDocument = post_schema.to_pydantic()
        post = PostDocument.model_validate(
            {"_id": "p1", "_c": "2024-01-01", "title": "Hello", "tags": ["a", "b"]}
        )

        assert post.id == "p1"
        assert post.created == "2024-01-01"
        assert post.title == "Hello"
        assert post.tags == ["a", "b"]
        assert post.model_dump(by_alias=True, exclude_none=True) == {
            "_id": "p1",
            "_c": "2024-01-01",
            "title": "Hello",
            "tags": ["a", "b"],
        }

    def test_field_types_enforced(self, post_schema):
        PostDocument = post_schema.to_pydantic()

        post = PostDocument(published_at="2024-01-01T10:00:00", views=3)
        assert post.published_at == datetime(2024, 1, 1, 10, 0)

        with pytest.raises(ValidationError):
            PostDocument(keywords="not-a-list")
        with pytest.raises(ValidationError):
            PostDocument(views="many")

        # Opaque fields take any nested value
        assert PostDocument(meta=[1, {"a": 2}]).meta == [1, {"a": 2}]

    def test_all_fields_optional(self, post_schema):
        post = post_schema.to_pydantic()()
        assert post.title is None
        assert post.id is None

    def test_descriptions_carried(self):
        schema = Schema({"title": Text(description="Headline")})
        model = schema.to_pydantic()
        assert model.model_fields["title"].description == "Headline"

    def test_unrecognized_fields_skipped(self):
        model = Schema({"odd": "??", "name": str}).to_pydantic()
        assert "odd" not in model.model_fields
        assert "name" in model.model_fields

    def test_structural_names_keep_their_aliases(self):
        """Declared `id`/`created`/`updated` fields do not shadow `_id`/`_c`/`_u`."""
        schema = Schema({"id": int, "created": str, "updated": bool, "name": str})
        document_model = schema.to_pydantic()

        doc = document_model.model_validate(
            {"_id": "d1", "_c": "then", "_u": "now", "name": "x"}
        )

        assert doc.id == "d1"
        assert doc.created == "then"
        assert doc.updated == "now"
        assert doc.model_dump(by_alias=True, exclude_none=True) == {
            "_id": "d1",
            "_c": "then",
            "_u": "now",
            "name": "x",
        }
