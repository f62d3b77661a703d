"""Shared fixtures for docbird tests."""

from datetime import datetime
from typing import Any

import pytest

from docbird import ArrayOf, ModelRegistry, Reference, Schema


class StubModel:
    """In-memory model that records every read it serves."""

    def __init__(self, name: str, schema: Schema, documents: list[dict] | None = None):
        self.name = name
        self.schema = schema
        self.documents = {d["_id"]: d for d in documents or []}
        self.fetched: list[tuple[str, bool]] = []
        self.queries: list[tuple[str, str, Any, bool]] = []
        schema.attach_model(self)

    async def find_by_id(self, doc_id: str, populate: bool = False) -> dict | None:
        self.fetched.append((doc_id, populate))
        document = self.documents.get(doc_id)
        return dict(document) if document is not None else None

    async def find(
        self, field: str, operator: str, value: Any, populate: bool = False
    ) -> list[dict]:
        self.queries.append((field, operator, value, populate))
        return [dict(d) for d in self.documents.values() if d.get(field) == value]


class StubStore:
    """Store client exposing its own delete marker."""

    delete_marker = object()


@pytest.fixture
def post_schema():
    """Schema covering every field shape, owned by an empty Post model."""
    schema = Schema(
        {
            "title": str,
            "published": bool,
            "published_at": datetime,
            "views": int,
            "author": Reference("User"),
            "tags": ArrayOf(Reference("Tag")),
            "keywords": [str],
            "meta": dict,
        }
    )
    StubModel("Post", schema)
    return schema


@pytest.fixture
def users():
    schema = Schema({"name": str, "email": str})
    return StubModel(
        "User",
        schema,
        [
            {"_id": "u1", "name": "Ada", "email": "ada@example.com"},
            {"_id": "u2", "name": "Grace", "email": "grace@example.com"},
        ],
    )


@pytest.fixture
def tags():
    schema = Schema({"label": str})
    return StubModel(
        "Tag",
        schema,
        [
            {"_id": "a", "label": "alpha"},
            {"_id": "b", "label": "beta"},
            {"_id": "c", "label": "gamma"},
        ],
    )


@pytest.fixture
def posts(users, tags):
    """Post model wired to a registry holding users, tags and posts."""
    schema = Schema(
        {
            "title": str,
            "author": Reference("User"),
            "tags": ArrayOf(Reference("Tag")),
        }
    )
    model = StubModel(
        "Post",
        schema,
        [
            {"_id": "p1", "title": "One", "author": "u1", "tags": ["a"]},
            {"_id": "p2", "title": "Two", "author": "u2", "tags": []},
            {"_id": "p3", "title": "Three", "author": "u1", "tags": ["b", "c"]},
        ],
    )
    registry = ModelRegistry([users, tags, model])
    for m in registry.values():
        m.schema.attach_registry(registry)
    return model
