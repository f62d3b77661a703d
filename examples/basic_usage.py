"""
Basic Usage Example: Authors and Posts

This example walks through the core Docbird workflow:
1. Declare schemas with typed fields and references
2. Build documents for writes (validation, coercion, deletes)
3. Resolve references and virtual fields on reads
4. Run pre-operation hooks
"""

import asyncio
from datetime import datetime
from typing import Any

from docbird import UNSET, ArrayOf, BuildError, ModelRegistry, Reference, Schema


class MemoryModel:
    """Minimal in-memory model, standing in for a real store-backed one."""

    def __init__(self, name: str, schema: Schema):
        self.name = name
        self.schema = schema
        self.documents: dict[str, dict[str, Any]] = {}
        schema.attach_model(self)

    def save(self, document: dict[str, Any]) -> None:
        built = self.schema.build(document, clean_refs=True)
        self.documents[built["_id"]] = built

    async def find_by_id(self, doc_id: str, populate: bool = False):
        document = self.documents.get(doc_id)
        if document is None:
            return None
        document = dict(document)
        if populate:
            document = await self.schema.apply_populates(document)
        return document

    async def find(self, field: str, operator: str, value: Any, populate: bool = False):
        assert operator == "=="
        return [dict(d) for d in self.documents.values() if d.get(field) == value]


user_schema = Schema({"name": str, "joined": datetime})
post_schema = Schema(
    {
        "title": str,
        "views": int,
        "author": Reference("User"),
        "co_authors": ArrayOf(Reference("User")),
        "meta": dict,
    }
)


async def main() -> None:
    users = MemoryModel("User", user_schema)
    posts = MemoryModel("Post", post_schema)

    registry = ModelRegistry([users, posts])
    user_schema.attach_registry(registry)
    post_schema.attach_registry(registry)

    post_schema.populate({"path": "author", "model": "User"})
    post_schema.populate({"path": "co_authors", "model": "User"})
    user_schema.virtual(
        "posts", {"ref": "Post", "localField": "_id", "foreignField": "author"}
    )

    @post_schema.pre("save")
    async def announce(schema, next):
        print(f"About to save a {schema.model_name}")

    # 1. Writes: values are validated, then coerced
    users.save({"_id": "ada", "name": "Ada", "joined": "2024-01-05T09:00:00"})
    users.save({"_id": "grace", "name": "Grace", "joined": datetime(2024, 2, 1)})

    await post_schema.run_hooks("save")
    posts.save(
        {
            "_id": "p1",
            "title": "Notes on engines",
            "views": 10,
            # A populated document collapses back to its ID
            "author": await users.find_by_id("ada"),
            "co_authors": ["grace"],
            "meta": {"draft": False},
        }
    )

    # Invalid values abort the whole build
    try:
        posts.save({"_id": "p2", "title": 42})
    except BuildError as e:
        print(f"Rejected: {e}")

    # Partial update that removes a field
    print(post_schema.build({"meta": UNSET}, remove_id=True, include_deletes=True))

    # 2. Reads: resolve references, then virtual fields
    post = await posts.find_by_id("p1", populate=True)
    print(post["author"]["name"], [u["name"] for u in post["co_authors"]])

    ada = await users.find_by_id("ada")
    ada = await user_schema.apply_virtuals(ada)
    print([p["title"] for p in ada["posts"]])

    # 3. Columnar export
    print(post_schema.to_polars(posts.documents.values()))


if __name__ == "__main__":
    asyncio.run(main())
