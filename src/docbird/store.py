"""Boundary protocols for the owning model and the store client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .base import Schema


class _DeleteField:
    """Default delete marker: asks the store to drop a field on partial update."""

    def __repr__(self) -> str:
        return "DELETE_FIELD"


DELETE_FIELD: Any = _DeleteField()


@runtime_checkable
class Model(Protocol):
    """
    The entity owning a schema.

    Models are looked up by `name` when resolving references, and provide the
    two reads that populate and virtual resolution need.
    """

    name: str
    schema: Schema

    async def find_by_id(
        self, doc_id: str, populate: bool = False
    ) -> dict[str, Any] | None: ...

    async def find(
        self, field: str, operator: str, value: Any, populate: bool = False
    ) -> list[dict[str, Any]]: ...


@runtime_checkable
class StoreClient(Protocol):
    """Store client; supplies the sentinel used to delete a field."""

    delete_marker: Any
