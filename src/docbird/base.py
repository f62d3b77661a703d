"""Core `Schema` class: validation, document building and relationship resolution."""

from __future__ import annotations

import copy
import inspect
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

from .descriptors import HookDef, PopulateDef, UploadDef, VirtualDef, VirtualEntry
from .errors import BuildError, FieldValidationError
from .fields import UNSET, ArrayOf, FieldBase, Reference, resolve_field
from .registry import ModelRegistry
from .store import DELETE_FIELD, Model, StoreClient

if TYPE_CHECKING:
    import polars as pl
    from pydantic import BaseModel

Document = dict[str, Any]

# Structural keys; never routed through type dispatch
ID_KEY = "_id"
CREATED_KEY = "_c"
UPDATED_KEY = "_u"


def _next() -> None:
    """No-op continuation handed to hook callbacks."""
    return None


class Schema:
    """
    Field definitions and read/write mapping for one model's documents.

    The field map is fixed at construction. Populates, virtuals, uploads and
    hooks are registered afterwards; registries only grow and keep the first
    entry for each key.

    Parameters
    ----------
    fields : Mapping[str, Any]
        Field name to field definition. Values may be field instances or
        shorthand shapes (see `docbird.fields.resolve_field`).
    delete_marker : Any, optional
        Value emitted by `build(include_deletes=True)` for unset fields.
        Replaced by the store's marker when a store is attached.

    Examples
    --------
    Defining a schema:

        >>> from datetime import datetime
        >>> from docbird import ArrayOf, Reference, Schema
        >>> post_schema = Schema({
        ...     "title": str,
        ...     "published": bool,
        ...     "published_at": datetime,
        ...     "views": int,
        ...     "author": Reference("User"),
        ...     "tags": [{"ref": "Tag"}],
        ...     "meta": dict,
        ... })

    Building a document for a write:

        >>> post_schema.build({"_id": "p1", "title": "Hello", "views": 3})
        {'title': 'Hello', 'views': 3, '_id': 'p1'}

    Resolving references on read:

        >>> post_schema.populate({"path": "author", "model": "User"})
        >>> post = await post_schema.apply_populates(post)
    """

    def __init__(
        self, fields: Mapping[str, Any], *, delete_marker: Any = DELETE_FIELD
    ):
        resolved: dict[str, FieldBase] = {}
        for name, shape in fields.items():
            # Copied so a field instance shared between schemas keeps its own name
            field = copy.copy(resolve_field(shape))
            field.name = name
            resolved[name] = field
        self._fields = MappingProxyType(resolved)

        self._delete_marker = delete_marker
        self._model: Model | None = None
        self._registry: ModelRegistry | None = None
        # Argument given to attach_registry, for re-attachment checks
        self._registry_source: Any = None
        self._store: StoreClient | None = None

        # Insertion-ordered; keyed by each entry's identity
        self._hooks: dict[str, HookDef] = {}
        self._populates: dict[str, PopulateDef] = {}
        self._virtuals: dict[str, VirtualEntry] = {}
        self._uploads: dict[str, UploadDef] = {}

    def __repr__(self) -> str:
        return f"Schema(model={self.model_name!r}, fields={list(self._fields)!r})"

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def fields(self) -> Mapping[str, FieldBase]:
        """Read-only view of the field definitions."""
        return self._fields

    @property
    def model(self) -> Model | None:
        return self._model

    @property
    def model_name(self) -> str:
        """Owning model's name, used in diagnostics."""
        if self._model is None:
            return "<unattached>"
        return self._model.name

    @property
    def registry(self) -> ModelRegistry | None:
        return self._registry

    @property
    def delete_marker(self) -> Any:
        if self._store is not None:
            return self._store.delete_marker
        return self._delete_marker

    def attach_model(self, model: Model) -> None:
        """Attach the owning model. May only be done once."""
        if self._model is not None and self._model is not model:
            raise RuntimeError(
                f"Schema is already attached to model '{self._model.name}'"
            )
        self._model = model

    def attach_registry(
        self, models: ModelRegistry | Mapping[str, Model] | Iterable[Model]
    ) -> None:
        """Attach the model registry used to resolve reference targets."""
        if self._registry is not None:
            if models is self._registry_source:
                return
            raise RuntimeError(
                f"Schema for '{self.model_name}' already has a registry"
            )
        self._registry_source = models
        if isinstance(models, ModelRegistry):
            self._registry = models
        else:
            self._registry = ModelRegistry(models)

    def attach_store(self, store: StoreClient) -> None:
        """Attach the store client whose delete marker `build` should emit."""
        if self._store is not None and self._store is not store:
            raise RuntimeError(f"Schema for '{self.model_name}' already has a store")
        self._store = store

    # ------------------------------------------------------------------
    # Validation & coercion
    # ------------------------------------------------------------------

    def validate_field(self, key: str, value: Any) -> bool:
        """
        Validate `value` against the definition of `key`.

        Raises
        ------
        FieldValidationError
            If the field has a recognized shape and the value does not fit it.
            Unknown keys and unrecognized shapes return False instead.
        """
        field = self._fields.get(key)
        if field is None or not field.recognized:
            return False
        if not field.validate(value):
            raise FieldValidationError(self.model_name, key, field.label, value)
        return True

    def get_value(self, key: str, value: Any) -> Any:
        """Coerce `value` to the stored form of `key`'s type."""
        field = self._fields.get(key)
        if field is None:
            return None
        return field.get_value(value)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def build(
        self,
        source: Mapping[str, Any],
        remove_id: bool = False,
        include_deletes: bool = False,
        clean_refs: bool = False,
    ) -> Document:
        """
        Build the document to write from `source`.

        Only declared fields present in `source` are copied. Each value is
        validated, then coerced.

        Parameters
        ----------
        source : Mapping[str, Any]
            Input values. Mutated in place when `clean_refs` is set.
        remove_id : bool, default False
            Leave `_id` out of the result.
        include_deletes : bool, default False
            Emit the delete marker for fields set to `UNSET`. Otherwise
            such fields are omitted.
        clean_refs : bool, default False
            Collapse populated reference values to their IDs first.

        Returns
        -------
        dict
            The built document.

        Raises
        ------
        BuildError
            If any declared field fails validation. Nothing is returned in
            that case.
        """
        result: Document = {}
        for key in self._fields:
            if key not in source:
                continue
            if source[key] is UNSET:
                if include_deletes:
                    result[key] = self.delete_marker
                continue
            try:
                if clean_refs:
                    self.depopulate(key, source)
                self.validate_field(key, source[key])
            except FieldValidationError as e:
                logger.warning(
                    f"Error processing {self.model_name}. Operation Failed. "
                    f"Inner Exception: {e}"
                )
                raise BuildError(self.model_name, e) from e
            result[key] = self.get_value(key, source[key])

        if not remove_id:
            result[ID_KEY] = source.get(ID_KEY)
        if source.get(CREATED_KEY):
            result[CREATED_KEY] = source[CREATED_KEY]
        if source.get(UPDATED_KEY):
            result[UPDATED_KEY] = source[UPDATED_KEY]

        return result

    def depopulate(self, key: str, source: Any) -> None:
        """
        Collapse populated references under `key` back to bare IDs, in place.

        A nested document is replaced with its `_id`; plain IDs are kept.
        Fields that are not references are left alone.
        """
        field = self._fields.get(key)
        value = source[key]

        if isinstance(field, ArrayOf) and field.is_reference:
            if not isinstance(value, (list, tuple)):
                return
            source[key] = [_collapse(v) for v in value]
        elif isinstance(field, Reference):
            source[key] = _collapse(value)

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def _target(self, name: str) -> Model | None:
        if self._registry is None:
            logger.warning(
                f"{self.model_name}: no model registry attached, "
                f"cannot resolve '{name}'"
            )
            return None
        model = self._registry.get(name)
        if model is None:
            logger.warning(f"{self.model_name}: model '{name}' not found in registry")
        return model

    async def apply_populates(self, document: Document) -> Document:
        """
        Replace reference IDs with the referenced documents.

        Descriptors run in registration order and every fetch is awaited
        before the next one starts, so array results keep the order of their
        IDs and later descriptors see what earlier ones wrote.

        Parameters
        ----------
        document : dict
            Fetched document. Updated in place and returned.

        Returns
        -------
        dict
            The same document.
        """
        for populate in self._populates.values():
            path = populate.path
            model = self._target(populate.model)

            if isinstance(self._fields.get(path), ArrayOf):
                results = []
                for ref in document.get(path) or []:
                    if ref is None:
                        continue
                    results.append(await _fetch(model, ref))
                document[path] = results
            elif document.get(path) is not None:
                document[path] = await _fetch(model, document[path])

        return document

    async def apply_virtuals(self, document: Document) -> Document:
        """
        Fill virtual fields with the documents that point back at this one.

        Each virtual issues one query:
        ``find(foreign_field, "==", document[local_field], populate=True)``.
        """
        for entry in self._virtuals.values():
            definition = entry.definition
            model = self._target(definition.ref)
            if model is None:
                document[entry.field_name] = []
                continue
            document[entry.field_name] = await model.find(
                definition.foreign_field,
                "==",
                document.get(definition.local_field),
                True,
            )
        return document

    async def run_hooks(self, operation: str) -> list[Any]:
        """
        Run the hooks registered for `operation`.

        Each callback is called as ``callback(schema, next)``. Awaitable
        results are awaited before the next callback runs. Exceptions
        propagate to the caller.

        Returns
        -------
        list
            Each callback's (awaited) result, in registration order.
        """
        results = []
        for hook in self._hooks.values():
            if hook.operation != operation:
                continue
            result = hook.callback(self, _next)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @property
    def hooks(self) -> tuple[HookDef, ...]:
        return tuple(self._hooks.values())

    @property
    def populates(self) -> tuple[PopulateDef, ...]:
        return tuple(self._populates.values())

    @property
    def virtuals(self) -> tuple[VirtualEntry, ...]:
        return tuple(self._virtuals.values())

    @property
    def uploads(self) -> tuple[UploadDef, ...]:
        return tuple(self._uploads.values())

    def populate(self, descriptor: PopulateDef | Mapping[str, Any]) -> None:
        """
        Register a reference path to resolve on read.

        Examples
        --------
            >>> schema.populate({"path": "author", "model": "User"})
        """
        populate = PopulateDef.model_validate(descriptor)
        if populate.path in self._populates:
            return
        self._populates[populate.path] = populate
        logger.debug(
            f"{self.model_name}: populate '{populate.path}' -> {populate.model}"
        )

    def register_hook(self, operation: str, callback: Callable[..., Any]) -> None:
        """Register a pre-operation hook. The first hook for an operation wins."""
        if operation in self._hooks:
            return
        self._hooks[operation] = HookDef(operation=operation, callback=callback)
        logger.debug(f"{self.model_name}: hook registered for '{operation}'")

    def pre(self, operation: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Decorator form of `register_hook`.

        Examples
        --------
            >>> @schema.pre("save")
            ... async def stamp(schema, next):
            ...     ...
        """

        def decorator(callback: Callable[..., Any]) -> Callable[..., Any]:
            self.register_hook(operation, callback)
            return callback

        return decorator

    def virtual(
        self, field_name: str, descriptor: VirtualDef | Mapping[str, Any]
    ) -> None:
        """
        Register a virtual field.

        Examples
        --------
            >>> schema.virtual("posts", {
            ...     "ref": "Post", "localField": "_id", "foreignField": "author",
            ... })
        """
        if field_name in self._virtuals:
            return
        definition = VirtualDef.model_validate(descriptor)
        self._virtuals[field_name] = VirtualEntry(
            field_name=field_name, definition=definition
        )
        logger.debug(f"{self.model_name}: virtual '{field_name}' -> {definition.ref}")

    def upload(self, storage_path: str, path: str) -> None:
        """Register a field path whose files are stored under `storage_path`."""
        if path in self._uploads:
            return
        self._uploads[path] = UploadDef(storage_path=storage_path, path=path)

    # ------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------

    def to_pydantic(self, name: str | None = None) -> type[BaseModel]:
        """
        Generate a Pydantic model describing this schema's stored documents.

        Parameters
        ----------
        name : str, optional
            Model class name. Defaults to the owning model's name.
        """
        from .generators.pydantic import create_pydantic_model

        return create_pydantic_model(self, name=name)

    def to_polars(self, documents: Iterable[Mapping[str, Any]]) -> pl.DataFrame:
        """Build documents and collect them into a typed Polars DataFrame."""
        from .generators.polars import create_polars_frame

        return create_polars_frame(self, documents)


def _collapse(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value.get(ID_KEY)
    return value


async def _fetch(model: Model | None, doc_id: Any) -> Document | None:
    if model is None:
        return None
    return await model.find_by_id(doc_id, True)
