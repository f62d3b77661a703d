"""Pydantic model generator for stored document shapes."""

from typing import TYPE_CHECKING, Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, create_model
from pydantic import Field as PydanticField

from ..base import CREATED_KEY, ID_KEY, UPDATED_KEY

if TYPE_CHECKING:
    from ..base import Schema


# Attribute names taken by the structural keys on DocumentModel
_RESERVED_NAMES = frozenset({"id", "created", "updated"})


class DocumentModel(BaseModel):
    """Base for generated models; structural keys are exposed without underscores."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = PydanticField(default=None, alias=ID_KEY)
    created: Optional[Any] = PydanticField(default=None, alias=CREATED_KEY)
    updated: Optional[Any] = PydanticField(default=None, alias=UPDATED_KEY)


def create_pydantic_model(
    schema: "Schema", name: str | None = None
) -> type[DocumentModel]:
    """
    Generate a Pydantic model from a Schema.

    Every declared field is optional, since documents are written partially.
    Reference fields are typed as their stored ID. Fields named `id`,
    `created` or `updated` are skipped; those names map `_id`, `_c` and `_u`.

    Parameters
    ----------
    schema : Schema
        Schema to describe.
    name : str, optional
        Class name. Defaults to ``<ModelName>Document``.

    Returns
    -------
    type[DocumentModel]
        A dynamically created Pydantic model class.

    Examples
    --------
        >>> PostDocument = post_schema.to_pydantic()
        >>> post = PostDocument.model_validate({"_id": "p1", "title": "Hi"})
        >>> post.id, post.title
        ('p1', 'Hi')
        >>> post.model_dump(by_alias=True, exclude_none=True)
        {'_id': 'p1', 'title': 'Hi'}
    """
    pydantic_fields: dict[str, Any] = {}

    for field_name, field in schema.fields.items():
        if field_name.startswith("_"):
            logger.debug(f"Skipping field '{field_name}': private name")
            continue
        if field_name in _RESERVED_NAMES:
            logger.debug(
                f"Skipping field '{field_name}': name reserved for structural keys"
            )
            continue
        python_type = field.get_python_type()
        if python_type is None:
            logger.debug(f"Skipping field '{field_name}': unrecognized shape")
            continue

        field_kwargs: dict[str, Any] = {"default": None}
        if field.description:
            field_kwargs["description"] = field.description

        pydantic_fields[field_name] = (
            Optional[python_type],
            PydanticField(**field_kwargs),
        )

    if name is None:
        name = f"{schema.model.name}Document" if schema.model else "Document"
    # Pydantic's create_model is dynamically typed - returns type[BaseModel] at runtime
    return create_model(  # type: ignore[no-any-return, call-overload]
        name, __base__=DocumentModel, **pydantic_fields
    )
