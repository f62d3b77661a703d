"""Registry entry records for populates, virtuals, uploads and hooks."""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field


class _Descriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PopulateDef(_Descriptor):
    """Replace the reference(s) at `path` with documents of `model` on read."""

    path: str
    model: str


class VirtualDef(_Descriptor):
    """
    Computed reverse relation.

    On read, the virtual field holds every document of `ref` whose
    `foreign_field` equals this document's `local_field`.
    """

    ref: str
    local_field: str = Field(alias="localField")
    foreign_field: str = Field(alias="foreignField")


class VirtualEntry(_Descriptor):
    field_name: str
    definition: VirtualDef


class UploadDef(_Descriptor):
    storage_path: str = Field(alias="storagePath")
    path: str


class HookDef(_Descriptor):
    operation: str
    callback: Callable[..., Any]
