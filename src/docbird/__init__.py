"""
Docbird: schemas for document stores

Declare fields once. Validate on write. Resolve references on read.
"""

from .base import Schema
from .descriptors import HookDef, PopulateDef, UploadDef, VirtualDef
from .errors import BuildError, FieldValidationError
from .fields import (
    UNSET,
    ArrayOf,
    Boolean,
    Date,
    FieldBase,
    Number,
    Opaque,
    Reference,
    Text,
    Unrecognized,
    resolve_field,
)
from .registry import ModelRegistry
from .store import DELETE_FIELD, Model, StoreClient

__version__ = "0.1.0"

__all__ = [
    # Core
    "Schema",
    "UNSET",
    "DELETE_FIELD",
    # Fields
    "Text",
    "Boolean",
    "Date",
    "Number",
    "Reference",
    "ArrayOf",
    "Opaque",
    # Registries
    "ModelRegistry",
    "PopulateDef",
    "VirtualDef",
    "UploadDef",
    "HookDef",
    # Boundaries
    "Model",
    "StoreClient",
    # Errors
    "BuildError",
    "FieldValidationError",
    # Internal (for advanced use)
    "FieldBase",
    "Unrecognized",
    "resolve_field",
]
