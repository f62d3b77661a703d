"""Generators for other frameworks."""

from .polars import PolarsFrameBuilder, create_polars_frame
from .pydantic import DocumentModel, create_pydantic_model

__all__ = [
    "DocumentModel",
    "PolarsFrameBuilder",
    "create_polars_frame",
    "create_pydantic_model",
]
