"""Polars frame generator for batches of documents."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Dict

import polars as pl
from loguru import logger

from ..base import ID_KEY

if TYPE_CHECKING:
    from ..base import Schema


class PolarsFrameBuilder:
    """Collects built documents into a DataFrame typed from a schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._polars_schema = self._build_polars_schema()

    def _build_polars_schema(self) -> Dict[str, Any]:
        """Build Polars schema dict from fields; fields without a dtype are skipped."""
        polars_schema: Dict[str, Any] = {ID_KEY: pl.Utf8}
        for field_name, field in self.schema.fields.items():
            dtype = field.get_polars_dtype()
            if dtype is None:
                logger.debug(f"Skipping field '{field_name}': no Polars dtype")
                continue
            polars_schema[field_name] = dtype
        return polars_schema

    def build(self, documents: Iterable[Mapping[str, Any]]) -> pl.DataFrame:
        """
        Build each document and return the batch as a DataFrame.

        Documents go through `Schema.build` with reference collapsing, on a
        shallow copy so the inputs are not modified.

        Raises
        ------
        BuildError
            If any document fails validation.
        """
        rows = []
        for document in documents:
            built = self.schema.build(dict(document), clean_refs=True)
            rows.append({k: built.get(k) for k in self._polars_schema})

        if not rows:
            return pl.DataFrame(schema=self._polars_schema)

        df = pl.from_dicts(rows, schema=self._polars_schema, strict=False)
        logger.debug(f"Built frame of {df.height} {self.schema.model_name} documents")
        return df

    @property
    def polars_schema(self) -> Dict[str, Any]:
        """Return the Polars schema dict."""
        return self._polars_schema.copy()


def create_polars_frame(
    schema: Schema, documents: Iterable[Mapping[str, Any]]
) -> pl.DataFrame:
    """
    Build a Polars DataFrame from documents of a schema.

    Parameters
    ----------
    schema : Schema
        Schema the documents belong to.
    documents : Iterable[Mapping]
        Source documents; populated references are collapsed to IDs.

    Returns
    -------
    pl.DataFrame
        One row per document: `_id` followed by each typed field.
    """
    return PolarsFrameBuilder(schema).build(documents)
