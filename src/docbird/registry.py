"""Name-to-model lookup used to resolve reference targets."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .store import Model


class ModelRegistry(Mapping[str, Model]):
    """
    Immutable mapping of model name to model.

    Parameters
    ----------
    models : Mapping[str, Model] | Iterable[Model]
        Either a name-to-model mapping, or models keyed by their `name`.
        With an iterable, the first model of a given name wins.

    Examples
    --------
        >>> registry = ModelRegistry([users, posts])
        >>> registry.get("User") is users
        True
        >>> registry.get("Missing") is None
        True
    """

    def __init__(self, models: Mapping[str, Model] | Iterable[Model] = ()):
        if isinstance(models, Mapping):
            entries = dict(models)
        else:
            entries = {}
            for model in models:
                entries.setdefault(model.name, model)
        self._models = MappingProxyType(entries)

    def __getitem__(self, name: str) -> Model:
        return self._models[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __repr__(self) -> str:
        return f"ModelRegistry({list(self._models)!r})"
