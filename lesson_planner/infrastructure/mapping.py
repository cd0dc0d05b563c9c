"""
Adapter: Object mapper.

Implements the ObjectMapper port. Translates entities, rows and DTOs
into Pydantic models or dataclasses by matching attribute names.
"""

import dataclasses
from typing import Any, Type, TypeVar

from pydantic import BaseModel

from lesson_planner.domain.ports import ObjectMapper

T = TypeVar("T")


class PydanticObjectMapper(ObjectMapper):
    """Maps any attribute-bearing object onto a model or dataclass.

    Pydantic destinations are validated with ``from_attributes=True``;
    dataclass destinations are built from the source attributes named
    like their init fields. Source attributes without a counterpart are
    ignored; missing required fields raise.
    """

    def map(self, source: Any, destination: Type[T]) -> T:
        if isinstance(source, destination):
            return source
        if isinstance(destination, type) and issubclass(destination, BaseModel):
            return destination.model_validate(source, from_attributes=True)
        if dataclasses.is_dataclass(destination):
            return destination(**self._dataclass_kwargs(source, destination))
        raise TypeError(f"Cannot map onto {destination!r}")

    def map_many(self, sources: Any, destination: Type[T]) -> list[T]:
        return [self.map(source, destination) for source in sources]

    @staticmethod
    def _dataclass_kwargs(source: Any, destination: type) -> dict[str, Any]:
        if isinstance(source, dict):
            values = source
        elif isinstance(source, BaseModel):
            values = source.model_dump()
        else:
            values = None

        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(destination):
            if not f.init:
                continue
            if values is not None:
                if f.name in values:
                    kwargs[f.name] = values[f.name]
            elif hasattr(source, f.name):
                kwargs[f.name] = getattr(source, f.name)
        return kwargs
