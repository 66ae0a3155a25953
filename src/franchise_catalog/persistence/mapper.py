"""
Structural mapping between domain entities and stored documents.

Values are copied by field name: only fields present on both the source
and the target type are carried over, the rest keep the target's default.
Both dataclasses and pydantic models are supported on either side.
"""

import dataclasses
import typing
from functools import lru_cache
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

E = TypeVar("E")
D = TypeVar("D")
T = TypeVar("T")

# (field name, element type for List[...] fields that are themselves mappable)
FieldPlan = Tuple[Tuple[str, Optional[type]], ...]


def is_mappable(tp: Any) -> bool:
    """Whether ``tp`` is a dataclass or pydantic model type."""
    return isinstance(tp, type) and (
        dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)
    )


def field_names(tp: type) -> List[str]:
    """Declared field names of a dataclass or pydantic model type."""
    if dataclasses.is_dataclass(tp):
        return [f.name for f in dataclasses.fields(tp)]
    if issubclass(tp, BaseModel):
        return list(tp.model_fields)
    raise TypeError(f"{tp.__name__} is neither a dataclass nor a pydantic model")


def _field_hints(tp: type) -> Dict[str, Any]:
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return {name: info.annotation for name, info in tp.model_fields.items()}
    return typing.get_type_hints(tp)


def _list_element_type(hint: Any) -> Optional[type]:
    # Unwrap Optional[List[X]] as well as List[X]
    if typing.get_origin(hint) is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) != 1:
            return None
        hint = args[0]
    if typing.get_origin(hint) is list:
        args = typing.get_args(hint)
        if args and is_mappable(args[0]):
            return args[0]
    return None


@lru_cache(maxsize=None)
def field_plan(source_type: type, target_type: type) -> FieldPlan:
    """Shared fields of two types, computed once per type pair."""
    hints = _field_hints(target_type)
    source_fields = set(field_names(source_type))
    return tuple(
        (name, _list_element_type(hints.get(name)))
        for name in field_names(target_type)
        if name in source_fields
    )


def map_object(source: Any, target_type: Type[T]) -> Optional[T]:
    """Map ``source`` onto a new instance of ``target_type`` by field name."""
    if source is None:
        return None
    if type(source) is target_type:
        return source
    values = {}
    for name, element_type in field_plan(type(source), target_type):
        value = getattr(source, name)
        if element_type is not None and isinstance(value, list):
            value = [
                map_object(item, element_type) if is_mappable(type(item)) else item
                for item in value
            ]
        values[name] = value
    return target_type(**values)


def map_list(sources: Iterable[Any], target_type: Type[T]) -> List[T]:
    """Map every element of ``sources`` onto ``target_type``."""
    return [map_object(source, target_type) for source in sources]


class EntityMapper(Generic[E, D]):
    """Bidirectional mapper for one entity/document type pair."""

    def __init__(self, entity_type: Type[E], document_type: Type[D]) -> None:
        self.entity_type = entity_type
        self.document_type = document_type

    def to_document(self, entity: Optional[E]) -> Optional[D]:
        return map_object(entity, self.document_type)

    def to_entity(self, document: Optional[D]) -> Optional[E]:
        return map_object(document, self.entity_type)

    def to_entities(self, documents: Iterable[D]) -> List[E]:
        return map_list(documents, self.entity_type)
