"""Discovery of text-valued attributes on record types."""

import dataclasses
import types
import typing
from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import BaseModel

from dynquery.core.types import Record


def read_field(record: Any, name: Hashable) -> Any:
    """Read one field by its exact name: mappings by key, everything else by attribute."""
    if isinstance(record, Mapping):
        return record.get(name)
    if isinstance(name, str):
        return getattr(record, name, None)
    return None


def read_path(record: Any, path: "str | Sequence[Hashable]") -> Any:
    """
    Read a member path from a record.

    A string path is split on dots; a sequence is taken as exact segments.
    A missing member anywhere along the path yields None.
    """
    segments = path.split(".") if isinstance(path, str) else path
    value = record
    for part in segments:
        if value is None:
            return None
        value = read_field(value, part)
    return value


def attribute_getter(key: "str | Attribute | Callable[[Any], Any]") -> Callable[[Any], Any]:
    """Turn an attribute name (dotted paths allowed), Attribute or callable into a getter."""
    if isinstance(key, Attribute):
        return key.value
    if isinstance(key, str):
        return lambda record: read_path(record, key)
    return key


@dataclass(frozen=True)
class Attribute:
    """A named attribute of a record and the getter used to read it.

    Without a getter the name is read as one exact field or key, so names
    containing dots or non-string dict keys work as they are.
    """

    name: Hashable
    getter: Callable[[Any], Any] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.getter is None:
            name = self.name
            object.__setattr__(self, "getter", lambda record: read_field(record, name))

    def value(self, record: Any) -> Any:
        """Return the raw attribute value for a record."""
        return self.getter(record)

    def text(self, record: Any) -> str | None:
        """Return the attribute value if it is a string, else None."""
        value = self.getter(record)
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class MemberPath(Attribute):
    """An attribute reached through several members, e.g. ``author.name``."""

    segments: tuple[Hashable, ...] = ()

    def __post_init__(self) -> None:
        if self.getter is None:
            segments = self.segments
            object.__setattr__(self, "getter", lambda record: read_path(record, segments))


@dataclass(frozen=True)
class TextAttribute(Attribute):
    """An attribute whose declared type is text."""


def as_attribute(attribute: "str | Attribute") -> Attribute:
    """Accept either an attribute name or an Attribute."""
    if isinstance(attribute, Attribute):
        return attribute
    return Attribute(attribute)


def is_text_type(annotation: Any) -> bool:
    """Return True for ``str`` and ``Optional[str]`` annotations."""
    if annotation is str:
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return is_text_type(typing.get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        return len(args) == 1 and args[0] is str
    return False


@dataclass(frozen=True)
class RecordSchema:
    """Run-time description of dict records: field names and their types, in order."""

    fields: tuple[tuple[Hashable, Any], ...]

    @classmethod
    def of(cls, **fields: Any) -> "RecordSchema":
        """
        Declare a schema from keyword arguments.

        Example:
            >>> RecordSchema.of(title=str, views=int)
        """
        return cls(tuple(fields.items()))

    @classmethod
    def infer(cls, record: Record) -> "RecordSchema":
        """Infer a schema from the value types of one record (None values are not text)."""
        return cls(tuple((key, type(value)) for key, value in record.items()))

    @property
    def names(self) -> list[Hashable]:
        return [name for name, _ in self.fields]

    def text_attributes(self) -> list[TextAttribute]:
        return [TextAttribute(name) for name, annotation in self.fields if is_text_type(annotation)]


def _annotated_fields(element_type: type) -> list[tuple[str, Any]]:
    """Return (name, annotation) pairs in declaration order."""
    if issubclass(element_type, BaseModel):
        return [(name, info.annotation) for name, info in element_type.model_fields.items()]

    hints = typing.get_type_hints(element_type)

    if dataclasses.is_dataclass(element_type):
        return [(f.name, hints.get(f.name, f.type)) for f in dataclasses.fields(element_type)]

    # Plain classes and NamedTuples; get_type_hints walks the MRO base-first.
    return [
        (name, hint)
        for name, hint in hints.items()
        if typing.get_origin(hint) is not typing.ClassVar
    ]


@lru_cache(maxsize=None)
def _discover_for_type(element_type: type) -> tuple[TextAttribute, ...]:
    attributes = tuple(
        TextAttribute(name)
        for name, annotation in _annotated_fields(element_type)
        if is_text_type(annotation)
    )
    logger.debug(
        f"Discovered {len(attributes)} text attribute(s) on {element_type.__name__}: "
        f"{[a.name for a in attributes]}"
    )
    return attributes


def discover_text_attributes(element_type: "type | RecordSchema") -> list[TextAttribute]:
    """
    Discover the text attributes declared on an element type.

    Supports dataclasses, pydantic models, NamedTuples, annotated plain
    classes and RecordSchema descriptors. Attributes come back in declaration
    order; a type without text attributes yields an empty list.

    Args:
        element_type: The record class, or a RecordSchema for dict records.

    Returns:
        Text attributes in declaration order.
    """
    if isinstance(element_type, RecordSchema):
        return element_type.text_attributes()
    return list(_discover_for_type(element_type))


def text_attributes_for(element: Any) -> list[TextAttribute]:
    """Discover text attributes from a sample element of a collection."""
    if isinstance(element, dict):
        return RecordSchema.infer(element).text_attributes()
    return discover_text_attributes(type(element))


def text_attributes(*specs: "str | tuple[str, Callable[[Any], Any]]") -> list[TextAttribute]:
    """
    Build an explicit text attribute list instead of discovering one.

    Args:
        *specs: Attribute names, or (name, getter) pairs.

    Example:
        >>> text_attributes("title", ("author", lambda r: r.author.name))
    """
    attributes = []
    for spec in specs:
        if isinstance(spec, str):
            attributes.append(TextAttribute(spec))
        else:
            name, getter = spec
            attributes.append(TextAttribute(name, getter))
    return attributes
