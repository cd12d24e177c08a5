"""Lazy, re-iterable query views over in-memory collections."""

from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic

from dynquery.core.step import Step
from dynquery.core.types import T
from dynquery.filters.introspection import Attribute, RecordSchema
from dynquery.transforms.data_ops import OrderBy, Select, Take, Where

_EMPTY = object()


class Query(Generic[T]):
    """
    A lazily evaluated view over a source collection.

    Each operator returns a new Query; nothing runs until the query is
    iterated, and every iteration starts again from the source. The source
    is never copied or modified. A one-shot iterator as source makes the
    query single-use.

    Example:
        >>> people = from_collection(employees(), Employee)
        >>> people.where(Contains("department", "IT")).order_by("lastname").to_list()
    """

    def __init__(
        self,
        source: Iterable[T],
        element_type: "type | RecordSchema | None" = None,
        steps: tuple[Step, ...] = (),
    ) -> None:
        self._source = source
        self._element_type = element_type
        self._steps = steps

    @property
    def element_type(self) -> "type | RecordSchema | None":
        """Declared element type, if known."""
        return self._element_type

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    def pipe(self, step: Step, element_type: Any = _EMPTY) -> "Query":
        """Attach a step (or Pipeline) to the end of this query."""
        if element_type is _EMPTY:
            element_type = self._element_type
        return Query(self._source, element_type, self._steps + (step,))

    def where(self, predicate: Callable[[T], bool]) -> "Query[T]":
        """Keep the elements satisfying predicate."""
        return self.pipe(Where(predicate))

    def order_by(
        self, key: str | Attribute | Callable[[T], Any], descending: bool = False
    ) -> "Query[T]":
        return self.pipe(OrderBy(key, descending=descending))

    def select(self, fn: Callable[[T], Any]) -> "Query":
        """Project each element. The result has no declared element type."""
        return self.pipe(Select(fn), element_type=None)

    def take(self, n: int) -> "Query[T]":
        return self.pipe(Take(n))

    def __iter__(self) -> Iterator[T]:
        current: Iterable[Any] = self._source
        for step in self._steps:
            current = step.process(current)
        return iter(current)

    def to_list(self) -> list[T]:
        return list(self)

    def first(self, default: Any = None) -> T | Any:
        return next(iter(self), default)

    def count(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        type_name = getattr(self._element_type, "__name__", self._element_type)
        return f"Query(element_type={type_name!r}, steps={[s.name for s in self._steps]})"


def from_collection(records: Iterable[T], element_type: "type | RecordSchema | None" = None) -> Query[T]:
    """Wrap a collection in a Query."""
    return Query(records, element_type)


def as_query(source: Iterable[Any]) -> Query:
    """Return source itself if it is already a Query, otherwise wrap it."""
    if isinstance(source, Query):
        return source
    return Query(source)
