"""Data operation steps: Where, TextFilter, ExpressionFilter, OrderBy, Select, Take."""

import itertools
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from dynquery.core.config import FilterSettings
from dynquery.core.step import Step
from dynquery.filters.builder import build_text_predicate, text_expression
from dynquery.filters.expression import parse_expression
from dynquery.filters.introspection import Attribute, TextAttribute, attribute_getter, text_attributes_for

_EMPTY = object()


class Where(Step):
    """Keep or drop records based on a predicate."""

    def __init__(
        self,
        predicate: Callable[[Any], bool],
        keep: bool = True,
        settings: FilterSettings | None = None,
    ) -> None:
        """
        Initialize a Where step.

        Args:
            predicate: Function that returns True for records to keep (or drop if keep=False).
                Any callable works, including the Predicate trees from dynquery.filters.
            keep: If True, keep matching records. If False, drop matching records.
            settings: Controls whether kept/dropped counts are logged.

        Examples:
            >>> Where(lambda r: r["salary"] >= 55000)
            >>> Where(Contains("title", "draft"), keep=False)
        """
        super().__init__()
        self._predicate = predicate
        self._keep = keep
        self._settings = settings or FilterSettings()

    @property
    def predicate(self) -> Callable[[Any], bool]:
        return self._predicate

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        """Filter records based on the predicate."""
        kept = 0
        dropped = 0

        for record in records:
            match = bool(self._predicate(record))
            if match == self._keep:
                kept += 1
                yield record
            else:
                dropped += 1

        if self._settings.log_stats:
            logger.info(f"{self.name}: kept {kept}, dropped {dropped}")


class TextFilter(Step):
    """Keep records where any text attribute contains a search term.

    The text attributes are discovered from the first record when they are
    not given up front, so the step works on streams of untyped records.
    """

    def __init__(
        self,
        term: str | None,
        attributes: list[TextAttribute] | None = None,
        use_expression: bool = False,
        settings: FilterSettings | None = None,
    ) -> None:
        """
        Initialize a TextFilter step.

        Args:
            term: Search term (case-sensitive substring). Empty or None passes
                every record through.
            attributes: Explicit text attributes. Discovered from the first
                record if None.
            use_expression: Build the predicate by rendering and parsing a
                filter expression instead of composing it directly.
            settings: Passed on to the underlying Where step.
        """
        super().__init__()
        self._term = term
        self._attributes = attributes
        self._use_expression = use_expression
        self._settings = settings

    def _predicate_for(self, attributes: list[TextAttribute]) -> Callable[[Any], bool] | None:
        if not self._use_expression:
            return build_text_predicate(attributes, self._term)
        if not attributes:
            return None
        return parse_expression(text_expression(attributes), self._term, attributes=attributes)

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        """Filter records, discovering attributes lazily if needed."""
        if not self._term:
            yield from records
            return

        iterator = iter(records)
        first = next(iterator, _EMPTY)
        if first is _EMPTY:
            return

        attributes = self._attributes
        if attributes is None:
            attributes = text_attributes_for(first)
        predicate = self._predicate_for(attributes)

        rest = itertools.chain([first], iterator)
        if predicate is None:
            logger.debug(f"{self.name}: no text attributes on {type(first).__name__}, passing through")
            yield from rest
            return

        where = Where(predicate, settings=self._settings).as_step(self.name)
        yield from where.process(rest)


class ExpressionFilter(Step):
    """Keep records matching a filter expression such as 'title.Contains(@0)'."""

    def __init__(self, expression: str, *params: Any, settings: FilterSettings | None = None) -> None:
        """
        Initialize an ExpressionFilter step. The expression is compiled here,
        so syntax errors surface before any record is read.

        Args:
            expression: Filter expression text.
            *params: Values for @0, @1, ...
            settings: Passed on to the underlying Where step.
        """
        super().__init__()
        self._expression = expression
        self._predicate = parse_expression(expression, *params)
        self._settings = settings

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        where = Where(self._predicate, settings=self._settings).as_step(self.name)
        yield from where.process(records)


class OrderBy(Step):
    """Sort records by a key. The sort is stable and happens when iteration starts."""

    def __init__(
        self,
        key: str | Attribute | Callable[[Any], Any],
        descending: bool = False,
    ) -> None:
        """
        Initialize an OrderBy step.

        Args:
            key: Attribute name (dotted paths allowed), Attribute, or key function.
            descending: Sort from largest to smallest.

        Records whose key is None sort before all others (after, when descending).
        """
        super().__init__()
        self._getter = attribute_getter(key)
        self._descending = descending

    def _sort_key(self, record: Any) -> tuple[bool, Any]:
        value = self._getter(record)
        return (value is not None, value)

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        yield from sorted(records, key=self._sort_key, reverse=self._descending)


class Select(Step):
    """Transform each record one-to-one."""

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        """
        Initialize a Select step.

        Example:
            >>> Select(lambda e: f"{e.firstname} {e.lastname}")
        """
        super().__init__()
        self._fn = fn

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        for record in records:
            yield self._fn(record)


class Take(Step):
    """Yield at most n records."""

    def __init__(self, n: int) -> None:
        super().__init__()
        if n < 0:
            raise ValueError(f"Take expects a non-negative count, got {n}")
        self._n = n

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        yield from itertools.islice(records, self._n)
