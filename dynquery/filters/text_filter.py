"""Dynamic text filters: keep records where any text attribute contains a term.

Three equivalent ways to build the same filter:

- ``filter_by_text``: the element type is known by the caller and the
  predicate is composed directly and applied with ``Query.where``.
- ``filter_by_text_untyped``: the element type is discovered from the
  collection itself and the predicate is attached to the query as a
  generic Where step.
- ``filter_by_text_expression``: the predicate is written out as a filter
  expression (``a.Contains(@0) || b.Contains(@0)``) and compiled by the
  expression parser.

All three return the input unchanged when the term is empty or the element
type has no text attributes.
"""

from collections.abc import Collection, Iterable
from typing import Any

from loguru import logger

from dynquery.core.types import T
from dynquery.filters.builder import build_text_predicate, text_expression
from dynquery.filters.expression import parse_expression
from dynquery.filters.introspection import (
    RecordSchema,
    TextAttribute,
    discover_text_attributes,
    text_attributes_for,
)
from dynquery.query import Query, as_query
from dynquery.transforms.data_ops import TextFilter, Where

_EMPTY = object()


def filter_by_text(
    records: Iterable[T],
    term: str | None,
    element_type: "type[T] | RecordSchema | None" = None,
) -> Iterable[T]:
    """
    Filter records of a known element type by a search term.

    Args:
        records: The collection, or a Query with a declared element type.
        term: Search term. Empty or None returns records unchanged.
        element_type: Record class (or RecordSchema). Defaults to the
            element type of a Query passed as records.

    Returns:
        A lazy Query, or records itself when there is nothing to filter.

    Raises:
        TypeError: If no element type is given and records does not declare one.
    """
    if not term:
        return records

    if element_type is None and isinstance(records, Query):
        element_type = records.element_type
    if element_type is None:
        raise TypeError(
            "filter_by_text needs an element type; "
            "use filter_by_text_untyped to discover it from the records"
        )

    predicate = build_text_predicate(discover_text_attributes(element_type), term)
    if predicate is None:
        return records

    query = records if isinstance(records, Query) else Query(records, element_type)
    return query.where(predicate)


def _resolve_attributes(source: Iterable[Any]) -> list[TextAttribute] | None:
    """
    Find the text attributes of the source's elements without consuming it.

    Returns None when the source is a one-shot iterator (or an untyped
    Query) and the attributes can only be found while iterating.
    """
    if isinstance(source, Query):
        if source.element_type is None:
            return None
        return discover_text_attributes(source.element_type)

    if not isinstance(source, Collection):
        return None

    sample = next(iter(source), _EMPTY)
    if sample is _EMPTY:
        return []
    return text_attributes_for(sample)


def filter_by_text_untyped(source: Iterable[Any], term: str | None) -> Iterable[Any]:
    """
    Filter a collection whose element type is only known at run time.

    The text attributes are discovered from the collection (its declared
    element type, or a sample element) and the predicate is attached to the
    query as a Where step over untyped elements.

    Args:
        source: Any iterable of uniform records, or a Query.
        term: Search term. Empty or None returns source unchanged.

    Returns:
        A lazy Query, or source itself when there is nothing to filter.
    """
    if not term:
        return source

    attributes = _resolve_attributes(source)
    if attributes is None:
        logger.debug("Element type unknown until iteration, deferring attribute discovery")
        return as_query(source).pipe(TextFilter(term))

    predicate = build_text_predicate(attributes, term)
    if predicate is None:
        return source

    return as_query(source).pipe(Where(predicate).as_step("TextFilter"))


def filter_by_expression(source: Iterable[T], expression: str, *params: Any) -> Query[T]:
    """
    Filter a collection with a filter expression.

    Example:
        >>> filter_by_expression(tasks(), 'title.StartsWith(@0) && !description.Contains("draft")', "Project")
    """
    return as_query(source).where(parse_expression(expression, *params))


def filter_by_text_expression(source: Iterable[Any], term: str | None) -> Iterable[Any]:
    """
    Filter by search term through a generated filter expression.

    Renders 'a.Contains(@0) || b.Contains(@0) ...' for the discovered text
    attributes and evaluates it with term as @0.

    Args:
        source: Any iterable of uniform records, or a Query.
        term: Search term. Empty or None returns source unchanged.

    Returns:
        A lazy Query, or source itself when there is nothing to filter.
    """
    if not term:
        return source

    attributes = _resolve_attributes(source)
    if attributes is None:
        return as_query(source).pipe(TextFilter(term, use_expression=True))
    if not attributes:
        return source

    expression = text_expression(attributes)
    logger.debug(f"Text filter expression: {expression}")
    return as_query(source).where(parse_expression(expression, term, attributes=attributes))
