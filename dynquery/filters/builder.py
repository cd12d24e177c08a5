"""Build "any text attribute contains the term" predicates."""

from collections.abc import Iterable

from loguru import logger

from dynquery.filters.introspection import TextAttribute
from dynquery.filters.predicates import Contains, Or, Predicate, format_member


def build_text_predicate(attributes: Iterable[TextAttribute], term: str | None) -> Predicate | None:
    """
    Build a predicate matching records where any text attribute contains term.

    One Contains check per attribute, OR-ed together in the order given.

    Args:
        attributes: Text attributes to search, usually from discovery.
        term: Search term. Matching is a case-sensitive substring test.

    Returns:
        The predicate, or None when the term is empty or there are no
        attributes (nothing to filter).
    """
    if not term:
        return None

    checks: list[Predicate] = [Contains(attribute, term) for attribute in attributes]
    if not checks:
        return None

    predicate = checks[0] if len(checks) == 1 else Or(checks)
    logger.debug(f"Built text predicate over {[check.attribute.name for check in checks]}")
    return predicate


def text_expression(attributes: Iterable[TextAttribute]) -> str:
    """
    Render the text search as a filter expression with the term as @0.

    Names that are not plain identifiers are quoted as record indexes.

    Example:
        >>> text_expression(text_attributes("title", "description"))
        'title.Contains(@0) || description.Contains(@0)'
    """
    return " || ".join(f"{format_member(attribute)}.Contains(@0)" for attribute in attributes)
