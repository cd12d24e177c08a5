"""Inspectable predicate trees over records."""

import json
import operator
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from dynquery.filters.introspection import Attribute, MemberPath, as_attribute

KEYWORDS = frozenset(["and", "or", "not", "true", "false", "null"])

NAME_PATTERN = re.compile(r"[^\W\d]\w*")

COMPARISONS = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


def format_literal(value: Any) -> str:
    """Render a constant in expression syntax."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    raise ValueError(f"Cannot render literal of type {type(value).__name__}")


def is_plain_member(name: Any) -> bool:
    """True when a member name can be written bare in an expression."""
    return (
        isinstance(name, str)
        and NAME_PATTERN.fullmatch(name) is not None
        and name.lower() not in KEYWORDS
    )


def format_member(attribute: Attribute) -> str:
    """
    Render an attribute reference in expression syntax.

    Plain identifiers are written bare (``title``, ``author.name``); any other
    name is quoted as an index on the record (``it["first name"]``).
    """
    if isinstance(attribute, MemberPath):
        segments = attribute.segments
    else:
        segments = (attribute.name,)

    parts = []
    for index, segment in enumerate(segments):
        if is_plain_member(segment):
            parts.append(segment if index == 0 else f".{segment}")
        else:
            parts.append(f"{'it' if index == 0 else ''}[{format_literal(segment)}]")
    return "".join(parts)


def _render_value(value: Any, params: list | None) -> str:
    """Render a constant, or as an @N placeholder when collecting params."""
    if params is None:
        return format_literal(value)
    for index, existing in enumerate(params):
        if type(existing) is type(value) and existing == value:
            return f"@{index}"
    params.append(value)
    return f"@{len(params) - 1}"


class Predicate(ABC):
    """A boolean function over one record that can also describe itself."""

    @abstractmethod
    def __call__(self, record: Any) -> bool:
        ...

    @abstractmethod
    def render(self, params: list | None = None) -> str:
        """
        Render the predicate in filter-expression syntax.

        Args:
            params: If given, constants are appended to this list and rendered
                as @N placeholders instead of literals.
        """
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        ...

    def __and__(self, other: "Predicate") -> "And":
        return And([self, other])

    def __or__(self, other: "Predicate") -> "Or":
        return Or([self, other])

    def __invert__(self) -> "Not":
        return Not(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Predicate):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(json.dumps(self.to_dict(), sort_keys=True, default=str))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.render()})"


class _TextMatch(Predicate):
    """Shared shape of the string-method predicates."""

    method = ""
    op = ""

    def __init__(self, attribute: str | Attribute, value: str) -> None:
        if not isinstance(value, str):
            raise ValueError(f"{self.method} expects a string, got {type(value).__name__}")
        self.attribute = as_attribute(attribute)
        self.value = value

    def render(self, params: list | None = None) -> str:
        return f"{format_member(self.attribute)}.{self.method}({_render_value(self.value, params)})"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "attribute": self.attribute.name, "value": self.value}


class Contains(_TextMatch):
    """True when the attribute's text contains the value (case-sensitive)."""

    method = "Contains"
    op = "contains"

    def __call__(self, record: Any) -> bool:
        text = self.attribute.text(record)
        return text is not None and self.value in text


class StartsWith(_TextMatch):
    method = "StartsWith"
    op = "startswith"

    def __call__(self, record: Any) -> bool:
        text = self.attribute.text(record)
        return text is not None and text.startswith(self.value)


class EndsWith(_TextMatch):
    method = "EndsWith"
    op = "endswith"

    def __call__(self, record: Any) -> bool:
        text = self.attribute.text(record)
        return text is not None and text.endswith(self.value)


class Compare(Predicate):
    """Compare an attribute against a constant."""

    def __init__(self, attribute: str | Attribute, op: str, value: Any) -> None:
        if op not in COMPARISONS:
            raise ValueError(
                f"Unknown comparison operator '{op}'. Valid operators: {sorted(COMPARISONS)}"
            )
        self.attribute = as_attribute(attribute)
        self.op = op
        self.value = value

    def __call__(self, record: Any) -> bool:
        actual = self.attribute.value(record)
        if self.op in ("==", "!="):
            return COMPARISONS[self.op](actual, self.value)
        # Ordering against a missing value is false rather than an error
        if actual is None or self.value is None:
            return False
        return COMPARISONS[self.op](actual, self.value)

    def render(self, params: list | None = None) -> str:
        return f"{format_member(self.attribute)} {self.op} {_render_value(self.value, params)}"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "attribute": self.attribute.name, "value": self.value}


class Or(Predicate):
    """True when any child predicate is true, evaluated left to right."""

    def __init__(self, predicates: list[Predicate]) -> None:
        self.predicates = list(predicates)

    def __call__(self, record: Any) -> bool:
        return any(predicate(record) for predicate in self.predicates)

    def render(self, params: list | None = None) -> str:
        if not self.predicates:
            return "false"
        return " || ".join(p.render(params) for p in self.predicates)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "or", "predicates": [p.to_dict() for p in self.predicates]}


class And(Predicate):
    """True when every child predicate is true."""

    def __init__(self, predicates: list[Predicate]) -> None:
        self.predicates = list(predicates)

    def __call__(self, record: Any) -> bool:
        return all(predicate(record) for predicate in self.predicates)

    def render(self, params: list | None = None) -> str:
        if not self.predicates:
            return "true"
        parts = []
        for predicate in self.predicates:
            text = predicate.render(params)
            parts.append(f"({text})" if isinstance(predicate, Or) else text)
        return " && ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "and", "predicates": [p.to_dict() for p in self.predicates]}


class Not(Predicate):
    def __init__(self, predicate: Predicate) -> None:
        self.predicate = predicate

    def __call__(self, record: Any) -> bool:
        return not self.predicate(record)

    def render(self, params: list | None = None) -> str:
        return f"!({self.predicate.render(params)})"

    def to_dict(self) -> dict[str, Any]:
        return {"op": "not", "predicate": self.predicate.to_dict()}


class Always(Predicate):
    """Matches every record."""

    def __call__(self, record: Any) -> bool:
        return True

    def render(self, params: list | None = None) -> str:
        return "true"

    def to_dict(self) -> dict[str, Any]:
        return {"op": "always"}


def equals(attribute: str | Attribute, value: Any) -> Compare | None:
    """Equality test, or None when no value was given."""
    if value is None or value == "":
        return None
    return Compare(attribute, "==", value)


def at_least(attribute: str | Attribute, value: Any) -> Compare | None:
    """Lower-bound test, or None when no bound was given."""
    if value is None:
        return None
    return Compare(attribute, ">=", value)


def between(attribute: str | Attribute, low: Any, high: Any) -> And:
    """Inclusive range test over the bounds captured at call time."""
    return And([Compare(attribute, ">=", low), Compare(attribute, "<=", high)])


def all_of(*predicates: Predicate | None) -> Predicate:
    """
    AND together the predicates that are present.

    Absent criteria (None) are skipped; with nothing left the result
    matches every record.

    Example:
        >>> all_of(equals("department", "IT"), at_least("performance_rating", None))
        Compare(department == "IT")
    """
    present = [p for p in predicates if p is not None]
    if not present:
        return Always()
    if len(present) == 1:
        return present[0]
    return And(present)
