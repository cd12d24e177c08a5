"""A small filter-expression language compiled to predicate trees.

Expressions look like ``title.Contains(@0) || views >= 100`` where ``@N``
refers to the N-th positional parameter. Supported:

- ``||`` / ``or``, ``&&`` / ``and``, ``!`` / ``not``, parentheses
- comparisons ``==`` (or ``=``), ``!=``, ``>``, ``>=``, ``<``, ``<=``
- string methods ``Contains``, ``StartsWith``, ``EndsWith``, ``Equals``
- literals: double-quoted strings, numbers, ``true``, ``false``, ``null``
- member paths (``author.name``), with ``it[...]`` indexing the record by an
  exact key for names that are not identifiers (``it["first name"]``,
  ``it["e.mail"]``, ``it["not"]``, ``it[1]``)
"""

import json
import re
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from dynquery.core.errors import ExpressionError
from dynquery.filters.introspection import Attribute, MemberPath
from dynquery.filters.predicates import (
    KEYWORDS,
    Always,
    And,
    Compare,
    Contains,
    EndsWith,
    Not,
    Or,
    Predicate,
    StartsWith,
)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<number>-?\d+(?:\.\d+)?)
    | (?P<param>@\d+)
    | (?P<op>\|\||&&|==|!=|>=|<=|>|<|!|=)
    | (?P<punct>[().,\[\]])
    | (?P<name>[^\W\d]\w*)
    """,
    re.VERBOSE,
)

_FLIPPED = {"==": "==", "!=": "!=", ">": "<", ">=": "<=", "<": ">", "<=": ">="}

_TEXT_METHODS = {
    "Contains": Contains,
    "StartsWith": StartsWith,
    "EndsWith": EndsWith,
}


@dataclass
class Token:
    kind: str
    text: str
    position: int


@dataclass
class _Literal:
    value: Any


def tokenize(text: str) -> list[Token]:
    """Split an expression into tokens, dropping whitespace."""
    tokens = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise ExpressionError(f"Unexpected character {text[position]!r}", position)
        kind = match.lastgroup
        if kind != "ws":
            value = match.group()
            if kind == "name" and value.lower() in KEYWORDS:
                kind = "keyword"
                value = value.lower()
            tokens.append(Token(kind, value, position))
        position = match.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class _Parser:
    """Recursive-descent parser producing Predicate trees."""

    def __init__(self, text: str, params: tuple, attributes: dict[Hashable, Attribute]) -> None:
        self._tokens = tokenize(text)
        self._index = 0
        self._params = params
        self._attributes = attributes

    @property
    def _current(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _at(self, text: str) -> bool:
        token = self._current
        return token.kind == "punct" and token.text == text

    def _accept(self, *texts: str) -> Token | None:
        token = self._current
        if token.kind in ("op", "punct", "keyword") and token.text in texts:
            return self._advance()
        return None

    def _expect(self, text: str) -> Token:
        token = self._accept(text)
        if token is None:
            raise ExpressionError(
                f"Expected {text!r} but found {self._current.text or 'end of expression'!r}",
                self._current.position,
            )
        return token

    def parse(self) -> Predicate:
        predicate = self._parse_or()
        if self._current.kind != "end":
            raise ExpressionError(f"Unexpected {self._current.text!r}", self._current.position)
        return predicate

    def _parse_or(self) -> Predicate:
        parts = [self._parse_and()]
        while self._accept("||", "or"):
            parts.append(self._parse_and())
        return parts[0] if len(parts) == 1 else Or(parts)

    def _parse_and(self) -> Predicate:
        parts = [self._parse_unary()]
        while self._accept("&&", "and"):
            parts.append(self._parse_unary())
        return parts[0] if len(parts) == 1 else And(parts)

    def _parse_unary(self) -> Predicate:
        if self._accept("!", "not"):
            return Not(self._parse_unary())
        return self._parse_comparison()

    def _parse_comparison(self) -> Predicate:
        start = self._current.position
        left = self._parse_operand()

        op_token = self._accept("==", "=", "!=", ">", ">=", "<", "<=")
        if op_token is None:
            return self._as_predicate(left, start)

        op = "==" if op_token.text == "=" else op_token.text
        right = self._parse_operand()

        if isinstance(left, Attribute) and isinstance(right, _Literal):
            return Compare(left, op, right.value)
        if isinstance(left, _Literal) and isinstance(right, Attribute):
            return Compare(right, _FLIPPED[op], left.value)
        raise ExpressionError("Comparison needs an attribute on one side and a value on the other", start)

    def _as_predicate(self, operand: Any, position: int) -> Predicate:
        if isinstance(operand, Predicate):
            return operand
        if isinstance(operand, Attribute):
            return Compare(operand, "==", True)
        if isinstance(operand.value, bool):
            return Always() if operand.value else Not(Always())
        raise ExpressionError(f"Expected a condition, found value {operand.value!r}", position)

    def _parse_operand(self) -> Predicate | Attribute | _Literal:
        token = self._current

        if self._accept("("):
            predicate = self._parse_or()
            self._expect(")")
            return predicate

        if token.kind == "param":
            self._advance()
            return _Literal(self._param(token))

        if token.kind == "string":
            self._advance()
            return _Literal(json.loads(token.text))

        if token.kind == "number":
            self._advance()
            return _Literal(float(token.text) if "." in token.text else int(token.text))

        if token.kind == "keyword" and token.text in ("true", "false", "null"):
            self._advance()
            return _Literal({"true": True, "false": False, "null": None}[token.text])

        if token.kind == "name":
            return self._parse_member()

        raise ExpressionError(
            f"Unexpected {token.text or 'end of expression'!r}", token.position
        )

    def _parse_member(self) -> Predicate | Attribute:
        first = self._advance()
        segments: list[Hashable] = []
        # `it` followed by an index refers to the record itself
        if not (first.text == "it" and self._at("[")):
            segments.append(first.text)

        while True:
            if self._accept("["):
                key = self._parse_operand()
                if not isinstance(key, _Literal):
                    raise ExpressionError("Expected a key value inside '[...]'", first.position)
                self._expect("]")
                segments.append(key.value)
            elif self._accept("."):
                name = self._current
                if name.kind != "name":
                    raise ExpressionError("Expected a member name after '.'", name.position)
                self._advance()
                if self._at("("):
                    return self._parse_method(self._member(segments), name)
                segments.append(name.text)
            else:
                break

        return self._member(segments)

    def _member(self, segments: list[Hashable]) -> Attribute:
        if len(segments) == 1:
            bound = self._attributes.get(segments[0])
            return bound if bound is not None else Attribute(segments[0])
        return MemberPath(".".join(str(s) for s in segments), segments=tuple(segments))

    def _parse_method(self, attribute: Attribute, method: Token) -> Predicate:
        self._expect("(")
        argument = self._parse_operand()
        self._expect(")")

        if not isinstance(argument, _Literal):
            raise ExpressionError(f"{method.text} expects a value argument", method.position)

        if method.text == "Equals":
            return Compare(attribute, "==", argument.value)

        predicate_type = _TEXT_METHODS.get(method.text)
        if predicate_type is None:
            raise ExpressionError(f"Unknown method '{method.text}'", method.position)
        if not isinstance(argument.value, str):
            raise ExpressionError(f"{method.text} expects a string argument", method.position)
        return predicate_type(attribute, argument.value)

    def _param(self, token: Token) -> Any:
        index = int(token.text[1:])
        if index >= len(self._params):
            raise ExpressionError(
                f"Parameter {token.text} given but only {len(self._params)} parameter(s) supplied",
                token.position,
            )
        return self._params[index]


def parse_expression(
    text: str,
    *params: Any,
    attributes: Iterable[Attribute] | None = None,
) -> Predicate:
    """
    Compile a filter expression into a predicate.

    Args:
        text: The expression, e.g. 'title.Contains(@0) || description.Contains(@0)'.
        *params: Values for the @0, @1, ... placeholders.
        attributes: Attributes to bind by name. A single-member reference
            with the same name uses the attribute's own getter instead of
            reading the field directly.

    Returns:
        The compiled predicate tree.

    Raises:
        ExpressionError: If the expression is malformed.
    """
    if not text or not text.strip():
        raise ExpressionError("Empty filter expression", 0)
    bound = {attribute.name: attribute for attribute in attributes or ()}
    return _Parser(text, params, bound).parse()
