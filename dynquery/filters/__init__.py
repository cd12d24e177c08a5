"""Attribute discovery, predicate trees and text filters."""

from dynquery.filters.introspection import (
    Attribute,
    MemberPath,
    TextAttribute,
    RecordSchema,
    discover_text_attributes,
    text_attributes,
    text_attributes_for,
)
from dynquery.filters.predicates import (
    Predicate,
    Contains,
    StartsWith,
    EndsWith,
    Compare,
    Or,
    And,
    Not,
    Always,
    equals,
    at_least,
    between,
    all_of,
)
from dynquery.filters.builder import build_text_predicate, text_expression
from dynquery.filters.expression import parse_expression
from dynquery.filters.text_filter import (
    filter_by_text,
    filter_by_text_untyped,
    filter_by_expression,
    filter_by_text_expression,
)
