"""dynquery - Dynamic filter predicates over in-memory collections."""

from dynquery.core.types import Record
from dynquery.core.step import Step, Pipeline
from dynquery.core.config import FilterSettings, load_settings, configure_logging
from dynquery.core.errors import DynQueryError, ExpressionError
from dynquery.filters.introspection import (
    Attribute,
    TextAttribute,
    RecordSchema,
    discover_text_attributes,
    text_attributes,
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
from dynquery.filters.builder import build_text_predicate
from dynquery.filters.expression import parse_expression
from dynquery.filters.text_filter import (
    filter_by_text,
    filter_by_text_untyped,
    filter_by_expression,
    filter_by_text_expression,
)
from dynquery.query import Query, from_collection
from dynquery.transforms.data_ops import Where, TextFilter, ExpressionFilter, OrderBy, Select, Take

__all__ = [
    "Record",
    "Step",
    "Pipeline",
    "FilterSettings",
    "load_settings",
    "configure_logging",
    "DynQueryError",
    "ExpressionError",
    "Attribute",
    "TextAttribute",
    "RecordSchema",
    "discover_text_attributes",
    "text_attributes",
    "Predicate",
    "Contains",
    "StartsWith",
    "EndsWith",
    "Compare",
    "Or",
    "And",
    "Not",
    "Always",
    "equals",
    "at_least",
    "between",
    "all_of",
    "build_text_predicate",
    "parse_expression",
    "filter_by_text",
    "filter_by_text_untyped",
    "filter_by_expression",
    "filter_by_text_expression",
    "Query",
    "from_collection",
    "Where",
    "TextFilter",
    "ExpressionFilter",
    "OrderBy",
    "Select",
    "Take",
]
