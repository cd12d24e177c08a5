"""Core types, steps and settings for dynquery."""

from dynquery.core.types import Record
from dynquery.core.step import Step, Pipeline
from dynquery.core.config import FilterSettings, load_settings, configure_logging
from dynquery.core.errors import DynQueryError, ExpressionError
