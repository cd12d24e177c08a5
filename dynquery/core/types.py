"""Shared type aliases for dynquery."""

from typing import Any, TypeVar

Record = dict[str, Any]
"""A dict record, the untyped element shape used by pipeline steps."""

T = TypeVar("T")
