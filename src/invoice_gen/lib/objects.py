"""
Object utilities for JSON serialization.

Provides the encoding and decoding used for every value written to the
local record store and for backup files.
"""

import json
from dataclasses import asdict, is_dataclass
from typing import Any


def to_json(obj: Any, indent: int | None = None) -> str:
    """
    Serialize an object to JSON string.

    Handles dataclasses by converting them to dictionaries first.
    Non-ASCII text (customer names, currency symbols) is written as-is.

    Args:
        obj: Object to serialize.
        indent: Optional indentation for pretty printing.

    Returns:
        JSON string representation.

    Raises:
        TypeError: If obj contains a value with no JSON representation.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    return json.dumps(
        obj, default=_default_serializer, indent=indent, ensure_ascii=False
    )


def from_json(text: str | bytes | None, default: Any = None) -> Any:
    """
    Parse JSON text, returning default when text is empty.

    Raises:
        ValueError: If text is not valid JSON.
    """
    if not text:
        return default
    return json.loads(text)


def _default_serializer(obj: Any) -> Any:
    """
    Default serializer for JSON encoding.

    Args:
        obj: Object to serialize.

    Returns:
        JSON-serializable representation.
    """
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
