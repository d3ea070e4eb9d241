"""
Shared utilities and helpers.
"""

import json
import math
import re
from datetime import date, datetime
from typing import Any, Dict, Optional


# Leading numeric prefix: "10", "-2.5", ".5", "1e3", "10 pcs"
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> Optional[float]:
    """
    Leniently parse a number from an int, float or numeric string.

    Strings are trimmed and only their leading numeric prefix is read, so
    "12.5 EA" parses as 12.5. Returns None for booleans, None, non-finite
    values and strings without a numeric prefix.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value.strip())
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def to_float(value: Any, default: float = 0.0) -> float:
    """Parse a number, falling back to default when it cannot be parsed."""
    number = parse_number(value)
    return default if number is None else number


def serialize_for_json(obj: Any) -> Any:
    """Serialize objects that aren't JSON-serializable by default."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif hasattr(obj, "model_dump"):  # Pydantic model
        return obj.model_dump(by_alias=True)
    elif hasattr(obj, "__dict__"):
        return obj.__dict__
    return str(obj)


def dict_to_json_string(data: Dict) -> str:
    """Convert dict to JSON string, handling non-serializable types."""
    return json.dumps(data, default=serialize_for_json, indent=2, ensure_ascii=False)
