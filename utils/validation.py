"""
Input Validation Module

Rule-based validation and typed field extraction for untrusted input maps
(form posts, JSON bodies). A field counts as absent when its key is missing
or its value is None.
"""

import builtins
import math
import re
from typing import Any, Dict, Mapping, Optional

from data.models import PostRef
from utils.exceptions import ValidationError

# Leading numeric prefix accepted by loose integer coercion ("12abc" -> 12)
_NUMERIC_PREFIX = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


_TYPE_CHECKS = {
    'string': lambda v: isinstance(v, str),
    'integer': _is_integer,
    'boolean': lambda v: isinstance(v, bool),
    'double': lambda v: isinstance(v, float),
    'array': lambda v: isinstance(v, (list, tuple, dict)),
}


def _is_absent(data: Mapping[str, Any], key: str) -> bool:
    return data.get(key) is None


def validate_fields(data: Mapping[str, Any], fields: Dict[str, Dict[str, Any]]) -> None:
    """
    Validate an input map against a rule set, raising on the first violation.

    Each rule supports 'required' (bool), 'type' (string, integer, boolean,
    double, array) and, for strings, 'min_len'/'max_len'. Rules are checked
    in the iteration order of `fields`. Empty strings skip the 'min_len'
    check so optional text fields may be submitted blank.

    Args:
        data: The untrusted input map.
        fields: Mapping of field key to rule dict.

    Raises:
        ValidationError: On a missing required field, a type mismatch,
            a string outside its length bounds or an empty array.
    """
    for key, rule in fields.items():
        if _is_absent(data, key):
            if rule.get('required') is True:
                raise ValidationError(f"missing field {key}")
            continue

        value = data[key]
        expected = rule.get('type')
        check = _TYPE_CHECKS.get(expected)
        if check is None or not check(value):
            raise ValidationError(
                f"type mismatch for field {key}: expected {expected}, got {type(value).__name__}"
            )

        if expected == 'string':
            length = len(value)
            max_len = rule.get('max_len')
            if max_len is not None and length > max_len:
                raise ValidationError(f"too long: field {key} length {length} exceeds max length {max_len}")

            min_len = rule.get('min_len')
            if min_len is not None and value and length < min_len:
                raise ValidationError(f"too short: field {key} length {length} is below min length {min_len}")
        elif expected == 'array':
            if not value:
                raise ValidationError(f"empty collection in field {key}")


def coerce_int(value: Any) -> int:
    """
    Loosely convert a value to int; anything non-numeric becomes 0.

    Numeric strings are read up to the first non-numeric character,
    so "12abc" gives 12 and "abc" gives 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0
        number = float(match.group(0))
        return int(number) if math.isfinite(number) else 0
    if isinstance(value, (list, tuple, dict)):
        return 1 if value else 0
    return 0


def parse_string(
    data: Mapping[str, Any],
    key: str,
    default: Optional[str] = None,
    min_len: Optional[int] = None,
    max_len: Optional[int] = None
) -> str:
    """
    Extract a string field.

    Args:
        data: The input map.
        key: Field key.
        default: Returned when the field is absent.
        min_len: Minimum accepted length.
        max_len: Maximum accepted length.

    Returns:
        str: The field value.

    Raises:
        ValidationError: If the field is absent without a default or its
            length is outside the given bounds.
    """
    if _is_absent(data, key):
        if default is not None:
            return default
        raise ValidationError(f"missing field {key}")

    result = str(data[key])

    if min_len is not None and len(result) < min_len:
        raise ValidationError(f"too short: field {key} length {len(result)} is below min length {min_len}")

    if max_len is not None and len(result) > max_len:
        raise ValidationError(f"too long: field {key} length {len(result)} exceeds max length {max_len}")

    return result


def parse_integer(
    data: Mapping[str, Any],
    key: str,
    default: Optional[int] = None,
    min: Optional[int] = None,
    max: Optional[int] = None
) -> int:
    """
    Extract an integer field, clamping it into [min, max].

    Out-of-range values are clamped, not rejected.

    Raises:
        ValidationError: If the field is absent and no default is given.
    """
    if _is_absent(data, key):
        if default is not None:
            return default
        raise ValidationError(f"missing field {key}")

    result = coerce_int(data[key])

    if min is not None:
        result = builtins.max(min, result)

    if max is not None:
        result = builtins.min(max, result)

    return result



def parse_selection(token: str) -> PostRef:
    """
    Parse a "{board_id}/{post_id}" selection token.

    A missing or non-numeric post id becomes 0, which matches no post,
    so one malformed token never rejects a whole batch.
    """
    parts = str(token).split('/')
    board_id = parts[0]
    post_id = parse_integer({'post_id': parts[1] if len(parts) > 1 else None}, 'post_id', default=0)
    return PostRef(board_id, post_id)
