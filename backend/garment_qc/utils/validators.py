"""Input guards shared by the evaluators.

Unlike the lenient ``_safe_int`` coercion used for UI payloads, these helpers
never coerce: anything outside the domain raises ``InvalidInputError``.
"""

import math
from numbers import Real

from .errors import InvalidInputError

# Category and inspection point names, on every path into a ledger
MAX_LABEL_LENGTH = 255


def require_count(value, field="count"):
    """Return ``value`` if it is a non-negative int (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field} must be an integer, got {value!r}", field=field)
    if value < 0:
        raise InvalidInputError(f"{field} must be >= 0, got {value}", field=field)
    return value


def require_number(value, field="value"):
    """Return ``value`` as float if it is a finite real number."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{field} must be a number, got {value!r}", field=field)
    try:
        value = float(value)
    except OverflowError:
        raise InvalidInputError(f"{field} is too large to be a measurement", field=field) from None
    if not math.isfinite(value):
        raise InvalidInputError(f"{field} must be finite, got {value}", field=field)
    return value


def is_label(value):
    """True for a non-blank string of at most MAX_LABEL_LENGTH characters."""
    return isinstance(value, str) and bool(value.strip()) and len(value) <= MAX_LABEL_LENGTH


def require_label(value, field="label"):
    if not is_label(value):
        raise InvalidInputError(
            f"{field} must be a non-blank string of at most {MAX_LABEL_LENGTH} characters", field=field
        )
    return value
