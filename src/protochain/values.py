"""Primitive values shared by the object model."""

from typing import Any, Optional
import math

from .errors import ObjectModelTypeError


class Undefined:
    """The undefined value (singleton).

    Returned for missing properties, and also storable as an ordinary value.
    """

    _instance: Optional["Undefined"] = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __str__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (Undefined, ())


# Singleton instance
UNDEFINED = Undefined()


def is_nan(value: Any) -> bool:
    """Check if value is NaN."""
    return isinstance(value, float) and math.isnan(value)


def is_negative_zero(value: Any) -> bool:
    """Check if value is the float -0.0."""
    return isinstance(value, float) and value == 0 and math.copysign(1, value) < 0


def same_value(a: Any, b: Any) -> bool:
    """Compare two values for descriptor validation.

    NaN equals NaN, +0 and -0 differ, objects compare by identity.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        if is_nan(a) and is_nan(b):
            return True
        if a == 0 and b == 0:
            return is_negative_zero(a) == is_negative_zero(b)
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is b


def to_property_key(key: Any) -> str:
    """Convert a key to its canonical string form."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        if is_nan(key):
            return "NaN"
        if key == float("inf"):
            return "Infinity"
        if key == float("-inf"):
            return "-Infinity"
        if key.is_integer():
            return str(int(key))
        return repr(key)
    if key is UNDEFINED:
        return "undefined"
    raise ObjectModelTypeError(f"Invalid property key: {key!r}")
