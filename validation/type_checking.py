"""
Runtime checks over the dynamic value model.

A dynamic value is one of ``None``, ``bool``, a number, ``str``, a sequence
or a mapping. Numpy scalars and arrays are folded into the same model so
values coming out of numerical code validate like their builtin equivalents.
"""
from collections.abc import Mapping
from typing import Any, List, Optional, Union
import numpy as np

Number = Union[int, float]


def is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def coerce_number(value: Any) -> Optional[Number]:
    """
    Convert ``value`` to the canonical number type.

    Returns ``int`` for integral inputs, ``float`` for floating inputs and
    ``None`` when the value is not a number. Booleans are never numbers.
    """
    if is_bool(value):
        return None
    # np.float64 subclasses float, so subclasses are converted too
    if isinstance(value, (int, np.integer)):
        return value if type(value) is int else int(value)
    if isinstance(value, (float, np.floating)):
        return value if type(value) is float else float(value)
    return None


def is_number(value: Any) -> bool:
    return coerce_number(value) is not None


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def as_sequence(value: Any) -> Optional[List[Any]]:
    """Return ``value`` as a list if it is a sequence, else ``None``."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return None
        return value.tolist()
    return None


def type_name(value: Any) -> str:
    """Name of the dynamic category of ``value``, used in issue messages."""
    if value is None:
        return "null"
    if is_bool(value):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if as_sequence(value) is not None:
        return "array"
    if is_mapping(value):
        return "object"
    return type(value).__name__


def values_equal(a: Any, b: Any) -> bool:
    """
    Equality for literal and enum matching.

    Numbers compare by value across int/float/numpy types, booleans only
    equal booleans, and containers compare element by element.
    """
    if is_bool(a) or is_bool(b):
        return is_bool(a) and is_bool(b) and bool(a) == bool(b)

    num_a, num_b = coerce_number(a), coerce_number(b)
    if num_a is not None or num_b is not None:
        if num_a is None or num_b is None:
            return False
        return num_a == num_b

    seq_a, seq_b = as_sequence(a), as_sequence(b)
    if seq_a is not None or seq_b is not None:
        if seq_a is None or seq_b is None or len(seq_a) != len(seq_b):
            return False
        return all(values_equal(x, y) for x, y in zip(seq_a, seq_b))

    if is_mapping(a) or is_mapping(b):
        if not (is_mapping(a) and is_mapping(b)) or set(a.keys()) != set(b.keys()):
            return False
        return all(values_equal(a[key], b[key]) for key in a)

    return a == b


def format_number(value: Number) -> str:
    """Render a number the way issue messages show it (``10`` not ``10.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
