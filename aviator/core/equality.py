"""Equality strategies carried by atoms: identity (default) and shallow structural."""

import dataclasses
import math
from collections.abc import Mapping, Set
from typing import Any


def is_identical(a: Any, b: Any) -> bool:
    """Same reference, or same primitive value (NaN equals NaN, 0.0 differs from -0.0)."""
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a) and math.isnan(b):
            return True
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    if isinstance(a, (bool, int, str, bytes, complex)):
        return a == b
    return False


def _fields(obj: Any):
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    return getattr(obj, "__dict__", None)


def shallow_equal(a: Any, b: Any) -> bool:
    """
    One level of structural comparison with identity on the members.

    Mappings compare size and per-key identity, sets compare size and
    per-member identity, sequences (list/tuple) compare length and per-index identity,
    other objects compare their dataclass fields or __dict__ entries.
    """
    if is_identical(a, b):
        return True
    if a is None or b is None:
        return False

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b or not is_identical(value, b[key]):
                return False
        return True

    if isinstance(a, Set) and isinstance(b, Set):
        if len(a) != len(b):
            return False
        # Membership by identity, not ==
        return all(any(is_identical(value, other) for other in b) for value in a)

    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        return all(is_identical(x, y) for x, y in zip(a, b))

    if type(a) is not type(b):
        return False
    fa, fb = _fields(a), _fields(b)
    if fa is None or fb is None or len(fa) != len(fb):
        return False
    for key, value in fa.items():
        if key not in fb or not is_identical(value, fb[key]):
            return False
    return True
