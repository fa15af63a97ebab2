from __future__ import annotations

import math


def wrap_coordinate(value: float, size: int) -> float:
    wrapped = value % size
    # Tiny negative inputs round up to exactly ``size`` under float modulo.
    if wrapped >= size:
        wrapped -= size
    return wrapped


def wrap_index(value: float, size: int) -> int:
    return int(math.floor(value)) % size

