"""Field type helpers and utilities.

This module provides convenience functions for declaring integer fields with
a fixed wire width. The width is derived from the ``ge``/``le`` bounds, so a
plain ``Field(ge=0, le=255)`` works just as well.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

INT_WIDTHS = (8, 16, 32, 64, 128)


def UInt(*, bits: int = 64, **kwargs: Any) -> FieldInfo:
    """Create an unsigned integer field of the given width.

    Args:
        bits: Width in bits (8, 16, 32, 64 or 128)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo with ``ge=0`` and ``le=2**bits - 1``

    Example:
        >>> class Message(RecordModel):
        ...     count: int = UInt(bits=16)
    """
    if bits not in INT_WIDTHS:
        raise ValueError(f"bits must be one of {INT_WIDTHS}, got {bits}")
    return cast(FieldInfo, Field(ge=0, le=(1 << bits) - 1, **kwargs))


def Int(*, bits: int = 64, **kwargs: Any) -> FieldInfo:
    """Create a signed integer field of the given width.

    Args:
        bits: Width in bits (8, 16, 32, 64 or 128)
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo with the two's complement bounds of ``bits``
    """
    if bits not in INT_WIDTHS:
        raise ValueError(f"bits must be one of {INT_WIDTHS}, got {bits}")
    bound = 1 << (bits - 1)
    return cast(FieldInfo, Field(ge=-bound, le=bound - 1, **kwargs))


def width_for(min_value: int | None, max_value: int | None) -> tuple[bool, int]:
    """Pick signedness and the narrowest width covering the given bounds.

    Returns:
        ``(signed, bits)``. Unbounded sides fall back to 64 bits.
    """
    signed = min_value is None or min_value < 0
    for bits in INT_WIDTHS:
        if signed:
            bound = 1 << (bits - 1)
            low_ok = min_value is not None and min_value >= -bound
            high_ok = max_value is not None and max_value < bound
        else:
            low_ok = True
            high_ok = max_value is not None and max_value < (1 << bits)
        if low_ok and high_ok:
            return signed, bits
    return signed, 64 if (min_value is None or max_value is None) else 128
