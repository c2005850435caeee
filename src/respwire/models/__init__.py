"""Pydantic model support for respwire.

This module provides the base record class, integer field helpers and shape
derivation from model annotations.
"""

from __future__ import annotations

from .base import RecordModel
from .codec import MODEL_BUILDER, ModelBuilder, decode, encode
from .fields import Int, UInt
from .schema import record_shape, shape_for

__all__ = [
    "RecordModel",
    "UInt",
    "Int",
    "shape_for",
    "record_shape",
    "ModelBuilder",
    "MODEL_BUILDER",
    "encode",
    "decode",
]
