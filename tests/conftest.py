"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from respwire import (
    U32,
    VariantShape,
    newtype_case,
    struct_case,
    tuple_case,
    unit_case,
)


@pytest.fixture
def test_enum_shape() -> VariantShape:
    """Variant shape with one case of every payload form."""
    return VariantShape(
        "Test",
        {
            "Unit": unit_case(),
            "Newtype": newtype_case(U32),
            "Tuple": tuple_case(U32, U32),
            "Struct": struct_case(("a", U32)),
        },
    )


@pytest.fixture
def two_frames() -> bytes:
    """Two back-to-back top-level variant frames."""
    return b"*1\r\n$4\r\nUnit\r\n*2\r\n$7\r\nNewtype\r\n$1\r\n1\r\n"
