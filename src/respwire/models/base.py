"""Base record class and respwire-specific Pydantic configuration.

This module provides the RecordModel class that respwire records should inherit from.
Any pydantic model can be encoded; RecordModel adds strict configuration and
the ``resp_name`` option.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    """Base class for respwire records.

    A model encodes as a record: an array holding the record name followed by
    the field values in declaration order. Field names never reach the wire.

    Example:
        >>> from respwire.models import UInt
        >>> class Test(RecordModel):
        ...     key: str
        ...     val: int = UInt(bits=32)
        ...     arr: list[int]
        >>> encode(Test(key="a", val=42, arr=[1, 2]))
        b'*4\\r\\n$4\\r\\nTest\\r\\n$1\\r\\na\\r\\n$2\\r\\n42\\r\\n*2\\r\\n$1\\r\\n1\\r\\n$1\\r\\n2\\r\\n'

    Attributes:
        resp_name: Record name on the wire (defaults to the class name)
    """

    model_config = ConfigDict(
        # Forbid extra fields not defined in schema
        extra="forbid",
        # Validate on assignment
        validate_assignment=True,
        # Records are values
        frozen=True,
    )

    resp_name: ClassVar[str | None] = None
