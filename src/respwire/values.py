"""Generic composite values.

These are what the default builder produces for records and variants that
have no factory, and what the encoder accepts for values that do not come
from a model class or an ``enum.Enum``. Field names ride along for
readability but do not take part in equality, matching the wire format
where only position matters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass(frozen=True)
class Record:
    """A named product value.

    Example:
        >>> from respwire import encode_one
        >>> encode_one(Record("Test", (1,)))
        b'*2\\r\\n$4\\r\\nTest\\r\\n$1\\r\\n1\\r\\n'
    """

    name: str
    fields: Tuple[Any, ...] = ()
    field_names: Tuple[str, ...] = field(default=(), compare=False)

    def as_dict(self) -> dict[str, Any]:
        """Return the fields keyed by name (positions when names are unknown)."""
        names = self.field_names or tuple(str(i) for i in range(len(self.fields)))
        return dict(zip(names, self.fields))


@dataclass(frozen=True)
class Variant:
    """One tagged case of a sum type with zero or more positional payload values.

    Example:
        >>> from respwire import encode_one
        >>> encode_one(Variant("Tuple", (1, 2)))
        b'*3\\r\\n$5\\r\\nTuple\\r\\n$1\\r\\n1\\r\\n$1\\r\\n2\\r\\n'
    """

    tag: str
    payload: Tuple[Any, ...] = ()
    field_names: Tuple[str, ...] = field(default=(), compare=False)
