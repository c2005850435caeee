"""Shape declarations.

A shape describes the structure the caller expects for the next value on the
wire. It carries no data. The decode engine dispatches on the shape to pull
the right frames, validate names and counts, and hand the results to a
builder.

Composite shapes may carry a ``factory`` callback. The default builder calls
it to materialize a typed result from the decoded parts instead of producing a
generic :class:`~respwire.values.Record` or :class:`~respwire.values.Variant`.

Example:
    >>> from respwire.codec.shapes import RecordShape, SequenceShape, STR, U32
    >>> shape = RecordShape("Test", (("key", STR), ("val", U32), ("arr", SequenceShape(U32))))
    >>> shape.field_count
    3
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple, Union


class ScalarKind(enum.Enum):
    """Kinds of scalar carried in a single frame."""

    BOOL = "bool"
    UINT = "uint"
    INT = "int"
    CHAR = "char"
    BYTES = "bytes"
    STR = "str"
    UNIT = "unit"
    FLOAT = "float"


class CaseKind(enum.Enum):
    """Payload form of a variant case."""

    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclass(frozen=True)
class Scalar:
    """A single-frame value. ``bits`` is the integer width for UINT/INT."""

    kind: ScalarKind
    bits: int = 64

    def __post_init__(self) -> None:
        if self.kind in (ScalarKind.UINT, ScalarKind.INT) and self.bits not in (8, 16, 32, 64, 128):
            raise ValueError(f"integer width must be 8, 16, 32, 64 or 128, got {self.bits}")


@dataclass(frozen=True)
class OptionShape:
    """Either the null bulk string (absent) or a value of ``inner``."""

    inner: "Shape"


@dataclass(frozen=True)
class SequenceShape:
    """An array of homogeneous elements.

    ``length`` is None when the length is not known up front. When it is
    known, a different count on the wire is a mismatch.
    """

    element: "Shape"
    length: Optional[int] = None
    factory: Optional[Callable[[list], Any]] = field(default=None, compare=False, repr=False)

    @property
    def len_known(self) -> bool:
        return self.length is not None


@dataclass(frozen=True)
class TupleShape:
    """An array of fixed length with per-position element shapes."""

    elements: Tuple["Shape", ...]
    factory: Optional[Callable[[tuple], Any]] = field(default=None, compare=False, repr=False)

    @property
    def length(self) -> int:
        return len(self.elements)


@dataclass(frozen=True)
class RecordShape:
    """A named, fixed-arity product type.

    On the wire a record is an array of ``field_count + 1`` elements whose first
    element is the name. Field names are never compared against the wire; only
    order and count matter.

    Attributes:
        name: Record name, compared byte-for-byte with the wire
        fields: ``(field_name, shape)`` pairs in declared order
        factory: Optional callback receiving a ``{field_name: value}`` dict
    """

    name: str
    fields: Tuple[Tuple[str, "Shape"], ...] = ()
    factory: Optional[Callable[[dict], Any]] = field(default=None, compare=False, repr=False)

    @property
    def field_count(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class Case:
    """One case of a variant shape.

    For NEWTYPE ``fields`` holds a single ``("0", shape)`` pair, for TUPLE the
    positions are named ``"0"``, ``"1"``, ...
    """

    kind: CaseKind
    fields: Tuple[Tuple[str, "Shape"], ...] = ()
    factory: Optional[Callable[..., Any]] = field(default=None, compare=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class VariantShape:
    """A named sum type. The wire carries the case tag, not ``name``."""

    name: str
    cases: Mapping[str, Case] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class MapShape:
    """Dictionaries have no wire encoding. Decoding one always fails."""

    key: "Shape"
    value: "Shape"


@dataclass(frozen=True)
class IgnoredShape:
    """Consume one complete value of any structure without building it."""


Shape = Union[
    Scalar,
    OptionShape,
    SequenceShape,
    TupleShape,
    RecordShape,
    VariantShape,
    MapShape,
    IgnoredShape,
]


def unit_case(factory: Optional[Callable[[], Any]] = None) -> Case:
    return Case(CaseKind.UNIT, (), factory)


def newtype_case(shape: Shape, factory: Optional[Callable[[Any], Any]] = None) -> Case:
    return Case(CaseKind.NEWTYPE, (("0", shape),), factory)


def tuple_case(*shapes: Shape, factory: Optional[Callable[..., Any]] = None) -> Case:
    return Case(CaseKind.TUPLE, tuple((str(i), s) for i, s in enumerate(shapes)), factory)


def struct_case(*fields: Tuple[str, Shape], factory: Optional[Callable[..., Any]] = None) -> Case:
    return Case(CaseKind.STRUCT, tuple(fields), factory)


BOOL = Scalar(ScalarKind.BOOL)
U8 = Scalar(ScalarKind.UINT, 8)
U16 = Scalar(ScalarKind.UINT, 16)
U32 = Scalar(ScalarKind.UINT, 32)
U64 = Scalar(ScalarKind.UINT, 64)
I8 = Scalar(ScalarKind.INT, 8)
I16 = Scalar(ScalarKind.INT, 16)
I32 = Scalar(ScalarKind.INT, 32)
I64 = Scalar(ScalarKind.INT, 64)
CHAR = Scalar(ScalarKind.CHAR)
BYTES = Scalar(ScalarKind.BYTES)
STR = Scalar(ScalarKind.STR)
UNIT = Scalar(ScalarKind.UNIT)
F32 = Scalar(ScalarKind.FLOAT, 32)
F64 = Scalar(ScalarKind.FLOAT, 64)
IGNORED = IgnoredShape()
