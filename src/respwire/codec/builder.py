"""Builder callbacks and element access.

The decode engine never decides what a decoded value looks like. For every
shape it pulls the frames, validates them and then calls the matching
``build_*`` method of a :class:`Builder`. Composite values are handed over as
an access object that decodes elements on demand:

- :class:`ElementAccess` is a bounded cursor over an open array. Once the
  count from the array header is used up, ``next_element`` returns
  :data:`NO_MORE` instead of raising.
- :class:`VariantAccess` exposes the decoded tag; the builder then declares
  how much payload it expects for that tag.

Subclass :class:`Builder` and override individual methods to produce other
representations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Optional, Sequence

from ..exceptions import DecodeError, ExpectedDollarSign, MismatchedLengthHint, MismatchedName
from ..values import Record, Variant
from .shapes import (
    CaseKind,
    RecordShape,
    Scalar,
    SequenceShape,
    Shape,
    TupleShape,
    VariantShape,
)

if TYPE_CHECKING:
    from .decoder import DecodeEngine


class _NoMore:
    def __repr__(self) -> str:
        return "NO_MORE"

    def __bool__(self) -> bool:
        return False


NO_MORE: Any = _NoMore()


class ElementAccess:
    """Decodes the remaining elements of an array one at a time.

    Element shapes come either from ``element`` (every position) or from
    ``shapes`` (per position); an explicit ``shape`` argument to
    :meth:`next_element` overrides both.
    """

    def __init__(
        self,
        engine: DecodeEngine,
        builder: Builder,
        count: int,
        *,
        element: Optional[Shape] = None,
        shapes: Sequence[Shape] = (),
    ) -> None:
        self._engine = engine
        self._builder = builder
        self._remaining = count
        self._index = 0
        self._element = element
        self._shapes = shapes

    @property
    def remaining(self) -> int:
        return self._remaining

    def next_element(self, shape: Optional[Shape] = None) -> Any:
        """Decode the next element, or return ``NO_MORE`` when the count is used up."""
        if self._remaining == 0:
            return NO_MORE

        if shape is None:
            if self._index < len(self._shapes):
                shape = self._shapes[self._index]
            elif self._element is not None:
                shape = self._element
            else:
                raise DecodeError(f"no shape declared for element {self._index}")

        self._remaining -= 1
        self._index += 1
        return self._engine.decode_value(shape, self._builder)

    def __iter__(self) -> Iterator[Any]:
        while True:
            value = self.next_element()
            if value is NO_MORE:
                return
            yield value


class VariantAccess:
    """The tag of a decoded variant plus its not yet decoded payload.

    ``offset`` is the byte offset of the tag frame, for diagnostics.
    """

    def __init__(
        self, engine: DecodeEngine, builder: Builder, tag: str, remaining: int, *, offset: int | None = None
    ) -> None:
        self._engine = engine
        self._builder = builder
        self.tag = tag
        self.offset = offset
        self.remaining = remaining

    def unit(self) -> None:
        """Declare that the case carries no payload.

        Raises:
            ExpectedDollarSign: If payload elements remain
        """
        if self.remaining:
            raise ExpectedDollarSign(offset=self._engine.offset)

    def newtype(self, shape: Shape) -> Any:
        """Decode a single payload value."""
        if self.remaining != 1:
            raise MismatchedLengthHint(
                f"variant {self.tag} carries {self.remaining} values, expected 1",
                offset=self._engine.offset,
            )
        self.remaining = 0
        return self._engine.decode_value(shape, self._builder)

    def elements(self, shapes: Sequence[Shape]) -> ElementAccess:
        """Open the payload as a sequence of ``len(shapes)`` positional values."""
        if self.remaining != len(shapes):
            raise MismatchedLengthHint(
                f"variant {self.tag} carries {self.remaining} values, expected {len(shapes)}",
                offset=self._engine.offset,
            )
        access = ElementAccess(self._engine, self._builder, self.remaining, shapes=shapes)
        self.remaining = 0
        return access


class Builder:
    """Default builder producing plain Python values.

    Scalars map to ``bool``, ``int``, ``str``, ``None`` and bytes (a borrowed
    ``memoryview`` when decoding from an in-memory buffer). Sequences become
    lists, tuples become tuples, records and variants become
    :class:`~respwire.values.Record` and :class:`~respwire.values.Variant`
    unless their shape supplies a ``factory``.
    """

    def build_bool(self, value: bool) -> Any:
        return value

    def build_int(self, value: int, shape: Scalar) -> Any:
        return value

    def build_char(self, value: str) -> Any:
        return value

    def build_bytes(self, value: bytes | memoryview) -> Any:
        return value

    def build_str(self, value: str) -> Any:
        return value

    def build_unit(self) -> Any:
        return None

    def build_none(self) -> Any:
        return None

    def build_some(self, value: Any) -> Any:
        return value

    def build_sequence(self, shape: SequenceShape | TupleShape, elements: ElementAccess) -> Any:
        if isinstance(shape, TupleShape):
            items: Any = tuple(elements)
        else:
            items = list(elements)
        return shape.factory(items) if shape.factory else items

    def build_record(self, shape: RecordShape, fields: ElementAccess) -> Any:
        names = tuple(name for name, _ in shape.fields)
        values = tuple(fields)
        if shape.factory:
            return shape.factory(dict(zip(names, values)))
        return Record(shape.name, values, names)

    def build_variant(self, shape: VariantShape, variant: VariantAccess) -> Any:
        case = shape.cases.get(variant.tag)
        if case is None:
            raise MismatchedName(f"{shape.name} has no case {variant.tag!r}", offset=variant.offset)

        if case.kind is CaseKind.UNIT:
            variant.unit()
            return case.factory() if case.factory else Variant(variant.tag)

        if case.kind is CaseKind.NEWTYPE:
            value = variant.newtype(case.fields[0][1])
            return case.factory(value) if case.factory else Variant(variant.tag, (value,))

        names = tuple(name for name, _ in case.fields)
        values = tuple(variant.elements([s for _, s in case.fields]))
        if case.factory:
            if case.kind is CaseKind.STRUCT:
                return case.factory(**dict(zip(names, values)))
            return case.factory(*values)
        if case.kind is CaseKind.STRUCT:
            return Variant(variant.tag, values, names)
        return Variant(variant.tag, values)


DEFAULT_BUILDER = Builder()
