"""Shape derivation for Pydantic models.

This module maps Python type annotations and Pydantic models onto shape
declarations, so that model classes can be decoded without writing shapes by
hand. Models become records, ``enum.Enum`` subclasses become variants with
unit cases.

Supported annotations:

- ``bool``, ``int`` (width and signedness from ``ge``/``le``), ``str``, ``bytes``
- ``None`` (unit), ``Optional[T]`` / ``T | None``
- ``list[T]``, ``tuple[T, ...]``, ``tuple[A, B, ...]``
- nested ``BaseModel`` subclasses and ``enum.Enum`` subclasses
- ``float`` and ``dict`` map to shapes that fail as unsupported when used
"""

from __future__ import annotations

import enum
import types
from typing import Annotated, Any, Iterable, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..codec.shapes import (
    BOOL,
    BYTES,
    F64,
    STR,
    UNIT,
    MapShape,
    OptionShape,
    RecordShape,
    Scalar,
    ScalarKind,
    SequenceShape,
    Shape,
    TupleShape,
    VariantShape,
    unit_case,
)
from ..exceptions import SchemaError
from .fields import width_for

_UNION_TYPES = (Union, types.UnionType)


def shape_for(annotation: Any, metadata: Iterable[Any] = ()) -> Shape:
    """Derive the shape declaration for a type annotation.

    Args:
        annotation: Python type annotation or model class
        metadata: Pydantic constraint metadata (``annotated_types`` objects)

    Returns:
        Shape declaration

    Raises:
        SchemaError: If the annotation has no wire representation

    Example:
        >>> shape_for(list[int])
        SequenceShape(element=Scalar(kind=<ScalarKind.INT: 'int'>, bits=64), length=None)
    """
    return _ShapeDeriver().derive(annotation, list(metadata))


def record_shape(model_class: Type[BaseModel]) -> RecordShape:
    """Derive the record shape of a Pydantic model class.

    Raises:
        SchemaError: If ``model_class`` is not a Pydantic model
    """
    shape = shape_for(model_class)
    if not isinstance(shape, RecordShape):
        raise SchemaError(f"{model_class!r} is not a Pydantic model")
    return shape


class _ShapeDeriver:
    """Walks an annotation, guarding against self-referencing models."""

    def __init__(self) -> None:
        self._in_progress: set[type] = set()

    def derive(self, annotation: Any, metadata: list[Any]) -> Shape:
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            extra = list(args[1:])
            for item in args[1:]:
                if isinstance(item, FieldInfo):
                    extra.extend(item.metadata)
            return self.derive(args[0], metadata + extra)

        if origin in _UNION_TYPES:
            non_none_args = [arg for arg in args if arg is not type(None)]
            if len(non_none_args) == 1 and len(args) == 2:
                return OptionShape(self.derive(non_none_args[0], metadata))
            raise SchemaError(f"complex Union types not supported: {annotation!r}")

        if origin is list:
            return SequenceShape(self._element(args))

        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return SequenceShape(self.derive(args[0], []), factory=tuple)
            if args == ((),) or not args:
                return TupleShape(())
            return TupleShape(tuple(self.derive(arg, []) for arg in args))

        if origin is dict or annotation is dict:
            key, value = args if args else (Any, Any)
            return MapShape(self._lenient(key), self._lenient(value))

        if annotation is list:
            raise SchemaError("list annotations need an element type, e.g. list[int]")

        if annotation is bool:
            return BOOL
        if annotation is int:
            return self._int_shape(metadata)
        if annotation is str:
            return STR
        if annotation is bytes:
            return BYTES
        if annotation is float:
            return F64
        if annotation is None or annotation is type(None):
            return UNIT

        if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            return self._enum_shape(annotation)
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return self._model_shape(annotation)

        raise SchemaError(f"unsupported annotation {annotation!r}")

    def _element(self, args: tuple[Any, ...]) -> Shape:
        if not args:
            raise SchemaError("list annotations need an element type, e.g. list[int]")
        return self.derive(args[0], [])

    def _lenient(self, annotation: Any) -> Shape:
        # Map shapes are never decoded, so a key/value type without a shape is fine
        try:
            return self.derive(annotation, [])
        except SchemaError:
            return UNIT

    def _int_shape(self, metadata: list[Any]) -> Scalar:
        min_value = None
        max_value = None
        for constraint in metadata:
            if getattr(constraint, "ge", None) is not None:
                min_value = constraint.ge
            if getattr(constraint, "gt", None) is not None:
                min_value = constraint.gt + 1
            if getattr(constraint, "le", None) is not None:
                max_value = constraint.le
            if getattr(constraint, "lt", None) is not None:
                max_value = constraint.lt - 1

        signed, bits = width_for(min_value, max_value)
        return Scalar(ScalarKind.INT if signed else ScalarKind.UINT, bits)

    def _enum_shape(self, enum_class: Type[enum.Enum]) -> VariantShape:
        if not len(enum_class):
            raise SchemaError(f"Enum {enum_class.__name__} has no values")
        cases = {member.name: unit_case(lambda member=member: member) for member in enum_class}
        return VariantShape(enum_class.__name__, cases)

    def _model_shape(self, model_class: Type[BaseModel]) -> RecordShape:
        if model_class in self._in_progress:
            raise SchemaError(f"recursive model {model_class.__name__} not supported")

        self._in_progress.add(model_class)
        try:
            fields = []
            for field_name, field_info in model_class.model_fields.items():
                if field_info.annotation is None:
                    raise SchemaError(f"Field {field_name} has no type annotation")
                try:
                    shape = self.derive(field_info.annotation, list(field_info.metadata))
                except SchemaError as e:
                    raise SchemaError(f"{model_class.__name__}.{field_name}: {e}") from e
                fields.append((field_name, shape))
        finally:
            self._in_progress.discard(model_class)

        name = getattr(model_class, "resp_name", None) or model_class.__name__
        return RecordShape(name, tuple(fields), factory=model_class.model_validate)
