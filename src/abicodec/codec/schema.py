"""Schema introspection for Pydantic struct models.

This module analyzes Pydantic models and derives the ABI tuple type of their
fields, in declaration order. It also converts decoded tuples back into model
instances.
"""

from __future__ import annotations

import enum
import functools
import re
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Type, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..exceptions import DecodeError, SchemaError
from .types import AbiType, DynamicArray, FixedArray, TupleType, boolean, enum_, parse_type

_DIM_RE = re.compile(r"\[(\d*)\]")


@dataclass(frozen=True)
class FieldLayout:
    """Schema information for a single struct field.

    Attributes:
        name: Field name
        annotation: Python type annotation
        abi_type: ABI type the field is encoded as
    """

    name: str
    annotation: Any
    abi_type: AbiType


class StructSchema:
    """Schema information for an entire struct model.

    Example:
        >>> schema = StructSchema.from_model(Transfer)
        >>> [f.abi_type.canonical for f in schema.fields]
        ['address', 'uint256', 'bytes']
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect
        """
        self.model_class = model_class
        self.fields: List[FieldLayout] = []
        self._introspect()
        self.abi_type = TupleType(tuple(f.abi_type for f in self.fields))

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> StructSchema:
        """Create (or reuse) the schema of a Pydantic model."""
        return _schema_for(model_class)

    @property
    def types(self) -> Tuple[AbiType, ...]:
        return self.abi_type.fields

    def _introspect(self) -> None:
        for name, field_info in self.model_class.model_fields.items():
            self.fields.append(self._extract_field_layout(name, field_info))

    def _extract_field_layout(self, name: str, field_info: FieldInfo) -> FieldLayout:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        extra = field_info.json_schema_extra if isinstance(field_info.json_schema_extra, dict) else {}
        abi_type_text = extra.get("abi_type")
        dims = str(extra.get("abi_dims") or "")

        if abi_type_text:
            if dims:
                raise SchemaError(f"Field {name}: give either an ABI type string or dims, not both")
            return FieldLayout(name, annotation, parse_type(str(abi_type_text)))

        # Peel list[...] layers off the annotation, one per array dimension
        base = annotation
        depth = 0
        while get_origin(base) is list:
            (base,) = get_args(base) or (Any,)
            depth += 1

        suffixes = _DIM_RE.findall(dims)
        if "".join(f"[{s}]" for s in suffixes) != dims.replace(" ", ""):
            raise SchemaError(f"Field {name}: invalid dims {dims!r}")
        if len(suffixes) != depth:
            raise SchemaError(
                f"Field {name}: {len(suffixes)} array dims given for {depth} list levels"
            )

        abi_type = _base_type(name, base)
        for suffix in suffixes:
            abi_type = FixedArray(abi_type, int(suffix)) if suffix else DynamicArray(abi_type)
        return FieldLayout(name, annotation, abi_type)

    def build(self, values: Sequence[Any]) -> BaseModel:
        """Construct a model instance from decoded field values.

        Raises:
            DecodeError: If a value cannot be represented in the model
        """
        kwargs = {
            layout.name: _to_python(layout.annotation, value)
            for layout, value in zip(self.fields, values)
        }
        try:
            return self.model_class(**kwargs)
        except ValidationError as e:
            raise DecodeError(f"Failed to construct {self.model_class.__name__}: {e}") from e


@functools.lru_cache(maxsize=None)
def _schema_for(model_class: Type[BaseModel]) -> StructSchema:
    return StructSchema(model_class)


def _base_type(name: str, annotation: Any) -> AbiType:
    if annotation is bool:
        return boolean()
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        members = len(annotation)
        if members == 0:
            raise SchemaError(f"Enum {annotation} has no values")
        return enum_(members)
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return StructSchema.from_model(annotation).abi_type
    raise SchemaError(
        f"Field {name}: {annotation!r} needs an explicit ABI type, e.g. AbiField('uint256')"
    )


def _to_python(annotation: Any, value: Any) -> Any:
    """Convert a decoded value to what the model field expects."""
    if get_origin(annotation) is list:
        (item,) = get_args(annotation) or (Any,)
        return [_to_python(item, v) for v in value]
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        members = list(annotation)
        if not isinstance(value, int) or value >= len(members):
            raise DecodeError(
                f"Invalid enum ordinal {value} for {annotation.__name__} "
                f"(only {len(members)} values)"
            )
        return members[value]
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return StructSchema.from_model(annotation).build(value)
    return value
