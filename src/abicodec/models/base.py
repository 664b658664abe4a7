"""Base struct class and abicodec-specific Pydantic configuration.

This module provides the AbiStruct class that all struct models should inherit from.
"""

from __future__ import annotations

from typing import ClassVar, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from ..codec.decoder import decode_sequence
from ..codec.encoder import encode_sequence
from ..codec.policy import STRICT, DecodingPolicy
from ..codec.schema import StructSchema
from ..codec.types import TupleType

S = TypeVar("S", bound="AbiStruct")


class AbiStruct(BaseModel):
    """Base class for ABI struct models.

    Fields are encoded in declaration order as the members of a tuple. Declare
    each field's ABI type with the helpers in ``abicodec.models.fields``;
    ``bool``, ``enum.Enum`` and nested AbiStruct annotations need no helper.

    Example:
        >>> class Transfer(AbiStruct):
        ...     to: bytes = Address()
        ...     amount: int = Uint(256)
        ...     memo: bytes = Bytes()
        ...
        ...     abi_name: ClassVar[Optional[str]] = "transfer"

    Attributes:
        abi_name: Optional display name used by tooling instead of the class name
    """

    model_config = ConfigDict(
        # Coerce compatible inputs
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    abi_name: ClassVar[str | None] = None

    @classmethod
    def abi_type(cls) -> TupleType:
        """The tuple type this struct encodes as."""
        return StructSchema.from_model(cls).abi_type

    def encode(self) -> bytes:
        """Encode the fields of this struct as a top-level argument sequence."""
        return encode_struct(self)

    @classmethod
    def decode(cls: Type[S], data: bytes, policy: DecodingPolicy = STRICT) -> S:
        """Decode a top-level argument sequence into an instance of this struct."""
        return decode_struct(cls, data, policy)


def encode_struct(message: BaseModel) -> bytes:
    """Encode a struct's fields as call arguments.

    Raises:
        SchemaError: If the model's fields cannot be mapped to ABI types
        TypeMismatch: If a field value doesn't fit its ABI type
        EncodeError: If a field value is out of range
    """
    schema = StructSchema.from_model(type(message))
    return encode_sequence(
        [(layout.abi_type, getattr(message, layout.name)) for layout in schema.fields]
    )


def decode_struct(
    message_class: Type[S], data: bytes, policy: DecodingPolicy = STRICT
) -> S:
    """Decode call arguments into a struct instance.

    Raises:
        SchemaError: If the model's fields cannot be mapped to ABI types
        DecodeError: If the data is malformed or doesn't fit the model
    """
    schema = StructSchema.from_model(message_class)
    values = decode_sequence(schema.types, data, policy)
    return schema.build(values)  # type: ignore[return-value]
