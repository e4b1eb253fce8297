"""Coercion of typed format properties into canonical mesh types.

Polygon-payload documents store every property with its own numeric
encoding. Coordinates are coerced to float32 and face index lists to a
``(u32, u32, u32)`` triangle; anything that would need a lossy or silent
conversion raises instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

import numpy as np

from readtrimesh.core.exceptions import (
    IndexRangeError,
    TypeMismatchError,
    ValueRangeError,
)

U32_MAX = int(np.iinfo(np.uint32).max)


class PropertyKind(str, Enum):
    """Scalar encodings a polygon-payload property can use."""

    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @classmethod
    def from_dtype(cls, dtype: Any) -> "PropertyKind":
        """Map a numpy dtype (or dtype string such as ``'<u2'``) to a kind.

        Raises:
            ValueError: If the dtype has no polygon-payload counterpart
        """
        return cls(np.dtype(dtype).name)


COORDINATE_KINDS = frozenset({PropertyKind.FLOAT32, PropertyKind.FLOAT64})
INDEX_LIST_KINDS = frozenset(
    {PropertyKind.UINT32, PropertyKind.INT32, PropertyKind.UINT16, PropertyKind.INT16}
)


@dataclass(frozen=True)
class PropertyValue:
    """One typed property value of a record: a scalar or a list."""

    kind: PropertyKind
    value: Any
    is_list: bool = False

    @classmethod
    def scalar(cls, kind: PropertyKind, value: Any) -> "PropertyValue":
        return cls(kind, np.dtype(kind.value).type(value))

    @classmethod
    def of_list(cls, kind: PropertyKind, values: Any) -> "PropertyValue":
        return cls(kind, np.asarray(values, dtype=kind.value), is_list=True)

    @property
    def type_name(self) -> str:
        return f"list<{self.kind.value}>" if self.is_list else self.kind.value


def to_f32(prop: PropertyValue, name: str, record: int) -> np.float32:
    """Coerce a coordinate property to float32.

    Args:
        prop: Property value to coerce
        name: Property name, used in error messages
        record: Record index, used in error messages

    Returns:
        The value as ``np.float32``

    Raises:
        TypeMismatchError: If the property is not a float32/float64 scalar
        ValueRangeError: If the value is not finite as float32
    """
    if prop.is_list or prop.kind not in COORDINATE_KINDS:
        raise TypeMismatchError(name, record, prop.type_name)

    with np.errstate(over="ignore", invalid="ignore"):
        value = np.float32(prop.value)
    if not np.isfinite(value):
        raise ValueRangeError(
            f"Coordinate '{name}' in vertex {record} is not a finite float32 ({prop.value})",
            record=record,
            value=prop.value,
        )
    return value


def to_u32_checked(value: Any, face: int, position: int) -> int:
    """Convert one index to an unsigned 32-bit integer without wrapping.

    Raises:
        IndexRangeError: If the value is negative, above 2**32 - 1 or not integral
    """
    try:
        index = int(value)
    except (TypeError, ValueError, OverflowError):
        raise IndexRangeError(face, f"index {position} is not an integer", value=value) from None
    if index != value:
        raise IndexRangeError(face, f"index {position} is not an integer", value=value)
    if index < 0 or index > U32_MAX:
        raise IndexRangeError(
            face,
            f"index {position} ({index}) cannot be represented as u32",
            value=index,
        )
    return index


def to_triangle(prop: PropertyValue, name: str, face: int) -> Tuple[int, int, int]:
    """Coerce a face index list to a canonical triangle.

    Only the first three entries are used; longer polygons are not
    fan-triangulated.

    Raises:
        TypeMismatchError: If the property is not a u32/i32/u16/i16 list
        IndexRangeError: If the list has fewer than 3 entries or an entry overflows
    """
    if not prop.is_list or prop.kind not in INDEX_LIST_KINDS:
        raise TypeMismatchError(name, face, prop.type_name, kind="face")

    values = prop.value
    if len(values) < 3:
        raise IndexRangeError(
            face, f"insufficient indices for a triangle ({len(values)} < 3)"
        )

    return (
        to_u32_checked(values[0], face, 0),
        to_u32_checked(values[1], face, 1),
        to_u32_checked(values[2], face, 2),
    )
