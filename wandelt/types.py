"""The type model: built-in types, flags and conversion rules."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag, auto


class TypeKind(IntEnum):
    INVALID = 0
    BUILTIN = auto()
    FUNCTION = auto()


class BuiltinTypeKind(IntEnum):
    INVALID = 0
    VOID = auto()
    BOOL = auto()
    CHAR = auto()
    SHORT = auto()
    INT = auto()
    LONG = auto()
    SZ = auto()
    INTPTR = auto()
    UCHAR = auto()
    USHORT = auto()
    UINT = auto()
    ULONG = auto()
    USZ = auto()
    UINTPTR = auto()
    FLOAT = auto()
    DOUBLE = auto()
    STRING = auto()
    CSTRING = auto()
    RAWPTR = auto()


class TypeFlag(IntFlag):
    NONE = 0
    BOOLEAN = 1 << 0
    INTEGER = 1 << 1
    SIGNED = 1 << 2
    UNSIGNED = 1 << 3
    FLOATING_POINT = 1 << 4
    STRING = 1 << 5
    ARCH_DEP = 1 << 6


class CastKind(IntEnum):
    NO = 0
    IMPLICIT = auto()
    EXPLICIT = auto()


_TYPE_KIND_NAMES = {
    TypeKind.BUILTIN: "builtin",
    TypeKind.FUNCTION: "function",
}


def type_kind_name(kind: TypeKind | int) -> str:
    """Return the display name of a type kind; ValueError if invalid."""
    try:
        return _TYPE_KIND_NAMES[TypeKind(kind)]
    except (KeyError, ValueError):
        raise ValueError(f"invalid type kind: {kind!r}") from None


def builtin_type_kind_name(kind: BuiltinTypeKind | int) -> str:
    """Return the source spelling of a built-in type; ValueError if invalid."""
    try:
        member = BuiltinTypeKind(kind)
    except ValueError:
        raise ValueError(f"invalid builtin type kind: {kind!r}") from None
    if member is BuiltinTypeKind.INVALID:
        raise ValueError(f"invalid builtin type kind: {kind!r}")
    return member.name.lower()


_B = BuiltinTypeKind

# Kinds between which any explicit cast is allowed.
_NUMERIC_KINDS = frozenset(
    {
        _B.BOOL, _B.CHAR, _B.SHORT, _B.INT, _B.LONG, _B.SZ, _B.INTPTR,
        _B.UCHAR, _B.USHORT, _B.UINT, _B.ULONG, _B.USZ, _B.UINTPTR,
        _B.FLOAT, _B.DOUBLE,
    }
)

# Targets each kind converts to implicitly.
_IMPLICIT_TARGETS = {
    _B.BOOL: {_B.BOOL},
    _B.CHAR: {_B.CHAR, _B.SHORT, _B.INT, _B.LONG},
    _B.SHORT: {_B.SHORT, _B.INT, _B.LONG},
    _B.INT: {_B.INT, _B.LONG},
    _B.LONG: {_B.LONG},
    _B.SZ: {_B.SZ},
    _B.INTPTR: {_B.INTPTR},
    _B.UCHAR: {_B.UCHAR, _B.USHORT, _B.UINT, _B.ULONG},
    _B.USHORT: {_B.USHORT, _B.UINT, _B.ULONG},
    _B.UINT: {_B.UINT, _B.ULONG},
    _B.ULONG: {_B.ULONG},
    _B.USZ: {_B.USZ},
    _B.UINTPTR: {_B.UINTPTR},
    _B.FLOAT: {_B.FLOAT, _B.DOUBLE},
    _B.DOUBLE: {_B.DOUBLE},
    _B.STRING: {_B.STRING},
    _B.CSTRING: {_B.CSTRING},
    _B.RAWPTR: {_B.RAWPTR},
}


def _build_cast_matrix() -> dict[tuple[BuiltinTypeKind, BuiltinTypeKind], CastKind]:
    matrix = {}
    for source in BuiltinTypeKind:
        implicit = _IMPLICIT_TARGETS.get(source, set())
        for target in BuiltinTypeKind:
            if target in implicit:
                cast = CastKind.IMPLICIT
            elif source in _NUMERIC_KINDS and target in _NUMERIC_KINDS:
                cast = CastKind.EXPLICIT
            else:
                cast = CastKind.NO
            matrix[source, target] = cast
    return matrix


_CAST_MATRIX = _build_cast_matrix()


@dataclass(eq=False)
class Type:
    """A type; built-in types are shared singletons compared by identity."""

    kind: TypeKind = TypeKind.INVALID
    size_in_bytes: int = 0
    align_in_bytes: int = 0
    builtin_kind: BuiltinTypeKind = BuiltinTypeKind.INVALID
    flags: TypeFlag = TypeFlag.NONE
    params: tuple[Type, ...] = ()
    is_variadic: bool = False

    def is_builtin(self) -> bool:
        return self.kind is TypeKind.BUILTIN

    def is_function(self) -> bool:
        return self.kind is TypeKind.FUNCTION

    def has_flag(self, flag: TypeFlag) -> bool:
        return self.is_builtin() and bool(self.flags & flag)

    def is_boolean(self) -> bool:
        return self.has_flag(TypeFlag.BOOLEAN)

    def is_integer(self) -> bool:
        return self.has_flag(TypeFlag.INTEGER)

    def is_signed(self) -> bool:
        return self.has_flag(TypeFlag.SIGNED)

    def is_unsigned(self) -> bool:
        return self.has_flag(TypeFlag.UNSIGNED)

    def is_floating_point(self) -> bool:
        return self.has_flag(TypeFlag.FLOATING_POINT)

    def is_string(self) -> bool:
        return self.has_flag(TypeFlag.STRING)

    def is_arch_dependent(self) -> bool:
        return self.has_flag(TypeFlag.ARCH_DEP)

    def is_arithmetic(self) -> bool:
        return self.has_flag(TypeFlag.INTEGER) or self.has_flag(TypeFlag.FLOATING_POINT)

    def _cast_kind_to(self, other: Type) -> CastKind | None:
        if self.kind is TypeKind.INVALID or other.kind is TypeKind.INVALID:
            raise ValueError("cannot convert to or from an invalid type")
        if self is other:
            return None
        if self.is_builtin() and other.is_builtin():
            return _CAST_MATRIX[self.builtin_kind, other.builtin_kind]
        return CastKind.NO

    def is_implicitly_convertible_to(self, other: Type) -> bool:
        cast = self._cast_kind_to(other)
        return cast is None or cast is CastKind.IMPLICIT

    def is_explicitly_convertible_to(self, other: Type) -> bool:
        cast = self._cast_kind_to(other)
        return cast is None or cast in (CastKind.IMPLICIT, CastKind.EXPLICIT)


_POINTER_SIZE = struct.calcsize("P")
_U64_SIZE = struct.calcsize("Q")

_INT = TypeFlag.INTEGER
_SIGNED = TypeFlag.INTEGER | TypeFlag.SIGNED
_UNSIGNED = TypeFlag.INTEGER | TypeFlag.UNSIGNED
_ARCH = TypeFlag.ARCH_DEP


def _builtin(kind: BuiltinTypeKind, size: int, align: int, flags: TypeFlag) -> Type:
    return Type(TypeKind.BUILTIN, size, align, kind, flags)


_BUILTIN_TYPES = {
    t.builtin_kind: t
    for t in (
        _builtin(_B.VOID, 0, 1, TypeFlag.NONE),
        _builtin(_B.BOOL, 1, 1, TypeFlag.BOOLEAN),
        _builtin(_B.CHAR, 1, 1, _SIGNED),
        _builtin(_B.SHORT, 2, 2, _SIGNED),
        _builtin(_B.INT, 4, 4, _SIGNED),
        _builtin(_B.LONG, 8, 8, _SIGNED),
        _builtin(_B.SZ, _POINTER_SIZE, _POINTER_SIZE, _SIGNED | _ARCH),
        _builtin(_B.INTPTR, _POINTER_SIZE, _POINTER_SIZE, _SIGNED | _ARCH),
        _builtin(_B.UCHAR, 1, 1, _UNSIGNED),
        _builtin(_B.USHORT, 2, 2, _UNSIGNED),
        _builtin(_B.UINT, 4, 4, _UNSIGNED),
        _builtin(_B.ULONG, 8, 8, _UNSIGNED),
        _builtin(_B.USZ, _POINTER_SIZE, _POINTER_SIZE, _UNSIGNED | _ARCH),
        _builtin(_B.UINTPTR, _POINTER_SIZE, _POINTER_SIZE, _UNSIGNED | _ARCH),
        _builtin(_B.FLOAT, 4, 4, TypeFlag.FLOATING_POINT),
        _builtin(_B.DOUBLE, 8, 8, TypeFlag.FLOATING_POINT),
        _builtin(_B.STRING, _POINTER_SIZE + _U64_SIZE, _POINTER_SIZE, TypeFlag.STRING),
        _builtin(_B.CSTRING, _POINTER_SIZE, _POINTER_SIZE, TypeFlag.STRING),
        _builtin(_B.RAWPTR, _POINTER_SIZE, _POINTER_SIZE, TypeFlag.NONE),
    )
}


def try_get_builtin_type(kind: BuiltinTypeKind | int) -> Type | None:
    """Return the shared built-in type for ``kind``, or None if there is none."""
    try:
        member = BuiltinTypeKind(kind)
    except ValueError:
        return None
    return _BUILTIN_TYPES.get(member)


def get_builtin_type(kind: BuiltinTypeKind | int) -> Type:
    """Return the shared built-in type for ``kind``; ValueError if invalid."""
    found = try_get_builtin_type(kind)
    if found is None:
        raise ValueError(f"invalid builtin type kind: {kind!r}")
    return found


def get_implicit_common_type(a: Type, b: Type) -> Type | None:
    """Return the type both operands widen to implicitly, or None."""
    if a.kind is TypeKind.INVALID or b.kind is TypeKind.INVALID:
        raise ValueError("cannot find a common type with an invalid type")
    if a is b:
        return a
    if a.is_implicitly_convertible_to(b):
        return b
    if b.is_implicitly_convertible_to(a):
        return a
    return None