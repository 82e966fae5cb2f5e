from __future__ import annotations
from datetime import datetime
from typing import Dict, NewType, Optional, Union, get_args, get_origin
import types as _types

# Width-specific aliases; their NewType names are the canonical type names.
Int8 = NewType("int8", int)
Int16 = NewType("int16", int)
Int32 = NewType("int32", int)
Int64 = NewType("int64", int)
Uint = NewType("uint", int)
Uint8 = NewType("uint8", int)
Uint16 = NewType("uint16", int)
Uint32 = NewType("uint32", int)
Uint64 = NewType("uint64", int)
Byte = NewType("byte", int)
Rune = NewType("rune", int)
Float32 = NewType("float32", float)
Float64 = NewType("float64", float)

SQL_TYPES: Dict[str, str] = {
    "int": "bigint",
    "int64": "bigint",
    "uint": "bigint",
    "uint64": "bigint",
    "int8": "tinyint",
    "uint8": "tinyint",
    "byte": "tinyint",
    "int16": "smallint",
    "uint16": "smallint",
    "int32": "int",
    "uint32": "int",
    "rune": "int",
    "float32": "float",
    "float64": "double",
    "string": "varchar",
    "datetime": "datetime",
    "Optional[datetime]": "datetime",
}

INTEGER_TYPES = frozenset({
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64",
    "byte", "rune",
})
FLOAT_TYPES = frozenset({"float32", "float64"})
STRING_TYPES = frozenset({"string"})

_BUILTIN_NAMES = {
    int: "int",
    float: "float64",
    str: "string",
    bytes: "bytes",
    bool: "bool",
    datetime: "datetime",
}

_UNION_TYPES = (Union, getattr(_types, "UnionType", Union))

# names an unevaluated annotation may spell a type with
_SPELLED_NAMES: Dict[str, str] = {
    "str": "string",
    "float": "float64",
    "int": "int",
    "bytes": "bytes",
    "bool": "bool",
    "datetime": "datetime",
}
_SPELLED_NAMES.update({
    alias.__name__.capitalize(): alias.__name__
    for alias in (Int8, Int16, Int32, Int64, Uint, Uint8, Uint16, Uint32, Uint64, Byte, Rune, Float32, Float64)
})


def _spelled_name(text: str) -> str:
    text = text.strip()
    if text.startswith("typing."):
        text = text[len("typing."):]
    if text.startswith("Optional[") and text.endswith("]"):
        return f"Optional[{_spelled_name(text[9:-1])}]"
    parts = [p.strip() for p in text.split("|")]
    if len(parts) == 2 and "None" in parts:
        inner = parts[0] if parts[1] == "None" else parts[1]
        return f"Optional[{_spelled_name(inner)}]"
    return _SPELLED_NAMES.get(text.rsplit(".", 1)[-1], text)


def type_name(tp) -> str:
    """Canonical declared-type name for a Python annotation."""
    if isinstance(tp, str):
        # annotation left unevaluated
        return _spelled_name(tp)
    try:
        if tp in _BUILTIN_NAMES:
            return _BUILTIN_NAMES[tp]
    except TypeError:
        # unhashable annotation objects
        pass
    if getattr(tp, "__supertype__", None) is not None:
        return tp.__name__
    origin = get_origin(tp)
    if origin in _UNION_TYPES:
        args = get_args(tp)
        inner = [a for a in args if a is not type(None)]
        if len(inner) == 1 and len(args) == 2:
            return f"Optional[{type_name(inner[0])}]"
        return " | ".join(type_name(a) for a in args)
    if origin is None and getattr(tp, "__name__", None):
        return tp.__name__
    return str(tp)


def sql_type_for(name: str) -> Optional[str]:
    return SQL_TYPES.get(name)


def is_integer(name: str) -> bool:
    return name in INTEGER_TYPES


def is_float(name: str) -> bool:
    return name in FLOAT_TYPES


def is_string(name: str) -> bool:
    return name in STRING_TYPES
