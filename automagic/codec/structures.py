"""String encoding for structure (NamedTuple) values.

A structure is written as its registered name followed by its members in
braces, with a leading "@" marker so that it can be told apart from
ordinary strings::

    Point(1, 2)                              -> "@Point{1, 2}"
    Rect(Point(0, 0), Size(10.5, 20))        -> "@Rect{Point{0, 0}, Size{10.5, 20}}"

Members may be ints, floats or nested structures. Floats are written with
repr() so that decoding gives back the exact value.
"""

import os
from dataclasses import dataclass
from typing import Any, get_type_hints

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

from .errors import MalformedStructureEncoding
from .registry import ClassRegistry, is_structure_class, registry

MARKER = "@"

_g_parser: Lark | None = None


@dataclass
class _ParsedStruct:
    name: str
    values: list[Any]


class StructureTransformer(Transformer):
    """Transform a structure parse tree into nested _ParsedStruct values."""

    def start(self, args: list[Any]) -> _ParsedStruct:
        return args[0]

    def struct(self, args: list[Any]) -> _ParsedStruct:
        name, *values = args
        return _ParsedStruct(name=str(name), values=[v for v in values if v is not None])

    def number(self, args: list[Any]) -> int | float:
        text = str(args[0])
        try:
            return int(text)
        except ValueError:
            return float(text)


def _parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/structure.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar)

    return _g_parser


def _parse(text: str) -> _ParsedStruct:
    try:
        tree = _parser().parse(text)
    except LarkError as exc:
        raise MalformedStructureEncoding(f"Not a structure encoding: {text!r}") from exc
    return StructureTransformer().transform(tree)


def is_structure(value: Any) -> bool:
    """Check if value is a structure instance."""
    return is_structure_class(type(value))


def is_structure_encoding(value: Any) -> bool:
    """Check if value is a string in the structure encoding format."""
    if not isinstance(value, str) or not value.startswith(MARKER):
        return False
    try:
        _parse(value)
    except MalformedStructureEncoding:
        return False
    return True


def _format_member(member: Any, reg: ClassRegistry) -> str:
    if is_structure(member):
        return _format_body(member, reg)
    if isinstance(member, bool) or not isinstance(member, (int, float)):
        raise MalformedStructureEncoding(
            f"Structure members must be numbers or structures, got {type(member).__name__}"
        )
    if isinstance(member, float):
        return repr(member)
    return str(member)


def _format_body(value: tuple, reg: ClassRegistry) -> str:
    members = ", ".join(_format_member(m, reg) for m in value)
    name = reg.name_for(type(value))
    if name not in reg:
        # Structures held in untyped fields are only seen here.
        reg.register_structure(type(value))
    return f"{name}{{{members}}}"


def format_structure(value: Any, reg: ClassRegistry | None = None) -> str:
    """Encode a structure value as a marker string.

    Args:
        value: A NamedTuple instance whose members are numbers or structures.
        reg: Registry used to name the structure classes. Classes not yet
            registered are added to it.

    Returns:
        The encoded string.
    """
    if not is_structure(value):
        raise MalformedStructureEncoding(f"{type(value).__name__} is not a structure")
    return MARKER + _format_body(value, reg if reg is not None else registry)


def _build(parsed: _ParsedStruct, reg: ClassRegistry, expected: type | None) -> tuple:
    if expected is not None and reg.name_for(expected) == parsed.name:
        cls = expected
    else:
        cls = reg.resolve(parsed.name)
    if not is_structure_class(cls):
        raise MalformedStructureEncoding(f"{parsed.name} is not a structure class")
    if expected is not None and cls is not expected:
        raise MalformedStructureEncoding(
            f"Expected {expected.__name__} structure, got {parsed.name}"
        )
    if len(parsed.values) != len(cls._fields):
        raise MalformedStructureEncoding(
            f"{parsed.name} takes {len(cls._fields)} members, got {len(parsed.values)}"
        )

    hints = get_type_hints(cls)
    members = []
    for field_name, value in zip(cls._fields, parsed.values):
        if isinstance(value, _ParsedStruct):
            member_type = hints.get(field_name)
            value = _build(value, reg, member_type if is_structure_class(member_type) else None)
        members.append(value)
    return cls(*members)


def parse_structure(
    text: Any, expected: type | None = None, reg: ClassRegistry | None = None
) -> tuple:
    """Decode a structure marker string.

    Args:
        text: The encoded string.
        expected: The declared structure class, if known.
        reg: Registry used to resolve structure names.

    Returns:
        The structure instance.

    Raises:
        MalformedStructureEncoding: text is not a valid encoding, or does not
            match the expected class.
        UnknownClass: the structure name is not registered.
    """
    if not isinstance(text, str):
        raise MalformedStructureEncoding(f"Expected a string, got {type(text).__name__}")
    return _build(_parse(text), reg if reg is not None else registry, expected)
