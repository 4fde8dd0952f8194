"""Classification reports for dictionary representations."""

from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import DataClassJsonMixin

from automagic.codec.capabilities import is_array_class, is_hash_class
from automagic.codec.classifier import classify_for_decode
from automagic.codec.types import CLASS_KEY, FieldType

PREVIEW_LENGTH = 60


@dataclass
class ReportNode(DataClassJsonMixin):
    """Classification of one value in a dictionary representation.

    For custom objects class_name is the encoded class name, for
    structures it is the structure name. Scalars carry a short preview of
    their value.
    """

    key: str
    field_type: str
    class_name: str | None = None
    value_type: str | None = None
    preview: str | None = None
    children: list["ReportNode"] = field(default_factory=list)


@dataclass(frozen=True)
class Difference:
    """A value that changed between two dictionary representations."""

    path: str
    expected: Any
    actual: Any


def _preview(value: Any) -> str:
    text = repr(value)
    if len(text) > PREVIEW_LENGTH:
        return text[: PREVIEW_LENGTH - 3] + "..."
    return text


def build_report(plain: Any, key: str = "$") -> ReportNode:
    """Classify plain and everything nested in it."""
    field_type = classify_for_decode(plain)
    node = ReportNode(key=key, field_type=field_type.value)

    if field_type == FieldType.SCALAR:
        node.value_type = type(plain).__name__
        node.preview = _preview(plain)
    elif field_type == FieldType.STRUCTURE:
        node.class_name = plain[1 : plain.index("{")]
        node.preview = plain
    elif field_type == FieldType.CUSTOM_OBJECT:
        node.class_name = str(plain[CLASS_KEY])
        node.children = [build_report(plain[k], str(k)) for k in plain.keys() if k != CLASS_KEY]
    elif field_type.is_hash:
        node.children = [build_report(plain[k], str(k)) for k in plain.keys()]
    else:
        node.children = [build_report(item, f"[{i}]") for i, item in enumerate(plain)]

    return node


def _is_hash(value: Any) -> bool:
    return is_hash_class(type(value))


def _is_array(value: Any) -> bool:
    return not isinstance(value, (str, bytes, bytearray)) and is_array_class(type(value))


def differences(expected: Any, actual: Any, path: str = "$") -> list[Difference]:
    """List the values that differ between two plain values.

    Lists and tuples compare equal when their items do, since property-list
    and JSON readers return every array as a list.
    """
    if _is_hash(expected) and _is_hash(actual):
        found = []
        for key in list(expected.keys()) + [k for k in actual.keys() if k not in expected.keys()]:
            sub_path = f"{path}.{key}"
            if key not in actual.keys():
                found.append(Difference(sub_path, expected[key], None))
            elif key not in expected.keys():
                found.append(Difference(sub_path, None, actual[key]))
            else:
                found.extend(differences(expected[key], actual[key], sub_path))
        return found

    if _is_array(expected) and _is_array(actual):
        if len(expected) != len(actual):
            return [Difference(path, expected, actual)]
        found = []
        for i, (a, b) in enumerate(zip(expected, actual)):
            found.extend(differences(a, b, f"{path}[{i}]"))
        return found

    if expected != actual or type(expected) is not type(actual):
        return [Difference(path, expected, actual)]
    return []
