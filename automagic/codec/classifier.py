"""Field type classification.

Values about to be encoded are classified by their live type. Values that
were already encoded are classified by the plain shape they were given:
a mapping holding the class key is a custom object, other mappings and
sequences are collections, marker strings are structures and anything
else is a scalar.
"""

import types
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from datetime import date
from typing import Any, Union, get_args, get_origin

from .capabilities import is_array_class, is_hash_class, supports
from .registry import is_structure_class
from .structures import is_structure, is_structure_encoding
from .types import CLASS_KEY, Capability, FieldType

# Values of these types are stored as they are.
SCALAR_TYPES: tuple[type, ...] = (str, bytes, bytearray, bool, int, float, date)

# Abstract collection annotations and the concrete class rebuilt for them.
ABSTRACT_COLLECTIONS: dict[type, tuple[FieldType, type]] = {
    Mapping: (FieldType.COLLECTION_HASH, types.MappingProxyType),
    MutableMapping: (FieldType.COLLECTION_HASH_MUTABLE, dict),
    Sequence: (FieldType.COLLECTION_ARRAY, tuple),
    MutableSequence: (FieldType.COLLECTION_ARRAY_MUTABLE, list),
}


def is_coding_class(cls: Any, enabled_only: bool = True) -> bool:
    """Check if cls is a codec class.

    coding_enabled is read from the class itself and is not inherited.
    Abstract bases switch it off; they still count as codec classes in
    annotations when enabled_only is False.
    """
    if not isinstance(cls, type) or not callable(getattr(cls, "dictionary_representation", None)):
        return False
    return not enabled_only or bool(vars(cls).get("coding_enabled", True))


def _hash_type(cls: type) -> FieldType:
    if supports(cls, Capability.HASH_MUTABLE):
        return FieldType.COLLECTION_HASH_MUTABLE
    return FieldType.COLLECTION_HASH


def _array_type(cls: type) -> FieldType:
    if supports(cls, Capability.ARRAY_MUTABLE):
        return FieldType.COLLECTION_ARRAY_MUTABLE
    return FieldType.COLLECTION_ARRAY


def classify_for_encode(value: Any) -> FieldType:
    """Return the field type of a live value."""
    if value is None or isinstance(value, SCALAR_TYPES):
        return FieldType.SCALAR
    cls = type(value)
    if is_coding_class(cls, enabled_only=False):
        return FieldType.CUSTOM_OBJECT
    if is_structure(value):
        return FieldType.STRUCTURE
    if is_hash_class(cls):
        return _hash_type(cls)
    if is_array_class(cls):
        return _array_type(cls)
    return FieldType.SCALAR


def classify_for_decode(value: Any) -> FieldType:
    """Guess the field type of an already encoded value from its shape."""
    if value is None or isinstance(value, (str, bytes, bytearray)):
        if is_structure_encoding(value):
            return FieldType.STRUCTURE
        return FieldType.SCALAR
    cls = type(value)
    if is_hash_class(cls):
        if CLASS_KEY in value.keys():
            return FieldType.CUSTOM_OBJECT
        return _hash_type(cls)
    if is_array_class(cls):
        return _array_type(cls)
    return FieldType.SCALAR


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
        return Any
    return annotation


def classify_annotation(annotation: Any) -> tuple[FieldType | None, type | None, type | None]:
    """Classify a declared field annotation.

    Args:
        annotation: A resolved type annotation.

    Returns:
        Tuple of (field_type, declared_type, collection_class). field_type is
        None when the annotation does not pin a category.
    """
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation) or annotation

    if annotation is Any or not isinstance(origin, type) or origin is object:
        return None, None, None
    if issubclass(origin, SCALAR_TYPES):
        return FieldType.SCALAR, None, None
    if is_coding_class(origin, enabled_only=False):
        return FieldType.CUSTOM_OBJECT, origin, None
    if is_structure_class(origin):
        return FieldType.STRUCTURE, origin, None
    if origin in ABSTRACT_COLLECTIONS:
        field_type, default_class = ABSTRACT_COLLECTIONS[origin]
        return field_type, None, default_class
    if is_hash_class(origin):
        return _hash_type(origin), None, origin
    if is_array_class(origin):
        return _array_type(origin), None, origin
    return FieldType.SCALAR, None, None
