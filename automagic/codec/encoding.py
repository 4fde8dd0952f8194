"""Encoding and decoding of single field values.

encode_value() turns a live value into its plain form (scalars, dicts,
lists, tuples and marker strings) and decode_value() rebuilds the live
value. Both recurse into collections, classifying every element on its
own since element types are not declared.
"""

import logging
import types
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from .capabilities import is_array_class, is_hash_class, require
from .classifier import classify_for_decode, classify_for_encode, is_coding_class
from .errors import (
    CyclicReference,
    MissingClassKey,
    NilDictionary,
    NilInput,
    UnknownClass,
    UnsupportedCollectionCapability,
)
from .registry import ClassRegistry, is_structure_class, registry
from .structures import format_structure, parse_structure
from .types import CLASS_KEY, FieldType, FrozenHash

logger = logging.getLogger(__name__)

# Concrete classes rebuilt when the target collection class is unknown.
DEFAULT_COLLECTIONS: dict[FieldType, type] = {
    FieldType.COLLECTION_HASH: types.MappingProxyType,
    FieldType.COLLECTION_HASH_MUTABLE: dict,
    FieldType.COLLECTION_ARRAY: tuple,
    FieldType.COLLECTION_ARRAY_MUTABLE: list,
}

# Ids of the objects and collections currently being encoded.
_encoding_path: ContextVar[frozenset[int]] = ContextVar("_encoding_path", default=frozenset())

# Registry the object currently being decoded was resolved with.
_decoding_registry: ContextVar[ClassRegistry | None] = ContextVar(
    "_decoding_registry", default=None
)


@contextmanager
def visiting(value: Any) -> Iterator[None]:
    """Mark value as being encoded for the duration of the block.

    Raises:
        CyclicReference: value is already being encoded further up.
    """
    path = _encoding_path.get()
    if id(value) in path:
        raise CyclicReference(f"{type(value).__name__} object refers back to itself")
    token = _encoding_path.set(path | {id(value)})
    try:
        yield
    finally:
        _encoding_path.reset(token)


def _is_text(value: Any) -> bool:
    return isinstance(value, (str, bytes, bytearray))


def encode_value(value: Any, field_type: FieldType | None = None) -> Any:
    """Encode a live value into its plain form.

    Args:
        value: The value to encode. None is returned as None and the caller
            leaves it out of the result.
        field_type: Declared category, or None to classify value at runtime.

    Returns:
        The plain value.

    Raises:
        UnsupportedCollectionCapability: value does not fit field_type.
        CyclicReference: value contains itself.
    """
    if value is None:
        return None
    if field_type is None:
        field_type = classify_for_encode(value)

    if field_type == FieldType.SCALAR:
        return value

    if field_type == FieldType.CUSTOM_OBJECT:
        if not is_coding_class(type(value), enabled_only=False):
            raise UnsupportedCollectionCapability(
                f"{type(value).__name__} has no dictionary representation"
            )
        return value.dictionary_representation()

    if field_type == FieldType.STRUCTURE:
        return format_structure(value)

    if field_type.is_hash:
        if not is_hash_class(type(value)):
            raise UnsupportedCollectionCapability(
                f"{type(value).__name__} is not a keyed collection"
            )
        with visiting(value):
            encoded: dict[Any, Any] = {}
            for key in value.keys():
                item = value[key]
                if item is not None:
                    encoded[key] = encode_value(item)
        if field_type.is_mutable:
            return encoded
        return FrozenHash(encoded)

    if _is_text(value) or not is_array_class(type(value)):
        raise UnsupportedCollectionCapability(
            f"{type(value).__name__} is not an ordered collection"
        )
    with visiting(value):
        items = [encode_value(item) for item in value if item is not None]
    if field_type.is_mutable:
        return items
    return tuple(items)


def _active_registry(reg: ClassRegistry | None) -> ClassRegistry:
    if reg is not None:
        return reg
    active = _decoding_registry.get()
    return active if active is not None else registry


def object_from_dictionary(
    data: Any, target: type | None = None, reg: ClassRegistry | None = None
) -> Any:
    """Create an object from a dictionary representation.

    The concrete class is read from the reserved class key, so data may
    describe any registered codec class.

    Args:
        data: The dictionary representation.
        target: Class the result must be an instance of, if any.
        reg: Registry to resolve the class name with. Objects and structures
            nested in data resolve through the same registry.

    Returns:
        The new object.

    Raises:
        NilDictionary: data is None.
        MissingClassKey: data has no class key.
        UnknownClass: the class name cannot be resolved to a codec class,
            or the class is not a subclass of target.
    """
    if data is None:
        raise NilDictionary("Cannot create an object from None")
    if not is_hash_class(type(data)):
        raise UnsupportedCollectionCapability(
            f"Expected a dictionary representation, got {type(data).__name__}"
        )
    if CLASS_KEY not in data.keys():
        raise MissingClassKey(f"Dictionary representation has no {CLASS_KEY!r} key")

    name = data[CLASS_KEY]
    if not isinstance(name, str):
        raise UnknownClass(f"Class name must be a string, got {type(name).__name__}")

    reg = _active_registry(reg)
    cls = reg.resolve(name)
    if not is_coding_class(cls):
        raise UnknownClass(f"{name!r} is not a codec class")
    if target is not None and not issubclass(cls, target):
        raise UnknownClass(f"{name} is not a {target.__name__}")

    logger.debug("Decoding %s", name)
    token = _decoding_registry.set(reg)
    try:
        instance = cls.allocate()
        return instance.init_with_dictionary_representation(data)
    finally:
        _decoding_registry.reset(token)


def _construct(cls: type, *args: Any) -> Any:
    try:
        return cls(*args)
    except TypeError as exc:
        raise UnsupportedCollectionCapability(f"Cannot construct {cls.__name__}: {exc}") from exc


def _decode_hash(plain: Any, field_type: FieldType, cls: type, reg: ClassRegistry) -> Any:
    if not is_hash_class(type(plain)):
        raise UnsupportedCollectionCapability(
            f"Expected a keyed collection, got {type(plain).__name__}"
        )
    if field_type.is_mutable:
        result = _construct(cls)
        for key in plain.keys():
            result[key] = decode_value(plain[key], reg=reg)
        return result
    return _construct(cls, {key: decode_value(plain[key], reg=reg) for key in plain.keys()})


def _decode_array(plain: Any, field_type: FieldType, cls: type, reg: ClassRegistry) -> Any:
    if _is_text(plain) or not is_array_class(type(plain)):
        raise UnsupportedCollectionCapability(
            f"Expected an ordered collection, got {type(plain).__name__}"
        )
    if field_type.is_mutable:
        result = _construct(cls)
        for item in plain:
            result.append(decode_value(item, reg=reg))
        return result
    return _construct(cls, [decode_value(item, reg=reg) for item in plain])


def decode_value(
    plain: Any,
    field_type: FieldType | None = None,
    target: type | None = None,
    reg: ClassRegistry | None = None,
) -> Any:
    """Decode a plain value back into a live value.

    Args:
        plain: The encoded value.
        field_type: Declared category, or None to guess it from plain.
        target: Declared class (custom objects and structures) or concrete
            collection class to rebuild. Collections fall back to dict,
            MappingProxyType, list or tuple.
        reg: Registry to resolve class and structure names with. Defaults to
            the registry of the object being decoded, then the default one.

    Returns:
        The live value.

    Raises:
        NilInput: plain is None for a non-scalar category.
        MalformedStructureEncoding: plain is not a valid structure string.
        UnsupportedCollectionCapability: plain or target does not fit field_type.
    """
    if field_type is None:
        field_type = classify_for_decode(plain)

    if field_type == FieldType.SCALAR:
        return plain
    if plain is None:
        raise NilInput(f"Cannot decode None as {field_type.value}")

    reg = _active_registry(reg)
    if field_type == FieldType.CUSTOM_OBJECT:
        declared = target if is_coding_class(target, enabled_only=False) else None
        return object_from_dictionary(plain, declared, reg)

    if field_type == FieldType.STRUCTURE:
        return parse_structure(plain, target if is_structure_class(target) else None, reg)

    cls = target if target is not None else DEFAULT_COLLECTIONS[field_type]
    require(cls, field_type.capability)
    if field_type.is_hash:
        return _decode_hash(plain, field_type, cls, reg)
    return _decode_array(plain, field_type, cls, reg)
