"""Field categories, collection capabilities and field descriptors.

These describe how a field is coded at runtime. Descriptors are derived
from class annotations by :mod:`automagic.codec.fields` and consulted by the
encoder and decoder.
"""

from dataclasses import dataclass
from enum import StrEnum, auto

# Reserved key holding the concrete class name of an encoded object.
CLASS_KEY = "class"


class Capability(StrEnum):
    """Structural contract a collection class may satisfy."""

    ARRAY = auto()
    ARRAY_MUTABLE = auto()
    HASH = auto()
    HASH_MUTABLE = auto()


class FieldType(StrEnum):
    """How a field value is transformed to and from its plain form."""

    SCALAR = auto()  # Stored as is
    CUSTOM_OBJECT = auto()  # Nested dictionary representation
    STRUCTURE = auto()  # NamedTuple value, stored as a marker string
    COLLECTION_HASH = auto()
    COLLECTION_HASH_MUTABLE = auto()
    COLLECTION_ARRAY = auto()
    COLLECTION_ARRAY_MUTABLE = auto()

    @property
    def is_hash(self) -> bool:
        return self in (FieldType.COLLECTION_HASH, FieldType.COLLECTION_HASH_MUTABLE)

    @property
    def is_array(self) -> bool:
        return self in (FieldType.COLLECTION_ARRAY, FieldType.COLLECTION_ARRAY_MUTABLE)

    @property
    def is_collection(self) -> bool:
        return self.is_hash or self.is_array

    @property
    def is_mutable(self) -> bool:
        return self in (FieldType.COLLECTION_HASH_MUTABLE, FieldType.COLLECTION_ARRAY_MUTABLE)

    @property
    def capability(self) -> Capability | None:
        """Capability a target class needs to hold a value of this type."""
        return _CAPABILITIES.get(self)


_CAPABILITIES = {
    FieldType.COLLECTION_HASH: Capability.HASH,
    FieldType.COLLECTION_HASH_MUTABLE: Capability.HASH_MUTABLE,
    FieldType.COLLECTION_ARRAY: Capability.ARRAY,
    FieldType.COLLECTION_ARRAY_MUTABLE: Capability.ARRAY_MUTABLE,
}


class FrozenHash(dict):
    """Plain form of an immutable keyed collection.

    Property-list and JSON writers store it like any dict. It lacks the
    keyed mutation operations, so decoding classifies it as
    COLLECTION_HASH again.
    """

    __setitem__ = None  # type: ignore[assignment]
    __delitem__ = None  # type: ignore[assignment]
    clear = None  # type: ignore[assignment]
    pop = None  # type: ignore[assignment]
    popitem = None  # type: ignore[assignment]
    setdefault = None  # type: ignore[assignment]
    update = None  # type: ignore[assignment]
    __ior__ = None  # type: ignore[assignment]

    def __reduce__(self):
        return (type(self), (dict(self),))

    def __repr__(self) -> str:
        return f"FrozenHash({dict.__repr__(self)})"


@dataclass(frozen=True)
class FieldDescriptor:
    """Describes one coded field of a class.

    For collections, collection_class is the concrete class rebuilt on
    decode. For custom objects and structures, declared_type is the
    declared class. field_type is None when the annotation does not pin a
    category (Any, or no usable annotation); the runtime value decides.
    """

    name: str
    field_type: FieldType | None
    declared_type: type | None = None
    collection_class: type | None = None

    @property
    def type_name(self) -> str | None:
        if self.declared_type is None:
            return None
        return self.declared_type.__name__
