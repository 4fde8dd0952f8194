"""Structural detection of collection capabilities.

A class is treated as an ordered or keyed collection when its instances
expose the required operations. Concrete types are never listed, so any
user class with the right surface takes part in coding.

Bulk construction follows the builtin convention: ``cls(iterable)`` for
ordered collections and ``cls(mapping)`` for keyed ones. Mutable variants
are filled incrementally on an empty ``cls()``.
"""

from .errors import UnsupportedCollectionCapability
from .types import Capability

REQUIRED_ATTRIBUTES: dict[Capability, tuple[str, ...]] = {
    Capability.ARRAY: ("__len__", "__getitem__", "__iter__", "index"),
    Capability.ARRAY_MUTABLE: ("__len__", "__getitem__", "__iter__", "index", "append"),
    Capability.HASH: ("__len__", "__getitem__", "keys"),
    Capability.HASH_MUTABLE: ("__len__", "__getitem__", "keys", "__setitem__"),
}


def _responds_to_all(cls: type, names: tuple[str, ...]) -> bool:
    return all(callable(getattr(cls, name, None)) for name in names)


def supports(cls: type, capability: Capability) -> bool:
    """Check if instances of cls provide every operation of a capability."""
    if not isinstance(cls, type):
        return False
    return _responds_to_all(cls, REQUIRED_ATTRIBUTES[capability])


def capabilities_of(cls: type) -> frozenset[Capability]:
    """Return every capability supported by cls."""
    return frozenset(c for c in Capability if supports(cls, c))


def is_hash_class(cls: type) -> bool:
    return supports(cls, Capability.HASH)


def is_array_class(cls: type) -> bool:
    # Keyed collections also index with [], so they never count as ordered.
    return supports(cls, Capability.ARRAY) and not is_hash_class(cls)


def require(cls: type, capability: Capability) -> None:
    """Raise UnsupportedCollectionCapability unless cls supports capability."""
    if not supports(cls, capability):
        name = getattr(cls, "__name__", repr(cls))
        raise UnsupportedCollectionCapability(f"{name} does not support {capability.value}")
