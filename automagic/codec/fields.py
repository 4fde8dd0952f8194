"""Field schema of codec classes.

The fields of a class are its public annotations, in declaration order
(base classes first). Dataclass fields may carry coding metadata through
coding_field() to pin a category or a concrete collection class.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from functools import cache
from typing import Any, ClassVar, get_args, get_origin, get_type_hints

from .classifier import classify_annotation
from .registry import is_structure_class, registry
from .types import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

METADATA_KEY = "automagic"


@dataclass(frozen=True)
class CodingFieldInfo:
    """Coding metadata attached to a dataclass field."""

    field_type: FieldType | None = None
    collection_class: type | None = None


# Sentinel for missing default
_MISSING: Any = object()


def coding_field(
    field_type: FieldType | None = None,
    *,
    collection_class: type | None = None,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a dataclass field with coding metadata.

    Args:
        field_type: Category to use instead of the one read from the annotation.
        collection_class: Concrete class rebuilt when decoding a collection.
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with coding metadata attached.
    """
    metadata = {METADATA_KEY: CodingFieldInfo(field_type, collection_class)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError) as exc:
        # Unresolvable forward references leave those fields untyped.
        logger.debug("Cannot resolve annotations of %s: %s", cls.__name__, exc)
        hints: dict[str, Any] = {}
        for base in reversed(cls.__mro__):
            hints.update(getattr(base, "__annotations__", {}))
        return {k: (Any if isinstance(v, str) else v) for k, v in hints.items()}


def _register_structures(annotation: Any) -> None:
    if is_structure_class(annotation):
        if registry.name_for(annotation) not in registry:
            registry.register_structure(annotation)
        return
    for arg in get_args(annotation):
        _register_structures(arg)


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


@cache
def field_descriptors(cls: type) -> tuple[FieldDescriptor, ...]:
    """Return the descriptors of every coded field of cls.

    Private (underscore) names and ClassVar annotations are skipped.
    """
    hints = _type_hints(cls)
    metadata: dict[str, CodingFieldInfo] = {}
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
        for f in dataclasses.fields(cls):
            if METADATA_KEY in f.metadata:
                metadata[f.name] = f.metadata[METADATA_KEY]
    else:
        names = list(hints)

    descriptors = []
    for name in names:
        annotation = hints.get(name, Any)
        if name.startswith("_") or _is_class_var(annotation):
            continue

        _register_structures(annotation)
        field_type, declared, collection_class = classify_annotation(annotation)

        info = metadata.get(name)
        if info is not None:
            if info.field_type is not None:
                field_type = info.field_type
            if info.collection_class is not None:
                collection_class = info.collection_class

        descriptors.append(
            FieldDescriptor(
                name=name,
                field_type=field_type,
                declared_type=declared,
                collection_class=collection_class,
            )
        )
    return tuple(descriptors)


def field_names(cls: type) -> list[str]:
    """Return the coded field names of cls in order."""
    return [d.name for d in field_descriptors(cls)]


def descriptor_for(cls: type, name: str) -> FieldDescriptor | None:
    """Return the descriptor of field name, or None if cls has no such field."""
    for descriptor in field_descriptors(cls):
        if descriptor.name == name:
            return descriptor
    return None
