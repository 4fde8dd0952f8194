"""Dictionary coding for objects."""

import dataclasses
import logging
from typing import Any, ClassVar, Self

from .encoding import decode_value, encode_value, object_from_dictionary, visiting
from .errors import NilDictionary, TargetFieldNotAssignable, UnsupportedCollectionCapability
from .fields import descriptor_for, field_names
from .registry import registry
from .types import CLASS_KEY, FieldType

logger = logging.getLogger(__name__)


class Coding:
    """Base class for objects stored as dictionary representations.

    Subclasses list their fields as annotations, usually as dataclasses.
    Defining a subclass registers it under its name (or coding_name) so
    that object_with_dictionary_representation() can rebuild it from the
    reserved "class" key.

    Example:
        @dataclass
        class Address(Coding):
            street: str = ""
            number: int = 0

        @dataclass
        class Person(Coding):
            name: str = ""
            address: Address | None = None
            tags: list[str] = field(default_factory=list)

        data = person.dictionary_representation()
        copy = Coding.object_with_dictionary_representation(data)

    Set coding_enabled = False on abstract bases to keep them out of the
    registry. Neither coding_enabled nor coding_name is inherited.
    """

    coding_enabled: ClassVar[bool] = False
    coding_name: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if vars(cls).get("coding_enabled", True):
            registry.register(cls)

    @classmethod
    def allocate(cls) -> Self:
        """Create an instance without running __init__.

        Dataclass defaults and default factories are applied. Fields without
        a default are set to None.
        """
        instance = cls.__new__(cls)
        if dataclasses.is_dataclass(cls):
            for f in dataclasses.fields(cls):
                if f.default is not dataclasses.MISSING:
                    value = f.default
                elif f.default_factory is not dataclasses.MISSING:
                    value = f.default_factory()
                else:
                    value = None
                object.__setattr__(instance, f.name, value)
        else:
            for name in field_names(cls):
                if not hasattr(cls, name):
                    setattr(instance, name, None)
        return instance

    @classmethod
    def object_with_dictionary_representation(cls, data: Any) -> Any:
        """Create an object of the class named in data.

        Called on a subclass, the named class must be that subclass or
        derive from it.

        Raises:
            NilDictionary: data is None.
            MissingClassKey: data has no "class" key.
            UnknownClass: the class name is not registered, or names a class
                outside this one.
        """
        return object_from_dictionary(data, None if cls is Coding else cls)

    def init_with_dictionary_representation(self, data: Any) -> Self:
        """Set the fields of this object from a dictionary representation.

        The class name in data is not checked. Keys that are not fields of
        this object are ignored; fields missing from data keep their value.

        Every field is decoded before any is assigned, so a decoding error
        leaves the object unchanged. An assignment that fails part way
        leaves the fields assigned before it in place.

        Raises:
            TargetFieldNotAssignable: a field rejects its decoded value.
        """
        if data is None:
            raise NilDictionary(f"Cannot initialize {type(self).__name__} from None")

        keys = set(self.keys_for_dictionary_representation())
        decoded: dict[str, Any] = {}
        for key in data.keys():
            if key == CLASS_KEY:
                continue
            if key not in keys:
                logger.debug("Ignoring unknown key %r for %s", key, type(self).__name__)
                continue
            decoded[key] = self.decode_field(key, data)

        for key, value in decoded.items():
            try:
                setattr(self, key, value)
            except (AttributeError, TypeError) as exc:
                raise TargetFieldNotAssignable(
                    f"Cannot assign {key!r} on {type(self).__name__}: {exc}"
                ) from exc
        return self

    def dictionary_representation(self) -> dict[str, Any]:
        """Encode this object and every object it holds.

        Fields whose value is None are left out.

        Raises:
            CyclicReference: the object graph contains a cycle.
        """
        data: dict[str, Any] = {CLASS_KEY: registry.name_for(type(self))}
        with visiting(self):
            for key in self.keys_for_dictionary_representation():
                value = self.encode_field(key)
                if value is not None:
                    data[key] = value
        return data

    def keys_for_dictionary_representation(self) -> list[str]:
        """Return the keys written to the dictionary representation.

        Defaults to the annotated fields. Override and extend the result to
        code attributes that are not annotated.
        """
        return field_names(type(self))

    def field_type_for_key(self, key: str) -> FieldType | None:
        """Return the declared field type for key.

        None lets the value decide: the live value when encoding, the plain
        value when decoding. Override to pin types of non-annotated keys.
        """
        descriptor = descriptor_for(type(self), key)
        if descriptor is None:
            return None
        return descriptor.field_type

    def encode_field(self, key: str) -> Any:
        """Encode the value of one field. Override to customize encoding."""
        return encode_value(getattr(self, key, None), self.field_type_for_key(key))

    def decode_field(self, key: str, data: Any) -> Any:
        """Decode the value of one field from data. Override to customize decoding."""
        descriptor = descriptor_for(type(self), key)
        target = None
        if descriptor is not None:
            target = descriptor.collection_class or descriptor.declared_type
        return decode_value(data[key], self.field_type_for_key(key), target)


def to_dictionary(obj: Any) -> dict[str, Any]:
    """Return the dictionary representation of a codec object."""
    if not isinstance(obj, Coding):
        raise UnsupportedCollectionCapability(f"{type(obj).__name__} is not a codec object")
    return obj.dictionary_representation()


def from_dictionary(data: Any) -> Any:
    """Create an object from a dictionary representation."""
    return Coding.object_with_dictionary_representation(data)
