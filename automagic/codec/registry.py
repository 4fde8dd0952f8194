"""Name-to-class registry used for polymorphic reconstruction."""

import logging
from collections.abc import Iterator
from typing import Any, get_type_hints

from .errors import UnknownClass

logger = logging.getLogger(__name__)


def is_structure_class(cls: Any) -> bool:
    """Check if cls is a NamedTuple-style structure class."""
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


class ClassRegistry:
    """Maps the names written under the reserved class key to classes.

    Codec-enabled classes register themselves when they are defined.
    Structure classes are registered as they are found in field
    annotations, or explicitly with register_structure().
    """

    def __init__(self) -> None:
        self._classes: dict[str, type] = {}

    def register(self, cls: type, name: str | None = None) -> type:
        """Register cls under name (defaults to its coding name).

        Returns:
            The class, so this can be used as a decorator.
        """
        key = name or self.name_for(cls)
        previous = self._classes.get(key)
        if previous is not None and previous is not cls:
            logger.debug("Replacing %s registered as %r with %s", previous, key, cls)
        self._classes[key] = cls
        return cls

    def register_structure(self, cls: type, name: str | None = None) -> type:
        """Register a structure class and any structures nested in it."""
        if not is_structure_class(cls):
            raise TypeError(f"{cls!r} is not a NamedTuple structure")
        self.register(cls, name)
        for member in get_type_hints(cls).values():
            if is_structure_class(member) and member not in self._classes.values():
                self.register_structure(member)
        return cls

    def resolve(self, name: str) -> type:
        """Return the class registered under name.

        Raises:
            UnknownClass: No class is registered under that name.
        """
        try:
            return self._classes[name]
        except KeyError:
            raise UnknownClass(f"No class registered as {name!r}") from None

    def name_for(self, cls: type) -> str:
        """Return the name cls is written under."""
        # coding_name is not inherited, so subclasses keep their own names.
        return vars(cls).get("coding_name") or cls.__name__

    def unregister(self, name: str) -> None:
        self._classes.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)


registry = ClassRegistry()


def register_structure(cls: type, name: str | None = None) -> type:
    """Register a structure class with the default registry."""
    return registry.register_structure(cls, name)
