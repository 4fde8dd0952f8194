"""Errors raised while encoding or decoding dictionary representations."""


class CodingError(RuntimeError):
    """Base class for all coding failures."""


class NilInput(CodingError):
    """Raised when a value required for decoding is absent."""


class NilDictionary(NilInput):
    """Raised when the polymorphic entry point receives no dictionary."""


class MissingClassKey(CodingError):
    """Raised when a dictionary representation has no class name."""


class UnknownClass(CodingError):
    """Raised when a class name cannot be resolved."""


class TargetFieldNotAssignable(CodingError):
    """Raised when a decoded value cannot be assigned to its field."""


class MalformedStructureEncoding(CodingError):
    """Raised when a structure string cannot be parsed or produced."""


class UnsupportedCollectionCapability(CodingError):
    """Raised when a value or class lacks the capability its category needs."""


class CyclicReference(CodingError):
    """Raised when an object graph refers back to an object being encoded."""
