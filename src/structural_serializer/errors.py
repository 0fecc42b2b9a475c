"""
Exception classes for structural serialization
"""

from typing import Optional, Sequence


class StructuralSerializerError(Exception):
    """Base exception class for all structural serializer errors"""

    pass


class AccessDenied(StructuralSerializerError):
    """
    Raised when a field exists but is not visible to the caller

    The traversal engine recovers from this by omitting the field, so it
    never escapes ``object_to_string``.
    """

    def __init__(self, field_name: str, type_name: str):
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"Field '{field_name}' of {type_name} is not accessible")


class NotFound(StructuralSerializerError, LookupError):
    """Raised when a descriptor is used against an instance it does not describe"""

    def __init__(self, field_name: str, type_name: str, reason: Optional[str] = None):
        self.field_name = field_name
        self.type_name = type_name
        message = f"Field '{field_name}' not found on {type_name}"
        if reason:
            message += f" - {reason}"
        super().__init__(message)


class RecursionLimitExceeded(StructuralSerializerError):
    """
    Raised when a composite graph is cyclic or nested deeper than allowed

    ``type_chain`` holds the type names from the outermost value down to the
    one that broke the limit.
    """

    def __init__(self, type_chain: Sequence[str], limit: int, cycle: bool = False):
        self.type_chain = tuple(type_chain)
        self.limit = limit
        self.cycle = cycle
        reason = "cycle detected" if cycle else f"depth limit {limit} exceeded"
        super().__init__(f"{reason}: {' -> '.join(self.type_chain)}")

    def prepend(self, type_name: str) -> "RecursionLimitExceeded":
        """Copy of this error with ``type_name`` added as the outermost link"""
        chain = (type_name,) + self.type_chain
        return RecursionLimitExceeded(chain, self.limit, self.cycle)


class DuplicateField(StructuralSerializerError, ValueError):
    """Raised when two members of one type descriptor share a name"""

    def __init__(self, field_name: str, type_name: str):
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"Duplicate field '{field_name}' in {type_name}")


class SpecializationFailure(StructuralSerializerError):
    """Raised at build time when a type (or a nested type) cannot be specialized"""

    def __init__(self, type_name: str, reason: str):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Cannot specialize {type_name}: {reason}")


class UnsupportedType(StructuralSerializerError, TypeError):
    """Raised when a value handed to the top-level entry point is not composite"""

    pass
