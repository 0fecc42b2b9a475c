"""
Resolver contract shared by all backends
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Tuple

from ..descriptors import FieldDescriptor, TypeDescriptor

AccessPolicy = Callable[[FieldDescriptor, Any], bool]


def allow_all(field: FieldDescriptor, caller: Any = None) -> bool:
    """Access policy that exposes every field"""
    return True


def public_only(field: FieldDescriptor, caller: Any = None) -> bool:
    """
    Access policy that hides underscore-prefixed fields

    A private field stays visible when the caller context is the owning
    class or one of its subclasses.
    """
    if not field.name.startswith("_"):
        return True
    owner = field.owner
    return (
        isinstance(caller, type)
        and isinstance(owner, type)
        and issubclass(caller, owner)
    )


class Resolver(ABC):
    """Supplies field lists and field values for one backend"""

    name = "base"
    # When True the engine never looks beyond ``nested`` for composite values
    closed_world = False

    def __init__(self, access_policy: Optional[AccessPolicy] = None):
        self.access_policy = access_policy or allow_all

    @abstractmethod
    def describe(self, target: Any) -> TypeDescriptor:
        """Get the type descriptor for an instance (or, where supported, a type)"""

    def fields_of(self, descriptor: TypeDescriptor) -> Sequence[FieldDescriptor]:
        """Members of ``descriptor`` in traversal order, statics included"""
        return descriptor.members

    @abstractmethod
    def value_of(
        self, field: FieldDescriptor, instance: Any, caller: Any = None
    ) -> Any:
        """Read one field value from ``instance``"""

    @abstractmethod
    def nested(
        self, field: FieldDescriptor, value: Any
    ) -> Optional[Tuple[TypeDescriptor, "Resolver"]]:
        """Descriptor and resolver to recurse with, or ``None`` for scalar values"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
