"""
Runtime type metadata backend

Descriptors are discovered from the class once, published into a
process-wide registry and shared by every instance of that class.
"""

import logging
import threading
from collections.abc import Mapping
from operator import attrgetter
from typing import Any, Dict, Optional, Tuple

from ..descriptors import (
    FieldDescriptor,
    TypeDescriptor,
    declared_members,
    is_composite_type,
    nested_link,
    type_name,
)
from ..errors import AccessDenied, NotFound, UnsupportedType
from .base import AccessPolicy, Resolver, public_only

logger = logging.getLogger(__name__)


def build_runtime_descriptor(cls: type) -> TypeDescriptor:
    """Build the shared descriptor for ``cls`` from its declared members"""
    members = []
    for declaration in declared_members(cls):
        annotation = declaration.annotation
        nested_type, optional = (None, False)
        if annotation is not None and not isinstance(annotation, str):
            nested_type, optional = nested_link(annotation)
        members.append(
            FieldDescriptor(
                name=declaration.name,
                accessor=attrgetter(declaration.name),
                is_static=declaration.is_static,
                nested_type=nested_type,
                owner=cls,
                annotation=annotation,
                optional=optional,
            )
        )
    return TypeDescriptor(type_identity=cls, name=type_name(cls), members=members)


class TypeMetadataRegistry:
    """
    Memoized, append-only registry of runtime type descriptors

    Lookups of published descriptors take no lock. First construction is
    double-checked under a lock so concurrent callers all observe the single
    published descriptor.
    """

    def __init__(self):
        self._descriptors: Dict[type, TypeDescriptor] = {}
        self._lock = threading.Lock()
        self._stats = {
            "constructions": 0,
            "cache_misses": 0,
            "deduplicated": 0,
        }

    def get(self, cls: type) -> TypeDescriptor:
        descriptor = self._descriptors.get(cls)
        if descriptor is not None:
            return descriptor

        with self._lock:
            self._stats["cache_misses"] += 1
            descriptor = self._descriptors.get(cls)
            if descriptor is not None:
                self._stats["deduplicated"] += 1
                return descriptor

            descriptor = build_runtime_descriptor(cls)
            self._descriptors[cls] = descriptor
            self._stats["constructions"] += 1
            logger.debug(
                "Published descriptor for %s with %d fields",
                descriptor.name,
                len(descriptor.fields),
            )
            return descriptor

    def publish(self, cls: type, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Publish an explicitly built descriptor unless one already exists"""
        with self._lock:
            existing = self._descriptors.get(cls)
            if existing is not None:
                return existing
            self._descriptors[cls] = descriptor
            self._stats["constructions"] += 1
            return descriptor

    def __contains__(self, cls: type) -> bool:
        return cls in self._descriptors

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        with self._lock:
            return {"descriptors_cached": len(self._descriptors), **self._stats}

    def clear(self) -> None:
        """Drop every published descriptor (tests only)"""
        with self._lock:
            self._descriptors.clear()
            for key in self._stats:
                self._stats[key] = 0


# Global registry instance
_global_registry = TypeMetadataRegistry()


class RuntimeMetadataResolver(Resolver):
    """Resolver backed by shared, lazily built type metadata"""

    name = "runtime"

    def __init__(
        self,
        access_policy: Optional[AccessPolicy] = None,
        registry: Optional[TypeMetadataRegistry] = None,
    ):
        super().__init__(access_policy or public_only)
        self.registry = registry or _global_registry

    def describe(self, target: Any) -> TypeDescriptor:
        cls = target if isinstance(target, type) else type(target)
        if cls not in self.registry and not is_composite_type(cls):
            raise UnsupportedType(f"{type_name(cls)} declares no data members")
        return self.registry.get(cls)

    def value_of(
        self, field: FieldDescriptor, instance: Any, caller: Any = None
    ) -> Any:
        owner = field.owner
        if isinstance(owner, type) and not isinstance(instance, owner):
            raise NotFound(
                field.name,
                type_name(type(instance)),
                f"descriptor describes {type_name(owner)}",
            )

        if not self.access_policy(field, caller):
            raise AccessDenied(field.name, type_name(type(instance)))

        try:
            return field.read(instance)
        except AttributeError:
            raise NotFound(
                field.name, type_name(type(instance)), "attribute is not set"
            ) from None

    def nested(
        self, field: FieldDescriptor, value: Any
    ) -> Optional[Tuple[TypeDescriptor, Resolver]]:
        if value is None or isinstance(value, Mapping):
            return None
        if is_composite_type(type(value)):
            return self.describe(value), self
        return None
