"""
Resolver backends for structural serialization
"""

from .base import AccessPolicy, Resolver, allow_all, public_only
from .dynamic import DynamicMapResolver
from .runtime import (
    RuntimeMetadataResolver,
    TypeMetadataRegistry,
    build_runtime_descriptor,
)
from .static import StaticEnumerationResolver, build_phase, in_build_phase

__all__ = [
    "AccessPolicy",
    "Resolver",
    "allow_all",
    "public_only",
    "DynamicMapResolver",
    "RuntimeMetadataResolver",
    "TypeMetadataRegistry",
    "build_runtime_descriptor",
    "StaticEnumerationResolver",
    "build_phase",
    "in_build_phase",
]
