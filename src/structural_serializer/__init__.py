"""
Structural Serializer

Renders composite values as ``{name: value, ...}`` text through three
interchangeable backends: per-instance attribute maps, shared runtime type
metadata, and routines generated once per class at build time.
"""

__version__ = "0.1.0"

from .api import (
    describe,
    get_registry_stats,
    object_to_string,
    register_type,
    reset_registry,
)
from .config import (
    AccessMode,
    BackendType,
    SerializerConfig,
    get_default_config,
    set_default_config,
)
from .descriptors import FieldDescriptor, TypeDescriptor, is_composite_type
from .errors import (
    AccessDenied,
    DuplicateField,
    NotFound,
    RecursionLimitExceeded,
    SpecializationFailure,
    StructuralSerializerError,
    UnsupportedType,
)
from .rendering import NestedSerialization, render
from .resolvers import (
    AccessPolicy,
    DynamicMapResolver,
    Resolver,
    RuntimeMetadataResolver,
    StaticEnumerationResolver,
    TypeMetadataRegistry,
    allow_all,
    build_phase,
    public_only,
)
from .specializer import (
    Specializer,
    clear_specializations,
    get_routine,
    get_specialized_source,
    is_specialized,
    specialize,
    specialize_all,
)
from .stringify import StringifyRegistry, register_stringifier, stringify
from .traversal import traverse

__all__ = [
    # Entry points
    "object_to_string",
    "describe",
    "register_type",
    "get_registry_stats",
    "reset_registry",
    # Configuration
    "SerializerConfig",
    "BackendType",
    "AccessMode",
    "get_default_config",
    "set_default_config",
    # Descriptors
    "FieldDescriptor",
    "TypeDescriptor",
    "is_composite_type",
    # Errors
    "StructuralSerializerError",
    "AccessDenied",
    "DuplicateField",
    "NotFound",
    "RecursionLimitExceeded",
    "SpecializationFailure",
    "UnsupportedType",
    # Resolvers
    "Resolver",
    "AccessPolicy",
    "allow_all",
    "public_only",
    "DynamicMapResolver",
    "RuntimeMetadataResolver",
    "TypeMetadataRegistry",
    "StaticEnumerationResolver",
    "build_phase",
    # Specialization
    "Specializer",
    "specialize",
    "specialize_all",
    "get_routine",
    "get_specialized_source",
    "is_specialized",
    "clear_specializations",
    # Traversal and rendering
    "traverse",
    "render",
    "NestedSerialization",
    # Scalars
    "stringify",
    "register_stringifier",
    "StringifyRegistry",
]
