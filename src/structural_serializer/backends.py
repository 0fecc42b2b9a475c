"""
Backend selection for values that reach the serializer
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from .config import SerializerConfig
from .descriptors import TypeDescriptor, is_composite_type
from .resolvers import (
    DynamicMapResolver,
    Resolver,
    RuntimeMetadataResolver,
    allow_all,
    public_only,
)

# Resolvers are stateless apart from their policy; share them per access mode
_resolver_cache: Dict[Tuple[str, str], Resolver] = {}


def get_resolver(kind: str, config: SerializerConfig) -> Resolver:
    """Shared resolver instance for a backend under the given configuration"""
    key = (kind, config.runtime_access)
    resolver = _resolver_cache.get(key)
    if resolver is None:
        if kind == "dynamic":
            resolver = DynamicMapResolver()
        elif kind == "runtime":
            policy = allow_all if config.runtime_access == "all" else public_only
            resolver = RuntimeMetadataResolver(policy)
        else:
            raise ValueError(f"Unknown run-time backend: {kind}")
        resolver = _resolver_cache.setdefault(key, resolver)
    return resolver


def plan_for(
    value: Any, config: SerializerConfig
) -> Optional[Tuple[TypeDescriptor, Resolver]]:
    """
    Descriptor and resolver for a nested composite value

    Mappings go to the dynamic backend and composite types to the runtime
    backend. Anything else is a scalar, signalled by ``None``.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        resolver = get_resolver("dynamic", config)
        return resolver.describe(value), resolver
    if is_composite_type(type(value)):
        resolver = get_resolver("runtime", config)
        return resolver.describe(value), resolver
    return None


def has_attribute_map(value: Any) -> bool:
    return hasattr(value, "__dict__") and not isinstance(value, type)
