"""
Top-level entry points
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from .backends import get_resolver, has_attribute_map
from .config import SerializerConfig, get_default_config
from .descriptors import TypeDescriptor, declare_members, is_composite_type, type_name
from .errors import SpecializationFailure, UnsupportedType
from .rendering import render
from .resolvers.runtime import _global_registry
from .specializer import get_routine
from .traversal import traverse


def object_to_string(
    instance: Any,
    *,
    backend: Optional[str] = None,
    caller: Any = None,
    config: Optional[SerializerConfig] = None,
) -> str:
    """
    Serialize a composite value as ``{name1: value1, name2: value2}``

    Args:
        instance: Composite value to serialize; only read
        backend: "auto", "dynamic", "runtime" or "static" (defaults to
            ``config.default_backend``)
        caller: Caller context handed to the access policy
        config: Optional serializer configuration

    Returns:
        The serialization; ``{}`` for a value without fields

    Raises:
        UnsupportedType: If ``instance`` is not composite
        NotFound: On a descriptor/instance mismatch
        RecursionLimitExceeded: On cyclic or too deeply nested values
        SpecializationFailure: If ``backend="static"`` is requested for a
            class that was not specialized
    """
    config = config or get_default_config()
    backend = (backend or config.default_backend).lower()

    if backend == "static":
        routine = get_routine(type(instance))
        if routine is None:
            if not is_composite_type(type(instance)):
                raise _unsupported(instance)
            raise SpecializationFailure(
                type_name(type(instance)), "type was not specialized at build time"
            )
        return routine(instance, 1, config)

    if backend == "auto":
        return _auto_to_string(instance, caller, config)

    # Forced backends resolve every nested level themselves
    resolver = get_resolver(backend, config)
    descriptor = resolver.describe(instance)
    pairs = traverse(descriptor, resolver, instance, caller, config, use_routines=False)
    return render(pairs, config)


def _auto_to_string(instance: Any, caller: Any, config: SerializerConfig) -> str:
    instance_type = type(instance)

    if config.prefer_specialized:
        routine = get_routine(instance_type)
        if routine is not None:
            return routine(instance, 1, config)

    if isinstance(instance, Mapping):
        kind = "dynamic"
    elif is_composite_type(instance_type):
        kind = "runtime"
    elif has_attribute_map(instance):
        kind = "dynamic"
    else:
        raise _unsupported(instance)

    resolver = get_resolver(kind, config)
    descriptor = resolver.describe(instance)
    return render(traverse(descriptor, resolver, instance, caller, config), config)


def _unsupported(instance: Any) -> UnsupportedType:
    return UnsupportedType(f"{type_name(type(instance))} is not a composite value")


def describe(cls: type) -> TypeDescriptor:
    """Shared run-time descriptor of ``cls``, built on first use"""
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    if cls not in _global_registry and not is_composite_type(cls):
        raise UnsupportedType(f"{type_name(cls)} declares no data members")
    return _global_registry.get(cls)


def register_type(
    cls: type, fields: Iterable[str], static: Iterable[str] = ()
) -> TypeDescriptor:
    """
    Declare the member list of a class explicitly

    For classes that carry no annotations. The declaration must happen before
    the class is first serialized; a descriptor already published for the
    class is returned unchanged.

    Args:
        cls: Class to declare
        fields: Data member names in declaration order
        static: Class-level member names, excluded from output
    """
    declare_members(cls, fields, static)
    return _global_registry.get(cls)


def get_registry_stats() -> Dict[str, Any]:
    """Get statistics of the shared runtime descriptor registry"""
    return _global_registry.get_stats()


def reset_registry() -> None:
    """Drop every cached runtime descriptor (tests only)"""
    _global_registry.clear()
