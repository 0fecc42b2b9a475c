"""
Generic traversal engine

Walks the fields of one descriptor through a resolver, producing ordered
``(name, value)`` pairs. Nested composites are serialized first and embedded
as ``NestedSerialization`` values.
"""

import logging
from typing import Any, List, Optional, Set, Tuple

from .backends import plan_for
from .config import SerializerConfig, get_default_config
from .descriptors import FieldDescriptor, TypeDescriptor
from .errors import AccessDenied, RecursionLimitExceeded
from .rendering import NestedSerialization, render
from .resolvers import Resolver
from .specializer import get_routine

logger = logging.getLogger(__name__)


class TraversalState:
    """Depth and on-path instances for one top-level call"""

    def __init__(self, max_depth: int, use_routines: bool = True):
        self.max_depth = max_depth
        self.use_routines = use_routines
        self.depth = 0
        self.type_chain: List[str] = []
        self._on_path: Set[int] = set()

    def enter(self, descriptor: TypeDescriptor, instance: Any) -> None:
        chain = self.type_chain + [descriptor.name]
        if id(instance) in self._on_path:
            raise RecursionLimitExceeded(chain, self.max_depth, cycle=True)
        if self.depth + 1 > self.max_depth:
            raise RecursionLimitExceeded(chain, self.max_depth)
        self.depth += 1
        self.type_chain.append(descriptor.name)
        self._on_path.add(id(instance))

    def leave(self, instance: Any) -> None:
        self._on_path.discard(id(instance))
        self.type_chain.pop()
        self.depth -= 1


def traverse(
    descriptor: TypeDescriptor,
    resolver: Resolver,
    instance: Any,
    caller: Any = None,
    config: Optional[SerializerConfig] = None,
    use_routines: bool = True,
    _state: Optional[TraversalState] = None,
) -> List[Tuple[str, Any]]:
    """
    Produce the ordered ``(name, value)`` pairs of ``instance``

    Static members are skipped and fields the resolver reports as
    ``AccessDenied`` are omitted. Every other failure propagates.

    Args:
        descriptor: Descriptor of the instance's type
        resolver: Backend supplying field lists and values
        instance: Value being serialized; only read
        caller: Caller context handed to the access policy
        config: Optional serializer configuration
        use_routines: Hand nested values of specialized types to their
            generated routines. Those routines perform no access checks, so
            callers that force a checked backend pass ``False``.

    Returns:
        Pairs in field order; nested composites as ``NestedSerialization``

    Raises:
        RecursionLimitExceeded: On a cycle or when nesting exceeds
            ``config.max_depth``
    """
    config = config or get_default_config()
    state = _state or TraversalState(config.max_depth, use_routines)

    state.enter(descriptor, instance)
    try:
        pairs: List[Tuple[str, Any]] = []
        for field in resolver.fields_of(descriptor):
            if field.is_static:
                continue
            try:
                value = resolver.value_of(field, instance, caller)
            except AccessDenied:
                logger.debug(
                    "Skipping inaccessible field %s.%s", descriptor.name, field.name
                )
                continue
            nested = _nested_value(field, value, resolver, caller, config, state)
            pairs.append((field.name, nested))
        return pairs
    finally:
        state.leave(instance)


def _nested_value(
    field: FieldDescriptor,
    value: Any,
    resolver: Resolver,
    caller: Any,
    config: SerializerConfig,
    state: TraversalState,
) -> Any:
    if value is None or isinstance(value, NestedSerialization):
        return value

    use_routine = state.use_routines and config.prefer_specialized
    if use_routine and not resolver.closed_world:
        routine = get_routine(type(value))
        if routine is not None:
            try:
                return NestedSerialization(routine(value, state.depth + 1, config))
            except RecursionLimitExceeded as e:
                raise RecursionLimitExceeded(
                    tuple(state.type_chain) + e.type_chain, e.limit, e.cycle
                ) from None

    plan = resolver.nested(field, value)
    if plan is None and not resolver.closed_world:
        plan = plan_for(value, config)
    if plan is None:
        return value

    nested_descriptor, nested_resolver = plan
    pairs = traverse(
        nested_descriptor, nested_resolver, value, caller, config, _state=state
    )
    return NestedSerialization(render(pairs, config))
