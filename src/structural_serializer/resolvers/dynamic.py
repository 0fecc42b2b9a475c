"""
Dynamic attribute map backend

Each instance carries its own name -> value pairs (a mapping, or an object's
``vars()``). Descriptors are built per instance and never cached.
"""

from collections import Counter
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from ..descriptors import FieldDescriptor, TypeDescriptor, type_name
from ..errors import NotFound, UnsupportedType
from .base import AccessPolicy, Resolver


def _pairs_of(instance: Any) -> Mapping:
    if isinstance(instance, Mapping):
        return instance
    try:
        return vars(instance)
    except TypeError:
        raise UnsupportedType(
            f"{type_name(type(instance))} carries no attribute map"
        ) from None


def _field_names(keys: List[Any]) -> List[str]:
    """
    Text names for mapping keys

    Keys render with ``str()``. Empty keys, and keys whose text collides with
    another key (``1`` and ``"1"``), render with ``repr()`` instead.
    """
    names = [str(key) or repr(key) for key in keys]
    counts = Counter(names)
    if len(counts) == len(names):
        return names
    return [
        repr(key) if counts[name] > 1 else name for key, name in zip(keys, names)
    ]


def _item_accessor(key: Any):
    def accessor(instance: Any) -> Any:
        return _pairs_of(instance)[key]

    return accessor


class DynamicMapResolver(Resolver):
    """Resolver over an instance's own ordered name -> value mapping"""

    name = "dynamic"

    def __init__(self, access_policy: Optional[AccessPolicy] = None):
        super().__init__(access_policy)

    def describe(self, target: Any) -> TypeDescriptor:
        keys = list(_pairs_of(target))
        members = [
            FieldDescriptor(
                name=name,
                accessor=_item_accessor(key),
                declaration_index=index,
                owner=id(target),
            )
            for index, (key, name) in enumerate(zip(keys, _field_names(keys)))
        ]
        return TypeDescriptor(
            type_identity=(type(target), id(target)),
            name=type_name(type(target)),
            members=members,
        )

    def value_of(
        self, field: FieldDescriptor, instance: Any, caller: Any = None
    ) -> Any:
        try:
            return field.read(instance)
        except KeyError:
            raise NotFound(
                field.name,
                type_name(type(instance)),
                "descriptor belongs to a different instance",
            ) from None

    def nested(
        self, field: FieldDescriptor, value: Any
    ) -> Optional[Tuple[TypeDescriptor, Resolver]]:
        if isinstance(value, Mapping):
            return self.describe(value), self
        return None
