"""
Static enumeration backend

Only usable while a specialization is being built. Field lists are a pure
function of the class declaration and keep exact source order; values are
plain attribute reads with no access check.
"""

import contextvars
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple

from ..descriptors import (
    FieldDescriptor,
    TypeDescriptor,
    declared_members,
    is_composite_type,
    nested_link,
    type_name,
)
from ..errors import SpecializationFailure
from .base import Resolver, allow_all

_build_depth: contextvars.ContextVar[int] = contextvars.ContextVar(
    "structural_serializer_build_depth", default=0
)


@contextmanager
def build_phase() -> Iterator[None]:
    """Enter the specialization context; phases may nest"""
    token = _build_depth.set(_build_depth.get() + 1)
    try:
        yield
    finally:
        _build_depth.reset(token)


def in_build_phase() -> bool:
    return _build_depth.get() > 0


def _require_build_phase(operation: str, target: Any) -> None:
    if not in_build_phase():
        name = type_name(target if isinstance(target, type) else type(target))
        raise SpecializationFailure(
            name, f"{operation} is only available during specialization"
        )


class StaticEnumerationResolver(Resolver):
    """Resolver evaluated once, at build time, from the class declaration"""

    name = "static"
    closed_world = True

    def __init__(self):
        super().__init__(allow_all)

    def describe(self, target: Any) -> TypeDescriptor:
        cls = target if isinstance(target, type) else type(target)
        _require_build_phase("describe", cls)

        if not is_composite_type(cls):
            raise SpecializationFailure(type_name(cls), "type declares no data members")

        try:
            declarations = declared_members(cls, strict=True)
        except (NameError, TypeError) as e:
            raise SpecializationFailure(
                type_name(cls), f"unresolvable annotation: {e}"
            ) from e

        members = []
        for index, declaration in enumerate(declarations):
            nested_type, optional = (None, False)
            if declaration.annotation is not None:
                nested_type, optional = nested_link(declaration.annotation)
            members.append(
                FieldDescriptor(
                    name=declaration.name,
                    accessor=_direct_accessor(declaration.name),
                    declaration_index=index,
                    is_static=declaration.is_static,
                    nested_type=nested_type,
                    owner=cls,
                    annotation=declaration.annotation,
                    optional=optional,
                )
            )
        return TypeDescriptor(type_identity=cls, name=type_name(cls), members=members)

    def fields_of(self, descriptor: TypeDescriptor) -> Tuple[FieldDescriptor, ...]:
        _require_build_phase("fields_of", descriptor.type_identity)
        return descriptor.members

    def value_of(
        self, field: FieldDescriptor, instance: Any, caller: Any = None
    ) -> Any:
        _require_build_phase("value_of", instance)
        return getattr(instance, field.name)

    def nested(
        self, field: FieldDescriptor, value: Any
    ) -> Optional[Tuple[TypeDescriptor, Resolver]]:
        if value is None or field.nested_type is None:
            return None
        return self.describe(field.nested_type), self


def _direct_accessor(name: str):
    def accessor(instance: Any) -> Any:
        return getattr(instance, name)

    accessor.__name__ = f"get_{name}"
    return accessor
