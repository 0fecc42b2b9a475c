"""
Field and type descriptors, and discovery of declared data members
"""

import dataclasses
import inspect
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Optional, Tuple

from .errors import DuplicateField
from .stringify import has_registered_formatter, is_scalar_type

try:
    import annotationlib
except ImportError:  # Python < 3.14
    annotationlib = None

Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldDescriptor:
    """Immutable description of one data member"""

    name: str
    accessor: Accessor = field(compare=False, repr=False)
    declaration_index: Optional[int] = None
    is_static: bool = False
    nested_type: Optional[type] = None
    owner: Any = None
    annotation: Any = field(default=None, compare=False, repr=False)
    optional: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Field name must be a non-empty string")

    def read(self, instance: Any) -> Any:
        return self.accessor(instance)


@dataclass(frozen=True)
class TypeDescriptor:
    """Ordered collection of member descriptors for one composite type"""

    type_identity: Any
    name: str
    members: Tuple[FieldDescriptor, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))
        seen = set()
        for member in self.members:
            if member.name in seen:
                raise DuplicateField(member.name, self.name)
            seen.add(member.name)

    @property
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        """Data members in traversal order, statics excluded"""
        return tuple(m for m in self.members if not m.is_static)

    def field(self, name: str) -> FieldDescriptor:
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class MemberDeclaration:
    """One declared member as read from a class, before accessors are attached"""

    name: str
    annotation: Any = None
    is_static: bool = False


# Explicit declarations: cls -> ordered member declarations
_declarations: Dict[type, Tuple[MemberDeclaration, ...]] = {}


def declare_members(
    cls: type, fields: Iterable[str], static: Iterable[str] = ()
) -> Tuple[MemberDeclaration, ...]:
    """
    Record the member list of a class that carries no annotations

    Args:
        cls: Class being declared
        fields: Data member names, in declaration order
        static: Class-level member names, recorded as static

    Returns:
        The stored declarations
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    declared = [MemberDeclaration(name) for name in fields]
    declared.extend(MemberDeclaration(name, is_static=True) for name in static)
    _declarations[cls] = tuple(declared)
    return _declarations[cls]


def is_declared(cls: type) -> bool:
    return cls in _declarations


def is_namedtuple_type(cls: Any) -> bool:
    return (
        isinstance(cls, type)
        and issubclass(cls, tuple)
        and isinstance(getattr(cls, "_fields", None), tuple)
    )


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or typing.get_origin(annotation) is ClassVar


def _is_pseudo_field(annotation: Any) -> bool:
    """InitVar and KW_ONLY annotations declare no stored member"""
    if isinstance(annotation, str):
        return annotation.startswith(
            ("InitVar", "dataclasses.InitVar", "KW_ONLY", "dataclasses.KW_ONLY")
        )
    return (
        annotation is dataclasses.InitVar
        or isinstance(annotation, dataclasses.InitVar)
        or annotation is getattr(dataclasses, "KW_ONLY", object())
    )


def _resolved_hints(cls: type) -> Dict[str, Any]:
    """Type hints across the MRO, base classes first"""
    return typing.get_type_hints(cls, localns={cls.__name__: cls})


def _class_annotations(klass: type) -> Dict[str, Any]:
    if annotationlib is not None:
        return annotationlib.get_annotations(
            klass, format=annotationlib.Format.FORWARDREF
        )
    return inspect.get_annotations(klass)


def _raw_annotations(cls: type) -> Dict[str, Any]:
    """Unevaluated annotations across the MRO, base classes first"""
    merged: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        merged.update(_class_annotations(klass))
    return merged


def _slot_names(cls: type) -> List[str]:
    names: List[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__") or slot in names:
                continue
            names.append(slot)
    return names


def declared_members(cls: type, strict: bool = False) -> Tuple[MemberDeclaration, ...]:
    """
    Read the declared members of ``cls`` in source order

    Explicit declarations win, then named tuple fields, then class annotations
    (base classes first) followed by any unannotated ``__slots__`` entries.

    Args:
        cls: Class to inspect
        strict: Raise ``NameError`` instead of falling back to raw annotations
            when a hint cannot be evaluated

    Returns:
        Member declarations; ``InitVar`` pseudo-fields are left out
    """
    if cls in _declarations:
        return _declarations[cls]

    try:
        hints = _resolved_hints(cls)
    except (NameError, TypeError):
        if strict:
            raise
        hints = _raw_annotations(cls)

    if is_namedtuple_type(cls):
        return tuple(MemberDeclaration(name, hints.get(name)) for name in cls._fields)

    members = [
        MemberDeclaration(name, annotation, is_static=_is_classvar(annotation))
        for name, annotation in hints.items()
        if not _is_pseudo_field(annotation)
    ]
    known = {m.name for m in members}
    members.extend(
        MemberDeclaration(name) for name in _slot_names(cls) if name not in known
    )
    return tuple(members)


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` / ``X | None`` into ``(X, True)``"""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is getattr(types, "UnionType", None):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def is_composite_type(cls: Any) -> bool:
    """
    Whether instances of ``cls`` are traversed field by field

    Enums, builtins and classes given their own formatter through
    ``register_stringifier`` never are. Otherwise dataclasses, named tuples
    and explicitly declared classes always are, and other classes qualify
    when they annotate at least one data member and no builtin scalar
    formatter covers them.
    """
    if not isinstance(cls, type) or cls.__module__ == "builtins":
        return False
    if issubclass(cls, Enum) or has_registered_formatter(cls):
        return False
    if dataclasses.is_dataclass(cls) or is_namedtuple_type(cls) or cls in _declarations:
        return True
    if is_scalar_type(cls):
        return False
    try:
        annotations = _raw_annotations(cls)
    except (NameError, TypeError):
        return False
    return any(
        not _is_classvar(a) and not _is_pseudo_field(a) for a in annotations.values()
    )


def nested_link(annotation: Any) -> Tuple[Optional[type], bool]:
    """Composite type named by an annotation, and whether it admits ``None``"""
    inner, optional = unwrap_optional(annotation)
    if is_composite_type(inner):
        return inner, optional
    return None, optional


def type_name(obj_type: Any) -> str:
    return getattr(obj_type, "__qualname__", None) or getattr(
        obj_type, "__name__", repr(obj_type)
    )
