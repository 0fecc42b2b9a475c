"""
Build-time specialization

``specialize`` reads a class declaration once, at decoration/import time,
and compiles a dedicated ``routine(instance) -> str`` for it. The generated
code reads each member directly and calls ``stringify``; it keeps no
descriptors and no reference to the traversal engine.
"""

import keyword
import linecache
import logging
import re
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import get_default_config
from .descriptors import FieldDescriptor, TypeDescriptor, type_name
from .errors import RecursionLimitExceeded, SpecializationFailure
from .resolvers.static import StaticEnumerationResolver, build_phase
from .stringify import stringify

logger = logging.getLogger(__name__)

Routine = Callable[..., str]


def _literal(text: str) -> str:
    return repr(text)


def _member_access(name: str) -> str:
    if name.isidentifier() and not keyword.iskeyword(name):
        return f"instance.{name}"
    return f"getattr(instance, {name!r})"


def _function_name(cls: type) -> str:
    return "serialize_" + re.sub(r"\W", "_", type_name(cls))


class _Block:
    """Indented source lines"""

    def __init__(self):
        self.lines: List[str] = []
        self._indent = 0

    def line(self, text: str = "") -> None:
        self.lines.append("    " * self._indent + text if text else "")

    def indent(self) -> None:
        self._indent += 1

    def dedent(self) -> None:
        self._indent -= 1

    def source(self) -> str:
        return "\n".join(self.lines) + "\n"


def generate_source(descriptor: TypeDescriptor) -> Tuple[str, Dict[str, type]]:
    """
    Generate the source of the routine for one static descriptor

    Returns:
        The source text and a map of global names the routine expects to be
        bound to the routines of its nested types
    """
    func_name = _function_name(descriptor.type_identity)
    nested_names: Dict[str, type] = {}
    fields = descriptor.fields

    block = _Block()
    block.line(f"def {func_name}(instance, _depth=1, config=None):")
    block.indent()
    block.line("if config is None:")
    block.indent()
    block.line("config = get_default_config()")
    block.dedent()
    block.line("if _depth > config.max_depth:")
    block.indent()
    block.line("raise RecursionLimitExceeded((TYPE_NAME,), config.max_depth)")
    block.dedent()

    if not fields:
        block.line('return "{}"')
        block.dedent()
        return block.source(), nested_names

    block.line("try:")
    block.indent()

    parts: List[str] = []
    for position, field in enumerate(fields):
        prefix = ("{" if position == 0 else ", ") + field.name + ": "
        parts.append(_literal(prefix))
        parts.append(_value_expression(block, position, field, nested_names))
    parts.append(_literal("}"))

    block.line("return (")
    block.indent()
    block.line(parts[0])
    for part in parts[1:]:
        block.line("+ " + part)
    block.dedent()
    block.line(")")

    block.dedent()
    block.line("except RecursionLimitExceeded as exc:")
    block.indent()
    block.line("raise exc.prepend(TYPE_NAME) from None")
    block.dedent()
    block.dedent()
    return block.source(), nested_names


def _value_expression(
    block: _Block,
    position: int,
    field: FieldDescriptor,
    nested_names: Dict[str, type],
) -> str:
    access = _member_access(field.name)
    if field.nested_type is None:
        return f"stringify({access}, config)"

    # A nested member may hold None whatever its annotation says
    nested_name = f"nested_{position}"
    nested_names[nested_name] = field.nested_type
    local = f"value_{position}"
    block.line(f"{local} = {access}")
    return (
        f"(stringify(None, config) if {local} is None "
        f"else {nested_name}({local}, _depth + 1, config))"
    )


class Specializer:
    """Compiles and publishes one serialization routine per class"""

    def __init__(self):
        self._routines: Dict[type, Routine] = {}
        self._sources: Dict[type, str] = {}
        self._lock = threading.RLock()
        self._resolver = StaticEnumerationResolver()

    def specialize(self, cls: type) -> Routine:
        """
        Get the routine for ``cls``, generating it (and the routines of its
        nested types) on first use

        Raises:
            SpecializationFailure: If ``cls`` or a nested type has no usable
                declaration
        """
        routine = self._routines.get(cls)
        if routine is not None:
            return routine

        with self._lock, build_phase():
            if cls in self._routines:
                return self._routines[cls]

            pending = self._collect(cls)
            compiled: Dict[type, Tuple[Routine, Dict[str, Any], Dict[str, type]]] = {}
            for target, descriptor in pending.items():
                compiled[target] = self._compile(descriptor)

            available = dict(self._routines)
            available.update({target: entry[0] for target, entry in compiled.items()})
            for routine, namespace, nested_names in compiled.values():
                for global_name, nested_type in nested_names.items():
                    namespace[global_name] = available[nested_type]

            for target, (routine, _, _) in compiled.items():
                self._routines[target] = routine
            logger.debug(
                "Specialized %s (%d routines generated)", type_name(cls), len(compiled)
            )
            return self._routines[cls]

    def _collect(self, cls: type) -> Dict[type, TypeDescriptor]:
        """Static descriptors for ``cls`` and every nested type lacking a routine"""
        pending: Dict[type, TypeDescriptor] = {}
        stack = [(cls, None)]
        while stack:
            target, via = stack.pop()
            if target in pending or target in self._routines:
                continue
            try:
                descriptor = self._resolver.describe(target)
            except SpecializationFailure as e:
                if via is None:
                    raise
                raise SpecializationFailure(
                    type_name(cls), f"field '{via}' -> {e}"
                ) from e
            pending[target] = descriptor
            for field in reversed(descriptor.fields):
                if field.nested_type is not None:
                    stack.append((field.nested_type, field.name))
        return pending

    def _compile(
        self, descriptor: TypeDescriptor
    ) -> Tuple[Routine, Dict[str, Any], Dict[str, type]]:
        source, nested_names = generate_source(descriptor)
        cls = descriptor.type_identity
        filename = f"<structural_serializer {type_name(cls)}>"
        namespace: Dict[str, Any] = {
            "stringify": stringify,
            "get_default_config": get_default_config,
            "RecursionLimitExceeded": RecursionLimitExceeded,
            "TYPE_NAME": descriptor.name,
        }
        try:
            code = compile(source, filename, "exec")
        except SyntaxError as e:
            raise SpecializationFailure(
                descriptor.name, f"generated invalid code: {e}"
            ) from e
        exec(code, namespace)
        lines = source.splitlines(True)
        linecache.cache[filename] = (len(source), None, lines, filename)

        routine = namespace[_function_name(cls)]
        self._sources[cls] = source
        return routine, namespace, nested_names

    def get_routine(self, cls: type) -> Optional[Routine]:
        return self._routines.get(cls)

    def get_source(self, cls: type) -> Optional[str]:
        return self._sources.get(cls)

    def clear(self) -> None:
        with self._lock:
            self._routines.clear()
            self._sources.clear()


# Global specializer instance
_global_specializer = Specializer()


def _make_str(routine: Routine) -> Callable[[Any], str]:
    def __str__(self) -> str:
        return routine(self)

    return __str__


def specialize(cls: Optional[type] = None, *, install_str: bool = False):
    """
    Class decorator compiling a dedicated serialization routine

    Usage::

        @specialize
        @dataclass
        class Point:
            x: int
            y: int

    Args:
        cls: Class to specialize (when used without arguments)
        install_str: Also use the routine as the class's ``__str__``

    Raises:
        SpecializationFailure: At decoration time, if the class or one of its
            nested types cannot be specialized
    """

    def wrap(klass: type) -> type:
        routine = _global_specializer.specialize(klass)
        if install_str:
            klass.__str__ = _make_str(routine)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def specialize_all(*classes: type) -> List[Routine]:
    """Specialize several classes, e.g. mutually recursive ones once all exist"""
    return [_global_specializer.specialize(cls) for cls in classes]


def get_routine(cls: type) -> Optional[Routine]:
    """Published routine for ``cls``, if it was specialized"""
    return _global_specializer.get_routine(cls)


def is_specialized(cls: type) -> bool:
    return _global_specializer.get_routine(cls) is not None


def get_specialized_source(cls: type) -> Optional[str]:
    """Generated source text of the routine for ``cls``, for inspection"""
    return _global_specializer.get_source(cls)


def clear_specializations() -> None:
    """Forget every published routine (tests only)"""
    _global_specializer.clear()
