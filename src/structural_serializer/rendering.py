"""
Final rendering of traversal output
"""

from typing import Any, Iterable, Optional, Tuple

from .config import SerializerConfig, get_default_config
from .stringify import stringify

OPEN = "{"
CLOSE = "}"
NAME_SEPARATOR = ": "
FIELD_SEPARATOR = ", "


class NestedSerialization(str):
    """Already-rendered serialization of a nested composite, embedded verbatim"""

    __slots__ = ()


def render_value(value: Any, config: SerializerConfig) -> str:
    if isinstance(value, NestedSerialization):
        return str(value)
    return stringify(value, config)


def render(
    sequence: Iterable[Tuple[str, Any]], config: Optional[SerializerConfig] = None
) -> str:
    """
    Format ``(name, value)`` pairs as ``{name1: value1, name2: value2}``

    Args:
        sequence: Ordered pairs produced by the traversal engine
        config: Optional serializer configuration

    Returns:
        The rendered string; ``{}`` for an empty sequence
    """
    config = config or get_default_config()
    body = FIELD_SEPARATOR.join(
        name + NAME_SEPARATOR + render_value(value, config) for name, value in sequence
    )
    return OPEN + body + CLOSE
