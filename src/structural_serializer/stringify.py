"""
Scalar rendering registry

``stringify`` turns a terminal value into text. It is total: a formatter that
raises falls back to ``str()``, and a failing ``str()`` falls back to a
``<TypeName object>`` placeholder.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, Optional, Type
from uuid import UUID

# Optional imports for scientific libraries
try:
    import numpy as np

    HAS_NUMPY = True
except ImportError:
    np = None
    HAS_NUMPY = False

from .config import SerializerConfig, get_default_config

logger = logging.getLogger(__name__)

Formatter = Callable[[Any, SerializerConfig], str]


class StringifyRegistry:
    """Registry of scalar formatters keyed by type"""

    def __init__(self):
        self._formatters: Dict[Type, Formatter] = {}
        self._setup_default_formatters()

    def _setup_default_formatters(self) -> None:
        """Setup built-in formatters for common scalar types"""

        # Builtin scalars
        self.register(str, self._format_str)
        self.register(bool, self._format_plain)
        self.register(int, self._format_plain)
        self.register(float, self._format_float)
        self.register(complex, self._format_plain)
        self.register(type(None), self._format_none)

        # Date and time types
        self.register(datetime, self._format_datetime)
        self.register(date, self._format_isoformat)
        self.register(time, self._format_isoformat)
        self.register(timedelta, self._format_timedelta)

        # Value types
        self.register(Decimal, self._format_plain)
        self.register(UUID, self._format_plain)
        self.register(PurePath, self._format_plain)
        self.register(Enum, self._format_enum)
        self.register(bytes, self._format_bytes)
        self.register(bytearray, self._format_bytes)

        # Collections
        self.register(list, self._format_sequence)
        self.register(tuple, self._format_sequence)
        self.register(set, self._format_sequence)
        self.register(frozenset, self._format_sequence)

        if HAS_NUMPY:
            self.register(np.generic, _format_numpy_scalar)
            self.register(np.ndarray, _format_numpy_array)

    def register(self, type_class: Type, formatter: Formatter) -> None:
        """Register a formatter for a type (and, through the MRO, its subclasses)"""
        self._formatters[type_class] = formatter

    def get_formatter(self, obj: Any) -> Optional[Formatter]:
        """Get formatter for an object"""
        return self.get_formatter_for_type(type(obj))

    def get_formatter_for_type(self, obj_type: Type) -> Optional[Formatter]:
        """Get formatter for a type, checking the MRO after an exact match"""
        if obj_type in self._formatters:
            return self._formatters[obj_type]

        # Mixed-in enums (IntEnum, StrEnum) would otherwise match int/str first
        if issubclass(obj_type, Enum):
            return self._formatters[Enum]

        for base_type in obj_type.__mro__:
            if base_type in self._formatters:
                return self._formatters[base_type]

        return None

    def has_registered_formatter(self, obj_type: Type) -> bool:
        """Whether ``obj_type`` or a non-builtin base has its own formatter"""
        return any(
            base in self._formatters
            for base in obj_type.__mro__
            if base.__module__ != "builtins"
        )

    def handles(self, obj_type: Type) -> bool:
        """Whether values of ``obj_type`` are rendered as scalars by this registry"""
        return self.get_formatter_for_type(obj_type) is not None

    # Built-in formatters

    @staticmethod
    def _format_plain(value: Any, config: SerializerConfig) -> str:
        return str(value)

    @staticmethod
    def _format_none(value: None, config: SerializerConfig) -> str:
        return config.none_text

    @staticmethod
    def _format_str(value: str, config: SerializerConfig) -> str:
        if config.truncate_strings and len(value) > config.truncate_strings:
            return value[: config.truncate_strings] + "..."
        return str(value)

    @staticmethod
    def _format_float(value: float, config: SerializerConfig) -> str:
        if config.float_precision is not None:
            return f"{value:.{config.float_precision}f}"
        return str(value)

    @staticmethod
    def _format_datetime(dt: datetime, config: SerializerConfig) -> str:
        """Format datetime objects"""
        if config.datetime_format == "timestamp":
            return str(dt.timestamp())
        elif config.datetime_format == "custom" and config.custom_datetime_format:
            return dt.strftime(config.custom_datetime_format)
        else:  # iso format (default)
            return dt.isoformat()

    @staticmethod
    def _format_isoformat(value: Any, config: SerializerConfig) -> str:
        return value.isoformat()

    @staticmethod
    def _format_timedelta(td: timedelta, config: SerializerConfig) -> str:
        return f"{td.total_seconds()}s"

    @staticmethod
    def _format_enum(enum_obj: Enum, config: SerializerConfig) -> str:
        if config.enum_as_value:
            return stringify(enum_obj.value, config)
        return f"{enum_obj.__class__.__name__}.{enum_obj.name}"

    @staticmethod
    def _format_bytes(bytes_obj: Any, config: SerializerConfig) -> str:
        """Decode UTF-8 text, show everything else as hex"""
        try:
            return StringifyRegistry._format_str(bytes_obj.decode("utf-8"), config)
        except UnicodeDecodeError:
            hex_data = bytes_obj.hex()
            if len(hex_data) > 100:
                hex_data = hex_data[:100] + "..."
            return f"0x{hex_data}"

    @staticmethod
    def _format_sequence(items: Any, config: SerializerConfig) -> str:
        rendered = []
        for i, item in enumerate(items):
            if i >= config.max_collection_size:
                rendered.append(f"... ({len(items) - i} more items)")
                break
            rendered.append(stringify(item, config))
        return "[" + ", ".join(rendered) + "]"


def _format_numpy_scalar(scalar: Any, config: SerializerConfig) -> str:
    return stringify(scalar.item(), config)


def _format_numpy_array(array: Any, config: SerializerConfig) -> str:
    if array.ndim == 0:
        return stringify(array.item(), config)
    return StringifyRegistry._format_sequence(list(array), config)


def _default_representation(value: Any) -> str:
    try:
        return str(value)
    except Exception as e:
        logger.debug("str() failed for %s: %s", type(value).__name__, e)
        return f"<{type(value).__name__} object>"


# Global registry instance
_global_registry = StringifyRegistry()


def stringify(value: Any, config: Optional[SerializerConfig] = None) -> str:
    """
    Render a scalar value as human-readable text

    Args:
        value: Value to render
        config: Optional serializer configuration

    Returns:
        Text for the value; never raises
    """
    config = config or get_default_config()

    formatter = _global_registry.get_formatter(value)
    if formatter is not None:
        try:
            return formatter(value, config)
        except Exception as e:
            logger.debug(
                "Formatter for %s failed, using default representation: %s",
                type(value).__name__,
                e,
            )

    return _default_representation(value)


def register_stringifier(type_class: Type, formatter: Formatter) -> None:
    """
    Register a custom formatter for a specific type

    Args:
        type_class: The type to register
        formatter: Function that takes value and config, returns text
    """
    _global_registry.register(type_class, formatter)


def has_registered_formatter(obj_type: Type) -> bool:
    return _global_registry.has_registered_formatter(obj_type)


def is_scalar_type(obj_type: Type) -> bool:
    """Whether ``obj_type`` has a registered scalar formatter"""
    return _global_registry.handles(obj_type)
