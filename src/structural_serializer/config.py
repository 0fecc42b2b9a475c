"""
Configuration for structural serialization
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

BackendType = Literal["auto", "dynamic", "runtime", "static"]
AccessMode = Literal["public", "all"]

_BACKENDS = ("auto", "dynamic", "runtime", "static")
_ACCESS_MODES = ("public", "all")

ENV_PREFIX = "STRUCTURAL_SERIALIZER_"


@dataclass
class SerializerConfig:
    """Configuration for structural serialization"""

    # Traversal options
    max_depth: int = 64
    default_backend: BackendType = "auto"
    prefer_specialized: bool = True
    runtime_access: AccessMode = "public"  # public, all

    # Scalar rendering options
    none_text: str = "None"
    float_precision: Optional[int] = None
    truncate_strings: Optional[int] = None
    max_collection_size: int = 100
    datetime_format: str = "iso"  # iso, timestamp, custom
    custom_datetime_format: Optional[str] = None
    enum_as_value: bool = False

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(ENV_PREFIX + key, default).lower() == "true"

    @classmethod
    def _parse_optional_int_env(cls, key: str) -> Optional[int]:
        """Parse an optional integer from environment variable"""
        value = os.getenv(ENV_PREFIX + key)
        return int(value) if value else None

    @classmethod
    def from_env(cls) -> "SerializerConfig":
        """Create configuration from environment variables"""
        backend = os.getenv(ENV_PREFIX + "BACKEND", "auto").lower()
        if backend not in _BACKENDS:
            backend = "auto"

        access = os.getenv(ENV_PREFIX + "ACCESS", "public").lower()
        if access not in _ACCESS_MODES:
            access = "public"

        return cls(
            max_depth=int(os.getenv(ENV_PREFIX + "MAX_DEPTH", "64")),
            default_backend=backend,
            prefer_specialized=cls._parse_bool_env("PREFER_SPECIALIZED", "true"),
            runtime_access=access,
            none_text=os.getenv(ENV_PREFIX + "NONE_TEXT", "None"),
            float_precision=cls._parse_optional_int_env("FLOAT_PRECISION"),
            truncate_strings=cls._parse_optional_int_env("TRUNCATE_STRINGS"),
            max_collection_size=int(
                os.getenv(ENV_PREFIX + "MAX_COLLECTION_SIZE", "100")
            ),
            datetime_format=os.getenv(ENV_PREFIX + "DATETIME_FORMAT", "iso").lower(),
            custom_datetime_format=os.getenv(ENV_PREFIX + "CUSTOM_DATETIME_FORMAT"),
            enum_as_value=cls._parse_bool_env("ENUM_AS_VALUE"),
        )


_default_config: Optional[SerializerConfig] = None


def get_default_config() -> SerializerConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = SerializerConfig.from_env()
    return _default_config


def set_default_config(config: Optional[SerializerConfig]) -> None:
    """Set the default configuration instance (``None`` re-reads the environment)"""
    global _default_config
    _default_config = config
