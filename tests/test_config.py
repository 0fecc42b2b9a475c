from structural_serializer.config import (
    SerializerConfig,
    get_default_config,
    set_default_config,
)


def test_serializer_config_defaults():
    config = SerializerConfig()
    assert config.max_depth == 64
    assert config.default_backend == "auto"
    assert config.prefer_specialized is True
    assert config.runtime_access == "public"
    assert config.none_text == "None"
    assert config.float_precision is None


def test_serializer_config_from_env(monkeypatch):
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_MAX_DEPTH", "8")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_BACKEND", "runtime")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_PREFER_SPECIALIZED", "false")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_ACCESS", "all")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_NONE_TEXT", "null")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_FLOAT_PRECISION", "2")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_ENUM_AS_VALUE", "true")

    config = SerializerConfig.from_env()
    assert config.max_depth == 8
    assert config.default_backend == "runtime"
    assert config.prefer_specialized is False
    assert config.runtime_access == "all"
    assert config.none_text == "null"
    assert config.float_precision == 2
    assert config.enum_as_value is True


def test_invalid_env_values_fall_back(monkeypatch):
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_BACKEND", "xml")
    monkeypatch.setenv("STRUCTURAL_SERIALIZER_ACCESS", "everyone")

    config = SerializerConfig.from_env()
    assert config.default_backend == "auto"
    assert config.runtime_access == "public"


def test_get_default_config():
    config = get_default_config()
    assert isinstance(config, SerializerConfig)
    assert get_default_config() is config


def test_set_default_config():
    custom_config = SerializerConfig(none_text="nil")
    set_default_config(custom_config)

    config = get_default_config()
    assert config.none_text == "nil"
