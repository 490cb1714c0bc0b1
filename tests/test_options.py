# tests/test_options.py
import json

import pytest

from bindery import (
    ConfigurationError,
    Container,
    ContainerOptions,
    DictSource,
    EnvSource,
    FlatDictSource,
    InvalidContainerOptionsError,
    JsonTreeSource,
    YamlTreeSource,
    injectable,
    load_options,
)


@injectable
class Katana:
    pass


# --- container options ---

def test_defaults():
    options = Container().options
    assert options == ContainerOptions()
    assert options.default_scope == "transient"
    assert options.auto_bind_injectable is False
    assert options.skip_base_class_checks is False


def test_default_scope_applies_to_new_bindings():
    container = Container({"default_scope": "singleton"})
    container.bind("Weapon").to(Katana)
    assert container.get("Weapon") is container.get("Weapon")


def test_options_instance_is_accepted():
    options = ContainerOptions(default_scope="request")
    assert Container(options).options is options


def test_options_must_be_a_mapping():
    with pytest.raises(InvalidContainerOptionsError, match="Container options must be a mapping"):
        Container("singleton")


def test_invalid_default_scope():
    with pytest.raises(InvalidContainerOptionsError, match="Default scope must be one of"):
        Container({"default_scope": "forever"})


def test_invalid_flags_are_all_reported():
    with pytest.raises(InvalidContainerOptionsError) as exc:
        Container({"auto_bind_injectable": "yes", "skip_base_class_checks": 1})
    assert exc.value.errors == [
        "Invalid Container option. Auto bind injectable must be a boolean.",
        "Invalid Container option. Skip base check must be a boolean.",
    ]
    assert isinstance(exc.value, ConfigurationError)


def test_unknown_option():
    with pytest.raises(InvalidContainerOptionsError, match="Unknown Container options: \\['colour'\\]"):
        Container({"colour": "red"})


# --- configuration sources ---

def test_load_options_from_dict_source():
    options = load_options(DictSource({"container": {"default_scope": "request", "auto_bind_injectable": True}}))
    assert options.default_scope == "request"
    assert options.auto_bind_injectable is True


def test_load_options_from_environment(monkeypatch):
    monkeypatch.setenv("APP_DEFAULT_SCOPE", " Singleton ")
    monkeypatch.setenv("APP_AUTO_BIND_INJECTABLE", "true")
    monkeypatch.setenv("APP_SKIP_BASE_CLASS_CHECKS", "0")

    options = load_options(EnvSource(prefix="APP_"))

    assert options.default_scope == "singleton"
    assert options.auto_bind_injectable is True
    assert options.skip_base_class_checks is False


def test_later_sources_and_overrides_win():
    options = load_options(
        DictSource({"container": {"default_scope": "request"}}),
        FlatDictSource({"default_scope": "singleton"}, case_sensitive=False),
        overrides={"skip_base_class_checks": True},
    )
    assert options.default_scope == "singleton"
    assert options.skip_base_class_checks is True


def test_load_options_from_json(tmp_path):
    path = tmp_path / "bindery.json"
    path.write_text(json.dumps({"container": {"default_scope": "singleton"}}), encoding="utf-8")
    assert load_options(JsonTreeSource(str(path))).default_scope == "singleton"


def test_broken_json_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Failed to load JSON config"):
        load_options(JsonTreeSource(str(tmp_path / "missing.json")))


def test_load_options_from_yaml(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "bindery.yaml"
    path.write_text("container:\n  default_scope: request\n  skip_base_class_checks: yes\n", encoding="utf-8")

    options = load_options(YamlTreeSource(str(path)))

    assert options.default_scope == "request"
    assert options.skip_base_class_checks is True


def test_section_must_be_a_mapping():
    with pytest.raises(ConfigurationError, match="must be a mapping"):
        load_options(DictSource({"container": "singleton"}))


def test_unknown_source_type():
    with pytest.raises(ConfigurationError, match="Unknown configuration source type"):
        load_options(object())


def test_invalid_loaded_values_are_reported():
    with pytest.raises(InvalidContainerOptionsError, match="Auto bind injectable must be a boolean"):
        load_options(DictSource({"container": {"auto_bind_injectable": "maybe"}}))


def test_missing_section_gives_defaults():
    assert load_options(DictSource({"other": {}})) == ContainerOptions()
