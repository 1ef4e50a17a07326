from pathlib import Path

import pytest
from pytest import MonkeyPatch

from toolsettings.builder import build_registry, build_setting
from toolsettings.config import RegistryConfig, SettingDefinition
from toolsettings.errors import AmbiguousAbbreviationError, SettingDefinitionError
from toolsettings.settings import ImmutableSetting, ImmutableSettings, MutableSettings

BAD_DEFINITIONS = {
    "duplicate": """
settings:
  - name: -verbose
  - name: -verbose
""",
    "unknown dependency": """
settings:
  - name: -Xcheckinit
    depends_on:
      - setting: -Ydebug
""",
    "self dependency": """
settings:
  - name: -Xcheckinit
    depends_on:
      - setting: -Xcheckinit
""",
    "choice without choices": """
settings:
  - name: -target
    kind: choice
""",
    "default outside choices": """
settings:
  - name: -target
    kind: choice
    choices: [jvm-1.5]
    default: msil
""",
    "boolean default": """
settings:
  - name: -verbose
    default: true
""",
    "label without dash": """
settings:
  - name: verbose
""",
    "inverted bounds": """
settings:
  - name: -Xmax-errors
    kind: integer
    minimum: 10
    maximum: 1
""",
    "unknown kind": """
settings:
  - name: -Xmax-errors
    kind: float
""",
}


def test_valid_definition(definition_file: Path) -> None:
    cfg = RegistryConfig.load(definition_file)

    assert isinstance(cfg, RegistryConfig)
    assert cfg.strategy == "mutable"
    assert [d.name for d in cfg.settings][:2] == ["-verbose", "-d"]
    checkinit = cfg.definition("-Xcheckinit")
    assert checkinit is not None
    assert checkinit.depends_on[0].setting == "-verbose"
    assert checkinit.depends_on[0].value == "true"
    assert cfg.definition("-nope") is None


@pytest.mark.parametrize("case", sorted(BAD_DEFINITIONS))
def test_invalid_definition(tmp_path: Path, case: str) -> None:
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text(BAD_DEFINITIONS[case])
    with pytest.raises(RuntimeError):
        RegistryConfig.load(cfg_file)


def test_env_interpolation(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("TOOL_OUTPUT_DIR", "build/classes")
    cfg_file = tmp_path / "env.yaml"
    cfg_file.write_text(
        "settings:\n  - name: -d\n    kind: string\n    default: ${TOOL_OUTPUT_DIR}\n"
    )

    cfg = RegistryConfig.load(cfg_file)
    assert cfg.settings[0].default == "build/classes"


def test_env_var_path(definition_file: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLSETTINGS_CONFIG", str(definition_file))
    assert len(RegistryConfig.load().settings) == 7


def test_env_var_path_missing(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLSETTINGS_CONFIG", str(tmp_path / "missing.yaml"))
    with pytest.raises(FileNotFoundError):
        RegistryConfig.load()


def test_no_definition_found(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("TOOLSETTINGS_CONFIG", raising=False)
    monkeypatch.setattr(RegistryConfig, "DEFAULT_CONFIG_PATHS", [tmp_path / "absent.yaml"])
    with pytest.raises(FileNotFoundError):
        RegistryConfig.load()


def test_build_mutable_registry(definition_file: Path) -> None:
    errors: list[str] = []
    registry = build_registry(RegistryConfig.load(definition_file), errors.append)

    assert isinstance(registry, MutableSettings)
    assert registry.lookup_setting("-v") is registry.lookup_setting("-verbose")
    assert registry.lookup_setting("-d").help_syntax == "-d <directory>"
    assert registry.lookup_setting("-Ystats").deprecation_message == "use -Xstats"
    assert registry.lookup_setting("-Yinternal").is_internal_only is True
    assert "-Yinternal" not in {s.name for s in registry.visible_settings}

    registry.lookup_setting("-Xcheckinit").try_to_set([])
    assert registry.check_dependencies() is False
    assert errors == ["incomplete option -Xcheckinit (requires -verbose)"]


def test_build_immutable_registry(definition_file: Path) -> None:
    errors: list[str] = []
    cfg = RegistryConfig.load(definition_file)
    registry = build_registry(cfg, errors.append, strategy="immutable")

    assert isinstance(registry, ImmutableSettings)
    updated, _ = registry.lookup_setting("-Xcheckinit").try_to_set([])
    updated, _ = updated.lookup_setting("-v").try_to_set([])
    assert updated.check_dependencies() is True
    assert errors == []

    assert registry == build_registry(cfg)


def test_strict_abbreviations_from_config(tmp_path: Path) -> None:
    cfg_file = tmp_path / "strict.yaml"
    cfg_file.write_text(
        "strict_abbreviations: true\n"
        "settings:\n"
        "  - name: -verbose\n    abbreviations: [-v]\n"
        "  - name: -version\n    abbreviations: [-v]\n"
    )
    with pytest.raises(AmbiguousAbbreviationError):
        build_registry(RegistryConfig.load(cfg_file))


def test_boolean_yaml_defaults_render_lowercase(tmp_path: Path) -> None:
    cfg_file = tmp_path / "toolsettings.yaml"
    cfg_file.write_text(
        "settings:\n"
        "  - name: -Xmode\n    kind: string\n    default: true\n"
        "  - name: -Xswitch\n    kind: choice\n    choices: ['true', 'false']\n    default: false\n"
        "  - name: -Xcheck\n    depends_on:\n      - setting: -Xmode\n        value: 'true'\n"
    )
    errors: list[str] = []
    registry = build_registry(RegistryConfig.load(cfg_file), errors.append)

    mode = registry.lookup_setting("-Xmode")
    switch = registry.lookup_setting("-Xswitch")
    check = registry.lookup_setting("-Xcheck")
    assert mode is not None and switch is not None and check is not None
    assert mode.value == "true"
    assert switch.value == "false"

    assert check.try_to_set([]) == []
    assert registry.check_dependencies() is True
    assert errors == []


def test_integer_defaults() -> None:
    definition = SettingDefinition(name="-Xmax-errors", kind="integer", default="25", minimum=1)
    setting = build_setting(definition, ImmutableSetting)
    assert setting.value == 25

    with pytest.raises(SettingDefinitionError) as excinfo:
        build_setting(SettingDefinition(name="-Xmax-errors", kind="integer", default="lots"), ImmutableSetting)
    assert excinfo.value.name == "-Xmax-errors"
