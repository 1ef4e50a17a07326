from collections.abc import Callable
from pathlib import Path

import pytest

from toolsettings.settings import ImmutableSetting, ImmutableSettings, MutableSettings

DEFINITION_YAML = """\
strategy: mutable
settings:
  - name: -verbose
    help: Output messages about what the tool is doing
    abbreviations: [-v]
  - name: -d
    kind: string
    help: Destination for generated files
    default: .
    arg: directory
  - name: -target
    kind: choice
    help: Target platform
    choices: [jvm-1.5, jvm-1.8, msil]
  - name: -Xplugin
    kind: multi_string
    help: Load a plugin from each path
    arg: paths
  - name: -Xcheckinit
    help: Wrap field accessors to throw an exception on uninitialized access
    depends_on:
      - setting: -verbose
        value: "true"
  - name: -Ystats
    help: Print compiler statistics
    deprecated: use -Xstats
  - name: -Yinternal
    help: Used by the test harness
    internal: true
"""


def build_mutable(errors: list[str]) -> MutableSettings:
    registry = MutableSettings(errors.append)
    registry.boolean("-verbose", "Output messages about what the tool is doing", abbreviations=["-v"])
    registry.string("-d", "Destination for generated files", default=".", arg="directory")
    registry.integer("-Xmax-errors", "Maximum errors to report", default=100, minimum=1, maximum=1000)
    registry.multi_string("-Xplugin", "Load a plugin from each path", arg="paths")
    registry.choice("-target", "Target platform", ["jvm-1.5", "jvm-1.8", "msil"])
    registry.defines("-D", "Set a system property")
    registry.boolean("-Ydebug", "Increase the quantity of debugging output")
    return registry


def build_immutable(errors: list[str]) -> ImmutableSettings:
    return ImmutableSettings(
        [
            ImmutableSetting.boolean("-verbose", "Output messages about what the tool is doing", abbreviations=["-v"]),
            ImmutableSetting.string("-d", "Destination for generated files", default=".", arg="directory"),
            ImmutableSetting.integer("-Xmax-errors", "Maximum errors to report", default=100, minimum=1, maximum=1000),
            ImmutableSetting.multi_string("-Xplugin", "Load a plugin from each path", arg="paths"),
            ImmutableSetting.choice("-target", "Target platform", ["jvm-1.5", "jvm-1.8", "msil"]),
            ImmutableSetting.defines("-D", "Set a system property"),
            ImmutableSetting.boolean("-Ydebug", "Increase the quantity of debugging output"),
        ],
        errors.append,
    )


@pytest.fixture
def errors() -> list[str]:
    return []


@pytest.fixture
def settings(errors: list[str]) -> MutableSettings:
    return build_mutable(errors)


@pytest.fixture
def snapshot(errors: list[str]) -> ImmutableSettings:
    return build_immutable(errors)


@pytest.fixture
def definition_file(tmp_path: Path) -> Path:
    path = tmp_path / "toolsettings.yaml"
    path.write_text(DEFINITION_YAML)
    return path


@pytest.fixture
def make_settings(errors: list[str]) -> Callable[[], MutableSettings]:
    return lambda: build_mutable(errors)


@pytest.fixture
def make_snapshot(errors: list[str]) -> Callable[[], ImmutableSettings]:
    return lambda: build_immutable(errors)
