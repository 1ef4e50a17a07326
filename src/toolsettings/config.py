"""Registry definitions loaded from YAML.

A definition file lists the settings a tool accepts:

    strategy: mutable
    settings:
      - name: -verbose
        help: Output messages about what the tool is doing
        abbreviations: [-v]
      - name: -Xcheckinit
        help: Wrap field accessors to throw an exception on uninitialized access
        depends_on:
          - setting: -verbose
            value: "true"
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from toolsettings.constants import CONFIG_ENV_VAR, OPTION_PREFIX
from toolsettings.settings.base import value_string

# Load environment variables from .env file(s)
load_dotenv()

SettingKindName = Literal["boolean", "string", "integer", "multi_string", "choice", "defines"]

# Kinds whose starting value is fixed by their grammar
_NO_DEFAULT_KINDS = ("boolean", "multi_string", "defines")


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class DependencyDefinition(BaseModel):
    """A prerequisite: ``setting`` must render as ``value``."""

    setting: str = Field(..., description="Name of the prerequisite setting")
    value: str = Field("true", description="Required string form of its value")


class SettingDefinition(BaseModel):
    """One setting of a registry definition file."""

    name: str = Field(..., min_length=2, description="Flag spelling, e.g. -verbose")
    kind: SettingKindName = "boolean"
    help: str = Field("", description="One-line help text")
    default: bool | int | str | None = Field(
        None, description="Initial value; not allowed for boolean, multi_string and defines"
    )
    abbreviations: list[str] = Field(default_factory=list)
    choices: list[str] = Field(default_factory=list, description="Allowed values of a choice setting")
    minimum: int | None = None
    maximum: int | None = None
    arg: str | None = Field(None, description="Placeholder used in the help syntax")
    help_syntax: str | None = None
    internal: bool = Field(False, description="Hide from help output and equality")
    deprecated: str | None = Field(None, description="Deprecation message")
    depends_on: list[DependencyDefinition] = Field(default_factory=list)

    @field_validator("name", "abbreviations")
    @classmethod
    def validate_labels(cls, v: str | list[str]) -> str | list[str]:
        labels = [v] if isinstance(v, str) else v
        for label in labels:
            if not label.startswith(OPTION_PREFIX):
                raise ValueError(f"labels must start with '{OPTION_PREFIX}': {label!r}")
        return v

    @model_validator(mode="after")
    def check_kind_options(self) -> SettingDefinition:
        if self.kind in _NO_DEFAULT_KINDS and self.default is not None:
            raise ValueError(f"{self.kind} settings do not take a default")
        if self.kind == "choice":
            if not self.choices:
                raise ValueError("choice settings need at least one choice")
            if self.default is not None and value_string(self.default) not in self.choices:
                raise ValueError(f"default {self.default!r} is not one of {self.choices}")
        elif self.choices:
            raise ValueError("only choice settings take choices")
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError("minimum cannot be greater than maximum")
        return self


class RegistryConfig(BaseModel):
    """Schema for a registry definition file."""

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("toolsettings.yaml"),
        Path("~/.config/toolsettings/toolsettings.yaml").expanduser(),
    ]

    strategy: Literal["mutable", "immutable"] = "mutable"
    strict_abbreviations: bool = Field(
        False, description="Reject settings whose labels collide instead of warning"
    )
    settings: list[SettingDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> RegistryConfig:
        names = [d.name for d in self.settings]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate setting names: {', '.join(duplicates)}")
        for definition in self.settings:
            for dependency in definition.depends_on:
                if dependency.setting not in names:
                    raise ValueError(
                        f"{definition.name} depends on unknown setting {dependency.setting}"
                    )
                if dependency.setting == definition.name:
                    raise ValueError(f"{definition.name} cannot depend on itself")
        return self

    def definition(self, name: str) -> SettingDefinition | None:
        """Find a definition by setting name."""
        return next((d for d in self.settings if d.name == name), None)

    @classmethod
    def load(cls, path: Path | None = None) -> RegistryConfig:
        """Load a registry definition from a YAML file.

        Args:
            path: Path to the file (optional, searches default locations if None)

        Returns:
            Validated RegistryConfig object

        Raises:
            FileNotFoundError: If no definition file is found
            RuntimeError: If the file cannot be parsed or is invalid
        """
        if path is None:
            # Check environment variable first
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from {CONFIG_ENV_VAR} not found: {path}")
            else:
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    raise FileNotFoundError(
                        f"No configuration file found. Create toolsettings.yaml or set {CONFIG_ENV_VAR}."
                    )

        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
