"""Mutable settings: values are applied in place.

Consumption entry points return the unconsumed tokens. Builder operations
change the receiver and return it.

Examples:
    settings = MutableSettings()
    verbose = settings.boolean("-verbose", "Output messages about what the tool is doing")
    settings.string("-d", "Destination for generated files", default=".", arg="directory")

    setting = settings.lookup_setting("-verbose")
    residual = setting.try_to_set(["Foo.src"])   # -> ["Foo.src"]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Final, Optional, TypeVar

from toolsettings.settings.base import (
    AbsSettings,
    ErrorFn,
    InternalSetting,
    check_labels,
    default_error_fn,
)
from toolsettings.settings.kinds import Kind, KindedSetting

logger: Final = logging.getLogger(__name__)

S = TypeVar("S", bound="MutableSetting")


class MutableSetting(KindedSetting["MutableSetting", list[str]]):
    """A setting carrying its own state."""

    def __init__(
        self,
        name: str,
        help_description: str,
        kind: Kind,
        *,
        error_fn: Optional[ErrorFn] = None,
        **options: Any,
    ) -> None:
        super().__init__(name, help_description, kind, **options)
        self._error_fn = error_fn

    @property
    def error_fn(self) -> ErrorFn:
        return self._error_fn or default_error_fn

    def _applied(self, value: Any, residual: list[str]) -> list[str]:
        self._value = value
        self._is_default = False
        return residual

    def with_abbreviation(self, name: str) -> MutableSetting:
        self._abbreviations = (*self._abbreviations, name)
        return self

    def with_help_syntax(self, help_syntax: str) -> MutableSetting:
        self._help_syntax = help_syntax
        return self

    def with_deprecation_message(self, message: str) -> MutableSetting:
        self._deprecation_message = message
        return self

    def depends_on(self, setting: MutableSetting, value: str) -> MutableSetting:
        self._dependencies = (*self._dependencies, (setting, value))
        return self


class InternalMutableSetting(InternalSetting["MutableSetting", list[str]], MutableSetting):
    """A mutable setting kept out of help output and registry equality."""


class MutableSettings(AbsSettings[MutableSetting, list[str]]):
    """Registry whose settings are updated in place.

    One registry is meant to serve one tool invocation; it is not safe to
    share between threads without external locking.
    """

    def __init__(self, error_fn: Optional[ErrorFn] = None, strict_abbreviations: bool = False) -> None:
        """Create an empty registry.

        Args:
            error_fn: Receives every error message; defaults to logging it
            strict_abbreviations: Reject settings whose labels collide with
                already registered ones instead of warning about them
        """
        self._error_fn = error_fn or default_error_fn
        self.strict_abbreviations = strict_abbreviations
        self._settings: dict[str, MutableSetting] = {}

    @property
    def error_fn(self) -> ErrorFn:
        return self._error_fn

    @property
    def all_settings(self) -> tuple[MutableSetting, ...]:
        return tuple(self._settings.values())

    def advance(self, result: list[str]) -> tuple[MutableSettings, list[str]]:
        return self, result

    def add(self, setting: S) -> S:
        """Register ``setting`` and hand it this registry's error callback.

        Raises:
            DuplicateSettingError: If the name is already registered
            AmbiguousAbbreviationError: On a label collision in strict mode
        """
        check_labels(self._settings.values(), setting, self.strict_abbreviations)
        if setting._error_fn is None:
            setting._error_fn = self._error_fn
        self._settings[setting.name] = setting
        return setting

    # ---- registration shortcuts ----
    def boolean(self, name: str, help_description: str, **options: Any) -> MutableSetting:
        return self.add(MutableSetting.boolean(name, help_description, **options))

    def string(self, name: str, help_description: str, default: str = "", **options: Any) -> MutableSetting:
        return self.add(MutableSetting.string(name, help_description, default, **options))

    def integer(self, name: str, help_description: str, default: int = 0, **options: Any) -> MutableSetting:
        return self.add(MutableSetting.integer(name, help_description, default, **options))

    def multi_string(self, name: str, help_description: str, **options: Any) -> MutableSetting:
        return self.add(MutableSetting.multi_string(name, help_description, **options))

    def choice(
        self,
        name: str,
        help_description: str,
        choices: Sequence[str],
        default: Optional[str] = None,
        **options: Any,
    ) -> MutableSetting:
        return self.add(MutableSetting.choice(name, help_description, choices, default, **options))

    def defines(self, name: str, help_description: str, **options: Any) -> MutableSetting:
        return self.add(MutableSetting.defines(name, help_description, **options))
