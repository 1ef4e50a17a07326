"""Immutable settings: applying a value yields a new registry snapshot.

Neither registries nor settings change after construction. Consumption entry
points return ``(new_registry, unconsumed_tokens)``; the registry the setting
was looked up in stays untouched, so earlier snapshots can be kept around for
rollback or comparison.

Examples:
    base = ImmutableSettings([
        ImmutableSetting.boolean("-verbose", "Output messages about what the tool is doing"),
        ImmutableSetting.integer("-g", "Debug level", default=1, minimum=0, maximum=3),
    ])
    result = base.lookup_setting("-g").try_to_set(["2"])
    if result is not None:
        updated, residual = result      # base still has -g = 1
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any, Final, Optional

from toolsettings.errors import SettingsError
from toolsettings.settings.base import (
    AbsSettings,
    ErrorFn,
    InternalSetting,
    check_labels,
    default_error_fn,
)
from toolsettings.settings.kinds import KindedSetting

logger: Final = logging.getLogger(__name__)

Snapshot = tuple["ImmutableSettings", list[str]]


class ImmutableSetting(KindedSetting["ImmutableSetting", Snapshot]):
    """A setting that is copied, never modified.

    A setting only becomes usable for consumption once a registry has bound
    it; the bound copy knows which snapshot to derive the next one from.
    """

    _owner: Optional[ImmutableSettings] = None

    @property
    def error_fn(self) -> ErrorFn:
        return self._owner.error_fn if self._owner is not None else default_error_fn

    @property
    def registry(self) -> Optional[ImmutableSettings]:
        """The snapshot this setting belongs to, if any."""
        return self._owner

    def _copy(self, **changes: Any) -> ImmutableSetting:
        clone = copy.copy(self)
        clone.__dict__.update(changes)
        return clone

    def bound_to(self, owner: ImmutableSettings) -> ImmutableSetting:
        return self._copy(_owner=owner)

    def _applied(self, value: Any, residual: list[str]) -> Snapshot:
        if self._owner is None:
            raise SettingsError(f"{self.name} is not bound to a registry", self.name)
        updated = self._copy(_value=value, _is_default=False)
        return self._owner.replaced(updated), residual

    def with_abbreviation(self, name: str) -> ImmutableSetting:
        return self._copy(_abbreviations=(*self._abbreviations, name))

    def with_help_syntax(self, help_syntax: str) -> ImmutableSetting:
        return self._copy(_help_syntax=help_syntax)

    def with_deprecation_message(self, message: str) -> ImmutableSetting:
        return self._copy(_deprecation_message=message)

    def depends_on(self, setting: ImmutableSetting, value: str) -> ImmutableSetting:
        return self._copy(_dependencies=(*self._dependencies, (setting, value)))


class InternalImmutableSetting(InternalSetting["ImmutableSetting", Snapshot], ImmutableSetting):
    """An immutable setting kept out of help output and registry equality."""


class ImmutableSettings(AbsSettings[ImmutableSetting, Snapshot]):
    """A registry snapshot.

    Safe to read from any number of threads; every update produces a new
    snapshot carrying the same error callback.
    """

    def __init__(
        self,
        settings: Iterable[ImmutableSetting] = (),
        error_fn: Optional[ErrorFn] = None,
        strict_abbreviations: bool = False,
    ) -> None:
        """Create a snapshot from initial, default-valued settings.

        Args:
            settings: Settings to bind into this registry
            error_fn: Receives every error message; defaults to logging it
            strict_abbreviations: Reject label collisions instead of warning

        Raises:
            DuplicateSettingError: If two settings share a name
            AmbiguousAbbreviationError: On a label collision in strict mode
        """
        self._error_fn = error_fn or default_error_fn
        self.strict_abbreviations = strict_abbreviations
        members: list[ImmutableSetting] = []
        for setting in settings:
            check_labels(members, setting, strict_abbreviations)
            members.append(setting)
        self._settings = {s.name: s.bound_to(self) for s in members}

    @property
    def error_fn(self) -> ErrorFn:
        return self._error_fn

    @property
    def all_settings(self) -> tuple[ImmutableSetting, ...]:
        return tuple(self._settings.values())

    def advance(self, result: Snapshot) -> Snapshot:
        return result

    def resolve(self, setting: ImmutableSetting) -> ImmutableSetting:
        """Look ``setting`` up by name in this snapshot.

        Dependencies may point at setting objects from an older snapshot;
        resolving by name checks the values this snapshot actually holds.
        """
        return self._settings.get(setting.name, setting)

    def _derive(self, members: Iterable[ImmutableSetting]) -> ImmutableSettings:
        snapshot = copy.copy(self)
        snapshot._settings = {s.name: s.bound_to(snapshot) for s in members}
        return snapshot

    def replaced(self, setting: ImmutableSetting) -> ImmutableSettings:
        """Return a snapshot where ``setting`` takes the place of its namesake.

        Raises:
            KeyError: If no setting of that name is registered
        """
        if setting.name not in self._settings:
            raise KeyError(setting.name)
        logger.debug("New snapshot with %s", setting)
        return self._derive(setting if s.name == setting.name else s for s in self._settings.values())

    def with_setting(self, setting: ImmutableSetting) -> ImmutableSettings:
        """Return a snapshot with ``setting`` registered as well.

        Raises:
            DuplicateSettingError: If the name is already registered
            AmbiguousAbbreviationError: On a label collision in strict mode
        """
        check_labels(self._settings.values(), setting, self.strict_abbreviations)
        return self._derive((*self._settings.values(), setting))
