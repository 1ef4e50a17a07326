"""Settings contract shared by the mutable and immutable registries.

A registry owns a collection of named settings consumed from command-line
style arguments. Two storage strategies implement the contract:

- the mutable one, where applying a value changes the setting in place and the
  consumption entry points return the unconsumed tokens;
- the immutable one, where applying a value produces a new registry snapshot
  and the entry points return ``(new_registry, unconsumed_tokens)``.

Both share lookup, filtering, equality, printing and dependency checks, which
live here. Every failure is reported through the registry's ``error_fn`` and
signalled by a ``None`` result; nothing in the consumption path raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Final, Generic, Optional, TypeVar

from toolsettings.constants import (
    ADVANCED_PREFIX,
    CATEGORY_MARKERS,
    INCOMPLETE_OPTION_MSG,
    LIST_SEPARATOR,
    MULTIPLE_ARGUMENTS_MSG,
    PRIVATE_PREFIX,
    PROPERTY_ARGUMENTS_MSG,
    PROPERTY_SEPARATOR,
)
from toolsettings.errors import AmbiguousAbbreviationError, DuplicateSettingError

logger: Final = logging.getLogger(__name__)

ErrorFn = Callable[[str], None]

SettingT = TypeVar("SettingT", bound="AbsSetting[Any, Any]")
ResultT = TypeVar("ResultT")
X = TypeVar("X")


def default_error_fn(message: str) -> None:
    """Report a settings error on the package logger."""
    logging.getLogger("toolsettings").error(message)


def value_string(value: Any) -> Optional[str]:
    """Render a setting value the way dependency checks and printing see it.

    Args:
        value: A setting value

    Returns:
        The string form, or None when the value is absent
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(_item_string(item) for item in value)
    return str(value)


def _item_string(item: Any) -> str:
    # property pairs render as k=v, bare keys as k
    if isinstance(item, tuple) and len(item) == 2:
        key, val = item
        return f"{key}{PROPERTY_SEPARATOR}{val}" if val else str(key)
    return value_string(item) or ""


class AbsSetting(ABC, Generic[SettingT, ResultT]):
    """One named option of a registry.

    ``SettingT`` is the concrete setting type of a strategy and ``ResultT``
    the payload a successful ``try_to_set`` returns. Builder operations
    (``with_abbreviation`` and friends) return a ``SettingT``: the receiver in
    the mutable strategy, a fresh object in the immutable one. Callers must
    always use the returned object.

    Two settings are equal when their names and values are equal; ordering
    compares names only.
    """

    name: str
    help_description: str

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def value(self) -> Any:
        """Current value."""

    @property
    @abstractmethod
    def is_default(self) -> bool:
        """Whether no value has been applied yet."""

    @property
    @abstractmethod
    def error_fn(self) -> ErrorFn:
        """Callback receiving every error this setting reports."""

    @property
    def abbreviations(self) -> tuple[str, ...]:
        return ()

    @property
    def dependencies(self) -> tuple[tuple[SettingT, str], ...]:
        return ()

    @property
    def help_syntax(self) -> str:
        return self.name

    @property
    def choices(self) -> list[str]:
        """Available choices, for tools that list them."""
        return []

    @property
    def is_internal_only(self) -> bool:
        """If the setting should not appear in help output, etc."""
        return False

    @property
    def deprecation_message(self) -> Optional[str]:
        return None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_message is not None

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    @abstractmethod
    def with_abbreviation(self, name: str) -> SettingT: ...

    @abstractmethod
    def with_help_syntax(self, help_syntax: str) -> SettingT: ...

    @abstractmethod
    def with_deprecation_message(self, message: str) -> SettingT: ...

    @abstractmethod
    def depends_on(self, setting: SettingT, value: str) -> SettingT: ...

    # ------------------------------------------------------------------
    # Consumption protocol
    # ------------------------------------------------------------------

    def responds_to(self, label: str) -> bool:
        """Check the name and every abbreviation."""
        return label == self.name or label in self.abbreviations

    def error_and_value(self, message: str, x: X) -> X:
        """Issue an error and return ``x``."""
        self.error_fn(message)
        return x

    @abstractmethod
    def unparse(self) -> list[str]:
        """Tokens which recreate this setting's current value."""

    @abstractmethod
    def try_to_set(self, args: Sequence[str]) -> Optional[ResultT]:
        """Consume the arguments following this setting's name.

        Args:
            args: Remainder of the command line after the setting name

        Returns:
            The strategy's result wrapper on success, None on failure (the
            error has already been reported)
        """

    def try_to_set_colon(self, args: Sequence[str]) -> Optional[ResultT]:
        """Accept the values of ``-Xfoo:bar,baz`` style arguments."""
        return self.error_and_value(MULTIPLE_ARGUMENTS_MSG.format(name=self.name), None)

    def try_to_set_property(self, args: Sequence[str]) -> Optional[ResultT]:
        """Accept ``-Dfoo=bar`` or ``-Dfoo`` style arguments."""
        return self.error_and_value(PROPERTY_ARGUMENTS_MSG.format(name=self.name), None)

    def try_to_set_from_property_value(self, s: str) -> Optional[ResultT]:
        """Set from a properties file style value."""
        return self.try_to_set([s])

    @property
    def accepts_property_syntax(self) -> bool:
        return False

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def is_category(self) -> bool:
        return self.name in CATEGORY_MARKERS

    @property
    def is_advanced(self) -> bool:
        return self.name.startswith(ADVANCED_PREFIX) and self.name != ADVANCED_PREFIX

    @property
    def is_private(self) -> bool:
        return self.name.startswith(PRIVATE_PREFIX) and self.name != PRIVATE_PREFIX

    @property
    def is_standard(self) -> bool:
        return not self.is_advanced and not self.is_private and not self.is_category

    # ------------------------------------------------------------------
    # Equality, ordering, printing
    # ------------------------------------------------------------------

    def compare(self, other: AbsSetting[Any, Any]) -> int:
        return (self.name > other.name) - (self.name < other.name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AbsSetting):
            return NotImplemented
        return self.name < other.name

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AbsSetting):
            return NotImplemented
        return self.name <= other.name

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AbsSetting):
            return NotImplemented
        return self.name > other.name

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AbsSetting):
            return NotImplemented
        return self.name >= other.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbsSetting):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.name, self.value))

    def __str__(self) -> str:
        return f"{self.name} = {value_string(self.value)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, value={self.value!r})"


class InternalSetting(AbsSetting[SettingT, ResultT]):
    """Mixin for settings hidden from help output and registry equality."""

    @property
    def is_internal_only(self) -> bool:
        return True


class AbsSettings(ABC, Generic[SettingT, ResultT]):
    """A registry of settings.

    Two registries are equal when their visible settings are equal, so
    internal-only settings never affect equality or hashing.
    """

    @property
    @abstractmethod
    def error_fn(self) -> ErrorFn: ...

    @property
    @abstractmethod
    def all_settings(self) -> tuple[SettingT, ...]:
        """Every setting, in registration order."""

    @abstractmethod
    def advance(self, result: ResultT) -> tuple[AbsSettings[SettingT, ResultT], list[str]]:
        """Split a successful consumption result into (registry, residual)."""

    @property
    def visible_settings(self) -> frozenset[SettingT]:
        """Settings minus internal usage settings."""
        return frozenset(s for s in self.all_settings if not s.is_internal_only)

    @property
    def user_set_settings(self) -> frozenset[SettingT]:
        """Only settings which differ from default."""
        return frozenset(s for s in self.visible_settings if not s.is_default)

    def lookup_setting(self, label: str) -> Optional[SettingT]:
        """Find the setting whose name or abbreviation is ``label``."""
        return next((s for s in self.all_settings if s.responds_to(label)), None)

    def resolve(self, setting: SettingT) -> SettingT:
        """Return this registry's current version of ``setting``."""
        return setting

    def check_dependencies(self) -> bool:
        """Verify that every user-set setting has its prerequisites met.

        Each unmet dependency is reported through ``error_fn``; checking goes
        on after a failure so that one pass reports all of them.

        Returns:
            True if every dependency of every user-set setting holds
        """
        ok = True
        for setting in sorted(self.user_set_settings):
            for dependency, required in setting.dependencies:
                current = self.resolve(dependency)
                if value_string(current.value) != required:
                    self.error_fn(
                        INCOMPLETE_OPTION_MSG.format(name=setting.name, dependency=current.name)
                    )
                    ok = False
        return ok

    def to_concise_string(self) -> str:
        return "(" + " ".join(str(s) for s in sorted(self.user_set_settings)) + ")"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbsSettings):
            return NotImplemented
        return self.visible_settings == other.visible_settings

    def __hash__(self) -> int:
        return hash(self.visible_settings)

    def __str__(self) -> str:
        body = "".join(f"  {s}\n" for s in sorted(self.user_set_settings))
        return f"Settings {{\n{body}}}\n"


def check_labels(
    existing: Iterable[AbsSetting[Any, Any]],
    incoming: AbsSetting[Any, Any],
    strict: bool = False,
) -> None:
    """Validate that a setting can join a registry.

    Args:
        existing: Settings already registered
        incoming: Setting about to be registered
        strict: Reject label collisions instead of warning about them

    Raises:
        DuplicateSettingError: If a registered setting has the same name
        AmbiguousAbbreviationError: On a label collision in strict mode
    """
    labels = (incoming.name, *incoming.abbreviations)
    for setting in existing:
        if setting.name == incoming.name:
            raise DuplicateSettingError(incoming.name)
        for label in labels:
            if setting.responds_to(label):
                if strict:
                    raise AmbiguousAbbreviationError(label, setting.name, incoming.name)
                logger.warning(
                    "Label %r of %s is already used by %s; lookup keeps %s",
                    label,
                    incoming.name,
                    setting.name,
                    setting.name,
                )
