"""Value grammars for the setting variants.

A ``Kind`` knows how one variant consumes tokens and renders itself back to
tokens. It never stores state: parsing returns the new value and leaves it to
the setting's storage strategy to apply it, which is how the mutable and the
immutable registries share the same variants.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Final, Optional, TypeVar

from toolsettings.constants import (
    INVALID_CHOICE_MSG,
    INVALID_INTEGER_MSG,
    INVALID_PROPERTY_MSG,
    LIST_SEPARATOR,
    MISSING_ARGUMENT_MSG,
    MULTIPLE_ARGUMENTS_MSG,
    OPTION_AS_VALUE_MSG,
    OPTION_PREFIX,
    OUT_OF_RANGE_MSG,
    PROPERTY_ARGUMENTS_MSG,
    PROPERTY_SEPARATOR,
)
from toolsettings.settings.base import AbsSetting, ResultT, SettingT, value_string

logger: Final = logging.getLogger(__name__)

K = TypeVar("K", bound="KindedSetting[Any, Any]")

Parsed = Optional[tuple[Any, list[str]]]

_INTEGER_RE: Final = re.compile(r"[+-]?\d+")


def _leading_operands(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split off the tokens before the next option."""
    for index, arg in enumerate(args):
        if arg.startswith(OPTION_PREFIX):
            return list(args[:index]), list(args[index:])
    return list(args), []


class Kind(ABC):
    """Grammar of one setting variant."""

    default: Any = None
    # Whether the dispatcher may route -<name><key>=<value> tokens here
    accepts_property: bool = False

    @abstractmethod
    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        """Consume a prefix of ``args``.

        Returns:
            ``(new_value, residual)``, or None after reporting an error
        """

    def parse_colon(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[Any]:
        """Value for ``name:a,b`` syntax; rejected unless a variant overrides it."""
        return setting.error_and_value(MULTIPLE_ARGUMENTS_MSG.format(name=setting.name), None)

    def parse_property(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[Any]:
        """Value for ``namekey=value`` syntax; rejected unless a variant overrides it."""
        return setting.error_and_value(PROPERTY_ARGUMENTS_MSG.format(name=setting.name), None)

    def unparse(self, setting: AbsSetting[Any, Any]) -> list[str]:
        if setting.is_default:
            return []
        return [setting.name, value_string(setting.value) or ""]

    def help_syntax(self, name: str) -> str:
        return name

    @property
    def choices(self) -> list[str]:
        return []


class BooleanKind(Kind):
    """A flag: present means true, consumes nothing."""

    default = False

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        return True, list(args)

    def parse_colon(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[bool]:
        if len(args) == 1 and args[0].lower() in ("true", "false"):
            return args[0].lower() == "true"
        joined = LIST_SEPARATOR.join(args)
        return setting.error_and_value(INVALID_CHOICE_MSG.format(arg=joined, name=setting.name), None)

    def unparse(self, setting: AbsSetting[Any, Any]) -> list[str]:
        return [setting.name] if setting.value else []


class StringKind(Kind):
    """Takes exactly one following token."""

    def __init__(self, default: str = "", arg: str = "string") -> None:
        self.default = default
        self.arg = arg

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        if not args:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        return args[0], list(args[1:])

    def help_syntax(self, name: str) -> str:
        return f"{name} <{self.arg}>"


class IntegerKind(Kind):
    """Takes one integer token, optionally bounded (inclusive)."""

    def __init__(
        self,
        default: int = 0,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        arg: str = "n",
    ) -> None:
        self.default = default
        self.minimum = minimum
        self.maximum = maximum
        self.arg = arg

    def _bounds(self) -> str:
        low = "" if self.minimum is None else str(self.minimum)
        high = "" if self.maximum is None else str(self.maximum)
        return f"{low}..{high}"

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        if not args:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        if not _INTEGER_RE.fullmatch(args[0]):
            return setting.error_and_value(
                INVALID_INTEGER_MSG.format(arg=args[0], name=setting.name), None
            )
        number = int(args[0])
        if (self.minimum is not None and number < self.minimum) or (
            self.maximum is not None and number > self.maximum
        ):
            return setting.error_and_value(
                OUT_OF_RANGE_MSG.format(arg=args[0], name=setting.name, bounds=self._bounds()),
                None,
            )
        return number, list(args[1:])

    def help_syntax(self, name: str) -> str:
        return f"{name} <{self.arg}>"


class MultiStringKind(Kind):
    """Accumulates values, from operands or from ``name:a,b`` syntax."""

    default: tuple[str, ...] = ()

    def __init__(self, arg: str = "arg") -> None:
        self.arg = arg

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        values, residual = _leading_operands(args)
        if not values:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        return tuple(setting.value) + tuple(values), residual

    def parse_colon(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[tuple[str, ...]]:
        values = [arg for arg in args if arg]
        if not values:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        # unparse writes values as plain operands, which cannot start with "-"
        for value in values:
            if value.startswith(OPTION_PREFIX):
                return setting.error_and_value(
                    OPTION_AS_VALUE_MSG.format(arg=value, name=setting.name), None
                )
        return tuple(setting.value) + tuple(values)

    def unparse(self, setting: AbsSetting[Any, Any]) -> list[str]:
        if not setting.value:
            return []
        return [setting.name, *setting.value]

    def help_syntax(self, name: str) -> str:
        return f"{name}:<{self.arg}>"


class ChoiceKind(Kind):
    """One value out of a fixed list."""

    def __init__(self, choices: Sequence[str], default: Optional[str] = None, arg: str = "choice") -> None:
        self._choices = list(choices)
        self.default = default if default is not None else (self._choices[0] if self._choices else None)
        self.arg = arg

    @property
    def choices(self) -> list[str]:
        return list(self._choices)

    def _checked(self, setting: AbsSetting[Any, Any], arg: str) -> Optional[str]:
        if arg in self._choices:
            return arg
        return setting.error_and_value(INVALID_CHOICE_MSG.format(arg=arg, name=setting.name), None)

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        if not args:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        choice = self._checked(setting, args[0])
        if choice is None:
            return None
        return choice, list(args[1:])

    def parse_colon(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[str]:
        if len(args) != 1:
            joined = LIST_SEPARATOR.join(args)
            return setting.error_and_value(INVALID_CHOICE_MSG.format(arg=joined, name=setting.name), None)
        return self._checked(setting, args[0])

    def help_syntax(self, name: str) -> str:
        return f"{name}:<{self.arg}>"


class DefinesKind(Kind):
    """Property definitions: ``-Dkey=value`` or ``-Dkey``."""

    default: tuple[tuple[str, str], ...] = ()
    accepts_property = True

    def _pairs(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[tuple[tuple[str, str], ...]]:
        pairs: list[tuple[str, str]] = []
        for arg in args:
            key, _, val = arg.partition(PROPERTY_SEPARATOR)
            if not key or key.startswith(OPTION_PREFIX):
                return setting.error_and_value(
                    INVALID_PROPERTY_MSG.format(arg=arg, name=setting.name), None
                )
            pairs.append((key, val))
        return tuple(pairs)

    def parse(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Parsed:
        operands, residual = _leading_operands(args)
        if not operands:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        pairs = self._pairs(setting, operands)
        if pairs is None:
            return None
        return tuple(setting.value) + pairs, residual

    def parse_property(self, setting: AbsSetting[Any, Any], args: Sequence[str]) -> Optional[Any]:
        if not args:
            return setting.error_and_value(MISSING_ARGUMENT_MSG.format(name=setting.name), None)
        pairs = self._pairs(setting, args)
        if pairs is None:
            return None
        return tuple(setting.value) + pairs

    def unparse(self, setting: AbsSetting[Any, Any]) -> list[str]:
        if not setting.value:
            return []
        return [setting.name, *(f"{k}{PROPERTY_SEPARATOR}{v}" if v else k for k, v in setting.value)]

    def help_syntax(self, name: str) -> str:
        return f"{name}<property>{PROPERTY_SEPARATOR}<value>"


class KindedSetting(AbsSetting[SettingT, ResultT]):
    """A setting whose grammar is delegated to a ``Kind``.

    Subclasses decide what applying a value means by implementing
    ``_applied``; everything else about consuming tokens lives here.
    """

    def __init__(
        self,
        name: str,
        help_description: str,
        kind: Kind,
        *,
        abbreviations: Sequence[str] = (),
        help_syntax: Optional[str] = None,
        internal: bool = False,
        deprecation_message: Optional[str] = None,
    ) -> None:
        self.name = name
        self.help_description = help_description
        self.kind = kind
        self._value: Any = kind.default
        self._is_default = True
        self._abbreviations: tuple[str, ...] = tuple(abbreviations)
        self._dependencies: tuple[tuple[SettingT, str], ...] = ()
        self._help_syntax = help_syntax
        self._internal_only = internal
        self._deprecation_message = deprecation_message

    # ---- named constructors ----
    @classmethod
    def boolean(cls: type[K], name: str, help_description: str, **options: Any) -> K:
        return cls(name, help_description, BooleanKind(), **options)

    @classmethod
    def string(
        cls: type[K],
        name: str,
        help_description: str,
        default: str = "",
        arg: str = "string",
        **options: Any,
    ) -> K:
        return cls(name, help_description, StringKind(default, arg), **options)

    @classmethod
    def integer(
        cls: type[K],
        name: str,
        help_description: str,
        default: int = 0,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        arg: str = "n",
        **options: Any,
    ) -> K:
        return cls(name, help_description, IntegerKind(default, minimum, maximum, arg), **options)

    @classmethod
    def multi_string(cls: type[K], name: str, help_description: str, arg: str = "arg", **options: Any) -> K:
        return cls(name, help_description, MultiStringKind(arg), **options)

    @classmethod
    def choice(
        cls: type[K],
        name: str,
        help_description: str,
        choices: Sequence[str],
        default: Optional[str] = None,
        arg: str = "choice",
        **options: Any,
    ) -> K:
        return cls(name, help_description, ChoiceKind(choices, default, arg), **options)

    @classmethod
    def defines(cls: type[K], name: str, help_description: str, **options: Any) -> K:
        return cls(name, help_description, DefinesKind(), **options)

    # ---- state ----
    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_default(self) -> bool:
        return self._is_default

    @property
    def abbreviations(self) -> tuple[str, ...]:
        return self._abbreviations

    @property
    def dependencies(self) -> tuple[tuple[SettingT, str], ...]:
        return self._dependencies

    @property
    def help_syntax(self) -> str:
        return self._help_syntax or self.kind.help_syntax(self.name)

    @property
    def choices(self) -> list[str]:
        return self.kind.choices

    @property
    def is_internal_only(self) -> bool:
        return self._internal_only

    @property
    def deprecation_message(self) -> Optional[str]:
        return self._deprecation_message

    @property
    def accepts_property_syntax(self) -> bool:
        return self.kind.accepts_property

    # ---- consumption ----
    @abstractmethod
    def _applied(self, value: Any, residual: list[str]) -> ResultT:
        """Store ``value`` and wrap ``residual`` in the strategy's result."""

    def _apply(self, value: Any, residual: list[str]) -> ResultT:
        if self.is_deprecated:
            logger.warning("%s is deprecated: %s", self.name, self.deprecation_message)
        logger.debug("%s set to %s", self.name, value_string(value))
        return self._applied(value, residual)

    def try_to_set(self, args: Sequence[str]) -> Optional[ResultT]:
        parsed = self.kind.parse(self, args)
        if parsed is None:
            return None
        value, residual = parsed
        return self._apply(value, residual)

    def try_to_set_colon(self, args: Sequence[str]) -> Optional[ResultT]:
        value = self.kind.parse_colon(self, args)
        if value is None:
            return None
        return self._apply(value, [])

    def try_to_set_property(self, args: Sequence[str]) -> Optional[ResultT]:
        value = self.kind.parse_property(self, args)
        if value is None:
            return None
        return self._apply(value, [])

    def unparse(self) -> list[str]:
        return self.kind.unparse(self)
