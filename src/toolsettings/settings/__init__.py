"""Settings registries.

This package provides:
- AbsSetting / AbsSettings: the contract both storage strategies share
- MutableSettings: a registry whose settings are updated in place
- ImmutableSettings: a registry where every update yields a new snapshot
"""

from toolsettings.settings.base import (
    AbsSetting,
    AbsSettings,
    ErrorFn,
    InternalSetting,
    default_error_fn,
    value_string,
)
from toolsettings.settings.immutable import (
    ImmutableSetting,
    ImmutableSettings,
    InternalImmutableSetting,
)
from toolsettings.settings.kinds import (
    BooleanKind,
    ChoiceKind,
    DefinesKind,
    IntegerKind,
    Kind,
    KindedSetting,
    MultiStringKind,
    StringKind,
)
from toolsettings.settings.mutable import InternalMutableSetting, MutableSetting, MutableSettings

__all__ = [
    "AbsSetting",
    "AbsSettings",
    "BooleanKind",
    "ChoiceKind",
    "DefinesKind",
    "ErrorFn",
    "ImmutableSetting",
    "ImmutableSettings",
    "IntegerKind",
    "InternalImmutableSetting",
    "InternalMutableSetting",
    "InternalSetting",
    "Kind",
    "KindedSetting",
    "MultiStringKind",
    "MutableSetting",
    "MutableSettings",
    "StringKind",
    "default_error_fn",
    "value_string",
]
