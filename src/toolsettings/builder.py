"""Build settings registries from validated definitions."""

from __future__ import annotations

import logging
from typing import Any, Final, Literal, TypeVar

from toolsettings.config import RegistryConfig, SettingDefinition
from toolsettings.errors import SettingDefinitionError
from toolsettings.settings.base import AbsSettings, ErrorFn, value_string
from toolsettings.settings.immutable import (
    ImmutableSetting,
    ImmutableSettings,
    InternalImmutableSetting,
)
from toolsettings.settings.kinds import KindedSetting
from toolsettings.settings.mutable import InternalMutableSetting, MutableSetting, MutableSettings

logger: Final = logging.getLogger(__name__)

K = TypeVar("K", bound=KindedSetting[Any, Any])

Strategy = Literal["mutable", "immutable"]


def build_setting(definition: SettingDefinition, setting_cls: type[K]) -> K:
    """Create one setting, without its dependencies.

    Args:
        definition: Validated setting definition
        setting_cls: Concrete setting class of the target strategy

    Returns:
        A default-valued setting

    Raises:
        SettingDefinitionError: If the default does not fit the kind
    """
    options: dict[str, Any] = {
        "abbreviations": definition.abbreviations,
        "help_syntax": definition.help_syntax,
        "deprecation_message": definition.deprecated,
    }
    if definition.arg and definition.kind != "boolean" and definition.kind != "defines":
        options["arg"] = definition.arg
    name, help_text, default = definition.name, definition.help, definition.default

    if definition.kind == "boolean":
        return setting_cls.boolean(name, help_text, **options)
    if definition.kind == "string":
        return setting_cls.string(name, help_text, value_string(default) or "", **options)
    if definition.kind == "integer":
        if isinstance(default, bool):
            raise SettingDefinitionError(name, "integer default cannot be a boolean", definition.model_dump())
        try:
            number = 0 if default is None else int(default)
        except ValueError as exc:
            raise SettingDefinitionError(name, f"{default!r} is not an integer", definition.model_dump()) from exc
        return setting_cls.integer(
            name, help_text, number, definition.minimum, definition.maximum, **options
        )
    if definition.kind == "multi_string":
        return setting_cls.multi_string(name, help_text, **options)
    if definition.kind == "choice":
        choice = value_string(default)
        return setting_cls.choice(name, help_text, definition.choices, choice, **options)
    return setting_cls.defines(name, help_text, **options)


def build_registry(
    config: RegistryConfig,
    error_fn: ErrorFn | None = None,
    strategy: Strategy | None = None,
) -> AbsSettings[Any, Any]:
    """Create a registry from a definition file.

    Args:
        config: Validated registry definition
        error_fn: Error callback handed to the registry
        strategy: Overrides the strategy named in the definition

    Returns:
        A MutableSettings or ImmutableSettings with every setting at default

    Raises:
        SettingDefinitionError: If a definition cannot be built
        DuplicateSettingError: If two settings share a name
        AmbiguousAbbreviationError: On a label collision in strict mode
    """
    chosen = strategy or config.strategy
    immutable = chosen == "immutable"

    built: dict[str, Any] = {}
    for definition in config.settings:
        if immutable:
            setting_cls: type[Any] = InternalImmutableSetting if definition.internal else ImmutableSetting
        else:
            setting_cls = InternalMutableSetting if definition.internal else MutableSetting
        built[definition.name] = build_setting(definition, setting_cls)

    # Dependencies are attached once every prerequisite exists
    for definition in config.settings:
        for dependency in definition.depends_on:
            built[definition.name] = built[definition.name].depends_on(
                built[dependency.setting], dependency.value
            )

    logger.debug("Building %s registry with %d settings", chosen, len(built))
    if immutable:
        return ImmutableSettings(built.values(), error_fn, config.strict_abbreviations)

    registry = MutableSettings(error_fn, config.strict_abbreviations)
    for setting in built.values():
        registry.add(setting)
    return registry
