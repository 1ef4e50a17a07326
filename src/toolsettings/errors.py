"""Exception classes for building settings registries.

Problems found while consuming arguments are never raised; they are reported
through a registry's error callback. The exceptions below cover structural
mistakes made while a registry is being assembled.
"""

from __future__ import annotations

from typing import Any, Optional


class SettingsError(Exception):
    """Base class for registry construction errors."""

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            name: Setting name or label involved, when there is one
        """
        super().__init__(message)
        self.message: str = message
        self.name: Optional[str] = name


class DuplicateSettingError(SettingsError):
    """Raised when two settings in one registry share a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Setting already registered: {name}", name)


class AmbiguousAbbreviationError(SettingsError):
    """Raised when a label would resolve to more than one setting.

    Only raised by registries created with ``strict_abbreviations=True``.
    """

    def __init__(self, label: str, existing: str, incoming: str) -> None:
        super().__init__(
            f"Label {label!r} of {incoming} is already used by {existing}", label
        )
        self.existing = existing
        self.incoming = incoming


class SettingDefinitionError(SettingsError):
    """Raised when a setting definition cannot be turned into a setting."""

    def __init__(self, name: str, reason: str, definition: Optional[dict[str, Any]] = None) -> None:
        """Initialize with definition details.

        Args:
            name: Name of the offending setting
            reason: Why the definition was rejected
            definition: The raw definition, for debugging
        """
        super().__init__(f"Invalid definition for {name}: {reason}", name)
        self.reason = reason
        self.definition = definition
