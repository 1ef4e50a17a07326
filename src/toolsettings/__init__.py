"""Command-line settings registries for compiler-style tools."""

from toolsettings.arguments import ArgumentOutcome, process_arguments
from toolsettings.settings import ImmutableSettings, MutableSettings

__all__ = [
    "ArgumentOutcome",
    "ImmutableSettings",
    "MutableSettings",
    "process_arguments",
]
