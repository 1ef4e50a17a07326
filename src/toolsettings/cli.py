"""Command-line interface for trying out settings registries.

This module loads a registry definition, applies command-line style
arguments to it, and prints the resulting settings or the options a
definition provides.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final

import typer

from toolsettings.arguments import process_arguments
from toolsettings.builder import build_registry
from toolsettings.config import RegistryConfig
from toolsettings.errors import SettingsError
from toolsettings.settings.base import AbsSettings

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Command-line settings registry", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "toolsettings.cli"

CONFIG_OPTION = typer.Option(..., "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
IMMUTABLE_OPTION = typer.Option(
    False, "--immutable", help="Use immutable snapshots regardless of the definition"
)
ALL_OPTION = typer.Option(False, "--all", "-a", help="Include internal settings")
ARGS_ARGUMENT = typer.Argument(None, help="Arguments to apply; put them after --")


class ErrorCollector:
    """Error callback that echoes messages and remembers them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
        typer.secho(f"error: {message}", fg=typer.colors.RED, err=True)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _load_registry(
    config: Path, errors: ErrorCollector, immutable: bool = False
) -> AbsSettings[Any, Any]:
    try:
        definition = RegistryConfig.load(config)
        return build_registry(definition, errors, "immutable" if immutable else None)
    except (RuntimeError, SettingsError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def parse(
    config: Path = CONFIG_OPTION,
    args: list[str] | None = ARGS_ARGUMENT,
    debug: bool = DEBUG_OPTION,
    immutable: bool = IMMUTABLE_OPTION,
) -> None:
    """Apply arguments to a registry and print the settings they change."""
    _configure_logging(debug)
    errors = ErrorCollector()
    registry = _load_registry(config, errors, immutable)

    outcome = process_arguments(registry, args or [])
    dependencies_ok = outcome.settings.check_dependencies()

    typer.echo(str(outcome.settings), nl=False)
    if outcome.residual:
        typer.echo("Operands: " + " ".join(outcome.residual))

    if errors.messages or not outcome.ok or not dependencies_ok:
        raise typer.Exit(code=1)


@app.command()
def options(
    config: Path = CONFIG_OPTION,
    show_all: bool = ALL_OPTION,
) -> None:
    """List the options a registry definition provides."""
    registry = _load_registry(config, ErrorCollector())
    settings = registry.all_settings if show_all else registry.visible_settings

    groups = [
        ("Standard options", lambda s: s.is_standard),
        ("Advanced options", lambda s: s.is_advanced),
        ("Private options", lambda s: s.is_private),
    ]
    for title, predicate in groups:
        members = sorted(s for s in settings if predicate(s))
        if not members:
            continue
        typer.secho(f"{title}:", bold=True)
        width = max(len(s.help_syntax) for s in members)
        for setting in members:
            line = f"  {setting.help_syntax.ljust(width)}  {setting.help_description}"
            if setting.choices:
                line += f" (choices: {', '.join(setting.choices)})"
            if setting.is_deprecated:
                line += f" [deprecated: {setting.deprecation_message}]"
            typer.echo(line.rstrip())


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a registry definition file."""
    try:
        build_registry(RegistryConfig.load(file))
        typer.echo("✅ Config valid")
    except (RuntimeError, SettingsError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
