"""Feed a list of command-line tokens through a registry.

This is a deliberately small dispatcher: it recognizes setting labels, the
``-name:a,b`` list syntax and ``-Dkey=value`` property syntax, and collects
everything that does not start with ``-`` as operands. There is no flag
clustering and no ``--long`` option handling.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Final, Optional

from toolsettings.constants import BAD_OPTION_MSG, COLON_DELIMITER, LIST_SEPARATOR, OPTION_PREFIX
from toolsettings.settings.base import AbsSettings

logger: Final = logging.getLogger(__name__)

Registry = AbsSettings[Any, Any]


@dataclass
class ArgumentOutcome:
    """Result of processing a command line.

    ``settings`` is the registry holding the applied values: the same object
    for mutable registries, the last snapshot for immutable ones. On failure it
    holds everything applied before the failing token, and ``residual`` starts
    with that token.
    """

    ok: bool
    settings: Registry
    residual: list[str] = field(default_factory=list)


def _dispatch(settings: Registry, token: str, rest: list[str]) -> Optional[tuple[Registry, list[str]]]:
    """Apply one option token, returning (registry, remaining tokens)."""
    setting = settings.lookup_setting(token)
    if setting is not None:
        result = setting.try_to_set(rest)
        return None if result is None else settings.advance(result)

    if COLON_DELIMITER in token:
        label, _, values = token.partition(COLON_DELIMITER)
        setting = settings.lookup_setting(label)
        if setting is not None:
            result = setting.try_to_set_colon(values.split(LIST_SEPARATOR))
            if result is None:
                return None
            updated, _ = settings.advance(result)
            return updated, rest

    for candidate in settings.all_settings:
        if candidate.accepts_property_syntax and token.startswith(candidate.name) and token != candidate.name:
            result = candidate.try_to_set_property([token[len(candidate.name):]])
            if result is None:
                return None
            updated, _ = settings.advance(result)
            return updated, rest

    settings.error_fn(BAD_OPTION_MSG.format(token=token))
    return None


def process_arguments(settings: Registry, args: Sequence[str]) -> ArgumentOutcome:
    """Apply every option in ``args`` to ``settings``.

    Processing stops at the first token that fails; its error has already
    been reported through the registry's error callback.

    Args:
        settings: Registry to apply the arguments to
        args: Command-line tokens, without the program name

    Returns:
        ArgumentOutcome with the resulting registry and the operands
    """
    current = settings
    remaining = list(args)
    operands: list[str] = []

    while remaining:
        token, rest = remaining[0], remaining[1:]
        if not token.startswith(OPTION_PREFIX):
            operands.append(token)
            remaining = rest
            continue

        logger.debug("Processing %s", token)
        dispatched = _dispatch(current, token, rest)
        if dispatched is None:
            return ArgumentOutcome(False, current, operands + remaining)
        current, remaining = dispatched

    return ArgumentOutcome(True, current, operands)
