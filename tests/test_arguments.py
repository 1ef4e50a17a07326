import pytest

from toolsettings.arguments import ArgumentOutcome, process_arguments
from toolsettings.settings import ImmutableSettings, MutableSettings

COMMAND_LINE = [
    "-v",
    "-d",
    "out",
    "Main.src",
    "-Xplugin:a.jar,b.jar",
    "-Dmode=fast",
    "-target",
    "msil",
    "Util.src",
]

EXPECTED = "(-D = mode=fast -Xplugin = a.jar,b.jar -d = out -target = msil -verbose = true)"


def test_mutable_registry(settings: MutableSettings, errors: list[str]) -> None:
    outcome = process_arguments(settings, COMMAND_LINE)

    assert isinstance(outcome, ArgumentOutcome)
    assert outcome.ok is True
    assert outcome.settings is settings
    assert outcome.residual == ["Main.src", "Util.src"]
    assert settings.to_concise_string() == EXPECTED
    assert errors == []


def test_immutable_registry(snapshot: ImmutableSettings, errors: list[str]) -> None:
    outcome = process_arguments(snapshot, COMMAND_LINE)

    assert outcome.ok is True
    assert outcome.settings is not snapshot
    assert outcome.settings.to_concise_string() == EXPECTED
    assert snapshot.to_concise_string() == "()"
    assert errors == []


def test_unparse_feeds_back(settings: MutableSettings, snapshot: ImmutableSettings) -> None:
    process_arguments(settings, COMMAND_LINE)
    tokens = [token for s in sorted(settings.user_set_settings) for token in s.unparse()]

    outcome = process_arguments(snapshot, tokens)
    assert outcome.ok is True
    assert outcome.settings == settings


def test_unknown_option_stops(settings: MutableSettings, errors: list[str]) -> None:
    outcome = process_arguments(settings, ["-verbose", "-nope", "-d", "out"])

    assert outcome.ok is False
    assert outcome.residual == ["-nope", "-d", "out"]
    assert errors == ["bad option: '-nope'"]
    assert settings.to_concise_string() == "(-verbose = true)"


@pytest.mark.parametrize(
    "args, message",
    [
        (["-Xmax-errors", "many"], "'many' is not a valid integer for '-Xmax-errors'"),
        (["-d:a,b"], "'-d' does not accept multiple arguments"),
        (["-target:jvm-9"], "'jvm-9' is not a valid choice for '-target'"),
        (["-D=oops"], "'=oops' is not a valid property for '-D'"),
    ],
)
def test_failures_reported(
    snapshot: ImmutableSettings, errors: list[str], args: list[str], message: str
) -> None:
    outcome = process_arguments(snapshot, args)

    assert outcome.ok is False
    assert outcome.settings is snapshot
    assert errors == [message]


def test_plain_defines_operands(settings: MutableSettings) -> None:
    outcome = process_arguments(settings, ["-D", "a=1", "b", "-verbose"])

    assert outcome.ok is True
    defines = settings.lookup_setting("-D")
    assert defines is not None
    assert defines.value == (("a", "1"), ("b", ""))


def test_empty_command_line(snapshot: ImmutableSettings) -> None:
    outcome = process_arguments(snapshot, [])
    assert outcome == ArgumentOutcome(True, snapshot, [])
