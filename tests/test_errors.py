import pytest

from toolsettings.errors import (
    AmbiguousAbbreviationError,
    DuplicateSettingError,
    SettingDefinitionError,
    SettingsError,
)


def test_duplicate_setting_error() -> None:
    err = DuplicateSettingError("-verbose")
    assert str(err) == "Setting already registered: -verbose"
    assert err.name == "-verbose"


def test_ambiguous_abbreviation_error() -> None:
    err = AmbiguousAbbreviationError("-v", existing="-verbose", incoming="-version")
    assert str(err) == "Label '-v' of -version is already used by -verbose"
    assert err.name == "-v"
    assert (err.existing, err.incoming) == ("-verbose", "-version")


def test_setting_definition_error_keeps_definition() -> None:
    err = SettingDefinitionError("-Xmax-errors", "'lots' is not an integer", {"kind": "integer"})
    assert str(err) == "Invalid definition for -Xmax-errors: 'lots' is not an integer"
    assert err.reason == "'lots' is not an integer"
    assert err.definition == {"kind": "integer"}


@pytest.mark.parametrize(
    "err",
    [
        DuplicateSettingError("-a"),
        AmbiguousAbbreviationError("-a", "-b", "-c"),
        SettingDefinitionError("-a", "bad"),
    ],
)
def test_hierarchy(err: SettingsError) -> None:
    assert isinstance(err, SettingsError)
    assert err.message == str(err)
