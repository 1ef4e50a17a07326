"""Shared constants for setting names, prefixes and messages."""

from typing import Final

# Bare category markers; a setting named exactly like one of these is a category
CATEGORY_MARKERS: Final = ("-X", "-Y", "-P")
ADVANCED_PREFIX: Final = "-X"
PRIVATE_PREFIX: Final = "-Y"

# Dispatcher syntax
OPTION_PREFIX: Final = "-"
COLON_DELIMITER: Final = ":"
LIST_SEPARATOR: Final = ","
PROPERTY_SEPARATOR: Final = "="

# Canned error messages
MULTIPLE_ARGUMENTS_MSG: Final = "'{name}' does not accept multiple arguments"
PROPERTY_ARGUMENTS_MSG: Final = "'{name}' does not accept property style arguments"
INCOMPLETE_OPTION_MSG: Final = "incomplete option {name} (requires {dependency})"
MISSING_ARGUMENT_MSG: Final = "'{name}' requires an argument"
INVALID_CHOICE_MSG: Final = "'{arg}' is not a valid choice for '{name}'"
INVALID_PROPERTY_MSG: Final = "'{arg}' is not a valid property for '{name}'"
OPTION_AS_VALUE_MSG: Final = "'{arg}' looks like an option and cannot be a value for '{name}'"
INVALID_INTEGER_MSG: Final = "'{arg}' is not a valid integer for '{name}'"
OUT_OF_RANGE_MSG: Final = "'{arg}' is out of range for '{name}' ({bounds})"
BAD_OPTION_MSG: Final = "bad option: '{token}'"

# Configuration lookup
CONFIG_ENV_VAR: Final = "TOOLSETTINGS_CONFIG"
