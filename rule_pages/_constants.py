"""Common literal values used across rule_pages.

These constants keep delimiters, default locations, and metadata keys
centralized so the parser, resolver, and tests import the same values without
drifting. Intended for internal use within the rule_pages package.

Examples
--------
>>> from rule_pages import _constants
>>> _constants.METADATA_DELIMITER
'---'
>>> _constants.DEFAULT_SOURCE_DIR
'.cursor/rules'
"""

METADATA_DELIMITER = "---"

DEFAULT_SOURCE_DIR = ".cursor/rules"
DEFAULT_SOURCE_SUFFIX = ".mdc"
DEFAULT_SCHEME = "mdc"
DEFAULT_TARGET_PATH = "rules"
DEFAULT_MAIN_RULE = "main"

SIDEBAR_POSITION_KEYS = ("sidebar_position", "sidebarPosition")

MAX_SUGGESTIONS = 3
MAX_LISTED_FILES = 5
