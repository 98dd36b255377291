"""
Configuration constants to replace magic numbers throughout memrange
"""

import os
import tempfile

# Complement enumeration budget: maximum number of skipped-phase fragments
# produced for one axis before a side is marked non-collapsable
DEFAULT_COMPLEMENT_THRESHOLD = 10

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "memrange_location_parser.cache")
DEFAULT_SOURCE_NAME = "<location>"

# Textual notation keywords
SCALAR_KEYWORD = "bytes"
COLLAPSED_KEYWORD = "dims"
NON_COLLAPSABLE_KEYWORD = "whole"
ELEMENT_SIZE_KEYWORD = "elem"
# Names that must be quoted when printed
RESERVED_NAMES = frozenset({
    SCALAR_KEYWORD, COLLAPSED_KEYWORD, NON_COLLAPSABLE_KEYWORD, ELEMENT_SIZE_KEYWORD,
    "step", "count", "of",
})

# Display and formatting constants
MAX_ERROR_LINE_LENGTH = 80  # Maximum length for error line display
SEXPR_MAX_LINE = 100  # Pretty-printed S-expressions break after this width

# Diagnostic codes
SYNTAX_ERROR_CODE = "E0101"
INVALID_DIMENSION_CODE = "E0102"
MALFORMED_SEXPR_CODE = "E0103"
PRECONDITION_ERROR_CODE = "E9001"

# CLI exit codes
EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_VERIFY_FAILED = 2
