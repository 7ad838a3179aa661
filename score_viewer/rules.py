"""
Fixed column rules shared by the local and the cloud source.

This file exists to keep the rule tables in one place, so both readers
hide and rename exactly the same columns.
"""

# Substrings (lower-case) that hide a column when found in its raw header.
HIDDEN_COLUMNS = (
    "sport_id",
    "team_members",
    "team_name",
    "info",
    "result_code",
    "position_pre",
)

# Checked in order; the first substring found in the header wins.
HEADER_REPLACEMENTS = (
    ("category", "Series"),
    ("first_name", "Name"),
    ("last_name", "Surname"),
    ("organization", "Club"),
    ("napat", "X"),
    ("result", "Result"),
    ("posit.", "Rank"),
)

# "part-3" -> "S3", "psum-3" -> "P3"
PART_PREFIX = ("part-", "S")
PSUM_PREFIX = ("psum-", "P")

DELIMITERS = (",", ";")
DEFAULT_SHEET = "Sheet1"
SHEET_RANGE = "A:Z"

CATEGORY_MARKER = "category"
RESULT_HEADER = "result"
