"""
Munin field name utilities.
"""

import re

_INVALID_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")
_VALID_FIRST_CHARACTER = re.compile(r"[A-Za-z_]")


def clean_fieldname(text: str) -> str:
    """
    Turns arbitrary text into a legal Munin field name.

    Every character outside [A-Za-z0-9_] becomes "_", and "_" is prepended
    when the result does not start with a letter or an underscore.

    Example:
        clean_fieldname("foo.bar@example.com") == "foo_bar_example_com"

    Args:
        text: Text to clean (usually an email address)

    Returns:
        Field name
    """
    cleaned = _INVALID_CHARACTERS.sub("_", text)
    if not _VALID_FIRST_CHARACTER.match(cleaned):
        cleaned = f"_{cleaned}"
    return cleaned
