"""
Text checks shared by the account and message rules.
"""

from typing import Optional


def is_blank(value: Optional[str]) -> bool:
    """True for None, the empty string, or whitespace only."""
    return value is None or not value.strip()
