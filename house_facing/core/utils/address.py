"""
Address normalization utilities.

Usage:
    from house_facing.core.utils.address import normalize_address, clean_address

    normalize_address(" 123 MAIN  St ")   # "123 main st"
    clean_address("  123 Main St ")       # "123 Main St"
"""

import re

WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_address(address: str) -> str:
    """
    Trim an address as typed by a user.

    Internal whitespace runs are collapsed so that the geocoder sees a
    single-spaced query.

    Raises:
        ValueError: If the address is empty after trimming
    """
    cleaned = WHITESPACE_PATTERN.sub(" ", address or "").strip()
    if not cleaned:
        raise ValueError("Please enter an address")
    return cleaned


def normalize_address(address: str) -> str:
    """
    Normalize an address into a result cache key.

    Lower-cased, trimmed, internal whitespace collapsed, so
    "123 Main St" and " 123 MAIN  ST " share one key.
    """
    return WHITESPACE_PATTERN.sub(" ", address or "").strip().lower()
