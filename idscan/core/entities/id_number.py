"""
Entity helpers: Citizen Id Number.

Structural checks and derivations on the 18-character resident
identity number:

    RRRRRR YYYYMMDD SSS C
    region birth    seq check

Sequence digit parity encodes gender. Pure functions, no I/O.
"""

import re


ID_NUMBER_LENGTH = 18
ID_NUMBER_PATTERN = re.compile(r"^[0-9]{17}[0-9X]$")

# GB 11643-1999 (ISO 7064 MOD 11-2)
CHECKSUM_WEIGHTS = [7, 9, 10, 5, 8, 4, 2, 1, 6, 3, 7, 9, 10, 5, 8, 4, 2]
CHECKSUM_CHARS = "10X98765432"

MALE = "男"
FEMALE = "女"


def is_structurally_valid(id_number: str) -> bool:
    """
    Length, character set and embedded birth date plausibility.

    Month must be 1-12 and day 1-31; no calendar arithmetic, so
    19900231 passes. The check digit is not verified here.
    """
    if not isinstance(id_number, str) or len(id_number) != ID_NUMBER_LENGTH:
        return False
    if not ID_NUMBER_PATTERN.match(id_number):
        return False

    month = int(id_number[10:12])
    day = int(id_number[12:14])
    return 1 <= month <= 12 and 1 <= day <= 31


def birth_date_from_id(id_number: str) -> str | None:
    """Characters 7-14 as YYYY-MM-DD, or None for an invalid id."""
    if not is_structurally_valid(id_number):
        return None
    return f"{id_number[6:10]}-{id_number[10:12]}-{id_number[12:14]}"


def gender_from_id(id_number: str) -> str | None:
    """17th digit: odd is male, even is female."""
    if not is_structurally_valid(id_number):
        return None
    return MALE if int(id_number[16]) % 2 == 1 else FEMALE


def region_code_from_id(id_number: str) -> str | None:
    """Six-digit administrative division code."""
    if not is_structurally_valid(id_number):
        return None
    return id_number[:6]


def checksum_digit(first17: str) -> str:
    """Expected 18th character for the first 17 digits."""
    total = sum(int(d) * w for d, w in zip(first17, CHECKSUM_WEIGHTS))
    return CHECKSUM_CHARS[total % 11]


def has_valid_checksum(id_number: str) -> bool:
    if not is_structurally_valid(id_number):
        return False
    return checksum_digit(id_number[:17]) == id_number[17]
