"""
Date normalization for card text.

Converts the date shapes printed on cards (2020年5月3日, 2020.05.03,
2020-5-3, 20200503) into YYYY-MM-DD.
"""

import re


YMD_PATTERN = re.compile(r"([0-9]{4})[-.年\s]*([0-9]{1,2})[-.月\s]*([0-9]{1,2})日*")
COMPACT_PATTERN = re.compile(r"^[0-9]{8}$")


def normalize(raw: str) -> str:
    """
    Normalize a date-like string to YYYY-MM-DD.

    Unrecognized input is returned unchanged; the caller then treats
    the value as raw/unverified. Never raises.
    """
    if not isinstance(raw, str):
        return raw

    match = YMD_PATTERN.search(raw)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    if COMPACT_PATTERN.match(raw):
        return f"{raw[:4]}-{raw[4:6]}-{raw[6:8]}"

    return raw
