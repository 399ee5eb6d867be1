"""
Target-age parsing.

The dataset describes ages as free text ("3-8", "12+", "Any"). This module
turns those strings into a numeric (min_age, max_age) pair used for
range-overlap filtering.
"""

import re
from typing import NamedTuple, Optional

# Upper bound stored for open-ended ranges such as "12+"
OPEN_MAX_AGE = 99


class AgeRange(NamedTuple):
    min_age: Optional[int]
    max_age: Optional[int]


UNKNOWN_AGE = AgeRange(None, None)

# Recurring phrasings from the dataset. Checked before the regexes so that
# compound strings like "6-12, 12+" resolve to the intended range.
KNOWN_AGE_GROUPS = {
    "any": AgeRange(0, OPEN_MAX_AGE),
    "all ages": AgeRange(0, OPEN_MAX_AGE),
    "any age": AgeRange(0, OPEN_MAX_AGE),
    "0-3": AgeRange(0, 3),
    "0-5": AgeRange(0, 5),
    "1-4": AgeRange(1, 4),
    "1-5": AgeRange(1, 5),
    "2-4": AgeRange(2, 4),
    "2-5": AgeRange(2, 5),
    "2-6": AgeRange(2, 6),
    "2-8": AgeRange(2, 8),
    "3-6": AgeRange(3, 6),
    "3-7": AgeRange(3, 7),
    "3-8": AgeRange(3, 8),
    "4-7": AgeRange(4, 7),
    "4-8": AgeRange(4, 8),
    "4-10": AgeRange(4, 10),
    "5-8": AgeRange(5, 8),
    "5-9": AgeRange(5, 9),
    "5-10": AgeRange(5, 10),
    "5-12": AgeRange(5, 12),
    "6-10": AgeRange(6, 10),
    "6-12": AgeRange(6, 12),
    "7-11": AgeRange(7, 11),
    "7-12": AgeRange(7, 12),
    "8-12": AgeRange(8, 12),
    "8-14": AgeRange(8, 14),
    "9-12": AgeRange(9, 12),
    "10-14": AgeRange(10, 14),
    "10-16": AgeRange(10, 16),
    "2+, any": AgeRange(2, OPEN_MAX_AGE),
    "6-12, 12+": AgeRange(6, OPEN_MAX_AGE),
    "7-12, 12+": AgeRange(7, OPEN_MAX_AGE),
    "0+": AgeRange(0, OPEN_MAX_AGE),
    "1+": AgeRange(1, OPEN_MAX_AGE),
    "2+": AgeRange(2, OPEN_MAX_AGE),
    "3+": AgeRange(3, OPEN_MAX_AGE),
    "4+": AgeRange(4, OPEN_MAX_AGE),
    "5+": AgeRange(5, OPEN_MAX_AGE),
    "6+": AgeRange(6, OPEN_MAX_AGE),
    "7+": AgeRange(7, OPEN_MAX_AGE),
    "8+": AgeRange(8, OPEN_MAX_AGE),
    "10+": AgeRange(10, OPEN_MAX_AGE),
    "12+": AgeRange(12, OPEN_MAX_AGE),
}

# "12+"
OPEN_ENDED_PATTERN = re.compile(r"^(?P<min>\d+)\s*\+$")

# "3-8" / "8 - 3"
RANGE_PATTERN = re.compile(r"^(?P<a>\d+)\s*-\s*(?P<b>\d+)$")

# "5"
SINGLE_AGE_PATTERN = re.compile(r"^(?P<age>\d+)$")


def parse_age_group(value) -> AgeRange:
    """
    Parse a free-text age descriptor into an AgeRange.

    Unrecognized input never raises: a warning is printed and both bounds
    are None.
    """
    if value is None:
        return UNKNOWN_AGE

    if not isinstance(value, str):
        print(
            f"[WARN] Age group is not a string "
            f"({type(value).__name__}: {value!r}); leaving ages empty"
        )
        return UNKNOWN_AGE

    text = value.strip().lower()
    if not text:
        return UNKNOWN_AGE

    known = KNOWN_AGE_GROUPS.get(text)
    if known is not None:
        return known

    match = OPEN_ENDED_PATTERN.match(text)
    if match:
        return AgeRange(int(match.group("min")), OPEN_MAX_AGE)

    match = RANGE_PATTERN.match(text)
    if match:
        a, b = int(match.group("a")), int(match.group("b"))
        return AgeRange(min(a, b), max(a, b))

    match = SINGLE_AGE_PATTERN.match(text)
    if match:
        age = int(match.group("age"))
        return AgeRange(age, age)

    print(f"[WARN] Could not parse age group: {value!r}; leaving ages empty")
    return UNKNOWN_AGE
