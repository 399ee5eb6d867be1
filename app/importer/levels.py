"""
Sensory level normalization.

Maps the dataset's ordinal labels ("Low", "Moderate-High", "Varies") onto a
single 0-5 scale shared by every sensory dimension.
"""

import re

LEVEL_SCORES = {
    "none": 0,
    "very low": 1,
    "low": 2,
    "low-moderate": 3,
    "moderate": 3,
    "moderate-high": 4,
    "high": 5,
    "very high": 5,
    # treated as moderate
    "varies": 3,
}

MAX_LEVEL_SCORE = 5


def level_to_number(label):
    """
    Return the 0-5 score for a level label, or None if it is not recognized.
    """
    if not isinstance(label, str):
        return None

    key = re.sub(r"\s*-\s*", "-", label.strip().lower())
    key = re.sub(r"\s+", " ", key)
    return LEVEL_SCORES.get(key)
