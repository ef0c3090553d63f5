"""Amount and phone-number extraction from free-form transcripts."""

from __future__ import annotations

import math
import re
from typing import Any

# Insertion order is the match priority: the first word found anywhere in the
# text wins, even when it sits inside a longer unrelated word.
NUMBER_WORDS: dict[str, int] = {
    "صفر": 0,
    "واحد": 1,
    "اثنين": 2,
    "ثلاثة": 3,
    "أربعة": 4,
    "خمسة": 5,
    "ستة": 6,
    "سبعة": 7,
    "ثمانية": 8,
    "تسعة": 9,
    "عشرة": 10,
    "عشرين": 20,
    "ثلاثين": 30,
    "أربعين": 40,
    "خمسين": 50,
    "ستين": 60,
    "سبعين": 70,
    "ثمانين": 80,
    "تسعين": 90,
    "مئة": 100,
    "مائة": 100,
    "ألف": 1000,
    "الف": 1000,
}

PHONE_LENGTH = 8

# ASCII digits only; a directly preceding minus sign is kept so "-5" is read
# as a negative amount rather than 5.
_AMOUNT_PATTERN = re.compile(r"-?[0-9]+")
_PHONE_PATTERN = re.compile(rf"(?<![0-9])[0-9]{{{PHONE_LENGTH}}}(?![0-9])")
_PHONE_EXACT = re.compile(rf"[0-9]{{{PHONE_LENGTH}}}")


def extract_amount(text: str) -> int | None:
    """Return the amount mentioned in ``text``, or ``None``.

    Number words are checked before digits, in ``NUMBER_WORDS`` order.
    """

    if not text:
        return None

    for word, value in NUMBER_WORDS.items():
        if word in text:
            return value

    match = _AMOUNT_PATTERN.search(text)
    if match:
        return int(match.group(0))
    return None


def extract_phone(text: str) -> str | None:
    """Return the first standalone run of exactly eight digits."""

    if not text:
        return None
    match = _PHONE_PATTERN.search(text)
    return match.group(0) if match else None


def is_valid_amount(amount: Any) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    return math.isfinite(amount) and amount > 0


def is_valid_phone(phone: Any) -> bool:
    return isinstance(phone, str) and _PHONE_EXACT.fullmatch(phone) is not None
