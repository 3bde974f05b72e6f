# contact_scout/extract/phones.py
"""Phone number extraction from visible page text."""
from __future__ import annotations

import re
from typing import Iterable, List

from contact_scout.extract.base import BaseExtractor
from contact_scout.parser.html_parser import ParsedPage

# optional country code, optional area code, then a split or compact subscriber number
PHONE_RE = re.compile(
    r"(\+?\d{1,4}[\s.-]?)?(\(?\d{2,5}\)?[\s.-]?)?(\d{3,5}[\s.-]?\d{3,5}|\d{7,12})"
)
MIN_DIGITS = 8

_NON_DIGIT_RE = re.compile(r"\D")


def digits_only(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value)


def find_phone_numbers(text: str, min_digits: int = MIN_DIGITS) -> List[str]:
    """Return trimmed candidates with at least *min_digits* digits, in order of appearance."""
    found: List[str] = []
    for match in PHONE_RE.finditer(text):
        candidate = match.group(0).strip()
        if len(digits_only(candidate)) >= min_digits and candidate not in found:
            found.append(candidate)
    return found


def dedupe_by_digits(phones: Iterable[str], known: Iterable[str] = ()) -> List[str]:
    """Keep the first rendering of every distinct digit sequence."""
    seen = {digits_only(p) for p in known}
    unique: List[str] = []
    for phone in phones:
        key = digits_only(phone)
        if key not in seen:
            seen.add(key)
            unique.append(phone)
    return unique


class PhoneExtractor(BaseExtractor):
    name = "phone"

    def __init__(self, min_digits: int = MIN_DIGITS) -> None:
        self.min_digits = min_digits

    async def extract(self, page: ParsedPage) -> List[str]:
        """Numbers in the order they appear on the page."""
        return find_phone_numbers(page.text, self.min_digits)


__all__ = ["MIN_DIGITS", "PHONE_RE", "PhoneExtractor", "dedupe_by_digits", "digits_only", "find_phone_numbers"]
