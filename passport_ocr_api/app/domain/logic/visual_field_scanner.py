import logging
import re
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from app.domain.models.passport_fields import ExtractedFields
from app.domain.models.reference_data import (
    FEMALE_MARKERS,
    MALE_MARKERS,
    NATIONALITY_ALIASES,
    NON_NAME_LABELS,
    PLACE_GAZETTEER,
)
from app.utils.mrz_utils import MONTHS, format_display_date

logger = logging.getLogger(__name__)


def _native_pattern(word: str) -> str:
    # OCR likes to put spaces between CJK glyphs
    return r'\s*'.join(re.escape(ch) for ch in word)


def _latin_pattern(word: str) -> str:
    body = r'\s*'.join(re.escape(part) for part in word.split())
    return rf'(?<![A-Z]){body}(?![A-Z])'


class VisualFieldScanner:
    """
    Pattern-based extraction from the human-readable part of the data page.

    Lines are folded into a partial record; the first line that yields a value
    for a field wins and later lines never overwrite it.
    """

    PASSPORT_NUMBER = re.compile(r'(?<![A-Z])([A-Z]{1,2})[ \-]?(\d{7}\d?)(?!\d)')
    FULL_NAME = re.compile(r'(?<![A-Z])([A-Z]{2,}),\s*([A-Z]{2,})')
    DATE = re.compile(
        r'(?<!\d)(\d{1,2})\s*(?:\d{1,2}\s*月\s*/?\s*)?([A-Z]{3})(?![A-Z])\s*(\d{4})(?!\d)',
        re.IGNORECASE,
    )
    FEMALE = re.compile(
        '|'.join([re.escape(m) for m in FEMALE_MARKERS] + [r'/\s*F\b', r'\bFEMALE\b']),
        re.IGNORECASE,
    )
    MALE = re.compile(
        '|'.join([re.escape(m) for m in MALE_MARKERS] + [r'/\s*M\b', r'\bMALE\b']),
        re.IGNORECASE,
    )

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.nationality_code = self.config.get('nationality_code', 'CHN')
        self.include_date_of_issue = self.config.get('include_date_of_issue', False)
        self.birth_year_range = tuple(self.config.get('birth_year_range', (1950, 2010)))
        self.issue_year_range = tuple(self.config.get('issue_year_range', (2015, 2025)))
        self.expiry_min_year = self.config.get('expiry_min_year', 2026)

        self.nationality_pattern = self._build_nationality_pattern()
        self.places: List[Tuple[str, Pattern]] = [
            (latin, re.compile(f"{_latin_pattern(latin)}|{_native_pattern(native)}", re.IGNORECASE))
            for latin, native in PLACE_GAZETTEER.get(self.nationality_code, ())
        ]
        self.rules: Tuple[Tuple[str, Callable[[str], str]], ...] = (
            ('passport_number', self.find_passport_number),
            ('full_name', self.find_full_name),
            ('place_of_birth', self.find_place_of_birth),
            ('nationality', self.find_nationality),
            ('gender', self.find_gender),
        )

    def scan(self, text: str) -> ExtractedFields:
        lines = [line.strip() for line in (text or "").splitlines()]
        found = reduce(self._scan_line, lines, {})
        logger.debug(f"Visual scan found: {found}")
        return ExtractedFields(**found)

    def _scan_line(self, found: Dict[str, str], line: str) -> Dict[str, str]:
        if not line:
            return found

        updates: Dict[str, str] = {}
        for field, extract in self.rules:
            if field in found:
                continue
            value = extract(line)
            if value:
                updates[field] = value

        for field, value in self.find_dates(line):
            if field not in found and field not in updates:
                updates[field] = value

        if not updates:
            return found
        return {**found, **updates}

    def _build_nationality_pattern(self) -> Pattern:
        options = [rf'(?<![A-Z]){re.escape(self.nationality_code)}']
        for alias in NATIONALITY_ALIASES.get(self.nationality_code, ()):
            options.append(_latin_pattern(alias) if alias.isascii() else _native_pattern(alias))
        return re.compile('|'.join(options), re.IGNORECASE)

    # -- single-field extractors ------------------------------------------

    def find_passport_number(self, line: str) -> str:
        match = self.PASSPORT_NUMBER.search(line)
        if not match:
            return ""
        return (match.group(1) + match.group(2)).replace(' ', '').upper()

    def find_full_name(self, line: str) -> str:
        match = self.FULL_NAME.search(line)
        if not match or match.group(1) in NON_NAME_LABELS:
            return ""
        return f"{match.group(1)}, {match.group(2)}"

    def find_place_of_birth(self, line: str) -> str:
        for latin, pattern in self.places:
            if pattern.search(line):
                return latin
        return ""

    def find_nationality(self, line: str) -> str:
        return self.nationality_code if self.nationality_pattern.search(line) else ""

    def find_gender(self, line: str) -> str:
        if self.FEMALE.search(line):
            return "Female"
        if self.MALE.search(line):
            return "Male"
        return ""

    def find_dates(self, line: str) -> List[Tuple[str, str]]:
        """Every 'D MON YYYY' on the line, paired with the field its year suggests."""
        results = []
        for match in self.DATE.finditer(line):
            month_token = match.group(2).upper()
            if month_token not in MONTHS:
                continue
            year = int(match.group(3))
            field = self.classify_year(year)
            if field is None:
                continue
            day = int(match.group(1))
            if not 1 <= day <= 31:
                continue
            results.append((field, format_display_date(day, MONTHS.index(month_token) + 1, year)))
        return results

    def classify_year(self, year: int) -> Optional[str]:
        """Fixed plausibility windows, not relative to today."""
        birth_lo, birth_hi = self.birth_year_range
        if birth_lo <= year <= birth_hi:
            return 'date_of_birth'
        if year >= self.expiry_min_year:
            return 'date_of_expiry'
        issue_lo, issue_hi = self.issue_year_range
        if self.include_date_of_issue and issue_lo <= year <= issue_hi:
            return 'date_of_issue'
        return None
