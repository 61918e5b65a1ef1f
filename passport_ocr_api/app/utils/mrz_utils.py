import re
from typing import Pattern, Tuple

MRZ_FILLER = '<'

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
          "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

# Birth years up to this two-digit value are read as 20YY, later ones as 19YY.
BIRTH_CENTURY_CUTOFF = 30

PASSPORT_NUMBER_MAX_LENGTH = 9

# Known mis-readings of the leading document prefix on line 2 (a CJK-looking
# glyph or a comma where the OCR engine should have seen 'E').
# Checked in order; more specific keys first.
LINE2_PREFIX_CORRECTIONS: Tuple[Tuple[str, str], ...] = (
    ('巳,F', 'EF'),
    ('巳F', 'EF'),
    ('巳G', 'EG'),
    ('已F', 'EF'),
    ('已G', 'EG'),
    ('己F', 'EF'),
    ('己G', 'EG'),
    ('日F', 'EF'),
    ('日G', 'EG'),
    ('目F', 'EF'),
    ('目G', 'EG'),
    ('，F', 'EF'),
    (',F', 'EF'),
)

# '<' read as 'K' inside the name field: any run of two or more K, and a K run
# sitting right before a filler or at the end of the line.
NAME_FILLER_CORRECTIONS: Tuple[Tuple[Pattern, str], ...] = (
    (re.compile(r'K{2,}'), MRZ_FILLER),
    (re.compile(r'K+(?=<|$)'), MRZ_FILLER),
)

_PASSPORT_DUPLICATED_CHECK_DIGIT = re.compile(r'^[A-Z]{1,2}\d{7}(\d)\1$')
_FILLER_RUN = re.compile(r'<{2,}')


def line1_marker_corrections(nationality_code: str) -> Tuple[Tuple[str, str], ...]:
    """'<' after the document code read as zero or the letter O."""
    marker = f"P<{nationality_code}"
    return (
        (f"P0{nationality_code}", marker),
        (f"PO{nationality_code}", marker),
    )


def clean_mrz_line(line: str) -> str:
    """Remove all whitespace and uppercase."""
    if not line:
        return ""
    return re.sub(r'\s+', '', line).upper()


def apply_substring_corrections(text: str, table: Tuple[Tuple[str, str], ...]) -> str:
    for wrong, right in table:
        if wrong in text:
            text = text.replace(wrong, right)
    return text


def apply_prefix_correction(text: str, table: Tuple[Tuple[str, str], ...]) -> str:
    """Rewrite the first matching wrong prefix only."""
    for wrong, right in table:
        if text.startswith(wrong):
            return right + text[len(wrong):]
    return text


def strip_leading_punctuation(text: str) -> str:
    return re.sub(r'^[^\w]+', '', text)


def normalize_name_filler(segment: str) -> str:
    """
    Fix likely OCR mistakes in the MRZ name field where '<' was read as 'K'.
    Input is the part of line 1 after the nationality code.
    """
    for pattern, replacement in NAME_FILLER_CORRECTIONS:
        segment = pattern.sub(lambda m: replacement * len(m.group()), segment)
    return segment


def split_mrz_name(segment: str) -> Tuple[str, str]:
    """
    Split a corrected name field into (surname, given_names).

    Digits are always OCR noise in this field and are dropped.
    Returns empty strings when no double filler separates the two parts.
    """
    parts = _FILLER_RUN.split(segment)
    if len(parts) < 2:
        return "", ""

    surname = re.sub(r'[<\d]', '', parts[0])
    given = re.sub(r'\d', '', parts[1]).replace(MRZ_FILLER, ' ')
    given = re.sub(r'\s+', ' ', given).strip()
    return surname.strip(), given


def repair_passport_number(raw: str) -> str:
    """
    Heuristic clean-up of the text in front of the nationality code on line 2.
    Not a check-digit validator: garbled numbers are returned as-is.
    """
    number = re.sub(r'[^A-Z0-9]', '', raw.upper())
    if _PASSPORT_DUPLICATED_CHECK_DIGIT.match(number):
        return number[:-1]
    if len(number) > PASSPORT_NUMBER_MAX_LENGTH:
        return number[:PASSPORT_NUMBER_MAX_LENGTH]
    return number


def format_display_date(day: int, month: int, year: int) -> str:
    return f"{day:02d} {MONTHS[month - 1]} {year}"


def resolve_mrz_year(two_digit_year: int, is_expiry: bool) -> int:
    """
    Expiry dates always fall in the 21st century; birth dates split at the
    cutoff (00-30 => 2000s, 31-99 => 1900s).
    """
    if is_expiry or two_digit_year <= BIRTH_CENTURY_CUTOFF:
        return 2000 + two_digit_year
    return 1900 + two_digit_year


def decode_mrz_date(raw: str, is_expiry: bool = False) -> str:
    """
    Decode a YYMMDD string into 'DD MON YYYY'.
    Returns an empty string when the input is not a plausible date.
    """
    if not raw or not re.fullmatch(r'[0-9]{6}', raw):
        return ""

    yy = int(raw[0:2])
    mm = int(raw[2:4])
    dd = int(raw[4:6])
    if mm < 1 or mm > 12 or dd < 1 or dd > 31:
        return ""

    return format_display_date(dd, mm, resolve_mrz_year(yy, is_expiry))
