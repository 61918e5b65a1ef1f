import logging
import re
from typing import List, Optional

from app.domain.models.passport_fields import MRZLinePair
from app.utils.mrz_utils import (
    LINE2_PREFIX_CORRECTIONS,
    apply_prefix_correction,
    apply_substring_corrections,
    clean_mrz_line,
    line1_marker_corrections,
    strip_leading_punctuation,
)

logger = logging.getLogger(__name__)


class MRZLineLocator:
    """Finds the two MRZ lines inside a block of recognized text."""

    LINE2_MIN_LENGTH = 30
    DIGIT_RUN = re.compile(r'\d{6,}')

    def __init__(self, nationality_code: str = 'CHN'):
        self.nationality_code = nationality_code
        self.line1_corrections = line1_marker_corrections(nationality_code)
        self.line1_markers = (f"P<{nationality_code}",) + tuple(
            wrong for wrong, _ in self.line1_corrections
        )
        # code, birth date (+ optional check digit), sex, expiry date
        self.line2_structure = re.compile(
            re.escape(nationality_code) + r'\d{6,7}[MF]\d{6}'
        )

    def locate(self, text: str) -> MRZLinePair:
        """
        Scan recognized text for MRZ line candidates.

        Either line may come back empty; that only means the caller has to
        rely on the visual zone.
        """
        lines = [clean_mrz_line(line) for line in (text or "").splitlines()]
        lines = [line for line in lines if line]

        line1: Optional[str] = None
        line2: Optional[str] = None

        for cleaned in lines:
            if line1 is None:
                if self._is_line1(cleaned):
                    line1 = apply_substring_corrections(cleaned, self.line1_corrections)
                    logger.debug(f"Found MRZ line 1: {line1}")
            elif line2 is None and self._is_line2(cleaned):
                line2 = self.clean_line2(cleaned)
                logger.debug(f"Found MRZ line 2: {line2}")
                break

        if line1 is not None and line2 is None:
            line2 = self._structural_fallback(lines)

        if line1 is None:
            logger.debug("No MRZ line 1 candidate in recognized text")

        return MRZLinePair(line1=line1, line2=line2)

    def _is_line1(self, cleaned: str) -> bool:
        return any(marker in cleaned for marker in self.line1_markers)

    def _is_line2(self, cleaned: str) -> bool:
        return (
            self.nationality_code in cleaned
            and self.DIGIT_RUN.search(cleaned) is not None
            and len(cleaned) >= self.LINE2_MIN_LENGTH
        )

    def _structural_fallback(self, lines: List[str]) -> Optional[str]:
        for cleaned in lines:
            if self.line2_structure.search(cleaned):
                line2 = self.clean_line2(cleaned)
                logger.debug(f"Found MRZ line 2 by structure: {line2}")
                return line2
        logger.debug("MRZ line 1 found without a matching line 2")
        return None

    @staticmethod
    def clean_line2(cleaned: str) -> str:
        """Undo known prefix mis-readings, then drop leading punctuation."""
        corrected = apply_prefix_correction(cleaned, LINE2_PREFIX_CORRECTIONS)
        return strip_leading_punctuation(corrected)
