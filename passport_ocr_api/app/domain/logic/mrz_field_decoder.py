import logging
from typing import Dict

from app.domain.models.passport_fields import ExtractedFields
from app.utils.mrz_utils import (
    decode_mrz_date,
    normalize_name_filler,
    repair_passport_number,
    split_mrz_name,
)

logger = logging.getLogger(__name__)

GENDER_LABELS = {'M': 'Male', 'F': 'Female'}


class MRZFieldDecoder:
    """
    Decodes a located MRZ line pair by fixed offsets from the nationality code.

    Line 1: P<CHNSURNAME<<GIVEN<NAMES<<<<<<<<<<<<<<<<<<<<
    Line 2: <number><check>CHN<birth YYMMDD><check><sex><expiry YYMMDD>...

    Offsets are counted from the code rather than the line start, because OCR
    often drops or adds characters in front of it.
    """

    BIRTH_SLICE = slice(0, 6)
    GENDER_INDEX = 7
    EXPIRY_SLICE = slice(8, 14)

    def __init__(self, nationality_code: str = 'CHN'):
        self.nationality_code = nationality_code

    def decode(self, line1: str, line2: str) -> ExtractedFields:
        fields: Dict[str, str] = {}
        fields.update(self._decode_line1(line1 or ""))

        line2 = line2 or ""
        code_pos = line2.find(self.nationality_code)
        if code_pos < 0:
            logger.debug("MRZ line 2 has no nationality code anchor, keeping line 1 fields only")
            return ExtractedFields(**fields)

        fields['passport_number'] = repair_passport_number(line2[:code_pos])

        after_code = line2[code_pos + len(self.nationality_code):]
        fields.update(self._decode_dates_and_gender(after_code))

        logger.debug(f"MRZ decoded fields: {fields}")
        return ExtractedFields(**fields)

    def _decode_line1(self, line1: str) -> Dict[str, str]:
        code_pos = line1.find(self.nationality_code)
        if code_pos < 0:
            return {}

        fields = {'nationality': self.nationality_code}
        name_field = normalize_name_filler(line1[code_pos + len(self.nationality_code):])
        surname, given = split_mrz_name(name_field)
        if surname and given:
            fields['full_name'] = f"{surname}, {given}"
        else:
            logger.debug(f"Could not split MRZ name field: {name_field}")
        return fields

    def _decode_dates_and_gender(self, after_code: str) -> Dict[str, str]:
        fields: Dict[str, str] = {}

        birth = after_code[self.BIRTH_SLICE]
        if len(birth) == 6 and birth.isdigit():
            fields['date_of_birth'] = decode_mrz_date(birth, is_expiry=False)

        # expiry is only trusted when the sex anchor sits where it should
        if len(after_code) <= self.GENDER_INDEX:
            return fields
        gender = GENDER_LABELS.get(after_code[self.GENDER_INDEX])
        if gender is None:
            logger.debug(f"Unexpected sex character {after_code[self.GENDER_INDEX]!r} in MRZ line 2")
            return fields
        fields['gender'] = gender
        fields['date_of_expiry'] = decode_mrz_date(after_code[self.EXPIRY_SLICE], is_expiry=True)
        return fields
