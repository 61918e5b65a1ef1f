from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional


FIELD_NAMES = (
    'passport_number',
    'full_name',
    'date_of_birth',
    'place_of_birth',
    'date_of_issue',
    'date_of_expiry',
    'nationality',
    'gender',
)

FIELD_LABELS = {
    'passport_number': 'Passport No',
    'full_name': 'Full Name',
    'date_of_birth': 'Date Of Birth',
    'place_of_birth': 'Place Of Birth',
    'date_of_issue': 'Date Of Issue',
    'date_of_expiry': 'Date Of Expiry',
    'nationality': 'Nationality',
    'gender': 'Gender',
}


class FieldOrigin(str, Enum):
    """Where a merged field value came from."""
    MRZ = "mrz"
    VISUAL = "visual"
    NONE = "none"


class MRZLinePair(BaseModel):
    """Two located MRZ lines, either of which may be missing."""

    line1: Optional[str] = Field(None, description="Normalized first MRZ line (P<CHN...)")
    line2: Optional[str] = Field(None, description="Normalized second MRZ line (number, dates, gender)")

    @property
    def is_complete(self) -> bool:
        return bool(self.line1) and bool(self.line2)


class ExtractedFields(BaseModel):

    """Display-formatted identity fields read from one passport page.

    Every field is always present; an empty string means "not detected".
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "passport_number": "E12345678",
                "full_name": "ZHANG, SAN",
                "date_of_birth": "15 MAY 1985",
                "place_of_birth": "GUANGDONG",
                "date_of_issue": "",
                "date_of_expiry": "14 MAY 2031",
                "nationality": "CHN",
                "gender": "Male",
            }
        }
    )

    passport_number: str = Field("", description="Passport number")
    full_name: str = Field("", description="Full name as 'SURNAME, GIVEN'")
    date_of_birth: str = Field("", description="Date of birth (DD MON YYYY)")
    place_of_birth: str = Field("", description="Province / region of birth")
    date_of_issue: str = Field("", description="Date of issue (DD MON YYYY), legacy field")
    date_of_expiry: str = Field("", description="Date of expiry (DD MON YYYY)")
    nationality: str = Field("", description="Nationality code (3 letters)")
    gender: str = Field("", description="Gender (Male/Female)")

    @field_validator(*FIELD_NAMES, mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    def is_empty(self) -> bool:
        return not self.filled_fields()

    def filled_fields(self) -> List[str]:
        return [name for name in FIELD_NAMES if getattr(self, name)]

    def to_readable_format(self) -> Dict[str, str]:
        """Convert fields to display labels, with 'Not detected' for blanks."""
        return {
            FIELD_LABELS[name]: getattr(self, name) or 'Not detected'
            for name in FIELD_NAMES
        }
