from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from app.domain.models.passport_fields import ExtractedFields, FieldOrigin


class ExtractionResponse(BaseModel):
    success: bool
    message: str
    fields: ExtractedFields = Field(default_factory=ExtractedFields)
    sources: Dict[str, FieldOrigin] = Field(default_factory=dict)
    text: str = Field("", description="Raw text returned by the recognition engine")
    character_count: int = 0


class BatchItemResponse(BaseModel):
    index: int
    filename: str = ""
    success: bool
    fields: Optional[ExtractedFields] = None
    sources: Dict[str, FieldOrigin] = Field(default_factory=dict)
    text: str = Field("", description="Raw text returned by the recognition engine")
    error: Optional[str] = None


class BatchExtractionResponse(BaseModel):
    total: int
    succeeded: int
    results: List[BatchItemResponse]
