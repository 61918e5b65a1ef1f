"""
Error types raised by the extraction pipeline.

A document fails to produce a record only when its image cannot be decoded
or has an implausible shape, or when the recognition engine fails.
Everything else (missing MRZ, garbled dates) degrades to empty fields.
"""
from typing import Any, Dict, Optional


class DocumentProcessingError(Exception):
    """Base exception for pipeline errors"""

    def __init__(self, message: str, error_code: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to JSON-serializable dict"""
        return {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ImageDecodeError(DocumentProcessingError, ValueError):
    """Input bytes are not a readable raster image"""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            message="Could not decode image bytes",
            error_code="IMAGE_DECODE_FAILED",
            details={"reason": reason} if reason else {},
        )


class RecognitionError(DocumentProcessingError):
    """Text recognition engine failed or is not ready"""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="RECOGNITION_FAILED",
            details={"reason": reason} if reason else {},
        )


class UnsupportedImageError(DocumentProcessingError, ValueError):
    """Image decoded fine but its shape is not a plausible document photo"""

    def __init__(self, reason: str):
        super().__init__(
            message="Unsupported image dimensions",
            error_code="IMAGE_UNSUPPORTED",
            details={"reason": reason},
        )
