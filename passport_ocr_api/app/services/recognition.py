"""
Text recognition clients.

The pipeline only needs "encoded image in, one block of text out". Clients
are built explicitly, initialized once by their owner and shut down when the
owner is done with them.
"""
import io
import logging
from typing import Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from app.core.config import Settings
from app.core.errors import RecognitionError

logger = logging.getLogger(__name__)


class RecognitionClient:
    """Base class for text recognition engines."""

    def __init__(self):
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        self._initialized = True

    def recognize(self, image_bytes: bytes) -> str:
        raise NotImplementedError

    def shutdown(self) -> None:
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RecognitionError(f"{type(self).__name__} used before initialize()")

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False


class TesseractRecognitionClient(RecognitionClient):
    """Runs Tesseract through pytesseract on PNG/JPEG bytes."""

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self.settings = settings or Settings()
        self.tesseract_cmd = self.settings.TESSERACT_CMD
        self.languages = self.settings.OCR_LANGUAGES
        self.ocr_config = f"--oem {self.settings.OCR_OEM} --psm {self.settings.OCR_PSM}"

    def initialize(self) -> None:
        if self._initialized:
            return
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionError("Tesseract executable not found", reason=str(e)) from e
        logger.info(f"Tesseract {version} ready (languages={self.languages}, config='{self.ocr_config}')")
        super().initialize()

    def recognize(self, image_bytes: bytes) -> str:
        self._ensure_initialized()
        try:
            with Image.open(io.BytesIO(image_bytes)) as pil_image:
                pil_image.load()
                text = pytesseract.image_to_string(pil_image, lang=self.languages, config=self.ocr_config)
        except UnidentifiedImageError as e:
            raise RecognitionError("Recognition input is not an image", reason=str(e)) from e
        except (pytesseract.TesseractError, RuntimeError) as e:
            raise RecognitionError("Tesseract recognition failed", reason=str(e)) from e
        logger.debug(f"Recognized {len(text)} characters")
        return text

    def shutdown(self) -> None:
        if self._initialized:
            logger.info("Tesseract client shut down")
        super().shutdown()
