import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.config import Settings
from app.domain.logic.field_merger import FieldMerger
from app.domain.logic.mrz_field_decoder import MRZFieldDecoder
from app.domain.logic.mrz_line_locator import MRZLineLocator
from app.domain.logic.raster_preprocessor import RasterPreprocessor
from app.domain.logic.visual_field_scanner import VisualFieldScanner
from app.domain.models.passport_fields import ExtractedFields, FieldOrigin
from app.services.recognition import RecognitionClient
from app.utils.image_io import bytes_to_raster, raster_to_png_bytes

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Outcome of one document: a record (with its recognized text) or an error, never both."""

    index: int
    name: str = ""
    fields: Optional[ExtractedFields] = None
    sources: Dict[str, FieldOrigin] = field(default_factory=dict)
    error: Optional[str] = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class DocumentPipeline:
    """Orchestrates image conditioning, recognition and field decoding."""

    def __init__(
        self,
        recognition_client: RecognitionClient,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        parser_config = self.settings.parser_config
        nationality_code = parser_config.get('nationality_code', 'CHN')

        self.recognition_client = recognition_client
        self.preprocessor = RasterPreprocessor(config=self.settings.preprocess_config)
        self.locator = MRZLineLocator(nationality_code=nationality_code)
        self.decoder = MRZFieldDecoder(nationality_code=nationality_code)
        self.scanner = VisualFieldScanner(config=parser_config)
        self.merger = FieldMerger()

    def parse_text(self, text: str) -> ExtractedFields:
        fields, _ = self.parse_text_with_origin(text)
        return fields

    def parse_text_with_origin(self, text: str) -> Tuple[ExtractedFields, Dict[str, FieldOrigin]]:
        """Decode recognized text: MRZ when both lines are found, visual zone always."""
        mrz_lines = self.locator.locate(text)
        if mrz_lines.is_complete:
            logger.info("MRZ lines found, decoding by position")
            mrz_fields = self.decoder.decode(mrz_lines.line1, mrz_lines.line2)
        else:
            logger.warning("MRZ not found, using visual parsing only")
            mrz_fields = ExtractedFields()

        visual_fields = self.scanner.scan(text)
        return self.merger.merge_with_origin(mrz_fields, visual_fields)

    def run_document(self, raw_image_bytes: bytes) -> ExtractedFields:
        fields, _ = self.run_document_with_origin(raw_image_bytes)
        return fields

    def run_document_with_origin(self, raw_image_bytes: bytes) -> Tuple[ExtractedFields, Dict[str, FieldOrigin]]:
        result = self.process_document(raw_image_bytes)
        return result.fields, result.sources

    def process_document(self, raw_image_bytes: bytes, index: int = 0, name: str = "") -> DocumentResult:
        """
        Full flow for one photographed page. The result keeps the raw
        recognized text next to the decoded fields.

        Raises:
            ImageDecodeError: the bytes are not a readable image
            UnsupportedImageError: the image shape would make preprocessing blow up
            Anything the recognition client raises, unchanged
        """
        raster = bytes_to_raster(raw_image_bytes)

        logger.info("Starting image preprocessing...")
        prepared = self.preprocessor.process(raster)
        encoded = raster_to_png_bytes(prepared)

        logger.info("Starting text recognition...")
        text = self.recognition_client.recognize(encoded) or ""
        if not text.strip():
            logger.warning("Recognition returned no text")

        logger.info("Parsing recognized text...")
        fields, origins = self.parse_text_with_origin(text)
        logger.info(f"Extracted {len(fields.filled_fields())} field(s) from {len(text)} characters")
        return DocumentResult(index=index, name=name, fields=fields, sources=origins, text=text)

    def run_batch(self, documents: Iterable[Tuple[str, bytes]]) -> List[DocumentResult]:
        """Process (name, bytes) pairs one at a time, in submission order."""
        results = []
        for index, (name, raw_image_bytes) in enumerate(documents):
            try:
                results.append(self.process_document(raw_image_bytes, index=index, name=name))
            except Exception as e:
                logger.error(f"Processing {name or index} failed: {e}")
                results.append(DocumentResult(index=index, name=name, error=str(e)))
        return results
