import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = None) -> logging.Logger:
    """Configure the root handler once and return the service logger."""
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # multipart parser is chatty at DEBUG
    logging.getLogger("multipart").setLevel(logging.WARNING)
    return logging.getLogger("passport_ocr_api")


logger = setup_logging()
