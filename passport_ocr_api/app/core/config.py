import os
from dotenv import load_dotenv
from typing import Dict, Any

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    TESSERACT_CMD: str = os.getenv("TESSERACT_CMD", "")
    OCR_LANGUAGES: str = os.getenv("OCR_LANGUAGES", "eng+chi_sim")
    # LSTM only, automatic page segmentation with orientation detection
    OCR_OEM: int = int(os.getenv("OCR_OEM", "1"))
    OCR_PSM: int = int(os.getenv("OCR_PSM", "1"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "10"))

    preprocess_config: Dict[str, Any] = {
        'min_size': 1280,
        'max_size': 2560,
        'contrast_factor': 1.5,
        'max_aspect_ratio': 8.0,
        'denoise': _env_flag("PREPROCESS_DENOISE", True),
        'sharpen': _env_flag("PREPROCESS_SHARPEN", True),
    }
    parser_config: Dict[str, Any] = {
        'nationality_code': 'CHN',
        'include_date_of_issue': _env_flag("INCLUDE_DATE_OF_ISSUE", False),
        'birth_year_range': (1950, 2010),
        'issue_year_range': (2015, 2025),
        'expiry_min_year': 2026,
    }


settings = Settings()
