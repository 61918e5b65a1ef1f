import io
import logging
from typing import Optional

import cv2
import numpy as np
from fastapi import UploadFile
from PIL import Image, ImageOps

from app.core.errors import ImageDecodeError
from app.domain.models.raster_image import RasterImage

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {
    'image/jpeg', 'image/jpg', 'image/png', 'image/bmp',
    'image/tiff', 'image/tif', 'image/webp'
}

EXIF_ORIENTATION_TAG = 0x0112

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


def bytes_to_raster(image_bytes: bytes) -> RasterImage:
    """
    Decode raw image bytes (any format OpenCV or PIL can read) into an RGBA raster.

    Raises:
        ImageDecodeError: if neither decoder understands the bytes
    """
    if not image_bytes:
        raise ImageDecodeError("empty input")

    orientation = read_exif_orientation(image_bytes)
    if orientation != 1:
        # OpenCV ignores the tag here, PIL can undo it
        logger.info(f"EXIF orientation {orientation}, decoding upright with PIL")
        pixels = load_image_with_pil_fallback(image_bytes)
        if pixels is None:
            raise ImageDecodeError("unsupported or corrupt image data")
        return RasterImage(pixels)

    arr = np.frombuffer(image_bytes, dtype=np.uint8)
    image = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)

    if image is None:
        logger.warning("Failed to decode image with OpenCV, trying PIL fallback")
        pixels = load_image_with_pil_fallback(image_bytes)
        if pixels is None:
            raise ImageDecodeError("unsupported or corrupt image data")
        return RasterImage(pixels)

    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF
        image = cv2.convertScaleAbs(image, alpha=255.0 / 65535.0)

    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels not in _TO_RGBA:
        raise ImageDecodeError(f"unsupported channel count: {channels}")

    rgba = cv2.cvtColor(image, _TO_RGBA[channels])
    logger.info(f"Decoded image: {rgba.shape[1]}x{rgba.shape[0]}")
    return RasterImage(rgba)


def read_exif_orientation(image_bytes: bytes) -> int:
    """EXIF Orientation tag (1-8), 1 when absent or unreadable."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as pil_image:
            orientation = pil_image.getexif().get(EXIF_ORIENTATION_TAG, 1)
    except OSError:
        return 1
    return orientation if orientation in range(1, 9) else 1


def load_image_with_pil_fallback(image_bytes: bytes) -> Optional[np.ndarray]:
    """
    Fallback method to load image using PIL, rotated upright per EXIF.

    Returns:
        numpy.ndarray: RGBA image array, or None if failed
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as pil_image:
            upright = ImageOps.exif_transpose(pil_image)
            return np.array(upright.convert('RGBA'))
    except Exception as e:
        logger.error(f"PIL fallback failed: {str(e)}")
        return None


def raster_to_png_bytes(raster: RasterImage) -> bytes:
    """Lossless encoding handed to the recognition engine."""
    bgra = cv2.cvtColor(raster.pixels, cv2.COLOR_RGBA2BGRA)
    success, enc = cv2.imencode('.png', bgra)
    if not success:
        raise ValueError('Failed to encode image')
    return enc.tobytes()


def validate_file_size(file_size: int, max_size_mb: int = 10) -> bool:
    """
    Validate if file size is within acceptable limits.

    Args:
        file_size: File size in bytes
        max_size_mb: Maximum allowed size in megabytes
    """
    max_size_bytes = max_size_mb * 1024 * 1024

    if file_size > max_size_bytes:
        logger.warning(f"File too large: {file_size / (1024*1024):.2f}MB, max: {max_size_mb}MB")
        return False

    return True


async def read_image_upload(file: UploadFile, max_size_mb: int = 10) -> bytes:
    """
    Read an uploaded image after checking its declared type and size.

    Raises:
        ValueError: unsupported content type, empty or oversized upload
    """
    if file.content_type not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported image format: {file.content_type}")

    contents = await file.read()
    if not contents:
        raise ValueError("Empty file received")
    if not validate_file_size(len(contents), max_size_mb):
        raise ValueError(f"File exceeds {max_size_mb}MB limit")

    return contents
