import cv2
import numpy as np
import logging
from typing import Any, Dict, Optional, Tuple

from app.core.errors import UnsupportedImageError
from app.domain.models.raster_image import RasterImage

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

MEAN_KERNEL = np.full((3, 3), 1.0 / 9.0, dtype=np.float32)

SHARPEN_KERNEL = np.array([[0, -1, 0],
                           [-1, 5, -1],
                           [0, -1, 0]], dtype=np.float32)


class RasterPreprocessor:
    """Conditions a photographed document for text recognition.

    Stages run in a fixed order: resize, grayscale, contrast, denoise,
    sharpen. Every stage returns a new RasterImage and leaves its input alone.
    Only the colour channels are touched; alpha passes through.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.min_size = self.config.get('min_size', 1280)
        self.max_size = self.config.get('max_size', 2560)
        self.contrast_factor = self.config.get('contrast_factor', 1.5)
        self.apply_denoise = self.config.get('denoise', True)
        self.apply_sharpen = self.config.get('sharpen', True)
        self.max_aspect_ratio = self.config.get('max_aspect_ratio', 8.0)

    def process(self, image: RasterImage) -> RasterImage:
        logger.debug(f"Preprocessing {image.width}x{image.height} image")
        self.check_dimensions(image)
        result = self.resize(image)
        result = self.grayscale(result)
        result = self.adjust_contrast(result)
        if self.apply_denoise:
            result = self.denoise(result)
        if self.apply_sharpen:
            result = self.sharpen(result)
        logger.debug(f"Preprocessed image is {result.width}x{result.height}")
        return result

    def check_dimensions(self, image: RasterImage) -> None:
        """
        Reject slivers before resizing; a 1279x1 image would otherwise be
        upscaled to roughly 1.6M x 1280.

        Raises:
            UnsupportedImageError: aspect ratio above max_aspect_ratio
        """
        ratio = max(image.width, image.height) / min(image.width, image.height)
        if ratio > self.max_aspect_ratio:
            logger.warning(f"Rejecting {image.width}x{image.height} image, aspect ratio {ratio:.1f}")
            raise UnsupportedImageError(
                f"aspect ratio {ratio:.1f} exceeds {self.max_aspect_ratio:g} ({image.width}x{image.height})"
            )

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        """
        Upscale small photos so the short edge reaches min_size, downscale
        large ones so the long edge fits max_size, leave the rest alone.
        """
        if width < self.min_size and height < self.min_size:
            scale = self.min_size / min(width, height)
        elif width > self.max_size or height > self.max_size:
            scale = self.max_size / max(width, height)
        else:
            return width, height

        # round half up on each edge independently
        return int(width * scale + 0.5), int(height * scale + 0.5)

    def resize(self, image: RasterImage) -> RasterImage:
        new_width, new_height = self.target_size(image.width, image.height)
        if (new_width, new_height) == image.size:
            return image.copy()

        interpolation = cv2.INTER_CUBIC if new_width > image.width else cv2.INTER_AREA
        resized = cv2.resize(image.pixels, (new_width, new_height), interpolation=interpolation)
        logger.info(f"Resized image from {image.width}x{image.height} to {new_width}x{new_height}")
        return RasterImage(resized)

    @staticmethod
    def grayscale(image: RasterImage) -> RasterImage:
        """BT.601 luma written back to all three colour channels."""
        luma = image.pixels[..., :3].astype(np.float64) @ LUMA_WEIGHTS
        gray = np.clip(np.rint(luma), 0, 255).astype(np.uint8)

        out = image.pixels.copy()
        out[..., :3] = gray[..., np.newaxis]
        return RasterImage(out)

    def adjust_contrast(self, image: RasterImage, factor: Optional[float] = None) -> RasterImage:
        factor = self.contrast_factor if factor is None else factor
        levels = np.arange(256, dtype=np.float64)
        lut = np.clip(np.rint((levels - 128) * factor + 128), 0, 255).astype(np.uint8)

        out = image.pixels.copy()
        out[..., :3] = lut[image.pixels[..., :3]]
        return RasterImage(out)

    @staticmethod
    def denoise(image: RasterImage) -> RasterImage:
        """3x3 mean filter over interior pixels; the border ring is kept."""
        return RasterImage(_filter_interior(image.pixels, MEAN_KERNEL))

    @staticmethod
    def sharpen(image: RasterImage) -> RasterImage:
        """3x3 sharpening convolution over interior pixels; the border ring is kept."""
        return RasterImage(_filter_interior(image.pixels, SHARPEN_KERNEL))


def _filter_interior(pixels: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Convolve the colour channels of a snapshot and commit only interior
    results to a separate output buffer. filter2D saturates uint8 output to
    [0, 255], and border extrapolation never reaches interior pixels.
    """
    out = pixels.copy()
    height, width = pixels.shape[:2]
    if height < 3 or width < 3:
        return out

    colour = np.ascontiguousarray(pixels[..., :3])
    filtered = cv2.filter2D(colour, -1, kernel)
    out[1:-1, 1:-1, :3] = filtered[1:-1, 1:-1]
    return out
