import numpy as np
import pytest

from app.core.errors import UnsupportedImageError
from app.domain.logic.raster_preprocessor import RasterPreprocessor
from app.domain.models.raster_image import RasterImage


@pytest.fixture
def preprocessor():
    return RasterPreprocessor()


def _uniform(width, height, value, alpha=255):
    return RasterImage.blank(width, height, color=(value, value, value, alpha))


@pytest.mark.parametrize("size,expected", [
    ((640, 480), (1707, 1280)),
    ((4000, 3000), (2560, 1920)),
    ((3000, 1000), (2560, 853)),
    ((1000, 2000), (1000, 2000)),
    ((1300, 1400), (1300, 1400)),
])
def test_target_size(preprocessor, size, expected):
    assert preprocessor.target_size(*size) == expected


def test_resize_upscales_small_images(preprocessor):
    resized = preprocessor.resize(RasterImage.blank(640, 480))
    assert resized.size == (1707, 1280)


def test_resize_in_range_returns_equal_copy(preprocessor):
    image = RasterImage.blank(1300, 1400, color=(10, 20, 30, 40))
    resized = preprocessor.resize(image)
    assert resized.size == image.size
    assert np.array_equal(resized.pixels, image.pixels)
    assert resized.pixels is not image.pixels


def test_grayscale_uses_luma_and_keeps_alpha():
    image = RasterImage.blank(2, 2, color=(255, 0, 0, 7))
    gray = RasterPreprocessor.grayscale(image)
    assert gray.pixels[0, 0].tolist() == [76, 76, 76, 7]


def test_grayscale_is_idempotent():
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)
    once = RasterPreprocessor.grayscale(RasterImage(pixels))
    twice = RasterPreprocessor.grayscale(once)
    assert np.array_equal(once.pixels, twice.pixels)


def test_grayscale_leaves_input_untouched():
    image = RasterImage.blank(2, 2, color=(255, 0, 0, 255))
    RasterPreprocessor.grayscale(image)
    assert image.pixels[0, 0].tolist() == [255, 0, 0, 255]


@pytest.mark.parametrize("value,expected", [
    (128, 128),
    (200, 236),
    (100, 86),
    (20, 0),
    (250, 255),
])
def test_adjust_contrast(preprocessor, value, expected):
    result = preprocessor.adjust_contrast(_uniform(1, 1, value, alpha=99))
    assert result.pixels[0, 0].tolist() == [expected, expected, expected, 99]


def test_denoise_averages_interior_only():
    image = _uniform(5, 5, 0)
    image.pixels[2, 2, :3] = 90

    result = RasterPreprocessor.denoise(image)

    assert np.all(result.pixels[1:4, 1:4, :3] == 10)
    assert np.all(result.pixels[0, :, :3] == 0)
    assert np.all(result.pixels[:, 0, :3] == 0)
    assert np.all(result.pixels[..., 3] == 255)


def test_sharpen_leaves_uniform_image_alone():
    image = _uniform(6, 4, 77)
    assert np.array_equal(RasterPreprocessor.sharpen(image).pixels, image.pixels)


def test_sharpen_reads_from_unfiltered_snapshot():
    image = _uniform(5, 5, 50)
    image.pixels[2, 2, :3] = 100

    result = RasterPreprocessor.sharpen(image).pixels[..., 0]

    assert result[2, 2] == 255
    assert result[1, 2] == 0
    assert result[2, 1] == 0
    assert result[1, 1] == 50
    # border ring untouched
    assert result[0, 2] == 50
    assert result[2, 0] == 50


def test_filters_skip_tiny_images():
    image = _uniform(2, 7, 40)
    image.pixels[1, 1, :3] = 200
    assert np.array_equal(RasterPreprocessor.sharpen(image).pixels, image.pixels)
    assert np.array_equal(RasterPreprocessor.denoise(image).pixels, image.pixels)


def test_process_produces_gray_image_of_target_size():
    preprocessor = RasterPreprocessor(config={'min_size': 8, 'max_size': 64})
    rng = np.random.default_rng(1)
    pixels = rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8)
    pixels[..., 3] = 255

    result = preprocessor.process(RasterImage(pixels))

    assert result.size == (16, 12)
    assert np.array_equal(result.pixels[..., 0], result.pixels[..., 1])
    assert np.array_equal(result.pixels[..., 1], result.pixels[..., 2])
    assert np.all(result.pixels[..., 3] == 255)


def test_process_without_filters_is_resize_gray_contrast():
    preprocessor = RasterPreprocessor(config={'min_size': 8, 'max_size': 64, 'denoise': False, 'sharpen': False})
    image = RasterImage.blank(10, 10, color=(200, 200, 200, 255))
    result = preprocessor.process(image)
    assert np.all(result.pixels[..., :3] == 236)


def test_resize_is_idempotent(preprocessor):
    once = preprocessor.resize(RasterImage.blank(640, 480))
    twice = preprocessor.resize(once)
    assert twice.size == once.size


def test_process_rejects_slivers_before_resizing(preprocessor):
    with pytest.raises(UnsupportedImageError) as exc:
        preprocessor.process(RasterImage.blank(1279, 1))
    assert exc.value.error_code == "IMAGE_UNSUPPORTED"
    assert "1279x1" in exc.value.details["reason"]

    with pytest.raises(UnsupportedImageError):
        preprocessor.process(RasterImage.blank(3, 40))


def test_aspect_ratio_limit_is_inclusive():
    preprocessor = RasterPreprocessor(config={'min_size': 8, 'max_size': 64, 'max_aspect_ratio': 8})
    assert preprocessor.process(RasterImage.blank(16, 2)).size == (16, 2)
    with pytest.raises(UnsupportedImageError):
        preprocessor.process(RasterImage.blank(17, 2))
