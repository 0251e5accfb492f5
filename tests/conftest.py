import io

import numpy as np
import pytest
from PIL import Image

from charmatte.pipeline import PipelineConfig, PipelineLogger, RGBAImage


def solid(width, height, rgb, alpha=255):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = rgb
    pixels[:, :, 3] = alpha
    return RGBAImage(pixels)


def png_bytes(image):
    buffer = io.BytesIO()
    image.to_pil().save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def config():
    return PipelineConfig()


@pytest.fixture
def logger():
    logger = PipelineLogger()
    logger.start_image("fixture", 0, 0)
    return logger


@pytest.fixture
def framed_red():
    """10x10: 2px white frame around a solid red 6x6 center"""
    image = solid(10, 10, (255, 255, 255))
    image.pixels[2:8, 2:8, :3] = (255, 0, 0)
    return image


@pytest.fixture
def green_screen_subject():
    """20x20 chroma green with an 8x8 brick-red subject in the middle"""
    image = solid(20, 20, (20, 220, 30))
    image.pixels[6:14, 6:14, :3] = (200, 60, 60)
    return image


@pytest.fixture
def random_image():
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(16, 12, 4), dtype=np.uint8)
    pixels[:, :, 3] = np.where(rng.random((16, 12)) < 0.2, 0, 255)
    return RGBAImage(pixels)


def jpeg_bytes(image):
    buffer = io.BytesIO()
    Image.fromarray(image.pixels[:, :, :3]).save(buffer, "JPEG")
    return buffer.getvalue()
