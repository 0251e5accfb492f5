"""
RGBAImage: In-memory pixel buffer shared by all pipeline stages
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import PipelineConfig
from .errors import DecodeError, DimensionError

KeyColor = Tuple[float, float, float]


class BackdropKind(Enum):
    """Backdrop category decided by Stage 1"""

    GREEN = "green"
    BLUE = "blue"
    PLAIN = "plain"

    @property
    def is_chroma(self) -> bool:
        return self is not BackdropKind.PLAIN

    @property
    def channel(self) -> int:
        """Index of the contaminated color channel (chroma kinds only)"""
        if self is BackdropKind.GREEN:
            return 1
        if self is BackdropKind.BLUE:
            return 2
        raise ValueError("Plain backdrops have no chroma channel")


@dataclass
class RGBAImage:
    """
    Row-major RGBA buffer with top-left origin

    `pixels` has shape (height, width, 4) and dtype uint8.
    """

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise DecodeError(
                f"Expected an (H, W, 4) buffer, got shape {self.pixels.shape}"
            )
        if self.pixels.dtype == np.uint8:
            return

        # Integer buffers are accepted only when every value fits a byte
        if not np.issubdtype(self.pixels.dtype, np.integer):
            raise DecodeError(f"Unsupported pixel dtype: {self.pixels.dtype}")
        if self.pixels.size and (self.pixels.min() < 0 or self.pixels.max() > 255):
            raise DecodeError("Pixel values outside 0..255")
        self.pixels = self.pixels.astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @classmethod
    def from_bytes(cls, data: bytes) -> "RGBAImage":
        """
        Decode raw image bytes in any format Pillow understands

        Raises:
            DecodeError: If the bytes are empty or not a readable image
        """
        if not data:
            raise DecodeError("Input is empty")

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return cls.from_pil(img)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise DecodeError(f"Cannot decode image: {e}") from e

    @classmethod
    def from_buffer(cls, buffer: bytes, width: int, height: int) -> "RGBAImage":
        """Wrap an already-decoded RGBA byte buffer"""
        if width < 0 or height < 0:
            raise DimensionError(f"Negative dimensions: {width}x{height}")

        expected = width * height * 4
        if len(buffer) != expected:
            raise DecodeError(
                f"Buffer holds {len(buffer)} bytes, expected {expected} "
                f"for {width}x{height} RGBA"
            )

        pixels = np.frombuffer(bytes(buffer), dtype=np.uint8).reshape(height, width, 4)
        return cls(pixels.copy())

    @classmethod
    def from_pil(cls, img: Image.Image) -> "RGBAImage":
        return cls(np.array(img.convert("RGBA"), dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def to_buffer(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> "RGBAImage":
        return RGBAImage(self.pixels.copy())

    def validate(self, config: PipelineConfig) -> None:
        """
        Reject buffers the stages cannot handle

        Raises:
            DimensionError: On zero width/height or above the configured maximum
        """
        if self.width == 0 or self.height == 0:
            raise DimensionError(f"Image has zero area: {self.width}x{self.height}")

        max_w, max_h = config.max_image_size
        if self.width > max_w or self.height > max_h:
            raise DimensionError(
                f"Image too large: {self.width}x{self.height} (max {max_w}x{max_h})"
            )
