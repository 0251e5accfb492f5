"""
Stage 4: PNG Encoding of the matted buffer
"""

import base64
import io

from ..config import PipelineConfig
from ..errors import CodecError
from ..image import RGBAImage
from ..logger import PipelineLogger

PNG_MIME = "image/png"


def encode_png(
    image: RGBAImage, config: PipelineConfig, logger: PipelineLogger
) -> bytes:
    """
    Serialize the RGBA buffer as lossless PNG

    The whole file is built in memory, so callers never see partial output.

    Raises:
        CodecError: If Pillow cannot encode the buffer
    """
    logger.log_info("Stage 4: Encoding PNG...")

    buffer = io.BytesIO()
    try:
        image.to_pil().save(buffer, "PNG", optimize=config.png_optimize)
    except (OSError, ValueError) as e:
        raise CodecError(f"PNG encoding failed: {e}") from e

    data = buffer.getvalue()

    logger.log_s4(
        format="PNG",
        optimize=config.png_optimize,
        size=[image.width, image.height],
        bytes=len(data),
    )

    return data


def to_data_uri(png_bytes: bytes, mime: str = PNG_MIME) -> str:
    """Wrap encoded bytes as an embeddable base64 data URI"""
    payload = base64.b64encode(png_bytes).decode("ascii")
    return f"data:{mime};base64,{payload}"
