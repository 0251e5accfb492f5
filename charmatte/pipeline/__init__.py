"""
Multi-Stage Chroma Key and Plain Backdrop Matting Pipeline
"""

from .config import PipelineConfig
from .errors import CodecError, DecodeError, DimensionError, MattingError
from .image import BackdropKind, KeyColor, RGBAImage
from .logger import PipelineLogger
from .pipeline import (
    MattingPipeline,
    MattingResult,
    remove_background,
    remove_background_to_data_uri,
)

__all__ = [
    "MattingPipeline",
    "MattingResult",
    "PipelineLogger",
    "PipelineConfig",
    "RGBAImage",
    "BackdropKind",
    "KeyColor",
    "MattingError",
    "DecodeError",
    "DimensionError",
    "CodecError",
    "remove_background",
    "remove_background_to_data_uri",
]
