"""
Character photo matting for scene compositing
"""

from .pipeline import (
    MattingPipeline,
    PipelineConfig,
    remove_background,
    remove_background_to_data_uri,
)

__all__ = [
    "MattingPipeline",
    "PipelineConfig",
    "remove_background",
    "remove_background_to_data_uri",
]
