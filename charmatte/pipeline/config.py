"""
PipelineConfig: Configuration for the matting pipeline
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class PipelineConfig:
    """Configuration for the matting pipeline"""

    # Stage 1: Backdrop Classification
    chroma_dominance: float = 1.2  # Channel must beat the others by 20%
    chroma_intensity_threshold: int = 60
    chroma_perimeter_ratio: float = 0.10  # >10% of the border must be chroma

    # Stage 2: Alpha Mask
    edge_tolerance: float = 85.0
    center_tolerance: float = 15.0
    feather_start: float = 0.05
    feather_end: float = 0.30
    key_dominance: float = 1.3

    # Stage 3: Spill Suppression
    despill_enabled: bool = True
    despill_radius: int = 3  # 7x7 window
    non_spill_margin: float = 1.05
    spill_full_correction: float = 80.0

    # Limits
    max_image_size: tuple[int, int] = (16384, 16384)

    # Output
    output_path: Optional[Path] = None
    png_optimize: bool = False

    @property
    def tolerance_span(self) -> tuple[float, float]:
        """Get (edge, center) match tolerances"""
        return (self.edge_tolerance, self.center_tolerance)
