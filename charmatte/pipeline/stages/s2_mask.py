"""
Stage 2: Alpha Mask from feathered key-color distance
"""

from typing import Sequence, Union

import numpy as np

from ..config import PipelineConfig
from ..image import BackdropKind, KeyColor, RGBAImage
from ..logger import PipelineLogger
from .s1_backdrop import BackdropClassification

Distance = Union[float, np.ndarray]


def tolerance_for(normalized_dist: Distance, config: PipelineConfig) -> Distance:
    """
    Map distance-to-border onto a match tolerance

    Flat at `edge_tolerance` below `feather_start`, flat at `center_tolerance`
    above `feather_end`, linear in between. Works on scalars and arrays.
    """
    edge, center = config.tolerance_span
    progress = (np.asarray(normalized_dist, dtype=np.float64) - config.feather_start) / (
        config.feather_end - config.feather_start
    )
    tolerance = edge - (edge - center) * np.clip(progress, 0.0, 1.0)

    if np.ndim(tolerance) == 0:
        return float(tolerance)
    return tolerance


def normalized_border_distance(width: int, height: int) -> np.ndarray:
    """
    Distance of every pixel to the nearest border, in half-dimension units

    Returns:
        Array (H, W) with 0 on the left/top border and 1 at the center
    """
    half_w = width / 2.0
    half_h = height / 2.0

    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)

    dist_x = np.minimum(xs / half_w, (width - xs) / half_w)
    dist_y = np.minimum(ys / half_h, (height - ys) / half_h)

    return np.minimum(dist_y[:, None], dist_x[None, :])


def key_distance(rgb: np.ndarray, key_colors: Sequence[KeyColor]) -> np.ndarray:
    """L1 distance of every pixel to its closest key color"""
    min_diff = np.full(rgb.shape[:2], np.inf)
    for key in key_colors:
        diff = np.abs(rgb - np.asarray(key, dtype=np.float64)).sum(axis=2)
        np.minimum(min_diff, diff, out=min_diff)
    return min_diff


def chroma_dominance(
    rgb: np.ndarray, kind: BackdropKind, config: PipelineConfig
) -> np.ndarray:
    """
    Dominance gate for chroma backdrops

    Plain backdrops pass every pixel; chroma backdrops require the key
    channel to beat both others by `key_dominance`.
    """
    if not kind.is_chroma:
        return np.ones(rgb.shape[:2], dtype=bool)

    channel = kind.channel
    others = [c for c in range(3) if c != channel]
    key = rgb[:, :, channel]

    return (key > rgb[:, :, others[0]] * config.key_dominance) & (
        key > rgb[:, :, others[1]] * config.key_dominance
    )


def generate_alpha_mask(
    image: RGBAImage,
    classification: BackdropClassification,
    config: PipelineConfig,
    logger: PipelineLogger,
) -> int:
    """
    Zero the alpha of every background pixel in place

    A pixel is background when its L1 distance to the closest key color is
    below the tolerance at its position and, for chroma backdrops, the key
    channel dominates. Color channels and the alpha of subject pixels are
    never touched.

    Args:
        image: Working image (mutated)
        classification: Stage 1 result
        config: Pipeline configuration
        logger: Logger instance

    Returns:
        Number of pixels made transparent by this call
    """
    logger.log_info("Stage 2: Generating alpha mask...")

    kind, key_colors = classification.kind, classification.key_colors
    rgb = image.rgb.astype(np.float64)

    tolerance = tolerance_for(
        normalized_border_distance(image.width, image.height), config
    )
    min_diff = key_distance(rgb, key_colors)

    background = (min_diff < tolerance) & chroma_dominance(rgb, kind, config)

    alpha = image.alpha
    newly_cleared = int(np.count_nonzero(background & (alpha != 0)))
    alpha[background] = 0

    logger.log_s2(
        method="feathered_l1",
        kind=kind.value,
        key_colors=len(key_colors),
        tolerance=list(config.tolerance_span),
        feather=[config.feather_start, config.feather_end],
        background_pixels=int(np.count_nonzero(background)),
        newly_cleared=newly_cleared,
    )

    logger.log_info(
        f"  Cleared {newly_cleared:,} of {image.width * image.height:,} pixels"
    )

    return newly_cleared
