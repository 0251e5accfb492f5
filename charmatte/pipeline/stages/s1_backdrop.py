"""
Stage 1: Backdrop Classification from the image perimeter
"""

from typing import List, NamedTuple

import numpy as np

from ..config import PipelineConfig
from ..image import BackdropKind, KeyColor, RGBAImage
from ..logger import PipelineLogger


class BackdropClassification(NamedTuple):
    """Stage 1 result; the first two fields are the (kind, key colors) pair"""

    kind: BackdropKind
    key_colors: List[KeyColor]
    green_samples: int = 0
    blue_samples: int = 0
    perimeter_length: int = 0


def is_chroma_green(
    r: np.ndarray, g: np.ndarray, b: np.ndarray, config: PipelineConfig
) -> np.ndarray:
    """True where green clearly dominates and is bright enough"""
    return (
        (g > r * config.chroma_dominance)
        & (g > b * config.chroma_dominance)
        & (g > config.chroma_intensity_threshold)
    )


def is_chroma_blue(
    r: np.ndarray, g: np.ndarray, b: np.ndarray, config: PipelineConfig
) -> np.ndarray:
    """True where blue clearly dominates and is bright enough"""
    return (
        (b > r * config.chroma_dominance)
        & (b > g * config.chroma_dominance)
        & (b > config.chroma_intensity_threshold)
    )


def sample_perimeter(pixels: np.ndarray) -> np.ndarray:
    """
    Collect every border pixel exactly once

    Args:
        pixels: RGBA buffer (H, W, 4)

    Returns:
        Array of RGB samples (N, 3) as float64
    """
    h, w = pixels.shape[:2]
    border = np.zeros((h, w), dtype=bool)
    border[0, :] = True
    border[h - 1, :] = True
    border[:, 0] = True
    border[:, w - 1] = True

    return pixels[border][:, :3].astype(np.float64)


def sample_fixed_points(pixels: np.ndarray) -> List[KeyColor]:
    """
    Sample the 4 corners and 4 edge midpoints, dropping duplicate colors

    Order is preserved so the first occurrence of each color wins.
    """
    h, w = pixels.shape[:2]
    points = [
        (0, 0),
        (w - 1, 0),
        (0, h - 1),
        (w - 1, h - 1),
        (w // 2, 0),
        (0, h // 2),
        (w - 1, h // 2),
        (w // 2, h - 1),
    ]

    colors: List[KeyColor] = []
    for x, y in points:
        r, g, b = (float(c) for c in pixels[y, x, :3])
        if (r, g, b) not in colors:
            colors.append((r, g, b))

    return colors


def classify_backdrop(
    image: RGBAImage, config: PipelineConfig, logger: PipelineLogger
) -> BackdropClassification:
    """
    Decide whether the backdrop is a chroma screen or a plain color

    Algorithm:
    1. Classify every perimeter pixel as chroma green, chroma blue or neither
    2. If more than 10% of the perimeter is chroma, the larger bucket wins
       (ties go to green) and its mean color is the only key color
    3. Otherwise sample 8 fixed points and key on each distinct color

    Args:
        image: Decoded image
        config: Pipeline configuration
        logger: Logger instance

    Returns:
        BackdropClassification with kind and key colors
    """
    logger.log_info("Stage 1: Classifying backdrop...")

    w, h = image.width, image.height
    perimeter_length = 2 * (w + h) - 4

    samples = sample_perimeter(image.pixels)
    r, g, b = samples[:, 0], samples[:, 1], samples[:, 2]

    green_mask = is_chroma_green(r, g, b, config)
    blue_mask = is_chroma_blue(r, g, b, config) & ~green_mask

    green_count = int(np.count_nonzero(green_mask))
    blue_count = int(np.count_nonzero(blue_mask))
    chroma_ratio = (
        (green_count + blue_count) / perimeter_length if perimeter_length > 0 else 0.0
    )

    if chroma_ratio > config.chroma_perimeter_ratio:
        if green_count >= blue_count:
            kind, bucket = BackdropKind.GREEN, samples[green_mask]
        else:
            kind, bucket = BackdropKind.BLUE, samples[blue_mask]

        mean = bucket.mean(axis=0)
        key_colors: List[KeyColor] = [(float(mean[0]), float(mean[1]), float(mean[2]))]
        method = "perimeter_chroma"
    else:
        kind = BackdropKind.PLAIN
        key_colors = sample_fixed_points(image.pixels)
        method = "fixed_points"

    logger.log_s1(
        method=method,
        kind=kind.value,
        perimeter_length=perimeter_length,
        green_samples=green_count,
        blue_samples=blue_count,
        chroma_ratio=chroma_ratio,
        key_colors=[list(c) for c in key_colors],
    )

    logger.log_info(
        f"  Backdrop: {kind.value} ({green_count} green / {blue_count} blue of "
        f"{perimeter_length} perimeter px), {len(key_colors)} key color(s)"
    )

    return BackdropClassification(
        kind=kind,
        key_colors=key_colors,
        green_samples=green_count,
        blue_samples=blue_count,
        perimeter_length=perimeter_length,
    )
