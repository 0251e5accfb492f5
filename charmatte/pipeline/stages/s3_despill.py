"""
Stage 3: Chroma Spill Suppression from uncontaminated neighbors
"""

import numpy as np
from scipy import ndimage

from ..config import PipelineConfig
from ..image import BackdropKind, RGBAImage
from ..logger import PipelineLogger


def neighborhood_kernel(radius: int) -> np.ndarray:
    """Square window of ones with the center excluded"""
    size = 2 * radius + 1
    kernel = np.ones((size, size), dtype=np.float64)
    kernel[radius, radius] = 0.0
    return kernel


def suppress_spill(
    image: RGBAImage,
    kind: BackdropKind,
    config: PipelineConfig,
    logger: PipelineLogger,
) -> int:
    """
    Pull the chroma channel of contaminated subject pixels toward clean neighbors

    Algorithm:
    1. Snapshot the buffer; all reads below use the snapshot
    2. Spill pixel: opaque and key channel above both others
    3. Non-spill neighbor: opaque and key channel within 5% of the others' max
    4. Blend the key channel toward the mean of non-spill neighbors in a
       7x7 window, weighted by spill amount / 80
    5. With no such neighbor, clamp the key channel to the others' max

    The corrected value is floored at the others' max, so correction never
    overshoots full desaturation. Alpha is never written.

    Args:
        image: Working image (mutated)
        kind: Stage 1 backdrop kind
        config: Pipeline configuration
        logger: Logger instance

    Returns:
        Number of pixels whose key channel was rewritten
    """
    if not kind.is_chroma or not config.despill_enabled:
        logger.log_s3(method="skipped", reason=f"backdrop is {kind.value}")
        return 0

    logger.log_info("Stage 3: Suppressing spill...")

    snapshot = image.pixels.copy()
    channel = kind.channel
    o1, o2 = [c for c in range(3) if c != channel]

    key = snapshot[:, :, channel].astype(np.float64)
    others_max = np.maximum(snapshot[:, :, o1], snapshot[:, :, o2]).astype(np.float64)
    foreground = snapshot[:, :, 3] != 0

    spill = (
        foreground
        & (key > snapshot[:, :, o1])
        & (key > snapshot[:, :, o2])
    )

    if not np.any(spill):
        logger.log_s3(method="neighbor_blend", spill_pixels=0, fallback_pixels=0)
        logger.log_info("  No spill detected")
        return 0

    non_spill = foreground & (key <= others_max * config.non_spill_margin)

    kernel = neighborhood_kernel(config.despill_radius)
    counts = ndimage.correlate(
        non_spill.astype(np.float64), kernel, mode="constant", cval=0.0
    )
    totals = ndimage.correlate(
        np.where(non_spill, key, 0.0), kernel, mode="constant", cval=0.0
    )

    has_neighbor = counts > 0.5
    neighbor_mean = np.divide(
        totals, counts, out=np.zeros_like(totals), where=has_neighbor
    )

    blend = np.clip((key - others_max) / config.spill_full_correction, 0.0, 1.0)
    blended = np.maximum(key * (1.0 - blend) + neighbor_mean * blend, others_max)
    corrected = np.where(has_neighbor, blended, others_max)

    corrected = np.clip(np.rint(corrected), 0, 255).astype(np.uint8)
    image.pixels[:, :, channel][spill] = corrected[spill]

    spill_count = int(np.count_nonzero(spill))
    fallback_count = int(np.count_nonzero(spill & ~has_neighbor))

    logger.log_s3(
        method="neighbor_blend",
        kind=kind.value,
        window=2 * config.despill_radius + 1,
        spill_pixels=spill_count,
        fallback_pixels=fallback_count,
    )

    logger.log_info(
        f"  De-spilled {spill_count:,} pixels ({fallback_count:,} without clean neighbors)"
    )

    return spill_count
