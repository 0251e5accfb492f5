"""
MattingPipeline: Main orchestration class
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import PipelineConfig
from .errors import MattingError
from .image import BackdropKind, RGBAImage
from .logger import PipelineLogger
from .stages import (
    BackdropClassification,
    classify_backdrop,
    encode_png,
    generate_alpha_mask,
    suppress_spill,
    to_data_uri,
)


@dataclass
class MattingResult:
    """Matted copy of the input plus what each stage decided"""

    image: RGBAImage
    classification: BackdropClassification
    cleared_pixels: int
    despilled_pixels: int

    @property
    def kind(self) -> BackdropKind:
        return self.classification.kind


class MattingPipeline:
    """
    Chroma-key / plain-backdrop matting pipeline

    Stages:
    1. Backdrop Classification (perimeter scan)
    2. Alpha Mask (feathered L1 distance + chroma dominance)
    3. Spill Suppression (chroma backdrops only)
    4. PNG Encoding

    Each call handles exactly one image; nothing is cached between calls.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger or PipelineLogger()

    def process(self, image: RGBAImage, label: str = "<buffer>") -> MattingResult:
        """
        Run stages 1-3 on a copy of the image

        Args:
            image: Decoded input; never mutated
            label: Name used in log records

        Returns:
            MattingResult holding the matted copy

        Raises:
            DimensionError: If the image has zero or excessive size
        """
        result = self._matte(image, label)
        self.logger.save_image_log()
        return result

    def _matte(self, image: RGBAImage, label: str) -> MattingResult:
        """Stages 1-3, leaving the image log record open on success"""
        self.logger.start_image(label, image.width, image.height)
        self.logger.log_info(f"Processing: {label} ({image.width}x{image.height})")

        try:
            image.validate(self.config)
            working = image.copy()

            classification = classify_backdrop(working, self.config, self.logger)
            cleared = generate_alpha_mask(
                working, classification, self.config, self.logger
            )
            despilled = suppress_spill(
                working, classification.kind, self.config, self.logger
            )
        except Exception as e:
            self.logger.log_error(f"Pipeline failed: {e}", exc_info=True)
            self.logger.save_image_log()
            raise

        return MattingResult(
            image=working,
            classification=classification,
            cleared_pixels=cleared,
            despilled_pixels=despilled,
        )

    def process_bytes(self, data: bytes, label: str = "<bytes>") -> bytes:
        """
        Decode, matte and re-encode an image under a single log record

        Raises:
            DecodeError: If the bytes are not a readable image
            DimensionError: If the image has zero or excessive size
            CodecError: If PNG encoding fails
        """
        try:
            image = RGBAImage.from_bytes(data)
        except MattingError as e:
            self.logger.log_error(f"Decode failed for {label}: {e}")
            raise

        result = self._matte(image, label)
        try:
            return encode_png(result.image, self.config, self.logger)
        except MattingError as e:
            self.logger.log_error(f"Stage 4 failed: {e}")
            raise
        finally:
            self.logger.save_image_log()

    def process_to_data_uri(self, data: bytes, label: str = "<upload>") -> str:
        """Matte uploaded bytes into an embeddable PNG data URI"""
        return to_data_uri(self.process_bytes(data, label=label))

    def process_file(self, input_path: Path, output_path: Optional[Path] = None) -> Path:
        """
        Process a single image file and write a transparent PNG

        The output file is only written once encoding has succeeded.

        Args:
            input_path: Path to input image
            output_path: Explicit destination (overrides config.output_path)

        Returns:
            Path to output image

        Raises:
            FileNotFoundError: If input doesn't exist
            MattingError: If decoding, matting or encoding fails
        """
        if not input_path.exists():
            raise FileNotFoundError(f"Input image not found: {input_path}")

        png = self.process_bytes(input_path.read_bytes(), label=str(input_path))

        destination = self._compute_output_path(input_path, output_path)
        destination.write_bytes(png)
        self.logger.log_info(f"  Saved → {destination}")

        return destination

    def _compute_output_path(
        self, input_path: Path, output_path: Optional[Path] = None
    ) -> Path:
        """
        Compute output path

        Args:
            input_path: Input image path
            output_path: Explicit destination, if any

        Returns:
            Output path
        """
        if output_path is not None:
            return output_path
        if self.config.output_path is not None:
            return self.config.output_path

        # Default: same directory, add _transparent suffix
        return input_path.with_name(f"{input_path.stem}_transparent.png")


def remove_background(data: bytes, config: Optional[PipelineConfig] = None) -> bytes:
    """Bytes in, transparent PNG bytes out"""
    return MattingPipeline(config=config).process_bytes(data)


def remove_background_to_data_uri(
    data: bytes, config: Optional[PipelineConfig] = None
) -> str:
    """Bytes in, transparent PNG data URI out"""
    return MattingPipeline(config=config).process_to_data_uri(data)
