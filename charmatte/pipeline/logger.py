"""
PipelineLogger: Structured JSON logging for the matting pipeline
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


class PipelineLogger:
    """Logger with per-image stage records and an optional JSON-lines sink"""

    def __init__(
        self,
        log_file: Optional[Path] = None,
        debug_mode: bool = False,
        verbose: bool = False,
    ):
        self.log_file = log_file
        self.debug_mode = debug_mode
        self.verbose = verbose
        self.current_image: Optional[Dict[str, Any]] = None
        self.logs: list[Dict[str, Any]] = []

        self.logger = logging.getLogger("charmatte.pipeline")
        if debug_mode:
            self.logger.setLevel(logging.DEBUG)
        elif verbose:
            self.logger.setLevel(logging.INFO)

    def start_image(self, label: str, width: int, height: int):
        """Start logging for a new image"""
        self.current_image = {
            "image": label,
            "size": [width, height],
            "timestamp": datetime.now().isoformat(),
            "stages": [],
        }

    def log_s1(self, **kwargs):
        """Log Stage 1: Backdrop Classification"""
        self._log_stage("s1_backdrop_classification", kwargs)

    def log_s2(self, **kwargs):
        """Log Stage 2: Alpha Mask"""
        self._log_stage("s2_alpha_mask", kwargs)

    def log_s3(self, **kwargs):
        """Log Stage 3: Spill Suppression"""
        self._log_stage("s3_spill_suppression", kwargs)

    def log_s4(self, **kwargs):
        """Log Stage 4: Encoding"""
        self._log_stage("s4_encode", kwargs)

    def _log_stage(self, stage_name: str, data: Dict[str, Any]):
        """Internal method to log a stage"""
        if self.current_image is None:
            raise RuntimeError("Must call start_image() before logging stages")

        stage_log = {
            "stage": stage_name,
            "timestamp": datetime.now().isoformat(),
            **data,
        }
        self.current_image["stages"].append(stage_log)

        if self.debug_mode:
            self.logger.debug(f"[{stage_name}] {json.dumps(data, indent=2)}")

    def stage(self, stage_name: str) -> Optional[Dict[str, Any]]:
        """Return the most recent record for a stage of the current image"""
        source = self.current_image or (self.logs[-1] if self.logs else None)
        if source is None:
            return None
        for entry in reversed(source["stages"]):
            if entry["stage"] == stage_name:
                return entry
        return None

    def log_info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def log_warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def log_error(self, message: str, exc_info: bool = False):
        """Log error message"""
        self.logger.error(message, exc_info=exc_info)

    def save_image_log(self):
        """Close the current image record, appending it to the log file if any"""
        if self.current_image is None:
            return

        self.logs.append(self.current_image)

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a") as f:
                json.dump(self.current_image, f)
                f.write("\n")

        self.current_image = None
