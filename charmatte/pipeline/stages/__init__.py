"""
Pipeline Stages
"""

from .s1_backdrop import BackdropClassification, classify_backdrop
from .s2_mask import generate_alpha_mask, tolerance_for
from .s3_despill import suppress_spill
from .s4_encode import encode_png, to_data_uri

__all__ = [
    "BackdropClassification",
    "classify_backdrop",
    "generate_alpha_mask",
    "tolerance_for",
    "suppress_spill",
    "encode_png",
    "to_data_uri",
]
