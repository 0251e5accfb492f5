"""
Matting errors: every failure is terminal for the image being processed
"""


class MattingError(Exception):
    """Base exception for background removal errors"""

    pass


class DecodeError(MattingError):
    """Raised when input bytes are not a readable raster image"""

    pass


class DimensionError(MattingError):
    """Raised when an image has zero (or excessive) width or height"""

    pass


class CodecError(MattingError):
    """Raised when the matted buffer cannot be encoded"""

    pass
