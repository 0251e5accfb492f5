"""
Base64 data URI decoding for scene backdrops and character textures
"""

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from ..pipeline.errors import DecodeError


def load_data_uri(uri: str) -> Image.Image:
    """
    Decode a base64 data URI into an RGBA Pillow image

    Raises:
        DecodeError: If the URI is malformed or the payload is not an image
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or ";base64" not in header:
        raise DecodeError("Not a base64 data URI")

    try:
        raw = base64.b64decode(payload, validate=True)
        with Image.open(io.BytesIO(raw)) as img:
            return img.convert("RGBA")
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Cannot decode data URI: {e}") from e
