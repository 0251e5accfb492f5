"""
Scene flattening with Pillow alpha compositing
"""

from typing import Mapping, Optional

from PIL import Image, ImageOps

from .datauri import load_data_uri
from .scene import Scene

EMPTY_CANVAS_COLOR = (17, 24, 39, 255)  # #111827


def render_scene(
    scene: Scene,
    background: Optional[Image.Image] = None,
    images: Optional[Mapping[str, Image.Image]] = None,
) -> Image.Image:
    """
    Flatten a scene into a single RGBA image

    Args:
        scene: Scene to draw
        background: Backdrop image; decoded from scene.background when omitted
        images: Character textures by character id; decoded from each
            character's src when missing

    Returns:
        RGBA image sized to the backdrop (or the default canvas)
    """
    images = images or {}

    if background is None and scene.background:
        background = load_data_uri(scene.background)

    if background is not None:
        canvas = background.convert("RGBA")
    else:
        canvas = Image.new("RGBA", scene.size, EMPTY_CANVAS_COLOR)

    for character in scene.characters:
        texture = images.get(character.id)
        if texture is None:
            texture = load_data_uri(character.src)

        size = (round(character.width), round(character.height))
        if size[0] < 1 or size[1] < 1:
            continue

        sprite = texture.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
        if character.flipped:
            sprite = ImageOps.mirror(sprite)

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        layer.paste(sprite, (round(character.x), round(character.y)))
        canvas = Image.alpha_composite(canvas, layer)

    return canvas
