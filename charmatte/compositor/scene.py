"""
Scene: Immutable placement model for matted characters on a backdrop
"""

from dataclasses import dataclass, replace
from functools import cached_property
from typing import Optional, Tuple

from .datauri import load_data_uri

DEFAULT_CANVAS_SIZE: Tuple[int, int] = (1920, 1080)
DEFAULT_WIDTH_RATIO = 0.2  # New characters span a fifth of the canvas
MIN_CHARACTER_WIDTH = 20.0
RESIZE_HANDLE_SIZE = 24 + 8  # Visible corner plus hitbox padding


@dataclass(frozen=True)
class Character:
    """One matted character placed on a scene"""

    id: str
    src: str
    original_width: int
    original_height: int
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    flipped: bool = False

    @property
    def aspect_ratio(self) -> float:
        return self.original_width / self.original_height

    def contains(self, x: float, y: float) -> bool:
        return (
            self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height
        )

    def is_over_resize_handle(self, x: float, y: float) -> bool:
        """True when the point sits on the bottom-right resize handle"""
        return (
            x > self.x + self.width - RESIZE_HANDLE_SIZE
            and y > self.y + self.height - RESIZE_HANDLE_SIZE
        )


@dataclass(frozen=True)
class Scene:
    """
    Backdrop plus characters in paint order (last is topmost)

    The canvas takes the backdrop's own size; `canvas_size` only applies
    to scenes without a backdrop and falls back to 1920x1080.
    """

    background: Optional[str] = None
    characters: Tuple[Character, ...] = ()
    canvas_size: Optional[Tuple[int, int]] = None

    @cached_property
    def size(self) -> Tuple[int, int]:
        if self.background:
            return load_data_uri(self.background).size
        return self.canvas_size or DEFAULT_CANVAS_SIZE

    def with_background(self, uri: Optional[str]) -> "Scene":
        return replace(self, background=uri)

    def find(self, character_id: str) -> Optional[Character]:
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def character_at(self, x: float, y: float) -> Optional[Character]:
        """Topmost character under a point"""
        for character in reversed(self.characters):
            if character.contains(x, y):
                return character
        return None

    def place_character(self, character: Character, instance_id: str) -> "Scene":
        """Add a copy of a character centered at a fifth of the canvas width"""
        canvas_w, canvas_h = self.size
        width = canvas_w * DEFAULT_WIDTH_RATIO
        height = width / character.aspect_ratio

        placed = replace(
            character,
            id=instance_id,
            width=width,
            height=height,
            x=canvas_w / 2 - width / 2,
            y=canvas_h / 2 - height / 2,
            flipped=False,
        )
        return replace(self, characters=self.characters + (placed,))

    def _update(self, character_id: str, **changes) -> "Scene":
        characters = tuple(
            replace(c, **changes) if c.id == character_id else c
            for c in self.characters
        )
        return replace(self, characters=characters)

    def move_character(self, character_id: str, x: float, y: float) -> "Scene":
        return self._update(character_id, x=x, y=y)

    def resize_character(self, character_id: str, width: float) -> "Scene":
        """Resize keeping the original aspect ratio"""
        character = self.find(character_id)
        if character is None:
            return self

        width = max(MIN_CHARACTER_WIDTH, width)
        return self._update(
            character_id, width=width, height=width / character.aspect_ratio
        )

    def toggle_flip(self, character_id: str) -> "Scene":
        character = self.find(character_id)
        if character is None:
            return self
        return self._update(character_id, flipped=not character.flipped)

    def remove_character(self, character_id: str) -> "Scene":
        return replace(
            self,
            characters=tuple(c for c in self.characters if c.id != character_id),
        )

    def bring_to_front(self, character_id: str) -> "Scene":
        character = self.find(character_id)
        if character is None:
            return self
        others = tuple(c for c in self.characters if c.id != character_id)
        return replace(self, characters=others + (character,))
