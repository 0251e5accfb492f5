"""
CanvasEditor: Pointer-driven state machine over a Scene value
"""

from enum import Enum
from typing import Optional, Tuple

from .scene import Scene


class Gesture(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class CanvasEditor:
    """
    Drag / resize / hover handling for a composed scene

    Every event returns the (possibly new) scene. Read-only editors are
    built with interactive=False and ignore all pointer input.
    """

    def __init__(self, scene: Scene, interactive: bool = True):
        self.scene = scene
        self.interactive = interactive
        self.gesture = Gesture.IDLE
        self.active_id: Optional[str] = None
        self.hovered_id: Optional[str] = None
        self.drag_offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def cursor(self) -> str:
        if self.gesture is Gesture.RESIZING:
            return "se-resize"
        if self.gesture is Gesture.DRAGGING:
            return "grabbing"
        return "grab" if self.hovered_id else "default"

    def press(self, x: float, y: float) -> Scene:
        """Pick the topmost character, raise it, and start a drag or resize"""
        if not self.interactive:
            return self.scene

        target = self.scene.character_at(x, y)
        if target is None:
            return self.scene

        self.scene = self.scene.bring_to_front(target.id)
        self.active_id = target.id

        if target.is_over_resize_handle(x, y):
            self.gesture = Gesture.RESIZING
        else:
            self.gesture = Gesture.DRAGGING
            self.drag_offset = (x - target.x, y - target.y)

        return self.scene

    def move(self, x: float, y: float) -> Scene:
        if not self.interactive:
            return self.scene

        if self.gesture is Gesture.RESIZING and self.active_id:
            character = self.scene.find(self.active_id)
            if character is not None:
                self.scene = self.scene.resize_character(
                    self.active_id, x - character.x
                )
        elif self.gesture is Gesture.DRAGGING and self.active_id:
            dx, dy = self.drag_offset
            self.scene = self.scene.move_character(self.active_id, x - dx, y - dy)
        else:
            hovered = self.scene.character_at(x, y)
            self.hovered_id = hovered.id if hovered else None

        return self.scene

    def release(self) -> Scene:
        if self.interactive:
            self.gesture = Gesture.IDLE
            self.active_id = None
        return self.scene

    def leave(self) -> Scene:
        if self.interactive:
            self.gesture = Gesture.IDLE
            self.active_id = None
            self.hovered_id = None
        return self.scene

    def flip(self, character_id: str) -> Scene:
        if self.interactive:
            self.scene = self.scene.toggle_flip(character_id)
        return self.scene

    def remove(self, character_id: str) -> Scene:
        if self.interactive:
            self.scene = self.scene.remove_character(character_id)
            if self.hovered_id == character_id:
                self.hovered_id = None
        return self.scene
