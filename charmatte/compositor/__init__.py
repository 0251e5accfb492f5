"""
Scene composition for matted characters
"""

from .editor import CanvasEditor, Gesture
from .datauri import load_data_uri
from .render import render_scene
from .scene import Character, Scene

__all__ = [
    "CanvasEditor",
    "Gesture",
    "Character",
    "Scene",
    "load_data_uri",
    "render_scene",
]
