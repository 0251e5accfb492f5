import base64
import io

import pytest
from PIL import Image

from charmatte.compositor import (
    CanvasEditor,
    Character,
    Gesture,
    Scene,
    load_data_uri,
    render_scene,
)
from charmatte.pipeline import DecodeError, remove_background_to_data_uri
from conftest import png_bytes


def hero(**overrides):
    fields = dict(id="hero", src="", original_width=100, original_height=200)
    fields.update(overrides)
    return Character(**fields)


def placed_scene():
    return Scene().place_character(hero(), "hero-1")


def test_place_character_centers_a_fifth_of_the_canvas():
    placed = placed_scene().characters[0]

    assert placed.id == "hero-1"
    assert (placed.width, placed.height) == (384.0, 768.0)
    assert (placed.x, placed.y) == (768.0, 156.0)
    assert placed.flipped is False


def test_scene_operations_are_pure():
    scene = placed_scene()
    moved = scene.move_character("hero-1", 10, 20)

    assert scene.characters[0].x == 768.0
    assert (moved.characters[0].x, moved.characters[0].y) == (10, 20)


def test_resize_keeps_aspect_and_minimum():
    scene = placed_scene().resize_character("hero-1", 5)

    assert scene.characters[0].width == 20.0
    assert scene.characters[0].height == 40.0


def test_flip_remove_and_front():
    scene = placed_scene().place_character(hero(), "hero-2")

    assert scene.toggle_flip("hero-1").find("hero-1").flipped is True
    assert [c.id for c in scene.bring_to_front("hero-1").characters] == [
        "hero-2",
        "hero-1",
    ]
    assert [c.id for c in scene.remove_character("hero-1").characters] == ["hero-2"]
    assert scene.toggle_flip("nobody") is scene


def test_character_at_prefers_topmost():
    scene = placed_scene().place_character(hero(), "hero-2")

    assert scene.character_at(900, 500).id == "hero-2"
    assert scene.character_at(5, 5) is None


def test_editor_drag():
    editor = CanvasEditor(placed_scene())

    editor.press(800, 200)
    assert editor.gesture is Gesture.DRAGGING
    assert editor.cursor == "grabbing"

    scene = editor.move(900, 300)
    assert (scene.characters[0].x, scene.characters[0].y) == (868.0, 256.0)

    editor.release()
    assert editor.gesture is Gesture.IDLE


def test_editor_resize_from_handle():
    editor = CanvasEditor(placed_scene())

    editor.press(768 + 384 - 5, 156 + 768 - 5)
    assert editor.gesture is Gesture.RESIZING

    scene = editor.move(768 + 200, 0)
    assert scene.characters[0].width == 200.0
    assert scene.characters[0].height == 400.0


def test_editor_hover_sets_cursor():
    editor = CanvasEditor(placed_scene())

    editor.move(800, 200)
    assert editor.hovered_id == "hero-1"
    assert editor.cursor == "grab"

    editor.leave()
    assert editor.cursor == "default"


def test_press_raises_character():
    scene = placed_scene().place_character(hero(), "hero-2")
    editor = CanvasEditor(scene.move_character("hero-2", 0, 0))

    assert editor.press(1900, 1000).characters[-1].id == "hero-2"
    scene = editor.press(800, 200)

    assert scene.characters[-1].id == "hero-1"


def test_read_only_editor_ignores_input():
    scene = placed_scene()
    editor = CanvasEditor(scene, interactive=False)

    editor.press(800, 200)
    editor.move(900, 300)
    editor.flip("hero-1")
    editor.remove("hero-1")

    assert editor.scene is scene
    assert editor.gesture is Gesture.IDLE


def test_render_flipped_character():
    texture = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
    texture.paste((0, 0, 255, 255), (0, 0, 5, 10))
    background = Image.new("RGB", (40, 30), (255, 0, 0))
    character = hero(
        id="a", original_width=10, original_height=10, x=10, y=10,
        width=10, height=10, flipped=True,
    )

    out = render_scene(Scene(characters=(character,)), background, {"a": texture})

    assert out.size == (40, 30)
    assert out.getpixel((17, 12)) == (0, 0, 255, 255)
    assert out.getpixel((12, 12)) == (255, 0, 0, 255)


def test_render_without_background_uses_default_canvas():
    out = render_scene(Scene(canvas_size=(64, 36)))

    assert out.size == (64, 36)
    assert out.getpixel((0, 0)) == (17, 24, 39, 255)


def test_render_from_matted_data_uri(green_screen_subject):
    uri = remove_background_to_data_uri(png_bytes(green_screen_subject))
    character = hero(
        id="c", src=uri, original_width=20, original_height=20, x=0, y=0,
        width=20, height=20,
    )
    background = Image.new("RGB", (20, 20), (255, 255, 255))

    out = render_scene(Scene(characters=(character,)), background)

    assert out.getpixel((1, 1)) == (255, 255, 255, 255)
    assert out.getpixel((10, 10)) == (200, 60, 60, 255)


def test_load_data_uri_rejects_garbage():
    with pytest.raises(DecodeError):
        load_data_uri("not a uri")
    with pytest.raises(DecodeError):
        load_data_uri("data:image/png;base64,!!!")


def portrait_backdrop_uri():
    backdrop = Image.new("RGB", (1080, 1920), (10, 20, 30))
    buffer = io.BytesIO()
    backdrop.save(buffer, "PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def test_placement_follows_backdrop_size():
    scene = Scene().with_background(portrait_backdrop_uri())

    assert scene.size == (1080, 1920)

    placed = scene.place_character(hero(), "hero-1").characters[0]
    assert (placed.width, placed.height) == (216.0, 432.0)
    assert (placed.x, placed.y) == (432.0, 744.0)


def test_backdrop_overrides_explicit_canvas_size():
    scene = Scene(background=portrait_backdrop_uri(), canvas_size=(1920, 1080))

    assert scene.size == (1080, 1920)
    assert scene.place_character(hero(), "h").characters[0].width == 216.0


def test_default_canvas_without_backdrop():
    assert Scene().size == (1920, 1080)
    assert Scene(canvas_size=(800, 600)).size == (800, 600)


def test_render_matches_placement_canvas():
    scene = Scene().with_background(portrait_backdrop_uri())

    out = render_scene(scene)

    assert out.size == scene.size
