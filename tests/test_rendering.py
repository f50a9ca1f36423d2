"""Tests for frame rendering."""

import numpy as np
import pytest
from PIL import Image
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, save_frame


@pytest.fixture
def display():
    pixels = np.zeros((64, 32), dtype=bool)
    pixels[63, 0] = True
    pixels[0, 31] = True
    return pixels


def test_rgb_shape_and_orientation(display):
    rgb = chip8_display_to_rgb(display, scale=1)

    assert rgb.shape == (32, 64, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 63]) == (0, 255, 0)
    assert tuple(rgb[31, 0]) == (0, 255, 0)
    assert tuple(rgb[0, 0]) == (0, 0, 0)


def test_rgb_upscaling(display):
    rgb = chip8_display_to_rgb(display, scale=4, on_color=(1, 2, 3), off_color=(9, 9, 9))

    assert rgb.shape == (128, 256, 3)
    assert (rgb[0:4, 252:256] == (1, 2, 3)).all()
    assert tuple(rgb[4, 252]) == (9, 9, 9)


def test_invalid_scale(display):
    with pytest.raises(ValueError):
        chip8_display_to_rgb(display, scale=0)


@pytest.mark.parametrize("scheme", ["classic", "amber", "white", "blue", "retro"])
def test_color_schemes(scheme):
    on_color, off_color = create_color_scheme(scheme)

    assert len(on_color) == 3 and len(off_color) == 3
    assert on_color != off_color


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("sepia")


def test_save_frame(display, tmp_path):
    path = tmp_path / "frame.png"

    save_frame(display, str(path), scale=2, color_scheme="white")

    with Image.open(path) as image:
        assert image.size == (128, 64)
        assert image.getpixel((126, 0)) == (255, 255, 255)
        assert image.getpixel((0, 0)) == (0, 0, 0)
