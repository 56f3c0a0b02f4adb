"""Shared fixtures: synthetic images built with numpy and Pillow."""
import io

import numpy as np
import pytest
from PIL import Image

from pixeltrace import ImagePipeline, PixelBuffer

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def solid(width, height, color=WHITE) -> np.ndarray:
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[...] = color
    return img


def png_bytes(array: np.ndarray) -> bytes:
    out = io.BytesIO()
    Image.fromarray(array.astype(np.uint8)).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def config():
    return ImagePipeline().config


@pytest.fixture
def red_square_on_white() -> np.ndarray:
    """400x400 white canvas with a 200x200 red square at (100, 100)."""
    img = solid(400, 400, WHITE)
    img[100:300, 100:300] = RED
    return img


@pytest.fixture
def red_square_png(red_square_on_white) -> bytes:
    return png_bytes(red_square_on_white)


@pytest.fixture
def ring_with_hole() -> PixelBuffer:
    """
    White 60x60 canvas with a blue ring whose inside is white again.
    The inner white region touches no border.
    """
    img = solid(60, 60, WHITE)
    img[10:50, 10:50] = BLUE
    img[20:40, 20:40] = WHITE
    return PixelBuffer(img)


@pytest.fixture
def noisy_rgba() -> np.ndarray:
    rng = np.random.default_rng(1234)
    img = rng.integers(0, 256, size=(512, 512, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img
