"""Color conversion helpers shared by the tracer and the recolor tools."""
import numpy as np
from typing import Tuple, Optional


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """Convert hex color string to RGB tuple."""
    if not isinstance(hex_color, str):
        return None

    hex_color = hex_color.strip()

    if not hex_color.startswith("#"):
        return None

    hex_color = hex_color[1:]

    # Handle shorthand like #FFF
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)

    if len(hex_color) != 6:
        return None

    try:
        r = int(hex_color[0:2], 16)
        g = int(hex_color[2:4], 16)
        b = int(hex_color[4:6], 16)
        return (r, g, b)
    except ValueError:
        return None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format an RGB triple as a 7-character uppercase hex string."""
    return f"#{int(r):02X}{int(g):02X}{int(b):02X}"


def normalize_hex(hex_color: str) -> Optional[str]:
    """Canonical ``#RRGGBB`` form of a hex color, or None if it does not parse."""
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None
    return rgb_to_hex(*rgb)


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """
    Pack an (..., 3) uint8 array into 24-bit integer keys.
    Keys sort and compare like the hex strings they stand for.
    """
    rgb = np.asarray(rgb, dtype=np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


def unpack_rgb(keys: np.ndarray) -> np.ndarray:
    """Inverse of pack_rgb: (N,) keys to an (N, 3) uint8 array."""
    keys = np.asarray(keys, dtype=np.uint32)
    return np.stack(
        [(keys >> 16) & 0xFF, (keys >> 8) & 0xFF, keys & 0xFF], axis=-1
    ).astype(np.uint8)


def key_to_hex(key: int) -> str:
    """Hex string for a packed 24-bit key."""
    return f"#{int(key):06X}"
