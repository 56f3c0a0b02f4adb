"""Frequency-ranked palette extraction and nearest-color assignment."""
from typing import List

import numpy as np

from ..buffer import PixelBuffer
from ..models import ORIGINAL_PALETTE
from ..utils.color import key_to_hex, pack_rgb, unpack_rgb
from ..utils.logger import get_logger

logger = get_logger(__name__)

TRANSPARENT = -1


class PaletteQuantizer:
    """Reduce an image to its most frequent exact colors."""

    def __init__(self, config: dict):
        cfg = config.get("tracing", {})
        self.palette_alpha_threshold = int(cfg.get("palette_alpha_threshold", 128))
        self.opaque_alpha_threshold = int(cfg.get("opaque_alpha_threshold", 128))
        self.original_palette_limit = int(cfg.get("original_palette_limit", 256))
        self.chunk_size = int(cfg.get("assign_chunk_size", 8192))

    def effective_limit(self, palette_size: int) -> int:
        """Color cap for a requested palette size (the original-palette sentinel lifts it)."""
        if palette_size == ORIGINAL_PALETTE:
            return self.original_palette_limit
        return palette_size

    def extract(self, buffer: PixelBuffer, limit: int) -> List[str]:
        """
        Histogram sufficiently opaque pixels by exact color.

        Returns:
            Up to ``limit`` hex colors, most frequent first. Ties keep the
            order in which the colors first appear in row-major order.
        """
        opaque = buffer.alpha > self.palette_alpha_threshold
        keys = pack_rgb(buffer.rgb[opaque])
        if keys.size == 0:
            return []

        unique, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)
        order = np.lexsort((first_seen, -counts))[:limit]

        palette = [key_to_hex(k) for k in unique[order]]
        logger.debug(f"Palette: kept {len(palette)} of {unique.size} distinct colors")
        return palette

    def assign(self, buffer: PixelBuffer, palette: List[str]) -> np.ndarray:
        """
        Map each pixel to the index of its nearest palette color.

        Pixels at or below the opacity threshold get TRANSPARENT. Distance is
        squared Euclidean in RGB; ties go to the earlier (more frequent) color.

        Returns:
            int32 (H, W) label array.
        """
        labels = np.full((buffer.height, buffer.width), TRANSPARENT, dtype=np.int32)
        if not palette:
            return labels

        opaque = buffer.alpha > self.opaque_alpha_threshold
        keys = pack_rgb(buffer.rgb[opaque])
        if keys.size == 0:
            return labels

        unique, inverse = np.unique(keys, return_inverse=True)
        colors = unpack_rgb(unique).astype(np.int32)
        targets = unpack_rgb(np.array([int(c[1:], 16) for c in palette])).astype(np.int32)

        nearest = np.empty(len(colors), dtype=np.int32)
        for start in range(0, len(colors), self.chunk_size):
            block = colors[start : start + self.chunk_size]
            dist = ((block[:, None, :] - targets[None, :, :]) ** 2).sum(axis=2)
            nearest[start : start + len(block)] = np.argmin(dist, axis=1)

        labels[opaque] = nearest[inverse.reshape(-1)]
        return labels
