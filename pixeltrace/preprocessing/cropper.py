"""Crop the canvas to the tight bounding box of visible pixels."""
from typing import Optional, Tuple

import numpy as np

from ..buffer import PixelBuffer
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AutoCropper:
    """Trim fully transparent rows and columns from the canvas edges."""

    def __init__(self, config: dict):
        crop_cfg = config.get("crop", {})
        self.alpha_threshold = int(crop_cfg.get("alpha_threshold", 10))

    def bounding_box(self, buffer: PixelBuffer) -> Optional[Tuple[int, int, int, int]]:
        """
        Inclusive (min_x, min_y, max_x, max_y) of pixels with alpha above the
        threshold, or None when there are none.
        """
        visible = buffer.alpha > self.alpha_threshold
        rows = np.flatnonzero(visible.any(axis=1))
        if rows.size == 0:
            return None
        cols = np.flatnonzero(visible.any(axis=0))
        return (int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1]))

    def crop(self, buffer: PixelBuffer) -> PixelBuffer:
        """Return the cropped buffer, or ``buffer`` itself if nothing is visible."""
        bbox = self.bounding_box(buffer)
        if bbox is None:
            logger.info("Auto-crop skipped: no visible pixels")
            return buffer

        min_x, min_y, max_x, max_y = bbox
        cropped = PixelBuffer(buffer.data[min_y : max_y + 1, min_x : max_x + 1].copy())

        logger.info(
            f"Auto-crop: {buffer.width}x{buffer.height} -> "
            f"{cropped.width}x{cropped.height} at ({min_x}, {min_y})"
        )
        return cropped
