"""Proportional rescaling of pixel buffers."""
from PIL import Image

from ..buffer import PixelBuffer
from ..utils.logger import get_logger

logger = get_logger(__name__)

FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def scaled_dimension(size: int, factor: float) -> int:
    """Round ``size * factor`` half-up, never below one pixel."""
    return max(1, int(size * factor + 0.5))


class Resampler:
    """Resize buffers with a smoothing filter, keeping aspect ratio."""

    def __init__(self, config: dict):
        res_cfg = config.get("resample", {})
        name = str(res_cfg.get("filter", "bicubic")).lower()
        if name not in FILTERS:
            raise ValueError(
                f"Unknown resample filter {name!r}; choose from {sorted(FILTERS)}"
            )
        self.filter_name = name
        self.filter = FILTERS[name]

    def target_height(self, buffer: PixelBuffer, target_width: int) -> int:
        # Integer half-up rounding of target_width * height / width.
        w, h = buffer.width, buffer.height
        return max(1, (2 * target_width * h + w) // (2 * w))

    def resize_to_width(self, buffer: PixelBuffer, target_width: int) -> PixelBuffer:
        """
        Scale ``buffer`` to ``target_width``; height follows the aspect ratio.

        A target of 0 or the current width returns the buffer unchanged.
        """
        if target_width <= 0 or target_width == buffer.width:
            return buffer

        target_height = self.target_height(buffer, target_width)
        logger.info(
            f"Resizing {buffer.width}x{buffer.height} -> "
            f"{target_width}x{target_height} ({self.filter_name})"
        )
        return self.resize(buffer, target_width, target_height)

    def resize(self, buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        """Resample to an exact size. Pillow premultiplies RGBA internally."""
        if (width, height) == buffer.size:
            return buffer
        image = buffer.to_image().resize((width, height), resample=self.filter)
        return PixelBuffer.from_image(image)
