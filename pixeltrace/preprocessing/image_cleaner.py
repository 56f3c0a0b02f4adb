"""Noise reduction applied after resizing and before tracing."""
from PIL import ImageFilter

from ..buffer import PixelBuffer
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ImageCleaner:
    """Smooth compression artifacts with a uniform Gaussian blur."""

    def __init__(self, config: dict):
        cfg = config.get("denoise", {})
        self.alpha_aware = cfg.get("alpha_aware", True)

    def clean(self, buffer: PixelBuffer, blur_level: int) -> PixelBuffer:
        """
        Blur the whole canvas with radius ``blur_level`` pixels.

        Returns:
            A new buffer of the same size, or ``buffer`` if blur_level is 0.
        """
        if blur_level <= 0:
            return buffer

        logger.info(f"Applying blur (radius={blur_level}px)...")

        image = buffer.to_image()
        if self.alpha_aware:
            # Premultiplied space keeps transparent pixels from bleeding
            # their hidden color into visible edges.
            image = image.convert("RGBa")
        image = image.filter(ImageFilter.GaussianBlur(radius=blur_level))

        return PixelBuffer.from_image(image.convert("RGBA"))
