"""Mutable RGBA pixel grid that every pipeline stage reads and produces."""
import base64
import binascii
import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import ImageDecodeError

ImageSource = Union[bytes, bytearray, str, os.PathLike, Image.Image]


@dataclass(eq=False)
class PixelBuffer:
    """
    Decoded bitmap as a dense row-major RGBA array.

    ``data`` has shape (height, width, 4) and dtype uint8, so its flat
    layout is exactly width * height * 4 samples in R, G, B, A order.
    """

    data: np.ndarray

    def __post_init__(self):
        data = np.ascontiguousarray(self.data, dtype=np.uint8)
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {data.shape}")
        if data.shape[0] < 1 or data.shape[1] < 1:
            raise ValueError(f"Buffer dimensions must be positive, got {data.shape[:2]}")
        self.data = data

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def rgb(self) -> np.ndarray:
        """View of the color channels, shape (H, W, 3)."""
        return self.data[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel, shape (H, W)."""
        return self.data[..., 3]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0, 0)) -> "PixelBuffer":
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[...] = color
        return cls(data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Wrap an (H, W, 3) or (H, W, 4) array; RGB input gets an opaque alpha."""
        array = np.asarray(array)
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=2)
        return cls(array.copy())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        if image.mode.startswith("I"):
            # 16/32-bit integer grayscale; convert() would clip to 255.
            samples = np.asarray(image, dtype=np.int64) >> 8
            image = Image.fromarray(np.clip(samples, 0, 255).astype(np.uint8))
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    @classmethod
    def decode(cls, source: ImageSource) -> "PixelBuffer":
        """
        Decode an encoded bitmap into a buffer.

        Args:
            source: Encoded image bytes, a ``data:`` URL, a base64 string,
                a file path, or an already opened PIL image.

        Raises:
            ImageDecodeError: If the source cannot be read as an image.
        """
        if isinstance(source, Image.Image):
            return cls.from_image(ImageOps.exif_transpose(source))

        try:
            stream = cls._open_stream(source)
            with Image.open(stream) as image:
                image.load()
                image = ImageOps.exif_transpose(image)
                return cls.from_image(image)
        except ImageDecodeError:
            raise
        except (
            OSError,
            UnidentifiedImageError,
            Image.DecompressionBombError,
            ValueError,
            binascii.Error,
        ) as e:
            raise ImageDecodeError(f"Failed to load image: {e}") from e

    @staticmethod
    def _open_stream(source):
        if isinstance(source, (bytes, bytearray)):
            return io.BytesIO(bytes(source))

        if isinstance(source, os.PathLike):
            return Path(source)

        if isinstance(source, str):
            if source.startswith("data:"):
                header, _, payload = source.partition(",")
                if ";base64" not in header:
                    raise ImageDecodeError("Only base64 data URLs are supported")
                return io.BytesIO(base64.b64decode(payload, validate=True))

            if os.path.isfile(source):
                return Path(source)

            try:
                return io.BytesIO(base64.b64decode(source, validate=True))
            except binascii.Error as e:
                raise ImageDecodeError(
                    "Source is neither an existing file nor base64 data"
                ) from e

        raise ImageDecodeError(f"Unsupported image source type: {type(source).__name__}")

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data)

    def encode(self, fmt: str = "PNG") -> bytes:
        """Re-encode the buffer as an image file (PNG by default)."""
        out = io.BytesIO()
        self.to_image().save(out, format=fmt)
        return out.getvalue()

    def to_data_url(self) -> str:
        payload = base64.b64encode(self.encode("PNG")).decode("ascii")
        return f"data:image/png;base64,{payload}"

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.data.copy())

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        r, g, b, a = self.data[y, x]
        return (int(r), int(g), int(b), int(a))

    def set_pixel(self, x: int, y: int, rgba):
        self.data[y, x] = rgba

    def opaque_count(self, threshold: int = 0) -> int:
        """Number of pixels whose alpha exceeds ``threshold``."""
        return int(np.count_nonzero(self.alpha > threshold))
