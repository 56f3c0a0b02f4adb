"""Typed records passed into and out of the pipeline."""
import base64
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

from .buffer import PixelBuffer
from .errors import InvalidOptionsError
from .output.recolor import recolor_document, recolor_palette

MIN_PALETTE_SIZE = 2
MAX_PALETTE_SIZE = 6
# Requests the near-original palette instead of a literal color count.
ORIGINAL_PALETTE = 12


class OutputFormat(str, Enum):
    """Output kind of one pipeline invocation."""

    raw = "raw"
    vector = "vector"

    @classmethod
    def parse(cls, value) -> "OutputFormat":
        if isinstance(value, cls):
            return value
        aliases = {"png": cls.raw, "original": cls.raw, "svg": cls.vector}
        key = str(value).strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise InvalidOptionsError(
                f"Unknown output format: {value!r} (expected 'raw' or 'vector')"
            ) from None


@dataclass(frozen=True)
class ProcessingOptions:
    """Per-invocation switches; validated on construction."""

    remove_background: bool = True
    auto_crop: bool = True
    output_format: OutputFormat = OutputFormat.raw
    palette_size: int = 6
    target_width: int = 0
    blur_level: int = 0

    def __post_init__(self):
        object.__setattr__(self, "output_format", OutputFormat.parse(self.output_format))

        for name in ("remove_background", "auto_crop"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidOptionsError(f"{name} must be a bool")

        for name in ("palette_size", "target_width", "blur_level"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidOptionsError(f"{name} must be an integer, got {value!r}")

        if not self.unbounded_palette and not (
            MIN_PALETTE_SIZE <= self.palette_size <= MAX_PALETTE_SIZE
        ):
            raise InvalidOptionsError(
                f"palette_size must be between {MIN_PALETTE_SIZE} and "
                f"{MAX_PALETTE_SIZE}, or {ORIGINAL_PALETTE} for the original "
                f"palette; got {self.palette_size}"
            )
        if self.target_width < 0:
            raise InvalidOptionsError(f"target_width must be >= 0, got {self.target_width}")
        if self.blur_level < 0:
            raise InvalidOptionsError(f"blur_level must be >= 0, got {self.blur_level}")

    @property
    def unbounded_palette(self) -> bool:
        return self.palette_size == ORIGINAL_PALETTE

    @property
    def wants_vector(self) -> bool:
        return self.output_format is OutputFormat.vector

    @classmethod
    def from_dict(cls, values: Optional[Mapping]) -> "ProcessingOptions":
        """Build options from a config mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (values or {}).items() if k in known})

    def merged(self, **overrides) -> "ProcessingOptions":
        """Copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class TraceResult:
    """Vector document produced by the tracer plus bookkeeping about the attempt."""

    document: str
    colors: List[str]
    width: int
    height: int
    scale: float = 1.0
    byte_size: int = 0
    within_budget: bool = True
    attempts: int = 1


@dataclass(eq=False)
class ProcessingResult:
    """Output of one pipeline invocation."""

    buffer: PixelBuffer
    image_bytes: bytes
    vector_document: Optional[str] = None
    colors: Optional[List[str]] = None
    trace: Optional[TraceResult] = field(default=None, repr=False)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def is_vector(self) -> bool:
        return self.vector_document is not None

    def to_data_url(self) -> str:
        """Preview URL: the SVG when one was traced, otherwise the PNG."""
        if self.vector_document is not None:
            payload = base64.b64encode(self.vector_document.encode("utf-8")).decode("ascii")
            return f"data:image/svg+xml;base64,{payload}"
        payload = base64.b64encode(self.image_bytes).decode("ascii")
        return f"data:image/png;base64,{payload}"

    def recolor(self, old_color: str, new_color: str) -> "ProcessingResult":
        """
        Replace one palette color with another in the document and color list.

        Returns a new result; raw results are returned unchanged.
        """
        if self.vector_document is None:
            return self

        return replace(
            self,
            vector_document=recolor_document(self.vector_document, old_color, new_color),
            colors=recolor_palette(self.colors or [], old_color, new_color),
        )

    def save(self, path) -> Path:
        """Write the SVG (vector results) or PNG bytes to ``path``."""
        path = Path(path)
        if self.vector_document is not None:
            path.write_text(self.vector_document, encoding="utf-8")
        else:
            path.write_bytes(self.image_bytes)
        return path

    @property
    def suggested_suffix(self) -> str:
        return ".svg" if self.vector_document is not None else ".png"
