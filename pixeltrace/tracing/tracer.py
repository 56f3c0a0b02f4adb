"""Palette-quantized rectangle tracing under a byte budget."""
from ..buffer import PixelBuffer
from ..models import TraceResult
from ..output.svg_generator import SVGGenerator
from ..preprocessing.resampler import Resampler, scaled_dimension
from ..utils.logger import get_logger
from .palette import PaletteQuantizer
from .run_length import build_fragments

logger = get_logger(__name__)


class Tracer:
    """
    Convert a pixel buffer into an SVG of one-pixel-tall rectangle runs.

    The trace is retried on a progressively downscaled copy of the buffer
    while the document exceeds ``max_bytes``. Once the scale would drop below
    ``min_scale`` the last attempt is returned even if it is still too large.
    """

    def __init__(self, config: dict):
        cfg = config.get("tracing", {})
        self.max_bytes = int(cfg.get("max_bytes", 150 * 1024))
        self.shrink_factor = float(cfg.get("shrink_factor", 0.8))
        self.min_scale = float(cfg.get("min_scale", 0.1))

        if not 0.0 < self.shrink_factor < 1.0:
            raise ValueError(f"shrink_factor must be in (0, 1), got {self.shrink_factor}")
        if not 0.0 < self.min_scale <= 1.0:
            raise ValueError(f"min_scale must be in (0, 1], got {self.min_scale}")

        self.quantizer = PaletteQuantizer(config)
        self.resampler = Resampler(config)
        self.generator = SVGGenerator(config)

    def trace(self, buffer: PixelBuffer, palette_size: int) -> TraceResult:
        """
        Trace ``buffer`` with at most ``palette_size`` colors.

        Args:
            buffer: Source pixels at full resolution.
            palette_size: Requested color count; the original-palette
                sentinel maps to the configured upper limit.

        Returns:
            TraceResult whose ``within_budget`` is False only when the
            minimum scale was reached without meeting the byte ceiling.
        """
        limit = self.quantizer.effective_limit(palette_size)
        scale = 1.0
        attempts = 0

        while True:
            attempts += 1
            size = (
                scaled_dimension(buffer.width, scale),
                scaled_dimension(buffer.height, scale),
            )
            scaled = self.resampler.resize(buffer, *size)
            result = self._trace_once(scaled, limit, buffer.width, buffer.height)
            result.scale = scale
            result.attempts = attempts

            if result.within_budget:
                logger.info(
                    f"Traced {result.width}x{result.height} grid with "
                    f"{len(result.colors)} colors: {result.byte_size} bytes "
                    f"(scale {scale:.3f}, {attempts} attempt(s))"
                )
                return result

            next_scale = scale * self.shrink_factor
            if next_scale < self.min_scale or size == (1, 1):
                break

            logger.info(
                f"SVG is {result.byte_size} bytes (> {self.max_bytes}); "
                f"retrying at scale {next_scale:.3f}"
            )
            scale = next_scale

        logger.warning(
            f"SVG still {result.byte_size} bytes at minimum scale {scale:.3f} "
            f"(limit {self.max_bytes}); returning oversized document"
        )
        return result

    def _trace_once(
        self, buffer: PixelBuffer, limit: int, display_width: int, display_height: int
    ) -> TraceResult:
        palette = self.quantizer.extract(buffer, limit)
        labels = self.quantizer.assign(buffer, palette)
        buckets = build_fragments(labels, len(palette))

        document = self.generator.generate(
            buckets,
            palette,
            buffer.width,
            buffer.height,
            display_width,
            display_height,
        )
        byte_size = len(document.encode("utf-8"))

        return TraceResult(
            document=document,
            colors=[c for c, fragments in zip(palette, buckets) if fragments],
            width=buffer.width,
            height=buffer.height,
            byte_size=byte_size,
            within_budget=byte_size <= self.max_bytes,
        )
