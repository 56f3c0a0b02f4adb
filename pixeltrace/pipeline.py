"""Main orchestrator that ties the full pipeline together."""
from pathlib import Path
from typing import Optional

import yaml

from .buffer import PixelBuffer
from .buffer.pixel_buffer import ImageSource
from .models import ProcessingOptions, ProcessingResult
from .preprocessing.background_remover import BackgroundRemover
from .preprocessing.cropper import AutoCropper
from .preprocessing.image_cleaner import ImageCleaner
from .preprocessing.resampler import Resampler
from .tracing.tracer import Tracer
from .utils.logger import get_logger

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "config" / "defaults.yaml"


class ImagePipeline:
    """
    Complete raster processing pipeline.

    Pipeline:
      1. Remove the border-connected background (optional)
      2. Crop to the visible subject (optional)
      3. Resize to the target width (optional)
      4. Blur to suppress noise (optional)
      5. Trace to a size-bounded SVG (vector output only)

    Every invocation works on its own buffers, so one pipeline instance can
    serve concurrent calls.
    """

    def __init__(self, config: dict = None, config_path: str = None, preset: str = None):
        """
        Initialize with config dict, YAML path, or preset name.

        Args:
            config: Direct config dictionary.
            config_path: Path to YAML config file.
            preset: Preset name ("sticker", "logo", "photo").
        """
        self.config = self._load_config(config, config_path, preset)
        self.default_options = ProcessingOptions.from_dict(self.config.get("options"))

        # Initialize pipeline components
        self.background_remover = BackgroundRemover(self.config)
        self.cropper = AutoCropper(self.config)
        self.resampler = Resampler(self.config)
        self.cleaner = ImageCleaner(self.config)
        self.tracer = Tracer(self.config)

    def _load_config(self, config, config_path, preset) -> dict:
        """Load and merge configuration."""
        if DEFAULTS_PATH.exists():
            with open(DEFAULTS_PATH, encoding="utf-8") as f:
                base_config = yaml.safe_load(f) or {}
        else:
            base_config = {}

        if preset:
            presets = base_config.get("presets", {})
            if preset not in presets:
                raise ValueError(
                    f"Unknown preset {preset!r}; available: {sorted(presets)}"
                )
            base_config = self._deep_merge(base_config, presets[preset])

        if config_path:
            with open(config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            base_config = self._deep_merge(base_config, file_config)

        if config:
            base_config = self._deep_merge(base_config, config)

        return base_config

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dicts. Override takes precedence."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ImagePipeline._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def process(
        self, source: ImageSource, options: Optional[ProcessingOptions] = None
    ) -> ProcessingResult:
        """
        Run the pipeline on one encoded image.

        Args:
            source: Encoded bitmap (bytes, data URL, base64, path or PIL image).
            options: Per-call options; defaults come from the config.

        Returns:
            ProcessingResult with the final bitmap and, for vector output,
            the SVG document and its colors.

        Raises:
            ImageDecodeError: If the source cannot be decoded.
        """
        options = options or self.default_options
        buffer = PixelBuffer.decode(source)
        logger.info(f"Processing {buffer.width}x{buffer.height} image")

        if options.remove_background:
            logger.info("Step 1/5: Removing background...")
            buffer = self.background_remover.remove(buffer)
        else:
            logger.info("Step 1/5: Skipping background removal")

        if options.auto_crop:
            logger.info("Step 2/5: Cropping to subject...")
            buffer = self.cropper.crop(buffer)
        else:
            logger.info("Step 2/5: Skipping auto-crop")

        logger.info("Step 3/5: Resizing...")
        buffer = self.resampler.resize_to_width(buffer, options.target_width)

        logger.info("Step 4/5: Reducing noise...")
        buffer = self.cleaner.clean(buffer, options.blur_level)

        result = ProcessingResult(buffer=buffer, image_bytes=buffer.encode("PNG"))

        if options.wants_vector:
            logger.info("Step 5/5: Tracing to SVG...")
            trace = self.tracer.trace(buffer, options.palette_size)
            result.vector_document = trace.document
            result.colors = list(trace.colors)
            result.trace = trace
        else:
            logger.info("Step 5/5: Skipping tracing (raw output)")

        logger.info(f"Processing complete: {result.width}x{result.height}")
        return result


def process_image(
    source: ImageSource, options: Optional[ProcessingOptions] = None, **config_kwargs
) -> ProcessingResult:
    """One-shot helper: build a pipeline and process a single image."""
    return ImagePipeline(**config_kwargs).process(source, options)
