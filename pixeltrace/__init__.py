"""
pixeltrace - background removal, cropping and size-bounded SVG tracing
for raster images.
"""

from .buffer import PixelBuffer
from .errors import ImageDecodeError, InvalidOptionsError, PixelTraceError
from .models import (
    ORIGINAL_PALETTE,
    OutputFormat,
    ProcessingOptions,
    ProcessingResult,
    TraceResult,
)
from .pipeline import ImagePipeline, process_image
from .batch import BatchItem, BatchItemResult, iter_batch, process_batch

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer",
    "ImagePipeline",
    "process_image",
    "ProcessingOptions",
    "ProcessingResult",
    "TraceResult",
    "OutputFormat",
    "ORIGINAL_PALETTE",
    "BatchItem",
    "BatchItemResult",
    "iter_batch",
    "process_batch",
    "PixelTraceError",
    "ImageDecodeError",
    "InvalidOptionsError",
]
