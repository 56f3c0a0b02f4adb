"""Process several images independently, isolating per-image failures."""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional

from .buffer.pixel_buffer import ImageSource
from .models import ProcessingOptions, ProcessingResult
from .pipeline import ImagePipeline
from .utils.logger import get_logger

logger = get_logger(__name__)

STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"


@dataclass
class BatchItem:
    id: Any
    source: ImageSource


@dataclass
class BatchItemResult:
    id: Any
    status: str
    result: Optional[ProcessingResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_COMPLETED


def _run_one(
    pipeline: ImagePipeline, item: BatchItem, options: Optional[ProcessingOptions]
) -> BatchItemResult:
    try:
        result = pipeline.process(item.source, options)
    except Exception as e:
        logger.error(f"Image {item.id!r} failed: {e}", exc_info=True)
        return BatchItemResult(id=item.id, status=STATUS_ERROR, error=e)
    return BatchItemResult(id=item.id, status=STATUS_COMPLETED, result=result)


def iter_batch(
    items: Iterable[BatchItem],
    options: Optional[ProcessingOptions] = None,
    pipeline: Optional[ImagePipeline] = None,
) -> Iterator[BatchItemResult]:
    """
    Process items one at a time, yielding each outcome as it finishes.

    Stop iterating to cancel: images not yet started are never processed.
    """
    pipeline = pipeline or ImagePipeline()
    for item in items:
        yield _run_one(pipeline, item, options)


def process_batch(
    items: Iterable[BatchItem],
    options: Optional[ProcessingOptions] = None,
    pipeline: Optional[ImagePipeline] = None,
    max_workers: int = 1,
) -> List[BatchItemResult]:
    """Process all items and return their outcomes in input order."""
    items = list(items)
    pipeline = pipeline or ImagePipeline()

    if max_workers <= 1 or len(items) <= 1:
        results = list(iter_batch(items, options, pipeline))
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(
                executor.map(lambda item: _run_one(pipeline, item, options), items)
            )

    failed = sum(1 for r in results if not r.ok)
    logger.info(f"Batch finished: {len(results) - failed} completed, {failed} failed")
    return results
