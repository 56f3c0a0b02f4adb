"""Row run-length encoding of label grids into rectangle path fragments."""
from typing import List

import numpy as np

from .palette import TRANSPARENT


def run_fragment(x: int, y: int, length: int) -> str:
    """One-pixel-tall rectangle covering ``length`` pixels from (x, y)."""
    return f"M{x} {y}h{length}v1h-{length}z"


def build_fragments(labels: np.ndarray, n_colors: int) -> List[List[str]]:
    """
    Split every row into runs of equal labels.

    Returns:
        One list of path fragments per palette index, in row-major order.
        Transparent runs produce no fragment.
    """
    buckets: List[List[str]] = [[] for _ in range(n_colors)]
    height, width = labels.shape

    for y in range(height):
        row = labels[y]
        starts = np.concatenate(([0], np.flatnonzero(row[1:] != row[:-1]) + 1))
        ends = np.append(starts[1:], width)

        for x0, x1, label in zip(starts.tolist(), ends.tolist(), row[starts].tolist()):
            if label == TRANSPARENT:
                continue
            buckets[label].append(run_fragment(x0, y, x1 - x0))

    return buckets
