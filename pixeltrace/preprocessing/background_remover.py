"""Border-seeded region growing that makes the background transparent."""
import cv2
import numpy as np
from scipy.spatial import cKDTree

from ..buffer import PixelBuffer
from ..utils.color import pack_rgb, unpack_rgb
from ..utils.logger import get_logger

logger = get_logger(__name__)


class BackgroundRemover:
    """
    Remove the background connected to the image border.

    Every border pixel seeds the fill and contributes its color to the seed
    set. A pixel joins the background when it is 4-connected to a seed
    through background pixels, its alpha exceeds ``alpha_threshold`` and its
    RGB color lies within ``color_threshold`` of any seed color. Regions of
    background color enclosed by the subject are not reachable and stay
    opaque.
    """

    def __init__(self, config: dict):
        bg_cfg = config.get("background", {})
        self.color_threshold = float(bg_cfg.get("color_threshold", 35))
        self.alpha_threshold = int(bg_cfg.get("alpha_threshold", 10))

    def segment(self, buffer: PixelBuffer) -> np.ndarray:
        """
        Classify pixels as background.

        Returns:
            Boolean (H, W) mask, True for background.
        """
        h, w = buffer.height, buffer.width

        border = np.zeros((h, w), dtype=bool)
        border[0, :] = border[-1, :] = True
        border[:, 0] = border[:, -1] = True

        seed_keys = np.unique(pack_rgb(buffer.rgb[border]))
        near_seed = self._near_seed_colors(buffer.rgb, unpack_rgb(seed_keys))

        # Border pixels are always part of the fill; everything else must
        # pass both the alpha and the color test.
        passable = border | ((buffer.alpha > self.alpha_threshold) & near_seed)

        _, labels = cv2.connectedComponents(passable.astype(np.uint8), connectivity=4)
        seeded = np.unique(labels[border])
        mask = np.isin(labels, seeded)

        logger.debug(
            f"Background fill: {len(seed_keys)} seed colors, "
            f"{int(mask.sum())}/{h * w} pixels reached"
        )
        return mask

    def remove(self, buffer: PixelBuffer) -> PixelBuffer:
        """Return a copy of ``buffer`` with background pixels made transparent."""
        mask = self.segment(buffer)
        result = buffer.copy()
        result.alpha[mask] = 0

        removed = int(np.count_nonzero(mask & (buffer.alpha > 0)))
        logger.info(
            f"Background removal cleared {removed} of {mask.size} pixels "
            f"({100.0 * removed / mask.size:.1f}%)"
        )
        return result

    def _near_seed_colors(self, rgb: np.ndarray, seeds: np.ndarray) -> np.ndarray:
        """Per-pixel flag: Euclidean RGB distance to the nearest seed < threshold."""
        h, w, _ = rgb.shape
        keys, inverse = np.unique(pack_rgb(rgb).reshape(-1), return_inverse=True)

        tree = cKDTree(seeds.astype(np.float64))
        distances, _ = tree.query(unpack_rgb(keys).astype(np.float64), k=1)

        near = distances < self.color_threshold
        return near[inverse.reshape(-1)].reshape(h, w)
