"""Assemble the final SVG document from per-color path fragments."""
from typing import List, Optional

from lxml import etree

from ..utils.logger import get_logger

logger = get_logger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
NSMAP = {None: SVG_NS}


class SVGGenerator:
    """Build one filled ``<path>`` per palette color."""

    def __init__(self, config: dict):
        cfg = config.get("tracing", {})
        self.shape_rendering = cfg.get("shape_rendering", "crispEdges")

    def generate(
        self,
        buckets: List[List[str]],
        palette: List[str],
        grid_width: int,
        grid_height: int,
        display_width: Optional[int] = None,
        display_height: Optional[int] = None,
    ) -> str:
        """
        Serialize the document.

        Args:
            buckets: Path fragments per palette index.
            palette: Hex fill color per palette index.
            grid_width, grid_height: Size of the traced pixel grid (viewBox).
            display_width, display_height: Rendered size; defaults to the grid.

        Returns:
            SVG markup. Colors without fragments are skipped.
        """
        root = etree.Element(f"{{{SVG_NS}}}svg", nsmap=NSMAP)
        root.set("width", str(display_width or grid_width))
        root.set("height", str(display_height or grid_height))
        root.set("viewBox", f"0 0 {grid_width} {grid_height}")

        for color, fragments in zip(palette, buckets):
            if not fragments:
                continue
            path = etree.SubElement(root, f"{{{SVG_NS}}}path")
            path.set("d", "".join(fragments))
            path.set("fill", color)
            path.set("stroke", "none")
            path.set("shape-rendering", self.shape_rendering)

        return etree.tostring(root, encoding="unicode")
