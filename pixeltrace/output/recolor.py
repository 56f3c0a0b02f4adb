"""Post-hoc replacement of a palette color in a traced document."""
from typing import List

from lxml import etree

from ..errors import InvalidOptionsError
from ..utils.color import normalize_hex
from ..utils.logger import get_logger
from .svg_generator import SVG_NS

logger = get_logger(__name__)

_PARSER = etree.XMLParser(huge_tree=True, remove_blank_text=False)


def _require_hex(value: str, name: str) -> str:
    normalized = normalize_hex(value)
    if normalized is None:
        raise InvalidOptionsError(f"{name} is not a hex color: {value!r}")
    return normalized


def recolor_document(document: str, old_color: str, new_color: str) -> str:
    """
    Re-fill every path whose fill is ``old_color``.

    Colors are compared case-insensitively and written as uppercase
    ``#RRGGBB``. Nothing but matching ``fill`` attributes changes, so a
    second identical call finds no match and returns the document as is.
    """
    old = _require_hex(old_color, "old_color")
    new = _require_hex(new_color, "new_color")

    root = etree.fromstring(document.encode("utf-8"), parser=_PARSER)
    changed = 0
    for path in root.iter(f"{{{SVG_NS}}}path"):
        if normalize_hex(path.get("fill", "")) == old:
            path.set("fill", new)
            changed += 1

    if not changed:
        return document

    logger.info(f"Recolored {changed} path(s) {old} -> {new}")
    return etree.tostring(root, encoding="unicode")


def recolor_palette(colors: List[str], old_color: str, new_color: str) -> List[str]:
    """Replace ``old_color`` with ``new_color`` in place order."""
    old = _require_hex(old_color, "old_color")
    new = _require_hex(new_color, "new_color")
    return [new if normalize_hex(c) == old else c for c in colors]
