"""Tests for post-hoc palette recoloring."""
import pytest

from pixeltrace import InvalidOptionsError, PixelBuffer, ProcessingResult
from pixeltrace.output.recolor import recolor_document, recolor_palette
from pixeltrace.tracing.tracer import Tracer

from .conftest import BLUE, RED, solid
from .test_tracing import fills


@pytest.fixture
def traced(config):
    img = solid(6, 4, RED)
    img[2:] = BLUE
    buf = PixelBuffer(img)
    trace = Tracer(config).trace(buf, 6)
    return ProcessingResult(
        buffer=buf,
        image_bytes=buf.encode(),
        vector_document=trace.document,
        colors=list(trace.colors),
        trace=trace,
    )


class TestRecolorDocument:
    def test_replaces_only_matching_fill(self, traced):
        doc = recolor_document(traced.vector_document, "#FF0000", "#00ff00")
        assert fills(doc) == ["#00FF00", "#0000FF"]
        assert doc.replace('fill="#00FF00"', 'fill="#FF0000"') == traced.vector_document

    def test_case_insensitive_old_color(self, traced):
        doc = recolor_document(traced.vector_document, "#ff0000", "#123456")
        assert fills(doc) == ["#123456", "#0000FF"]

    def test_shorthand_new_color(self, traced):
        doc = recolor_document(traced.vector_document, "#0000FF", "#abc")
        assert fills(doc) == ["#FF0000", "#AABBCC"]

    def test_second_application_is_noop(self, traced):
        once = recolor_document(traced.vector_document, "#FF0000", "#00FF00")
        twice = recolor_document(once, "#FF0000", "#00FF00")
        assert twice == once

    def test_unknown_color_leaves_document(self, traced):
        assert recolor_document(traced.vector_document, "#ABCDEF", "#000000") == (
            traced.vector_document
        )

    @pytest.mark.parametrize("bad", ["red", "#12345", "", "#GGGGGG"])
    def test_invalid_colors_rejected(self, traced, bad):
        with pytest.raises(InvalidOptionsError):
            recolor_document(traced.vector_document, "#FF0000", bad)
        with pytest.raises(InvalidOptionsError):
            recolor_palette(traced.colors, bad, "#FF0000")


class TestResultRecolor:
    def test_palette_keeps_position(self, traced):
        updated = traced.recolor("#0000FF", "#ffaa00")
        assert updated.colors == ["#FF0000", "#FFAA00"]
        assert fills(updated.vector_document) == ["#FF0000", "#FFAA00"]
        assert traced.colors == ["#FF0000", "#0000FF"]

    def test_idempotent(self, traced):
        once = traced.recolor("#FF0000", "#000000")
        twice = once.recolor("#FF0000", "#000000")
        assert twice.vector_document == once.vector_document
        assert twice.colors == once.colors

    def test_raw_result_unchanged(self):
        buf = PixelBuffer(solid(2, 2))
        raw = ProcessingResult(buffer=buf, image_bytes=buf.encode())
        assert raw.recolor("#FFFFFF", "#000000") is raw
