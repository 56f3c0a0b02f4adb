"""Tests for background removal, cropping, resizing and blurring."""
import logging

import numpy as np
import pytest

from pixeltrace import PixelBuffer
from pixeltrace.preprocessing.background_remover import BackgroundRemover
from pixeltrace.preprocessing.cropper import AutoCropper
from pixeltrace.preprocessing.image_cleaner import ImageCleaner
from pixeltrace.preprocessing.resampler import Resampler, scaled_dimension

from .conftest import BLUE, RED, WHITE, solid


class TestBackgroundRemover:
    def test_removes_white_around_subject(self, config, red_square_on_white):
        out = BackgroundRemover(config).remove(PixelBuffer(red_square_on_white))
        assert (out.alpha[100:300, 100:300] == 255).all()
        assert out.alpha[:100].max() == 0
        assert out.alpha[300:].max() == 0
        assert out.alpha[:, :100].max() == 0

    def test_input_buffer_untouched(self, config, red_square_on_white):
        src = PixelBuffer(red_square_on_white)
        BackgroundRemover(config).remove(src)
        assert (src.alpha == 255).all()

    def test_enclosed_hole_stays_opaque(self, config, ring_with_hole):
        mask = BackgroundRemover(config).segment(ring_with_hole)
        assert not mask[20:40, 20:40].any()
        assert not mask[10:50, 10:50].any()
        assert mask[:10].all()

        out = BackgroundRemover(config).remove(ring_with_hole)
        assert (out.alpha[20:40, 20:40] == 255).all()

    def test_uniform_image_becomes_transparent(self, config):
        out = BackgroundRemover(config).remove(PixelBuffer(solid(30, 20, WHITE)))
        assert out.alpha.max() == 0

    def test_log_counts_only_newly_cleared_pixels(self, config, caplog):
        caplog.set_level(logging.INFO, logger="pixeltrace")
        BackgroundRemover(config).remove(PixelBuffer(solid(3, 3, (0, 0, 0, 0))))
        assert "cleared 0 of 9 pixels" in caplog.text

        caplog.clear()
        BackgroundRemover(config).remove(PixelBuffer(solid(3, 3, WHITE)))
        assert "cleared 9 of 9 pixels" in caplog.text

    def test_near_background_colors_absorbed(self, config):
        img = solid(20, 20, WHITE)
        img[5:15, 5:15] = (240, 240, 240, 255)  # distance ~26 from white
        mask = BackgroundRemover(config).segment(PixelBuffer(img))
        assert mask.all()

    def test_threshold_is_configurable(self):
        img = solid(20, 20, WHITE)
        img[5:15, 5:15] = (240, 240, 240, 255)
        mask = BackgroundRemover({"background": {"color_threshold": 10}}).segment(
            PixelBuffer(img)
        )
        assert not mask[5:15, 5:15].any()

    def test_low_alpha_pixels_are_not_absorbed(self, config):
        img = solid(20, 20, WHITE)
        img[5:15, 5:15] = (255, 255, 255, 5)
        mask = BackgroundRemover(config).segment(PixelBuffer(img))
        assert not mask[5:15, 5:15].any()
        assert mask[0].all()

    def test_transparent_border_still_seeds(self, config):
        # Fully transparent frame around a white field and a red block.
        img = solid(30, 30, WHITE)
        img[0, :] = img[-1, :] = (255, 255, 255, 0)
        img[:, 0] = img[:, -1] = (255, 255, 255, 0)
        img[10:20, 10:20] = RED
        out = BackgroundRemover(config).remove(PixelBuffer(img))
        assert out.alpha[1:10, 1:29].max() == 0
        assert (out.alpha[10:20, 10:20] == 255).all()

    def test_diagonal_contact_does_not_connect(self, config):
        # A white pixel touching the background only diagonally is kept.
        img = solid(7, 7, WHITE)
        for x, y in ((2, 1), (1, 2), (3, 2), (2, 3)):
            img[y, x] = RED
        mask = BackgroundRemover(config).segment(PixelBuffer(img))
        assert mask[1, 1]
        assert not mask[2, 2]


class TestAutoCropper:
    def test_crops_to_bounding_box(self, config):
        img = solid(50, 40, (0, 0, 0, 0))
        img[5:15, 10:30] = RED
        cropper = AutoCropper(config)
        buf = PixelBuffer(img)

        assert cropper.bounding_box(buf) == (10, 5, 29, 14)
        out = cropper.crop(buf)
        assert out.size == (20, 10)
        assert (out.alpha == 255).all()

    def test_no_transparent_border_after_crop(self, config):
        img = solid(40, 40, (0, 0, 0, 0))
        img[7, 3] = RED
        img[30, 25] = BLUE
        out = AutoCropper(config).crop(PixelBuffer(img))
        visible = out.alpha > 10
        assert visible[0].any() and visible[-1].any()
        assert visible[:, 0].any() and visible[:, -1].any()
        assert out.size == (23, 24)

    def test_faint_pixels_ignored(self, config):
        img = solid(20, 20, (0, 0, 0, 0))
        img[0, 0] = (255, 0, 0, 10)
        img[5:8, 5:8] = RED
        assert AutoCropper(config).crop(PixelBuffer(img)).size == (3, 3)

    def test_fully_transparent_is_noop(self, config):
        buf = PixelBuffer(solid(10, 10, (0, 0, 0, 0)))
        assert AutoCropper(config).crop(buf) is buf


class TestResampler:
    def test_same_width_is_noop(self, config):
        buf = PixelBuffer(solid(40, 30))
        assert Resampler(config).resize_to_width(buf, 40) is buf
        assert Resampler(config).resize_to_width(buf, 0) is buf

    @pytest.mark.parametrize(
        "size,target", [((400, 300), 100), ((123, 457), 61), ((10, 3), 7), ((300, 1), 17)]
    )
    def test_aspect_ratio_preserved(self, config, size, target):
        w, h = size
        out = Resampler(config).resize_to_width(PixelBuffer(solid(w, h)), target)
        assert out.width == target
        assert abs(out.height - round(target * h / w)) <= 1
        assert out.height >= 1

    def test_height_rounds_half_up(self, config):
        # 10 * 5 / 4 = 12.5 rounds up
        out = Resampler(config).resize_to_width(PixelBuffer(solid(4, 5)), 10)
        assert out.size == (10, 13)

    @pytest.mark.parametrize("size,target,height", [((6, 15), 49, 123), ((4, 5), 10, 13), ((2, 1), 3, 2)])
    def test_exact_halves_round_up(self, config, size, target, height):
        buf = PixelBuffer(solid(*size))
        assert Resampler(config).target_height(buf, target) == height
        assert Resampler(config).resize_to_width(buf, target).size == (target, height)

    def test_solid_color_survives_resampling(self, config):
        out = Resampler(config).resize_to_width(PixelBuffer(solid(64, 64, RED)), 16)
        assert np.abs(out.data.astype(int) - np.array(RED)).max() <= 1

    def test_unknown_filter_rejected(self):
        with pytest.raises(ValueError):
            Resampler({"resample": {"filter": "sinc"}})

    def test_scaled_dimension(self):
        assert scaled_dimension(100, 0.8) == 80
        assert scaled_dimension(3, 0.1) == 1
        assert scaled_dimension(5, 0.5) == 3


class TestImageCleaner:
    def test_zero_blur_is_noop(self, config):
        buf = PixelBuffer(solid(8, 8))
        assert ImageCleaner(config).clean(buf, 0) is buf

    def test_blur_smooths_edges(self, config):
        img = solid(40, 40, (0, 0, 0, 255))
        img[:, 20:] = WHITE
        out = ImageCleaner(config).clean(PixelBuffer(img), 3)
        assert out.size == (40, 40)
        edge = out.data[20, 19, 0]
        assert 0 < edge < 255

    def test_alpha_aware_blur_does_not_bleed_hidden_color(self, config):
        img = solid(40, 40, (0, 0, 0, 0))
        img[:, 20:] = WHITE
        out = ImageCleaner(config).clean(PixelBuffer(img), 2)
        visible = out.alpha > 0
        assert visible[:, 19].all()
        assert (out.data[visible][:, :3] >= 250).all()
