"""Tests for region cropping, contrast stretch and variant ordering."""
from __future__ import annotations

import numpy as np
import pytest

from schemas import ImageRegion, PixelBox
from utils.preprocess import (
	DEFAULT_REGIONS,
	adjust_contrast,
	contrast_factor,
	crop_region,
	generate_variants,
	region_box,
)


def _image(width: int, height: int, value: int = 200) -> np.ndarray:
	return np.full((height, width, 3), value, dtype=np.uint8)


def test_lower_right_region_pixels() -> None:
	"""The tight lower-right region of a 1000x800 photo."""
	box = region_box(_image(1000, 800), DEFAULT_REGIONS[0][1])
	assert box == PixelBox(x=500, y=520, width=500, height=280)


@pytest.mark.parametrize("width, height", [(1000, 800), (333, 211), (7, 5), (1, 1)])
def test_regions_stay_inside_image(width: int, height: int) -> None:
	image = _image(width, height)
	for _, region in DEFAULT_REGIONS:
		box = region_box(image, region)
		assert box.x >= 0 and box.y >= 0
		assert box.x + box.width <= width
		assert box.y + box.height <= height


def test_region_coordinates_are_floored() -> None:
	box = ImageRegion(x=0.5, y=0.5, width=0.5, height=0.5).to_pixels(101, 33)
	assert box == PixelBox(x=50, y=16, width=50, height=16)


def test_crop_copies_expected_pixels() -> None:
	image = np.zeros((800, 1000, 3), dtype=np.uint8)
	image[520:, 500:] = 255
	crop = crop_region(image, DEFAULT_REGIONS[0][1])
	assert crop.shape == (280, 500, 3)
	assert crop.min() == 255
	crop[0, 0] = 0
	assert image[520, 500, 0] == 255


def test_contrast_stretch_keeps_midpoint_and_clamps() -> None:
	"""Mid-gray is a fixed point and extremes never wrap around."""
	image = np.array([[[0, 128, 255], [10, 128, 245]]], dtype=np.uint8)
	adjusted = adjust_contrast(image, 1.5)
	assert adjusted.dtype == np.uint8
	assert adjusted[0, 0].tolist() == [0, 128, 255]
	assert adjusted[0, 1, 1] == 128

	strong = adjust_contrast(np.array([[[250, 5, 140]]], dtype=np.uint8), 200.0)
	assert strong[0, 0].tolist()[:2] == [255, 0]


def test_contrast_factor_formula() -> None:
	assert contrast_factor(1.5) == pytest.approx(259 * 256.5 / (255 * 257.5))
	assert contrast_factor(0.0) == pytest.approx(1.0)


def test_contrast_does_not_mutate_input() -> None:
	image = _image(4, 4, 30)
	adjust_contrast(image)
	assert image.max() == 30 and image.min() == 30


def test_variant_order() -> None:
	"""Full image first, then the four regions, then the contrast copy."""
	image = _image(1000, 800)
	variants = list(generate_variants(image))
	assert [variant.label for variant in variants] == [
		"full",
		"lower_right_tight",
		"lower_right_wide",
		"lower_strip",
		"lower_half",
		"contrast",
	]
	assert variants[0].buffer is image
	assert [variant.buffer.shape[:2] for variant in variants[1:5]] == [
		(280, 500),
		(320, 600),
		(320, 1000),
		(400, 1000),
	]
	assert variants[-1].buffer.shape == image.shape


def test_variants_are_restartable() -> None:
	image = _image(50, 40)
	first = [variant.label for variant in generate_variants(image)]
	second = [variant.label for variant in generate_variants(image)]
	assert first == second
