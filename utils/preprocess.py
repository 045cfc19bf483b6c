"""Candidate raster generation for the PDF417 search.

The DNI carries its PDF417 symbol in the lower-right quadrant of the back
side, so after the untouched photo the search narrows to that corner first
and widens step by step before falling back to a contrast-stretched copy of
the whole image.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Final

import numpy as np

from schemas import ImageRegion, PixelBox, Variant

DEFAULT_CONTRAST: Final[float] = 1.5

DEFAULT_REGIONS: Final[tuple[tuple[str, ImageRegion], ...]] = (
	("lower_right_tight", ImageRegion(x=0.5, y=0.65, width=0.5, height=0.35)),
	("lower_right_wide", ImageRegion(x=0.4, y=0.6, width=0.6, height=0.4)),
	("lower_strip", ImageRegion(x=0.0, y=0.6, width=1.0, height=0.4)),
	("lower_half", ImageRegion(x=0.0, y=0.5, width=1.0, height=0.5)),
)


def image_size(image: np.ndarray) -> tuple[int, int]:
	"""Return ``(width, height)`` of an image array."""
	height, width = image.shape[:2]
	return int(width), int(height)


def region_box(image: np.ndarray, region: ImageRegion) -> PixelBox:
	"""Resolve a fractional region to pixel coordinates for this image."""
	width, height = image_size(image)
	return region.to_pixels(width, height)


def crop_region(image: np.ndarray, region: ImageRegion) -> np.ndarray:
	"""Copy the pixels covered by ``region`` into a new contiguous buffer."""
	box = region_box(image, region)
	return image[box.y:box.y + box.height, box.x:box.x + box.width].copy()


def contrast_factor(contrast: float) -> float:
	return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def adjust_contrast(image: np.ndarray, contrast: float = DEFAULT_CONTRAST) -> np.ndarray:
	"""Stretch every color channel around mid-gray.

	Each channel value ``c`` becomes ``factor * (c - 128) + 128``. Results are
	clamped to ``[0, 255]`` before converting back to ``uint8``; an alpha
	channel, if present, is left untouched.
	"""
	factor = contrast_factor(contrast)
	stretched = image.astype(np.float32)
	channels = 3 if image.ndim == 3 and image.shape[2] >= 3 else None
	if channels is None:
		stretched = factor * (stretched - 128.0) + 128.0
	else:
		stretched[..., :channels] = factor * (stretched[..., :channels] - 128.0) + 128.0
	return np.clip(stretched, 0, 255).astype(np.uint8)


def generate_variants(
	image: np.ndarray,
	regions: Sequence[tuple[str, ImageRegion]] = DEFAULT_REGIONS,
	contrast: float = DEFAULT_CONTRAST,
) -> Iterator[Variant]:
	"""Yield candidate buffers in priority order.

	Crops and the contrast copy are computed only when requested.
	"""
	yield Variant(label="full", buffer=image)
	for label, region in regions:
		yield Variant(label=label, buffer=crop_region(image, region))
	yield Variant(label="contrast", buffer=adjust_contrast(image, contrast))
