"""Utility helpers for working with input images."""

from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"})

def ensure_image_path(image: str | Path) -> Path:
	"""Validate that the provided path exists and points to a file."""
	path = Path(image).expanduser().resolve()
	if not path.exists():
		raise FileNotFoundError(f"Image path not found: {path}")
	if not path.is_file():
		raise ValueError(f"Image path is not a file: {path}")
	return path

def collect_image_paths(sources: list[str]) -> list[Path]:
	"""Expand files and directories into a flat list of image paths.

	Directories contribute their image files (by suffix) in sorted order.
	"""
	paths: list[Path] = []
	for source in sources:
		candidate = Path(source).expanduser().resolve()
		if candidate.is_dir():
			paths.extend(sorted(p for p in candidate.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES))
		else:
			paths.append(ensure_image_path(candidate))
	return paths

def load_image(path: Path) -> np.ndarray:
	"""Decode an image file into an RGB ``uint8`` array honoring EXIF orientation."""
	with Image.open(path) as handle:
		oriented = ImageOps.exif_transpose(handle)
		rgb = oriented.convert("RGB")
	return np.asarray(rgb, dtype=np.uint8)

def to_pil(buffer: np.ndarray) -> Image.Image:
	"""Wrap a raster buffer as a Pillow image."""
	return Image.fromarray(np.ascontiguousarray(buffer))

def validate_raster(image: object) -> str | None:
	"""Return a reason string when ``image`` cannot be scanned, else ``None``."""
	if image is None:
		return "image not loaded"
	if not isinstance(image, np.ndarray):
		return f"unsupported image type {type(image).__name__}"
	if image.ndim not in (2, 3):
		return f"unexpected image shape {image.shape}"
	if image.shape[0] == 0 or image.shape[1] == 0:
		return "image has zero dimensions"
	return None
