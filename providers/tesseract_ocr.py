"""Tesseract OCR provider implementation."""


import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from utils.image_io import to_pil

try:
	import pytesseract
except ImportError:
	pytesseract = None  # type: ignore[assignment]

ProgressCallback = Callable[[float], None]


@dataclass
class TesseractOcrClient:
	"""Client wrapper around the tesseract binary via pytesseract."""

	language: str = "spa"
	tesseract_cmd: str | None = None
	config: str = ""

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		if pytesseract is None:
			raise ImportError("pytesseract is not installed. Please install pytesseract.")
		if self.tesseract_cmd:
			pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

	def recognize(self, buffer: np.ndarray, on_progress: ProgressCallback | None = None) -> str:
		"""Run text recognition on ``buffer`` and return the raw text.

		Tesseract reports no intermediate progress, so ``on_progress`` receives
		``0.0`` before recognition starts and ``1.0`` once text is available.
		"""
		self._report(on_progress, 0.0)
		text = pytesseract.image_to_string(to_pil(buffer), lang=self.language, config=self.config)
		self._logger.debug("Recognized %s characters with lang=%s", len(text), self.language)
		self._report(on_progress, 1.0)
		return text

	def _report(self, on_progress: ProgressCallback | None, value: float) -> None:
		if on_progress is not None:
			on_progress(value)
