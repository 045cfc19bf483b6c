"""PDF417 barcode decoder backed by zxing-cpp."""


import logging
from dataclasses import dataclass

import numpy as np

try:
	import zxingcpp
except ImportError:
	zxingcpp = None  # type: ignore[assignment]


@dataclass
class Pdf417Decoder:
	"""Decode the PDF417 symbol printed on the back of a DNI.

	Only the PDF417 symbology is enabled so incidental QR codes or 1D
	barcodes in the photo are never mistaken for the document payload.
	Rotation, downscaling and inverted-symbol search are all enabled.
	"""

	try_rotate: bool = True
	try_downscale: bool = True
	try_invert: bool = True

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._signature_error_reported = False
		if zxingcpp is None:
			raise ImportError("zxing-cpp is not installed. Please install zxing-cpp.")

	def decode(self, buffer: np.ndarray) -> str | None:
		"""Return the decoded payload text, or ``None`` when nothing was read."""
		if buffer.size == 0:
			return None
		try:
			results = zxingcpp.read_barcodes(
				np.ascontiguousarray(buffer),
				formats=zxingcpp.BarcodeFormat.PDF417,
				try_rotate=self.try_rotate,
				try_downscale=self.try_downscale,
				try_invert=self.try_invert,
			)
		except TypeError as exc:
			# an installed zxing-cpp without these reader options fails on every call
			if not self._signature_error_reported:
				self._logger.error("zxing-cpp rejected the reader options: %s", exc)
				self._signature_error_reported = True
			return None
		except Exception as exc:  # noqa: BLE001
			self._logger.warning("PDF417 decode failed on %sx%s buffer: %s", buffer.shape[1], buffer.shape[0], exc)
			return None

		for result in results:
			text = getattr(result, "text", None)
			if text:
				return text
		return None
