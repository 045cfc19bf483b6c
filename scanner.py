"""Two-stage DNI scan: PDF417 search over image variants, then OCR fallback."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Callable, Protocol

import numpy as np

from parsers.barcode_payload import parse_barcode_payload
from parsers.ocr_text import parse_ocr_text
from schemas import IdentityFields, ScanFailure, ScanMethod, ScanResult, ScanSuccess, Variant
from utils.diagnostics import ScanDiagnostics, Stage
from utils.image_io import validate_raster
from utils.preprocess import DEFAULT_CONTRAST, generate_variants

NO_DATA_REASON = "no data extracted"

StatusCallback = Callable[[str, float | None], None]


class BarcodeDecoder(Protocol):
	def decode(self, buffer: np.ndarray) -> str | None: ...


class TextRecognizer(Protocol):
	def recognize(self, buffer: np.ndarray, on_progress: Callable[[float], None] | None = None) -> str: ...


VariantSource = Callable[[np.ndarray], Iterator[Variant]]


@dataclass
class ScanOrchestrator:
	"""Run the barcode search and the OCR fallback for one image at a time.

	The orchestrator keeps no state between scans. Variants are offered to the
	decoder strictly in order and the first decoded payload wins. When no
	variant decodes, or the payload cannot be parsed, OCR runs exactly once on
	the unmodified image. Failures of any stage are converted into the next
	fallback; ``scan`` never raises.
	"""

	decoder: BarcodeDecoder
	recognizer: TextRecognizer
	contrast: float = DEFAULT_CONTRAST
	accept_incomplete_records: bool = False
	variant_source: VariantSource | None = None
	diagnostics: ScanDiagnostics = field(default_factory=lambda: ScanDiagnostics(keep_events=False))

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def scan(self, image: np.ndarray, on_progress: StatusCallback | None = None) -> ScanResult:
		"""Extract identity fields from a photographed DNI."""
		invalid = validate_raster(image)
		if invalid:
			self.diagnostics.warning("preprocess", "Rejected input image", reason=invalid)
			return ScanFailure(reason=f"invalid image: {invalid}")

		self._notify(on_progress, "Searching for PDF417 barcode", None)
		payload = self._search_barcode(image)
		if payload is not None:
			fields = self._parse("barcode_parse", parse_barcode_payload, payload)
			if fields is not None:
				self._notify(on_progress, "PDF417 barcode decoded", 100.0)
				return self._succeed("barcode", fields)

		self._notify(on_progress, "Trying OCR", None)
		text = self._recognize(image, on_progress)
		if text is not None:
			fields = self._parse("ocr_parse", parse_ocr_text, text, require_document_number=True)
			if fields is not None:
				self._notify(on_progress, "Data extracted with OCR", 100.0)
				return self._succeed("ocr", fields)

		self._notify(on_progress, "Could not read the document automatically", None)
		self.diagnostics.info("result", "Scan failed", reason=NO_DATA_REASON)
		return ScanFailure(reason=NO_DATA_REASON)

	def _variants(self, image: np.ndarray) -> Iterator[Variant]:
		if self.variant_source is not None:
			return self.variant_source(image)
		return generate_variants(image, contrast=self.contrast)

	def _search_barcode(self, image: np.ndarray) -> str | None:
		variants = self._variants(image)
		attempt = 0
		while True:
			try:
				variant = next(variants)
			except StopIteration:
				break
			except Exception as exc:  # noqa: BLE001
				# a broken generator cannot be resumed, so the search ends here
				self.diagnostics.warning("preprocess", "Variant generation failed", attempt=attempt, error=str(exc))
				break

			attempt += 1
			try:
				payload = self.decoder.decode(variant.buffer)
			except Exception as exc:  # noqa: BLE001
				self.diagnostics.warning("barcode", "Decoder raised", variant=variant.label, error=str(exc))
				continue
			if payload:
				self.diagnostics.info("barcode", "Decoded", variant=variant.label, attempt=attempt)
				return payload
			self.diagnostics.debug("barcode", "Not found", variant=variant.label, attempt=attempt)

		self.diagnostics.info("barcode", "Exhausted all variants", attempts=attempt)
		return None

	def _recognize(self, image: np.ndarray, on_progress: StatusCallback | None) -> str | None:
		def report(progress: float) -> None:
			self._notify(on_progress, "Processing with OCR", progress * 100.0)

		try:
			text = self.recognizer.recognize(image, report)
		except Exception as exc:  # noqa: BLE001
			self.diagnostics.warning("ocr", "Recognizer raised", error=str(exc))
			return None
		self.diagnostics.debug("ocr", "Recognized text", characters=len(text or ""))
		return text or None

	def _parse(
		self,
		stage: Stage,
		parser: Callable[[str], IdentityFields | None],
		raw: str,
		require_document_number: bool = False,
	) -> IdentityFields | None:
		try:
			fields = parser(raw)
		except Exception as exc:  # noqa: BLE001
			self.diagnostics.warning(stage, "Parser raised", error=str(exc))
			return None
		if fields is None:
			self.diagnostics.info(stage, "Unparsable input")
			return None
		if self.accept_incomplete_records:
			return fields
		# OCR records need a document number; barcode records may rely on both names
		usable = bool(fields.document_number) if require_document_number else fields.is_usable()
		if not usable:
			self.diagnostics.info(stage, "Rejected incomplete record", fields=fields.model_dump(exclude_none=True))
			return None
		return fields

	def _succeed(self, method: ScanMethod, fields: IdentityFields) -> ScanSuccess:
		if fields.document_number and not fields.has_valid_document_number:
			self.diagnostics.warning("result", "Document number is not 7-8 digits", document_number=fields.document_number)
		self.diagnostics.info("result", "Scan succeeded", method=method)
		return ScanSuccess(method=method, fields=fields)

	def _notify(self, on_progress: StatusCallback | None, status: str, percent: float | None) -> None:
		if on_progress is None:
			return
		try:
			on_progress(status, percent)
		except Exception as exc:  # noqa: BLE001
			self._logger.warning("Progress callback failed: %s", exc)
