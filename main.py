"""Command-line interface for extracting DNI fields from document photos."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from config import AppConfig, ScanSettings, configure_logging, load_config
from providers.pdf417_decoder import Pdf417Decoder
from providers.tesseract_ocr import TesseractOcrClient
from scanner import ScanOrchestrator
from schemas import ScanFailure, ScanResult
from utils.diagnostics import ScanDiagnostics
from utils.image_io import collect_image_paths, load_image
from utils.io_json import dump_json


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(description="DNI PDF417 and OCR field extraction CLI")
	parser.add_argument(
		"--image",
		action="append",
		required=True,
		help="Image file or directory of images (repeatable)",
	)
	parser.add_argument("--outdir", default=None, help="Directory to store JSON outputs")
	parser.add_argument("--lang", default=None, help="Tesseract language for the OCR fallback")
	parser.add_argument("--contrast", type=float, default=None, help="Contrast used for the last barcode variant")
	parser.add_argument(
		"--accept-incomplete",
		action="store_true",
		help="Pass through records without a document number or full name",
	)
	return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace, settings: ScanSettings) -> ScanSettings:
	"""Apply command-line overrides on top of environment settings."""
	overrides: dict[str, Any] = {}
	if args.lang:
		overrides["ocr_language"] = args.lang
	if args.contrast is not None:
		overrides["contrast"] = args.contrast
	if args.accept_incomplete:
		overrides["accept_incomplete_records"] = True
	return replace(settings, **overrides)


def build_orchestrator(settings: ScanSettings, diagnostics: ScanDiagnostics | None = None) -> ScanOrchestrator:
	"""Wire the zxing and tesseract backends into an orchestrator."""
	return ScanOrchestrator(
		decoder=Pdf417Decoder(),
		recognizer=TesseractOcrClient(language=settings.ocr_language, tesseract_cmd=settings.tesseract_cmd),
		contrast=settings.contrast,
		accept_incomplete_records=settings.accept_incomplete_records,
		diagnostics=diagnostics or ScanDiagnostics(keep_events=False),
	)


def scan_path(orchestrator: ScanOrchestrator, image_path: Path) -> ScanResult:
	"""Load one image and scan it; unreadable files become a failed result."""
	try:
		image = load_image(image_path)
	except (OSError, ValueError) as exc:
		logging.warning("Could not load %s: %s", image_path, exc)
		return ScanFailure(reason=f"image could not be loaded: {exc}")

	def log_progress(status: str, percent: float | None) -> None:
		if percent is None:
			logging.info("%s: %s", image_path.name, status)
		else:
			logging.debug("%s: %s (%.0f%%)", image_path.name, status, percent)

	return orchestrator.scan(image, log_progress)


def run(args: argparse.Namespace, config: AppConfig) -> list[dict[str, Any]]:
	"""Scan every requested image and persist each result as JSON."""
	image_paths = collect_image_paths(args.image)
	if not image_paths:
		raise RuntimeError("No images found for the given --image arguments.")
	output_dir = Path(args.outdir).expanduser().resolve() if args.outdir else config.output_dir
	output_dir.mkdir(parents=True, exist_ok=True)

	settings = resolve_settings(args, config.scan)
	orchestrator = build_orchestrator(settings)

	payloads: list[dict[str, Any]] = []
	for image_path in image_paths:
		result = scan_path(orchestrator, image_path)
		json_payload = result.model_dump(by_alias=True, exclude_none=True)
		json_payload["image"] = str(image_path)

		output_path = dump_json(json_payload, output_dir, image_path.stem)
		logging.info("Saved scan output to %s", output_path)
		print(json.dumps(json_payload, ensure_ascii=False, indent=2))
		payloads.append(json_payload)
	return payloads


def main(argv: list[str] | None = None) -> int:
	"""Entry point for the CLI application."""
	configure_logging()
	try:
		config = load_config()
		logging.getLogger().setLevel(config.log_level)
		args = parse_arguments(argv)
		run(args, config)
	except Exception as exc:  # noqa: BLE001
		logging.exception("DNI scan failed: %s", exc)
		return 1
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
