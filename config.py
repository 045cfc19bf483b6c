"""Application configuration management for the DNI scan CLI."""


import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

from utils.preprocess import DEFAULT_CONTRAST

ENV_FILE: Final[str] = ".env"
DEFAULT_OCR_LANGUAGE: Final[str] = "spa"
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class ScanSettings:
	"""Tunables for the barcode search and OCR fallback."""
	ocr_language: str = DEFAULT_OCR_LANGUAGE
	contrast: float = DEFAULT_CONTRAST
	accept_incomplete_records: bool = False
	tesseract_cmd: str | None = None


@dataclass(frozen=True)
class AppConfig:
	"""Aggregate configuration for the CLI runtime."""
	output_dir: Path
	scan: ScanSettings = field(default_factory=ScanSettings)
	log_level: int = DEFAULT_LOG_LEVEL


def load_config() -> AppConfig:
	"""Load environment-based configuration values.

	Returns:
		AppConfig: Parsed configuration with scan settings applied.
	"""
	load_dotenv(ENV_FILE)
	output_dir = Path(os.getenv("DNI_SCAN_OUTPUT_DIR", "outputs")).resolve()

	return AppConfig(
		output_dir=output_dir,
		scan=_load_scan_settings(),
		log_level=_parse_log_level(os.getenv("DNI_SCAN_LOG_LEVEL")),
	)


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
	"""Configure the root logger for the application."""
	logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _load_scan_settings() -> ScanSettings:
	"""Load scan tunables from the environment, falling back to defaults."""
	contrast_raw = os.getenv("DNI_SCAN_CONTRAST")
	try:
		contrast = float(contrast_raw) if contrast_raw else DEFAULT_CONTRAST
	except ValueError as exc:
		raise ValueError(f"DNI_SCAN_CONTRAST must be a number, got {contrast_raw!r}") from exc

	return ScanSettings(
		ocr_language=os.getenv("DNI_SCAN_OCR_LANG") or DEFAULT_OCR_LANGUAGE,
		contrast=contrast,
		accept_incomplete_records=_parse_flag(os.getenv("DNI_SCAN_ACCEPT_INCOMPLETE")),
		tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
	)


def _parse_flag(value: str | None) -> bool:
	return value is not None and value.strip().lower() in TRUTHY_VALUES


def _parse_log_level(value: str | None) -> int:
	if not value:
		return DEFAULT_LOG_LEVEL
	level = logging.getLevelName(value.strip().upper())
	if not isinstance(level, int):
		raise ValueError(f"Unknown log level: {value}")
	return level
