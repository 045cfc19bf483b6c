"""Leveled scan diagnostics keyed by pipeline stage."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

Stage = Literal["preprocess", "barcode", "barcode_parse", "ocr", "ocr_parse", "result"]


@dataclass(frozen=True)
class DiagnosticEvent:
	"""A single recorded pipeline event."""
	stage: Stage
	level: int
	message: str
	data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScanDiagnostics:
	"""Sink for scan events; forwards to a logger and keeps them for inspection."""

	logger_name: str = "ScanDiagnostics"
	keep_events: bool = True
	events: list[DiagnosticEvent] = field(default_factory=list)

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.logger_name)

	def emit(self, stage: Stage, level: int, message: str, **data: Any) -> None:
		event = DiagnosticEvent(stage=stage, level=level, message=message, data=data)
		if self.keep_events:
			self.events.append(event)
		if self._logger.isEnabledFor(level):
			details = " ".join(f"{key}={value!r}" for key, value in data.items())
			self._logger.log(level, "[%s] %s%s", stage, message, f" ({details})" if details else "")

	def debug(self, stage: Stage, message: str, **data: Any) -> None:
		self.emit(stage, logging.DEBUG, message, **data)

	def info(self, stage: Stage, message: str, **data: Any) -> None:
		self.emit(stage, logging.INFO, message, **data)

	def warning(self, stage: Stage, message: str, **data: Any) -> None:
		self.emit(stage, logging.WARNING, message, **data)

	def for_stage(self, stage: Stage) -> list[DiagnosticEvent]:
		"""Return the recorded events of one stage, in emission order."""
		return [event for event in self.events if event.stage == stage]

	def clear(self) -> None:
		self.events.clear()
