"""JSON persistence for scan results."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DATE_PATTERN = "%Y%m%d_%H%M%S"

def build_output_path(output_dir: Path, name_hint: str) -> Path:
	"""Compose a timestamped output path; a numeric suffix is added while the name is taken."""
	timestamp = datetime.now(timezone.utc).strftime(DATE_PATTERN)
	path = output_dir.joinpath(f"{name_hint}_{timestamp}.json")
	counter = 1
	while path.exists():
		path = output_dir.joinpath(f"{name_hint}_{timestamp}_{counter}.json")
		counter += 1
	return path

def dump_json(data: dict[str, Any], output_dir: Path, name_hint: str) -> Path:
	"""Persist one scan result as formatted UTF-8 JSON."""
	output_dir.mkdir(parents=True, exist_ok=True)
	path = build_output_path(output_dir, name_hint)
	path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
	return path
