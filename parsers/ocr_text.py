"""Heuristic field extraction from OCR text of the DNI front side."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Final

from schemas import IdentityFields

LETTERS: Final[str] = "A-ZÑ"

DOCUMENT_NUMBER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
	re.compile(r"\b(\d{8})\b"),
	re.compile(r"\b(\d{7})\b"),
	re.compile(r"\b(\d{2}[.\s]\d{3}[.\s]\d{3})\b"),
)
LAST_NAME_PATTERN = re.compile(rf"(?:APELLIDO|SURNAME)[^{LETTERS}]{{0,50}}([{LETTERS}]{{4,}})")
# The label must not follow a letter, so the NAME inside SURNAME never counts;
# _labeled_values keeps searching past a label echoed as the value.
FIRST_NAME_PATTERN = re.compile(
	rf"(?<![{LETTERS}])(?:NOMBRE|NAME)[^{LETTERS}]{{0,50}}([{LETTERS}]{{3,}}(?:\s+[{LETTERS}]+)?)"
)
LABELED_BIRTH_DATE_PATTERN = re.compile(
	rf"(?:NACIMIENTO|BIRTH)[^0-9]{{0,30}}?(\d{{1,2}})\s*([{LETTERS}]{{3,}})[{LETTERS}\s/.]*?(\d{{4}})\b"
)
BARE_BIRTH_DATE_PATTERN = re.compile(
	rf"(\d{{1,2}})\s*(ENE|FEB|MAR|ABR|MAY|JUN|JUL|AGO|SEP|OCT|NOV|DIC|JAN|APR|AUG|DEC)[{LETTERS}\s/.]*?(\d{{4}})\b"
)

LABEL_TOKENS: Final[frozenset[str]] = frozenset({"SURNAME", "APELLIDO", "NAME", "NOMBRE", "SEXO", "SEX"})

MONTHS: Final[dict[str, str]] = {
	"ENE": "01", "JAN": "01",
	"FEB": "02",
	"MAR": "03",
	"ABR": "04", "APR": "04",
	"MAY": "05",
	"JUN": "06",
	"JUL": "07",
	"AGO": "08", "AUG": "08",
	"SEP": "09",
	"OCT": "10",
	"NOV": "11",
	"DIC": "12", "DEC": "12",
}

logger = logging.getLogger(__name__)


def normalize_text(text: str) -> str:
	"""Uppercase and collapse line breaks and runs of whitespace into single spaces."""
	return re.sub(r"\s+", " ", text).strip().upper()


def extract_document_number(text: str) -> str | None:
	for pattern in DOCUMENT_NUMBER_PATTERNS:
		match = pattern.search(text)
		if match:
			return re.sub(r"[.\s]", "", match.group(1))
	return None


def _labeled_values(pattern: re.Pattern[str], text: str) -> Iterator[str]:
	# Resume at the captured value so a label echoed as the value ("APELLIDO SURNAME GARCIA")
	# can still act as the label of the next candidate.
	position = 0
	while True:
		match = pattern.search(text, position)
		if match is None:
			return
		yield match.group(1)
		position = match.start(1)


def extract_last_name(text: str) -> str | None:
	"""First run of 4+ letters after a surname label that is not itself a label."""
	for candidate in _labeled_values(LAST_NAME_PATTERN, text):
		if candidate not in LABEL_TOKENS:
			return candidate
	return None


def extract_first_name(text: str) -> str | None:
	"""Name label value, one or two words; trailing label words are dropped."""
	for candidate in _labeled_values(FIRST_NAME_PATTERN, text):
		words = candidate.split()
		if words[0] in LABEL_TOKENS:
			continue
		if len(words) > 1 and words[1] in LABEL_TOKENS:
			words = words[:1]
		return " ".join(words)
	return None


def extract_birth_date(text: str) -> str | None:
	"""Find ``D MMM YYYY`` after a birth label, else anywhere, as ISO text.

	A month name outside the table is read as January.
	"""
	for pattern in (LABELED_BIRTH_DATE_PATTERN, BARE_BIRTH_DATE_PATTERN):
		match = pattern.search(text)
		if match:
			day, month_name, year = match.groups()
			month = MONTHS.get(month_name[:3], "01")
			return f"{year}-{month}-{day.zfill(2)}"
	return None


def parse_ocr_text(text: str) -> IdentityFields | None:
	"""Extract whatever fields the OCR text supports.

	Returns ``None`` only when neither a document number nor a last name is
	found; any other partial result is passed through for human review.
	"""
	normalized = normalize_text(text)
	fields = IdentityFields(
		document_number=extract_document_number(normalized),
		last_name=extract_last_name(normalized),
		first_name=extract_first_name(normalized),
		birth_date=extract_birth_date(normalized),
	)
	if not fields.document_number and not fields.last_name:
		logger.debug("OCR text yielded neither document number nor last name")
		return None
	return fields
