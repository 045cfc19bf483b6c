"""Field parser for the PDF417 payload of the Argentine DNI.

The symbol encodes ``@``-separated text in a fixed order::

	TRAMITE@APELLIDO@NOMBRE@SEXO@DNI@EJEMPLAR@NACIMIENTO@EMISION

for example ``00123456789@GARCIA@JUAN PEDRO@M@12345678@A@19900115@20150101``.
Fields are assigned strictly by position; no per-field pattern search is
attempted.
"""
from __future__ import annotations

import logging
import re
from typing import Final

from schemas import IdentityFields

SEPARATOR: Final[str] = "@"
MIN_FIELDS: Final[int] = 8

LAST_NAME_INDEX: Final[int] = 1
FIRST_NAME_INDEX: Final[int] = 2
SEX_INDEX: Final[int] = 3
DOCUMENT_NUMBER_INDEX: Final[int] = 4
BIRTH_DATE_INDEX: Final[int] = 6
ISSUE_DATE_INDEX: Final[int] = 7

CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f-\x9f]")

logger = logging.getLogger(__name__)


def clean_payload(payload: str) -> str:
	"""Remove C0 and C1 control characters."""
	return CONTROL_CHARACTERS.sub("", payload)


def normalize_compact_date(value: str) -> str | None:
	"""Turn ``YYYYMMDD`` into ``YYYY-MM-DD`` by slicing.

	The digits are copied verbatim, so ``20001332`` becomes ``2000-13-32``.
	"""
	value = value.strip()
	if len(value) != 8:
		return None
	return f"{value[:4]}-{value[4:6]}-{value[6:8]}"


def parse_barcode_payload(payload: str) -> IdentityFields | None:
	"""Parse a decoded DNI payload, or return ``None`` for unknown layouts."""
	cleaned = clean_payload(payload)
	if SEPARATOR not in cleaned:
		logger.debug("Payload has no %r separator", SEPARATOR)
		return None

	parts = [part.strip() for part in cleaned.split(SEPARATOR)]
	if len(parts) < MIN_FIELDS:
		logger.debug("Payload has %s fields, need at least %s", len(parts), MIN_FIELDS)
		return None

	sex = parts[SEX_INDEX]
	fields = IdentityFields(
		document_number=parts[DOCUMENT_NUMBER_INDEX] or None,
		last_name=parts[LAST_NAME_INDEX] or None,
		first_name=parts[FIRST_NAME_INDEX] or None,
		sex=sex if sex in ("M", "F") else None,
		birth_date=normalize_compact_date(parts[BIRTH_DATE_INDEX]),
		issue_date=normalize_compact_date(parts[ISSUE_DATE_INDEX]),
	)
	if not (fields.document_number and fields.last_name and fields.first_name):
		logger.debug("Payload is missing document number or names")
		return None
	return fields
