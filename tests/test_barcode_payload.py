"""Tests for the positional PDF417 payload parser."""
from __future__ import annotations

import pytest

from parsers.barcode_payload import clean_payload, normalize_compact_date, parse_barcode_payload

SAMPLE_PAYLOAD = "001@GARCIA@JUAN@M@30627652@A@19900115@20150101"


def test_parses_canonical_payload() -> None:
	"""All positional fields land in the expected attributes."""
	fields = parse_barcode_payload(SAMPLE_PAYLOAD)
	assert fields is not None
	assert fields.last_name == "GARCIA"
	assert fields.first_name == "JUAN"
	assert fields.sex == "M"
	assert fields.document_number == "30627652"
	assert fields.birth_date == "1990-01-15"
	assert fields.issue_date == "2015-01-01"
	assert fields.address is None


@pytest.mark.parametrize(
	"payload, expected",
	[
		("00123456789@GARCIA@JUAN PEDRO@M@12345678@A@19900115@20150101", ("GARCIA", "JUAN PEDRO", "12345678")),
		("1@DE LA FUENTE@MARIA JOSE@F@9876543@B@19751231@20200615@extra@fields", ("DE LA FUENTE", "MARIA JOSE", "9876543")),
		(" 7 @ PEREZ @ ANA @F@ 40111222 @C@20010203@20190101", ("PEREZ", "ANA", "40111222")),
	],
)
def test_names_and_number_match_positions(payload: str, expected: tuple[str, str, str]) -> None:
	"""Positions 1, 2 and 4 map to last name, first name and document number."""
	fields = parse_barcode_payload(payload)
	assert fields is not None
	assert (fields.last_name, fields.first_name, fields.document_number) == expected


def test_fewer_than_eight_fields_is_rejected() -> None:
	assert parse_barcode_payload("001@GARCIA@JUAN@M@30627652@A@19900115") is None


def test_payload_without_separator_is_rejected() -> None:
	assert parse_barcode_payload("GARCIA JUAN 30627652 19900115") is None


@pytest.mark.parametrize("index", [1, 2, 4])
def test_missing_essential_field_is_rejected(index: int) -> None:
	"""Document number, last name and first name are all required."""
	parts = SAMPLE_PAYLOAD.split("@")
	parts[index] = "  "
	assert parse_barcode_payload("@".join(parts)) is None


def test_control_characters_are_stripped() -> None:
	"""Control bytes inside the payload do not leak into the fields."""
	payload = "\x1e001@GAR\x00CIA@JUAN\x85@M@30627652\x7f@A@19900115@20150101\r\n"
	fields = parse_barcode_payload(payload)
	assert fields is not None
	assert fields.last_name == "GARCIA"
	assert fields.first_name == "JUAN"
	assert fields.document_number == "30627652"
	assert clean_payload("a\x00b\x1fc\x7fd\x9fe") == "abcde"


def test_unknown_sex_marker_is_dropped() -> None:
	fields = parse_barcode_payload("001@GARCIA@JUAN@X@30627652@A@19900115@20150101")
	assert fields is not None
	assert fields.sex is None


def test_malformed_dates_are_absent() -> None:
	fields = parse_barcode_payload("001@GARCIA@JUAN@F@30627652@A@1990-01@")
	assert fields is not None
	assert fields.birth_date is None
	assert fields.issue_date is None


@pytest.mark.parametrize(
	"raw, expected",
	[
		("19900115", "1990-01-15"),
		("20001332", "2000-13-32"),
		("2000013", None),
		("", None),
	],
)
def test_compact_date_normalization(raw: str, expected: str | None) -> None:
	"""Dates are sliced verbatim without calendar validation."""
	assert normalize_compact_date(raw) == expected
