"""Pydantic schemas for image regions, extracted identity fields and scan results."""


import math
import re
from typing import Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DOCUMENT_NUMBER_PATTERN = re.compile(r"^\d{7,8}$")

ScanMethod = Literal["barcode", "ocr"]


class PixelBox(BaseModel):
	"""Integer pixel rectangle inside a concrete image."""
	model_config = ConfigDict(frozen=True)

	x: int
	y: int
	width: int
	height: int


class ImageRegion(BaseModel):
	"""Rectangle expressed as fractions of the source image dimensions."""
	model_config = ConfigDict(frozen=True)

	x: float = Field(ge=0.0, le=1.0)
	y: float = Field(ge=0.0, le=1.0)
	width: float = Field(gt=0.0, le=1.0)
	height: float = Field(gt=0.0, le=1.0)

	def to_pixels(self, width: int, height: int) -> PixelBox:
		"""Floor the fractional coordinates and keep the box inside the image."""
		left = min(math.floor(width * self.x), width)
		top = min(math.floor(height * self.y), height)
		box_width = min(math.floor(width * self.width), width - left)
		box_height = min(math.floor(height * self.height), height - top)
		return PixelBox(x=left, y=top, width=box_width, height=box_height)


class Variant(BaseModel):
	"""One candidate raster buffer offered to the barcode decoder."""
	model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

	label: str
	buffer: np.ndarray


class IdentityFields(BaseModel):
	"""Identity data read from a DNI, possibly partial."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	document_number: str | None = None
	last_name: str | None = None
	first_name: str | None = None
	sex: Literal["M", "F"] | None = None
	birth_date: str | None = None
	issue_date: str | None = None
	address: str | None = None

	def is_usable(self) -> bool:
		"""A record is usable with a document number or with both names."""
		if self.document_number:
			return True
		return bool(self.last_name and self.first_name)

	@property
	def has_valid_document_number(self) -> bool:
		return bool(self.document_number and DOCUMENT_NUMBER_PATTERN.match(self.document_number))


class ScanSuccess(BaseModel):
	"""Fields extracted by one of the two decode paths."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	success: Literal[True] = True
	method: ScanMethod
	fields: IdentityFields


class ScanFailure(BaseModel):
	"""Negative scan outcome; the form layer falls back to manual entry."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	success: Literal[False] = False
	reason: str


ScanResult = Union[ScanSuccess, ScanFailure]
