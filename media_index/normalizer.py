"""
Normalizer module.
Turns raw detail records (as delivered upstream) into canonical SearchRecord objects.
Pure and total: malformed numbers and dates collapse to zero values instead of raising.
"""

import re  # numeral patterns
from datetime import datetime  # update-time parsing
from typing import Dict, Tuple  # type hints

from loguru import logger  # console logger

from . import config  # update-time format
from .models import SearchRecord  # canonical record


# Plain ASCII numerals only: no whitespace, digit-group underscores, or non-ASCII digits
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_float_or_default(value, default: float = 0.0) -> Tuple[float, bool]:
	"""Parse a float; returns (value, defaulted)."""
	if isinstance(value, bool):
		return default, True
	if isinstance(value, (int, float)):
		return float(value), False
	if not isinstance(value, str) or not _FLOAT_RE.fullmatch(value):
		return default, True
	return float(value), False


def parse_int_or_default(value, default: int = 0) -> Tuple[int, bool]:
	"""Parse a base-10 integer; returns (value, defaulted)."""
	if isinstance(value, bool):  # bool is an int subclass, never a valid year or id
		return default, True
	if isinstance(value, int):
		return value, False
	if not isinstance(value, str) or not _INT_RE.fullmatch(value):
		return default, True
	return int(value, 10), False


def parse_timestamp_or_default(value, fmt: str = config.UPDATE_TIME_FORMAT, default: int = 0) -> Tuple[int, bool]:
	"""
	Parse a local date-time string into epoch seconds; returns (value, defaulted).
	A malformed string yields epoch 0, which sorts the record as the oldest.
	"""
	if not isinstance(value, str) or not value.isascii():
		return default, True
	try:
		return int(datetime.strptime(value, fmt).timestamp()), False
	except (ValueError, OverflowError, OSError):
		return default, True


class Normalizer:
	"""
	Converts raw detail dictionaries into SearchRecord instances.
	Accepts the nested upstream shape (descriptor fields under "descriptor") and,
	for convenience, flat dictionaries carrying the same keys at the top level.
	"""

	def __init__(self, time_format: str = config.UPDATE_TIME_FORMAT):
		self.time_format = time_format  # fixed update-time layout

	def normalize(self, raw: Dict) -> SearchRecord:
		"""Build the canonical record; never raises on malformed input."""
		raw = raw or {}
		descriptor = raw.get("descriptor") or raw  # flat records carry descriptor keys directly

		movie_id, _ = parse_int_or_default(raw.get("id"))
		category_id, _ = parse_int_or_default(raw.get("cid"))
		parent_id, _ = parse_int_or_default(raw.get("pid"))
		rank, _ = parse_int_or_default(descriptor.get("dbId"))
		release_rank, _ = parse_int_or_default(descriptor.get("addTime"))

		score, score_defaulted = parse_float_or_default(descriptor.get("dbScore"))
		year, year_defaulted = parse_int_or_default(descriptor.get("year"))
		timestamp, time_defaulted = parse_timestamp_or_default(descriptor.get("updateTime"), self.time_format)

		defaulted = [name for name, flag in (
			("score", score_defaulted),
			("year", year_defaulted),
			("timestamp", time_defaulted),
		) if flag]
		if defaulted:
			logger.debug(f"[Normalizer] movie={movie_id} defaulted fields: {defaulted}")

		return SearchRecord(
			movie_id=movie_id,
			category_id=category_id,
			parent_category_id=parent_id,
			name=raw.get("name") or "",
			category_name=descriptor.get("cName") or "",
			class_tag=descriptor.get("classTag") or "",
			area=descriptor.get("area") or "",
			language=descriptor.get("language") or "",
			year=year,
			initial=descriptor.get("initial") or "",
			score=score,
			rank=rank,
			timestamp=timestamp,
			state=descriptor.get("state") or "",
			remarks=descriptor.get("remarks") or "",
			# Some upstream records lack a release date; the add time orders them instead
			release_rank=release_rank,
		)
