"""
Facet aggregation module.
Merges the facet values of a SearchRecord into a partition's FacetVocabulary.

Multi-value fields arrive as free text delimited by "/" (preferred) or ",".
Each token is trimmed and appended in arrival order unless the vocabulary
already "contains" it. Containment is substring-based by default, matching how
the flattened vocabulary strings have always been checked; this can report a
token as present when it only occurs inside a longer one ("A" inside "USA").
Strict mode compares whole tokens instead.
"""

from typing import List  # type hints

from loguru import logger  # console logger

from . import config  # default membership mode
from .models import FacetVocabulary, SearchRecord  # data classes


# Record attribute feeding each delimited facet
DELIMITED_FACETS = (
	("tag", "class_tag"),
	("area", "area"),
	("language", "language"),
)


def split_facet_values(value: str) -> List[str]:
	"""
	Split a raw facet value into trimmed tokens.
	"/" wins over ","; a value with neither is a single token. Empty tokens are dropped.
	"""
	if not value:
		return []
	if "/" in value:
		parts = value.split("/")
	elif "," in value:
		parts = value.split(",")
	else:
		parts = [value]
	return [p.strip() for p in parts if p.strip()]


class FacetAggregator:
	"""
	Pure merge of one record into an in-memory vocabulary.
	The caller loads the vocabulary before and stores it after.
	"""

	def __init__(self, strict: bool = config.STRICT_FACET_MEMBERSHIP):
		self.strict = strict  # whole-token membership instead of substring

	def merge(self, vocabulary: FacetVocabulary, record: SearchRecord) -> FacetVocabulary:
		"""Append the record's unseen facet tokens; year and initial stay as seeded."""
		added = []  # (facet, token) pairs appended, for the trace log

		# Category is single-valued: the name is appended as a whole, never split
		category = (record.category_name or "").strip()
		if vocabulary.add("category", category, strict=self.strict):
			added.append(("category", category))

		for facet, attr in DELIMITED_FACETS:
			for token in split_facet_values(getattr(record, attr)):
				if vocabulary.add(facet, token, strict=self.strict):
					added.append((facet, token))

		if added:
			logger.debug(f"[Aggregator] pid={record.parent_category_id} movie={record.movie_id} added {added}")
		return vocabulary
