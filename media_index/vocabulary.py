"""
Facet vocabulary accessor.
Loads and stores the per-partition vocabulary hash and seeds empty partitions.
"""

import string  # uppercase letters for the initial facet
import threading  # per-partition locks
from contextlib import contextmanager  # lock helper
from datetime import datetime  # current year for seeding
from typing import Callable, Dict, List  # type hints

from loguru import logger  # console logger

from . import config  # key templates and seed span
from .models import FacetVocabulary, MERGED_FACETS, SEEDED_FACETS  # vocabulary model
from .store import RedisStore  # injected store


def seed_vocabulary(current_year: int) -> FacetVocabulary:
	"""Fresh vocabulary: the last YEAR_SEED_SPAN years (newest first) and A-Z."""
	return FacetVocabulary(
		year=[str(current_year - i) for i in range(config.YEAR_SEED_SPAN)],
		initial=list(string.ascii_uppercase),
	)


class FacetVocabularyStore:
	"""
	Reads and writes FacetVocabulary documents, one hash per parent category.
	Seeding happens only when the stored document has no year facet; an existing
	document is never re-seeded, even after the calendar year moves on.
	"""

	def __init__(self, store: RedisStore, current_year: Callable[[], int] = lambda: datetime.now().year):
		self.client = store  # injected store
		self.current_year = current_year  # clock hook for seeding

	def key(self, parent_id: int) -> str:
		return config.SEARCH_FACET_KEY.format(pid=parent_id)

	def load(self, parent_id: int) -> FacetVocabulary:
		doc = self.client.hgetall(self.key(parent_id))
		if not doc or not doc.get("year"):
			year = self.current_year()
			logger.debug(f"[Vocabulary] Seeding empty partition pid={parent_id} (year={year})")
			return seed_vocabulary(year)
		return FacetVocabulary.from_hash(doc)

	def store(self, parent_id: int, vocabulary: FacetVocabulary) -> None:
		self.client.hmset(self.key(parent_id), vocabulary.to_hash())

	def as_filters(self, parent_id: int) -> Dict[str, List[str]]:
		"""Vocabulary as facet -> tokens, plus the sort options, for filter UIs."""
		vocab = self.load(parent_id)
		filters = {facet: list(vocab.tokens(facet)) for facet in MERGED_FACETS + SEEDED_FACETS}
		filters["sort"] = list(vocab.sort_options)
		return filters


class PartitionLocks:
	"""One lock per parent partition so load -> merge -> store runs serially per partition."""

	def __init__(self):
		self._guard = threading.Lock()
		self._locks: Dict[int, threading.Lock] = {}

	def get(self, parent_id: int) -> threading.Lock:
		with self._guard:
			return self._locks.setdefault(parent_id, threading.Lock())

	@contextmanager
	def hold(self, parent_id: int):
		with self.get(parent_id):
			yield
