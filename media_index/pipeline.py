"""
Batch ingestion pipeline.
For each raw detail: normalize, update the partition's facet vocabulary, then write the sorted indices.
"""

from concurrent.futures import ThreadPoolExecutor  # parallel per-record processing
from typing import Dict, Iterable, List, Optional  # type hints

from loguru import logger  # console logger

from . import config  # worker count
from .aggregator import FacetAggregator  # vocabulary merge
from .index_writer import IndexWriter  # sorted indices
from .normalizer import Normalizer  # raw -> canonical
from .store import PersistenceError, RedisStore  # injected store
from .vocabulary import FacetVocabularyStore, PartitionLocks  # vocabulary accessor


class BatchPipeline:
	"""
	Ingests batches of raw detail records.

	Records are independent, so they may run on a thread pool. The only shared
	document is each partition's vocabulary; its load -> merge -> store cycle is
	held under a per-partition lock so concurrent records cannot overwrite each
	other's tokens. With more than one worker, new tokens are appended in
	completion order rather than batch order, so the flattened vocabulary order
	can differ between runs (the token sets do not). Store failures never stop
	the batch: the last one is returned.
	"""

	def __init__(
		self,
		store: RedisStore,
		workers: int = config.INGEST_WORKERS,
		normalizer: Optional[Normalizer] = None,
		aggregator: Optional[FacetAggregator] = None,
		vocabularies: Optional[FacetVocabularyStore] = None,
		index_writer: Optional[IndexWriter] = None,
	):
		self.workers = max(1, workers)
		self.normalizer = normalizer or Normalizer()
		self.aggregator = aggregator or FacetAggregator()
		self.vocabularies = vocabularies or FacetVocabularyStore(store)
		self.index_writer = index_writer or IndexWriter(store)
		self.locks = PartitionLocks()

	def update_vocabulary(self, record) -> None:
		"""Load, merge, and store the record's partition vocabulary under its lock."""
		pid = record.parent_category_id
		with self.locks.hold(pid):
			vocab = self.vocabularies.load(pid)
			self.aggregator.merge(vocab, record)
			self.vocabularies.store(pid, vocab)

	def process(self, raw: Dict) -> Optional[PersistenceError]:
		"""Run one record through the pipeline; returns its last store failure."""
		record = self.normalizer.normalize(raw)
		last_error = None
		try:
			self.update_vocabulary(record)
		except PersistenceError as e:
			logger.warning(f"[Pipeline] Vocabulary update failed for movie={record.movie_id}: {e}")
			last_error = e
		index_error = self.index_writer.write(record)
		return index_error or last_error

	def ingest(self, batch: Iterable[Dict]) -> Optional[PersistenceError]:
		"""Ingest a batch in arrival order; returns the last error encountered, or None."""
		batch = list(batch)
		if not batch:
			return None
		logger.info(f"[Pipeline] Ingesting {len(batch)} records with {self.workers} worker(s)")

		if self.workers == 1:
			results: List[Optional[PersistenceError]] = [self.process(raw) for raw in batch]
		else:
			with ThreadPoolExecutor(max_workers=self.workers) as pool:
				results = list(pool.map(self.process, batch))  # map keeps arrival order

		failures = [e for e in results if e is not None]
		if failures:
			logger.warning(f"[Pipeline] {len(failures)} of {len(batch)} records hit store errors")
		else:
			logger.info(f"[Pipeline] Ingested {len(batch)} records")
		return failures[-1] if failures else None
