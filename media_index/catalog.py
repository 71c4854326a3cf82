"""
Catalog module.
Plain snapshot persistence around the search index: list-page items, full detail
snapshots, and basic-info snapshots. Detail batches are also fed to the BatchPipeline.
"""

import json  # snapshot serialization
from datetime import timedelta  # snapshot expiry
from typing import Dict, List, Optional  # type hints

from loguru import logger  # console logger

from . import config  # key templates and expiry
from .models import MovieBasicInfo, MovieListItem  # snapshot records
from .pipeline import BatchPipeline  # search-index ingestion
from .store import PersistenceError, RedisStore  # injected store


class MovieCatalog:
	"""Stores and reads the snapshot records for one store."""

	def __init__(
		self,
		store: RedisStore,
		pipeline: Optional[BatchPipeline] = None,
		detail_ttl: timedelta = timedelta(days=config.DETAIL_TTL_DAYS),
	):
		self.store = store
		self.pipeline = pipeline or BatchPipeline(store)
		self.detail_ttl = detail_ttl

	def save_movies(self, items: List[MovieListItem]) -> Optional[PersistenceError]:
		"""Add list items to their category's sorted set, scored by movie id."""
		last_error = None
		for item in items:
			try:
				self.store.zadd(config.MOVIE_LIST_KEY.format(cid=item.cid), float(item.id), item.to_json())
			except PersistenceError as e:
				logger.warning(f"[Catalog] List write failed for movie={item.id}: {e}")
				last_error = e
		return last_error

	def movie_list_keys(self) -> List[str]:
		return self.store.keys(config.MOVIE_LIST_PATTERN)

	def get_movie_list(self, key: str) -> List[str]:
		return self.store.zrange(key, 0, -1)

	def save_details(self, details: List[Dict]) -> Optional[PersistenceError]:
		"""
		Snapshot every detail (full record and basic info, both expiring), then
		run the whole batch through the search-index pipeline.
		Returns the last error from either phase.
		"""
		last_error = None
		for detail in details:
			cid, mid = detail.get("cid", 0), detail.get("id", 0)
			try:
				basic = MovieBasicInfo.from_detail(detail).to_json()
			except (TypeError, ValueError) as e:
				# Non-numeric ids: keep the full snapshot and let the pipeline default the record
				logger.warning(f"[Catalog] Skipping basic info for movie={mid!r}: {e}")
				basic = None
			try:
				self.store.set(
					config.MOVIE_DETAIL_KEY.format(cid=cid, mid=mid),
					json.dumps(detail, ensure_ascii=False),
					ttl=self.detail_ttl,
				)
				if basic is not None:
					self.store.set(config.MOVIE_BASIC_INFO_KEY.format(cid=cid, mid=mid), basic, ttl=self.detail_ttl)
			except PersistenceError as e:
				logger.warning(f"[Catalog] Snapshot write failed for movie={mid}: {e}")
				last_error = e

		pipeline_error = self.pipeline.ingest(details)
		logger.info(f"[Catalog] Saved {len(details)} detail snapshots")
		return pipeline_error or last_error

	def _read_json(self, key: str) -> Dict:
		raw = self.store.get(key)
		if not raw:
			return {}
		try:
			return json.loads(raw)
		except json.JSONDecodeError as e:
			logger.warning(f"[Catalog] Corrupt snapshot at {key}: {e}")
			return {}

	def get_detail(self, cid: int, mid: int) -> Dict:
		"""Full detail snapshot, or {} when missing or expired."""
		return self._read_json(config.MOVIE_DETAIL_KEY.format(cid=cid, mid=mid))

	def get_basic_info(self, cid: int, mid: int) -> MovieBasicInfo:
		"""Basic-info snapshot, or an empty MovieBasicInfo when missing or expired."""
		return MovieBasicInfo.from_dict(self._read_json(config.MOVIE_BASIC_INFO_KEY.format(cid=cid, mid=mid)))
