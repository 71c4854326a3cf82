"""
Index writer module.
Writes SearchRecords into three sorted sets per parent category: by update time, by score, and by rank.
"""

import json  # decode stored members
from typing import Dict, List, Optional  # type hints

from loguru import logger  # console logger

from . import config  # key templates
from .models import SearchRecord  # canonical record
from .store import PersistenceError, RedisStore  # injected store


# Sort order name -> (key template, record attribute used as the score)
INDEX_ORDERS = {
	"time": (config.SEARCH_TIME_KEY, "timestamp"),
	"score": (config.SEARCH_SCORE_KEY, "score"),
	"rank": (config.SEARCH_RANK_KEY, "rank"),
}


class IndexWriter:
	"""
	Inserts records into the time, score, and rank indices of their parent partition.
	The three writes are independent: a failure in one does not stop the others
	and nothing is rolled back.
	"""

	def __init__(self, store: RedisStore):
		self.store = store

	def key(self, order: str, parent_id: int) -> str:
		if order not in INDEX_ORDERS:
			raise ValueError(f"Unknown index order '{order}', expected one of {sorted(INDEX_ORDERS)}")
		return INDEX_ORDERS[order][0].format(pid=parent_id)

	def write(self, record: SearchRecord) -> Optional[PersistenceError]:
		"""Write to all three indices; returns the last failure, if any."""
		member = record.to_json()
		last_error = None
		for order, (_, attr) in INDEX_ORDERS.items():
			key = self.key(order, record.parent_category_id)
			try:
				self.store.zadd(key, float(getattr(record, attr)), member)
			except PersistenceError as e:
				logger.warning(f"[IndexWriter] {order} index write failed for movie={record.movie_id}: {e}")
				last_error = e
		return last_error

	def read_range(self, order: str, parent_id: int, start: int = 0, stop: int = -1) -> List[Dict]:
		"""Read an index back in ascending score order as decoded record dicts."""
		members = self.store.zrange(self.key(order, parent_id), start, stop)
		return [json.loads(m) for m in members]
