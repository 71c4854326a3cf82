"""
Ingest raw detail records into the media index.

This script:
1) Loads raw details from a JSONL file (default data/details.jsonl)
2) Stores detail and basic-info snapshots
3) Updates facet vocabularies and writes the time/score/rank indices

Usage:
    python -m scripts.ingest_details [path/to/details.jsonl]
"""

import sys  # optional path argument
import time  # measure step timings
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from media_index import config  # settings
from media_index.catalog import MovieCatalog  # snapshots + pipeline
from media_index.data_loader import DataLoader  # data ingestion
from media_index.store import RedisStore  # store wrapper


def main(argv=None) -> int:
	argv = sys.argv[1:] if argv is None else argv
	root = Path(__file__).resolve().parents[1]  # project root
	data_path = Path(argv[0]) if argv else root / 'data' / 'details.jsonl'  # input dataset

	# 1) Load data
	logger.info("[1/2] Loading details...")
	details = DataLoader().load_details_from_jsonl(str(data_path))
	logger.info(f"[OK] Loaded {len(details)} details")

	# 2) Snapshot and index
	logger.info(f"[2/2] Ingesting into {config.REDIS_URL} ...")
	t0 = time.time()
	catalog = MovieCatalog(RedisStore.from_url(config.REDIS_URL))
	error = catalog.save_details(details)
	if error:
		logger.warning(f"Finished in {time.time() - t0:.2f}s with store errors; last: {error}")
		return 1
	logger.info(f"[OK] Ingested in {time.time() - t0:.2f}s")
	return 0


if __name__ == '__main__':
	sys.exit(main())
