"""
FastAPI server exposing the media index.
Endpoints:
- GET /health: basic health check
- POST /details: ingest a batch of raw detail records
- GET /facets/{pid}: facet vocabulary of a parent category
- GET /index/{order}/{pid}?start=0&stop=-1: records of a sorted index (order: time|score|rank)

Startup connects to the store named by REDIS_URL.
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import Dict, List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, HTTPException  # FastAPI primitives
from pydantic import BaseModel  # request/response schema definitions

# Import our internal modules
from media_index import config  # settings
from media_index.catalog import MovieCatalog  # snapshots + pipeline
from media_index.index_writer import INDEX_ORDERS, IndexWriter  # index reads
from media_index.store import PersistenceError, RedisStore  # store wrapper
from media_index.vocabulary import FacetVocabularyStore  # vocabulary reads

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Media Index API", version="1.0.0")  # web app

# Globals holding the wired components and measured startup time
CATALOG: Optional[MovieCatalog] = None
VOCABULARIES: Optional[FacetVocabularyStore] = None
INDEX: Optional[IndexWriter] = None
STARTUP_TIME_S: float = 0.0


class IngestRequest(BaseModel):
	details: List[Dict]  # raw detail records, upstream shape


class IngestResponse(BaseModel):
	received: int  # records in the batch
	elapsed_ms: float  # server-side ingestion time
	error: Optional[str] = None  # last store error, if any


class FacetsResponse(BaseModel):
	pid: int
	facets: Dict[str, List[str]]  # facet -> tokens, plus "sort"


class IndexResponse(BaseModel):
	pid: int
	order: str
	records: List[Dict]  # ascending by the index's sort key


def init_services(store: RedisStore):
	"""Wire every component against one store."""
	global CATALOG, VOCABULARIES, INDEX
	CATALOG = MovieCatalog(store)
	VOCABULARIES = CATALOG.pipeline.vocabularies
	INDEX = CATALOG.pipeline.index_writer


@app.on_event("startup")
async def startup_event():
	"""Connect to the store and build the components."""
	global STARTUP_TIME_S
	start = time.time()
	init_services(RedisStore.from_url(config.REDIS_URL))
	STARTUP_TIME_S = time.time() - start
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")


@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",
		"ready": CATALOG is not None,
		"startup_seconds": round(STARTUP_TIME_S, 2),
	}


def _require_ready():
	if CATALOG is None:
		logger.warning("[API] Request received before startup finished")
		raise HTTPException(status_code=503, detail="index not initialized")


@app.post("/details", response_model=IngestResponse)
def ingest_details(req: IngestRequest):
	"""Snapshot and index a batch; store errors are reported, not raised."""
	_require_ready()
	start = time.time()
	error = CATALOG.save_details(req.details)
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /details ingested {len(req.details)} records in {elapsed_ms:.2f} ms")
	return IngestResponse(received=len(req.details), elapsed_ms=round(elapsed_ms, 2), error=str(error) if error else None)


@app.get("/facets/{pid}", response_model=FacetsResponse)
def facets(pid: int):
	_require_ready()
	try:
		return FacetsResponse(pid=pid, facets=VOCABULARIES.as_filters(pid))
	except PersistenceError as e:
		logger.warning(f"[API] /facets/{pid} failed: {e}")
		raise HTTPException(status_code=502, detail=str(e))


@app.get("/index/{order}/{pid}", response_model=IndexResponse)
def index_range(order: str, pid: int, start: int = 0, stop: int = -1):
	_require_ready()
	if order not in INDEX_ORDERS:
		raise HTTPException(status_code=404, detail=f"unknown order '{order}'")
	try:
		records = INDEX.read_range(order, pid, start, stop)
	except PersistenceError as e:
		logger.warning(f"[API] /index/{order}/{pid} failed: {e}")
		raise HTTPException(status_code=502, detail=str(e))
	return IndexResponse(pid=pid, order=order, records=records)
