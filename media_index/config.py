"""
Configuration module.
Reads runtime settings from the environment (optionally a .env file) and defines store key templates.
"""

import os  # environment lookups

from dotenv import load_dotenv  # optional .env support

load_dotenv()

# Store connection
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Detail and basic-info snapshots are refreshed weekly, kept for ten days
DETAIL_TTL_DAYS = int(os.getenv("DETAIL_TTL_DAYS", "10"))

# Worker threads used by the batch pipeline; 1 keeps facet tokens in batch arrival order
INGEST_WORKERS = int(os.getenv("INGEST_WORKERS", "1"))

# Exact token equality instead of substring containment for facet membership
STRICT_FACET_MEMBERSHIP = os.getenv("STRICT_FACET_MEMBERSHIP", "false").lower() == "true"

# Upstream update-time format, interpreted in local time
UPDATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Vocabulary seeding
YEAR_SEED_SPAN = 12  # current year plus the 11 before it
SORT_OPTIONS = ["Time", "Db", "Score"]

# Key templates
MOVIE_LIST_KEY = "MovieList:Cid{cid}"
MOVIE_LIST_PATTERN = "MovieList:Cid*"
MOVIE_DETAIL_KEY = "MovieDetail:Cid{cid}:Id{mid}"
MOVIE_BASIC_INFO_KEY = "MovieBasicInfo:Cid{cid}:Id{mid}"
SEARCH_TIME_KEY = "Search:TimeList:Pid{pid}"
SEARCH_SCORE_KEY = "Search:ScoreList:Pid{pid}"
SEARCH_RANK_KEY = "Search:RankList:Pid{pid}"
SEARCH_FACET_KEY = "Search:Keys:Pid{pid}"
