"""
Data loading module.
Reads raw detail records and list-page items from JSON Lines files.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
from typing import List, Dict  # type hints
from pathlib import Path  # filesystem-safe paths

# List-page item record
from .models import MovieListItem  # structured list entry

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Loads upstream records from JSONL files. Detail records stay as raw dictionaries;
	normalization happens later in the pipeline.
	"""

	def _read_jsonl(self, filepath: str) -> List[Dict]:
		"""Parse each non-blank line into a dict, skipping malformed ones."""
		records = []  # accumulator for parsed objects
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading records from {filepath}...")  # log action

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				line = line.strip()
				if not line:  # tolerate blank lines
					continue
				try:
					data = json.loads(line)  # parse JSON object per line
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
					continue  # move on
				if not isinstance(data, dict):  # arrays or scalars are not records
					logger.warning(f"[DataLoader] Skipping non-object at line {line_num}")
					continue
				records.append(data)  # collect

		logger.info(f"[DataLoader] Successfully loaded {len(records)} records.")  # summary
		return records  # return list

	def load_details_from_jsonl(self, filepath: str) -> List[Dict]:
		"""Load raw detail records (one JSON object per line)."""
		return self._read_jsonl(filepath)

	def load_list_items_from_jsonl(self, filepath: str) -> List[MovieListItem]:
		"""Load list-page items, skipping entries whose ids are not numeric."""
		items = []  # parsed items
		for data in self._read_jsonl(filepath):
			try:
				items.append(MovieListItem.from_dict(data))  # dict -> MovieListItem
			except (TypeError, ValueError) as e:
				logger.warning(f"[DataLoader] Skipping list item {data.get('id')!r}: {e}")  # bad id or cid
		return items
