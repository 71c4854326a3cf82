"""
Data models for the media index.
Defines the canonical search record, the per-partition facet vocabulary, and the snapshot records.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field, fields  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Dict, List, Optional  # mappings, lists, and optional values
import json  # compact serialization of records stored as set members

from . import config  # sort options


# Facets merged from incoming records, in hash field order
MERGED_FACETS = ("category", "tag", "area", "language")
# Facets fixed at seed time
SEEDED_FACETS = ("year", "initial")
# Hash field that carries the sort options
SORT_FIELD = "sort"


def _to_json_dict(obj, names: Dict[str, str]) -> Dict:
	"""Map dataclass attributes to their wire names."""
	return {names.get(f.name, f.name): getattr(obj, f.name) for f in fields(obj)}


@dataclass(frozen=True)
class SearchRecord:
	"""
	Canonical, defensively-parsed representation of one raw detail record.
	Built once per ingestion and written unchanged to every sorted index.
	"""
	movie_id: int  # unique within its category partition
	category_id: int  # owning category
	parent_category_id: int  # top-level partition for vocabularies and indices
	name: str  # title
	category_name: str  # owning category's display name
	class_tag: str  # content tags, possibly "/"- or ","-delimited
	area: str  # regions, possibly delimited
	language: str  # languages, possibly delimited
	year: int  # 0 when the source year did not parse
	initial: str  # initial letter
	score: float  # 0.0 when the source score did not parse
	rank: int  # external popularity id, ordering only
	timestamp: int  # update time in epoch seconds, 0 when malformed
	state: str  # passthrough
	remarks: str  # passthrough
	release_rank: int  # creation timestamp standing in for the release date

	JSON_NAMES = {
		"movie_id": "movieId",
		"category_id": "categoryId",
		"parent_category_id": "parentCategoryId",
		"category_name": "categoryName",
		"class_tag": "classTag",
		"release_rank": "releaseRank",
	}

	def to_dict(self) -> Dict:
		return _to_json_dict(self, self.JSON_NAMES)

	def to_json(self) -> str:
		# ensure_ascii off so CJK titles stay readable in the store
		return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


@dataclass
class FacetVocabulary:
	"""
	Accumulated facet values for one parent-category partition.

	Tokens are held as ordered lists (arrival order) and exposed in the flattened,
	comma-joined form that consumers of the hash document read. Membership checks
	follow the flattened form: by default a token counts as present when it occurs
	anywhere inside the joined string, so "A" is considered present once "USA" is.
	Pass strict=True to compare whole tokens instead.
	"""
	category: List[str] = field(default_factory=list)
	tag: List[str] = field(default_factory=list)
	area: List[str] = field(default_factory=list)
	language: List[str] = field(default_factory=list)
	year: List[str] = field(default_factory=list)
	initial: List[str] = field(default_factory=list)
	sort_options: List[str] = field(default_factory=lambda: list(config.SORT_OPTIONS))

	def tokens(self, facet: str) -> List[str]:
		"""Return the live token list for a facet name."""
		if facet not in MERGED_FACETS + SEEDED_FACETS:
			raise ValueError(f"Unknown facet: {facet}")
		return getattr(self, facet)

	def flattened(self, facet: str) -> str:
		"""Comma-joined form of a facet, with no leading or trailing comma."""
		return ",".join(self.tokens(facet)).strip(",")

	def contains(self, facet: str, token: str, strict: bool = False) -> bool:
		if strict:
			return token in self.tokens(facet)
		return token in self.flattened(facet)  # substring containment

	def add(self, facet: str, token: str, strict: bool = False) -> bool:
		"""Append a token unless already present; returns True when appended."""
		if not token or self.contains(facet, token, strict=strict):
			return False
		self.tokens(facet).append(token)
		return True

	def to_hash(self) -> Dict[str, str]:
		"""Flatten every facet into the hash document layout."""
		doc = {facet: self.flattened(facet) for facet in MERGED_FACETS + SEEDED_FACETS}
		doc[SORT_FIELD] = ",".join(self.sort_options)
		return doc

	@classmethod
	def from_hash(cls, doc: Dict[str, str]) -> "FacetVocabulary":
		"""Rebuild a vocabulary from a hash document; missing fields become empty."""
		def split(value: Optional[str]) -> List[str]:
			return [t for t in (value or "").split(",") if t]

		vocab = cls(**{facet: split(doc.get(facet)) for facet in MERGED_FACETS + SEEDED_FACETS})
		if doc.get(SORT_FIELD):
			vocab.sort_options = split(doc[SORT_FIELD])
		return vocab


@dataclass
class MovieListItem:
	"""One entry from an upstream list page."""
	id: int
	name: str
	cid: int
	c_name: str = ""
	en_name: str = ""
	time: str = ""  # upstream update time, kept as text
	remarks: str = ""  # update status or quality
	play_from: str = ""  # playback source

	JSON_NAMES = {"c_name": "CName", "en_name": "enName", "play_from": "playFrom"}

	@classmethod
	def from_dict(cls, data: Dict) -> "MovieListItem":
		return cls(
			id=int(data.get("id") or 0),
			name=data.get("name", ""),
			cid=int(data.get("cid") or 0),
			c_name=data.get("CName", ""),
			en_name=data.get("enName", ""),
			time=data.get("time", ""),
			remarks=data.get("remarks", ""),
			play_from=data.get("playFrom", ""),
		)

	def to_json(self) -> str:
		return json.dumps(_to_json_dict(self, self.JSON_NAMES), ensure_ascii=False, separators=(",", ":"))


@dataclass
class MovieBasicInfo:
	"""Short snapshot of a detail record used by listing pages."""
	id: int = 0
	cid: int = 0
	pid: int = 0
	name: str = ""
	sub_title: str = ""
	c_name: str = ""
	state: str = ""
	picture: str = ""
	actor: str = ""
	director: str = ""
	blurb: str = ""
	remarks: str = ""
	area: str = ""
	year: str = ""

	JSON_NAMES = {"sub_title": "subTitle", "c_name": "cName"}

	@classmethod
	def from_dict(cls, data: Dict) -> "MovieBasicInfo":
		"""Build from the flat wire form, ignoring unknown keys."""
		kwargs = {}
		for f in fields(cls):
			name = cls.JSON_NAMES.get(f.name, f.name)
			if name in data:
				kwargs[f.name] = data[name]
		return cls(**kwargs)

	@classmethod
	def from_detail(cls, detail: Dict) -> "MovieBasicInfo":
		"""Pick the basic fields out of a raw detail record (top level plus descriptor)."""
		descriptor = detail.get("descriptor") or {}
		return cls(
			id=int(detail.get("id") or 0),
			cid=int(detail.get("cid") or 0),
			pid=int(detail.get("pid") or 0),
			name=detail.get("name", ""),
			sub_title=descriptor.get("subTitle", ""),
			c_name=descriptor.get("cName", ""),
			state=descriptor.get("state", ""),
			picture=detail.get("picture", ""),
			actor=descriptor.get("actor", ""),
			director=descriptor.get("director", ""),
			blurb=descriptor.get("blurb", ""),
			remarks=descriptor.get("remarks", ""),
			area=descriptor.get("area", ""),
			year=descriptor.get("year", ""),
		)

	def to_json(self) -> str:
		return json.dumps(_to_json_dict(self, self.JSON_NAMES), ensure_ascii=False, separators=(",", ":"))
