"""
Catalog loading and normalization module.
Handles reading movie/music records from JSONL files or raw dicts and cleaning them up.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
from typing import Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Fuzzy matching for genre labels that are close to, but not exactly, canonical
from rapidfuzz import process, fuzz  # fuzzy matching utilities

# Import our catalog record and the canonical genre vocabulary
from .models import CatalogItem  # structured catalog record
from .constants import CONTENT_TYPES, GENRES, GENRE_SYNONYMS  # vocabulary

# Console logging
from loguru import logger  # console logger


class CatalogLoader:
	"""
	Handles loading and normalization of catalog records.
	"""

	GENRE_FUZZY_THRESHOLD = 88  # minimum rapidfuzz ratio to accept a fuzzy genre match

	def __init__(self):
		"""Prepare lowercase lookups for genre canonicalization."""
		self.genre_synonyms = {k.lower(): v for k, v in GENRE_SYNONYMS.items()}  # variant -> canonical
		self._canonical = {g.lower(): g for g in GENRES}  # lowercase -> canonical
		self._genre_list = list(self._canonical.keys())  # fuzzy match choices

	def load_items_from_jsonl(self, filepath: str) -> List[CatalogItem]:
		"""
		Load catalog items from a JSON Lines file where each line is one JSON object.
		Lines that fail to parse are skipped with a warning.
		"""
		items = []  # accumulator for parsed CatalogItem objects
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Catalog file not found: {filepath}")

		logger.info(f"[Loader] Loading catalog from {filepath}...")  # log action

		# Read line-by-line so large catalogs do not need to fit in one JSON document
		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # tolerate blank lines
					continue
				try:
					data = json.loads(line.strip())  # parse JSON object per line
					items.append(self.parse_item(data))  # convert dict -> CatalogItem
				except json.JSONDecodeError as e:
					logger.warning(f"[Loader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
					continue
				except (KeyError, TypeError, ValueError) as e:
					logger.warning(f"[Loader] Error parsing item at line {line_num}: {e}")  # bad record
					continue

		logger.info(f"[Loader] Successfully loaded {len(items)} items.")  # summary
		return items

	def parse_item(self, data: Dict) -> CatalogItem:
		"""
		Convert a raw dictionary into a CatalogItem.
		Accepts snake_case or camelCase keys; raises ValueError for records without id/title/type.
		"""
		item_id = str(data.get('id') or '').strip()  # ensure ID is string
		title = (data.get('title') or '').strip()  # keep display casing
		content_type = (data.get('type') or '').strip().lower()  # discriminant
		if not item_id or not title:
			raise ValueError("record is missing 'id' or 'title'")
		if content_type not in CONTENT_TYPES:
			raise ValueError(f"unknown content type '{content_type}' for item {item_id}")

		return CatalogItem(
			id=item_id,
			title=title,
			type=content_type,
			genre=self.normalize_genre(data.get('genre', '')),  # canonical genre
			language=(data.get('language') or '').strip(),
			description=(data.get('description') or '').strip() or None,
			release_year=self._parse_number(self._pick(data, 'release_year', 'releaseYear'), int),
			duration=self._parse_number(data.get('duration'), float),
			rating=self._parse_number(data.get('rating'), float),
			actors=self._parse_comma_separated(data.get('actors')),
			tags=self._parse_comma_separated(data.get('tags')),
			thumbnail_url=self._pick(data, 'thumbnail_url', 'thumbnailUrl'),
			popularity_score=self._parse_number(self._pick(data, 'popularity_score', 'popularityScore'), float),
		)

	def normalize_genre(self, genre: str) -> str:
		"""
		Map a raw genre to its canonical form: synonyms first, then exact, then fuzzy.
		Unknown genres fall back to Title Case.
		"""
		if not genre:  # missing genre
			return ''

		genre_lower = genre.strip().lower()  # prepare for lookup
		if genre_lower in self.genre_synonyms:
			return self.genre_synonyms[genre_lower]
		if genre_lower in self._canonical:
			return self._canonical[genre_lower]

		# Fuzzy match to absorb typos like "thriler" or "electronica"
		match = process.extractOne(genre_lower, self._genre_list, scorer=fuzz.ratio)
		if match and match[1] >= self.GENRE_FUZZY_THRESHOLD:
			logger.debug(f"[Loader] Genre fuzzy match: '{genre}' -> '{self._canonical[match[0]]}' (score={match[1]:.0f})")
			return self._canonical[match[0]]

		return genre.strip().title()

	def _pick(self, data: Dict, *keys: str):
		"""Return the first present value among alternative key spellings."""
		for key in keys:
			if data.get(key) is not None:
				return data[key]
		return None

	def _parse_number(self, value, cast) -> Optional[float]:
		"""Cast numeric fields, keeping None (and empty strings) as missing."""
		if value is None or value == '':
			return None
		return cast(value)

	def _parse_comma_separated(self, value) -> List[str]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a list of clean strings.
		"""
		if value is None:  # missing field
			return []
		if isinstance(value, list):  # already a list
			return [str(v).strip() for v in value if v]
		if isinstance(value, str):  # comma-separated string
			return [v.strip() for v in value.split(',') if v.strip()]
		return []  # any other type becomes empty
