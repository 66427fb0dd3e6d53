"""
Catalog accessor module.
The catalog itself is an external store; these classes fetch normalized items from it by type and id.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

import requests  # HTTP client for remote catalogs

from .data_loader import CatalogLoader
from .models import CatalogItem
from .constants import CONTENT_TYPES

from loguru import logger


class DiscoveryError(Exception):
	"""Base class for errors raised inside the discovery engine."""


class CatalogUnavailable(DiscoveryError):
	"""The catalog could not be reached or returned an unusable response."""


class CatalogAccessor:
	"""
	Read-only access to movie and music items.
	Subclasses implement the two fetch coroutines; the engine never writes to the catalog.
	"""

	async def fetch_by_type(self, content_type: str, item_id: Optional[str] = None) -> List[CatalogItem]:
		raise NotImplementedError

	async def fetch_by_id(self, content_type: str, item_id: str) -> Optional[CatalogItem]:
		raise NotImplementedError


class InMemoryCatalog(CatalogAccessor):
	"""Catalog held in process memory, keyed by content type. Preserves insertion order."""

	def __init__(self, items: Iterable[CatalogItem]):
		self._by_type: Dict[str, List[CatalogItem]] = {t: [] for t in CONTENT_TYPES}
		for item in items:
			if item.type not in self._by_type:
				logger.warning(f"[Catalog] Ignoring item {item.id} with unknown type '{item.type}'")
				continue
			self._by_type[item.type].append(item)
		counts = ' | '.join(f"{t}={len(v)}" for t, v in self._by_type.items())
		logger.debug(f"[Catalog] In-memory catalog ready | {counts}")

	@classmethod
	def from_jsonl(cls, filepath: str) -> 'InMemoryCatalog':
		"""Load a JSONL catalog file through CatalogLoader."""
		return cls(CatalogLoader().load_items_from_jsonl(filepath))

	def size(self) -> int:
		return sum(len(v) for v in self._by_type.values())

	async def fetch_by_type(self, content_type: str, item_id: Optional[str] = None) -> List[CatalogItem]:
		items = self._by_type.get(content_type, [])
		if item_id is not None:
			return [item for item in items if item.id == item_id]
		return list(items)

	async def fetch_by_id(self, content_type: str, item_id: str) -> Optional[CatalogItem]:
		for item in self._by_type.get(content_type, []):
			if item.id == item_id:
				return item
		return None


class HttpCatalog(CatalogAccessor):
	"""
	Catalog served over HTTP as JSON.

	Expected routes, relative to ``base_url``:
	  GET /{type}?id=...   -> list of item objects
	  GET /{type}/{id}     -> one item object, 404 when unknown

	Requests are blocking, so each call runs in a worker thread. Transport errors and
	non-JSON payloads surface as CatalogUnavailable; the engine turns those into empty results.
	"""

	def __init__(self, base_url: str, timeout: float = 5.0):
		self.base_url = base_url.rstrip('/')
		self.timeout = timeout
		self.loader = CatalogLoader()

	def _get(self, path: str, params: Optional[Dict] = None):
		url = f"{self.base_url}/{path}"
		try:
			resp = requests.get(url, params=params, timeout=self.timeout)
			if resp.status_code == 404:
				return None
			resp.raise_for_status()
			return resp.json()
		except requests.RequestException as e:
			raise CatalogUnavailable(f"GET {url} failed: {e}") from e
		except ValueError as e:
			raise CatalogUnavailable(f"GET {url} returned invalid JSON: {e}") from e

	def _parse_many(self, payload) -> List[CatalogItem]:
		if not isinstance(payload, list):
			raise CatalogUnavailable(f"expected a list of items, got {type(payload).__name__}")
		items = []
		for raw in payload:
			try:
				items.append(self.loader.parse_item(raw))
			except (AttributeError, KeyError, TypeError, ValueError) as e:
				logger.warning(f"[Catalog] Skipping malformed item from {self.base_url}: {e}")
		return items

	async def fetch_by_type(self, content_type: str, item_id: Optional[str] = None) -> List[CatalogItem]:
		params = {'id': item_id} if item_id is not None else None
		payload = await asyncio.to_thread(self._get, content_type, params)
		if payload is None:
			return []
		return self._parse_many(payload)

	async def fetch_by_id(self, content_type: str, item_id: str) -> Optional[CatalogItem]:
		payload = await asyncio.to_thread(self._get, f"{content_type}/{item_id}")
		if payload is None:
			return None
		try:
			return self.loader.parse_item(payload)
		except (AttributeError, KeyError, TypeError, ValueError) as e:
			raise CatalogUnavailable(f"malformed item {item_id}: {e}") from e


# Two movies and two tracks used when no catalog is configured
SAMPLE_ITEMS: List[CatalogItem] = [
	CatalogItem(
		id='1',
		title='The Dark Knight',
		description='Batman faces the Joker in this epic superhero film',
		type='movie',
		genre='Action',
		language='English',
		release_year=2008,
		duration=152,
		rating=9.0,
		actors=['Christian Bale', 'Heath Ledger', 'Aaron Eckhart'],
		tags=['superhero', 'action', 'drama', 'crime'],
		thumbnail_url='/thumbnails/dark-knight.jpg',
		popularity_score=0.95,
	),
	CatalogItem(
		id='2',
		title='Inception',
		description='A mind-bending thriller about dreams within dreams',
		type='movie',
		genre='Sci-Fi',
		language='English',
		release_year=2010,
		duration=148,
		rating=8.8,
		actors=['Leonardo DiCaprio', 'Marion Cotillard', 'Tom Hardy'],
		tags=['sci-fi', 'thriller', 'mind-bending', 'action'],
		thumbnail_url='/thumbnails/inception.jpg',
		popularity_score=0.92,
	),
	CatalogItem(
		id='3',
		title='Bohemian Rhapsody',
		description="Queen's iconic rock opera masterpiece",
		type='music',
		genre='Rock',
		language='English',
		release_year=1975,
		duration=5.9,
		rating=9.5,
		actors=['Queen'],
		tags=['rock', 'opera', 'classic', 'progressive'],
		thumbnail_url='/thumbnails/bohemian-rhapsody.jpg',
		popularity_score=0.98,
	),
	CatalogItem(
		id='4',
		title='Hotel California',
		description="The Eagles' legendary rock ballad",
		type='music',
		genre='Rock',
		language='English',
		release_year=1976,
		duration=6.3,
		rating=9.2,
		actors=['Eagles'],
		tags=['rock', 'ballad', 'classic', 'country-rock'],
		thumbnail_url='/thumbnails/hotel-california.jpg',
		popularity_score=0.94,
	),
]
