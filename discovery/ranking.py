"""
Ranking module.
Scores query relevance per item, then orders and windows the result list.
"""

from typing import Callable, Dict, List, Optional, Sequence

from .models import CatalogItem, SearchResult
from .constants import DEFAULT_LIMIT

from loguru import logger


class Ranker:
	"""
	Computes relevance from query-term matches, weighted by the field that matched:
	- title: 3 points
	- description only: 2 points
	- actors/tags only: 1 point
	The per-token sum is divided by the token count.
	"""

	def __init__(
		self,
		title_weight: float = 3.0,
		description_weight: float = 2.0,
		metadata_weight: float = 1.0,
	):
		self.title_weight = title_weight
		self.description_weight = description_weight
		self.metadata_weight = metadata_weight

		# Sort key resolution; unknown keys fall back to relevance
		self._sort_keys: Dict[str, Callable[[SearchResult], object]] = {
			'relevance': lambda r: r.relevance_score or 0.0,
			'title': lambda r: r.item.title.lower(),
			'date': lambda r: r.item.release_year or 0,
			'rating': lambda r: r.item.rating or 0.0,
			'popularity': lambda r: r.item.popularity_score or 0.0,
		}

	def relevance(self, item: CatalogItem, tokens: Sequence[str]) -> float:
		"""
		Normalized relevance of one item for already-tokenized, lower-cased query terms.
		Returns 0.0 when no token matches any scored field.
		"""
		if not tokens:
			return 0.0

		title = item.title.lower()
		description = (item.description or '').lower()
		metadata = ' '.join(item.actors + item.tags).lower()

		total = 0.0
		for token in tokens:
			if token in title:
				total += self.title_weight
			elif token in description:
				total += self.description_weight
			elif token in metadata:
				total += self.metadata_weight
		return total / len(tokens)

	def sort(self, results: List[SearchResult], sort_by: str = 'relevance', sort_order: str = 'desc') -> List[SearchResult]:
		"""
		Order results by the requested key. Descending unless sort_order is 'asc'.
		Equal keys keep their incoming (catalog) order.
		"""
		key = self._sort_keys.get(sort_by)
		if key is None:
			logger.debug(f"[Ranker] Unknown sort key '{sort_by}', falling back to relevance")
			key = self._sort_keys['relevance']
		return sorted(results, key=key, reverse=(sort_order != 'asc'))


def paginate(results: List[SearchResult], offset: int = 0, limit: Optional[int] = None) -> List[SearchResult]:
	"""Return the window [offset, offset + limit); an offset past the end yields an empty page."""
	offset = max(0, offset or 0)
	limit = max(0, limit or DEFAULT_LIMIT)
	return results[offset:offset + limit]
