"""
Discovery engine module.
Runs filtered keyword search, blends recommendation strategies, and tracks trending queries.
"""

import asyncio  # concurrent catalog lookups
from typing import Awaitable, List, Optional  # type annotations for clarity

# Import project modules for data structures and components
from .models import (  # core data classes
	CatalogItem,
	Recommendation,
	RecommendationContext,
	SearchFilters,
	SearchResult,
	SearchSuggestion,
	TrendingEntry,
)
from .catalog import CatalogAccessor, HttpCatalog, InMemoryCatalog, SAMPLE_ITEMS  # catalog access
from .storage import DurableStore, InMemoryStore, JsonFileStore  # persisted state
from .filters import apply_filters, tokenize  # filter pipeline
from .ranking import Ranker, paginate  # relevance, sort, pagination
from .strategies import STRATEGIES, recently_watched, trending_recommendations  # generators
from .blending import apply_parental_controls, blend, scale_confidence  # merge logic
from .trending import TrendingTracker, genre_suggestions  # query counters
from .config import Settings  # runtime settings
from .constants import (  # tuning constants
	CONTENT_TYPES,
	FEED_LIMIT,
	FEED_WEIGHTS,
	MIN_SUGGESTION_LENGTH,
	RECOMMENDATION_LIMIT,
)

# Import loguru for console logging
from loguru import logger  # simple structured logger

TRENDING_FEED_QUERIES = 5  # trending queries that seed the personalized feed
SUGGESTION_TRENDING_LIMIT = 3
SUGGESTION_CONTENT_LIMIT = 5


class DiscoveryEngine:
	"""
	High-level discovery API combining catalog access, filtering, ranking, recommendations,
	and trending searches. Construct once per process and share the instance.

	Public operations never raise on catalog or storage failures; they log and return
	an empty (but well-typed) result instead.
	"""
	def __init__(
		self,
		catalog: CatalogAccessor,  # external item source
		store: Optional[DurableStore] = None,  # where trending/history persist
		ranker: Optional[Ranker] = None,  # relevance + sort logic
		tracker: Optional[TrendingTracker] = None,  # query counters
	):
		# Keep collaborators; defaults give a fully in-memory engine
		self.catalog = catalog  # catalog reference
		self.store = store if store is not None else InMemoryStore()  # state store
		self.ranker = ranker or Ranker()  # ranker instance
		# Trending state is loaded exactly once, here
		self.tracker = tracker or TrendingTracker(self.store)  # tracker instance
		logger.info(f"[Engine] Ready with catalog={type(self.catalog).__name__} store={type(self.store).__name__}")

	# ------------------------------------------------------------------
	# Search
	# ------------------------------------------------------------------
	async def _fetch_candidates(self, content_type: str) -> List[CatalogItem]:
		"""Base candidate pool for one content type, or both when 'all' (movies first)."""
		types = (content_type,) if content_type in CONTENT_TYPES else CONTENT_TYPES  # resolve selector
		batches = await asyncio.gather(*(self.catalog.fetch_by_type(t) for t in types))  # parallel fetch
		return [item for batch in batches for item in batch]  # flatten in type order

	async def search(self, filters: SearchFilters, record: bool = True) -> List[SearchResult]:
		"""
		Filter, score, sort, and paginate catalog items.
		A non-blank query is recorded as a trending search unless ``record`` is False.
		"""
		tokens = tokenize(filters.query)  # lower-cased whitespace tokens
		logger.debug(
			f"[Engine] Search | tokens={tokens} type={filters.type} genres={list(filters.genres)} sort={filters.sort_by}/{filters.sort_order}"
		)

		# Catalog failures are fail-soft: log and hand back an empty page
		try:
			candidates = await self._fetch_candidates(filters.type)  # raw pool
		except Exception as e:
			logger.error(f"[Engine] Catalog unavailable, returning no results: {e}")
			return []
		logger.debug(f"[Engine] Retrieved {len(candidates)} candidates")  # count

		results: List[SearchResult] = []  # accumulator
		for item in apply_filters(candidates, filters, tokens):  # each surviving item
			score = None  # unscored without a query
			if tokens:
				score = self.ranker.relevance(item, tokens)  # weighted field matches
				if score <= 0:  # matched only outside the scored fields
					logger.debug(f"[Engine] Dropped zero-relevance item | item={item.title} ({item.id})")
					continue
			results.append(SearchResult(item=item, relevance_score=score))  # collect

		# Order and window the survivors
		ordered = self.ranker.sort(results, filters.sort_by, filters.sort_order)  # sort
		page = paginate(ordered, filters.offset, filters.limit)  # window

		if record and tokens:
			self.tracker.record_query(filters.query)  # trending side effect, as typed

		logger.info(f"[Engine] Returning {len(page)} of {len(ordered)} matching results")  # summary
		return page

	async def _lookup(self, filters: SearchFilters) -> List[SearchResult]:
		"""Search used internally by strategies; never counts toward trending."""
		return await self.search(filters, record=False)

	# ------------------------------------------------------------------
	# Recommendations
	# ------------------------------------------------------------------
	async def _guarded(self, name: str, pending: Awaitable[List[Recommendation]]) -> List[Recommendation]:
		"""Await one generator; any failure contributes nothing instead of propagating."""
		try:
			recs = await pending
		except Exception:
			logger.exception(f"[Engine] Strategy '{name}' failed; skipping it")
			return []
		logger.debug(f"[Engine] Strategy '{name}' produced {len(recs)} candidates")
		return recs

	async def get_recommendations(self, context: RecommendationContext) -> List[Recommendation]:
		"""Collaborative, similarity, then contextual candidates; deduped, ranked by confidence, top 20."""
		groups = await asyncio.gather(*(
			self._guarded(name, strategy(context, self._lookup))
			for name, strategy in STRATEGIES.items()
		))
		groups = [apply_parental_controls(g, context.parental_controls) for g in groups]
		recs = blend(groups, RECOMMENDATION_LIMIT)
		logger.info(f"[Engine] Returning {len(recs)} recommendations")
		return recs

	async def get_personalized_feed(self, context: RecommendationContext) -> List[Recommendation]:
		"""
		Home feed mixing trending, personalized, and recently-watched families.
		Each family's confidence is scaled by its weight before blending (top 30).
		"""
		queries = [entry.query for entry in self.tracker.trending(TRENDING_FEED_QUERIES)]
		trending, personalized, recent = await asyncio.gather(
			self._guarded('trending', trending_recommendations(queries, self._lookup)),
			self.get_recommendations(context),
			self._guarded('recently_watched', recently_watched(context, self._lookup)),
		)
		controls = context.parental_controls
		feed = blend(
			[
				scale_confidence(apply_parental_controls(trending, controls), FEED_WEIGHTS['trending']),
				scale_confidence(personalized, FEED_WEIGHTS['personalized']),
				scale_confidence(apply_parental_controls(recent, controls), FEED_WEIGHTS['recently_watched']),
			],
			FEED_LIMIT,
		)
		logger.info(f"[Engine] Personalized feed has {len(feed)} items")
		return feed

	# ------------------------------------------------------------------
	# Suggestions, trending, history
	# ------------------------------------------------------------------
	async def get_search_suggestions(self, query: str, limit: int = 10) -> List[SearchSuggestion]:
		"""Autocomplete from trending queries, live catalog hits, and genre names."""
		if not query or len(query) < MIN_SUGGESTION_LENGTH:
			return []

		suggestions = self.tracker.match_queries(query, SUGGESTION_TRENDING_LIMIT)
		hits = await self._lookup(SearchFilters(query=query, limit=SUGGESTION_CONTENT_LIMIT))
		suggestions.extend(
			SearchSuggestion(
				id=f"content-{r.item.id}",
				text=r.item.title,
				type=r.item.type,
				popularity=r.item.popularity_score or 0.0,
				category=r.item.genre,
			)
			for r in hits
		)
		suggestions.extend(genre_suggestions(query))
		suggestions.sort(key=lambda s: s.popularity, reverse=True)
		return suggestions[:limit]

	def get_trending_searches(self, limit: int = 10) -> List[TrendingEntry]:
		return self.tracker.trending(limit)

	def get_popular_searches(self, limit: int = 10) -> List[TrendingEntry]:
		return self.tracker.popular(limit)

	def get_search_history(self, limit: int = 10) -> List[str]:
		return self.tracker.recent_queries(limit)

	def clear_search_history(self) -> None:
		self.tracker.clear_history()

	# ------------------------------------------------------------------
	# Telemetry (fire-and-forget)
	# ------------------------------------------------------------------
	def track_search_click(self, query: str, result_id: str) -> None:
		logger.bind(event='search_click', query=query, result_id=result_id).info(
			f"[Engine] Search click tracked | query='{query}' result={result_id}"
		)

	def track_recommendation_click(self, recommendation_id: str, reason: str) -> None:
		logger.bind(event='recommendation_click', recommendation_id=recommendation_id, reason=reason).info(
			f"[Engine] Recommendation click tracked | id={recommendation_id} reason='{reason}'"
		)


def build_engine(settings: Settings) -> DiscoveryEngine:
	"""Wire catalog, store, and engine from settings."""
	if settings.catalog_url:
		logger.info(f"[Engine] Using HTTP catalog at {settings.catalog_url}")
		catalog: CatalogAccessor = HttpCatalog(settings.catalog_url, timeout=settings.catalog_timeout)
	elif settings.catalog_path:
		catalog = InMemoryCatalog.from_jsonl(settings.catalog_path)
		logger.info(f"[Engine] Loaded {catalog.size()} catalog items from {settings.catalog_path}")
	else:
		logger.info("[Engine] No catalog configured; using built-in sample items")
		catalog = InMemoryCatalog(SAMPLE_ITEMS)

	store: DurableStore = JsonFileStore(settings.state_path) if settings.state_path else InMemoryStore()
	return DiscoveryEngine(catalog, store)
