"""
Recommendation strategies.

Each strategy is a coroutine ``(context, lookup) -> List[Recommendation]`` where ``lookup``
runs a catalog search without recording it as a trending query. Strategies whose required
context is missing return an empty list.
"""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Sequence

from .models import (
	CurrentContent,
	Recommendation,
	RecommendationContext,
	SearchFilters,
	SearchResult,
)
from .constants import (
	COLLABORATIVE_CONFIDENCE,
	DEVICE_CONFIDENCE,
	DEVICE_PREFERENCES,
	SIMILARITY_CONFIDENCE,
	TIME_OF_DAY_CONFIDENCE,
	TIME_OF_DAY_GENRES,
	TIME_OF_DAY_LIMIT,
	TRENDING_CONFIDENCE,
)

from loguru import logger

Lookup = Callable[[SearchFilters], Awaitable[List[SearchResult]]]
Strategy = Callable[[RecommendationContext, Lookup], Awaitable[List[Recommendation]]]

TOP_GENRES = 3
COLLABORATIVE_LIMIT = 10
SIMILARITY_LIMIT = 10
RECENT_ITEMS = 5


async def collaborative(context: RecommendationContext, lookup: Lookup) -> List[Recommendation]:
	"""Recommend from the viewer's most-watched genres."""
	if not context.viewing_history:
		return []

	# most_common keeps first-encountered order among equal counts
	counts = Counter(entry.genre for entry in context.viewing_history)
	top_genres = [genre for genre, _ in counts.most_common(TOP_GENRES)]
	logger.debug(f"[Strategy] Collaborative top genres: {top_genres}")

	results = await lookup(SearchFilters(genres=top_genres, limit=COLLABORATIVE_LIMIT))
	reason = f"Because you watched {', '.join(top_genres)} content"
	return [
		Recommendation.from_result(
			r, reason, COLLABORATIVE_CONFIDENCE, collaborative_score=COLLABORATIVE_CONFIDENCE
		)
		for r in results
	]


async def similarity(context: RecommendationContext, lookup: Lookup) -> List[Recommendation]:
	"""Recommend items sharing the current item's genre and tags."""
	current = context.current_content
	if current is None:
		return []

	results = await lookup(SearchFilters(genres=[current.genre], tags=list(current.tags or []), limit=SIMILARITY_LIMIT))
	reason = f"Similar to {current.id}"
	return [
		Recommendation.from_result(r, reason, SIMILARITY_CONFIDENCE, similarity_score=SIMILARITY_CONFIDENCE)
		for r in results
		if r.item.id != current.id
	]


async def _time_of_day(time_of_day: str, lookup: Lookup) -> List[Recommendation]:
	genres = TIME_OF_DAY_GENRES.get(time_of_day)
	if not genres:
		logger.debug(f"[Strategy] No genres mapped for time of day '{time_of_day}'")
		return []
	results = await lookup(SearchFilters(genres=genres, limit=TIME_OF_DAY_LIMIT))
	reason = f"Perfect for {time_of_day}"
	return [
		Recommendation.from_result(r, reason, TIME_OF_DAY_CONFIDENCE, contextual_score=TIME_OF_DAY_CONFIDENCE)
		for r in results
	]


async def _device(device_type: str, lookup: Lookup) -> List[Recommendation]:
	preference = DEVICE_PREFERENCES.get(device_type)
	if not preference:
		logger.debug(f"[Strategy] No genres mapped for device '{device_type}'")
		return []
	genres, limit = preference
	results = await lookup(SearchFilters(genres=genres, limit=limit))
	reason = f"Great for {device_type}"
	return [
		Recommendation.from_result(r, reason, DEVICE_CONFIDENCE, contextual_score=DEVICE_CONFIDENCE)
		for r in results
	]


async def contextual(context: RecommendationContext, lookup: Lookup) -> List[Recommendation]:
	"""Time-of-day and device heuristics; each sub-rule runs only when its field is set."""
	pending = []
	if context.time_of_day:
		pending.append(_time_of_day(context.time_of_day, lookup))
	if context.device_type:
		pending.append(_device(context.device_type, lookup))
	if not pending:
		return []

	recommendations: List[Recommendation] = []
	for batch in await asyncio.gather(*pending):
		recommendations.extend(batch)
	return recommendations


# Fixed blending order: earlier strategies win id collisions
STRATEGIES: Dict[str, Strategy] = {
	'collaborative': collaborative,
	'similarity': similarity,
	'contextual': contextual,
}


async def trending_recommendations(queries: Sequence[str], lookup: Lookup) -> List[Recommendation]:
	"""Top search hit for each trending query."""
	if not queries:
		return []
	batches = await asyncio.gather(*(lookup(SearchFilters(query=q, limit=1)) for q in queries))
	return [
		Recommendation.from_result(r, 'Trending now', TRENDING_CONFIDENCE)
		for batch in batches
		for r in batch
	]


def _as_utc(timestamp: datetime) -> datetime:
	# Naive timestamps are read as UTC so they order against aware ones
	if timestamp.tzinfo is None:
		return timestamp.replace(tzinfo=timezone.utc)
	return timestamp.astimezone(timezone.utc)


async def recently_watched(context: RecommendationContext, lookup: Lookup) -> List[Recommendation]:
	"""Similarity recommendations seeded by the most recently watched items."""
	if not context.viewing_history:
		return []

	recent = sorted(context.viewing_history, key=lambda e: _as_utc(e.timestamp), reverse=True)[:RECENT_ITEMS]
	batches = await asyncio.gather(*(
		similarity(
			RecommendationContext(current_content=CurrentContent(id=e.id, type=e.type, genre=e.genre)),
			lookup,
		)
		for e in recent
	))
	return [rec for batch in batches for rec in batch]
