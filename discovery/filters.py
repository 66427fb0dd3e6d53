"""
Filter pipeline module.
Keyword matching plus structured filters (genre, language, people, tags, numeric ranges).
"""

from typing import List, Optional, Sequence

from .models import CatalogItem, SearchFilters

from loguru import logger


def tokenize(query: Optional[str]) -> List[str]:
	"""Lower-case a free-text query and split it on whitespace."""
	if not query:
		return []
	return query.lower().split()


def searchable_text(item: CatalogItem) -> str:
	"""Title, description, actors, and tags joined into one lower-cased string."""
	parts = [item.title, item.description or '']
	parts.extend(item.actors)
	parts.extend(item.tags)
	return ' '.join(parts).lower()


def matches_query(item: CatalogItem, tokens: Sequence[str]) -> bool:
	"""True when at least one token occurs as a substring of the item's searchable text."""
	text = searchable_text(item)
	return any(token in text for token in tokens)


def _any_contains(requested: Sequence[str], values: Sequence[str]) -> bool:
	# Case-insensitive: any requested value inside any candidate value
	lowered = [v.lower() for v in values]
	return any(r.lower() in v for r in requested for v in lowered)


def passes_filters(item: CatalogItem, filters: SearchFilters) -> bool:
	"""
	Apply the structured filters conjunctively.
	Within a multi-value dimension any match suffices; numeric ranges ignore missing values.
	"""
	if filters.genres and item.genre not in filters.genres:
		logger.debug(f"[Filter] Filtered out by genre | item={item.title} ({item.id}) | genre={item.genre} | required_any={list(filters.genres)}")
		return False

	if filters.languages and item.language not in filters.languages:
		logger.debug(f"[Filter] Filtered out by language | item={item.title} ({item.id}) | language={item.language}")
		return False

	if filters.release_year and filters.release_year.excludes(item.release_year):
		logger.debug(f"[Filter] Filtered out by year | item={item.title} ({item.id}) | year={item.release_year}")
		return False

	if filters.duration and filters.duration.excludes(item.duration):
		logger.debug(f"[Filter] Filtered out by duration | item={item.title} ({item.id}) | duration={item.duration}")
		return False

	if filters.rating and filters.rating.excludes(item.rating):
		logger.debug(f"[Filter] Filtered out by rating | item={item.title} ({item.id}) | rating={item.rating}")
		return False

	# People and tags: an item with none of them cannot satisfy the filter
	if filters.actors and not (item.actors and _any_contains(filters.actors, item.actors)):
		logger.debug(f"[Filter] Filtered out by actors | item={item.title} ({item.id}) | have={item.actors[:5]}")
		return False

	if filters.tags and not (item.tags and _any_contains(filters.tags, item.tags)):
		logger.debug(f"[Filter] Filtered out by tags | item={item.title} ({item.id}) | have={item.tags[:5]}")
		return False

	return True


def apply_filters(items: Sequence[CatalogItem], filters: SearchFilters, tokens: Sequence[str] = ()) -> List[CatalogItem]:
	"""Keep items that match the query tokens (when given) and every structured filter."""
	kept = []
	for item in items:
		if tokens and not matches_query(item, tokens):
			logger.debug(f"[Filter] No query token matched | item={item.title} ({item.id}) | tokens={list(tokens)}")
			continue
		if not passes_filters(item, filters):
			continue
		kept.append(item)
	return kept
