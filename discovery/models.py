"""
Data models for the Media Discovery Engine.
Defines the core data structures shared by search, recommendations, and trending.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from datetime import datetime  # viewing history timestamps
from typing import List, Optional, Sequence  # lists, optional values, read-only sequences


@dataclass
class CatalogItem:
	"""
	A single movie or music track as returned by the catalog.
	The engine never mutates these; the `type` field is the movie/music discriminant.
	"""
	id: str  # unique, stable identifier
	title: str  # display title as stored in the catalog
	type: str  # 'movie' or 'music'
	genre: str  # single primary genre in canonical form (e.g., "Sci-Fi")
	language: str  # primary language (e.g., "English")
	description: Optional[str] = None  # short synopsis
	release_year: Optional[int] = None  # e.g., 2008
	duration: Optional[float] = None  # minutes; fractional for tracks
	rating: Optional[float] = None  # 0-10 scale
	actors: List[str] = field(default_factory=list)  # cast or performing artists
	tags: List[str] = field(default_factory=list)  # free-form tags
	thumbnail_url: Optional[str] = None  # artwork reference for the UI
	popularity_score: Optional[float] = None  # static 0-1 popularity


@dataclass
class NumericRange:
	"""Inclusive numeric bounds; a missing bound leaves that side open."""
	min: Optional[float] = None
	max: Optional[float] = None

	def excludes(self, value: Optional[float]) -> bool:
		# Items without a value are never excluded by a range
		if value is None:
			return False
		if self.min is not None and value < self.min:
			return True
		if self.max is not None and value > self.max:
			return True
		return False


@dataclass(frozen=True)
class SearchFilters:
	"""
	Everything the caller can ask of one search call.
	Multi-value dimensions use any-match semantics; an empty sequence means "no filter".
	"""
	query: Optional[str] = None  # free text, tokenized on whitespace
	genres: Sequence[str] = ()  # exact match against the item's genre
	languages: Sequence[str] = ()  # exact match against the item's language
	actors: Sequence[str] = ()  # case-insensitive substring match
	tags: Sequence[str] = ()  # case-insensitive substring match
	release_year: Optional[NumericRange] = None
	duration: Optional[NumericRange] = None
	rating: Optional[NumericRange] = None
	type: str = 'all'  # 'movie', 'music', or 'all'
	sort_by: str = 'relevance'  # 'relevance', 'title', 'date', 'rating', 'popularity'
	sort_order: str = 'desc'  # 'asc' or 'desc'
	offset: int = 0
	limit: Optional[int] = None  # falls back to DEFAULT_LIMIT


@dataclass
class SearchResult:
	item: CatalogItem  # matched catalog item
	relevance_score: Optional[float] = None  # only set when a query was scored


@dataclass
class CurrentContent:
	"""Reference item for similarity recommendations."""
	id: str
	type: str
	genre: str
	tags: List[str] = field(default_factory=list)


@dataclass
class ViewingHistoryEntry:
	id: str
	type: str
	genre: str
	watch_time: float  # minutes watched
	completed: bool
	timestamp: datetime
	rating: Optional[float] = None


@dataclass
class UserPreferences:
	favorite_genres: List[str] = field(default_factory=list)
	preferred_languages: List[str] = field(default_factory=list)
	average_watch_time: float = 0.0
	completion_rate: float = 0.0


@dataclass
class ParentalControls:
	"""Content restrictions applied to recommendation output."""
	blocked_genres: List[str] = field(default_factory=list)
	blocked_content: List[str] = field(default_factory=list)  # item ids

	def allows(self, item_id: str, genre: str) -> bool:
		return genre not in self.blocked_genres and item_id not in self.blocked_content


@dataclass
class RecommendationContext:
	"""
	Everything known about the viewer at recommendation time.
	Every field is optional; strategies that need a missing field return nothing.
	"""
	user_id: Optional[str] = None
	current_content: Optional[CurrentContent] = None
	time_of_day: Optional[str] = None  # 'morning', 'afternoon', 'evening', 'night'
	device_type: Optional[str] = None  # 'desktop', 'mobile', 'tablet', 'tv'
	viewing_history: List[ViewingHistoryEntry] = field(default_factory=list)
	preferences: Optional[UserPreferences] = None
	parental_controls: Optional[ParentalControls] = None


@dataclass
class Recommendation:
	id: str
	title: str
	type: str
	genre: str
	reason: str  # human-readable explanation shown to the viewer
	confidence: float  # ordering signal, not a calibrated probability
	similarity_score: Optional[float] = None
	collaborative_score: Optional[float] = None
	contextual_score: Optional[float] = None
	thumbnail_url: Optional[str] = None
	description: Optional[str] = None

	@classmethod
	def from_result(cls, result: SearchResult, reason: str, confidence: float, **scores) -> 'Recommendation':
		"""Build a recommendation from a search hit, copying display fields from the item."""
		item = result.item
		return cls(
			id=item.id,
			title=item.title,
			type=item.type,
			genre=item.genre,
			reason=reason,
			confidence=confidence,
			thumbnail_url=item.thumbnail_url,
			description=item.description,
			**scores,
		)


@dataclass
class TrendingEntry:
	query: str  # exact text as typed; case-sensitive key
	count: int
	trend: str = 'up'  # 'up', 'down', or 'stable'
	category: str = 'General'


@dataclass
class SearchSuggestion:
	id: str
	text: str
	type: str  # 'query', 'movie', 'music', 'actor', or 'genre'
	popularity: float
	category: Optional[str] = None
