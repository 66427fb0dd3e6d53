"""
Static vocabulary and tuning constants for the discovery engine.
"""

from typing import Dict, List, Tuple

CONTENT_TYPES: Tuple[str, ...] = ('movie', 'music')

DEFAULT_LIMIT = 20
RECOMMENDATION_LIMIT = 20
FEED_LIMIT = 30

# Trending tracker caps and durable-store keys
MAX_TRENDING_ENTRIES = 50
MAX_SEARCH_HISTORY = 100
RECENT_WINDOW = 20  # history entries that count toward recency-weighted trending
TRENDING_KEY = 'trendingSearches'
HISTORY_KEY = 'searchHistory'

MIN_SUGGESTION_LENGTH = 2

# Canonical genre vocabulary (movies first, then music)
GENRES: List[str] = [
	'Action', 'Comedy', 'Drama', 'Horror', 'Sci-Fi', 'Thriller',
	'Romance', 'Adventure', 'Fantasy', 'Mystery', 'Crime',
	'Rock', 'Pop', 'Hip-Hop', 'Jazz', 'Classical', 'Electronic',
]

# Common user/catalog phrasings mapped to a canonical genre
GENRE_SYNONYMS: Dict[str, str] = {
	'sci-fi': 'Sci-Fi',
	'sci fi': 'Sci-Fi',
	'scifi': 'Sci-Fi',
	'science fiction': 'Sci-Fi',
	'science-fiction': 'Sci-Fi',
	'funny': 'Comedy',
	'romantic': 'Romance',
	'scary': 'Horror',
	'hip hop': 'Hip-Hop',
	'hiphop': 'Hip-Hop',
	'rap': 'Hip-Hop',
	'edm': 'Electronic',
	'techno': 'Electronic',
	'classic': 'Classical',
}

# Time-of-day -> genres worth suggesting then
TIME_OF_DAY_GENRES: Dict[str, List[str]] = {
	'morning': ['Comedy', 'Romance', 'Pop'],
	'afternoon': ['Action', 'Adventure', 'Rock'],
	'evening': ['Drama', 'Thriller', 'Jazz'],
	'night': ['Horror', 'Mystery', 'Electronic'],
}
TIME_OF_DAY_LIMIT = 5

# Device -> (genres, result limit)
DEVICE_PREFERENCES: Dict[str, Tuple[List[str], int]] = {
	'mobile': (['Comedy', 'Pop', 'Hip-Hop'], 3),
	'tablet': (['Action', 'Drama', 'Rock'], 3),
	'desktop': (['Sci-Fi', 'Thriller', 'Classical'], 3),
	'tv': (['Action', 'Adventure', 'Horror'], 3),
}

# Fixed confidences per strategy
COLLABORATIVE_CONFIDENCE = 0.8
SIMILARITY_CONFIDENCE = 0.7
TIME_OF_DAY_CONFIDENCE = 0.6
DEVICE_CONFIDENCE = 0.5
TRENDING_CONFIDENCE = 0.8

# Personalized feed family weights
FEED_WEIGHTS: Dict[str, float] = {
	'trending': 0.3,
	'personalized': 0.5,
	'recently_watched': 0.2,
}
