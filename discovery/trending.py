"""
Trending search tracker.

Keeps per-query counters and a bounded search history, both persisted to a durable
store after every mutation. State is loaded once at construction; a missing or
unreadable stored value is treated as empty.
"""

import json
import threading
from dataclasses import asdict
from typing import List, Optional

from .models import SearchSuggestion, TrendingEntry
from .storage import DurableStore
from .constants import (
	GENRES,
	HISTORY_KEY,
	MAX_SEARCH_HISTORY,
	MAX_TRENDING_ENTRIES,
	RECENT_WINDOW,
	TRENDING_KEY,
)

from loguru import logger


class MalformedPersistedState(ValueError):
	"""A stored trending/history value could not be decoded."""


class TrendingTracker:
	"""
	Counts search queries and remembers the most recent ones.
	All mutation happens under one lock so "increment, re-sort, persist" is atomic.
	"""

	def __init__(
		self,
		store: DurableStore,
		max_entries: int = MAX_TRENDING_ENTRIES,
		max_history: int = MAX_SEARCH_HISTORY,
	):
		self.store = store
		self.max_entries = max_entries
		self.max_history = max_history
		self._lock = threading.Lock()
		self.entries: List[TrendingEntry] = self._load(TRENDING_KEY, self._decode_entries)[:max_entries]
		self.history: List[str] = self._load(HISTORY_KEY, self._decode_history)[:max_history]
		logger.info(f"[Trending] Loaded {len(self.entries)} trending entries and {len(self.history)} history queries")

	# ------------------------------------------------------------------
	# Loading
	# ------------------------------------------------------------------
	def _load(self, key: str, decode) -> list:
		try:
			raw = self.store.get_item(key)
		except Exception as e:
			logger.error(f"[Trending] Could not read '{key}' from store, starting empty: {e}")
			return []
		if raw is None:
			return []
		try:
			return decode(raw)
		except MalformedPersistedState as e:
			logger.warning(f"[Trending] Ignoring malformed '{key}' state: {e}")
			return []

	def _parse_json_list(self, raw: str) -> list:
		try:
			data = json.loads(raw)
		except (TypeError, ValueError) as e:
			raise MalformedPersistedState(f"not valid JSON: {e}") from e
		if not isinstance(data, list):
			raise MalformedPersistedState(f"expected a list, got {type(data).__name__}")
		return data

	def _decode_entries(self, raw: str) -> List[TrendingEntry]:
		entries = []
		for record in self._parse_json_list(raw):
			try:
				query = record['query']
				count = int(record['count'])
				if not isinstance(query, str):
					raise TypeError(f"query must be a string, got {type(query).__name__}")
			except (KeyError, TypeError, ValueError) as e:
				logger.warning(f"[Trending] Skipping malformed trending record {record!r}: {e}")
				continue
			entries.append(TrendingEntry(
				query=query,
				count=count,
				trend=record.get('trend', 'up'),
				category=record.get('category', 'General'),
			))
		return entries

	def _decode_history(self, raw: str) -> List[str]:
		return [q for q in self._parse_json_list(raw) if isinstance(q, str)]

	# ------------------------------------------------------------------
	# Mutation
	# ------------------------------------------------------------------
	def record_query(self, query: str) -> None:
		"""Count one occurrence of a query and persist the new state."""
		with self._lock:
			self.history.insert(0, query)
			del self.history[self.max_history:]

			entry = self._find(query)
			if entry is not None:
				entry.count += 1
				entry.trend = 'up'
			else:
				self.entries.append(TrendingEntry(query=query, count=1, trend='up', category='General'))

			# Stable sort: equal counts keep their existing order, so newcomers sort last
			self.entries.sort(key=lambda e: e.count, reverse=True)
			del self.entries[self.max_entries:]
			self._persist()
		logger.debug(f"[Trending] Recorded query '{query}'")

	def clear_history(self) -> None:
		with self._lock:
			self.history = []
			try:
				self.store.remove_item(HISTORY_KEY)
			except Exception as e:
				logger.error(f"[Trending] Could not remove search history from store: {e}")
		logger.info("[Trending] Search history cleared")

	def _find(self, query: str) -> Optional[TrendingEntry]:
		for entry in self.entries:
			if entry.query == query:
				return entry
		return None

	def _persist(self) -> None:
		try:
			self.store.set_item(HISTORY_KEY, json.dumps(self.history))
			self.store.set_item(TRENDING_KEY, json.dumps([asdict(e) for e in self.entries]))
		except Exception as e:
			# In-memory state stays authoritative for this process
			logger.error(f"[Trending] Failed to persist trending state: {e}")

	# ------------------------------------------------------------------
	# Queries
	# ------------------------------------------------------------------
	def trending(self, limit: int = 10) -> List[TrendingEntry]:
		"""Entries ranked by hits among the most recent searches, then by total count."""
		recent = self.history[:RECENT_WINDOW]
		return sorted(
			self.entries,
			key=lambda e: (recent.count(e.query), e.count),
			reverse=True,
		)[:limit]

	def popular(self, limit: int = 10) -> List[TrendingEntry]:
		"""Entries ranked by total count."""
		return sorted(self.entries, key=lambda e: e.count, reverse=True)[:limit]

	def recent_queries(self, limit: int = 10) -> List[str]:
		return self.history[:limit]

	def match_queries(self, text: str, limit: int = 3) -> List[SearchSuggestion]:
		"""Trending queries containing ``text`` (case-insensitive) as suggestions."""
		needle = text.lower()
		return [
			SearchSuggestion(
				id=f"trending-{e.query}",
				text=e.query,
				type='query',
				popularity=e.count,
				category='Trending',
			)
			for e in self.entries
			if needle in e.query.lower()
		][:limit]


def genre_suggestions(text: str) -> List[SearchSuggestion]:
	"""Genres from the static vocabulary whose name contains ``text``."""
	needle = text.lower()
	return [
		SearchSuggestion(id=f"genre-{g}", text=g, type='genre', popularity=0.5, category='Genre')
		for g in GENRES
		if needle in g.lower()
	]
