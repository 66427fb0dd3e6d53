"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Make the project root importable for all tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from discovery.catalog import InMemoryCatalog, SAMPLE_ITEMS
from discovery.models import CatalogItem, ViewingHistoryEntry
from discovery.search_engine import DiscoveryEngine
from discovery.storage import InMemoryStore


def make_item(item_id, title, type='movie', genre='Drama', **kwargs):
	"""Catalog item with sensible defaults for tests."""
	kwargs.setdefault('language', 'English')
	return CatalogItem(id=item_id, title=title, type=type, genre=genre, **kwargs)


@pytest.fixture
def sample_items():
	"""The four sample items plus a few more covering contextual genres."""
	return list(SAMPLE_ITEMS) + [
		make_item(
			'5', 'Notting Hill', genre='Romance', release_year=1999, duration=124, rating=7.2,
			description='A London bookseller falls for a famous actress',
			actors=['Julia Roberts', 'Hugh Grant'], tags=['romance', 'comedy'], popularity_score=0.71,
		),
		make_item(
			'6', 'Superbad', genre='Comedy', release_year=2007, duration=113, rating=7.6,
			description='Two friends chase one last high school party',
			actors=['Jonah Hill', 'Michael Cera'], tags=['comedy', 'teen'], popularity_score=0.74,
		),
		make_item(
			'7', 'Amelie', genre='Comedy', language='French', release_year=2001, duration=122, rating=8.3,
			description='A shy waitress changes the lives around her',
			actors=['Audrey Tautou'], tags=['whimsical', 'paris'], popularity_score=0.8,
		),
		make_item(
			'8', 'Blinding Lights', type='music', genre='Pop', release_year=2019, duration=3.3, rating=8.7,
			description='Synth-driven retro pop anthem',
			actors=['The Weeknd'], tags=['synthwave', 'pop'], popularity_score=0.96,
		),
		# No year, duration, or rating: exercises permissive-on-missing ranges
		make_item('10', 'Untitled Demo', type='music', genre='Electronic', description='Unreleased sketch'),
	]


@pytest.fixture
def catalog(sample_items):
	return InMemoryCatalog(sample_items)


@pytest.fixture
def store():
	return InMemoryStore()


@pytest.fixture
def engine(catalog, store):
	return DiscoveryEngine(catalog, store)


@pytest.fixture
def viewing_history():
	"""Three Action views and one Drama view, oldest first."""
	start = datetime(2024, 1, 1, 20, 0)
	genres = ['Action', 'Drama', 'Action', 'Action']
	return [
		ViewingHistoryEntry(
			id=f"h{i}", type='movie', genre=g, watch_time=90.0, completed=True,
			timestamp=start + timedelta(days=i),
		)
		for i, g in enumerate(genres)
	]
