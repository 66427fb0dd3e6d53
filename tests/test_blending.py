"""
Tests for blend/dedupe helpers and the weighted personalized feed.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from discovery.blending import apply_parental_controls, blend, dedupe, scale_confidence
from discovery.models import (
	ParentalControls,
	Recommendation,
	RecommendationContext,
	SearchFilters,
	ViewingHistoryEntry,
)


def rec(item_id, confidence, reason='r'):
	return Recommendation(id=item_id, title=item_id, type='movie', genre='Drama', reason=reason, confidence=confidence)


def test_dedupe_keeps_first_occurrence():
	recs = [rec('a', 0.1, 'first'), rec('b', 0.5), rec('a', 0.9, 'second'), rec('b', 0.2)]

	unique = dedupe(recs)

	assert [r.id for r in unique] == ['a', 'b']
	assert unique[0].reason == 'first'
	assert unique[0].confidence == 0.1


def test_blend_sorts_and_truncates():
	groups = [[rec('a', 0.5), rec('b', 0.8)], [rec('c', 0.9), rec('a', 1.0)], [rec('d', 0.5)]]

	blended = blend(groups, limit=3)

	assert [(r.id, r.confidence) for r in blended] == [('c', 0.9), ('b', 0.8), ('a', 0.5)]


def test_scale_confidence_returns_copies():
	original = [rec('a', 0.8)]

	scaled = scale_confidence(original, 0.5)

	assert scaled[0].confidence == pytest.approx(0.4)
	assert original[0].confidence == 0.8


def test_apply_parental_controls():
	recs = [rec('a', 0.5), rec('b', 0.5)]
	assert apply_parental_controls(recs, None) == recs
	assert [r.id for r in apply_parental_controls(recs, ParentalControls(blocked_content=['a']))] == ['b']
	assert apply_parental_controls(recs, ParentalControls(blocked_genres=['Drama'])) == []


def history(*genres):
	start = datetime(2024, 5, 1, 19, 0)
	return [
		ViewingHistoryEntry(id=f"h{i}", type='movie', genre=g, watch_time=45.0, completed=False, timestamp=start + timedelta(hours=i))
		for i, g in enumerate(genres)
	]


def test_feed_scales_each_family_by_its_weight(engine, viewing_history):
	asyncio.run(engine.search(SearchFilters(query='inception')))

	feed = asyncio.run(engine.get_personalized_feed(RecommendationContext(viewing_history=viewing_history)))

	# Dark Knight: collaborative 0.8 x 0.5; Inception: trending 0.8 x 0.3.
	# The recently-watched copies of Dark Knight (0.7 x 0.2) lose the id collision.
	assert [(r.id, r.reason) for r in feed] == [
		('1', 'Because you watched Action, Drama content'),
		('2', 'Trending now'),
	]
	assert feed[0].confidence == pytest.approx(0.8 * 0.5)
	assert feed[1].confidence == pytest.approx(0.8 * 0.3)


def test_feed_includes_recently_watched_family(engine):
	# Top three genres (Action, Rock, Pop) feed collaborative; the latest Comedy view only feeds recently-watched
	context = RecommendationContext(viewing_history=history('Action', 'Rock', 'Pop', 'Action', 'Rock', 'Pop', 'Comedy'))

	feed = asyncio.run(engine.get_personalized_feed(context))

	by_id = {r.id: r for r in feed}
	assert set(by_id) == {'1', '3', '4', '8', '6', '7'}
	for item_id in ('1', '3', '4', '8'):
		assert by_id[item_id].confidence == pytest.approx(0.8 * 0.5)
	for item_id in ('6', '7'):
		assert by_id[item_id].confidence == pytest.approx(0.7 * 0.2)
		assert by_id[item_id].reason == 'Similar to h6'
	assert [r.confidence for r in feed] == sorted((r.confidence for r in feed), reverse=True)


def test_feed_does_not_inflate_trending_counts(engine):
	asyncio.run(engine.search(SearchFilters(query='dark')))

	asyncio.run(engine.get_personalized_feed(RecommendationContext()))

	assert [(e.query, e.count) for e in engine.get_popular_searches()] == [('dark', 1)]


def test_feed_for_empty_context_and_no_trending_is_empty(engine):
	assert asyncio.run(engine.get_personalized_feed(RecommendationContext())) == []


def test_feed_orders_mixed_naive_and_aware_timestamps(engine):
	entries = history('Action', 'Rock', 'Pop', 'Action', 'Rock', 'Pop')
	# Latest view arrives with an explicit UTC offset, the rest are naive
	entries.append(ViewingHistoryEntry(
		id='h6', type='movie', genre='Comedy', watch_time=30.0, completed=True,
		timestamp=datetime(2024, 5, 2, 9, 0, tzinfo=timezone.utc),
	))

	feed = asyncio.run(engine.get_personalized_feed(RecommendationContext(viewing_history=entries)))

	by_id = {r.id: r for r in feed}
	assert by_id['6'].reason == 'Similar to h6'
	assert by_id['7'].confidence == pytest.approx(0.7 * 0.2)
