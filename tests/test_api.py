"""
HTTP API tests using FastAPI's TestClient against an in-memory engine.
"""

import pytest
from fastapi.testclient import TestClient

import api


@pytest.fixture
def client(engine, monkeypatch):
	# No startup event without the context manager; inject the engine directly
	monkeypatch.setattr(api, 'ENGINE', engine)
	return TestClient(api.app)


def test_health(client):
	resp = client.get('/health')

	assert resp.status_code == 200
	body = resp.json()
	assert body['status'] == 'ok'
	assert body['engine_ready'] is True


def test_search_with_query(client):
	resp = client.get('/search', params={'q': 'dark', 'type': 'movie'})

	assert resp.status_code == 200
	body = resp.json()
	assert body['query'] == 'dark'
	assert [r['item']['id'] for r in body['results']] == ['1']
	assert body['results'][0]['relevance_score'] == 3.0


def test_search_with_filters_only(client):
	resp = client.get('/search', params={'genre': ['Rock', 'Pop'], 'rating_min': 9.3, 'sort_by': 'rating'})

	results = resp.json()['results']
	assert [r['item']['id'] for r in results] == ['3']
	assert results[0]['relevance_score'] is None


def test_search_records_trending_and_history(client):
	client.get('/search', params={'q': 'rock'})
	client.get('/search', params={'q': 'rock'})
	client.get('/search', params={'q': 'paris'})

	assert client.get('/history').json() == ['paris', 'rock', 'rock']
	popular = client.get('/popular').json()
	assert popular[0] == {'query': 'rock', 'count': 2, 'trend': 'up', 'category': 'General'}
	assert {e['query'] for e in client.get('/trending').json()} == {'rock', 'paris'}

	assert client.delete('/history').json() == {'status': 'ok'}
	assert client.get('/history').json() == []


def test_recommendations(client):
	resp = client.post('/recommendations', json={'time_of_day': 'morning', 'parental_controls': {'blocked_genres': ['Pop']}})

	assert resp.status_code == 200
	recs = resp.json()
	assert [r['id'] for r in recs] == ['5', '6', '7']
	assert recs[0]['reason'] == 'Perfect for morning'
	assert recs[0]['contextual_score'] == 0.6


def test_feed(client):
	body = {
		'viewing_history': [
			{'id': 'h1', 'type': 'movie', 'genre': 'Action', 'watch_time': 120, 'completed': True, 'timestamp': '2024-02-01T20:00:00'},
		],
		'current_content': {'id': '6', 'type': 'movie', 'genre': 'Comedy'},
	}

	recs = client.post('/feed', json=body).json()

	assert [r['id'] for r in recs] == ['1', '7']
	assert recs[0]['confidence'] == pytest.approx(0.4)
	assert recs[1]['confidence'] == pytest.approx(0.35)


def test_suggestions(client):
	resp = client.get('/suggestions', params={'q': 'rock', 'limit': 2})

	assert [s['id'] for s in resp.json()] == ['content-3', 'content-4']
	assert client.get('/suggestions', params={'q': 'r'}).json() == []


def test_tracking_endpoints(client):
	assert client.post('/track/search-click', json={'query': 'dark', 'result_id': '1'}).json() == {'status': 'ok'}
	assert client.post('/track/recommendation-click', json={'recommendation_id': '7', 'reason': 'Similar to 6'}).json() == {'status': 'ok'}


def test_endpoints_without_engine(monkeypatch):
	monkeypatch.setattr(api, 'ENGINE', None)
	client = TestClient(api.app)

	assert client.get('/health').json()['engine_ready'] is False
	assert client.get('/search', params={'q': 'dark'}).json()['results'] == []
	assert client.post('/recommendations', json={}).json() == []
	assert client.get('/trending').json() == []
