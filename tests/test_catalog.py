"""
Tests for catalog accessors: in-memory lookups and the HTTP catalog over a mocked requests.get.
"""

import asyncio
from unittest.mock import Mock, patch

import pytest
import requests

from discovery.catalog import CatalogUnavailable, HttpCatalog, InMemoryCatalog


def test_in_memory_fetch_by_type(catalog):
	movies = asyncio.run(catalog.fetch_by_type('movie'))
	music = asyncio.run(catalog.fetch_by_type('music'))

	assert all(i.type == 'movie' for i in movies)
	assert all(i.type == 'music' for i in music)
	assert [i.id for i in movies][:2] == ['1', '2']
	assert catalog.size() == len(movies) + len(music)


def test_in_memory_fetch_by_id(catalog):
	assert asyncio.run(catalog.fetch_by_id('movie', '2')).title == 'Inception'
	assert asyncio.run(catalog.fetch_by_id('music', '2')) is None
	assert [i.id for i in asyncio.run(catalog.fetch_by_type('music', '3'))] == ['3']


def test_in_memory_from_jsonl(tmp_path):
	path = tmp_path / 'c.jsonl'
	path.write_text('{"id": "a", "title": "A", "type": "music", "genre": "jazz", "language": "English"}\n')

	loaded = InMemoryCatalog.from_jsonl(str(path))

	item = asyncio.run(loaded.fetch_by_id('music', 'a'))
	assert item.genre == 'Jazz'


def _response(status=200, payload=None):
	resp = Mock()
	resp.status_code = status
	resp.json.return_value = payload
	if status >= 400 and status != 404:
		resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
	return resp


def test_http_fetch_by_type_parses_items():
	payload = [
		{'id': '1', 'title': 'The Dark Knight', 'type': 'movie', 'genre': 'Action', 'language': 'English', 'rating': 9.0},
		{'id': '2', 'title': 'Broken'},  # no type: skipped
	]
	with patch('discovery.catalog.requests.get', return_value=_response(payload=payload)) as get:
		items = asyncio.run(HttpCatalog('http://catalog.local/', timeout=2).fetch_by_type('movie'))

	assert [i.id for i in items] == ['1']
	assert items[0].rating == 9.0
	get.assert_called_once_with('http://catalog.local/movie', params=None, timeout=2)


def test_http_fetch_by_id_not_found_returns_none():
	with patch('discovery.catalog.requests.get', return_value=_response(status=404)):
		assert asyncio.run(HttpCatalog('http://catalog.local').fetch_by_id('movie', '99')) is None


def test_http_transport_error_raises_catalog_unavailable():
	with patch('discovery.catalog.requests.get', side_effect=requests.ConnectionError('refused')):
		with pytest.raises(CatalogUnavailable):
			asyncio.run(HttpCatalog('http://catalog.local').fetch_by_type('music'))


def test_http_server_error_raises_catalog_unavailable():
	with patch('discovery.catalog.requests.get', return_value=_response(status=503)):
		with pytest.raises(CatalogUnavailable):
			asyncio.run(HttpCatalog('http://catalog.local').fetch_by_type('music'))


def test_http_non_list_payload_raises_catalog_unavailable():
	with patch('discovery.catalog.requests.get', return_value=_response(payload={'items': []})):
		with pytest.raises(CatalogUnavailable):
			asyncio.run(HttpCatalog('http://catalog.local').fetch_by_type('music'))
