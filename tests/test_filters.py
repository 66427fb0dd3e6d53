"""
Tests for the filter pipeline: query matching and structured filters.
"""

from discovery.filters import apply_filters, matches_query, passes_filters, searchable_text, tokenize
from discovery.models import NumericRange, SearchFilters

from conftest import make_item


def test_tokenize_splits_on_whitespace_and_lowercases():
	assert tokenize('  The  DARK\tknight ') == ['the', 'dark', 'knight']
	assert tokenize(None) == []
	assert tokenize('   ') == []


def test_searchable_text_includes_people_and_tags():
	item = make_item('1', 'Heat', description='Cops and robbers', actors=['Al Pacino'], tags=['Heist'])
	assert searchable_text(item) == 'heat cops and robbers al pacino heist'


def test_matches_query_any_token():
	item = make_item('1', 'The Dark Knight', actors=['Heath Ledger'])
	assert matches_query(item, ['ledger'])
	assert matches_query(item, ['nothing', 'dark'])
	assert not matches_query(item, ['nothing'])


def test_genre_and_language_use_exact_membership():
	item = make_item('1', 'Amelie', genre='Comedy', language='French')
	assert passes_filters(item, SearchFilters(genres=['Comedy', 'Drama']))
	assert not passes_filters(item, SearchFilters(genres=['comedy']))
	assert passes_filters(item, SearchFilters(languages=['French']))
	assert not passes_filters(item, SearchFilters(languages=['English']))


def test_actor_and_tag_filters_are_case_insensitive_substrings():
	item = make_item('1', 'Heat', actors=['Al Pacino', 'Robert De Niro'], tags=['heist', 'crime'])
	assert passes_filters(item, SearchFilters(actors=['de niro']))
	assert passes_filters(item, SearchFilters(actors=['nobody', 'PACINO']))
	assert not passes_filters(item, SearchFilters(actors=['Val Kilmer']))
	assert passes_filters(item, SearchFilters(tags=['HEI']))
	assert not passes_filters(item, SearchFilters(tags=['romance']))


def test_actor_filter_rejects_items_without_actors():
	item = make_item('1', 'Silent')
	assert not passes_filters(item, SearchFilters(actors=['anyone']))
	assert not passes_filters(item, SearchFilters(tags=['anything']))


def test_numeric_ranges_are_inclusive():
	item = make_item('1', 'Heat', release_year=1995, duration=170, rating=8.3)
	assert passes_filters(item, SearchFilters(release_year=NumericRange(min=1995, max=1995)))
	assert not passes_filters(item, SearchFilters(release_year=NumericRange(min=1996)))
	assert not passes_filters(item, SearchFilters(duration=NumericRange(max=169.9)))
	assert passes_filters(item, SearchFilters(rating=NumericRange(min=8.0)))
	assert not passes_filters(item, SearchFilters(rating=NumericRange(min=8.5)))


def test_missing_numeric_fields_are_not_excluded():
	item = make_item('1', 'Unknown')
	filters = SearchFilters(
		release_year=NumericRange(min=2000, max=2010),
		duration=NumericRange(min=90),
		rating=NumericRange(max=5),
	)
	assert passes_filters(item, filters)


def test_zero_bound_is_a_real_bound():
	item = make_item('1', 'Short', duration=0.5)
	assert not passes_filters(item, SearchFilters(duration=NumericRange(min=0, max=0)))


def test_contradictory_range_matches_nothing_with_values():
	items = [make_item('1', 'A', rating=7.0), make_item('2', 'B', rating=9.0)]
	assert apply_filters(items, SearchFilters(rating=NumericRange(min=8, max=6))) == []


def test_apply_filters_combines_query_and_filters():
	items = [
		make_item('1', 'Dark Water', genre='Horror'),
		make_item('2', 'The Dark Knight', genre='Action'),
		make_item('3', 'Bright Lights', genre='Action'),
	]
	kept = apply_filters(items, SearchFilters(genres=['Action']), tokens=['dark'])
	assert [i.id for i in kept] == ['2']
