"""
Command-line access to the discovery engine.

This script:
1) Builds the engine from DISCOVERY_* environment variables
2) Runs one of: search, recommend, trending
3) Logs the results

Usage:
    python -m scripts.discover search "dark knight" --type movie
    python -m scripts.discover recommend --time-of-day evening --device tv
    python -m scripts.discover trending --limit 5
"""

import argparse  # subcommand parsing
import asyncio  # run engine coroutines
from typing import List, Optional

from loguru import logger  # console logging

from discovery.config import Settings, configure_logging  # environment settings
from discovery.models import (  # engine inputs and outputs
	CurrentContent,
	Recommendation,
	RecommendationContext,
	SearchFilters,
	SearchResult,
	TrendingEntry,
)
from discovery.search_engine import DiscoveryEngine, build_engine  # engine factory


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Search and recommend from the media catalog")
	sub = parser.add_subparsers(dest='command', required=True)

	search = sub.add_parser('search', help='keyword search with filters')
	search.add_argument('query')
	search.add_argument('--type', default='all', choices=['movie', 'music', 'all'])
	search.add_argument('--genre', action='append', default=[])
	search.add_argument('--sort-by', default='relevance')
	search.add_argument('--sort-order', default='desc', choices=['asc', 'desc'])
	search.add_argument('--limit', type=int, default=10)

	recommend = sub.add_parser('recommend', help='contextual and similarity recommendations')
	recommend.add_argument('--time-of-day', choices=['morning', 'afternoon', 'evening', 'night'])
	recommend.add_argument('--device', choices=['desktop', 'mobile', 'tablet', 'tv'])
	recommend.add_argument('--current-id', help='id of the item being watched')
	recommend.add_argument('--current-type', default='movie', choices=['movie', 'music'])

	trending = sub.add_parser('trending', help='show trending and popular searches')
	trending.add_argument('--limit', type=int, default=10)
	return parser


async def run_search(engine: DiscoveryEngine, args) -> List[SearchResult]:
	filters = SearchFilters(
		query=args.query,
		type=args.type,
		genres=args.genre,
		sort_by=args.sort_by,
		sort_order=args.sort_order,
		limit=args.limit,
	)
	results = await engine.search(filters)
	logger.info(f"[OK] {len(results)} results for '{args.query}'")
	for i, r in enumerate(results, 1):
		score = f"{r.relevance_score:.2f}" if r.relevance_score is not None else '-'
		logger.info(f"  {i}. [{score}] {r.item.title} ({r.item.release_year or '?'}) - {r.item.type}/{r.item.genre}")
	return results


async def run_recommend(engine: DiscoveryEngine, args) -> List[Recommendation]:
	current: Optional[CurrentContent] = None
	if args.current_id:
		item = await engine.catalog.fetch_by_id(args.current_type, args.current_id)
		if item is None:
			logger.warning(f"Item {args.current_type}/{args.current_id} not found; ignoring --current-id")
		else:
			current = CurrentContent(id=item.id, type=item.type, genre=item.genre, tags=list(item.tags))

	context = RecommendationContext(
		current_content=current,
		time_of_day=args.time_of_day,
		device_type=args.device,
	)
	recs = await engine.get_recommendations(context)
	logger.info(f"[OK] {len(recs)} recommendations")
	for i, rec in enumerate(recs, 1):
		logger.info(f"  {i}. [{rec.confidence:.2f}] {rec.title} - {rec.reason}")
	return recs


def run_trending(engine: DiscoveryEngine, args) -> List[TrendingEntry]:
	trending = engine.get_trending_searches(args.limit)
	logger.info("Trending:")
	for e in trending:
		logger.info(f"  {e.query} ({e.count})")
	logger.info("Popular:")
	for e in engine.get_popular_searches(args.limit):
		logger.info(f"  {e.query} ({e.count})")
	return trending


def main(argv: Optional[List[str]] = None) -> list:
	"""Run one subcommand and return what it printed (results, recommendations, or trending entries)."""
	args = build_parser().parse_args(argv)
	settings = Settings.from_env()
	configure_logging(settings.log_level)

	logger.info("=" * 60)
	logger.info(f"Media Discovery: {args.command}")
	logger.info("=" * 60)

	engine = build_engine(settings)
	if args.command == 'search':
		output = asyncio.run(run_search(engine, args))
	elif args.command == 'recommend':
		output = asyncio.run(run_recommend(engine, args))
	else:
		output = run_trending(engine, args)

	logger.info("=" * 60)
	return output


if __name__ == '__main__':
	main()  # invoke CLI
