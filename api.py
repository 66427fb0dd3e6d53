"""
FastAPI server exposing the media discovery API.
Endpoints:
- GET /health: basic health check
- GET /search?q=...&type=movie&genre=Action: filtered keyword search
- POST /recommendations, POST /feed: recommendations for a viewing context
- GET /suggestions, /trending, /popular, /history; DELETE /history
- POST /track/search-click, /track/recommendation-click: telemetry

Startup builds the engine from DISCOVERY_* environment variables (see discovery/config.py).
"""

# Import standard libraries for timing and typing
import time  # measure startup and request latencies
from dataclasses import asdict  # dataclass -> dict for response models
from datetime import datetime  # viewing history timestamps
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, Query  # FastAPI primitives
from pydantic import BaseModel  # schema definitions

# Import our internal modules for configuration and discovery
from discovery.config import Settings, configure_logging  # environment settings
from discovery.models import (  # engine data classes
	CurrentContent,
	NumericRange,
	ParentalControls,
	RecommendationContext,
	SearchFilters,
	UserPreferences,
	ViewingHistoryEntry,
)
from discovery.search_engine import DiscoveryEngine, build_engine  # core engine

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Media Discovery API", version="1.0.0")  # web app

# Globals that hold the engine instance and measured startup time
ENGINE: Optional[DiscoveryEngine] = None  # will point to the initialized engine
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# ----------------------------------------------------------------------
# Response models
# ----------------------------------------------------------------------
class ItemOut(BaseModel):
	id: str
	title: str
	type: str
	genre: str
	language: str
	description: Optional[str] = None
	release_year: Optional[int] = None
	duration: Optional[float] = None
	rating: Optional[float] = None
	actors: List[str] = []
	tags: List[str] = []
	thumbnail_url: Optional[str] = None
	popularity_score: Optional[float] = None


class SearchResponseItem(BaseModel):
	item: ItemOut  # catalog metadata
	relevance_score: Optional[float] = None  # only present for query searches


class SearchResponse(BaseModel):
	query: Optional[str] = None  # original query string
	elapsed_ms: float  # server-side search time in ms
	results: List[SearchResponseItem]  # ranked items


class RecommendationOut(BaseModel):
	id: str
	title: str
	type: str
	genre: str
	reason: str
	confidence: float
	similarity_score: Optional[float] = None
	collaborative_score: Optional[float] = None
	contextual_score: Optional[float] = None
	thumbnail_url: Optional[str] = None
	description: Optional[str] = None


class SuggestionOut(BaseModel):
	id: str
	text: str
	type: str
	popularity: float
	category: Optional[str] = None


class TrendingOut(BaseModel):
	query: str
	count: int
	trend: str
	category: str


# ----------------------------------------------------------------------
# Request models
# ----------------------------------------------------------------------
class CurrentContentIn(BaseModel):
	id: str
	type: str
	genre: str
	tags: List[str] = []


class ViewingHistoryIn(BaseModel):
	id: str
	type: str
	genre: str
	watch_time: float = 0.0
	completed: bool = False
	timestamp: datetime
	rating: Optional[float] = None


class PreferencesIn(BaseModel):
	favorite_genres: List[str] = []
	preferred_languages: List[str] = []
	average_watch_time: float = 0.0
	completion_rate: float = 0.0


class ParentalControlsIn(BaseModel):
	blocked_genres: List[str] = []
	blocked_content: List[str] = []


class RecommendationContextIn(BaseModel):
	user_id: Optional[str] = None
	current_content: Optional[CurrentContentIn] = None
	time_of_day: Optional[str] = None
	device_type: Optional[str] = None
	viewing_history: List[ViewingHistoryIn] = []
	preferences: Optional[PreferencesIn] = None
	parental_controls: Optional[ParentalControlsIn] = None

	def to_context(self) -> RecommendationContext:
		"""Convert the request body into the engine's dataclass."""
		return RecommendationContext(
			user_id=self.user_id,
			current_content=CurrentContent(**self.current_content.__dict__) if self.current_content else None,
			time_of_day=self.time_of_day,
			device_type=self.device_type,
			viewing_history=[ViewingHistoryEntry(**h.__dict__) for h in self.viewing_history],
			preferences=UserPreferences(**self.preferences.__dict__) if self.preferences else None,
			parental_controls=ParentalControls(**self.parental_controls.__dict__) if self.parental_controls else None,
		)


class SearchClickIn(BaseModel):
	query: str
	result_id: str


class RecommendationClickIn(BaseModel):
	recommendation_id: str
	reason: str


def _range(lo: Optional[float], hi: Optional[float]) -> Optional[NumericRange]:
	# Only build a range when at least one bound was supplied
	if lo is None and hi is None:
		return None
	return NumericRange(min=lo, max=hi)


# FastAPI startup hook to initialize the engine once
@app.on_event("startup")
async def startup_event():
	"""Build the discovery engine and log how long it took."""
	global ENGINE, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency

	settings = Settings.from_env()  # read DISCOVERY_* variables
	configure_logging(settings.log_level)  # apply log level
	logger.info("[API] Startup: building discovery engine...")  # log intent

	ENGINE = build_engine(settings)  # catalog + store + tracker

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"engine_ready": ENGINE is not None,  # True if engine initialized
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


# Main search endpoint: free text plus structured filters
@app.get("/search", response_model=SearchResponse)
async def search(
	q: Optional[str] = Query(None, description="Free-text query"),
	type: str = Query('all', description="movie, music, or all"),
	genre: Optional[List[str]] = Query(None),
	language: Optional[List[str]] = Query(None),
	actor: Optional[List[str]] = Query(None),
	tag: Optional[List[str]] = Query(None),
	year_min: Optional[int] = None,
	year_max: Optional[int] = None,
	duration_min: Optional[float] = None,
	duration_max: Optional[float] = None,
	rating_min: Optional[float] = None,
	rating_max: Optional[float] = None,
	sort_by: str = 'relevance',
	sort_order: str = 'desc',
	offset: int = 0,
	limit: int = 20,
):
	"""Execute a filtered search and return ranked results."""
	if ENGINE is None:  # engine must be ready to serve
		logger.warning("[API] Search requested but engine not initialized")  # guard log
		return SearchResponse(query=q, elapsed_ms=0.0, results=[])  # return empty

	filters = SearchFilters(
		query=q,
		genres=genre or (),
		languages=language or (),
		actors=actor or (),
		tags=tag or (),
		release_year=_range(year_min, year_max),
		duration=_range(duration_min, duration_max),
		rating=_range(rating_min, rating_max),
		type=type,
		sort_by=sort_by,
		sort_order=sort_order,
		offset=offset,
		limit=limit,
	)

	# Time the search for latency insight
	start = time.time()  # start timer
	results = await ENGINE.search(filters)  # run search
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /search served {len(results)} results in {elapsed_ms:.2f} ms")  # summary

	items = [
		SearchResponseItem(
			item=ItemOut(**asdict(r.item)),
			relevance_score=round(r.relevance_score, 3) if r.relevance_score is not None else None,
		)
		for r in results
	]
	return SearchResponse(query=q, elapsed_ms=round(elapsed_ms, 2), results=items)


@app.post("/recommendations", response_model=List[RecommendationOut])
async def recommendations(body: RecommendationContextIn):
	if ENGINE is None:
		return []
	recs = await ENGINE.get_recommendations(body.to_context())
	return [RecommendationOut(**asdict(r)) for r in recs]


@app.post("/feed", response_model=List[RecommendationOut])
async def feed(body: RecommendationContextIn):
	if ENGINE is None:
		return []
	recs = await ENGINE.get_personalized_feed(body.to_context())
	return [RecommendationOut(**asdict(r)) for r in recs]


@app.get("/suggestions", response_model=List[SuggestionOut])
async def suggestions(q: str = '', limit: int = 10):
	if ENGINE is None:
		return []
	found = await ENGINE.get_search_suggestions(q, limit=limit)
	return [SuggestionOut(**asdict(s)) for s in found]


@app.get("/trending", response_model=List[TrendingOut])
async def trending(limit: int = 10):
	if ENGINE is None:
		return []
	return [TrendingOut(**asdict(e)) for e in ENGINE.get_trending_searches(limit)]


@app.get("/popular", response_model=List[TrendingOut])
async def popular(limit: int = 10):
	if ENGINE is None:
		return []
	return [TrendingOut(**asdict(e)) for e in ENGINE.get_popular_searches(limit)]


@app.get("/history", response_model=List[str])
async def history(limit: int = 10):
	if ENGINE is None:
		return []
	return ENGINE.get_search_history(limit)


@app.delete("/history")
async def clear_history():
	if ENGINE is not None:
		ENGINE.clear_search_history()
	return {"status": "ok"}


@app.post("/track/search-click")
async def track_search_click(body: SearchClickIn):
	if ENGINE is not None:
		ENGINE.track_search_click(body.query, body.result_id)
	return {"status": "ok"}


@app.post("/track/recommendation-click")
async def track_recommendation_click(body: RecommendationClickIn):
	if ENGINE is not None:
		ENGINE.track_recommendation_click(body.recommendation_id, body.reason)
	return {"status": "ok"}
