"""
Blend and dedupe recommendation batches.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from .models import ParentalControls, Recommendation


def dedupe(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
	"""Drop repeated ids; the first occurrence wins."""
	seen = set()
	unique = []
	for rec in recommendations:
		if rec.id in seen:
			continue
		seen.add(rec.id)
		unique.append(rec)
	return unique


def blend(groups: Sequence[Sequence[Recommendation]], limit: int) -> List[Recommendation]:
	"""Concatenate groups in order, dedupe, sort by confidence (descending, stable), truncate."""
	merged = [rec for group in groups for rec in group]
	unique = dedupe(merged)
	unique.sort(key=lambda r: r.confidence, reverse=True)
	return unique[:limit]


def scale_confidence(recommendations: Iterable[Recommendation], weight: float) -> List[Recommendation]:
	"""Copies of the recommendations with confidence multiplied by a family weight."""
	return [replace(rec, confidence=rec.confidence * weight) for rec in recommendations]


def apply_parental_controls(recommendations: List[Recommendation], controls: Optional[ParentalControls]) -> List[Recommendation]:
	if controls is None:
		return recommendations
	return [rec for rec in recommendations if controls.allows(rec.id, rec.genre)]
