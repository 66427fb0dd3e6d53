"""
Runtime settings and logging setup.
Settings come from environment variables so the API, CLI, and tests can share one factory.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_CATALOG_PATH = Path('data') / 'catalog.jsonl'
DEFAULT_STATE_PATH = Path('data') / 'discovery_state.json'


@dataclass
class Settings:
	catalog_path: Optional[str] = None  # JSONL catalog; None uses the built-in sample items
	catalog_url: Optional[str] = None  # HTTP catalog base URL, preferred over catalog_path
	catalog_timeout: float = 5.0  # seconds per HTTP catalog request
	state_path: Optional[str] = None  # trending/history JSON file; None keeps state in memory
	log_level: str = 'INFO'

	@classmethod
	def from_env(cls) -> 'Settings':
		"""
		Read DISCOVERY_* environment variables.
		An empty DISCOVERY_STATE_PATH disables on-disk state.
		"""
		catalog_path = os.environ.get('DISCOVERY_CATALOG_PATH')
		if catalog_path is None and DEFAULT_CATALOG_PATH.exists():
			catalog_path = str(DEFAULT_CATALOG_PATH)

		state_path = os.environ.get('DISCOVERY_STATE_PATH', str(DEFAULT_STATE_PATH))

		return cls(
			catalog_path=catalog_path or None,
			catalog_url=os.environ.get('DISCOVERY_CATALOG_URL') or None,
			catalog_timeout=float(os.environ.get('DISCOVERY_CATALOG_TIMEOUT', '5')),
			state_path=state_path or None,
			log_level=os.environ.get('DISCOVERY_LOG_LEVEL', 'INFO').upper(),
		)


def configure_logging(level: str = 'INFO') -> None:
	"""Replace loguru's default sink with a stderr sink at ``level``."""
	logger.remove()
	logger.add(sys.stderr, level=level)
