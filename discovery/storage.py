"""
Durable key-value stores for engine state.
Values are opaque strings; the trending tracker owns their encoding.
"""

import json
from pathlib import Path
from typing import Dict, Optional

from loguru import logger


class DurableStore:
	"""Minimal get/set/remove contract shared by all stores."""

	def get_item(self, key: str) -> Optional[str]:
		raise NotImplementedError

	def set_item(self, key: str, value: str) -> None:
		raise NotImplementedError

	def remove_item(self, key: str) -> None:
		raise NotImplementedError


class InMemoryStore(DurableStore):
	"""Process-local store; state is lost on exit."""

	def __init__(self, initial: Optional[Dict[str, str]] = None):
		self._data: Dict[str, str] = dict(initial or {})

	def get_item(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set_item(self, key: str, value: str) -> None:
		self._data[key] = value

	def remove_item(self, key: str) -> None:
		self._data.pop(key, None)


class JsonFileStore(DurableStore):
	"""
	Store backed by a single JSON object on disk ({key: string value}).
	Every write rewrites the file through a temporary sibling and an atomic rename.
	"""

	def __init__(self, filepath: str):
		self.filepath = Path(filepath)
		self._data: Dict[str, str] = self._read()

	def _read(self) -> Dict[str, str]:
		if not self.filepath.exists():
			return {}
		try:
			with open(self.filepath, 'r', encoding='utf-8') as f:
				data = json.load(f)
		except (OSError, json.JSONDecodeError) as e:
			logger.warning(f"[Store] Could not read {self.filepath}, starting empty: {e}")
			return {}
		if not isinstance(data, dict):
			logger.warning(f"[Store] {self.filepath} does not hold a JSON object, starting empty")
			return {}
		return {str(k): v for k, v in data.items() if isinstance(v, str)}

	def _flush(self) -> None:
		self.filepath.parent.mkdir(parents=True, exist_ok=True)
		tmp_path = self.filepath.with_suffix(self.filepath.suffix + '.tmp')
		with open(tmp_path, 'w', encoding='utf-8') as f:
			json.dump(self._data, f, ensure_ascii=False, indent=2)
		tmp_path.replace(self.filepath)
		logger.debug(f"[Store] Wrote {len(self._data)} keys to {self.filepath}")

	def get_item(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set_item(self, key: str, value: str) -> None:
		self._data[key] = value
		self._flush()

	def remove_item(self, key: str) -> None:
		if self._data.pop(key, None) is not None:
			self._flush()
