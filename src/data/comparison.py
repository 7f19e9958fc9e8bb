"""Side-by-side comparison selection with pluggable persistence."""

import logging
from typing import Any, MutableMapping, Optional, Protocol

from config.settings import get_settings

logger = logging.getLogger(__name__)

SESSION_KEY = "compared_schools"


class ComparisonFullError(Exception):
    """The comparison already holds the maximum number of schools."""


class SelectionStorage(Protocol):
    def load(self) -> list[str]: ...

    def save(self, dbns: list[str]) -> None: ...


class InMemorySelectionStorage:
    """Keeps the selection in a plain list."""

    def __init__(self, dbns: Optional[list[str]] = None):
        self._dbns = list(dbns or [])

    def load(self) -> list[str]:
        return list(self._dbns)

    def save(self, dbns: list[str]) -> None:
        self._dbns = list(dbns)


class SessionStateStorage:
    """Keeps the selection in a mapping such as ``st.session_state``."""

    def __init__(self, state: MutableMapping[str, Any], key: str = SESSION_KEY):
        self._state = state
        self._key = key

    def load(self) -> list[str]:
        value = self._state.get(self._key, [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"Unexpected comparison state: {value!r}")
        return list(value)

    def save(self, dbns: list[str]) -> None:
        self._state[self._key] = list(dbns)


class ComparisonSelection:
    """The set of schools picked for comparison, in the order they were added."""

    def __init__(self, storage: SelectionStorage, max_schools: Optional[int] = None):
        self._storage = storage
        self.max_schools = max_schools or get_settings().MAX_COMPARISON_SCHOOLS
        try:
            self._dbns = storage.load()[:self.max_schools]
        except Exception as e:
            logger.warning("Failed to load comparison state: %s", e)
            self._dbns = []

    @property
    def dbns(self) -> list[str]:
        return list(self._dbns)

    @property
    def is_full(self) -> bool:
        return len(self._dbns) >= self.max_schools

    def __len__(self) -> int:
        return len(self._dbns)

    def contains(self, dbn: str) -> bool:
        return dbn in self._dbns

    def add(self, dbn: str) -> None:
        if dbn in self._dbns:
            return
        if self.is_full:
            raise ComparisonFullError(f"Cannot compare more than {self.max_schools} schools")
        self._dbns.append(dbn)
        self._storage.save(self._dbns)

    def remove(self, dbn: str) -> None:
        if dbn in self._dbns:
            self._dbns.remove(dbn)
            self._storage.save(self._dbns)

    def clear(self) -> None:
        self._dbns = []
        self._storage.save(self._dbns)
