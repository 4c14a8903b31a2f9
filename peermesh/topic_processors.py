"""A registry of message processors keyed by identifier."""

from __future__ import annotations

import threading
from typing import Any


class TopicProcessors:
    """Maps identifiers to message processors for one topic."""

    def __init__(self) -> None:
        self._processors: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add_topic_processor(self, identifier: str, processor: Any) -> None:
        """Register a processor; raise P2PError if the identifier is already taken."""
        from .core import P2PError

        with self._lock:
            if identifier in self._processors:
                raise P2PError(
                    f"message processor already defined, in addTopicProcessor, identifier {identifier}"
                )
            self._processors[identifier] = processor

    def remove_topic_processor(self, identifier: str) -> None:
        """Unregister a processor; raise P2PError if there is none for the identifier."""
        from .core import P2PError

        with self._lock:
            if identifier not in self._processors:
                raise P2PError(
                    f"message processor does not exist, in removeTopicProcessor, identifier {identifier}"
                )
            del self._processors[identifier]

    def get_list(self) -> tuple[list[str], list[Any]]:
        """Return the identifiers and the processors, in matching order."""
        with self._lock:
            return list(self._processors), list(self._processors.values())