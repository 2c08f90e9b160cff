"""
Working Memory - short-term store of recently activated concepts.

Capacity defaults to 7 entries. When a new concept arrives at capacity, the
entry with the lowest activation is evicted, the oldest one on ties.
"""

from typing import Callable, Dict, List
from dataclasses import dataclass
import logging
import time

from .concept import Concept

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 7


@dataclass
class MemoryEntry:
    """A concept held in working memory."""
    concept: Concept
    activation: float
    timestamp: float


class WorkingMemory:
    """
    Fixed-capacity cache of recently activated concepts keyed by concept id.

    Attributes:
        capacity: Maximum number of entries
        clock: Time source for entry timestamps
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, clock: Callable[[], float] = time.time):
        if capacity < 1:
            raise ConfigurationError(f"Working memory capacity must be positive, got {capacity}")

        self.capacity = capacity
        self.clock = clock
        self._entries: Dict[str, MemoryEntry] = {}

    def insert(self, concept: Concept, activation: float):
        """
        Upsert a concept, evicting the weakest entry when a new id arrives at capacity.

        Args:
            concept: Concept to remember
            activation: Activation value recorded with the entry
        """
        if concept.id not in self._entries and len(self._entries) >= self.capacity:
            self._evict()

        self._entries[concept.id] = MemoryEntry(concept=concept, activation=activation, timestamp=self.clock())

    def _evict(self):
        victim_id = None
        victim = None
        for concept_id, entry in self._entries.items():
            if (victim is None or entry.activation < victim.activation or
                    (entry.activation == victim.activation and entry.timestamp < victim.timestamp)):
                victim_id, victim = concept_id, entry

        if victim_id is not None:
            del self._entries[victim_id]
            logger.debug(f"Evicted {victim_id} from working memory (activation {victim.activation:.3f})")

    def snapshot(self) -> List[Concept]:
        return [entry.concept for entry in self._entries.values()]

    def entries(self) -> List[MemoryEntry]:
        return list(self._entries.values())

    def get(self, concept_id: str):
        return self._entries.get(concept_id)

    def clear(self):
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, concept_id: str) -> bool:
        return concept_id in self._entries

    def __repr__(self):
        return f"WorkingMemory(size={len(self._entries)}, capacity={self.capacity})"


class ConfigurationError(ValueError):
    """Raised when the engine is constructed with invalid configuration"""
    pass
