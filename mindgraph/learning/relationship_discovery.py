"""
Relationship Discovery - propose new relationships from inference results
Every unlinked concept pair is scored by the four inference strategies; pairs
whose average confidence clears the threshold are connected.
"""

import logging
import threading
from typing import TYPE_CHECKING, Callable, List, Optional
from dataclasses import dataclass

import numpy as np

from ..core.concept import Concept
from ..core.relationship_types import RELATED_TO
from ..reasoning.inference import InferenceType

if TYPE_CHECKING:
    from ..core.reasoning_engine import ReasoningEngine

logger = logging.getLogger(__name__)

STRONG_CONFIDENCE = 0.7

RELATION_FOR_INFERENCE = {
    InferenceType.DEDUCTIVE: "is-a",
    InferenceType.INDUCTIVE: "similar-to",
    InferenceType.ANALOGICAL: "similar-to",
    InferenceType.CAUSAL: "causes",
}


@dataclass
class DiscoveredRelationship:
    source: str
    target: str
    relation_type: str
    confidence: float
    inference_type: InferenceType


class RelationshipDiscoverer:
    """Finds and adds relationships between concepts that are not yet linked."""

    def __init__(self, engine: "ReasoningEngine"):
        self.engine = engine

    def _linked(self, first: Concept, second: Concept) -> bool:
        for relation_type in self.engine.relationship_types:
            if second in first.edges_of(relation_type) or first in second.edges_of(relation_type):
                return True
        return False

    def discover(self, threshold: float = 0.5, max_new: int = 10) -> List[DiscoveredRelationship]:
        """
        Score every unlinked pair and connect the confident ones.

        Pairs are visited in concept insertion order, earlier concepts as source.

        Args:
            threshold: Minimum average confidence over the four strategies
            max_new: Stop after this many relationships

        Returns:
            The relationships that were added
        """
        discovered: List[DiscoveredRelationship] = []
        if max_new < 1:
            return discovered

        concepts = list(self.engine.concepts.values())
        strategies = self.engine.strategies

        for i, source in enumerate(concepts):
            for target in concepts[i + 1:]:
                if self._linked(source, target):
                    continue

                results = list(strategies.run_all(source, target).values())
                average = float(np.mean([result.confidence for result in results]))
                if average < threshold:
                    continue

                best = max(results, key=lambda result: result.confidence)
                relation_type = RELATED_TO
                if best.confidence > STRONG_CONFIDENCE:
                    relation_type = RELATION_FOR_INFERENCE[best.type]

                self.engine.add_relationship(source.id, relation_type, target.id, average)
                discovered.append(DiscoveredRelationship(
                    source=source.id,
                    target=target.id,
                    relation_type=relation_type,
                    confidence=average,
                    inference_type=best.type
                ))
                logger.debug(f"Discovered {source.id} -{relation_type}-> {target.id} ({average:.3f})")

                if len(discovered) >= max_new:
                    return discovered

        return discovered


class AutoDiscoveryScheduler:
    """
    Runs relationship discovery on a fixed interval in a background thread.

    Discovered relationships are passed to the callback; the engine lock is
    held for the duration of each run.
    """

    def __init__(
        self,
        engine: "ReasoningEngine",
        interval: float = 5.0,
        threshold: float = 0.5,
        max_new: int = 5,
        callback: Optional[Callable[[List[DiscoveredRelationship]], None]] = None
    ):
        self.engine = engine
        self.interval = interval
        self.threshold = threshold
        self.max_new = max_new
        self.callback = callback

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the background discovery thread."""
        if self.is_running:
            return

        self._stop_event.clear()

        def discover_periodically():
            while not self._stop_event.wait(self.interval):
                self.run_once()

        self._thread = threading.Thread(target=discover_periodically, name="auto-discovery", daemon=True)
        self._thread.start()
        logger.info(f"Started auto discovery thread (interval: {self.interval}s)")

    def stop(self, timeout: Optional[float] = None):
        """Stop the background thread and wait for it to finish."""
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            logger.info("Stopped auto discovery thread")

    def run_once(self) -> List[DiscoveredRelationship]:
        """Run a single discovery pass and notify the callback."""
        with self.engine.lock:
            discovered = self.engine.auto_discover_relationships(self.threshold, self.max_new)
        self.runs += 1

        if discovered:
            logger.info(f"Auto discovery found {len(discovered)} new relationships")
            if self.callback is not None:
                try:
                    self.callback(discovered)
                except Exception as e:
                    logger.error(f"Auto discovery callback failed: {e}")

        return discovered
