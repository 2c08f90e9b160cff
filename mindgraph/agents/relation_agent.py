"""
Relation Agent
Suggests a relation type for a pair of concepts. An optional external oracle
(for example a language model client) is consulted first; its answers are
advisory, and any failure falls back to a local heuristic.
"""

from abc import ABC, abstractmethod
from typing import Optional
from dataclasses import dataclass
from enum import Enum
import logging

from ..core.concept import Concept
from ..core.relationship_types import RELATED_TO

logger = logging.getLogger(__name__)

SUPPORTED_RELATION_TYPES = ("is-a", "similar-to", "related-to", "has-a", "needs", "causes")


class SuggestionSource(Enum):
    """Where a relation suggestion came from."""
    ORACLE = "oracle"
    HEURISTIC = "heuristic"


@dataclass
class RelationSuggestion:
    relation_type: str
    source: SuggestionSource


class RelationOracle(ABC):
    """Abstract external collaborator that labels concept pairs."""

    @abstractmethod
    def suggest_relation_type(self, source: Concept, target: Concept) -> Optional[str]:
        """Return a relation id for the pair, or None when unsure."""
        pass


def name_similarity(first: str, second: str) -> float:
    '''Positional character overlap of two names'''
    if not first or not second:
        return 0.0
    matches = sum(1 for a, b in zip(first, second) if a == b)
    return matches / max(len(first), len(second))


def _descriptive_attributes(concept: Concept) -> dict:
    attributes = dict(concept.attributes)
    attributes["category"] = concept.category
    return attributes


def detect_relation_type(source: Concept, target: Concept) -> str:
    """
    Local heuristic relation detection.

    Combines attribute similarity (weight 0.7) and name similarity (weight 0.3).

    Args:
        source: Concept the relation would start from
        target: Concept the relation would point to

    Returns:
        'similar-to' for close pairs, 'related-to' otherwise
    """
    names = name_similarity(source.name, target.name)

    source_attrs = _descriptive_attributes(source)
    target_attrs = _descriptive_attributes(target)
    common = sum(1 for key, value in source_attrs.items()
                 if key in target_attrs and target_attrs[key] == value)
    largest = max(len(source_attrs), len(target_attrs))
    attrs = common / largest if largest > 0 else 0.0

    similarity = attrs * 0.7 + names * 0.3
    if similarity > 0.5 or names > 0.6:
        return "similar-to"
    return RELATED_TO


class RelationAgent:
    """
    Picks relation types for concept pairs.

    Attributes:
        oracle: Optional external RelationOracle consulted before the heuristic
    """

    def __init__(self, oracle: Optional[RelationOracle] = None):
        self.oracle = oracle

    def _ask_oracle(self, source: Concept, target: Concept) -> Optional[str]:
        if self.oracle is None:
            return None
        try:
            suggestion = self.oracle.suggest_relation_type(source, target)
        except Exception as e:
            logger.warning(f"Relation oracle failed for {source.id} -> {target.id}, using local detection: {e}")
            return None

        if suggestion is None:
            return None
        suggestion = suggestion.strip()
        if suggestion not in SUPPORTED_RELATION_TYPES:
            logger.warning(f"Ignoring unsupported oracle relation '{suggestion}'")
            return None
        return suggestion

    def suggest(self, source: Concept, target: Concept) -> RelationSuggestion:
        """Suggest a relation type, oracle first, heuristic as fallback"""
        relation_type = self._ask_oracle(source, target)
        if relation_type is not None:
            return RelationSuggestion(relation_type=relation_type, source=SuggestionSource.ORACLE)

        return RelationSuggestion(
            relation_type=detect_relation_type(source, target),
            source=SuggestionSource.HEURISTIC
        )
