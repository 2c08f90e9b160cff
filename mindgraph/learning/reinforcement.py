"""
Reinforcement - adjust edge strengths and concept weights from outcomes
Successful experiences strengthen the used relationship and both endpoints;
failures weaken them, within fixed floors and ceilings.
"""

import logging
from typing import Deque, Optional
from collections import deque
from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, Field

from ..core.concept import Concept

logger = logging.getLogger(__name__)

SUCCESS_WEIGHT_DELTA = 0.1
FAILURE_WEIGHT_DELTA = -0.05
FAILURE_STRENGTH_FACTOR = 0.5
FREQUENCY_DELTA = 0.2


class Experience(BaseModel):
    """An observed use of a relationship and whether it worked out."""
    source: str
    target: str
    relation_type: str = Field(validation_alias=AliasChoices("relation_type", "relationType"))
    outcome: bool


@dataclass
class WeightUpdate:
    """Record of a learning update."""
    source_id: str
    target_id: str
    relation_type: str
    old_strength: Optional[float]
    new_strength: Optional[float]
    outcome: bool


class ReinforcementLearner:
    """
    Applies reinforcement to relationships and the concepts they connect.

    Attributes:
        min_strength, max_strength: Bounds for edge strength
        min_weight: Floor for concept weight
        updates: Most recent applied updates, at most history_limit
    """

    def __init__(self, min_strength: float = 0.1, max_strength: float = 2.0, min_weight: float = 0.5,
                 history_limit: int = 1000):
        self.min_strength = min_strength
        self.max_strength = max_strength
        self.min_weight = min_weight
        self.updates: Deque[WeightUpdate] = deque(maxlen=history_limit)

    def apply(self, source: Concept, target: Concept, relation_type: str,
              outcome: bool, reinforcement: float = 1.0) -> WeightUpdate:
        """
        Apply one experience.

        Args:
            source: Concept the relationship starts from
            target: Concept the relationship points to
            relation_type: Canonical relation id
            outcome: Whether using the relationship succeeded
            reinforcement: Magnitude of the strength change

        Returns:
            The recorded WeightUpdate
        """
        old_strength = new_strength = None
        info = source.get_edge(relation_type, target)
        if info is not None:
            old_strength = info.strength
            delta = reinforcement if outcome else -reinforcement * FAILURE_STRENGTH_FACTOR
            new_strength = min(self.max_strength, max(self.min_strength, info.strength + delta))
            info.strength = new_strength
            info.last_used_at = source.clock()
            logger.debug(f"Edge {source.id} -{relation_type}-> {target.id}: {old_strength:.3f} -> {new_strength:.3f}")
        else:
            logger.debug(f"No {relation_type} edge from {source.id} to {target.id}, adjusting concepts only")

        weight_delta = SUCCESS_WEIGHT_DELTA if outcome else FAILURE_WEIGHT_DELTA
        for concept in (source, target):
            concept.params.weight = max(self.min_weight, concept.params.weight + weight_delta)
            concept.params.frequency += FREQUENCY_DELTA

        update = WeightUpdate(
            source_id=source.id,
            target_id=target.id,
            relation_type=relation_type,
            old_strength=old_strength,
            new_strength=new_strength,
            outcome=outcome
        )
        self.updates.append(update)
        return update
