# mindgraph/learning/__init__.py
"""Learning module: reinforcement updates and relationship discovery."""

from .reinforcement import Experience, ReinforcementLearner, WeightUpdate
from .relationship_discovery import (
    AutoDiscoveryScheduler,
    DiscoveredRelationship,
    RelationshipDiscoverer,
)

__all__ = [
    'Experience',
    'ReinforcementLearner',
    'WeightUpdate',
    'AutoDiscoveryScheduler',
    'DiscoveredRelationship',
    'RelationshipDiscoverer',
]
