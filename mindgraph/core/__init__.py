"""
Core components of the mindgraph reasoning engine.

This module contains the fundamental building blocks:
- Concept: Graph nodes with activation state and typed relationships
- RelationshipTypeRegistry: Relation ids, display labels and inverses
- WorkingMemory: Bounded cache of recently activated concepts
- ReasoningEngine: The graph and every reasoning operation over it
"""

from .relationship_types import (
    RelationshipType,
    RelationshipTypeRegistry,
    INVERSE_RELATIONS,
    RELATED_TO,
)
from .concept import (
    ActivationConfig,
    Concept,
    ConceptParameters,
    ConceptType,
    RelationInfo,
    RESERVED_ATTRIBUTES,
)
from .working_memory import ConfigurationError, MemoryEntry, WorkingMemory
from .reasoning_engine import ActivationRecord, ReasoningEngine, ThoughtRecord, ThoughtStep

__all__ = [
    # Core classes
    "Concept",
    "ReasoningEngine",
    "RelationshipTypeRegistry",
    "WorkingMemory",

    # Data structures
    "ActivationConfig",
    "ActivationRecord",
    "ConceptParameters",
    "ConceptType",
    "MemoryEntry",
    "RelationInfo",
    "RelationshipType",
    "ThoughtRecord",
    "ThoughtStep",

    # Errors and constants
    "ConfigurationError",
    "INVERSE_RELATIONS",
    "RELATED_TO",
    "RESERVED_ATTRIBUTES",
]
