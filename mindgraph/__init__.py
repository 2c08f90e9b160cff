"""
mindgraph: an in-memory semantic network reasoning engine.

Concepts are connected by typed, weighted relationships that are mirrored in
the reverse direction. On top of the graph the engine offers activation
spreading, deductive/inductive/analogical/causal inference, decision scoring,
reinforcement learning, a bounded working memory and automatic relationship
discovery.
"""

from .core import Concept, ConfigurationError, ReasoningEngine, RelationshipTypeRegistry, WorkingMemory
from .config import Settings, get_settings
from .learning import DiscoveredRelationship, Experience
from .reasoning import Decision, InferenceKind, InferenceResult, InferenceType
from .visualization import GraphSnapshot

__version__ = "0.1.0"

__all__ = [
    "Concept",
    "ConfigurationError",
    "Decision",
    "DiscoveredRelationship",
    "Experience",
    "GraphSnapshot",
    "InferenceKind",
    "InferenceResult",
    "InferenceType",
    "ReasoningEngine",
    "RelationshipTypeRegistry",
    "Settings",
    "WorkingMemory",
    "get_settings",
]
