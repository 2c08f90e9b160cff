"""Inference strategies and decision scoring."""

from .inference import (
    InferenceKind,
    InferenceType,
    InferenceResult,
    InferenceStrategies,
    associated_concepts,
    find_relation_paths,
    attribute_similarity,
)
from .decision import Decision, OptionEvaluation, context_relatedness

__all__ = [
    "InferenceKind",
    "InferenceType",
    "InferenceResult",
    "InferenceStrategies",
    "associated_concepts",
    "find_relation_paths",
    "attribute_similarity",
    "Decision",
    "OptionEvaluation",
    "context_relatedness",
]
