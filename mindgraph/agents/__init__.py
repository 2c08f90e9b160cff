from .relation_agent import (
    RelationAgent,
    RelationOracle,
    RelationSuggestion,
    SuggestionSource,
    detect_relation_type,
    name_similarity,
)

__all__ = [
    "RelationAgent",
    "RelationOracle",
    "RelationSuggestion",
    "SuggestionSource",
    "detect_relation_type",
    "name_similarity",
]
