from typing import Dict, Iterator, Optional
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

RELATED_TO = "related-to"

# Inverse relation table, read in both directions
INVERSE_RELATIONS: Dict[str, str] = {
    "is-a": "has-subtype",
    "has-a": "part-of",
    "causes": "caused-by",
    "needs": "needed-by",
    "similar-to": "similar-to",
    "opposite-to": "opposite-to",
}
INVERSE_RELATIONS.update({inverse: forward for forward, inverse in list(INVERSE_RELATIONS.items())})

# Labels used when an inverse type has to be registered on demand
INVERSE_LABELS: Dict[str, str] = {
    "has-subtype": "has subtype",
    "part-of": "is part of",
    "caused-by": "is caused by",
    "needed-by": "is needed by",
}

DEFAULT_RELATIONSHIP_TYPES = [
    ("is-a", "is a", "Hypernym relation between a concept and its broader class"),
    ("has-a", "has", "Composition relation between a whole and one of its parts"),
    (RELATED_TO, "related to", "Generic association between two concepts"),
    ("causes", "causes", "Causal relation from a cause to its effect"),
    ("similar-to", "similar to", "Similarity relation between two concepts"),
    ("needs", "needs", "Dependency relation from a concept to what it requires"),
    ("part-of", "is part of", "Part relation from a component to its whole"),
    ("opposite-to", "opposite to", "Opposition relation between two concepts"),
]


class RelationshipType(BaseModel):
    id: str
    label: str
    description: str = ""


class RelationshipTypeRegistry:
    """
    Bidirectional mapping between canonical relation ids and display labels.

    Lookups never fail: unknown ids and labels pass through unchanged so that
    free-form relation text can always be used to build the graph.
    """

    def __init__(self, seed_defaults: bool = True):
        self._types: Dict[str, RelationshipType] = {}
        self._id_by_label: Dict[str, str] = {}
        self._label_by_id: Dict[str, str] = {}

        if seed_defaults:
            for type_id, label, description in DEFAULT_RELATIONSHIP_TYPES:
                self.register(type_id, label, description)

    def register(self, type_id: str, label: str, description: str = "") -> RelationshipType:
        """Insert or overwrite a relation type and both direction mappings"""
        relationship_type = RelationshipType(id=type_id, label=label, description=description)

        previous_label = self._label_by_id.get(type_id)
        if previous_label is not None and self._id_by_label.get(previous_label) == type_id:
            del self._id_by_label[previous_label]

        self._types[type_id] = relationship_type
        self._id_by_label[label] = type_id
        self._label_by_id[type_id] = label
        logger.debug(f"Registered relationship type {type_id} ({label})")
        return relationship_type

    def ensure(self, type_id: str) -> str:
        """Register an unknown relation id under its own name"""
        if type_id not in self._types:
            self.register(type_id, type_id, f"Free-form relation '{type_id}'")
        return type_id

    def label_of(self, type_id: str) -> str:
        return self._label_by_id.get(type_id, type_id)

    def id_of(self, label: str) -> str:
        return self._id_by_label.get(label, label)

    def inverse_of(self, type_id: str) -> str:
        """
        Get the canonical inverse of a relation type.

        Types outside the inverse table map to 'related-to'. The inverse is
        registered on first use so a reverse edge can always be materialized.

        Args:
            type_id: Canonical relation id

        Returns:
            The inverse relation id
        """
        inverse = INVERSE_RELATIONS.get(type_id, RELATED_TO)

        if inverse not in self._label_by_id:
            label = INVERSE_LABELS.get(inverse, inverse)
            self.register(inverse, label, f"Inverse of the '{type_id}' relation")

        return inverse

    def get(self, type_id: str) -> Optional[RelationshipType]:
        return self._types.get(type_id)

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._types))

    def __len__(self) -> int:
        return len(self._types)
