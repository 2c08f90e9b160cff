"""
Graph snapshot export for external rendering.

Produces a read-only node/edge projection of the engine state. Each
relationship and its mirrored reverse edge are emitted once, in the direction
met first while iterating concepts in insertion order.
"""

from typing import TYPE_CHECKING, List, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..core.reasoning_engine import ReasoningEngine


class SnapshotNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    activation_value: float = Field(alias="activationValue")
    weight: float
    type: str
    category: str
    frequency: float


class SnapshotEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    relation_type: str = Field(alias="relationType")
    relation_label: str = Field(alias="relationLabel")
    strength_value: float = Field(alias="strengthValue")


class GraphSnapshot(BaseModel):
    nodes: List[SnapshotNode] = Field(default_factory=list)
    edges: List[SnapshotEdge] = Field(default_factory=list)

    def to_dict(self):
        '''Plain dictionary using the external camelCase keys and 'from'/'to' for edges'''
        return self.model_dump(by_alias=True)


class GraphSnapshotExporter:
    """Builds GraphSnapshot views of a ReasoningEngine."""

    def __init__(self, engine: "ReasoningEngine"):
        self.engine = engine

    def export(self) -> GraphSnapshot:
        registry = self.engine.relationship_types
        nodes = []
        edges = []
        emitted: Set[Tuple[str, str, str]] = set()
        mirrored: Set[Tuple[str, str, str]] = set()

        for concept_id, concept in self.engine.concepts.items():
            nodes.append(SnapshotNode(
                id=concept_id,
                label=concept.name,
                activation_value=concept.current_activation(),
                weight=concept.weight,
                type=concept.params.type.value,
                category=concept.category,
                frequency=concept.frequency
            ))

        for concept_id, concept in self.engine.concepts.items():
            for relation_type, targets in concept.edges_of().items():
                for target, info in targets.items():
                    key = (concept_id, relation_type, target.id)
                    if key in emitted or key in mirrored:
                        continue
                    # free-form relations mirror as related-to, so also match
                    # an already emitted reverse edge by this edge's inverse
                    if (target.id, registry.inverse_of(relation_type), concept_id) in emitted:
                        continue

                    edges.append(SnapshotEdge(
                        from_id=concept_id,
                        to_id=target.id,
                        relation_type=relation_type,
                        relation_label=registry.label_of(relation_type),
                        strength_value=info.strength
                    ))
                    emitted.add(key)
                    mirrored.add((target.id, registry.inverse_of(relation_type), concept_id))

        return GraphSnapshot(nodes=nodes, edges=edges)
