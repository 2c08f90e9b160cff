"""
Inference strategies over the concept graph.

Four scoring functions estimate how two concepts relate:
- deductive: is-a reachability
- inductive: shared attributes and relation types
- analogical: parallel edges between similar concept pairs
- causal: direct or chained 'causes' edges
"""

from typing import Dict, List, Optional, Set
from collections import deque
from dataclasses import dataclass
from enum import Enum
import logging

from ..core.concept import Concept

logger = logging.getLogger(__name__)

DEDUCTION_DEPTH = 3
CAUSAL_DEPTH = 3
ANALOGY_MIN_STRENGTH = 0.5


class InferenceKind(str, Enum):
    """Inference strategies accepted by ReasoningEngine.infer"""
    DEDUCTION = "deduction"
    INDUCTION = "induction"
    ANALOGY = "analogy"
    CAUSAL = "causal"


class InferenceType(str, Enum):
    """Strategy that produced an inference result"""
    DEDUCTIVE = "deductive"
    INDUCTIVE = "inductive"
    ANALOGICAL = "analogical"
    CAUSAL = "causal"


@dataclass
class InferenceResult:
    confidence: float
    type: InferenceType
    description: str


def associated_concepts(source: Concept, relation_type: Optional[str] = None,
                        depth: int = 2) -> List[Concept]:
    """
    Collect concepts reachable from source within depth hops.

    Args:
        source: Starting concept (excluded from the result)
        relation_type: Only follow edges of this type when given
        depth: Maximum number of hops

    Returns:
        Reached concepts in breadth-first order
    """
    visited: Set[Concept] = {source}
    result = []
    queue = deque([(source, 0)])

    while queue:
        current, current_depth = queue.popleft()
        if current_depth >= depth:
            continue

        if relation_type is None:
            edge_maps = current.edges_of().values()
        else:
            edge_maps = [current.edges_of(relation_type)]

        for edges in edge_maps:
            for target in edges:
                if target not in visited:
                    visited.add(target)
                    result.append(target)
                    queue.append((target, current_depth + 1))

    return result


def find_relation_paths(source: Concept, target: Concept, relation_type: str,
                        max_depth: int) -> List[List[str]]:
    """Every simple path of at most max_depth relation_type edges from source to target"""
    paths = []
    on_path: Set[Concept] = set()

    def walk(current: Concept, path: List[str]):
        if current is target and len(path) > 1:
            paths.append(list(path))
            return
        if len(path) - 1 >= max_depth or current in on_path:
            return

        on_path.add(current)
        for following in current.edges_of(relation_type):
            path.append(following.id)
            walk(following, path)
            path.pop()
        on_path.discard(current)

    walk(source, [source.id])
    return paths


def common_attributes(first: Concept, second: Concept) -> List[str]:
    """Domain attribute keys both concepts share with equal values"""
    return [
        key for key, value in first.attributes.items()
        if key in second.attributes and second.attributes[key] == value
    ]


def attribute_similarity(first: Concept, second: Concept) -> float:
    """Shared equal attributes over the union of all attribute keys"""
    union = set(first.all_attributes()) | set(second.all_attributes())
    if not union:
        return 0.0
    return len(common_attributes(first, second)) / len(union)


class InferenceStrategies:
    """Scoring functions for the four inference strategies."""

    def deductive(self, source: Concept, target: Concept) -> InferenceResult:
        reachable = associated_concepts(source, "is-a", DEDUCTION_DEPTH)
        if target in reachable:
            return InferenceResult(
                confidence=0.9,
                type=InferenceType.DEDUCTIVE,
                description=f"{source.name} is a subtype or instance of {target.name}"
            )
        return InferenceResult(
            confidence=0.3,
            type=InferenceType.DEDUCTIVE,
            description=f"Cannot determine the relation between {source.name} and {target.name} by deduction"
        )

    def inductive(self, source: Concept, target: Concept) -> InferenceResult:
        shared_attributes = common_attributes(source, target)
        source_relations = set(source.relation_types())
        target_relations = set(target.relation_types())
        shared_relations = source_relations & target_relations

        attribute_term = len(shared_attributes) / max(source.attribute_count(), target.attribute_count())
        relation_total = max(len(source_relations), len(target_relations))
        relation_term = len(shared_relations) / relation_total if relation_total else 0.0
        similarity = attribute_term * 0.6 + relation_term * 0.4

        return InferenceResult(
            confidence=similarity,
            type=InferenceType.INDUCTIVE,
            description=(f"{source.name} and {target.name} share {len(shared_attributes)} attributes "
                         f"and {len(shared_relations)} relation types, similarity {similarity * 100:.1f}%")
        )

    def analogical(self, source: Concept, target: Concept) -> InferenceResult:
        pair_similarity = attribute_similarity(source, target)
        best_strength = 0.0
        best_description = None

        for relation_type, source_edges in source.edges_of().items():
            target_edges = target.edges_of(relation_type)
            for source_end in source_edges:
                for target_end in target_edges:
                    strength = pair_similarity * attribute_similarity(source_end, target_end)
                    if strength > ANALOGY_MIN_STRENGTH and strength > best_strength:
                        best_strength = strength
                        best_description = (f"{source.name} is to {source_end.name} "
                                            f"as {target.name} is to {target_end.name}")

        if best_description is not None:
            return InferenceResult(
                confidence=best_strength,
                type=InferenceType.ANALOGICAL,
                description=best_description
            )
        return InferenceResult(
            confidence=0.2,
            type=InferenceType.ANALOGICAL,
            description=f"No valid analogy between {source.name} and {target.name}"
        )

    def causal(self, source: Concept, target: Concept) -> InferenceResult:
        if target in source.edges_of("causes"):
            return InferenceResult(
                confidence=0.8,
                type=InferenceType.CAUSAL,
                description=f"{source.name} directly causes {target.name}"
            )

        paths = find_relation_paths(source, target, "causes", CAUSAL_DEPTH)
        if paths:
            steps = min(len(path) - 1 for path in paths)
            return InferenceResult(
                confidence=0.6,
                type=InferenceType.CAUSAL,
                description=f"{source.name} indirectly causes {target.name} in {steps} steps"
            )

        return InferenceResult(
            confidence=0.3,
            type=InferenceType.CAUSAL,
            description=f"Cannot determine a causal relation between {source.name} and {target.name}"
        )

    def run(self, kind: InferenceKind, source: Concept, target: Concept) -> InferenceResult:
        dispatch = {
            InferenceKind.DEDUCTION: self.deductive,
            InferenceKind.INDUCTION: self.inductive,
            InferenceKind.ANALOGY: self.analogical,
            InferenceKind.CAUSAL: self.causal,
        }
        return dispatch[kind](source, target)

    def run_all(self, source: Concept, target: Concept) -> Dict[InferenceType, InferenceResult]:
        return {
            InferenceType.DEDUCTIVE: self.deductive(source, target),
            InferenceType.INDUCTIVE: self.inductive(source, target),
            InferenceType.ANALOGICAL: self.analogical(source, target),
            InferenceType.CAUSAL: self.causal(source, target),
        }
