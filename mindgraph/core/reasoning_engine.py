from typing import Any, Callable, Deque, Dict, Iterator, List, Mapping, Optional, Union
import itertools
import logging
import random
import threading
import time
from collections import Counter, deque
from dataclasses import dataclass, field

from .concept import ActivationConfig, Concept, ConceptParameters, ConceptType
from .relationship_types import RelationshipTypeRegistry
from .working_memory import ConfigurationError, WorkingMemory
from ..agents.relation_agent import RelationAgent, RelationOracle, RelationSuggestion
from ..config.settings import Settings, get_settings
from ..learning.reinforcement import Experience, ReinforcementLearner
from ..learning.relationship_discovery import (
    AutoDiscoveryScheduler,
    DiscoveredRelationship,
    RelationshipDiscoverer,
)
from ..reasoning.decision import Decision, choose, evaluate_option
from ..reasoning.inference import (
    InferenceKind,
    InferenceResult,
    InferenceStrategies,
    associated_concepts,
    find_relation_paths,
)
from ..visualization.snapshot import GraphSnapshot, GraphSnapshotExporter

logger = logging.getLogger(__name__)

# Result type names accepted as inference kinds
INFERENCE_KIND_ALIASES = {
    "deductive": InferenceKind.DEDUCTION,
    "inductive": InferenceKind.INDUCTION,
    "analogical": InferenceKind.ANALOGY,
}


@dataclass
class ActivationRecord:
    activation: float
    depth: int


@dataclass
class ThoughtRecord:
    """One entry of the thinking history."""
    kind: str
    timestamp: float
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ThoughtStep:
    from_id: str
    to_id: str
    relation_type: str
    strength: float
    activation: float
    timestamp: float


class ReasoningEngine:
    """
    Semantic network reasoning engine.

    Owns every concept, the relationship type registry, the working memory and
    the thinking history. Operations on unknown concept ids are no-ops; they
    are counted in `diagnostics` and logged rather than raised.

    The engine is single threaded. Hosts that call it from several threads,
    and the auto-discovery worker, hold `lock` around each call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], float]] = None,
        relation_oracle: Optional[RelationOracle] = None,
        working_memory_capacity: Optional[int] = None,
        history_limit: Optional[int] = None
    ):
        """
        Initialize an empty engine

        Args:
            settings: Engine settings (defaults to get_settings())
            clock: Time source in seconds, injectable for tests
            relation_oracle: Optional external relation labeller
            working_memory_capacity: Overrides settings.working_memory_capacity
            history_limit: Overrides settings.history_limit
        """
        self.settings = settings or get_settings()
        self.clock = clock or time.time

        capacity = working_memory_capacity if working_memory_capacity is not None else self.settings.working_memory_capacity
        limit = history_limit if history_limit is not None else self.settings.history_limit
        if limit < 1:
            raise ConfigurationError(f"History limit must be positive, got {limit}")

        self.activation_config = ActivationConfig.from_settings(self.settings)
        self.concepts: Dict[str, Concept] = {}
        self.relationship_types = RelationshipTypeRegistry()
        self.working_memory = WorkingMemory(capacity, clock=self.clock)
        self.thinking_history: Deque[ThoughtRecord] = deque(maxlen=limit)
        self.diagnostics: Counter = Counter()

        self.strategies = InferenceStrategies()
        self.learner = ReinforcementLearner(
            min_strength=self.settings.min_edge_strength,
            max_strength=self.settings.max_edge_strength,
            min_weight=self.settings.min_concept_weight,
            history_limit=limit
        )
        self.discoverer = RelationshipDiscoverer(self)
        self.relation_agent = RelationAgent(relation_oracle)
        self.exporter = GraphSnapshotExporter(self)

        self.lock = threading.RLock()
        self._scheduler: Optional[AutoDiscoveryScheduler] = None

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _record(self, kind: str, **details):
        self.thinking_history.append(ThoughtRecord(kind=kind, timestamp=self.clock(), details=details))

    def _note_unknown(self, operation: str, *concept_ids: str):
        self.diagnostics[f"{operation}.unknown_concept"] += 1
        logger.debug(f"{operation}: unknown concept id in {concept_ids}, ignoring")

    def _resolve_pair(self, operation: str, source_id: str, target_id: str):
        source = self.concepts.get(source_id)
        target = self.concepts.get(target_id)
        if source is None or target is None:
            self._note_unknown(operation, source_id, target_id)
            return None, None
        return source, target

    # ------------------------------------------------------------------
    # Concepts and relationships
    # ------------------------------------------------------------------

    def _split_attributes(self, concept_id: str, attributes: Optional[Mapping[str, Any]]):
        domain = dict(attributes or {})
        params = ConceptParameters()

        if "category" in domain:
            params.category = str(domain.pop("category"))
        if "type" in domain:
            concept_type = domain.pop("type")
            try:
                params.type = ConceptType(concept_type)
            except ValueError:
                self.diagnostics["invalid_concept_type"] += 1
                logger.warning(f"Unknown concept type '{concept_type}' for {concept_id}, using 'common'")

        for key in ("activation", "weight", "frequency"):
            if key in domain:
                domain.pop(key)
                self.diagnostics["reserved_attribute_ignored"] += 1
                logger.warning(f"Ignoring reserved attribute '{key}' supplied for {concept_id}")

        return domain, params

    def add_concept(self, concept_id: str, name: str, attributes: Optional[Mapping[str, Any]] = None) -> Concept:
        """
        Add a concept to the graph

        'category' and 'type' in attributes seed the reserved fields. Re-adding
        an existing id updates its name and attributes in place and keeps its
        relationships and activation state.

        Args:
            concept_id: Unique identifier
            name: Display label
            attributes: Domain attributes

        Returns:
            The stored Concept
        """
        domain, params = self._split_attributes(concept_id, attributes)

        existing = self.concepts.get(concept_id)
        if existing is not None:
            self.diagnostics["duplicate_concept"] += 1
            logger.warning(f"Concept {concept_id} already exists, updating it in place")
            existing.name = name
            existing.attributes = domain
            existing.params.category = params.category
            existing.params.type = params.type
            return existing

        concept = Concept(
            id=concept_id,
            name=name,
            attributes=domain,
            params=params,
            config=self.activation_config,
            clock=self.clock
        )
        self.concepts[concept_id] = concept
        logger.info(f"Added concept {concept_id}: {name}")
        return concept

    def get_concept(self, concept_id: str) -> Optional[Concept]:
        return self.concepts.get(concept_id)

    def add_relationship(self, source_id: str, relation_type: str, target_id: str,
                         strength: float = 1.0) -> bool:
        """
        Add a relationship and its mirrored reverse edge

        The reverse edge uses the inverse relation type and a reduced strength.

        Args:
            source_id: Source concept ID
            relation_type: Relation id or display label
            target_id: Target concept ID
            strength: Forward edge strength

        Returns:
            True if created, False if either concept is unknown
        """
        source, target = self._resolve_pair("add_relationship", source_id, target_id)
        if source is None:
            return False

        forward = self.relationship_types.ensure(self.relationship_types.id_of(relation_type))
        info = source.add_edge(forward, target, strength)

        # reverse strength follows the clamped forward edge
        reverse = self.relationship_types.inverse_of(forward)
        target.add_edge(reverse, source, info.strength * self.settings.reverse_strength_factor)

        logger.debug(f"Created relationship: {source_id} -{forward}-> {target_id} ({info.strength:.3f}), reverse {reverse}")
        return True

    def expand_concept(self, base_id: str, new_id: str, new_name: str,
                       additional_attributes: Optional[Mapping[str, Any]] = None) -> Optional[Concept]:
        """Create a concept that inherits the base's attributes and is-a the base"""
        base = self.concepts.get(base_id)
        if base is None:
            self._note_unknown("expand_concept", base_id)
            return None

        attributes = {"category": base.category, "type": base.params.type.value}
        attributes.update(base.attributes)
        attributes.update(additional_attributes or {})

        concept = self.add_concept(new_id, new_name, attributes)
        self.add_relationship(new_id, "is-a", base_id)
        return concept

    def suggest_relation_type(self, source_id: str, target_id: str) -> Optional[RelationSuggestion]:
        source, target = self._resolve_pair("suggest_relation_type", source_id, target_id)
        if source is None:
            return None
        return self.relation_agent.suggest(source, target)

    def connect(self, source_id: str, target_id: str, strength: float = 1.0) -> Optional[str]:
        """Add a relationship whose type is chosen by the relation agent"""
        suggestion = self.suggest_relation_type(source_id, target_id)
        if suggestion is None:
            return None

        self.add_relationship(source_id, suggestion.relation_type, target_id, strength)
        logger.info(f"Connected {source_id} -{suggestion.relation_type}-> {target_id} "
                    f"({suggestion.source.value})")
        return suggestion.relation_type

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def spread_activation(self, source_id: str, initial_activation: float = 0.8,
                          max_depth: int = 3, decay: float = 0.5) -> Dict[Concept, ActivationRecord]:
        """
        Spread activation breadth-first from a source concept

        An edge propagates activation x strength x decay^(depth+1) and fires
        only above its activation threshold. A concept is re-recorded only when
        reached at a strictly smaller depth.

        Args:
            source_id: Concept to start from
            initial_activation: Activation level applied to the source
            max_depth: Concepts at this depth are recorded but not expanded
            decay: Per-hop attenuation

        Returns:
            Mapping of activated Concept -> ActivationRecord
        """
        activated: Dict[Concept, ActivationRecord] = {}

        source = self.concepts.get(source_id)
        if source is None:
            self._note_unknown("spread_activation", source_id)
            return activated

        source_activation = source.activate(initial_activation)
        activated[source] = ActivationRecord(activation=source_activation, depth=0)
        self.working_memory.insert(source, source_activation)
        queue = deque([(source, source_activation, 0)])

        while queue:
            current, activation, depth = queue.popleft()

            for relation_type, edges in list(current.edges_of().items()):
                for target, info in list(edges.items()):
                    previous = activated.get(target)
                    if previous is not None and depth + 1 >= previous.depth:
                        continue

                    propagated = activation * info.strength * decay ** (depth + 1)
                    if propagated <= info.activation_threshold:
                        continue

                    target_activation = target.activate(propagated)
                    activated[target] = ActivationRecord(activation=target_activation, depth=depth + 1)
                    self.working_memory.insert(target, target_activation)

                    if depth + 1 < max_depth:
                        queue.append((target, target_activation, depth + 1))

        self._record(
            "spread_activation",
            source=source_id,
            activated=[concept.id for concept in activated]
        )
        return activated

    def decay_all(self):
        """Apply passive decay to every concept"""
        for concept in self.concepts.values():
            concept.decay_passive()

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def _parse_inference_kind(self, kind: Union[str, InferenceKind]) -> InferenceKind:
        if isinstance(kind, str) and kind in INFERENCE_KIND_ALIASES:
            return INFERENCE_KIND_ALIASES[kind]
        try:
            return InferenceKind(kind)
        except ValueError:
            self.diagnostics["unknown_inference_kind"] += 1
            logger.warning(f"Unknown inference kind '{kind}', using deduction")
            return InferenceKind.DEDUCTION

    def infer(self, source_id: str, target_id: str,
              kind: Union[str, InferenceKind] = InferenceKind.DEDUCTION) -> Optional[InferenceResult]:
        """
        Estimate how source relates to target with one inference strategy

        Activation is spread from the source first.

        Args:
            source_id: Source concept ID
            target_id: Target concept ID
            kind: deduction, induction, analogy or causal

        Returns:
            InferenceResult, or None if either concept is unknown
        """
        source, target = self._resolve_pair("infer", source_id, target_id)
        if source is None:
            return None

        inference_kind = self._parse_inference_kind(kind)
        self.spread_activation(source_id, 0.6, 2)
        result = self.strategies.run(inference_kind, source, target)

        self._record(
            "inference",
            source=source_id,
            target=target_id,
            inference_kind=inference_kind.value,
            result=result
        )
        return result

    def get_associated_concepts(self, source_id: str, relation_type: Optional[str] = None,
                                depth: int = 2) -> List[Concept]:
        source = self.concepts.get(source_id)
        if source is None:
            self._note_unknown("get_associated_concepts", source_id)
            return []
        if relation_type is not None:
            relation_type = self.relationship_types.id_of(relation_type)
        return associated_concepts(source, relation_type, depth)

    def find_causal_paths(self, source_id: str, target_id: str, max_depth: int = 3) -> List[List[str]]:
        source, target = self._resolve_pair("find_causal_paths", source_id, target_id)
        if source is None:
            return []
        return find_relation_paths(source, target, "causes", max_depth)

    # ------------------------------------------------------------------
    # Decision and learning
    # ------------------------------------------------------------------

    def decide(self, options: List[str], context: Optional[Mapping[str, Any]] = None) -> Decision:
        """
        Score options and choose the most confident one

        Unknown options are scored on a throwaway concept.

        Args:
            options: Concept ids to choose between
            context: Attributes the chosen concept should match

        Returns:
            Decision with the chosen option, its confidence and every evaluation
        """
        context = dict(context or {})
        evaluations = []

        for option in options:
            concept = self.concepts.get(option)
            if concept is None:
                self._note_unknown("decide", option)
                concept = Concept(id=option, name=option, config=self.activation_config, clock=self.clock)
            else:
                self.spread_activation(option, 0.7)
            evaluations.append(evaluate_option(option, concept, context))

        decision = choose(evaluations)
        self._record(
            "decision",
            options=list(options),
            chosen=decision.chosen,
            confidence=decision.confidence,
            evaluations=decision.evaluations
        )
        return decision

    def learn(self, experience: Union[Experience, Mapping[str, Any]], reinforcement: float = 1.0) -> bool:
        """
        Reinforce or weaken a relationship from an observed outcome

        Args:
            experience: Experience (or mapping) with source, target, relation_type and outcome
            reinforcement: Magnitude of the strength change

        Returns:
            True if applied, False if either concept is unknown
        """
        if not isinstance(experience, Experience):
            experience = Experience.model_validate(experience)

        source, target = self._resolve_pair("learn", experience.source, experience.target)
        if source is None:
            return False

        relation_type = self.relationship_types.id_of(experience.relation_type)
        update = self.learner.apply(source, target, relation_type, experience.outcome, reinforcement)

        self.working_memory.insert(source, source.current_activation())
        self.working_memory.insert(target, target.current_activation())

        self._record("learning", experience=experience, reinforcement=reinforcement, update=update)
        return True

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def auto_discover_relationships(self, threshold: float = 0.5, max_new: int = 10) -> List[DiscoveredRelationship]:
        """Connect unlinked concept pairs whose average inference confidence clears threshold"""
        discovered = self.discoverer.discover(threshold, max_new)
        if discovered:
            logger.info(f"Discovered {len(discovered)} new relationships")
        self._record(
            "auto_discovery",
            threshold=threshold,
            discovered=[(d.source, d.relation_type, d.target) for d in discovered]
        )
        return discovered

    def start_auto_discovery(
        self,
        interval: Optional[float] = None,
        threshold: Optional[float] = None,
        max_new: Optional[int] = None,
        callback: Optional[Callable[[List[DiscoveredRelationship]], None]] = None
    ) -> AutoDiscoveryScheduler:
        """Start periodic discovery, replacing any running schedule"""
        if self._scheduler is not None:
            self.stop_auto_discovery()

        params = self.settings.get_discovery_params()
        self._scheduler = AutoDiscoveryScheduler(
            self,
            interval=interval if interval is not None else params["interval"],
            threshold=threshold if threshold is not None else params["threshold"],
            max_new=max_new if max_new is not None else params["max_new"],
            callback=callback
        )
        self._scheduler.start()
        return self._scheduler

    def stop_auto_discovery(self):
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

    @property
    def is_auto_discovering(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running

    # ------------------------------------------------------------------
    # Thought flow
    # ------------------------------------------------------------------

    def thought_flow(self, start_id: Optional[str] = None, seed: Optional[int] = None) -> Iterator[ThoughtStep]:
        """
        Wander through the graph, one transition per iteration

        Each step activates the current concept and moves along one of its
        three strongest relationships. The flow ends at a concept without
        outgoing relationships; otherwise the caller decides when to stop.

        Args:
            start_id: Starting concept (random when omitted)
            seed: Seed for the transition choices

        Yields:
            ThoughtStep for every transition
        """
        rng = random.Random(seed)
        if start_id is not None:
            current = self.concepts.get(start_id)
            if current is None:
                self._note_unknown("thought_flow", start_id)
                return
        elif self.concepts:
            current = rng.choice(list(self.concepts.values()))
        else:
            return

        while True:
            activation = current.activate(0.6)
            related = [
                (target, relation_type, info)
                for relation_type, edges in current.edges_of().items()
                for target, info in edges.items()
            ]
            if not related:
                return

            related.sort(key=lambda item: item[2].strength, reverse=True)
            target, relation_type, info = related[min(rng.randrange(3), len(related) - 1)]

            yield ThoughtStep(
                from_id=current.id,
                to_id=target.id,
                relation_type=relation_type,
                strength=info.strength,
                activation=activation,
                timestamp=self.clock()
            )
            current = target

    def simulate_thought_flow(self, steps: int = 10, start_id: Optional[str] = None,
                              seed: Optional[int] = None) -> List[ThoughtStep]:
        return list(itertools.islice(self.thought_flow(start_id, seed), steps))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def cluster_concepts(self) -> Dict[str, List[Concept]]:
        """Group concepts connected through outgoing relationships"""
        clusters: Dict[str, List[Concept]] = {}
        visited = set()

        for concept_id, concept in self.concepts.items():
            if concept in visited:
                continue

            cluster = []
            queue = deque([concept])
            visited.add(concept)
            while queue:
                current = queue.popleft()
                cluster.append(current)
                for edges in current.edges_of().values():
                    for target in edges:
                        if target not in visited:
                            visited.add(target)
                            queue.append(target)

            clusters[concept_id] = cluster

        return clusters

    def export_snapshot(self) -> GraphSnapshot:
        return self.exporter.export()

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the current graph state

        Returns:
            Dictionary with graph metrics
        """
        strengths = []
        relation_counts = Counter()
        for concept in self.concepts.values():
            for relation_type, edges in concept.edges_of().items():
                relation_counts[relation_type] += len(edges)
                strengths.extend(info.strength for info in edges.values())

        return {
            "total_concepts": len(self.concepts),
            "total_edges": len(strengths),
            "avg_edge_strength": sum(strengths) / len(strengths) if strengths else 0,
            "relation_types": dict(relation_counts),
            "working_memory_size": self.working_memory.size(),
            "history_length": len(self.thinking_history),
            "diagnostics": dict(self.diagnostics)
        }

    def __repr__(self):
        return f"ReasoningEngine(concepts={len(self.concepts)}, working_memory={self.working_memory.size()})"
