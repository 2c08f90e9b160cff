"""
Tests for graph construction and activation spreading on ReasoningEngine
"""
import pytest

from mindgraph.config.settings import Settings
from mindgraph.core.concept import ConceptType
from mindgraph.core.reasoning_engine import ReasoningEngine
from mindgraph.core.working_memory import ConfigurationError


def activated_ids(activated):
    return {concept.id: record for concept, record in activated.items()}


class TestAddConcept:
    """Test concept creation and attribute handling"""

    def test_category_and_type_seed_reserved_fields(self, engine):
        concept = engine.add_concept("dog", "Dog", {"category": "animal", "type": "concrete", "legs": 4})

        assert concept.category == "animal"
        assert concept.params.type == ConceptType.CONCRETE
        assert concept.attributes == {"legs": 4}
        assert concept.activation == 0.0
        assert concept.weight == 1.0
        assert concept.frequency == 1.0

    def test_reserved_numeric_attributes_are_ignored(self, engine):
        concept = engine.add_concept("x", "X", {"activation": 0.9, "weight": 3, "color": "red"})

        assert concept.attributes == {"color": "red"}
        assert concept.activation == 0.0
        assert concept.weight == 1.0
        assert engine.diagnostics["reserved_attribute_ignored"] == 2

    def test_invalid_type_falls_back_to_common(self, engine):
        concept = engine.add_concept("x", "X", {"type": "mineral"})

        assert concept.params.type == ConceptType.COMMON
        assert engine.diagnostics["invalid_concept_type"] == 1

    def test_duplicate_id_updates_in_place(self, animal_engine):
        dog = animal_engine.get_concept("dog")
        dog.activate(0.5)

        updated = animal_engine.add_concept("dog", "Doggo", {"category": "pet", "barks": True})

        assert updated is dog
        assert dog.name == "Doggo"
        assert dog.category == "pet"
        assert dog.attributes == {"barks": True}
        assert dog.activation == pytest.approx(0.5)
        assert dog.get_edge("is-a", animal_engine.get_concept("animal")) is not None
        assert animal_engine.diagnostics["duplicate_concept"] == 1
        assert len(animal_engine.concepts) == 7


class TestAddRelationship:
    """Test relationship creation and mirroring"""

    def test_reverse_edge_is_mirrored(self, animal_engine):
        dog = animal_engine.get_concept("dog")
        animal = animal_engine.get_concept("animal")

        assert dog.get_edge("is-a", animal).strength == pytest.approx(0.9)
        assert animal.get_edge("has-subtype", dog).strength == pytest.approx(0.72)

    def test_symmetric_relation_mirrors_same_type(self, animal_engine):
        cat = animal_engine.get_concept("cat")
        dog = animal_engine.get_concept("dog")
        assert cat.get_edge("similar-to", dog).strength == pytest.approx(0.56)

    def test_label_is_resolved_to_id(self, animal_engine):
        assert animal_engine.add_relationship("rose", "is a", "water", 0.5)
        rose = animal_engine.get_concept("rose")
        assert rose.get_edge("is-a", animal_engine.get_concept("water")) is not None

    def test_free_form_relation_is_registered(self, animal_engine):
        animal_engine.add_relationship("dog", "eats", "food", 1.0)

        food = animal_engine.get_concept("food")
        dog = animal_engine.get_concept("dog")
        assert "eats" in animal_engine.relationship_types
        assert food.get_edge("related-to", dog).strength == pytest.approx(0.8)

    def test_unknown_concept_is_noop(self, engine):
        engine.add_concept("a", "A")

        assert engine.add_relationship("a", "is-a", "ghost") is False
        assert engine.get_concept("a").edges_of() == {}
        assert engine.diagnostics["add_relationship.unknown_concept"] == 1

    def test_strength_is_clamped(self, engine):
        engine.add_concept("a", "A")
        engine.add_concept("b", "B")
        engine.add_relationship("a", "causes", "b", 10.0)

        a = engine.get_concept("a")
        b = engine.get_concept("b")
        assert a.get_edge("causes", b).strength == 2.0
        assert b.get_edge("caused-by", a).strength == pytest.approx(1.6)


class TestSpreadActivation:
    """Test breadth-first activation spreading"""

    def test_spread_from_dog(self, animal_engine):
        activated = activated_ids(animal_engine.spread_activation("dog", 1.0, 3, 0.5))

        assert set(activated) == {"dog", "animal", "cat"}
        assert activated["dog"].activation == pytest.approx(1.0)
        assert activated["dog"].depth == 0
        assert activated["animal"].activation == pytest.approx(0.45)
        assert activated["animal"].depth == 1
        assert activated["cat"].activation == pytest.approx(0.35)
        assert activated["cat"].depth == 1

    def test_default_style_call_from_dog(self, animal_engine):
        activated = activated_ids(animal_engine.spread_activation("dog", 0.8, 3, 0.5))

        assert activated["dog"].activation == pytest.approx(0.8)
        assert activated["animal"].depth == 1
        assert activated["animal"].activation == pytest.approx(0.36)
        # 0.36 * 0.8 * 0.25 = 0.072 stays under the 0.3 threshold
        assert "food" not in activated
        # 0.8 * 0.7 * 0.5 = 0.28 stays under the threshold too
        assert "cat" not in activated

    def test_weak_propagation_does_not_fire(self, animal_engine):
        # 0.45 * 0.8 * 0.25 stays under the 0.3 threshold
        activated = activated_ids(animal_engine.spread_activation("dog", 1.0, 3, 0.5))
        assert "food" not in activated

    def test_reaches_depth_two_with_strong_edges(self, engine):
        for concept_id in ("a", "b", "c", "d"):
            engine.add_concept(concept_id, concept_id.upper())
        engine.add_relationship("a", "causes", "b", 2.0)
        engine.add_relationship("b", "causes", "c", 2.0)
        engine.add_relationship("c", "causes", "d", 2.0)

        activated = activated_ids(engine.spread_activation("a", 1.0, 2, 0.5))

        assert activated["b"].depth == 1
        assert activated["c"].depth == 2
        assert activated["c"].activation == pytest.approx(0.5)
        assert "d" not in activated

    def test_activated_concepts_enter_working_memory(self, animal_engine):
        animal_engine.spread_activation("dog", 1.0)

        for concept_id in ("dog", "animal", "cat"):
            assert concept_id in animal_engine.working_memory

    def test_unknown_source_returns_empty(self, animal_engine):
        assert animal_engine.spread_activation("ghost") == {}
        assert animal_engine.diagnostics["spread_activation.unknown_concept"] == 1

    def test_cyclic_graph_terminates(self, engine):
        engine.add_concept("a", "A")
        engine.add_concept("b", "B")
        engine.add_relationship("a", "similar-to", "b", 2.0)
        engine.add_relationship("b", "similar-to", "a", 2.0)

        activated = activated_ids(engine.spread_activation("a", 1.0, 5, 1.0))
        assert set(activated) == {"a", "b"}

    def test_records_history(self, animal_engine):
        animal_engine.spread_activation("dog", 1.0)

        record = animal_engine.thinking_history[-1]
        assert record.kind == "spread_activation"
        assert record.details["source"] == "dog"
        assert "animal" in record.details["activated"]

    def test_decay_all(self, animal_engine):
        animal_engine.spread_activation("dog", 1.0)
        animal_engine.decay_all()

        assert animal_engine.get_concept("dog").activation == pytest.approx(0.9)
        assert animal_engine.get_concept("food").activation == 0.0


class TestEngineConfiguration:
    """Test engine limits and settings"""

    def test_history_is_bounded(self, settings, clock):
        engine = ReasoningEngine(settings=settings, clock=clock, history_limit=3)
        engine.add_concept("a", "A")

        for _ in range(5):
            engine.spread_activation("a")

        assert len(engine.thinking_history) == 3

    def test_invalid_history_limit(self, settings):
        with pytest.raises(ConfigurationError):
            ReasoningEngine(settings=settings, history_limit=0)

    def test_invalid_working_memory_capacity(self, settings):
        with pytest.raises(ConfigurationError):
            ReasoningEngine(settings=settings, working_memory_capacity=0)

    def test_working_memory_capacity_from_settings(self, clock):
        engine = ReasoningEngine(settings=Settings(_env_file=None, working_memory_capacity=2), clock=clock)
        for concept_id in ("a", "b", "c"):
            engine.add_concept(concept_id, concept_id)
            engine.spread_activation(concept_id)

        assert engine.working_memory.size() == 2

    def test_statistics(self, animal_engine):
        stats = animal_engine.get_statistics()

        assert stats["total_concepts"] == 7
        assert stats["total_edges"] == 14
        assert stats["relation_types"]["is-a"] == 3
        assert stats["relation_types"]["has-subtype"] == 3
