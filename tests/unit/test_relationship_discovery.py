"""
Tests for relationship discovery and the auto-discovery scheduler
"""
import threading

import pytest

from mindgraph.learning.relationship_discovery import AutoDiscoveryScheduler
from mindgraph.reasoning.inference import InferenceType


@pytest.fixture
def chain_engine(engine):
    """a is-a b is-a c"""
    for concept_id in ("a", "b", "c"):
        engine.add_concept(concept_id, concept_id.upper())
    engine.add_relationship("a", "is-a", "b")
    engine.add_relationship("b", "is-a", "c")
    return engine


@pytest.fixture
def isolated_engine(engine):
    for concept_id in ("x", "y", "z"):
        engine.add_concept(concept_id, concept_id.upper())
    return engine


class TestDiscover:
    """Test discovery passes"""

    def test_linked_pairs_are_skipped(self, engine):
        engine.add_concept("a", "A")
        engine.add_concept("b", "B")
        engine.add_relationship("a", "is-a", "b")

        assert engine.auto_discover_relationships(threshold=0.0) == []

    def test_strong_deduction_maps_to_is_a(self, chain_engine):
        # (0.9 + 0.0 + 0.2 + 0.3) / 4
        discovered = chain_engine.auto_discover_relationships(threshold=0.3)

        assert len(discovered) == 1
        found = discovered[0]
        assert (found.source, found.relation_type, found.target) == ("a", "is-a", "c")
        assert found.confidence == pytest.approx(0.35)
        assert found.inference_type == InferenceType.DEDUCTIVE

        a = chain_engine.get_concept("a")
        c = chain_engine.get_concept("c")
        assert a.get_edge("is-a", c).strength == pytest.approx(0.35)
        assert c.get_edge("has-subtype", a) is not None

    def test_threshold_filters(self, chain_engine):
        assert chain_engine.auto_discover_relationships(threshold=0.5) == []

    def test_weak_evidence_defaults_to_related_to(self, isolated_engine):
        discovered = isolated_engine.auto_discover_relationships(threshold=0.15)

        assert [(d.source, d.target) for d in discovered] == [("x", "y"), ("x", "z"), ("y", "z")]
        assert all(d.relation_type == "related-to" for d in discovered)
        assert discovered[0].confidence == pytest.approx(0.2)

    def test_max_new_stops_early(self, isolated_engine):
        discovered = isolated_engine.auto_discover_relationships(threshold=0.15, max_new=2)

        assert len(discovered) == 2
        z = isolated_engine.get_concept("z")
        assert not z.has_edge_to(isolated_engine.get_concept("y"))

    def test_second_pass_finds_nothing(self, isolated_engine):
        isolated_engine.auto_discover_relationships(threshold=0.15)
        assert isolated_engine.auto_discover_relationships(threshold=0.15) == []

    def test_discovery_is_recorded(self, chain_engine):
        chain_engine.auto_discover_relationships(threshold=0.3)

        record = chain_engine.thinking_history[-1]
        assert record.kind == "auto_discovery"
        assert record.details["discovered"] == [("a", "is-a", "c")]


class TestAutoDiscoveryScheduler:
    """Test the periodic discovery thread"""

    def test_run_once_notifies_callback(self, isolated_engine):
        received = []
        scheduler = AutoDiscoveryScheduler(isolated_engine, threshold=0.15, max_new=1, callback=received.append)

        discovered = scheduler.run_once()

        assert len(discovered) == 1
        assert received == [discovered]
        assert scheduler.runs == 1

    def test_callback_errors_are_contained(self, isolated_engine):
        def broken(_):
            raise RuntimeError("listener down")

        scheduler = AutoDiscoveryScheduler(isolated_engine, threshold=0.15, callback=broken)

        assert len(scheduler.run_once()) == 3
        assert scheduler.runs == 1

    def test_callback_not_called_without_results(self, chain_engine):
        received = []
        scheduler = AutoDiscoveryScheduler(chain_engine, threshold=0.9, callback=received.append)

        scheduler.run_once()

        assert received == []

    def test_engine_start_and_stop(self, isolated_engine):
        found = threading.Event()

        scheduler = isolated_engine.start_auto_discovery(
            interval=0.01,
            threshold=0.15,
            callback=lambda discovered: found.set()
        )
        try:
            assert isolated_engine.is_auto_discovering
            assert found.wait(timeout=5)
        finally:
            isolated_engine.stop_auto_discovery()

        assert not isolated_engine.is_auto_discovering
        assert not scheduler.is_running
        assert scheduler.runs >= 1

    def test_restart_replaces_schedule(self, isolated_engine):
        first = isolated_engine.start_auto_discovery(interval=60)
        second = isolated_engine.start_auto_discovery(interval=60)
        try:
            assert first is not second
            assert not first.is_running
            assert second.is_running
        finally:
            isolated_engine.stop_auto_discovery()

    def test_stop_without_start(self, engine):
        engine.stop_auto_discovery()
        assert not engine.is_auto_discovering
