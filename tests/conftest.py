"""
Shared pytest fixtures and configuration
"""
import pytest

from mindgraph.config.settings import Settings, reset_settings
from mindgraph.core.reasoning_engine import ReasoningEngine


class FakeClock:
    """Manually advanced time source, in seconds"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def clean_settings():
    """Drop the cached settings instance around every test"""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def engine(settings, clock):
    return ReasoningEngine(settings=settings, clock=clock)


@pytest.fixture
def animal_engine(engine):
    """Engine seeded with a small animal/plant/resource graph"""
    engine.add_concept("animal", "Animal", {"category": "living", "type": "abstract"})
    engine.add_concept("plant", "Plant", {"category": "living", "type": "abstract"})
    engine.add_concept("dog", "Dog", {"category": "animal", "domesticated": True, "type": "concrete"})
    engine.add_concept("cat", "Cat", {"category": "animal", "domesticated": True, "type": "concrete"})
    engine.add_concept("rose", "Rose", {"category": "plant", "flowering": True, "type": "concrete"})
    engine.add_concept("food", "Food", {"category": "resource", "type": "abstract"})
    engine.add_concept("water", "Water", {"category": "resource", "essential": True, "type": "concrete"})

    engine.add_relationship("dog", "is-a", "animal", 0.9)
    engine.add_relationship("cat", "is-a", "animal", 0.9)
    engine.add_relationship("rose", "is-a", "plant", 0.9)
    engine.add_relationship("animal", "needs", "food", 0.8)
    engine.add_relationship("animal", "needs", "water", 0.95)
    engine.add_relationship("plant", "needs", "water", 0.9)
    engine.add_relationship("dog", "similar-to", "cat", 0.7)
    return engine
