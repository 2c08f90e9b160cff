from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum
import logging
import math
import time

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

RESERVED_ATTRIBUTES = ("activation", "weight", "type", "category", "frequency")


class ConceptType(str, Enum):
    COMMON = "common"
    ABSTRACT = "abstract"
    CONCRETE = "concrete"
    EMOTION = "emotion"


class ConceptParameters(BaseModel):
    """Reserved numeric and enum fields of a concept"""
    model_config = ConfigDict(validate_assignment=True)

    activation: float = Field(default=0.0, ge=0.0, le=1.0)
    weight: float = Field(default=1.0, ge=0.5)
    type: ConceptType = ConceptType.COMMON
    category: str = "unknown"
    frequency: float = Field(default=1.0, ge=1.0)


class RelationInfo(BaseModel):
    """Edge record stored for one (relation type, target) pair"""
    model_config = ConfigDict(validate_assignment=True)

    strength: float = Field(default=1.0, ge=0.1, le=2.0)
    activation_threshold: float = Field(default=0.3, ge=0.0)
    last_used_at: float = 0.0


@dataclass(frozen=True)
class ActivationConfig:
    """Tuning constants shared by every concept of an engine"""
    decay_rate: float = 0.1
    frequency_increment: float = 0.1
    passive_decay_factor: float = 0.9
    epsilon: float = 0.01
    activation_threshold: float = 0.3
    min_strength: float = 0.1
    max_strength: float = 2.0

    @classmethod
    def from_settings(cls, settings) -> "ActivationConfig":
        return cls(**settings.get_activation_params(), **settings.get_edge_params())


# Concepts key edge maps and spreading results, so equality is identity
@dataclass(eq=False)
class Concept:
    """
    A node of the semantic network.

    Holds open domain attributes, the reserved activation parameters and the
    outgoing relationships partitioned by relation type.
    """
    id: str
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    params: ConceptParameters = field(default_factory=ConceptParameters)
    relationships: Dict[str, Dict["Concept", RelationInfo]] = field(default_factory=dict, repr=False)
    last_activated_at: float = 0.0
    config: ActivationConfig = field(default_factory=ActivationConfig, repr=False)
    clock: Callable[[], float] = field(default=time.time, repr=False)

    @property
    def activation(self) -> float:
        return self.params.activation

    @property
    def weight(self) -> float:
        return self.params.weight

    @property
    def frequency(self) -> float:
        return self.params.frequency

    @property
    def category(self) -> str:
        return self.params.category

    def _decay_factor(self, now: float) -> float:
        elapsed = max(0.0, now - self.last_activated_at)
        return math.exp(-elapsed * self.config.decay_rate)

    def activate(self, level: float = 0.5) -> float:
        '''Decay, add level x weight, clamp to [0, 1] and return the new activation'''
        now = self.clock()
        decayed = self.params.activation * self._decay_factor(now)
        self.params.activation = min(1.0, max(0.0, decayed + level * self.params.weight))
        self.last_activated_at = now
        self.params.frequency += self.config.frequency_increment
        return self.params.activation

    def current_activation(self) -> float:
        '''Decayed activation at the current time, without mutating state'''
        return self.params.activation * self._decay_factor(self.clock())

    def decay_passive(self) -> float:
        '''Idle decay outside of spreading'''
        activation = self.params.activation * self.config.passive_decay_factor
        if activation < self.config.epsilon:
            activation = 0.0
        self.params.activation = activation
        return activation

    def add_edge(self, relation_type: str, target: "Concept", strength: float = 1.0) -> RelationInfo:
        '''Insert or overwrite the edge record for (relation_type, target)'''
        strength = min(self.config.max_strength, max(self.config.min_strength, strength))
        info = RelationInfo(
            strength=strength,
            activation_threshold=self.config.activation_threshold,
            last_used_at=self.clock()
        )
        self.relationships.setdefault(relation_type, {})[target] = info
        return info

    def edges_of(self, relation_type: Optional[str] = None):
        '''One relation's edge map, or the whole relation -> edge map structure'''
        if relation_type is None:
            return self.relationships
        return self.relationships.get(relation_type, {})

    def get_edge(self, relation_type: str, target: "Concept") -> Optional[RelationInfo]:
        return self.relationships.get(relation_type, {}).get(target)

    def has_edge_to(self, target: "Concept") -> bool:
        return any(target in edges for edges in self.relationships.values())

    def relation_types(self) -> List[str]:
        return [relation for relation, edges in self.relationships.items() if edges]

    def attribute_count(self) -> int:
        '''Domain attributes plus the reserved fields'''
        return len(self.attributes) + len(RESERVED_ATTRIBUTES)

    def all_attributes(self) -> Dict[str, Any]:
        '''Flat view of domain attributes and reserved fields'''
        merged = dict(self.attributes)
        merged.update({
            "activation": self.params.activation,
            "weight": self.params.weight,
            "type": self.params.type.value,
            "category": self.params.category,
            "frequency": self.params.frequency,
        })
        return merged

    def get_attribute(self, key: str, default: Any = None) -> Any:
        if key in RESERVED_ATTRIBUTES:
            value = getattr(self.params, key)
            return value.value if isinstance(value, Enum) else value
        return self.attributes.get(key, default)

    def __repr__(self) -> str:
        return f"Concept(id={self.id!r}, name={self.name!r}, activation={self.params.activation:.3f})"
