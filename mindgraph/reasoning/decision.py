from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass, field
import logging

import numpy as np

from ..core.concept import Concept

logger = logging.getLogger(__name__)

# activation, weight, frequency, relatedness to context
SCORE_WEIGHTS = np.array([0.3, 0.2, 0.2, 0.3])

# Stands in for absent attributes so a None context value never matches them
_MISSING = object()


@dataclass
class OptionEvaluation:
    option: str
    activation: float
    weight: float
    frequency: float
    relatedness_to_context: float
    confidence: float = 0.0


@dataclass
class Decision:
    chosen: Optional[str]
    confidence: float
    evaluations: List[OptionEvaluation] = field(default_factory=list)


def context_relatedness(concept: Concept, context: Mapping[str, Any]) -> float:
    """
    Fraction of context keys whose value equals the concept's attribute.

    Args:
        concept: Concept being evaluated
        context: Attribute mapping describing the situation

    Returns:
        Relatedness in [0, 1], 1.0 for an empty context
    """
    if not context:
        return 1.0

    matches = sum(1 for key, value in context.items() if concept.get_attribute(key, _MISSING) == value)
    return matches / len(context)


def evaluate_option(option: str, concept: Concept, context: Mapping[str, Any]) -> OptionEvaluation:
    evaluation = OptionEvaluation(
        option=option,
        activation=concept.current_activation(),
        weight=concept.weight,
        frequency=concept.frequency,
        relatedness_to_context=context_relatedness(concept, context),
    )
    features = np.array([
        evaluation.activation,
        evaluation.weight,
        evaluation.frequency,
        evaluation.relatedness_to_context,
    ])
    evaluation.confidence = float(features @ SCORE_WEIGHTS)
    return evaluation


def choose(evaluations: List[OptionEvaluation]) -> Decision:
    '''Pick the highest confidence evaluation, first one on ties'''
    if not evaluations:
        return Decision(chosen=None, confidence=0.0, evaluations=[])

    best = max(evaluations, key=lambda e: e.confidence)
    return Decision(chosen=best.option, confidence=best.confidence, evaluations=evaluations)
