"""
Immutable score records produced by the evaluators and the aggregator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .config import PILLAR_ORDER, SCORE_MIN, SCORE_MAX
from .errors import ScoringInvariantError


def _check_range(label, value):
    if not SCORE_MIN <= value <= SCORE_MAX:
        raise ScoringInvariantError(f"{label} must be within [0, 100], got {value!r}")


@dataclass(frozen=True)
class SubMetric:
    """A named, clamped sub-metric value and the pillar it belongs to."""
    name: str
    value: float
    pillar: str

    def __post_init__(self):
        if self.pillar not in PILLAR_ORDER:
            raise ScoringInvariantError(f"Sub-metric '{self.name}' has unknown pillar {self.pillar!r}")
        _check_range(f"Sub-metric '{self.name}'", self.value)


@dataclass(frozen=True)
class PillarScore:
    """
    Result of evaluating one pillar.

    Recommendations and critical issues are kept in the order they were
    raised; sub-metrics keep their configured order.
    """
    key: str
    name: str
    weight: float
    score: float
    sub_metrics: Tuple[SubMetric, ...] = ()
    recommendations: Tuple[str, ...] = ()
    critical_issues: Tuple[str, ...] = ()

    def __post_init__(self):
        _check_range(f"Pillar '{self.name}' score", self.score)
        for metric in self.sub_metrics:
            if metric.pillar != self.key:
                raise ScoringInvariantError(
                    f"Sub-metric '{metric.name}' belongs to {metric.pillar!r}, not {self.key!r}"
                )

    @property
    def metrics(self) -> Dict[str, float]:
        return {metric.name: metric.value for metric in self.sub_metrics}

    def metric(self, name) -> float:
        return self.metrics[name]

    @classmethod
    def failed(cls, key, name, weight, error):
        """A zero-score pillar standing in for an evaluator that crashed."""
        return cls(
            key=key,
            name=name,
            weight=weight,
            score=SCORE_MIN,
            critical_issues=(f"{name} evaluation failed: {type(error).__name__}: {error}",),
        )


@dataclass(frozen=True)
class CSGAScore:
    """The complete evaluation result for one project."""
    project_name: str
    project_path: str
    timestamp: datetime
    security: PillarScore
    clean_code: PillarScore
    green_code: PillarScore
    automation: PillarScore
    overall_score: float
    maturity_level: str
    compliance_status: str
    metadata: Mapping[str, object] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        _check_range("Overall score", self.overall_score)
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def pillars(self) -> Tuple[PillarScore, ...]:
        return (self.security, self.clean_code, self.green_code, self.automation)

    def pillar(self, key) -> Optional[PillarScore]:
        for pillar in self.pillars:
            if pillar.key == key:
                return pillar
        return None

    @property
    def critical_issues(self) -> Tuple[str, ...]:
        return tuple(issue for pillar in self.pillars for issue in pillar.critical_issues)

    @property
    def recommendations(self) -> Tuple[str, ...]:
        return tuple(rec for pillar in self.pillars for rec in pillar.recommendations)
