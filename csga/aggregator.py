"""
Combines four pillar scores into the final CSGA result.
"""

from datetime import datetime, timezone

from .config import (
    CSGAConfig, PILLAR_ORDER, PILLAR_NAMES, WEIGHT_TOLERANCE,
    BEGINNER, INTERMEDIATE, ADVANCED, EXPERT,
    COMPLIANT, NON_COMPLIANT, CRITICAL,
)
from .errors import ScoringInvariantError
from .models import CSGAScore
from .utils import clamp_score


class CSGAAggregator:
    """Weighted aggregation, maturity banding and compliance labelling."""

    def __init__(self, config=None):
        self.config = (config if config is not None else CSGAConfig()).validate()

    def classify_maturity(self, overall_score):
        bands = self.config.maturity_thresholds
        if overall_score >= bands[EXPERT]:
            return EXPERT
        if overall_score >= bands[ADVANCED]:
            return ADVANCED
        if overall_score >= bands[INTERMEDIATE]:
            return INTERMEDIATE
        return BEGINNER

    def determine_compliance(self, overall_score, pillars):
        """
        Critical below the critical score; Compliant when the overall score
        meets the minimum and no pillar is under the pillar floor.
        """
        if overall_score < float(self.config.get("critical_score")):
            return CRITICAL
        floor = float(self.config.get("pillar_floor"))
        if overall_score >= float(self.config.get("min_compliance_score")) and all(
            pillar.score >= floor for pillar in pillars
        ):
            return COMPLIANT
        return NON_COMPLIANT

    def _check_pillars(self, pillars):
        if len(pillars) != len(PILLAR_ORDER):
            raise ScoringInvariantError(f"Expected {len(PILLAR_ORDER)} pillar scores, got {len(pillars)}")
        weights = self.config.pillar_weights
        for key, pillar in zip(PILLAR_ORDER, pillars):
            if pillar.key != key:
                raise ScoringInvariantError(f"Pillar out of order: expected '{key}', got '{pillar.key}'")
            if abs(pillar.weight - weights[key]) > WEIGHT_TOLERANCE:
                raise ScoringInvariantError(
                    f"{PILLAR_NAMES[key]} weight {pillar.weight} does not match configured {weights[key]}"
                )

    def aggregate(self, pillars, project_name="", project_path="", timestamp=None, metadata=None):
        """
        Combine pillar scores (in Security, Clean Code, Green Code, Automation
        order) into a CSGAScore.

        Raises:
            ScoringInvariantError: on mismatched weights or out-of-range scores.
        """
        pillars = tuple(pillars)
        self._check_pillars(pillars)
        overall = clamp_score(sum(pillar.score * pillar.weight for pillar in pillars))
        return CSGAScore(
            project_name=project_name,
            project_path=project_path,
            timestamp=timestamp if timestamp is not None else datetime.now(timezone.utc),
            security=pillars[0],
            clean_code=pillars[1],
            green_code=pillars[2],
            automation=pillars[3],
            overall_score=overall,
            maturity_level=self.classify_maturity(overall),
            compliance_status=self.determine_compliance(overall, pillars),
            metadata=dict(metadata or {}),
        )
