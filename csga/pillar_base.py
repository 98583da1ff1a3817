"""
Common machinery for the four pillar evaluators.
"""

from typing import Dict, List, Tuple

from .config import CSGAConfig, PILLAR_NAMES, validate_weights
from .models import PillarScore, SubMetric
from .project_snapshot import ProjectSnapshot
from .utils import clamp_score, weighted_sum

NO_SOURCE_RECOMMENDATION = "No Julia source files found under the scanned directories"


class Findings:
    """Ordered, de-duplicated recommendations and critical issues."""

    def __init__(self):
        self.recommendations: List[str] = []
        self.critical_issues: List[str] = []

    def recommend(self, text):
        if text and text not in self.recommendations:
            self.recommendations.append(text)

    def critical(self, text):
        if text and text not in self.critical_issues:
            self.critical_issues.append(text)


class PillarEvaluator:
    """
    Base class for pillar evaluators.

    Subclasses set `key` and define one `score_<metric>(snapshot, findings)`
    method per configured sub-metric, decorated with @clamped_metric.
    ADVICE maps a metric to (recommendation, critical issue) texts that are
    emitted when the metric misses its target or falls under its floor.
    SOURCE_METRICS names the metrics computed over source files; they score
    the vacuous maximum when none were found, and the pillar says so.
    """

    key = None
    ADVICE: Dict[str, Tuple[str, str]] = {}
    SOURCE_METRICS: Tuple[str, ...] = ()

    def __init__(self, config=None):
        self.config = config if config is not None else CSGAConfig()
        self.name = PILLAR_NAMES[self.key]
        self.weight = float(self.config.pillar_weights[self.key])
        self.sub_metric_weights = self.config.sub_metric_weights(self.key)
        validate_weights(self.sub_metric_weights, f"{self.key} sub-metric weights")

    def evaluate(self, project_root, snapshot=None) -> PillarScore:
        """Score this pillar for a project; never writes to the project tree."""
        if snapshot is None:
            snapshot = ProjectSnapshot.load(project_root, self.config)
        findings = Findings()
        sub_metrics = []
        for metric_name in self.sub_metric_weights:
            scorer = getattr(self, f"score_{metric_name}")
            value = scorer(snapshot, findings)
            self._advise(metric_name, value, findings)
            sub_metrics.append(SubMetric(metric_name, value, self.key))
        if not snapshot.source_files and any(m in self.sub_metric_weights for m in self.SOURCE_METRICS):
            findings.recommend(NO_SOURCE_RECOMMENDATION)

        values = {metric.name: metric.value for metric in sub_metrics}
        score = clamp_score(weighted_sum(values, self.sub_metric_weights))
        return PillarScore(
            key=self.key,
            name=self.name,
            weight=self.weight,
            score=score,
            sub_metrics=tuple(sub_metrics),
            recommendations=tuple(findings.recommendations),
            critical_issues=tuple(findings.critical_issues),
        )

    def _advise(self, metric_name, value, findings):
        recommendation, critical_issue = self.ADVICE.get(metric_name, (None, None))
        target, floor = self.config.metric_threshold(metric_name)
        if value < floor:
            findings.critical(critical_issue)
        elif value < target:
            findings.recommend(recommendation)
