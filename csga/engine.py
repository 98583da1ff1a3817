"""
Evaluation orchestrator: loads a project snapshot, runs the four pillar
evaluators and aggregates their scores.
"""

from concurrent.futures import ThreadPoolExecutor

from .aggregator import CSGAAggregator
from .automation_pillar import AutomationEvaluator
from .clean_code_pillar import CleanCodeEvaluator
from .config import CSGAConfig, GREEN_CODE, PILLAR_ORDER
from .errors import ScoringInvariantError
from .green_code_pillar import GreenCodeEvaluator
from .models import PillarScore
from .project_snapshot import ProjectSnapshot
from .security_pillar import SecurityEvaluator
from .utils import progress, warn
from . import __version__

EVALUATOR_CLASSES = (SecurityEvaluator, CleanCodeEvaluator, GreenCodeEvaluator, AutomationEvaluator)


class CSGAEngine:
    """Runs a full CSGA evaluation for one project."""

    def __init__(self, config=None):
        self.config = (config if config is not None else CSGAConfig()).validate()
        self.evaluators = {cls.key: cls(self.config) for cls in EVALUATOR_CLASSES}
        self.aggregator = CSGAAggregator(self.config)

    def _run_one(self, key, snapshot):
        evaluator = self.evaluators[key]
        try:
            return evaluator.evaluate(snapshot.root, snapshot)
        except ScoringInvariantError:
            raise
        except Exception as e:
            warn(f"{evaluator.name} evaluator failed: {e}")
            return PillarScore.failed(key, evaluator.name, evaluator.weight, e)

    def _run_evaluators(self, snapshot):
        if not self.config.get("parallel", False):
            return [self._run_one(key, snapshot) for key in PILLAR_ORDER]

        # Runtime probes read process-wide allocation counters, so Green Code
        # runs on its own after the text-only pillars.
        text_only = [key for key in PILLAR_ORDER if key != GREEN_CODE]
        with ThreadPoolExecutor(max_workers=len(text_only)) as executor:
            futures = {key: executor.submit(self._run_one, key, snapshot) for key in text_only}
            results = {key: future.result() for key, future in futures.items()}
        results[GREEN_CODE] = self._run_one(GREEN_CODE, snapshot)
        return [results[key] for key in PILLAR_ORDER]

    def evaluate(self, project_path, timestamp=None):
        """
        Evaluate a project directory.

        Raises:
            ProjectNotFoundError: if project_path does not exist.
            ScoringInvariantError: on an internal scoring defect.
        """
        snapshot = ProjectSnapshot.load(project_path, self.config)
        progress(f"Scanned {len(snapshot.source_files)} source file(s) in {snapshot.root}")
        pillars = self._run_evaluators(snapshot)
        return self.aggregator.aggregate(
            pillars,
            project_name=snapshot.project_name,
            project_path=snapshot.root,
            timestamp=timestamp,
            metadata={
                "csga_version": __version__,
                "files_analyzed": len(snapshot.source_files),
                "lines_analyzed": snapshot.total_lines,
            },
        )


def evaluate_project(project_path, config=None, timestamp=None):
    """Evaluate a project with the given (or default) configuration."""
    return CSGAEngine(config).evaluate(project_path, timestamp=timestamp)
