"""
CSGA - Julia Code Quality Scoring

Scores a Julia project on four pillars (Security, Clean Code, Green Code,
Advanced Automation) using text heuristics and small runtime probes, and
combines them into an overall score, maturity level and compliance status.
"""

__version__ = "1.0.0"
__author__ = "CSGA Team"

from .errors import CSGAError, ScoringInvariantError, ProjectNotFoundError
from .config import CSGAConfig
from .models import SubMetric, PillarScore, CSGAScore
from .text_metrics import TextMetrics, extract
from .file_scanner import FileScanner
from .file_classifier import FileClassifier
from .workspace_resolver import WorkspaceResolver, resolve_project_root
from .dependency_analysis import IncludeGraph, ImportParser
from .security_pillar import SecurityEvaluator
from .clean_code_pillar import CleanCodeEvaluator
from .green_code_pillar import GreenCodeEvaluator
from .automation_pillar import AutomationEvaluator
from .aggregator import CSGAAggregator
from .engine import CSGAEngine, evaluate_project
from .main import main

__all__ = [
    'CSGAError',
    'ScoringInvariantError',
    'ProjectNotFoundError',
    'CSGAConfig',
    'SubMetric',
    'PillarScore',
    'CSGAScore',
    'TextMetrics',
    'extract',
    'FileScanner',
    'FileClassifier',
    'WorkspaceResolver',
    'resolve_project_root',
    'IncludeGraph',
    'ImportParser',
    'SecurityEvaluator',
    'CleanCodeEvaluator',
    'GreenCodeEvaluator',
    'AutomationEvaluator',
    'CSGAAggregator',
    'CSGAEngine',
    'evaluate_project',
    'main',
]
