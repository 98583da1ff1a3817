"""
Configuration constants and settings for CSGA.
"""

import os
import sys
import copy
import json

from dotenv import load_dotenv

from .errors import ScoringInvariantError

# =============================================================================
# CONSTANTS AND CONFIGURATION
# =============================================================================

# ANSI escape sequences for colored output
RESET = "\033[0m"
GREY = "\033[90m"
BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
BOLD = "\033[1m"

# Pillar identifiers, in reporting order
SECURITY = "security"
CLEAN_CODE = "clean_code"
GREEN_CODE = "green_code"
AUTOMATION = "automation"
PILLAR_ORDER = (SECURITY, CLEAN_CODE, GREEN_CODE, AUTOMATION)

PILLAR_NAMES = {
    SECURITY: "Security First",
    CLEAN_CODE: "Clean Code",
    GREEN_CODE: "Green Code",
    AUTOMATION: "Advanced Automation",
}

PILLAR_WEIGHTS = {
    SECURITY: 0.30,
    CLEAN_CODE: 0.25,
    GREEN_CODE: 0.20,
    AUTOMATION: 0.25,
}
WEIGHT_TOLERANCE = 1e-9

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Maturity bands (lower bounds, inclusive)
BEGINNER = "Beginner"
INTERMEDIATE = "Intermediate"
ADVANCED = "Advanced"
EXPERT = "Expert"
INTERMEDIATE_THRESHOLD = 60.0
ADVANCED_THRESHOLD = 75.0
EXPERT_THRESHOLD = 87.5

# Compliance labels
COMPLIANT = "Compliant"
NON_COMPLIANT = "Non-compliant"
CRITICAL = "Critical"
MIN_COMPLIANCE_SCORE = 80.0
PILLAR_FLOOR = 70.0
CRITICAL_SCORE = INTERMEDIATE_THRESHOLD

SUB_METRIC_WEIGHTS = {
    SECURITY: {
        "package_security": 0.30,
        "code_security": 0.25,
        "dependency_management": 0.25,
        "security_automation": 0.20,
    },
    CLEAN_CODE: {
        "code_organization": 0.25,
        "documentation_quality": 0.25,
        "code_style": 0.25,
        "maintainability": 0.25,
    },
    GREEN_CODE: {
        "performance_infrastructure": 0.35,
        "code_efficiency": 0.25,
        "resource_management": 0.20,
        "runtime_efficiency": 0.20,
    },
    AUTOMATION: {
        "cicd_infrastructure": 0.30,
        "testing_automation": 0.30,
        "development_workflow": 0.25,
        "agents_integration": 0.15,
    },
}

# Sub-metric (target, critical floor). Below target -> recommendation,
# below floor -> critical issue.
METRIC_THRESHOLDS = {
    "package_security": (95.0, 80.0),
    "code_security": (90.0, 70.0),
    "dependency_management": (90.0, 50.0),
    "security_automation": (80.0, 40.0),
    "code_organization": (85.0, 50.0),
    "documentation_quality": (80.0, 50.0),
    "code_style": (85.0, 50.0),
    "maintainability": (85.0, 70.0),
    "performance_infrastructure": (80.0, 40.0),
    "code_efficiency": (80.0, 50.0),
    "resource_management": (85.0, 50.0),
    "runtime_efficiency": (100.0, 50.0),
    "cicd_infrastructure": (85.0, 60.0),
    "testing_automation": (90.0, 70.0),
    "development_workflow": (75.0, 40.0),
    "agents_integration": (75.0, 40.0),
}

# Packages from the official registry / standard library that are trusted
OFFICIAL_PACKAGES = frozenset({
    "Revise", "BenchmarkTools", "Test", "Documenter", "DataFrames", "CSV",
    "Plots", "JSON3", "HTTP", "PlutoUI", "IJulia", "PackageCompiler",
    "Debugger", "ProfileView", "Pluto", "SpecialFunctions", "StaticArrays",
    "Statistics", "StatsBase", "StringEncodings", "ThreadsX", "LinearAlgebra",
    "Random", "Dates", "Printf", "Logging", "Pkg", "Distributions", "FileIO",
    "JLD2", "TOML", "JuliaFormatter", "SparseArrays", "Serialization",
    "Distributed", "InteractiveUtils", "Markdown", "UUIDs", "Base64",
    "SHA", "Sockets", "Downloads", "Profile",
})

# Modules that are always available and never count as dependencies
BUILTIN_MODULES = frozenset({"Base", "Core", "Main"})

SOURCE_EXTENSION = ".jl"
MANIFEST_FILE = "Project.toml"
LOCKFILE = "Manifest.toml"
AGENTS_FILE = "AGENTS.md"
MAKEFILE_NAMES = ("Makefile", "makefile", "GNUmakefile")
README_NAMES = ("README.md", "README", "README.txt", "readme.md")

EXCLUDED_DIRS = {
    "build", "dist", "out", "target", "coverage", "tmp", "node_modules",
    ".julia", ".git", ".vscode", ".idea", "__pycache__",
}

CONFIG_FILE_NAME = ".csga-config.json"

# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

DEFAULT_CONFIG = {
    # WorkspaceResolver settings
    "workspace_markers": ["Project.toml", "JuliaProject.toml"],

    # FileScanner settings
    "source_extension": SOURCE_EXTENSION,
    "scan_dirs": ["src", "test", "scripts", "benchmarks", "deps", "examples", "docs"],
    "exclude_dirs": sorted(EXCLUDED_DIRS),
    "exclude_patterns": ["docs/build/*", "*.jl.cov", "*.jl.mem"],

    # Aggregation settings
    "pillar_weights": dict(PILLAR_WEIGHTS),
    "sub_metric_weights": copy.deepcopy(SUB_METRIC_WEIGHTS),
    "metric_thresholds": {name: list(pair) for name, pair in METRIC_THRESHOLDS.items()},
    "maturity_thresholds": {
        INTERMEDIATE: INTERMEDIATE_THRESHOLD,
        ADVANCED: ADVANCED_THRESHOLD,
        EXPERT: EXPERT_THRESHOLD,
    },
    "min_compliance_score": MIN_COMPLIANCE_SCORE,
    "pillar_floor": PILLAR_FLOOR,
    "critical_score": CRITICAL_SCORE,

    # Security settings
    "official_packages": sorted(OFFICIAL_PACKAGES),
    "security_violation_penalty": 1000.0,
    "max_security_violation_rate": 0.001,
    "security_make_targets": ["audit", "security", "csga", "validate"],

    # Clean code settings
    "long_line_threshold": 92,
    "style_violation_penalty": 500.0,
    "max_function_lines": 50,
    "max_nesting_depth": 4,
    "max_function_params": 5,
    "max_complex_function_ratio": 0.2,
    "docstring_lookback_lines": 5,
    "readme_min_chars": 500,
    "max_source_modules": 60,
    "max_includes_per_module": 25,
    "recommended_dirs": ["docs", "examples", "benchmarks", "notebooks", ".vscode"],

    # Green code settings
    "efficiency_baseline": 80.0,
    "efficiency_bonus_factor": 1000.0,
    "efficiency_penalty_factor": 2000.0,
    "runtime_probes": True,
    "timing_repeats": 5,
    "max_memory_growth_bytes": 5 * 1024 * 1024,
    "max_allocated_blocks": 1000,

    # Automation settings
    "expected_make_targets": [
        "test", "install", "clean", "setup", "dev",
        "format", "docs", "bench", "csga", "validate",
    ],
    "expected_test_files": [
        "runtests.jl",
        "test_security_pillar.jl",
        "test_clean_code_pillar.jl",
        "test_green_code_pillar.jl",
        "test_automation_pillar.jl",
        "test_integration.jl",
    ],
    "min_testsets": 15,
    "min_assertions": 50,
    "workflow_packages": ["Revise", "JuliaFormatter", "Debugger"],
    "min_agents_commands": 10,

    # Engine settings
    "parallel": False,
    "search_parents": False,
}

# Environment variables that override individual settings
ENV_OVERRIDES = {
    "CSGA_MIN_COMPLIANCE_SCORE": ("min_compliance_score", float),
    "CSGA_PILLAR_FLOOR": ("pillar_floor", float),
    "CSGA_RUNTIME_PROBES": ("runtime_probes", "bool"),
    "CSGA_PARALLEL": ("parallel", "bool"),
}


# =============================================================================
# CONFIGURATION MANAGEMENT
# =============================================================================

def _warn(message):
    print(f"{YELLOW}Warning: {message}{RESET}", file=sys.stderr)


def _parse_bool(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _merge(base, overrides):
    """Merge overrides into base; dict values are merged one level deep."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            nested = dict(merged[key])
            nested.update(copy.deepcopy(value))
            merged[key] = nested
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _conforms(value, default):
    """True if a configured value has the shape of its default."""
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(default, str):
        return isinstance(value, str)
    if isinstance(default, list):
        return isinstance(value, list) and (
            not default or all(_conforms(item, default[0]) for item in value)
        )
    if isinstance(default, dict):
        if not isinstance(value, dict):
            return False
        sample = next(iter(default.values()), None)
        for key, item in value.items():
            reference = default.get(key, sample)
            if reference is None:
                continue
            if not _conforms(item, reference):
                return False
            if isinstance(reference, list) and len(item) != len(reference):
                return False
        return True
    return True


def check_config_values(values, source):
    """
    Drop settings whose type does not match DEFAULT_CONFIG, with a warning
    naming each one, so the default value applies instead.
    """
    checked = {}
    for key, value in values.items():
        if key in DEFAULT_CONFIG and not _conforms(value, DEFAULT_CONFIG[key]):
            _warn(f"Ignoring {key}={value!r} from {source}: expected "
                  f"{type(DEFAULT_CONFIG[key]).__name__} like the default. Using the default.")
            continue
        checked[key] = value
    return checked


def load_config_file(config_path):
    """Load a JSON configuration file, returning {} when missing or invalid."""
    if not config_path or not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        _warn(f"Could not read config file {config_path}: {e}. Using defaults.")
        return {}
    if not isinstance(data, dict):
        _warn(f"Config file {config_path} must contain a JSON object. Using defaults.")
        return {}
    return check_config_values(data, config_path)


def env_overrides():
    """Collect setting overrides from CSGA_* environment variables (and .env)."""
    load_dotenv()
    overrides = {}
    for env_name, (key, kind) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        if kind == "bool":
            overrides[key] = _parse_bool(raw)
            continue
        try:
            overrides[key] = kind(raw)
        except ValueError:
            _warn(f"Ignoring {env_name}={raw!r}: not a number.")
    return overrides


class CSGAConfig:
    """
    Settings for one evaluation run.

    Values are layered: DEFAULT_CONFIG, then a JSON config file, then
    CSGA_* environment variables, then explicit overrides.
    """

    def __init__(self, overrides=None):
        self._values = _merge(DEFAULT_CONFIG, overrides or {})

    @classmethod
    def load(cls, project_root=None, config_path=None, overrides=None, use_env=True):
        """Build a config from the project's .csga-config.json (or config_path)."""
        if config_path is None and project_root is not None:
            config_path = os.path.join(str(project_root), CONFIG_FILE_NAME)
        values = load_config_file(config_path)
        if use_env:
            values = _merge(values, env_overrides())
        if overrides:
            values = _merge(values, overrides)
        return cls(values)

    def get(self, key, default=None):
        return self._values.get(key, default)

    def __getitem__(self, key):
        return self._values[key]

    def to_dict(self):
        return copy.deepcopy(self._values)

    def with_overrides(self, **overrides):
        """Return a copy of this config with some settings replaced."""
        return CSGAConfig(_merge(self._values, overrides))

    @property
    def pillar_weights(self):
        return dict(self._values["pillar_weights"])

    def sub_metric_weights(self, pillar):
        return dict(self._values["sub_metric_weights"][pillar])

    def metric_threshold(self, metric):
        """Return (target, floor) for a sub-metric."""
        target, floor = self._values["metric_thresholds"][metric]
        return float(target), float(floor)

    @property
    def maturity_thresholds(self):
        return {k: float(v) for k, v in self._values["maturity_thresholds"].items()}

    def validate(self):
        """Raise ScoringInvariantError if weights or bands are inconsistent."""
        validate_weights(self.pillar_weights, "pillar weights")
        for pillar in PILLAR_ORDER:
            if pillar not in self._values["pillar_weights"]:
                raise ScoringInvariantError(f"Missing weight for pillar '{pillar}'")
            validate_weights(self.sub_metric_weights(pillar), f"{pillar} sub-metric weights")

        bands = self.maturity_thresholds
        ordered = [bands[INTERMEDIATE], bands[ADVANCED], bands[EXPERT]]
        if not all(SCORE_MIN < a < b <= SCORE_MAX for a, b in zip(ordered, ordered[1:])):
            raise ScoringInvariantError(f"Maturity thresholds must be strictly ascending: {ordered}")
        for key in ("min_compliance_score", "pillar_floor", "critical_score"):
            value = float(self._values[key])
            if not SCORE_MIN <= value <= SCORE_MAX:
                raise ScoringInvariantError(f"{key} must be within [0, 100], got {value}")
        return self


def validate_weights(weights, label="weights"):
    """Weights must be non-negative and sum to 1.0."""
    if any(w < 0 for w in weights.values()):
        raise ScoringInvariantError(f"Negative value in {label}: {weights}")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ScoringInvariantError(f"{label} must sum to 1.0, got {total!r}")
