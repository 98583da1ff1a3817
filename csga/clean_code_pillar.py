"""
Clean Code pillar: project layout, documentation, formatting and naming,
and maintainability of functions and modules.
"""

from .config import CLEAN_CODE
from .decorators import clamped_metric
from .pillar_base import PillarEvaluator
from .utils import clamp_score, safe_ratio

ORGANIZATION_MANIFEST_FIELDS = ("name", "uuid", "version")
FORMATTING_WEIGHT = 0.7
NAMING_WEIGHT = 0.3
MODULE_COUNT_PENALTY = 10.0
INCLUDE_FANOUT_PENALTY = 10.0
CYCLE_PENALTY = 15.0
MAX_CYCLE_PENALTY = 30.0


class CleanCodeEvaluator(PillarEvaluator):
    key = CLEAN_CODE
    SOURCE_METRICS = ("documentation_quality", "code_style", "maintainability")

    ADVICE = {
        "code_organization": (
            "Follow the standard package layout (src/, test/, docs/, examples/, benchmarks/)",
            "Project layout is disorganized: no src/ module structure found",
        ),
        "documentation_quality": (
            "Add docstrings to public functions and expand README and docs/",
            "Project documentation is largely missing",
        ),
        "code_style": (
            "Run JuliaFormatter and follow Julia naming conventions",
            "Widespread formatting and naming violations",
        ),
        "maintainability": (
            "Split long or deeply nested functions into smaller units",
            "Too many overly long or deeply nested functions",
        ),
    }

    @clamped_metric
    def score_code_organization(self, snapshot, findings):
        score = 0.0
        if snapshot.has_dir("src"):
            score += 20.0
        else:
            findings.recommend("Create a src/ directory for package code")
        if snapshot.has_dir("test"):
            score += 20.0
        else:
            findings.recommend("Create a test/ directory with runtests.jl")

        recommended = list(self.config.get("recommended_dirs", ()))
        if recommended:
            present = sum(1 for name in recommended if snapshot.has_dir(name))
            score += present / len(recommended) * 20.0

        score += snapshot.manifest_field_ratio(ORGANIZATION_MANIFEST_FIELDS) * 30.0
        if snapshot.dir_contains("src", self.config.get("source_extension", ".jl")):
            score += 30.0
        return score

    @clamped_metric
    def score_documentation_quality(self, snapshot, findings):
        score = 0.0
        readme = snapshot.readme_text
        if readme is None:
            findings.recommend("Add a README.md describing purpose, installation and usage")
        elif len(readme) > int(self.config.get("readme_min_chars", 500)):
            score += 25.0
        else:
            score += 10.0
            findings.recommend("Expand the README with usage examples")

        if snapshot.agents_text is not None:
            score += 25.0

        functions = [span for source in snapshot.files_in("source") for span in source.metrics.functions]
        documented = sum(1 for span in functions if span.has_docstring)
        coverage = safe_ratio(documented, len(functions))
        score += coverage * 25.0
        if coverage < 0.8:
            findings.recommend(
                f"Document public functions: {documented}/{len(functions)} have docstrings"
            )

        if snapshot.dir_contains("docs", ".md"):
            score += 25.0
        return score

    @clamped_metric
    def score_code_style(self, snapshot, findings):
        total_lines = snapshot.total_lines
        metrics = [source.metrics for source in snapshot.source_files]
        violations = sum(m.style_violation_count for m in metrics)
        long_lines = sum(m.long_line_count for m in metrics)
        rate = safe_ratio(violations, total_lines, vacuous=0.0)
        formatting = clamp_score(100.0 - rate * float(self.config.get("style_violation_penalty", 500.0)))

        naming_total = sum(m.naming_checks for m in metrics)
        naming_bad = sum(m.naming_violations for m in metrics)
        naming = 100.0 * (1.0 - safe_ratio(naming_bad, naming_total, vacuous=0.0))

        if long_lines:
            limit = self.config.get("long_line_threshold", 92)
            findings.recommend(f"Wrap {long_lines} line(s) longer than {limit} characters")
        if naming_bad:
            findings.recommend(
                f"Rename {naming_bad} identifier(s): snake_case functions, "
                "PascalCase types, UPPER_CASE constants"
            )
        return FORMATTING_WEIGHT * formatting + NAMING_WEIGHT * naming

    @clamped_metric
    def score_maintainability(self, snapshot, findings):
        metrics = [source.metrics for source in snapshot.source_files]
        function_count = sum(m.function_count for m in metrics)
        complex_count = sum(m.complex_function_count for m in metrics)
        complex_ratio = safe_ratio(complex_count, function_count, vacuous=0.0)
        score = 100.0 * (1.0 - complex_ratio)

        smells = sum(m.code_smell_count for m in metrics)
        if smells:
            findings.recommend(
                f"Refactor {smells} code smell(s): long functions, deep nesting, "
                "long parameter lists or globals"
            )

        source_modules = snapshot.files_in("source")
        if len(source_modules) > int(self.config.get("max_source_modules", 60)):
            score -= MODULE_COUNT_PENALTY
            findings.recommend("Group the many small source files into submodules")

        graph = snapshot.include_graph
        max_includes = int(self.config.get("max_includes_per_module", 25))
        if any(graph.get_include_count(s.relative_path) > max_includes for s in source_modules):
            score -= INCLUDE_FANOUT_PENALTY
            findings.recommend("Reduce the number of include() calls per module")

        cycles = graph.find_circular_dependencies()
        if cycles:
            score -= min(MAX_CYCLE_PENALTY, CYCLE_PENALTY * len(cycles))
            findings.critical(f"Circular include detected: {' -> '.join(cycles[0])}")
        return score
