"""
Green Code pillar: benchmarking infrastructure, efficient idioms,
resource cleanup and runtime probes.
"""

from .config import GREEN_CODE
from .decorators import clamped_metric
from .heuristics import count_efficiency_patterns, count_resource_patterns
from .pillar_base import PillarEvaluator
from .runtime_probes import run_probes
from .utils import safe_ratio

MAX_EFFICIENCY_BONUS = 20.0
MAX_EFFICIENCY_PENALTY = 80.0
BENCHMARK_TARGETS = ("bench", "benchmark", "benchmarks")


class GreenCodeEvaluator(PillarEvaluator):
    key = GREEN_CODE
    SOURCE_METRICS = ("code_efficiency", "resource_management")

    ADVICE = {
        "performance_infrastructure": (
            "Add BenchmarkTools, a benchmarks/ suite, a `make bench` target and performance tests",
            "No performance measurement infrastructure",
        ),
        "code_efficiency": (
            "Use @inbounds, @views and preallocation (similar, sizehint!) in hot loops",
            "Source relies heavily on inefficient patterns (globals, untyped containers)",
        ),
        "resource_management": (
            "Pair try with finally and prefer open(...) do blocks so resources are released",
            "Opened resources are frequently left unclosed",
        ),
        "runtime_efficiency": (
            "Investigate failing runtime efficiency probes",
            "Runtime efficiency probes failed",
        ),
    }

    @clamped_metric
    def score_performance_infrastructure(self, snapshot, findings):
        score = 0.0
        if "BenchmarkTools" in snapshot.deps or "BenchmarkTools" in snapshot.imported_packages:
            score += 25.0

        if snapshot.dir_contains("benchmarks", self.config.get("source_extension", ".jl")):
            score += 25.0
        elif snapshot.has_dir("benchmarks"):
            score += 10.0
            findings.recommend("Add benchmark scripts to benchmarks/")

        if any(target in snapshot.make_targets for target in BENCHMARK_TARGETS):
            score += 25.0

        if any(source.has_category("performance") for source in snapshot.files_in("test")):
            score += 25.0
        return score

    @clamped_metric
    def score_code_efficiency(self, snapshot, findings):
        total_lines = good = bad = 0
        for source in snapshot.source_files:
            for line in source.lines:
                total_lines += 1
                line_good, line_bad = count_efficiency_patterns(line)
                good += line_good
                bad += line_bad
        if total_lines == 0:
            return 100.0

        bonus = min(MAX_EFFICIENCY_BONUS, good / total_lines * float(self.config.get("efficiency_bonus_factor", 1000.0)))
        penalty = min(MAX_EFFICIENCY_PENALTY, bad / total_lines * float(self.config.get("efficiency_penalty_factor", 2000.0)))
        if bad:
            findings.recommend(f"Remove {bad} inefficient pattern(s) such as globals or Vector{{Any}}")
        return float(self.config.get("efficiency_baseline", 80.0)) + bonus - penalty

    @clamped_metric
    def score_resource_management(self, snapshot, findings):
        totals = {"try": 0, "finally": 0, "open": 0, "open_do": 0, "close": 0}
        for source in snapshot.source_files:
            for line in source.lines:
                for name, count in count_resource_patterns(line).items():
                    totals[name] += count

        cleanup_ratio = safe_ratio(min(totals["finally"], totals["try"]), totals["try"])
        closed = min(totals["close"] + totals["open_do"], totals["open"])
        close_ratio = safe_ratio(closed, totals["open"])
        if closed < totals["open"]:
            findings.recommend(f"{totals['open'] - closed} open() call(s) without close() or a do block")
        return 100.0 * (cleanup_ratio + close_ratio) / 2.0

    @clamped_metric
    def score_runtime_efficiency(self, snapshot, findings):
        if not self.config.get("runtime_probes", True):
            return 100.0
        results = run_probes(self.config)
        for result in results:
            if not result.passed:
                findings.recommend(
                    f"Runtime probe '{result.name}' failed (measured {result.measured:g}, limit {result.limit:g})"
                )
        return 100.0 * sum(1 for result in results if result.passed) / len(results)
