"""
Advanced Automation pillar: build automation, test suite, developer
workflow tooling and agent-facing documentation.
"""

from .config import AUTOMATION
from .decorators import clamped_metric
from .heuristics import ASSERTION_PATTERN, TESTSET_PATTERN, count_agent_commands
from .pillar_base import PillarEvaluator

AGENT_SECTIONS = ("security", "clean code", "green code", "automation")
AGENT_SECTION_POINTS = 15.0
AGENT_COMMAND_POINTS = 40.0
FORMATTER_CONFIG = ".JuliaFormatter.toml"


class AutomationEvaluator(PillarEvaluator):
    key = AUTOMATION

    ADVICE = {
        "cicd_infrastructure": (
            "Add the standard Makefile targets (test, install, clean, setup, dev, format, docs, bench)",
            "Build and release automation is largely missing",
        ),
        "testing_automation": (
            "Grow the test suite: one test file per area and more @testset blocks",
            "Automated testing is insufficient",
        ),
        "development_workflow": (
            "Adopt Revise, JuliaFormatter and Debugger, plus a format target and pre-commit hook",
            "No developer workflow tooling configured",
        ),
        "agents_integration": (
            "Document each quality pillar and the make commands in AGENTS.md",
            "AGENTS.md is missing or does not describe the workflow",
        ),
    }

    @clamped_metric
    def score_cicd_infrastructure(self, snapshot, findings):
        score = 0.0
        if not snapshot.has_makefile:
            findings.critical("No Makefile found: build, test and format tasks are not automated")
        expected = list(self.config.get("expected_make_targets", ()))
        if expected and snapshot.has_makefile:
            present = [target for target in expected if target in snapshot.make_targets]
            score += len(present) / len(expected) * 50.0
            missing = [target for target in expected if target not in snapshot.make_targets]
            if missing:
                findings.recommend(f"Add Makefile targets: {', '.join(missing)}")

        if snapshot.has_manifest and snapshot.has_lockfile:
            score += 25.0
        elif snapshot.has_manifest:
            score += 15.0

        if snapshot.has_git or snapshot.has_ci_config:
            score += 25.0
        return score

    @clamped_metric
    def score_testing_automation(self, snapshot, findings):
        if not snapshot.has_dir("test"):
            findings.critical("No test suite found (test/ directory missing)")
            return 0.0

        score = 20.0
        names = snapshot.test_file_names
        if "runtests.jl" in names:
            score += 20.0
        else:
            findings.recommend("Add test/runtests.jl as the test entry point")

        expected = list(self.config.get("expected_test_files", ()))
        if expected:
            score += sum(1 for name in expected if name in names) / len(expected) * 30.0

        testsets = assertions = 0
        for source in snapshot.files_in("test"):
            testsets += len(TESTSET_PATTERN.findall(source.content))
            assertions += len(ASSERTION_PATTERN.findall(source.content))
        min_testsets = max(1, int(self.config.get("min_testsets", 15)))
        min_assertions = max(1, int(self.config.get("min_assertions", 50)))
        score += min(1.0, testsets / min_testsets) * 15.0
        score += min(1.0, assertions / min_assertions) * 15.0
        return score

    @clamped_metric
    def score_development_workflow(self, snapshot, findings):
        score = 0.0
        referenced = set(snapshot.deps) | set(snapshot.imported_packages)
        for package in self.config.get("workflow_packages", ()):
            if package in referenced:
                score += 15.0
            else:
                findings.recommend(f"Add {package} to the development environment")

        if "format" in snapshot.make_targets:
            score += 15.0
        if snapshot.has_dir(".vscode"):
            score += 10.0
        if snapshot.has_pre_commit_hook:
            score += 15.0
        if snapshot.has_file(FORMATTER_CONFIG):
            score += 15.0
        return score

    @clamped_metric
    def score_agents_integration(self, snapshot, findings):
        text = snapshot.agents_text
        if text is None:
            findings.recommend("Create AGENTS.md documenting the quality workflow")
            return 0.0

        lowered = text.lower()
        score = sum(AGENT_SECTION_POINTS for section in AGENT_SECTIONS if section in lowered)
        commands = count_agent_commands(text)
        wanted = max(1, int(self.config.get("min_agents_commands", 10)))
        score += min(1.0, commands / wanted) * AGENT_COMMAND_POINTS
        return score
