"""
Security First pillar: trusted dependencies, risky code patterns,
dependency hygiene and security automation.
"""

from collections import Counter

from .config import SECURITY
from .decorators import clamped_metric
from .heuristics import find_security_risk
from .pillar_base import PillarEvaluator
from .utils import safe_ratio


class SecurityEvaluator(PillarEvaluator):
    key = SECURITY
    SOURCE_METRICS = ("code_security",)

    ADVICE = {
        "package_security": (
            "Prefer official registry and standard library packages, and declare [compat] bounds",
            "Dependencies include untrusted or unverifiable packages",
        ),
        "code_security": (
            "Review eval, ccall and unsafe_* usage and move secrets out of source",
            "Hardcoded secrets or unsafe calls detected in source code",
        ),
        "dependency_management": (
            "Complete Project.toml metadata, add [compat] entries and commit Manifest.toml",
            "Dependency management is missing or broken",
        ),
        "security_automation": (
            "Add security audit Makefile targets, security tests and a pre-commit hook",
            "No automated security checks are configured",
        ),
    }

    @clamped_metric
    def score_package_security(self, snapshot, findings):
        if not snapshot.has_manifest:
            findings.critical("Project.toml dependency manifest not found")
            return 0.0
        if snapshot.manifest_error:
            findings.critical("Project.toml could not be parsed")
            return 10.0

        deps = snapshot.deps
        if not deps:
            return 100.0

        official = set(self.config.get("official_packages", ()))
        unofficial = sorted(name for name in deps if name not in official)
        if unofficial:
            shown = ", ".join(unofficial[:5])
            findings.recommend(f"Review non-official dependencies: {shown}")

        official_ratio = (len(deps) - len(unofficial)) / len(deps)
        compat = snapshot.compat
        pinned = sum(1 for name in deps if name in compat)
        compat_bonus = min(20.0, pinned / len(deps) * 20.0)
        return official_ratio * 80.0 + compat_bonus

    @clamped_metric
    def score_code_security(self, snapshot, findings):
        total_lines = 0
        risks = Counter()
        for source in snapshot.source_files:
            for line in source.lines:
                total_lines += 1
                risk = find_security_risk(line)
                if risk:
                    risks[risk] += 1

        violations = sum(risks.values())
        rate = safe_ratio(violations, total_lines, vacuous=0.0)
        if rate > float(self.config.get("max_security_violation_rate", 0.001)):
            detail = ", ".join(f"{name}: {count}" for name, count in sorted(risks.items()))
            findings.critical(f"Security risk patterns on {violations} line(s) ({detail})")
        return 100.0 - rate * float(self.config.get("security_violation_penalty", 1000.0))

    @clamped_metric
    def score_dependency_management(self, snapshot, findings):
        if not snapshot.has_manifest:
            return 0.0
        if snapshot.manifest_error:
            score = 10.0
        else:
            score = 25.0
            deps = snapshot.deps
            compat = snapshot.compat
            if deps:
                score += sum(1 for name in deps if name in compat) / len(deps) * 25.0
            else:
                score += 25.0
            score += snapshot.manifest_field_ratio() * 25.0

        if snapshot.has_lockfile:
            score += 25.0
        else:
            findings.recommend("Commit Manifest.toml to pin exact dependency versions")
        return score

    @clamped_metric
    def score_security_automation(self, snapshot, findings):
        score = 0.0
        targets = list(self.config.get("security_make_targets", ()))
        if targets:
            present = sum(1 for target in targets if target in snapshot.make_targets)
            score += present / len(targets) * 25.0

        agents = (snapshot.agents_text or "").lower()
        if "security" in agents and "audit" in agents:
            score += 25.0

        if any("security" in name.lower() for name in snapshot.test_file_names):
            score += 25.0

        if snapshot.has_pre_commit_hook:
            score += 25.0
        return score
