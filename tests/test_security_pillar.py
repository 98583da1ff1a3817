#!/usr/bin/env python3
"""
Test Security Pillar

Tests for package security, code security, dependency management and
security automation sub-metrics.
"""

import unittest
import tempfile
import os
import shutil
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.dirname(__file__))

from csga.config import CSGAConfig
from csga.security_pillar import SecurityEvaluator
from fixtures import build_full_project, build_minimal_project, write_file


class SecurityPillarTestCase(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.evaluator = SecurityEvaluator(CSGAConfig({"runtime_probes": False}))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)


class TestPackageSecurity(SecurityPillarTestCase):

    def test_missing_manifest_is_critical(self):
        build_minimal_project(self.temp_dir)
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("package_security"), 0.0)
        self.assertLess(pillar.metric("dependency_management"), 50.0)
        self.assertIn("Project.toml dependency manifest not found", pillar.critical_issues)

    def test_unparseable_manifest(self):
        write_file(self.temp_dir, "Project.toml", "name = \n[[[broken")
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("package_security"), 10.0)
        self.assertIn("Project.toml could not be parsed", pillar.critical_issues)

    def test_manifest_without_dependencies(self):
        write_file(self.temp_dir, "Project.toml", 'name = "Lonely"\n')
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("package_security"), 100.0)

    def test_unofficial_dependencies_lower_the_score(self):
        write_file(self.temp_dir, "Project.toml", (
            'name = "Mixed"\n\n[deps]\nTest = "8dfed614-e22c-5e08-85e1-65c5234f0b40"\n'
            'ShadyPkg = "00000000-0000-0000-0000-000000000000"\n\n[compat]\nTest = "1"\n'
        ))
        pillar = self.evaluator.evaluate(self.temp_dir)
        # half official (40) + half pinned (10)
        self.assertAlmostEqual(pillar.metric("package_security"), 50.0)
        self.assertTrue(any("ShadyPkg" in r for r in pillar.recommendations))


class TestCodeSecurity(SecurityPillarTestCase):

    def test_no_source_is_vacuously_secure(self):
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("code_security"), 100.0)

    def test_violation_rate_penalty(self):
        lines = ["x = 1"] * 99 + ['api_key = "sk-123"']
        write_file(self.temp_dir, "src/Keys.jl", "\n".join(lines) + "\n")
        pillar = self.evaluator.evaluate(self.temp_dir)
        # 1 violation in 100 lines -> 100 - 0.01 * 1000
        self.assertAlmostEqual(pillar.metric("code_security"), 90.0)
        self.assertTrue(any("hardcoded_credential: 1" in c for c in pillar.critical_issues))

    def test_adding_a_violation_never_raises_the_score(self):
        build_full_project(self.temp_dir)
        before = self.evaluator.evaluate(self.temp_dir).metric("code_security")
        write_file(self.temp_dir, "src/leak.jl", 'password = "hunter2"\nresult = eval(expr)\n')
        after = self.evaluator.evaluate(self.temp_dir).metric("code_security")
        self.assertLess(after, before)

    def test_heavy_violations_clamp_at_zero(self):
        write_file(self.temp_dir, "src/Bad.jl", "ccall(:f, Cvoid, ())\n" * 10)
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("code_security"), 0.0)


class TestDependencyManagementAndAutomation(SecurityPillarTestCase):

    def test_full_project_scores_maximum(self):
        build_full_project(self.temp_dir)
        pillar = self.evaluator.evaluate(self.temp_dir)
        for name, value in pillar.metrics.items():
            self.assertEqual(value, 100.0, name)
        self.assertEqual(pillar.score, 100.0)
        self.assertEqual(pillar.critical_issues, ())

    def test_missing_lockfile_is_recommended(self):
        build_full_project(self.temp_dir)
        os.remove(os.path.join(self.temp_dir, "Manifest.toml"))
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.metric("dependency_management"), 75.0)
        self.assertIn("Commit Manifest.toml to pin exact dependency versions", pillar.recommendations)

    def test_security_automation_parts(self):
        write_file(self.temp_dir, "Makefile", "audit:\n\techo audit\n\nsecurity: audit\n")
        write_file(self.temp_dir, "test/test_security.jl", "@test true\n")
        pillar = self.evaluator.evaluate(self.temp_dir)
        # 2 of 4 security targets (12.5) + security test file (25)
        self.assertAlmostEqual(pillar.metric("security_automation"), 37.5)


if __name__ == '__main__':
    unittest.main()
