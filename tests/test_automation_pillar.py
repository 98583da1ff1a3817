#!/usr/bin/env python3
"""
Test Automation Pillar

Tests for CI/CD infrastructure, testing automation, development workflow
and agents integration sub-metrics.
"""

import unittest
import tempfile
import os
import shutil
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.dirname(__file__))

from csga.automation_pillar import AutomationEvaluator
from csga.config import CSGAConfig
from csga.project_snapshot import parse_make_targets
from fixtures import build_full_project, build_minimal_project, pillar_test_file, write_file


class TestAutomationPillar(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.evaluator = AutomationEvaluator(CSGAConfig({"runtime_probes": False}))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_full_project_scores_maximum(self):
        build_full_project(self.temp_dir)
        pillar = self.evaluator.evaluate(self.temp_dir)
        for name, value in pillar.metrics.items():
            self.assertEqual(value, 100.0, name)
        self.assertEqual(pillar.critical_issues, ())

    def test_bare_project_is_critical(self):
        build_minimal_project(self.temp_dir)
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertEqual(pillar.score, 0.0)
        self.assertIn("No Makefile found: build, test and format tasks are not automated",
                      pillar.critical_issues)
        self.assertIn("No test suite found (test/ directory missing)", pillar.critical_issues)

    def test_partial_makefile(self):
        write_file(self.temp_dir, "Makefile", "test:\n\tjulia test/runtests.jl\nclean:\n\trm -rf tmp\n")
        write_file(self.temp_dir, "Project.toml", 'name = "P"\n')
        pillar = self.evaluator.evaluate(self.temp_dir)
        # 2 of 10 expected targets (10) + Project.toml only (15)
        self.assertAlmostEqual(pillar.metric("cicd_infrastructure"), 25.0)
        self.assertTrue(any(r.startswith("Add Makefile targets: install") for r in pillar.recommendations))

    def test_testing_density(self):
        write_file(self.temp_dir, "test/runtests.jl", pillar_test_file("test_basics.jl", 3, 5))
        pillar = self.evaluator.evaluate(self.temp_dir)
        # dir 20 + runtests 20 + 1/6 expected (5) + 3/15 testsets (3) + 15/50 assertions (4.5)
        self.assertAlmostEqual(pillar.metric("testing_automation"), 52.5)

    def test_development_workflow(self):
        write_file(self.temp_dir, "Project.toml", '[deps]\nRevise = "295af30f-e4ad-537b-8983-00126c2a3abe"\n')
        write_file(self.temp_dir, ".JuliaFormatter.toml", "indent = 4\n")
        pillar = self.evaluator.evaluate(self.temp_dir)
        self.assertAlmostEqual(pillar.metric("development_workflow"), 30.0)
        self.assertIn("Add Debugger to the development environment", pillar.recommendations)

    def test_agents_integration(self):
        write_file(self.temp_dir, "AGENTS.md", "## Security\n## Automation\nRun `make test`.\n")
        pillar = self.evaluator.evaluate(self.temp_dir)
        # 2 sections (30) + 1 of 10 commands (4)
        self.assertAlmostEqual(pillar.metric("agents_integration"), 34.0)

    def test_parse_make_targets(self):
        text = ".PHONY: a b\nbuild: deps\n\tcc x\nVAR := 1\nother-target:\n"
        self.assertEqual(parse_make_targets(text), {"build", "other-target"})
        self.assertEqual(parse_make_targets(None), set())


if __name__ == '__main__':
    unittest.main()
