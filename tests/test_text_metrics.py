#!/usr/bin/env python3
"""
Test Text Metrics

Tests for per-file text metric extraction: line classification, function
detection, nesting estimates, style counters and naming checks.
"""

import unittest
import os
import sys
import textwrap

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from csga.text_metrics import TextMetricExtractor, extract, find_function_spans, count_params
from csga.config import CSGAConfig


class TestLineCounting(unittest.TestCase):
    """Test basic line counters."""

    def test_empty_content_yields_zero_metrics(self):
        metrics = extract("")
        self.assertEqual(metrics.line_count, 0)
        self.assertEqual(metrics.function_count, 0)
        self.assertEqual(metrics.max_nesting_estimate, 0)

    def test_comment_and_blank_lines(self):
        content = "# header\n\nx = 1\n    # indented comment\ny = 2  # trailing\n"
        metrics = extract(content)
        self.assertEqual(metrics.line_count, 5)
        self.assertEqual(metrics.blank_line_count, 1)
        # Trailing comments after code are not comment lines
        self.assertEqual(metrics.comment_line_count, 2)

    def test_style_counters(self):
        content = "x = 1   \n\ty = 2\n" + "z = " + "1" * 100 + "\nok = 3\n"
        metrics = extract(content)
        self.assertEqual(metrics.trailing_whitespace_count, 1)
        self.assertEqual(metrics.tab_line_count, 1)
        self.assertEqual(metrics.long_line_count, 1)
        self.assertEqual(metrics.style_violation_count, 3)

    def test_long_line_threshold_is_configurable(self):
        config = CSGAConfig({"long_line_threshold": 10})
        metrics = TextMetricExtractor(config).extract("short = 1\nmuch_longer_line = 2\n")
        self.assertEqual(metrics.long_line_count, 1)

    def test_malformed_text_does_not_raise(self):
        content = 'function broken(\n    if x\n"""unterminated\nend end end\n'
        metrics = extract(content)
        self.assertEqual(metrics.line_count, 4)


class TestFunctionDetection(unittest.TestCase):
    """Test function spans and nesting estimates."""

    def test_block_function_span(self):
        lines = textwrap.dedent('''\
            function add(a, b)
                return a + b
            end

            x = add(1, 2)
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual(len(spans), 1)
        self.assertEqual(spans[0].name, "add")
        self.assertEqual(spans[0].start_line, 0)
        self.assertEqual(spans[0].end_line, 2)
        self.assertEqual(spans[0].param_count, 2)

    def test_short_form_function(self):
        spans = find_function_spans(["square(x) = x * x", "y == square(2)"])
        self.assertEqual(len(spans), 1)
        self.assertTrue(spans[0].short_form)
        self.assertEqual(spans[0].name, "square")

    def test_index_end_does_not_close_function(self):
        lines = textwrap.dedent('''\
            function last_item(xs)
                y = xs[end]
                return y
            end
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual(spans[0].end_line, 3)

    def test_nesting_estimate(self):
        lines = textwrap.dedent('''\
            function deep(xs)
                for x in xs
                    if x > 0
                        while x > 1
                            x -= 1
                        end
                    end
                end
            end
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual(spans[0].max_nesting, 3)
        self.assertEqual(spans[0].end_line, 8)

    def test_keywords_in_strings_and_comments_are_ignored(self):
        lines = textwrap.dedent('''\
            function talk()
                println("if you end up here")  # for the end
                return nothing
            end
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual(spans[0].end_line, 3)
        self.assertEqual(spans[0].max_nesting, 0)

    def test_docstring_detection(self):
        lines = textwrap.dedent('''\
            """
                documented(x)

            Has a docstring.
            """
            function documented(x)
                return x
            end

            first = documented(1)
            second = documented(2)

            function undocumented(x)
                return x
            end
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual([s.has_docstring for s in spans], [True, False])

    def test_docstring_content_is_not_code(self):
        lines = textwrap.dedent('''\
            """
            example(x) = x + 1
            end
            """
            function real(x)
                return x
            end
            ''').splitlines()
        spans = find_function_spans(lines)
        self.assertEqual([s.name for s in spans], ["real"])
        self.assertEqual(spans[0].end_line, 6)

    def test_count_params_ignores_nested_commas(self):
        self.assertEqual(count_params("a, b::Dict{String, Int}, c=(1, 2); d=3"), 4)
        self.assertEqual(count_params(""), 0)


class TestSmellsAndNaming(unittest.TestCase):
    """Test code smell and naming counters."""

    def test_long_function_is_complex(self):
        body = "\n".join(f"    x{i} = {i}" for i in range(60))
        content = f"function long_one()\n{body}\nend\n"
        metrics = extract(content)
        self.assertEqual(metrics.complex_function_count, 1)
        self.assertGreaterEqual(metrics.code_smell_count, 1)

    def test_too_many_params_and_globals_are_smells(self):
        content = "global counter\nfunction wide(a, b, c, d, e, f)\n    return a\nend\n"
        metrics = extract(content)
        self.assertEqual(metrics.code_smell_count, 2)
        self.assertEqual(metrics.complex_function_count, 0)

    def test_naming_violations(self):
        content = textwrap.dedent('''\
            const max_size = 10
            const LIMIT = 5
            struct bad_type
                x::Int
            end
            struct GoodType
                x::Int
            end
            function camelCase(x)
                return x
            end
            function snake_case!(x)
                return x
            end
            ''')
        metrics = extract(content)
        self.assertEqual(metrics.naming_checks, 6)
        self.assertEqual(metrics.naming_violations, 3)


if __name__ == '__main__':
    unittest.main()
