"""
Per-file text metrics for Julia source.

All measurements are derived from plain text with named heuristics (see
heuristics.py). They are approximations: nesting in particular is
estimated by counting block keywords, not by parsing.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import DEFAULT_CONFIG
from .heuristics import (
    is_comment_line, strip_strings_and_comments, strip_bracketed, naming_checks,
    is_snake_case, is_pascal_case,
)
from .utils import is_binary_file, read_file_content, warn

# =============================================================================
# FUNCTION DETECTION
# =============================================================================

# `function name(args...)`, optionally preceded by macros such as @inline.
FUNCTION_BLOCK_PATTERN = re.compile(
    r"^\s*(?:@\w+\s+)*function\s+([A-Za-z_][\w!.]*)\s*(?:\{[^}]*\})?\s*(?:\(([^)]*)\)?)?"
)
# Short form `name(args) = expr` at column 0.
# False negatives: indented short forms and operator overloads like `+(a, b) = ...`.
SHORT_FUNCTION_PATTERN = re.compile(
    r"^([A-Za-z_][\w!]*)\s*(?:\{[^}]*\})?\s*\(([^)]*)\)\s*(?:::\s*[\w{}.,\s]+?)?\s*=(?![=>])"
)
GLOBAL_PATTERN = re.compile(r"^\s*global\s+[A-Za-z_]")
_BRACES = re.compile(r"\{[^{}]*\}")

BLOCK_TOKEN_PATTERN = re.compile(
    r"\b(abstract\s+type|primitive\s+type|function|macro|module|baremodule|struct"
    r"|if|for|while|try|let|begin|quote|do|end)\b"
)
CONTROL_KEYWORDS = frozenset({"if", "for", "while", "try"})
DOCSTRING_DELIMITER = '"""'


@dataclass(frozen=True)
class FunctionSpan:
    """A detected function definition. Lines are 0-based and inclusive."""
    name: str
    start_line: int
    end_line: int
    param_count: int
    max_nesting: int
    has_docstring: bool
    short_form: bool = False

    @property
    def length(self):
        return self.end_line - self.start_line + 1


def count_params(param_text):
    """Count comma/semicolon separated parameters, ignoring defaults' commas in brackets."""
    if not param_text:
        return 0
    flattened = strip_bracketed(_BRACES.sub("{}", param_text))
    parts = [p.strip() for p in re.split(r"[,;]", flattened)]
    return sum(1 for p in parts if p)


def _block_tokens(lines):
    """
    Return, per line, the list of block tokens found in code.

    Lines inside triple-quoted docstrings are None.
    """
    tokens_per_line = []
    in_docstring = False
    for line in lines:
        delimiters = line.count(DOCSTRING_DELIMITER)
        if in_docstring or delimiters:
            tokens_per_line.append(None)
            if delimiters % 2 == 1:
                in_docstring = not in_docstring
            continue
        code = strip_bracketed(strip_strings_and_comments(line))
        tokens = []
        for match in BLOCK_TOKEN_PATTERN.finditer(code):
            token = match.group(1)
            if token.startswith(("abstract", "primitive")):
                token = "type"
            tokens.append(token)
        tokens_per_line.append(tokens)
    return tokens_per_line


def _has_docstring(lines, index, lookback):
    start = max(0, index - lookback)
    return any(DOCSTRING_DELIMITER in line for line in lines[start:index])


def _walk_block(tokens_per_line, start):
    """Follow block tokens from a function opener to its matching `end`."""
    stack = []
    max_nesting = 0
    for index in range(start, len(tokens_per_line)):
        for token in tokens_per_line[index] or ():
            if token == "end":
                if stack:
                    stack.pop()
            else:
                stack.append(token)
                depth = sum(1 for kind in stack if kind in CONTROL_KEYWORDS)
                max_nesting = max(max_nesting, depth)
        if not stack:
            return index, max_nesting
    # Unterminated block: the function runs to end of file
    return len(tokens_per_line) - 1, max_nesting


def find_function_spans(lines, docstring_lookback=5):
    """Detect block and short-form functions in a list of lines."""
    tokens_per_line = _block_tokens(lines)
    spans = []
    for index, line in enumerate(lines):
        if tokens_per_line[index] is None:
            continue
        match = FUNCTION_BLOCK_PATTERN.match(line)
        if match and "function" in tokens_per_line[index]:
            end_line, max_nesting = _walk_block(tokens_per_line, index)
            spans.append(FunctionSpan(
                name=match.group(1).rsplit(".", 1)[-1],
                start_line=index,
                end_line=end_line,
                param_count=count_params(match.group(2)),
                max_nesting=max_nesting,
                has_docstring=_has_docstring(lines, index, docstring_lookback),
            ))
            continue
        match = SHORT_FUNCTION_PATTERN.match(line)
        if match:
            spans.append(FunctionSpan(
                name=match.group(1),
                start_line=index,
                end_line=index,
                param_count=count_params(match.group(2)),
                max_nesting=0,
                has_docstring=_has_docstring(lines, index, docstring_lookback),
                short_form=True,
            ))
    return spans

# =============================================================================
# TEXT METRICS
# =============================================================================

@dataclass(frozen=True)
class TextMetrics:
    line_count: int = 0
    blank_line_count: int = 0
    comment_line_count: int = 0
    code_smell_count: int = 0
    long_line_count: int = 0
    trailing_whitespace_count: int = 0
    tab_line_count: int = 0
    style_violation_count: int = 0
    function_count: int = 0
    documented_function_count: int = 0
    complex_function_count: int = 0
    max_nesting_estimate: int = 0
    naming_checks: int = 0
    naming_violations: int = 0
    functions: Tuple[FunctionSpan, ...] = field(default_factory=tuple)


class TextMetricExtractor:
    """Computes TextMetrics for file contents using configured thresholds."""

    def __init__(self, config=None):
        get = config.get if config is not None else DEFAULT_CONFIG.get
        self.long_line_threshold = int(get("long_line_threshold", 92))
        self.max_function_lines = int(get("max_function_lines", 50))
        self.max_nesting_depth = int(get("max_nesting_depth", 4))
        self.max_function_params = int(get("max_function_params", 5))
        self.docstring_lookback = int(get("docstring_lookback_lines", 5))

    def is_complex(self, span):
        return span.length > self.max_function_lines or span.max_nesting > self.max_nesting_depth

    def extract(self, content):
        """Extract metrics from text. Never raises on odd input."""
        if not content:
            return TextMetrics()
        lines = content.splitlines()
        spans = find_function_spans(lines, self.docstring_lookback)

        blank = comments = long_lines = trailing = tabs = style = 0
        globals_found = naming_total = naming_bad = 0
        for line in lines:
            if not line.strip():
                blank += 1
            elif is_comment_line(line):
                comments += 1
            is_long = len(line) > self.long_line_threshold
            has_trailing = line != line.rstrip()
            has_tab = "\t" in line
            long_lines += is_long
            trailing += has_trailing
            tabs += has_tab
            style += bool(is_long or has_trailing or has_tab)
            if GLOBAL_PATTERN.match(line):
                globals_found += 1
            for _kind, _name, ok in naming_checks(line):
                naming_total += 1
                naming_bad += not ok

        for span in spans:
            naming_total += 1
            # PascalCase functions are outer constructors
            naming_bad += not (is_snake_case(span.name) or is_pascal_case(span.name))

        complex_count = sum(1 for span in spans if self.is_complex(span))
        smells = globals_found + sum(
            (span.length > self.max_function_lines)
            + (span.max_nesting > self.max_nesting_depth)
            + (span.param_count > self.max_function_params)
            for span in spans
        )

        return TextMetrics(
            line_count=len(lines),
            blank_line_count=blank,
            comment_line_count=comments,
            code_smell_count=smells,
            long_line_count=long_lines,
            trailing_whitespace_count=trailing,
            tab_line_count=tabs,
            style_violation_count=style,
            function_count=len(spans),
            documented_function_count=sum(1 for span in spans if span.has_docstring),
            complex_function_count=complex_count,
            max_nesting_estimate=max((span.max_nesting for span in spans), default=0),
            naming_checks=naming_total,
            naming_violations=naming_bad,
            functions=tuple(spans),
        )


def extract(content, config=None):
    """Convenience wrapper around TextMetricExtractor.extract."""
    return TextMetricExtractor(config).extract(content)

# =============================================================================
# SOURCE FILES
# =============================================================================

@dataclass(frozen=True)
class SourceFile:
    """One scanned source file with its content and metrics."""
    path: str
    relative_path: str
    content: str
    metrics: TextMetrics
    categories: Tuple[str, ...] = ()

    @property
    def name(self):
        return os.path.basename(self.path)

    @property
    def lines(self) -> List[str]:
        return self.content.splitlines()

    def has_category(self, category):
        return category in self.categories


def load_source_file(path, root, extractor, classifier=None) -> Optional[SourceFile]:
    """Read and measure one file; unreadable or binary files are skipped with a warning."""
    if is_binary_file(path):
        warn(f"Skipping binary or unreadable file: {path}")
        return None
    content = read_file_content(path)
    if content is None:
        return None
    relative = os.path.relpath(path, str(root)).replace(os.sep, "/")
    categories = tuple(classifier.classify_file(relative)) if classifier else ()
    return SourceFile(
        path=str(path),
        relative_path=relative,
        content=content,
        metrics=extractor.extract(content),
        categories=categories,
    )
