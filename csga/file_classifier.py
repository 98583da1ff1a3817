"""
file_classifier.py

This module provides the FileClassifier class, which tags scanned Julia files
with the role they play in a project (source, test, benchmark, ...) so that
pillar evaluators can select the files they care about.
"""

import os
import fnmatch
from typing import List, Dict, Any


DIRECTORY_CATEGORIES = {
    "src": "source",
    "test": "test",
    "tests": "test",
    "benchmarks": "benchmark",
    "benchmark": "benchmark",
    "bench": "benchmark",
    "scripts": "script",
    "examples": "example",
    "docs": "docs",
    "deps": "build",
}

DEFAULT_TAG_PATTERNS = {
    "performance": ["*bench*", "*perf*", "*performance*"],
    "security": ["*security*"],
}


class FileClassifier:
    """
    Classifies files by their location and name within a Julia project.

    The first path component decides the category (files directly in the
    project root are 'root'); file-name patterns add extra tags such as
    'performance' or 'security'.
    """

    def __init__(self, config: Dict[str, Any] = None):
        config = config or {}
        self.directory_categories = dict(DIRECTORY_CATEGORIES)
        self.directory_categories.update(config.get("directory_categories", {}) or {})
        self.tag_patterns = dict(DEFAULT_TAG_PATTERNS)
        self.tag_patterns.update(config.get("tag_patterns", {}) or {})

    def classify_file(self, file_path: str) -> List[str]:
        """
        Classifies a '/'-separated path relative to the project root.

        Returns:
            List[str]: Sorted categories and tags, e.g. ['performance', 'test'].
        """
        parts = file_path.replace(os.sep, "/").split("/")
        file_name = parts[-1].lower()
        classifications = set()

        if len(parts) == 1:
            classifications.add("root")
        else:
            category = self.directory_categories.get(parts[0])
            if category:
                classifications.add(category)

        for tag, patterns in self.tag_patterns.items():
            if self._matches_pattern(file_name, patterns):
                classifications.add(tag)

        return sorted(classifications)

    def _matches_pattern(self, file_name: str, patterns: List[str]) -> bool:
        return any(fnmatch.fnmatch(file_name, pattern) for pattern in patterns)
