"""
Discovery of Julia source files inside a project.

Only allow-listed top-level directories are walked, plus source files
sitting directly in the project root. Hidden directories and build
output are never entered.
"""

import os
from typing import List

from .config import DEFAULT_CONFIG
from .utils import should_ignore, warn


class FileScanner:
    """Collects source file paths under a project root in a stable order."""

    def __init__(self, config=None):
        get = config.get if config is not None else DEFAULT_CONFIG.get
        self.extension = get("source_extension", ".jl")
        self.scan_dirs = list(get("scan_dirs", DEFAULT_CONFIG["scan_dirs"]))
        self.excluded_dirs = set(get("exclude_dirs", DEFAULT_CONFIG["exclude_dirs"]))
        self.exclude_patterns = list(get("exclude_patterns", DEFAULT_CONFIG["exclude_patterns"]))

    def _is_excluded_dir(self, name):
        return name.startswith(".") or name in self.excluded_dirs

    def _on_walk_error(self, error):
        warn(f"Cannot read directory {getattr(error, 'filename', '')}: {error}")

    def _accept(self, root, path):
        if not path.endswith(self.extension):
            return False
        relative = os.path.relpath(path, root).replace(os.sep, "/")
        return not should_ignore(relative, self.exclude_patterns)

    def scan(self, project_root) -> List[str]:
        """
        Return sorted absolute paths of source files under project_root.

        Unreadable directories are skipped with a warning; an empty or
        source-free project yields an empty list.
        """
        root = os.path.abspath(str(project_root))
        found = set()

        try:
            entries = sorted(os.listdir(root))
        except OSError as e:
            warn(f"Cannot read project directory {root}: {e}")
            return []

        for entry in entries:
            path = os.path.join(root, entry)
            if os.path.isfile(path) and self._accept(root, path):
                found.add(path)

        for scan_dir in self.scan_dirs:
            top = os.path.join(root, scan_dir)
            if not os.path.isdir(top) or self._is_excluded_dir(scan_dir):
                continue
            for dirpath, dirs, files in os.walk(top, onerror=self._on_walk_error):
                dirs[:] = sorted(d for d in dirs if not self._is_excluded_dir(d))
                for file in files:
                    path = os.path.join(dirpath, file)
                    if self._accept(root, path):
                        found.add(path)

        return sorted(found)
