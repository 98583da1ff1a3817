"""
Dependency analysis for Julia projects: package imports and the
include() graph between source files.
"""

import re
import posixpath
from collections import defaultdict

from .config import BUILTIN_MODULES
from .heuristics import strip_strings_and_comments

# =============================================================================
# DEPENDENCY ANALYSIS CLASSES
# =============================================================================

class IncludeGraph:
    """Builds and analyzes include() relationships between files."""

    def __init__(self):
        self.includes = defaultdict(set)  # file -> set of files it includes
        self.included_by = defaultdict(set)  # file -> set of files that include it
        self.all_files = set()

    def add_dependency(self, from_file, to_file):
        """Add an include relationship."""
        self.includes[from_file].add(to_file)
        self.included_by[to_file].add(from_file)
        self.all_files.add(from_file)
        self.all_files.add(to_file)

    def get_include_count(self, file_path):
        """Get number of files this file includes."""
        return len(self.includes.get(file_path, ()))

    def get_included_by_count(self, file_path):
        """Get number of files that include this file."""
        return len(self.included_by.get(file_path, ()))

    def find_circular_dependencies(self):
        """Find include cycles using DFS. Nodes are visited in sorted order."""
        visited = set()
        rec_stack = set()
        cycles = []

        def dfs(node, path):
            if node in rec_stack:
                cycle_start = path.index(node)
                cycles.append(path[cycle_start:] + [node])
                return

            if node in visited:
                return

            visited.add(node)
            rec_stack.add(node)
            path.append(node)

            for neighbor in sorted(self.includes.get(node, ())):
                dfs(neighbor, path)

            path.pop()
            rec_stack.remove(node)

        for file in sorted(self.all_files):
            if file not in visited:
                dfs(file, [])

        return cycles

    @classmethod
    def from_source_files(cls, source_files):
        """Build the graph from SourceFile objects (relative paths as nodes)."""
        graph = cls()
        for source in source_files:
            graph.all_files.add(source.relative_path)
            base_dir = posixpath.dirname(source.relative_path)
            for target in ImportParser.parse_includes(source.content):
                resolved = posixpath.normpath(posixpath.join(base_dir, target))
                graph.add_dependency(source.relative_path, resolved)
        return graph


class ImportParser:
    """Parses `using`, `import`, `include` and `module` statements from Julia code."""

    USING_PATTERN = re.compile(r"^\s*(?:using|import)\s+(.+)$")
    INCLUDE_PATTERN = re.compile(r'^\s*include\s*\(\s*"([^"]+)"\s*\)')
    MODULE_PATTERN = re.compile(r"^\s*(?:bare)?module\s+([A-Za-z_]\w*)")
    IDENTIFIER = re.compile(r"^[A-Za-z_]\w*$")

    @staticmethod
    def parse_imports(content):
        """
        Return the sorted set of top-level package names brought in by
        `using` / `import`. Relative (`.Sub`) and builtin modules are skipped.
        """
        packages = set()
        if not content:
            return []
        for line in content.splitlines():
            match = ImportParser.USING_PATTERN.match(line)
            if not match:
                continue
            clause = strip_strings_and_comments(match.group(1))
            # `using A: f, g` imports names from a single package
            if ":" in clause:
                items = [clause.split(":", 1)[0]]
            else:
                items = clause.split(",")
            for item in items:
                item = item.strip()
                if not item or item.startswith("."):
                    continue
                name = item.split()[0].split(".")[0]
                if ImportParser.IDENTIFIER.match(name) and name not in BUILTIN_MODULES:
                    packages.add(name)
        return sorted(packages)

    @staticmethod
    def parse_includes(content):
        """Return include() targets in file order."""
        if not content:
            return []
        return [m.group(1) for m in map(ImportParser.INCLUDE_PATTERN.match, content.splitlines()) if m]

    @staticmethod
    def parse_modules(content):
        """Return names of modules defined in the file."""
        if not content:
            return []
        return [m.group(1) for m in map(ImportParser.MODULE_PATTERN.match, content.splitlines()) if m]
