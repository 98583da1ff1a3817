"""
A read-only view of a project shared by all pillar evaluators.

The snapshot is loaded once per evaluation: source files are scanned,
read and measured, and the manifest, Makefile, README and agents
document are parsed. Evaluators only read from it.
"""

import os
import re
import tomllib
from functools import cached_property

from .config import (
    DEFAULT_CONFIG, MANIFEST_FILE, LOCKFILE, AGENTS_FILE, MAKEFILE_NAMES, README_NAMES,
)
from .dependency_analysis import ImportParser, IncludeGraph
from .file_classifier import FileClassifier
from .file_scanner import FileScanner
from .text_metrics import TextMetricExtractor, load_source_file
from .utils import read_optional_text, warn
from .workspace_resolver import resolve_project_root

MAKE_TARGET_PATTERN = re.compile(r"^([A-Za-z0-9_.\-]+)\s*:(?!=)", re.MULTILINE)
MANIFEST_METADATA_FIELDS = ("name", "uuid", "authors", "version")


def parse_make_targets(text):
    """Return the set of target names defined in Makefile text (phony included)."""
    if not text:
        return set()
    targets = set(MAKE_TARGET_PATTERN.findall(text))
    targets.discard(".PHONY")
    return targets


def load_manifest(root):
    """
    Parse Project.toml.

    Returns:
        tuple: (data or None, parse_error: bool). Missing file -> (None, False).
    """
    path = os.path.join(root, MANIFEST_FILE)
    if not os.path.isfile(path):
        return None, False
    try:
        with open(path, "rb") as f:
            return tomllib.load(f), False
    except (OSError, tomllib.TOMLDecodeError) as e:
        warn(f"Could not parse {path}: {e}")
        return None, True


class ProjectSnapshot:
    """Everything the evaluators need to know about one project."""

    def __init__(self, root, config, source_files, manifest=None, manifest_error=False):
        self.root = root
        self.config = config
        self.source_files = list(source_files)
        self.manifest = manifest
        self.manifest_error = manifest_error

    @classmethod
    def load(cls, project_path, config=None):
        """Resolve the project root and read everything once."""
        get = config.get if config is not None else DEFAULT_CONFIG.get
        root = resolve_project_root(
            project_path,
            get("workspace_markers"),
            search_parents=bool(get("search_parents", False)),
            subdirs=get("scan_dirs"),
        )
        extractor = TextMetricExtractor(config)
        classifier = FileClassifier(config.to_dict() if config is not None else None)
        source_files = []
        for path in FileScanner(config).scan(root):
            source = load_source_file(path, root, extractor, classifier)
            if source is not None:
                source_files.append(source)
        manifest, manifest_error = load_manifest(root)
        return cls(root, config, source_files, manifest, manifest_error)

    # -------------------------------------------------------------------------
    # Filesystem facts
    # -------------------------------------------------------------------------

    def path(self, *parts):
        return os.path.join(self.root, *parts)

    def has_file(self, *parts):
        return os.path.isfile(self.path(*parts))

    def has_dir(self, *parts):
        return os.path.isdir(self.path(*parts))

    def dir_contains(self, directory, extension):
        """True if directory (recursively) holds a file with the given extension."""
        top = self.path(directory)
        if not os.path.isdir(top):
            return False
        for _dirpath, _dirs, files in os.walk(top):
            if any(f.endswith(extension) for f in files):
                return True
        return False

    @property
    def has_manifest(self):
        return self.has_file(MANIFEST_FILE)

    @property
    def has_lockfile(self):
        return self.has_file(LOCKFILE)

    @property
    def has_git(self):
        return os.path.exists(self.path(".git"))

    @property
    def has_ci_config(self):
        return self.has_dir(".github", "workflows") or self.has_file(".gitlab-ci.yml")

    @property
    def has_pre_commit_hook(self):
        return self.has_file(".git", "hooks", "pre-commit") or self.has_file(".pre-commit-config.yaml")

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    @cached_property
    def makefile_text(self):
        return read_optional_text(self.root, MAKEFILE_NAMES)

    @cached_property
    def make_targets(self):
        return parse_make_targets(self.makefile_text)

    @cached_property
    def agents_text(self):
        return read_optional_text(self.root, (AGENTS_FILE,))

    @cached_property
    def readme_text(self):
        return read_optional_text(self.root, README_NAMES)

    @property
    def has_makefile(self):
        return self.makefile_text is not None

    # -------------------------------------------------------------------------
    # Manifest
    # -------------------------------------------------------------------------

    @property
    def deps(self):
        return dict((self.manifest or {}).get("deps", {}) or {})

    @property
    def compat(self):
        return dict((self.manifest or {}).get("compat", {}) or {})

    def manifest_field_ratio(self, fields=MANIFEST_METADATA_FIELDS):
        if not self.manifest:
            return 0.0
        return sum(1 for name in fields if self.manifest.get(name)) / len(fields)

    @property
    def project_name(self):
        name = (self.manifest or {}).get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
        return os.path.basename(os.path.normpath(self.root))

    # -------------------------------------------------------------------------
    # Source files
    # -------------------------------------------------------------------------

    def files_in(self, category):
        return [f for f in self.source_files if f.has_category(category)]

    @property
    def total_lines(self):
        return sum(f.metrics.line_count for f in self.source_files)

    @cached_property
    def local_modules(self):
        """Names of modules defined by the project itself."""
        names = {self.project_name}
        for source in self.source_files:
            names.update(ImportParser.parse_modules(source.content))
        return names

    @cached_property
    def imported_packages(self):
        """External packages referenced by using/import anywhere in the project."""
        packages = set()
        for source in self.source_files:
            packages.update(ImportParser.parse_imports(source.content))
        return sorted(packages - self.local_modules)

    @cached_property
    def include_graph(self):
        return IncludeGraph.from_source_files(self.files_in("source"))

    @cached_property
    def test_file_names(self):
        """Base names of every file under test/ (any extension)."""
        names = set()
        top = self.path("test")
        if os.path.isdir(top):
            for _dirpath, _dirs, files in os.walk(top):
                names.update(files)
        return names
