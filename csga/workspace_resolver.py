"""
workspace_resolver.py

This module provides the WorkspaceResolver class for identifying the root of a
Julia project (the directory holding Project.toml) and a small helper used by
every evaluator to turn a user-supplied path into that root.
"""

import os
from typing import Optional, List

from .config import DEFAULT_CONFIG
from .errors import ProjectNotFoundError


class WorkspaceResolver:
    """
    Identifies the project root by searching upwards for marker files.
    """

    def __init__(self, markers: Optional[List[str]] = None):
        """
        Args:
            markers (Optional[List[str]]): File names that indicate a project root
                                           (e.g. ['Project.toml']). Defaults to the
                                           configured workspace markers.
        """
        self.project_root: Optional[str] = None
        self.markers = markers if markers is not None else DEFAULT_CONFIG["workspace_markers"]

    def has_marker(self, directory: str) -> bool:
        return any(os.path.exists(os.path.join(directory, marker)) for marker in self.markers)

    def find_project_root(self, start_path: str) -> Optional[str]:
        """
        Traverses up the directory tree from `start_path` to find the project root.

        Returns:
            Optional[str]: The absolute path to the project root if found, otherwise None.
        """
        current_path = os.path.abspath(start_path)
        while True:
            if self.has_marker(current_path):
                self.project_root = current_path
                return self.project_root
            parent_path = os.path.dirname(current_path)
            if parent_path == current_path:  # Reached the filesystem root
                break
            current_path = parent_path
        self.project_root = None
        return None

    def get_relative_path(self, file_path: str) -> Optional[str]:
        """
        Returns the '/'-separated path of a file relative to the project root,
        or None if the root is unknown or the file lies outside it.
        """
        if not self.project_root:
            return None
        abs_file_path = os.path.abspath(file_path)
        if os.path.commonpath([abs_file_path, self.project_root]) != self.project_root:
            return None
        return os.path.relpath(abs_file_path, self.project_root).replace(os.sep, "/")


def resolve_project_root(path, markers=None, search_parents=False, subdirs=None) -> str:
    """
    Turn a user-supplied path into the absolute project root.

    A file path resolves to its directory. A directory holding a marker is
    the root. A directory inside one of the project's standard subdirectories
    (subdirs, e.g. 'test' or 'src/inner') resolves to the enclosing marked
    root. With search_parents set, any marked ancestor is used.

    Raises:
        ProjectNotFoundError: if the path does not exist.
    """
    path = os.path.abspath(str(path))
    if os.path.isfile(path):
        path = os.path.dirname(path)
    if not os.path.isdir(path):
        raise ProjectNotFoundError(f"Project directory not found: {path}")

    resolver = WorkspaceResolver(markers)
    if resolver.has_marker(path):
        return path
    found = resolver.find_project_root(path)
    if not found:
        return path
    if search_parents:
        return found
    subdirs = subdirs if subdirs is not None else DEFAULT_CONFIG["scan_dirs"]
    first_component = resolver.get_relative_path(path).split("/")[0]
    if first_component in subdirs:
        return found
    return path
