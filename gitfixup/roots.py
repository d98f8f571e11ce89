"""Resolution of the VCS roots a fixup commit may touch."""
import os
from pathlib import Path
from typing import Iterable, List, Optional

from .interfaces import Project


def canonical_path(path) -> Path:
    """Absolute, normalised form of a root. Does not touch the file system."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def filter_descending_paths(paths: Iterable[Path]) -> List[Path]:
    """Drop duplicates and every path nested inside another path of the set.

    Survivors keep their original order, so applying the filter twice gives
    the same result as applying it once.
    """
    candidates = [canonical_path(p) for p in paths]
    unique = list(dict.fromkeys(candidates))
    return [
        path for path in unique
        if not any(other != path and other in path.parents for other in unique)
    ]


class RootResolver:
    """Computes the roots of every backend that is able to commit."""

    def resolve(self, project: Optional[Project]) -> List[Path]:
        if project is None or project.is_disposed:
            return []

        roots = []
        for backend in project.vcs_backends():
            if not backend.is_active or not backend.has_checkin_capability:
                continue
            roots.extend(canonical_path(root) for root in backend.roots())
        return roots
