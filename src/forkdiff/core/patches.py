# src/forkdiff/core/patches.py
import sys
from typing import Dict, Iterable, List, Optional, Set

import pathspec

from forkdiff.models import FileChange


class PatchIndex:
    """Read-only mapping from canonical path to its FileChange."""

    def __init__(self, patches: Dict[str, FileChange]):
        self._patches = dict(patches)

    @classmethod
    def build(cls, changes: Iterable[FileChange]) -> "PatchIndex":
        patches: Dict[str, FileChange] = {}
        for change in changes:
            path = change.canonical_path
            if path in patches:
                # A well-formed diff never produces this; later change wins
                print(
                    f"  > [Warning] Duplicate patch for '{path}' "
                    f"({patches[path].status} and {change.status}), keeping the later one",
                    file=sys.stderr,
                )
            patches[path] = change
        return cls(patches)

    def lookup(self, path: str) -> Optional[FileChange]:
        return self._patches.get(path)

    def keys(self) -> Set[str]:
        return set(self._patches)

    def __len__(self) -> int:
        return len(self._patches)

    def __contains__(self, path: str) -> bool:
        return path in self._patches


class CoverageTracker:
    """
    The set of changed paths no section has claimed yet.
    Only ever shrinks: claim() and discard_matching() remove, nothing adds.
    """

    def __init__(self, all_paths: Iterable[str]):
        self._remaining: Set[str] = set(all_paths)

    def claim(self, path: str) -> None:
        # Overlapping sections and unchanged files make misses normal
        self._remaining.discard(path)

    def is_claimed(self, path: str) -> bool:
        return path not in self._remaining

    def discard_matching(self, spec: pathspec.PathSpec) -> List[str]:
        """Removes the remaining paths matched by spec and returns them sorted."""
        matched = sorted(p for p in self._remaining if spec.match_file(p))
        self._remaining.difference_update(matched)
        return matched

    def remaining(self) -> List[str]:
        return sorted(self._remaining)

    def __len__(self) -> int:
        return len(self._remaining)
