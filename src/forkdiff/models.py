# src/forkdiff/models.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class FileChange:
    """Immutable file-level diff unit between two snapshots."""
    old_path: Optional[str]
    new_path: Optional[str]
    hunks: str
    status: str = "M"
    binary: bool = False

    def __post_init__(self):
        if self.old_path is None and self.new_path is None:
            raise ValueError("FileChange needs at least one of old_path/new_path")

    @property
    def canonical_path(self) -> str:
        # Prefer the path that exists in the newer snapshot
        return self.new_path if self.new_path is not None else self.old_path


@dataclass(frozen=True)
class Snapshot:
    """A reference name resolved to a git tree id."""
    ref: str
    tree: str


@dataclass(frozen=True)
class Entry:
    name: str
    is_tree: bool = False


@dataclass
class ResolvedSection:
    title: str
    description: str
    depth: int
    claimed: List[Tuple[str, FileChange]] = field(default_factory=list)
    children: List["ResolvedSection"] = field(default_factory=list)

    @property
    def claimed_paths(self) -> List[str]:
        return [path for path, _ in self.claimed]

    def walk(self):
        """Yields this section and all its descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()
