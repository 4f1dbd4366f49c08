# src/forkdiff/core/sections.py
from typing import Sequence

from forkdiff.core.glob import expand_glob
from forkdiff.core.patches import CoverageTracker, PatchIndex
from forkdiff.definition import ForkDefinition
from forkdiff.models import Entry, ResolvedSection


class SectionResolver:
    """
    Walks a section tree depth-first, claiming the patches each section's
    globs select.

    Globs are matched against entry names exactly as the listing enumerates
    them. With the default top-level listing that is one directory depth;
    pass a recursive listing (and recursive=True) to match full paths.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        index: PatchIndex,
        tracker: CoverageTracker,
        recursive: bool = False,
    ):
        self.names = [e.name for e in entries]
        self.index = index
        self.tracker = tracker
        self.recursive = recursive

    def resolve(self, node: ForkDefinition, depth: int) -> ResolvedSection:
        section = ResolvedSection(title=node.title, description=node.description, depth=depth)

        # Expand every glob before claiming so a bad pattern claims nothing
        expanded = [expand_glob(pattern, self.names, self.recursive) for pattern in node.globs]

        seen = set()
        for matches in expanded:
            for path in matches:
                if path in seen:
                    continue
                change = self.index.lookup(path)
                if change is None:
                    # Matched an unchanged entry, nothing to show
                    continue
                seen.add(path)
                self.tracker.claim(path)
                section.claimed.append((path, change))

        for child in node.sub:
            section.children.append(self.resolve(child, depth + 1))
        return section

    def resolve_root(self, root: ForkDefinition) -> ResolvedSection:
        """The root sits at depth 0 so its declared children start at depth 1."""
        return self.resolve(root, 0)
