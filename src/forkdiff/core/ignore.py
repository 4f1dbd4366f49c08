# src/forkdiff/core/ignore.py
from typing import Iterable

import pathspec

from forkdiff.errors import SchemaViolation


def load_ignore_spec(patterns: Iterable[str]) -> pathspec.PathSpec:
    """
    Builds a PathSpec from the page's `ignore` list (gitignore syntax).
    Only what the page names is ignored; everything else stays visible.
    """
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", list(patterns))
    except ValueError as e:
        raise SchemaViolation(f"Invalid ignore pattern: {e}") from e
