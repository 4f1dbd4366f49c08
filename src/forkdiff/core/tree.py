# src/forkdiff/core/tree.py
from pathlib import PurePosixPath
from typing import Dict, Mapping

STATUS_LABELS = {
    "A": "added",
    "D": "deleted",
    "M": "modified",
    "R": "renamed",
    "C": "copied",
    "T": "type changed",
}


def generate_change_tree(statuses: Mapping[str, str], root_name: str) -> str:
    """
    Renders changed paths as a directory tree, each file labelled with its
    change kind. `statuses` maps canonical path to git status letter.
    """
    tree_dict: Dict = {}
    for path in sorted(statuses):
        current_level = tree_dict
        for part in PurePosixPath(path).parts:
            current_level = current_level.setdefault(part, {})

    lines = [f"{root_name}/"]

    def _generate_lines_recursive(subtree: Dict, prefix: str, parent: str):
        entries = sorted(subtree.items())
        for i, (name, content) in enumerate(entries):
            is_last = (i == len(entries) - 1)
            connector = "└── " if is_last else "├── "
            path = f"{parent}{name}"

            if content:
                lines.append(f"{prefix}{connector}{name}/")
                new_prefix = prefix + ("    " if is_last else "│   ")
                _generate_lines_recursive(content, new_prefix, path + "/")
            else:
                label = STATUS_LABELS.get(statuses.get(path, ""), "changed")
                lines.append(f"{prefix}{connector}{name} ({label})")

    _generate_lines_recursive(tree_dict, "", "")
    return "\n".join(lines) + "\n"
