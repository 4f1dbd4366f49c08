# src/forkdiff/core/report.py
from typing import List, Optional

from forkdiff.core.patches import PatchIndex
from forkdiff.core.tree import STATUS_LABELS, generate_change_tree
from forkdiff.definition import Page, Project
from forkdiff.models import FileChange, ResolvedSection


def _fence(text: str) -> str:
    """A backtick fence longer than any backtick run inside text."""
    fence = "```"
    while fence in text:
        fence += "`"
    return fence


def _heading(level: int, title: str) -> str:
    return f"{'#' * level} {title}"


def _project_line(label: str, project: Optional[Project]) -> Optional[str]:
    if project is None:
        return None
    name = project.name or label
    text = f"[{name}]({project.url})" if project.url else name
    if project.ref:
        text += f" `{project.ref}`"
    return f"- **{label}**: {text}"


class ReportAssembler:
    """Renders resolved sections and the unclaimed remainder as Markdown."""

    def __init__(self, page: Page, index: PatchIndex, include_remaining_diffs: bool = True):
        self.page = page
        self.index = index
        self.include_remaining_diffs = include_remaining_diffs
        self.lines: List[str] = []

    def _emit(self, *lines: str):
        self.lines.extend(lines)

    def _render_patch(self, path: str, change: FileChange):
        label = STATUS_LABELS.get(change.status, "changed")
        if change.status in "RC" and change.old_path and change.old_path != path:
            label += f" from `{change.old_path}`"
        self._emit(f"**`{path}`** ({label})", "")

        text = change.hunks if change.hunks.endswith("\n") else change.hunks + "\n"
        fence = _fence(text)
        self._emit(f"{fence}diff", text.rstrip("\n"), fence, "")

    def _render_section(self, section: ResolvedSection):
        # Page title is the level-1 heading; the root (depth 0) shares it
        if section.depth > 0:
            self._emit(_heading(section.depth + 1, section.title), "")
        if section.description.strip():
            self._emit(section.description.strip(), "")
        for path, change in section.claimed:
            self._render_patch(path, change)
        for child in section.children:
            self._render_section(child)

    def _render_remaining(self, remaining: List[str], ignored: List[str]):
        self._emit(_heading(2, "Other changes"), "")
        if not remaining:
            if ignored:
                self._emit(
                    f"Every changed file is covered by a section above, "
                    f"except {len(ignored)} ignored file(s) listed below.",
                    "",
                )
            else:
                self._emit("Every changed file is covered by a section above.", "")
            return

        self._emit(f"{len(remaining)} changed file(s) are not covered by any section.", "")
        statuses = {path: self.index.lookup(path).status for path in remaining}
        tree_str = generate_change_tree(statuses, ".")
        self._emit("```text", tree_str.rstrip("\n"), "```", "")

        if self.include_remaining_diffs:
            for path in remaining:
                self._render_patch(path, self.index.lookup(path))

    def _render_ignored(self, ignored: List[str]):
        if not ignored:
            return
        self._emit(_heading(2, "Ignored changes"), "")
        self._emit(*(f"- `{path}`" for path in ignored))
        self._emit("")

    def render(self, root: ResolvedSection, remaining: List[str], ignored: List[str]) -> str:
        self.lines = []
        self._emit(_heading(1, self.page.title), "")

        projects = [
            line for line in (
                _project_line("Base", self.page.base),
                _project_line("Fork", self.page.fork),
            ) if line
        ]
        if projects:
            self._emit(*projects)
            self._emit("")

        self._render_section(root)
        self._render_remaining(remaining, ignored)
        self._render_ignored(ignored)

        if self.page.footer.strip():
            self._emit("---", "", self.page.footer.strip(), "")
        return "\n".join(self.lines).rstrip("\n") + "\n"
