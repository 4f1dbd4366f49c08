# src/forkdiff/core/git.py
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from forkdiff.config import DIFF_CONTEXT_LINES
from forkdiff.errors import GitError, SnapshotUnresolvable
from forkdiff.models import Entry, FileChange, Snapshot

DIFF_HEADER = "diff --git "


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def parse_raw_diff(output: str) -> List[Tuple[str, Optional[str], Optional[str]]]:
    """
    Parses `git diff --raw -z` output into (status, old_path, new_path).

    Records look like ':100644 100644 <sha> <sha> M\\0path\\0', with a second
    path for renames and copies ('R087\\0old\\0new\\0').
    """
    fields = output.split("\0")
    records = []
    i = 0
    while i < len(fields):
        meta = fields[i]
        if not meta:
            i += 1
            continue
        if not meta.startswith(":"):
            raise GitError(f"Unexpected raw diff record: {meta!r}")
        status = meta.split()[-1][0]
        if status in "RC":
            old_path, new_path = fields[i + 1], fields[i + 2]
            i += 3
        else:
            path = fields[i + 1]
            old_path = None if status == "A" else path
            new_path = None if status == "D" else path
            i += 2
        records.append((status, old_path, new_path))
    return records


def split_patch(output: str) -> List[str]:
    """Splits a multi-file unified diff into one text chunk per file."""
    chunks: List[str] = []
    current: List[str] = []
    for line in output.splitlines(keepends=True):
        if line.startswith(DIFF_HEADER) and current:
            chunks.append("".join(current))
            current = []
        current.append(line)
    if current:
        chunks.append("".join(current))
    return chunks


def pair_chunks(records, chunks: List[str]) -> Optional[List[str]]:
    """
    Assigns patch chunks to raw records, in order. Returns None when the
    two outputs disagree on the number of files.

    A typechange (file <-> symlink) is one raw record but two patch chunks,
    a deletion then a creation under the same header; those are joined.
    """
    patches: List[str] = []
    i = 0
    for status, _, _ in records:
        if i >= len(chunks):
            return None
        patch = chunks[i]
        i += 1
        if status == "T" and i < len(chunks) and _header(chunks[i]) == _header(patch):
            patch += chunks[i]
            i += 1
        patches.append(patch)
    if i != len(chunks):
        return None
    return patches


def _header(chunk: str) -> str:
    return chunk.split("\n", 1)[0]


def _is_binary(chunk: str) -> bool:
    for line in chunk.splitlines():
        if line.startswith("Binary files ") or line == "GIT binary patch":
            return True
    return False


class GitRepo:
    """Thin wrapper over the git executable for one repository."""

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path)

    def _run(self, *args: str) -> str:
        cmd = ["git", "-C", str(self.repo_path), *args]
        try:
            completed = subprocess.run(cmd, capture_output=True, check=False)
        except FileNotFoundError as e:
            raise GitError("git executable not found on PATH") from e
        if completed.returncode != 0:
            stderr = _decode(completed.stderr).strip()
            raise GitError(f"'git {' '.join(args)}' failed: {stderr}")
        return _decode(completed.stdout)

    def check(self) -> None:
        try:
            self._run("rev-parse", "--git-dir")
        except GitError as e:
            raise GitError(f"Failed to open git repository '{self.repo_path}': {e}") from e

    def resolve(self, ref: str) -> Snapshot:
        """Dereferences a branch, tag or commit reference to its tree."""
        try:
            tree = self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{tree}}").strip()
        except GitError as e:
            raise SnapshotUnresolvable(ref, str(e)) from e
        if not tree:
            raise SnapshotUnresolvable(ref)
        return Snapshot(ref=ref, tree=tree)

    def list_entries(self, snapshot: Snapshot, recursive: bool = False) -> List[Entry]:
        """
        Lists the entries of a snapshot's tree.
        Top-level names only, or every file path when recursive.
        """
        args = ["ls-tree", "-z"]
        if recursive:
            args.append("-r")
        args.append(snapshot.tree)

        entries = []
        for record in self._run(*args).split("\0"):
            if not record:
                continue
            # '<mode> SP <type> SP <object> TAB <name>'
            meta, name = record.split("\t", 1)
            obj_type = meta.split()[1]
            entries.append(Entry(name=name, is_tree=obj_type == "tree"))
        return entries

    def compute_diff(
        self,
        base: Snapshot,
        target: Snapshot,
        find_renames: bool = True,
        context_lines: int = DIFF_CONTEXT_LINES,
    ) -> List[FileChange]:
        """Every per-file change from base to target. Order is not significant."""
        rename_flag = "-M" if find_renames else "--no-renames"
        common = ["diff", "--no-color", "--no-ext-diff", rename_flag]

        records = parse_raw_diff(self._run(*common, "--raw", "-z", base.tree, target.tree))
        # Prefix each side with its ref so the diff shows which one is upstream
        chunks = split_patch(self._run(
            *common,
            f"-U{context_lines}",
            f"--src-prefix={base.ref}/",
            f"--dst-prefix={target.ref}/",
            base.tree,
            target.tree,
        ))
        patches = pair_chunks(records, chunks)
        if patches is None:
            raise GitError(
                f"Diff between '{base.ref}' and '{target.ref}' listed {len(records)} files "
                f"but produced {len(chunks)} patches"
            )

        return [
            FileChange(
                old_path=old_path,
                new_path=new_path,
                hunks=patch,
                status=status,
                binary=_is_binary(patch),
            )
            for (status, old_path, new_path), patch in zip(records, patches)
        ]
