# tests/conftest.py
import os
import shutil
import subprocess

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git(repo, *args):
    subprocess.run(
        [
            "git", "-C", str(repo),
            "-c", "user.name=forkdiff", "-c", "user.email=forkdiff@example.com",
            "-c", "commit.gpgsign=false", "-c", "init.defaultBranch=master",
            *args,
        ],
        check=True,
        capture_output=True,
    )


@pytest.fixture
def fork_repo(tmp_path):
    """
    A repository with a 'master' base and a 'fork' branch that:
    1. Modifies a.go, c.md and core/vm/evm.go
    2. Deletes old.txt
    3. Adds new.txt
    4. Renames moved.go to renamed.go
    b.go is left untouched.
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")

    (repo / "a.go").write_text("package a\n\nfunc A() int { return 1 }\n", encoding="utf-8")
    (repo / "b.go").write_text("package b\n", encoding="utf-8")
    (repo / "c.md").write_text("# Readme\n", encoding="utf-8")
    (repo / "old.txt").write_text("obsolete\n", encoding="utf-8")
    moved = "".join(f"line {i}\n" for i in range(20))
    (repo / "moved.go").write_text(moved, encoding="utf-8")
    (repo / "core" / "vm").mkdir(parents=True)
    (repo / "core" / "vm" / "evm.go").write_text("package vm\n", encoding="utf-8")
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "base")

    git(repo, "checkout", "-q", "-b", "fork")
    (repo / "a.go").write_text("package a\n\nfunc A() int { return 2 }\n", encoding="utf-8")
    (repo / "c.md").write_text("# Readme\n\nFork notes.\n", encoding="utf-8")
    (repo / "core" / "vm" / "evm.go").write_text("package vm\n\n// fork\n", encoding="utf-8")
    (repo / "old.txt").unlink()
    (repo / "new.txt").write_text("brand new\n", encoding="utf-8")
    (repo / "moved.go").rename(repo / "renamed.go")
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "fork")

    return repo


@pytest.fixture
def typechange_repo(tmp_path):
    """
    A repository whose 'fork' branch:
    1. Turns the regular file 'link' into a symlink
    2. Rewrites the binary file blob.bin
    3. Only makes run.sh executable
    """
    if not hasattr(os, "symlink"):
        pytest.skip("symlinks not supported")

    repo = tmp_path / "typechange"
    repo.mkdir()
    git(repo, "init", "-q")

    (repo / "link").write_text("plain file\n", encoding="utf-8")
    (repo / "blob.bin").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    (repo / "run.sh").write_text("echo hi\n", encoding="utf-8")
    os.chmod(repo / "run.sh", 0o644)
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "base")

    git(repo, "checkout", "-q", "-b", "fork")
    (repo / "link").unlink()
    os.symlink("run.sh", repo / "link")
    (repo / "blob.bin").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x01")
    os.chmod(repo / "run.sh", 0o755)
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "fork")

    return repo
