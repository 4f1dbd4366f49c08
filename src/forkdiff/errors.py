# src/forkdiff/errors.py


class ForkDiffError(Exception):
    """Base class for errors that abort a forkdiff run."""


class GitError(ForkDiffError):
    pass


class SnapshotUnresolvable(ForkDiffError):
    def __init__(self, ref: str, detail: str = ""):
        self.ref = ref
        message = f"Cannot resolve '{ref}' to a git tree"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InvalidGlobPattern(ForkDiffError):
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")


class SchemaViolation(ForkDiffError):
    pass
