# src/forkdiff/core/glob.py
import re
from functools import lru_cache
from typing import Iterable, List

from forkdiff.errors import InvalidGlobPattern


def _translate_class(pattern: str, start: int) -> tuple:
    """
    Translates the character class opening at pattern[start] == '['.
    Returns (regex, index just past the closing ']').
    """
    i = start + 1
    n = len(pattern)
    negate = False
    if i < n and pattern[i] in "^!":
        negate = True
        i += 1

    items: List[str] = []
    while True:
        if i >= n:
            raise InvalidGlobPattern(pattern, "unterminated character class")
        c = pattern[i]
        if c == "]":
            break

        # A single, possibly escaped, class character
        if c == "\\":
            if i + 1 >= n:
                raise InvalidGlobPattern(pattern, "trailing backslash")
            lo = pattern[i + 1]
            i += 2
        else:
            lo = c
            i += 1

        if i + 1 < n and pattern[i] == "-" and pattern[i + 1] != "]":
            hi = pattern[i + 1]
            i += 2
            if hi == "\\":
                if i >= n:
                    raise InvalidGlobPattern(pattern, "trailing backslash")
                hi = pattern[i]
                i += 1
            if hi < lo:
                raise InvalidGlobPattern(pattern, f"reversed range '{lo}-{hi}'")
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
        else:
            items.append(re.escape(lo))

    if not items:
        raise InvalidGlobPattern(pattern, "empty character class")

    body = "".join(items)
    if negate:
        return f"[^/{body}]", i + 1
    return f"[{body}]", i + 1


@lru_cache(maxsize=None)
def compile_glob(pattern: str, recursive: bool = False) -> "re.Pattern":
    """
    Compiles a shell-style glob into a regex matched against a whole name.

    '*' and '?' never cross a '/'. With recursive=True, '**' matches any
    number of directories, so 'core/**' reaches every file below core/.
    Malformed patterns raise InvalidGlobPattern instead of matching nothing.
    """
    out: List[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if recursive and pattern.startswith("**", i):
                i += 2
                if pattern.startswith("/", i):
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            regex, i = _translate_class(pattern, i)
            out.append(regex)
        elif c == "\\":
            if i + 1 >= n:
                raise InvalidGlobPattern(pattern, "trailing backslash")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(c))
            i += 1
    return re.compile("".join(out), re.DOTALL)


def glob_match(pattern: str, name: str, recursive: bool = False) -> bool:
    return compile_glob(pattern, recursive).fullmatch(name) is not None


def expand_glob(pattern: str, names: Iterable[str], recursive: bool = False) -> List[str]:
    """Returns the names matching pattern, in the order they are given."""
    regex = compile_glob(pattern, recursive)
    return [name for name in names if regex.fullmatch(name)]
