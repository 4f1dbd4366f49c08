# src/forkdiff/cli.py
import sys
import argparse
import re
from pathlib import Path
from typing import List, Set

# Module imports
from forkdiff.config import DEFAULT_BASE_REF, DEFAULT_FORK_FILE, DEFAULT_TARGET_REF, TOP_PATCHES
from forkdiff.core.git import GitRepo
from forkdiff.core.ignore import load_ignore_spec
from forkdiff.core.patches import CoverageTracker, PatchIndex
from forkdiff.core.report import ReportAssembler
from forkdiff.core.sections import SectionResolver
from forkdiff.definition import load_page
from forkdiff.errors import ForkDiffError
from forkdiff.utils.tokenizer import Tokenizer


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Generate a Markdown overview of how a fork diverges from its base branch."
    )
    parser.add_argument("--repo", type=str, default=".", help="Path to local git repository")
    parser.add_argument("--base", type=str, default=DEFAULT_BASE_REF, help="Base reference to diff against")
    parser.add_argument("--target", type=str, default=DEFAULT_TARGET_REF, help="Target reference to retrieve diff for")
    parser.add_argument("--fork", type=str, default=DEFAULT_FORK_FILE, help="Fork page definition (YAML)")
    parser.add_argument(
        "-o", "--out",
        type=str,
        default=None,
        help="Output filename (default: {page_title}_forkdiff.md)"
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Match globs against full file paths instead of top-level entry names"
    )
    parser.add_argument("--no-renames", action="store_true", help="Disable git rename detection")
    parser.add_argument(
        "--no-remaining-diffs",
        action="store_true",
        help="List files not covered by any section without their diffs"
    )
    return parser


def get_default_output_name(page_title: str) -> str:
    """Generates a filename based on the page title."""
    safe_name = re.sub(r"[^\w.-]+", "_", page_title.strip()).strip("_")

    if not safe_name:
        safe_name = "fork"

    return f"{safe_name}_forkdiff.md"


def print_summary(index: PatchIndex, remaining: List[str], ignored: List[str]):
    remaining_set: Set[str] = set(remaining)
    ignored_set: Set[str] = set(ignored)
    claimed = len(index) - len(remaining) - len(ignored)

    sized = sorted(
        ((Tokenizer.count(index.lookup(path).hunks), path) for path in index.keys()),
        key=lambda x: (-x[0], x[1]),
    )

    print(f"\n--- Top {TOP_PATCHES} Largest Patches (Est. Tokens) ---")
    print(f"{'Rank':<5} | {'Tokens':<10} | {'Covered':<8} | {'File Path'}")
    print("-" * 60)
    for i, (tokens, path) in enumerate(sized[:TOP_PATCHES]):
        if path in ignored_set:
            covered = "ignored"
        elif path in remaining_set:
            covered = "no"
        else:
            covered = "yes"
        print(f"{i+1:<5} | {tokens:<10} | {covered:<8} | {path}")
    print("-" * 60)
    print(f"Changed files: {len(index)}")
    print(f"Covered:       {claimed}")
    print(f"Ignored:       {len(ignored)}")
    print(f"Not covered:   {len(remaining)}")
    print("-" * 60)


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        repo_path = Path(args.repo).resolve()
        if not repo_path.is_dir():
            print(f"Error: Invalid directory '{repo_path}'", file=sys.stderr)
            sys.exit(1)

        page = load_page(Path(args.fork))

        if args.out:
            output_file = Path(args.out)
        else:
            output_file = Path(get_default_output_name(page.title))

        print(f"--- forkdiff ---")
        print(f"Repo:     {repo_path}")
        print(f"Diff:     {args.base} -> {args.target}")
        print(f"Output:   {output_file}")
        print(f"Mode:     {'Recursive path globs' if args.recursive else 'Top-level entry globs'}")

        # 2. Snapshots & Patches
        repo = GitRepo(repo_path)
        repo.check()
        base = repo.resolve(args.base)
        target = repo.resolve(args.target)

        changes = repo.compute_diff(base, target, find_renames=not args.no_renames)
        index = PatchIndex.build(changes)
        tracker = CoverageTracker(index.keys())

        # 3. Sections
        entries = repo.list_entries(target, recursive=args.recursive)
        resolver = SectionResolver(entries, index, tracker, recursive=args.recursive)
        root = resolver.resolve_root(page.definition)

        # 4. Ignore Rules (Using PathSpec)
        ignore_spec = load_ignore_spec(page.ignore)
        ignored = tracker.discard_matching(ignore_spec)
        remaining = tracker.remaining()

        # 5. Review & Stats
        print_summary(index, remaining, ignored)

        # 6. Output Generation
        assembler = ReportAssembler(page, index, include_remaining_diffs=not args.no_remaining_diffs)
        report = assembler.render(root, remaining, ignored)

        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(report)
            print(f"\nSuccess! Fork diff written to: {output_file}")

        except IOError as e:
            print(f"Error writing file: {e}", file=sys.stderr)
            sys.exit(1)

    except ForkDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
