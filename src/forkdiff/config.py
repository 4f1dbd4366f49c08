# src/forkdiff/config.py

DEFAULT_FORK_FILE = "fork.yaml"
DEFAULT_BASE_REF = "master"
DEFAULT_TARGET_REF = "HEAD"

# Lines of context around each hunk in rendered diffs
DIFF_CONTEXT_LINES = 3

TOKEN_ENCODING = "cl100k_base"
FALLBACK_TOKEN_ENCODING = "p50k_base"

# Rows shown in the "largest patches" summary table
TOP_PATCHES = 10
