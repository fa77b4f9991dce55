"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Release Notes Constants
# -----------------------

CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(?P<type>feat|feature|fix|docs|style|refactor|test|chore)(?:\((?P<scope>[^)]*)\))?!?:\s*(?P<description>\S.*)$"
)
"""Pattern to match conventional commit summaries (e.g., feat(api): add endpoint)."""

RELEASE_NOTES_HEADER = "# What's Changed"
"""Top-level heading of every generated release notes document."""

FALLBACK_RELEASE_NOTES_TEMPLATE = "Release notes for {sha}"
"""Body used for a release when its notes could not be generated. Use .format(sha=...)."""

UNKNOWN_AUTHOR = "unknown"
"""Author shown when a commit has neither a linked GitHub user nor a git author name."""

# Tag Constants
# -------------

DELETE_ALL_TAGS = "all"
"""Tag name that requests deletion of every tag in a repository."""

# Branch Synchronization Constants
# --------------------------------

DEFAULT_REMOTE_NAME = "upstream"
"""Name of the remote (re)configured in each scratch clone."""

ORIGIN_REMOTE_NAME = "origin"
"""Remote that synchronized branches are pushed to."""

SYNC_COMMIT_MESSAGE_TEMPLATE = "chore: update {upstream_branch} to {local_branch}"
"""Commit message recorded after merging. Use .format(upstream_branch=..., local_branch=...)."""

CLONE_URL_TEMPLATE = "https://{token}@{host}/{organization}/{repository}.git"
"""Clone URL with the access token embedded as credentials."""
