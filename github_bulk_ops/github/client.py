# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy]


def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHubClient:
    """Returns an authenticated GitHub client using a personal access token.

    One client is built per batch request and shared by every repository
    pipeline of that batch.
    """
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires a GitHub token.")
    # Disable HTTP caching so existence checks always see fresh provider state
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)
