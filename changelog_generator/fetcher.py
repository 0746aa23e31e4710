"""
GitHub data fetching module.

This module handles all GitHub API interactions for the changelog pipeline
(commit ranges and repository tags) using PyGithub.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests
from github import Auth, Github, GithubException

from .config import ChangelogSettings, get_settings
from .errors import UpstreamFetchError
from .models import CommitRecord

# Set up logging
logger = logging.getLogger("changelog-generator.fetcher")

UNKNOWN_AUTHOR = "Unknown"

# PyGithub adds no Accept header of its own to these calls
GITHUB_HEADERS = {"Accept": "application/vnd.github.v3+json"}


def _error_body(exc: GithubException) -> str:
    """Turn the payload of a PyGithub error back into response text."""
    data = exc.data
    if data is None:
        return ""
    if isinstance(data, (dict, list)):
        return json.dumps(data)
    return str(data)


def render_commits(commits: Iterable[CommitRecord]) -> str:
    """
    Render commits as raw material, one line per commit.

    Provider order is kept as-is.

    Args:
        commits: Commits as returned by the fetcher

    Returns:
        Lines of the form "- <message> (Author: <name>)" joined with newlines
    """
    return "\n".join(c.render() for c in commits)


class GitHubFetcher:
    """
    Fetch commit ranges and tags from GitHub using PyGithub.

    One fetcher is built per request, since the access token comes from the
    request. Failures are never retried.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
        settings: Deployment settings; defaults to the process-wide ones.
        client: Pre-built PyGithub client, mainly for tests.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        settings: Optional[ChangelogSettings] = None,
        client: Optional[Github] = None,
    ) -> None:
        self._settings = settings or get_settings()
        if client is not None:
            self._g = client
        else:
            self._g = Github(
                auth=Auth.Token(token) if token else None,
                base_url=self._settings.github_base_url,
                timeout=self._settings.github_timeout,
                user_agent=self._settings.github_user_agent,
                per_page=self._settings.max_commits,
                retry=None,
            )
        logger.debug("GitHub client initialized (authenticated=%s)", bool(token))

    def _get(self, path: str, parameters: Optional[Dict[str, Any]] = None) -> Any:
        """GET a REST path through the PyGithub requester, returning the decoded JSON."""
        _, data = self._g.requester.requestJsonAndCheck(
            "GET", path, parameters=parameters, headers=dict(GITHUB_HEADERS)
        )
        return data

    def fetch_commits(
        self,
        owner: str,
        repo_name: str,
        from_ref: Optional[str] = None,
        to_ref: Optional[str] = None,
    ) -> List[CommitRecord]:
        """
        Fetch a range of commits from a GitHub repository.

        With both refs the compare endpoint is used and its commit list is
        returned (chronological). Otherwise the first page of recent commits
        on the default branch is returned (most recent first).

        Args:
            owner: Repository owner username
            repo_name: Repository name
            from_ref: Base tag or branch of the range
            to_ref: Head tag or branch of the range

        Returns:
            List of CommitRecord objects, in provider order

        Raises:
            UpstreamFetchError: If GitHub answers with an error or cannot be reached
        """
        try:
            if from_ref and to_ref:
                logger.info("Comparing %s...%s on %s/%s", from_ref, to_ref, owner, repo_name)
                data = self._get(f"/repos/{owner}/{repo_name}/compare/{from_ref}...{to_ref}")
                raw_commits = (data.get("commits") or []) if isinstance(data, dict) else []
            else:
                logger.info("Listing recent commits on %s/%s", owner, repo_name)
                data = self._get(
                    f"/repos/{owner}/{repo_name}/commits",
                    parameters={"per_page": self._settings.max_commits},
                )
                raw_commits = data[: self._settings.max_commits] if isinstance(data, list) else []
        except GithubException as e:
            logger.warning(
                "GitHub API error for %s/%s: %s", owner, repo_name, e.status
            )
            raise UpstreamFetchError(e.status, _error_body(e)) from e
        except requests.RequestException as e:
            logger.warning("GitHub request failed for %s/%s: %s", owner, repo_name, e)
            raise UpstreamFetchError(None, str(e)) from e

        result = [self._to_record(c) for c in raw_commits]
        logger.info("Fetched %d commits from %s/%s", len(result), owner, repo_name)
        return result

    def fetch_tags(self, owner: str, repo_name: str) -> List[str]:
        """
        Fetch the tag names of a repository (first page, provider order).

        Raises:
            UpstreamFetchError: If GitHub answers with an error or cannot be reached
        """
        try:
            data = self._get(f"/repos/{owner}/{repo_name}/tags")
        except GithubException as e:
            logger.warning("GitHub API error listing tags of %s/%s: %s", owner, repo_name, e.status)
            raise UpstreamFetchError(e.status, _error_body(e)) from e
        except requests.RequestException as e:
            logger.warning("GitHub request failed for %s/%s: %s", owner, repo_name, e)
            raise UpstreamFetchError(None, str(e)) from e

        names = [t["name"] for t in data] if isinstance(data, list) else []
        logger.info("Fetched %d tags from %s/%s", len(names), owner, repo_name)
        return names

    @staticmethod
    def _to_record(c: Dict[str, Any]) -> CommitRecord:
        git_commit = c.get("commit") or {}
        author = git_commit.get("author") or {}
        name = author.get("name") or UNKNOWN_AUTHOR
        return CommitRecord(message=git_commit.get("message", ""), author=name)
