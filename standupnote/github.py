"""GitHub REST client for listing repositories and collecting a day's commits.

Commit details, pull requests and diffs are fetched concurrently with a
bounded worker pool. A failed detail fetch degrades to a commit without
stats or diff instead of aborting the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Iterable, Optional, Sequence

import requests

from standupnote.dates import get_commit_date_range
from standupnote.models import Commit, CommitDiff, FileChange, PullRequestRef, Repository

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"

DEFAULT_MAX_WORKERS = 8
DEFAULT_MAX_COMMITS = 100
PER_PAGE = 100
MAX_USER_REPOS = 500
MAX_ORG_REPOS = 200


class GitHubError(Exception):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def pull_request_from_payload(payload: dict) -> PullRequestRef:
    """Convert a GitHub pull request payload."""
    return PullRequestRef(
        number=payload["number"],
        title=payload.get("title") or "",
        url=payload.get("html_url") or "",
        state=payload.get("state") or "open",
        merged=bool(payload.get("merged_at")),
        base_branch=(payload.get("base") or {}).get("ref") or "",
        head_branch=(payload.get("head") or {}).get("ref") or "",
    )


def repository_from_payload(payload: dict) -> Repository:
    """Convert a GitHub repository payload."""
    return Repository(
        id=payload["id"],
        name=payload.get("name") or "",
        full_name=payload["full_name"],
        description=payload.get("description"),
        private=bool(payload.get("private")),
        owner=(payload.get("owner") or {}).get("login") or "",
        language=payload.get("language"),
        pushed_at=payload.get("pushed_at"),
        url=payload.get("html_url") or "",
    )


def commit_from_payload(
    payload: dict,
    repo_full_name: str,
    pull_requests: Sequence[dict] = (),
) -> Commit:
    """Convert a GitHub commit payload into a Commit.

    Stats and diff are taken from the payload when it is a detailed
    commit (GET /repos/{repo}/commits/{sha}); list payloads carry neither.

    Args:
        payload: The commit JSON.
        repo_full_name: owner/name of the repository.
        pull_requests: Pull requests associated with the commit; the first one is kept.
    """
    git_commit = payload.get("commit") or {}
    author = git_commit.get("author") or {}
    stats = payload.get("stats") or {}
    files = payload.get("files")

    diff = None
    if files:
        diff = CommitDiff(
            sha=payload["sha"],
            files=[
                FileChange(
                    filename=f["filename"],
                    status=f.get("status") or "modified",
                    additions=f.get("additions"),
                    deletions=f.get("deletions"),
                    patch=f.get("patch"),
                )
                for f in files
            ],
        )

    return Commit(
        sha=payload["sha"],
        message=git_commit.get("message") or "",
        author=author.get("name") or "",
        author_email=author.get("email") or "",
        date=author.get("date") or "",
        url=payload.get("html_url") or "",
        repo_full_name=repo_full_name,
        additions=stats.get("additions"),
        deletions=stats.get("deletions"),
        files_changed=len(files or []),
        pull_request=pull_request_from_payload(pull_requests[0]) if pull_requests else None,
        diff=diff,
    )


class GitHubClient:
    """Minimal GitHub REST API client."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_BASE,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        })

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """GET a path and return the decoded JSON.

        Raises:
            GitHubError: On connection failure, a non-2xx response or a non-JSON body.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub request to {path} failed: {e}") from e

        if not response.ok:
            raise GitHubError(
                f"GitHub request to {path} failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GitHubError(f"GitHub returned invalid JSON for {path}: {e}") from e

    def fetch_user_email(self) -> Optional[str]:
        """Get the authenticated user's primary email, or None."""
        try:
            emails = self._get("/user/emails")
        except GitHubError as e:
            logger.warning("Could not fetch user email: %s", e)
            return None

        for entry in emails:
            if entry.get("primary"):
                return entry.get("email")
        return None

    def _get_pages(self, path: str, params: dict, limit: int) -> list[dict]:
        """GET every page of a list endpoint, stopping once limit items are collected."""
        items: list[dict] = []
        page = 1
        while len(items) < limit:
            data = self._get(path, params={**params, "per_page": PER_PAGE, "page": page})
            if not data:
                break
            items.extend(data)
            if len(data) < PER_PAGE:
                break
            page += 1
        return items

    def fetch_user_orgs(self) -> list[str]:
        """List the logins of the user's organizations; [] on failure."""
        try:
            orgs = self._get("/user/orgs", params={"per_page": PER_PAGE})
        except GitHubError as e:
            logger.warning("Could not fetch organizations: %s", e)
            return []
        return [org["login"] for org in orgs if org.get("login")]

    def fetch_org_repos(self, org: str) -> list[dict]:
        """List an organization's repositories; [] if they cannot be listed."""
        try:
            return self._get_pages(
                f"/orgs/{org}/repos",
                {"sort": "pushed", "direction": "desc", "type": "all"},
                MAX_ORG_REPOS,
            )
        except GitHubError as e:
            logger.warning("Could not fetch repositories for org %s: %s", org, e)
            return []

    def fetch_user_repos(self) -> list[Repository]:
        """List the repositories the user can read, most recently pushed first.

        Combines /user/repos (owned, collaborator and organization member)
        with the repositories of each of the user's organizations.

        Raises:
            GitHubError: If /user/repos cannot be listed.
        """
        payloads = self._get_pages(
            "/user/repos",
            {
                "sort": "pushed",
                "direction": "desc",
                "affiliation": "owner,collaborator,organization_member",
                "visibility": "all",
            },
            MAX_USER_REPOS,
        )

        repos: dict[int, Repository] = {}
        for payload in payloads:
            repo = repository_from_payload(payload)
            repos[repo.id] = repo

        for org in self.fetch_user_orgs():
            for payload in self.fetch_org_repos(org):
                repos.setdefault(payload["id"], repository_from_payload(payload))

        return sorted(repos.values(), key=lambda r: r.pushed_at or "", reverse=True)

    def fetch_repo_commits(
        self,
        repo_full_name: str,
        since: Optional[str] = None,
        until: Optional[str] = None,
        author: Optional[str] = None,
    ) -> list[dict]:
        """List commits of a repository in a time range.

        Returns:
            Commit payloads; [] if the repository is missing or inaccessible.

        Raises:
            GitHubError: For other failures.
        """
        params = {"per_page": PER_PAGE}
        if since:
            params["since"] = since
        if until:
            params["until"] = until
        if author:
            params["author"] = author

        try:
            return self._get(f"/repos/{repo_full_name}/commits", params=params)
        except GitHubError as e:
            if e.status_code == 404:
                return []
            raise

    def fetch_commit_details(self, repo_full_name: str, sha: str) -> dict:
        """Get a commit with stats and per-file patches."""
        return self._get(f"/repos/{repo_full_name}/commits/{sha}")

    def fetch_commit_pull_requests(self, repo_full_name: str, sha: str) -> list[dict]:
        """List pull requests associated with a commit; [] on failure."""
        try:
            return self._get(f"/repos/{repo_full_name}/commits/{sha}/pulls")
        except GitHubError as e:
            logger.debug("No pull requests for %s@%s: %s", repo_full_name, sha[:7], e)
            return []

    def _enrich_commit(self, repo_full_name: str, payload: dict) -> Commit:
        """Fetch details and pull requests; fall back to the list payload on failure."""
        sha = payload["sha"]
        try:
            details = self.fetch_commit_details(repo_full_name, sha)
        except GitHubError as e:
            logger.warning("Could not fetch details for %s@%s: %s", repo_full_name, sha[:7], e)
            return commit_from_payload(payload, repo_full_name)

        pull_requests = self.fetch_commit_pull_requests(repo_full_name, sha)
        try:
            return commit_from_payload(details, repo_full_name, pull_requests)
        except (KeyError, TypeError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            logger.warning("Malformed details for %s@%s: %s", repo_full_name, sha[:7], e)
            return commit_from_payload(payload, repo_full_name)

    def fetch_commits_for_repos(
        self,
        repos: Iterable[str],
        user_email: Optional[str] = None,
        target_date: Optional[date] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        max_commits: int = DEFAULT_MAX_COMMITS,
    ) -> list[Commit]:
        """Collect enriched commits of several repositories for one day.

        Args:
            repos: Repositories as owner/name.
            user_email: Keep only commits authored with this email.
            target_date: Day to collect. Defaults to the previous working day.
            max_workers: Concurrent detail fetches.
            max_commits: Maximum commits enriched across all repositories.

        Returns:
            Commits sorted newest first.
        """
        since, until = get_commit_date_range(target_date)

        pending: list[tuple[str, dict]] = []
        for repo in repos:
            try:
                payloads = self.fetch_repo_commits(repo, since=since, until=until)
            except GitHubError as e:
                logger.error("Error fetching commits for %s: %s", repo, e)
                continue

            for payload in payloads:
                email = ((payload.get("commit") or {}).get("author") or {}).get("email")
                if user_email and email != user_email:
                    continue
                pending.append((repo, payload))

        if len(pending) > max_commits:
            logger.warning("Limiting %d commits to %d", len(pending), max_commits)
            pending = pending[:max_commits]

        if not pending:
            return []

        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            commits = list(executor.map(lambda item: self._enrich_commit(*item), pending))

        return sorted(commits, key=lambda c: c.date, reverse=True)
