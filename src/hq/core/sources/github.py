"""
GitHub content source.

Reads checklists and activity signals through the GitHub REST API using a
single shared ``httpx.AsyncClient`` per run.

Endpoints used:
- GET user                                         (login the token belongs to)
- GET user/repos?affiliation=owner                 (own account, private included)
- GET orgs/{org}/repos?type=all                    (organisations)
- GET users/{owner}/repos?type=owner               (other users, public only)
- GET repos/{owner}/{repo}                         (metadata, pushed_at)
- GET repos/{owner}/{repo}/git/trees/{branch}?recursive=1
- GET repos/{owner}/{repo}/contents/{path}         (base64 envelope)
- GET repos/{owner}/{repo}/commits?per_page=N
- GET repos/{owner}/{repo}/issues?state=open       (pull requests filtered out)
- GET repos/{owner}/{repo}/pulls?state=open        (drafts filtered out)

Without a token every call short-circuits to "no data" and a single
warning is logged.
"""

import asyncio
import base64
import binascii
import logging
import os
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from hq.core.config.models import HQConfig
from hq.core.exceptions import SourceUnavailableError
from hq.core.sources.base import is_candidate, register_source
from hq.core.sources.models import CommitInfo, RepoActivity, RepoRef

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
MAX_PAGES = 50
USER_AGENT = "hq-command-center"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an API timestamp such as '2026-01-15T10:30:00Z'."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@register_source("github")
class GitHubSource:
    """
    Content source backed by the GitHub REST API.

    Args:
        config: Active configuration (``github`` section)
        client: Optional pre-built client, mainly for tests
            (``httpx.AsyncClient(transport=httpx.MockTransport(...))``)
    """

    def __init__(self, config: HQConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self.settings = config.github
        self.token = os.environ.get(self.settings.token_env)
        self._client = client
        self._owns_client = client is None
        self._warned = False
        self._viewer: str | None = None
        self._viewer_checked = False

    @property
    def name(self) -> str:
        return "github"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_url.rstrip("/") + "/",
                timeout=self.settings.timeout,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _has_token(self) -> bool:
        if self.token:
            return True
        if not self._warned:
            logger.warning(
                f"{self.settings.token_env} is not set; GitHub data will be empty"
            )
            self._warned = True
        return False

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a JSON resource.

        Raises:
            SourceUnavailableError: On network failure, non-200 status or bad JSON
        """
        try:
            response = await self.client.get(path, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise SourceUnavailableError(self.name, f"GET {path} failed: {e}") from e
        if response.status_code != 200:
            raise SourceUnavailableError(
                self.name,
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise SourceUnavailableError(self.name, f"GET {path} returned invalid JSON") from e

    # Discovery

    async def _viewer_login(self) -> str | None:
        """Login of the token's user, looked up once per run."""
        if not self._viewer_checked:
            self._viewer_checked = True
            user = await self._optional("user")
            if isinstance(user, dict):
                self._viewer = user.get("login")
        return self._viewer

    async def _repos_endpoint(self, owner: str) -> tuple[str, dict[str, Any]]:
        """
        Pick the listing that includes private repositories where possible.

        users/{owner}/repos only ever lists public repositories, so it is
        the fallback for accounts that are neither the token's own user nor
        an organisation.
        """
        viewer = await self._viewer_login()
        if viewer and viewer.lower() == owner.lower():
            return "user/repos", {"affiliation": "owner"}
        account = await self._optional(f"users/{owner}")
        if isinstance(account, dict) and account.get("type") == "Organization":
            return f"orgs/{owner}/repos", {"type": "all"}
        return f"users/{owner}/repos", {"type": "owner"}

    async def _list_account_repos(self, owner: str) -> list[dict[str, Any]]:
        path, params = await self._repos_endpoint(owner)
        repos: list[dict[str, Any]] = []
        for page in range(1, MAX_PAGES + 1):
            batch = await self._get_json(
                path,
                params={**params, "per_page": PAGE_SIZE, "page": page, "sort": "pushed"},
            )
            if not isinstance(batch, list):
                break
            repos.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
        return repos

    async def discover(self) -> list[RepoRef]:
        """
        List repositories of every configured account.

        Archived repositories and names in ``skip_repos`` are excluded;
        names are deduplicated case-insensitively, first occurrence wins.
        """
        if not self._has_token():
            return []

        skip = set(self.settings.skip_repos)
        seen: set[str] = set()
        refs: list[RepoRef] = []
        for owner in self.settings.accounts:
            try:
                raw_repos = await self._list_account_repos(owner)
            except SourceUnavailableError as e:
                logger.warning(f"Could not list repositories for {owner}: {e}")
                continue
            for raw in raw_repos:
                name = raw.get("name")
                if not name or raw.get("archived") or name in skip:
                    continue
                if name.lower() in seen:
                    continue
                seen.add(name.lower())
                refs.append(self._to_ref(raw, owner))
        logger.debug(f"Discovered {len(refs)} repositories across {len(self.settings.accounts)} accounts")
        return refs

    def _to_ref(self, raw: dict[str, Any], owner: str) -> RepoRef:
        login = (raw.get("owner") or {}).get("login") or owner
        return RepoRef(
            name=raw["name"],
            owner=login,
            default_branch=raw.get("default_branch") or "HEAD",
            description=raw.get("description"),
            archived=bool(raw.get("archived")),
            pushed_at=parse_timestamp(raw.get("pushed_at")),
            url=f"github.com/{login}/{raw['name']}",
        )

    # Content

    async def list_candidates(self, repo: RepoRef) -> list[str]:
        if not self._has_token():
            return []
        try:
            data = await self._get_json(
                f"repos/{repo.full_name}/git/trees/{quote(repo.default_branch, safe='')}",
                params={"recursive": 1},
            )
        except SourceUnavailableError as e:
            logger.warning(f"Could not list files of {repo.full_name}: {e}")
            return []
        if not isinstance(data, dict):
            return []
        if data.get("truncated"):
            logger.debug(f"File tree of {repo.full_name} is truncated")
        return [
            entry["path"]
            for entry in data.get("tree", [])
            if entry.get("type") == "blob" and is_candidate(entry.get("path", ""))
        ]

    async def fetch_text(self, repo: RepoRef, path: str) -> str | None:
        if not self._has_token():
            return None
        try:
            data = await self._get_json(f"repos/{repo.full_name}/contents/{quote(path, safe='/')}")
            return self._decode_content(data, path)
        except SourceUnavailableError as e:
            logger.debug(f"Could not fetch {repo.full_name}:{path}: {e}")
            return None

    def _decode_content(self, data: Any, path: str) -> str:
        if not isinstance(data, dict) or not data.get("content"):
            raise SourceUnavailableError(self.name, f"{path} has no inline content")
        try:
            return base64.b64decode(data["content"]).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SourceUnavailableError(self.name, f"Cannot decode {path}: {e}") from e

    # Activity

    async def _optional(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            return await self._get_json(path, params=params)
        except SourceUnavailableError as e:
            logger.debug(str(e))
            return None

    async def probe_activity(self, repo: RepoRef) -> RepoActivity:
        if not self._has_token():
            return RepoActivity(available=False)

        base = f"repos/{repo.full_name}"
        info, commits, issues, pulls = await asyncio.gather(
            self._optional(base),
            self._optional(f"{base}/commits", {"per_page": self.settings.commit_count}),
            self._optional(f"{base}/issues", {"state": "open", "per_page": PAGE_SIZE}),
            self._optional(f"{base}/pulls", {"state": "open", "per_page": PAGE_SIZE}),
        )
        if not isinstance(info, dict):
            logger.warning(f"Repository {repo.full_name} is unavailable")
            return RepoActivity(available=False)

        if not repo.default_branch or repo.default_branch == "HEAD":
            repo.default_branch = info.get("default_branch") or "HEAD"

        return RepoActivity(
            commits=[self._to_commit(c) for c in commits or [] if isinstance(c, dict)],
            pushed_at=parse_timestamp(info.get("pushed_at")),
            description=info.get("description"),
            open_issues=len([i for i in issues or [] if "pull_request" not in i]),
            open_prs=len([p for p in pulls or [] if not p.get("draft")]),
        )

    def _to_commit(self, raw: dict[str, Any]) -> CommitInfo:
        commit = raw.get("commit") or {}
        committer = commit.get("committer") or {}
        message = (commit.get("message") or "").split("\n", 1)[0]
        return CommitInfo(
            sha=(raw.get("sha") or "")[:7],
            message=message,
            date=parse_timestamp(committer.get("date")),
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
