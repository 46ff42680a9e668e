"""Read-only client for the GitHub repository that holds the blog posts."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ContentNotFoundError, UpstreamError
from app.schemas.blog import PostRecord
from app.schemas.content_repo import ContentRepoConfig
from app.services.front_matter import parse_front_matter

logger = logging.getLogger(__name__)

RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"


class ContentEntry(BaseModel):
    type: str
    path: str
    sha: Optional[str] = None


_listing_adapter = TypeAdapter(List[ContentEntry])


def github_headers(token: str) -> Dict[str, str]:
    """Standard GitHub API headers; Authorization only when a token is set."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GitHubContentClient:
    def __init__(
        self, config: ContentRepoConfig, http_client: Optional[httpx.Client] = None
    ):
        self.config = config
        self.http = http_client or httpx.Client(
            base_url=config.api_url,
            headers=github_headers(config.token),
            timeout=config.timeout,
        )

    def close(self) -> None:
        self.http.close()

    def _get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            resp = self.http.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"GitHub request failed for {url}: {e}")
            raise UpstreamError(f"GitHub request failed for {url}: {e}") from e

        if resp.status_code == 404:
            raise ContentNotFoundError(f"GitHub returned 404 for {url}")
        if not resp.is_success:
            logger.warning(f"GitHub API {resp.status_code} for {url}")
            raise UpstreamError(
                f"GitHub returned {resp.status_code} for {url}",
                status_code=resp.status_code,
            )
        return resp

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.config.owner}/{self.config.repo}/contents/{path}"

    def list_post_files(self) -> List[str]:
        """Paths of every file directly under the posts directory."""
        resp = self._get(
            self._contents_url(self.config.posts_dir.strip("/")),
            params={"ref": self.config.branch},
        )
        try:
            entries = _listing_adapter.validate_python(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise UpstreamError(
                f"Malformed listing for {self.config.posts_dir}: {e}",
                status_code=resp.status_code,
            ) from e

        paths = []
        for entry in entries:
            if entry.type != "file":
                logger.debug(f"Skipping non-file entry {entry.path} ({entry.type})")
                continue
            paths.append(entry.path)
        return paths

    def get_raw_file(self, path: str) -> str:
        resp = self._get(
            self._contents_url(path),
            params={"ref": self.config.branch},
            headers={"Accept": RAW_MEDIA_TYPE},
        )

        # directories and error bodies come back as JSON even with the raw media type
        content_type = resp.headers.get("content-type", "")
        if "json" in content_type:
            raise UpstreamError(
                f"Expected raw contents for {path}, got {content_type}",
                status_code=resp.status_code,
            )
        try:
            return resp.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UpstreamError(
                f"Contents of {path} are not UTF-8 text",
                status_code=resp.status_code,
            ) from e

    def get_file_history(self, path: str) -> List[str]:
        """Committer timestamps of commits touching ``path``, newest first."""
        resp = self._get(
            f"/repos/{self.config.owner}/{self.config.repo}/commits",
            params={"path": path, "sha": self.config.branch, "per_page": 100},
        )
        try:
            commits = resp.json()
            return [c["commit"]["committer"]["date"] for c in commits]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError(
                f"Malformed commit history for {path}", status_code=resp.status_code
            ) from e

    def get_post_by_path(self, path: str) -> PostRecord:
        parsed = parse_front_matter(self.get_raw_file(path))
        history = self.get_file_history(path)

        return PostRecord(
            **parsed.attributes.model_dump(),
            path=path,
            content=parsed.body,
            lastModifiedAt=history[0] if len(history) >= 2 else None,
        )

    def get_posts_by_path(self, paths: Sequence[str]) -> List[PostRecord]:
        """
        Fetch and parse several posts concurrently. Results keep the input
        order; the first failure is raised and nothing is returned.
        """
        if not paths:
            return []

        workers = max(1, min(self.config.max_workers, len(paths)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.get_post_by_path, p) for p in paths]
            return [future.result() for future in futures]
