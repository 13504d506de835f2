"""
GitHub Releases host.

Creates a release, streams a binary asset to it and deletes old releases
together with their tag refs, using the GitHub REST API.
Requires a token with contents:write permission on the repository.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests
import tenacity
from loguru import logger

from release_manager.exceptions import ReleaseHostError

USER_AGENT = "release-manager"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_retryable(exc: BaseException) -> bool:
    """Connection problems and throttling/server errors are worth retrying."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return False


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(f"Retrying GitHub request (attempt {retry_state.attempt_number}): {exc}")


class GitHubReleaseHost:
    """
    GitHub release operations for a single repository.

    Release creation and asset upload are not retried, since a repeated
    create would fail on the existing tag. Deletions are retried on
    transient errors.
    """

    def __init__(
        self,
        repo: str,
        token: str,
        api_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        timeout: float = 60.0,
        max_retries: int = 3,
        retry_wait: tenacity.wait.wait_base | None = None,
    ):
        """
        Initialize the host.

        Args:
            repo: Repository in owner/name form
            token: GitHub API token
            api_url: Base URL of the REST API
            session: Optional preconfigured session (used by tests)
            timeout: Per-request timeout in seconds
            max_retries: Attempts for retryable requests
            retry_wait: Optional tenacity wait strategy between attempts
        """
        if not repo or "/" not in repo:
            raise ValueError(f"Repository must be in owner/name form, got {repo!r}")
        if not token:
            raise ValueError("GitHub token is required")

        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._max_retries = max(1, max_retries)
        self._retry_wait = retry_wait or (
            tenacity.wait_exponential(multiplier=1, min=1, max=30) + tenacity.wait_random(0, 2)
        )

        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        })

    @property
    def _repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.repo}"

    def create(self, tag_name: str, asset_path: Path | str) -> int:
        """
        Create a release and upload the asset to it.

        Args:
            tag_name: Tag and name of the new release
            asset_path: File to attach to the release

        Returns:
            Release id assigned by GitHub

        Raises:
            ReleaseHostError: If the asset is missing or any request fails
        """
        asset_path = Path(asset_path)
        if not asset_path.is_file():
            raise ReleaseHostError(f"Asset file not found: {asset_path}")

        release = self._create_release(tag_name)
        release_id = release["id"]
        logger.info(f"Created release {tag_name} with id {release_id}")

        self._upload_asset(release["upload_url"], asset_path)
        return release_id

    def _create_release(self, tag_name: str) -> dict[str, Any]:
        body = {
            "tag_name": tag_name,
            "name": tag_name,
            "body": f"Automated release. Created at {datetime.now(timezone.utc).isoformat()}",
            "draft": False,
            "prerelease": False,
        }

        try:
            resp = self._session.post(
                f"{self._repo_url}/releases", json=body, timeout=self.timeout
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ReleaseHostError(f"Failed to create release {tag_name}: {e}") from e

        release_id = data.get("id")
        upload_url = data.get("upload_url")
        if not isinstance(release_id, int) or isinstance(release_id, bool):
            raise ReleaseHostError(f"Release response for {tag_name} has no numeric id")
        if not isinstance(upload_url, str):
            raise ReleaseHostError(f"Release response for {tag_name} has no upload_url")

        # upload_url is a URI template: .../assets{?name,label}
        return {"id": release_id, "upload_url": upload_url.split("{", 1)[0]}

    def _upload_asset(self, upload_url: str, asset_path: Path) -> None:
        size = asset_path.stat().st_size
        logger.info(f"Uploading {asset_path.name} ({size / (1024 * 1024):.1f} MB)")

        try:
            with open(asset_path, "rb") as f:
                resp = self._session.post(
                    upload_url,
                    params={"name": asset_path.name},
                    data=f,
                    headers={
                        "Content-Type": "application/octet-stream",
                        "Content-Length": str(size),
                    },
                    timeout=self.timeout,
                )
            resp.raise_for_status()
        except (OSError, requests.RequestException) as e:
            raise ReleaseHostError(f"Failed to upload {asset_path.name}: {e}") from e

        logger.info(f"Asset uploaded: {resp.status_code}")

    def delete(self, release_id: int, tag_name: str) -> None:
        """
        Delete a release and its tag ref.

        A release that no longer exists counts as deleted. A failed tag
        deletion is only logged.

        Args:
            release_id: Id of the release to delete
            tag_name: Tag to remove after the release

        Raises:
            ReleaseHostError: If the release could not be deleted
        """
        try:
            resp = self._with_retry(
                self._delete, f"{self._repo_url}/releases/{release_id}"
            )
        except requests.RequestException as e:
            raise ReleaseHostError(f"Failed to delete release {tag_name}: {e}") from e

        if resp.status_code == 404:
            logger.info(f"Release {tag_name} ({release_id}) already gone")
        else:
            logger.info(f"Deleted release {tag_name} ({release_id})")

        try:
            tag_resp = self._with_retry(
                self._delete, f"{self._repo_url}/git/refs/tags/{tag_name}"
            )
        except requests.RequestException as e:
            logger.warning(f"Failed to delete tag ref {tag_name}: {e}")
            return

        if tag_resp.status_code == 404:
            logger.debug(f"Tag ref {tag_name} already gone")

    def _delete(self, url: str) -> requests.Response:
        logger.debug(f"DELETE {url}")
        resp = self._session.delete(url, timeout=self.timeout)
        if resp.status_code != 404:
            resp.raise_for_status()
        return resp

    def _with_retry(self, fn, *args):
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=self._retry_wait,
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=_log_retry,
            reraise=True,
        )
        return retryer(fn, *args)
