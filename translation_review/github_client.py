"""
GitHub API client for the Translation Review Bot.

This module fetches pull request data (metadata, diff, file contents),
cleans up the bot's earlier comments and creates the check run that
carries the review.
"""

import base64
import binascii
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .config.settings import SettingsProtocol
from .utils.exceptions import GitHubAPIError, ReviewBotError
from .utils.logger import api_logger, get_logger
from .utils.retry import api_retry

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
PAGE_SIZE = 100


class GitHubClient:
    """
    Client for the GitHub REST API, scoped to one pull request.

    All failed calls surface as GitHubAPIError carrying the status code
    and endpoint. Transient failures are retried with backoff; 4xx
    responses (other than 429) are not.
    """

    def __init__(
        self,
        settings: SettingsProtocol,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None
    ):
        """
        Initialize the GitHub client.

        Args:
            settings: Application settings (token, repository, PR number)
            session: Optional requests session (a new one is created otherwise)
            timeout: Request timeout in seconds (defaults to settings.request_timeout)
        """
        self.logger = get_logger("github_client")
        self.api_url = settings.github_api_url
        self.owner = settings.owner
        self.repo = settings.repo
        self.pr_number = settings.pr_number
        self.timeout = timeout or settings.request_timeout

        self.headers = settings.get_github_headers()
        self.session = session or requests.Session()
        self.session.headers.update(self.headers)

        self.logger.info(
            "GitHub client initialized",
            extra={
                "api_url": self.api_url,
                "repository": f"{self.owner}/{self.repo}",
                "pr_number": self.pr_number,
                "timeout": self.timeout
            }
        )

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Send a request and map failures to GitHubAPIError.

        Raises:
            GitHubAPIError: On connection errors or non-2xx responses
        """
        api_logger.log_request("github", method, url, self.headers, kwargs.get("json"))
        started = time.time()

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            api_logger.log_error("github", method, url, e)
            raise GitHubAPIError(f"GitHub request failed: {method} {url}: {e}", endpoint=url) from e

        api_logger.log_response(
            "github", method, url, response.status_code,
            response_time_ms=(time.time() - started) * 1000
        )

        if response.status_code >= 400:
            error = GitHubAPIError(
                f"GitHub API error {response.status_code}: {method} {url}",
                status_code=response.status_code,
                response_body=response.text[:1000] if response.text else None,
                endpoint=url
            )
            api_logger.log_error("github", method, url, error, status_code=response.status_code)
            raise error

        return response

    def _paginate(self, url: str) -> List[Dict[str, Any]]:
        """Collect every page of a list endpoint."""
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            response = self._request("GET", url, params={"per_page": PAGE_SIZE, "page": page})
            batch = response.json() or []
            items.extend(batch)
            if len(batch) < PAGE_SIZE:
                return items
            page += 1

    # ------------------------------------------------------------------
    # Pull request data
    # ------------------------------------------------------------------

    @api_retry
    def get_pull_request(self) -> Dict[str, Any]:
        """
        Fetch pull request metadata (title, body, head commit).

        Raises:
            GitHubAPIError: If the pull request cannot be fetched
        """
        response = self._request("GET", f"{self.repo_url}/pulls/{self.pr_number}")
        return response.json()

    @api_retry
    def get_pull_request_diff(self) -> str:
        """
        Fetch the pull request as a unified diff.

        Raises:
            GitHubAPIError: If the diff cannot be fetched
        """
        response = self._request(
            "GET",
            f"{self.repo_url}/pulls/{self.pr_number}",
            headers={"Accept": DIFF_MEDIA_TYPE}
        )
        diff = response.text or ""
        self.logger.info("Successfully retrieved PR diff", extra={"diff_size": len(diff)})
        return diff

    @api_retry
    def _fetch_contents(self, path: str, ref: str) -> Dict[str, Any]:
        response = self._request(
            "GET",
            f"{self.repo_url}/contents/{quote(path)}",
            params={"ref": ref}
        )
        return response.json()

    def get_file_content(self, path: str, ref: str) -> Optional[str]:
        """
        Fetch a single file's content at a commit.

        Args:
            path: Repository-relative file path
            ref: Commit SHA or branch name

        Returns:
            Decoded file text, or None when the file is missing, is not a
            regular file, or cannot be fetched
        """
        try:
            data = self._fetch_contents(path, ref)
        except ReviewBotError as e:
            self.logger.error(
                f"Failed to get content for {path}",
                extra={"file_path": path, "ref": ref, "error_message": str(e)}
            )
            return None

        if not isinstance(data, dict) or data.get("type") != "file":
            return None

        content = data.get("content")
        if not isinstance(content, str):
            return None

        if data.get("encoding") == "base64":
            try:
                raw = base64.b64decode(content)
            except binascii.Error as e:
                self.logger.error(
                    f"Failed to decode content for {path}",
                    extra={"file_path": path, "ref": ref, "error_message": str(e)}
                )
                return None
            # Invalid UTF-8 bytes become U+FFFD
            return raw.decode("utf-8", errors="replace")
        return content

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @api_retry
    def list_review_comments(self) -> List[Dict[str, Any]]:
        """List inline review comments on the pull request."""
        return self._paginate(f"{self.repo_url}/pulls/{self.pr_number}/comments")

    @api_retry
    def list_issue_comments(self) -> List[Dict[str, Any]]:
        """List general (issue) comments on the pull request."""
        return self._paginate(f"{self.repo_url}/issues/{self.pr_number}/comments")

    @api_retry
    def delete_review_comment(self, comment_id: int) -> None:
        self._request("DELETE", f"{self.repo_url}/pulls/comments/{comment_id}")

    @api_retry
    def delete_issue_comment(self, comment_id: int) -> None:
        self._request("DELETE", f"{self.repo_url}/issues/comments/{comment_id}")

    def delete_comments_by_user(self, username: str) -> int:
        """
        Delete every review and issue comment written by ``username``.

        Listing and delete failures are logged, never raised.

        Returns:
            Number of comments deleted
        """
        try:
            review_comments = [c for c in self.list_review_comments() if _login(c) == username]
            issue_comments = [c for c in self.list_issue_comments() if _login(c) == username]
        except ReviewBotError as e:
            self.logger.warning(
                f"Failed to delete comments by user {username}",
                extra={"username": username, "error_message": str(e)}
            )
            return 0

        deleted = 0
        for comment in review_comments:
            deleted += self._try_delete(self.delete_review_comment, comment["id"])
        for comment in issue_comments:
            deleted += self._try_delete(self.delete_issue_comment, comment["id"])

        if deleted:
            self.logger.info(
                f"Deleted {deleted} comments by user {username} "
                f"({len(review_comments)} review comments, {len(issue_comments)} issue comments)"
            )
        return deleted

    def _try_delete(self, delete, comment_id: int) -> int:
        try:
            delete(comment_id)
            return 1
        except ReviewBotError as e:
            self.logger.warning(
                f"Failed to delete comment {comment_id}",
                extra={"comment_id": comment_id, "error_message": str(e)}
            )
            return 0

    # ------------------------------------------------------------------
    # Check runs
    # ------------------------------------------------------------------

    @api_retry
    def create_check_run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a check run.

        Args:
            payload: Check run body (name, head_sha, status, conclusion, output)

        Returns:
            The created check run

        Raises:
            GitHubAPIError: If the check run cannot be created
        """
        response = self._request("POST", f"{self.repo_url}/check-runs", json=payload)
        result = response.json()
        self.logger.info(
            f"Successfully created check run {result.get('id')}",
            extra={"check_run_id": result.get("id"), "html_url": result.get("html_url")}
        )
        return result


def _login(comment: Dict[str, Any]) -> Optional[str]:
    return (comment.get("user") or {}).get("login")
