"""
GitHub API client infrastructure for releasesweep.

Provides the three REST calls a cleanup run needs:
- list one page of a repository's releases
- delete a release
- delete a git ref (used for tags)

Every call is made once. Failures raise APIError (AuthenticationError for
rejected tokens) and are not retried.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from ..exit_codes import APIError, AuthenticationError

logger = logging.getLogger(__name__)

# GitHub REST API base URL
GITHUB_API_BASE = "https://api.github.com"

# Maximum page size accepted by the release listing
MAX_PAGE_SIZE = 100


@dataclass
class RateLimitStatus:
    """Rate limit headers of the last API response."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


class GitHubClient:
    """
    Minimal GitHub REST client for release cleanup.

    Example:
        client = GitHubClient(token)
        for release in client.list_releases("owner", "repo", page=1):
            print(release["name"])
    """

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_BASE,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token used as bearer credential
            base_url: API base URL (GitHub Enterprise uses a different one)
            timeout: HTTP request timeout in seconds
            session: Optional preconfigured session
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': 'releasesweep',
            'Authorization': f'Bearer {token}',
        })
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last response, if any."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers: Any) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining < 0 or limit < 0:
            return

        self._rate_limit_status = RateLimitStatus(
            remaining=remaining,
            limit=limit,
            reset_time=reset_time,
            used=used
        )
        if self._rate_limit_status.is_low:
            logger.warning(
                f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
            )

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make one API request and raise on any non-2xx response."""
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise APIError(f"GitHub API request failed: {method} {endpoint}: {e}") from e

        self._update_rate_limit_from_headers(response.headers)

        if response.ok:
            return response

        message = _error_message(response)
        text = f"GitHub API error {response.status_code} for {method} {endpoint}: {message}"
        if response.status_code in (401, 403):
            raise AuthenticationError(text, status=response.status_code)
        raise APIError(text, status=response.status_code)

    def list_releases(
        self,
        owner: str,
        repo: str,
        page: int = 1,
        per_page: int = MAX_PAGE_SIZE,
    ) -> List[Dict[str, Any]]:
        """
        Get one page of repository releases, newest first.

        Args:
            owner: Repository owner
            repo: Repository name
            page: Page number, starting at 1
            per_page: Releases per page (at most 100)

        Returns:
            List of release data dictionaries
        """
        response = self._request(
            'GET',
            f"repos/{owner}/{repo}/releases",
            params={'page': page, 'per_page': per_page},
        )
        try:
            data = response.json()
        except ValueError as e:
            raise APIError(f"GitHub API returned invalid JSON for releases of {owner}/{repo}: {e}") from e

        if not isinstance(data, list):
            raise APIError(f"Unexpected release listing for {owner}/{repo}: expected a list")
        logger.debug(f"Fetched page {page} of {owner}/{repo} releases: {len(data)} releases")
        return data

    def delete_release(self, owner: str, repo: str, release_id: Any) -> None:
        """Delete a release. The tag it points to is left alone."""
        self._request('DELETE', f"repos/{owner}/{repo}/releases/{release_id}")

    def delete_ref(self, owner: str, repo: str, ref: str) -> None:
        """
        Delete a git reference.

        Args:
            ref: Reference without the "refs/" prefix, e.g. "tags/v1.0"
        """
        # Tag names may contain "#", "?" or "%"; only "/" separates path segments
        path_ref = requests.utils.quote(ref, safe='/')
        self._request('DELETE', f"repos/{owner}/{repo}/git/refs/{path_ref}")


def _error_message(response: requests.Response) -> str:
    """Best-effort error text from a GitHub error response."""
    try:
        data = response.json()
    except ValueError:
        return response.reason or 'unknown error'
    if isinstance(data, dict) and data.get('message'):
        return str(data['message'])
    return response.reason or 'unknown error'
