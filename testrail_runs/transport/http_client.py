"""HTTP client for the TestRail API v2.

Implements the read-only subset of the TestRail REST protocol used here:
- GET index.php?/api/v2/get_projects
- GET index.php?/api/v2/get_statuses
- GET index.php?/api/v2/get_configs/:project_id
- GET index.php?/api/v2/get_runs/:project_id
- GET index.php?/api/v2/get_plans/:project_id
- GET index.php?/api/v2/get_plan/:plan_id
"""

import time
from typing import Any, Optional, Protocol

import requests

from .retry_policy import RetryPolicy, default_retry_policy


class Transport(Protocol):
    """Anything that can answer a TestRail API v2 GET."""

    def get(self, endpoint: str) -> Any:
        ...


class TestRailHttpClient:
    """HTTP client for a TestRail instance.

    Authenticates with HTTP basic auth (user + password or API key)
    and returns decoded JSON bodies.
    """

    __test__ = False

    API_PATH = "index.php?/api/v2/"

    def __init__(
        self,
        base_url: str,
        user: str,
        password: str,
        retry_policy: Optional[RetryPolicy] = None,
        request_timeout: float = 30.0,
    ):
        """Initialize HTTP client.

        Args:
            base_url: TestRail root URL (e.g., https://example.testrail.io).
            user: Login email.
            password: Password or API key.
            retry_policy: Retry policy for failed requests.
            request_timeout: Request timeout in seconds.
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/") + "/"
        self.retry_policy = retry_policy or default_retry_policy()
        self.request_timeout = request_timeout
        self._session = requests.Session()
        self._session.auth = (user, password)
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def url_for(self, endpoint: str) -> str:
        """Build the full request URL for an API endpoint."""
        return f"{self.base_url}{self.API_PATH}{endpoint.lstrip('/')}"

    def get(self, endpoint: str) -> Any:
        """GET an API endpoint and return the decoded JSON body.

        Args:
            endpoint: Endpoint path after api/v2/ (e.g., "get_runs/1").

        Raises:
            requests.HTTPError: On 4xx, or 5xx after all retries.
            requests.ConnectionError: If TestRail is unreachable.
        """
        response = self._request_with_retry("GET", self.url_for(endpoint))
        return response.json()

    def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> requests.Response:
        """Execute HTTP request with retry logic.

        Raises:
            requests.HTTPError: After all retries exhausted.
        """
        kwargs.setdefault("timeout", self.request_timeout)

        for attempt in range(self.retry_policy.max_retries + 1):
            can_retry = attempt < self.retry_policy.max_retries

            try:
                response = self._session.request(method, url, **kwargs)
            except (requests.ConnectionError, requests.Timeout):
                if can_retry:
                    time.sleep(self.retry_policy.get_delay(attempt))
                    continue
                raise

            if can_retry and self.retry_policy.should_retry(response.status_code):
                time.sleep(self.retry_policy.get_delay(
                    attempt, response.headers.get("Retry-After")
                ))
                continue

            response.raise_for_status()
            return response

        raise RuntimeError("Request failed with no error captured")

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
