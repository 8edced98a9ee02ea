from __future__ import annotations

from typing import List, Optional

import httpx
from pydantic import ValidationError

from sentry_lookup.core.exceptions import ApiError, NetworkError, ParseError
from sentry_lookup.core.logging import get_logger
from sentry_lookup.core.schemas import Project, project_list_adapter

log = get_logger("sentry")


class SentryClient:
    """Minimal synchronous client for the Sentry web API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> SentryClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def list_projects(self, org: str) -> List[Project]:
        """
        Fetch every project of an organization in a single request.

        Only the first page the API returns is used.

        Raises:
            NetworkError: If the request could not be sent or answered
            ApiError: If the API answers with a non-2xx status
            ParseError: If the body is not a JSON array of projects
        """
        path = f"/api/0/organizations/{org}/projects/"
        url = f"{self.api_url}{path}"
        log.debug("projects_request", url=url)

        try:
            response = self._client.get(path)
        except httpx.RequestError as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            log.debug("projects_request_failed", url=url, status_code=response.status_code)
            raise ApiError(response.status_code, response.text)

        try:
            projects = project_list_adapter.validate_json(response.content)
        except ValidationError as e:
            first = e.errors()[0]
            raise ParseError(
                f"Unexpected response from {url}: {first['msg']}",
                context={"status_code": response.status_code},
            ) from e

        log.info("projects_fetched", org=org, count=len(projects))
        return projects
