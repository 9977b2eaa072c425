"""HTTP client wrapper for the Cooksync API."""

from typing import Any
from urllib.parse import urlencode

import requests

from ..models.config import DEFAULT_BASE_URL

CONNECTION_ERROR_MESSAGE = "Can't connect to server"


class CooksyncAPIError(Exception):
    """Exception raised for Cooksync API errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class TransportError(CooksyncAPIError):
    """No response was obtained (DNS, refused connection, timeout...)."""


class ServiceError(CooksyncAPIError):
    """The service answered with an error status."""


class CooksyncClient:
    """HTTP client for the Cooksync REST API."""

    EXPORT_TARGET = "obsidian"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = 30,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Service base URL
            timeout: Per-request transport timeout in seconds (None disables it)
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_full_url(self, path: str, query_params: dict[str, str] | None = None) -> str:
        """Build full URL from base URL, path, and query params."""
        url = f"{self.base_url}{path}"
        if query_params:
            url += "?" + urlencode(query_params)
        return url

    def _request(
        self,
        method: str,
        path: str,
        query_params: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a request to the Cooksync API.

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            TransportError: When no response was received
            ServiceError: On status codes above 400 or undecodable bodies
        """
        url = self.get_full_url(path, query_params)

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{CONNECTION_ERROR_MESSAGE}: {e}") from e

        # The service reports "pending" and similar states with codes up to 400
        if response.status_code > 400:
            message = response.text or CONNECTION_ERROR_MESSAGE
            raise ServiceError(message, response.status_code, response)

        if not response.content or not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(
                f"Invalid JSON from {path}: {response.text[:200]}",
                response.status_code,
                response,
            ) from e

    # -------------------------------------------------------------------------
    # Authorization
    # -------------------------------------------------------------------------

    def authorize_url(self, client_id: str) -> str:
        """URL the user opens in a browser to link this client."""
        return self.get_full_url("/export", {"uuid": client_id, "service": self.EXPORT_TARGET})

    def customize_url(self) -> str:
        """User-facing page for import options such as tags."""
        return self.get_full_url(f"/export/{self.EXPORT_TARGET}")

    def fetch_token(self, client_id: str) -> str | None:
        """Ask for the token issued to this client, if the user has authorized it.

        Returns:
            The token, or None while authorization is still pending
        """
        data = self._request("GET", "/api/clients/token", query_params={"uuid": client_id})
        if isinstance(data, dict) and data.get("token"):
            return str(data["token"])
        return None

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def request_export(self, recipe_ids: set[int], headers: dict[str, str]) -> Any:
        """Request recipes the client does not have yet.

        Args:
            recipe_ids: Ids already imported; the service diffs against them
            headers: Authentication headers

        Returns:
            Decoded JSON payload, or None when there is nothing new
        """
        return self._request(
            "POST",
            f"/api/recipes/export/{self.EXPORT_TARGET}",
            json_data={
                "exportTarget": self.EXPORT_TARGET,
                "recipeIds": sorted(recipe_ids),
            },
            headers={**headers, "Content-Type": "application/json"},
        )
