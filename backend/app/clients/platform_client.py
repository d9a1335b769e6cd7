"""
Model service client for the Mendix platform.

Provides a reusable async client for the model service that exposes
working copies of Mendix app models.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class PlatformConfigurationError(RuntimeError):
    """Raised when the client is used without the required configuration."""


class MendixPlatformClient:
    """
    Async HTTP client for the model service.

    Features:
    - Personal access token authentication
    - Temporary working copy management
    - Unit loading and entity creation
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        """Get default headers for API requests."""
        if not self.token:
            raise PlatformConfigurationError("MENDIX_TOKEN is not configured")
        return {
            "Accept": "application/json",
            "Authorization": f"MxToken {self.token}",
            "User-Agent": "Mendix-Model-API/1.0",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Make a request to the model service.

        Returns:
            Decoded JSON response, or None for empty responses

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        client = await self._get_client()
        response = await client.request(method, path, **kwargs)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    async def create_temporary_working_copy(self, app_id: str, branch: str) -> str:
        """
        Create a temporary working copy of an app branch.

        Returns:
            Working copy ID
        """
        logger.info("Creating working copy of %s (%s)", app_id, branch)
        data = await self._request(
            "POST", f"/apps/{app_id}/working-copies", json={"branch": branch}
        )
        return data["workingCopyId"]

    async def get_model(self, working_copy_id: str) -> dict[str, Any]:
        """Get the container and unit structure of a working copy's model."""
        return await self._request("GET", f"/working-copies/{working_copy_id}/model")

    async def load_unit(self, working_copy_id: str, unit_id: str) -> dict[str, Any]:
        """Load the full representation of a model unit."""
        return await self._request(
            "GET", f"/working-copies/{working_copy_id}/units/{unit_id}"
        )

    async def create_entity(
        self, working_copy_id: str, domain_model_id: str, name: str
    ) -> dict[str, Any]:
        """Create an entity in a domain model."""
        return await self._request(
            "POST",
            f"/working-copies/{working_copy_id}/units/{domain_model_id}/entities",
            json={"name": name},
        )

    async def flush_changes(self, working_copy_id: str) -> None:
        """Send pending model changes to the working copy."""
        await self._request("POST", f"/working-copies/{working_copy_id}/flush")

    async def commit_to_repository(self, working_copy_id: str, branch: str) -> None:
        """Commit the working copy to a repository branch."""
        logger.info("Committing working copy %s to %s", working_copy_id, branch)
        await self._request(
            "POST",
            f"/working-copies/{working_copy_id}/commit",
            json={"branch": branch},
        )

    async def delete_working_copy(self, working_copy_id: str) -> None:
        """Delete a working copy."""
        logger.debug("Deleting working copy %s", working_copy_id)
        await self._request("DELETE", f"/working-copies/{working_copy_id}")

    async def __aenter__(self) -> "MendixPlatformClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
