"""
Temporary working copy sessions.

Every request works against its own short-lived working copy, which is
deleted again when the request finishes.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from app.clients.platform_client import MendixPlatformClient
from app.services.model_index import ModelElement, ModelIndex
from app.utils.module_resolver import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)


class WorkingCopy:
    """Handle to an open temporary working copy."""

    def __init__(
        self,
        client: MendixPlatformClient,
        working_copy_id: str,
        branch: str,
    ):
        self.client = client
        self.id = working_copy_id
        self.branch = branch

    async def open_model(self, max_depth: int = DEFAULT_MAX_DEPTH) -> ModelIndex:
        """Open the model and index its containers and units."""
        structure = await self.client.get_model(self.id)
        return ModelIndex.from_structure(structure, max_depth=max_depth)

    async def load(self, unit: ModelElement) -> dict[str, Any]:
        """Load the full representation of a unit."""
        return await self.client.load_unit(self.id, unit.id)

    async def create_entity(self, domain_model: ModelElement, name: str) -> dict[str, Any]:
        return await self.client.create_entity(self.id, domain_model.id, name)

    async def flush_changes(self) -> None:
        await self.client.flush_changes(self.id)

    async def commit(self, branch: str | None = None) -> None:
        """Commit to ``branch``, defaulting to the branch that was checked out."""
        await self.client.commit_to_repository(self.id, branch or self.branch)

    async def delete(self) -> None:
        await self.client.delete_working_copy(self.id)


@asynccontextmanager
async def temporary_working_copy(
    client: MendixPlatformClient,
    app_id: str,
    branch: str,
) -> AsyncIterator[WorkingCopy]:
    """
    Create a working copy for the duration of a block.

    The working copy is deleted on exit, whether the block succeeded or
    not. A failed delete is logged and does not replace the block's outcome.
    """
    working_copy_id = await client.create_temporary_working_copy(app_id, branch)
    working_copy = WorkingCopy(client, working_copy_id, branch)
    try:
        yield working_copy
    finally:
        try:
            await working_copy.delete()
        except httpx.HTTPError as e:
            logger.warning("Failed to delete working copy %s: %s", working_copy_id, e)
