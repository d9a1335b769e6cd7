"""
Domain model entity endpoints.

Lists the entities of a module and creates new entities.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import get_settings
from app.dependencies import get_inspector, require_read, require_write
from app.routers.errors import PASSTHROUGH_ERRORS
from app.schemas.model import (
    CreateEntityRequest,
    CreateEntityResponse,
    EntityInfo,
    EntityListResponse,
)
from app.services.inspector import ModelInspectorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apps", tags=["entities"])


@router.get(
    "/{app_id}/entities",
    response_model=EntityListResponse,
    dependencies=[Depends(require_read)],
)
async def list_entities(
    app_id: str,
    inspector: Annotated[ModelInspectorService, Depends(get_inspector)],
    module_name: Annotated[
        str | None, Query(alias="moduleName", description="Module to list")
    ] = None,
    branch: Annotated[str | None, Query(description="Branch to check out")] = None,
) -> EntityListResponse:
    """
    List the entities of a module's domain model with their attributes.
    """
    settings = get_settings()
    module_name = module_name or settings.default_module_name
    branch = branch or settings.default_branch

    try:
        entities = await inspector.list_entities(app_id, module_name, branch)
        if entities is None:
            raise HTTPException(
                status_code=404, detail=f"Module '{module_name}' not found"
            )

        return EntityListResponse(
            appId=app_id,
            moduleName=module_name,
            entities=[EntityInfo(**e) for e in entities],
            count=len(entities),
        )
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.exception(f"Failed to fetch entities for {app_id}/{module_name}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch entities: {e}")


@router.post(
    "/{app_id}/entities",
    response_model=CreateEntityResponse,
    dependencies=[Depends(require_write)],
)
async def create_entity(
    app_id: str,
    request: CreateEntityRequest,
    inspector: Annotated[ModelInspectorService, Depends(get_inspector)],
    branch: Annotated[str | None, Query(description="Branch to commit to")] = None,
) -> CreateEntityResponse:
    """
    Create an entity in a module's domain model and commit it.
    """
    if not request.entityName:
        raise HTTPException(status_code=400, detail="entityName is required")

    settings = get_settings()
    module_name = request.moduleName or settings.default_module_name
    branch = branch or settings.default_branch

    try:
        entity = await inspector.create_entity(
            app_id, module_name, request.entityName, branch
        )
        if entity is None:
            raise HTTPException(
                status_code=404, detail=f"Module '{module_name}' not found"
            )

        entity_name = entity.get("name") or request.entityName
        return CreateEntityResponse(
            success=True,
            message=f"Entity '{entity_name}' created successfully",
            entityId=entity["id"],
            entityName=entity_name,
        )
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.exception(f"Failed to create entity in {app_id}/{module_name}")
        raise HTTPException(status_code=500, detail=f"Failed to create entity: {e}")
