"""
Module listing endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import get_settings
from app.dependencies import get_inspector, require_read
from app.routers.errors import PASSTHROUGH_ERRORS
from app.schemas.model import ModuleInfo, ModuleListResponse
from app.services.inspector import ModelInspectorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apps", tags=["modules"], dependencies=[Depends(require_read)])


@router.get("/{app_id}/modules", response_model=ModuleListResponse)
async def list_modules(
    app_id: str,
    inspector: Annotated[ModelInspectorService, Depends(get_inspector)],
    branch: Annotated[str | None, Query(description="Branch to check out")] = None,
) -> ModuleListResponse:
    """
    List the modules of an app.
    """
    branch = branch or get_settings().default_branch
    try:
        modules = await inspector.list_modules(app_id, branch)
        return ModuleListResponse(
            appId=app_id,
            modules=[ModuleInfo(**m) for m in modules],
            count=len(modules),
        )
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.exception(f"Failed to list modules for {app_id}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch modules: {e}")
