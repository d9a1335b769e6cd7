"""
Microflow endpoints.

Lists microflows per module and loads single microflows on demand.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import get_settings
from app.dependencies import get_inspector, require_read
from app.routers.errors import PASSTHROUGH_ERRORS
from app.schemas.model import MicroflowInfo, MicroflowListResponse, MicroflowSummary
from app.services.inspector import ModelInspectorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apps", tags=["microflows"], dependencies=[Depends(require_read)])

# moduleName value that lists microflows of every module
ALL_MODULES = "*"


@router.get("/{app_id}/microflows", response_model=MicroflowListResponse)
async def list_microflows(
    app_id: str,
    inspector: Annotated[ModelInspectorService, Depends(get_inspector)],
    module_name: Annotated[
        str | None,
        Query(alias="moduleName", description="Module to list, or * for all modules"),
    ] = None,
    branch: Annotated[str | None, Query(description="Branch to check out")] = None,
) -> MicroflowListResponse:
    """
    List microflows with their return types.

    Microflows are matched to the requested module by exact name.
    """
    settings = get_settings()
    module_name = module_name or settings.default_module_name
    branch = branch or settings.default_branch
    module_filter = None if module_name == ALL_MODULES else module_name

    try:
        microflows = await inspector.list_microflows(app_id, module_filter, branch)
        return MicroflowListResponse(
            appId=app_id,
            moduleName=module_name,
            microflows=[MicroflowSummary(**mf) for mf in microflows],
            count=len(microflows),
        )
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.exception(f"Failed to fetch microflows for {app_id}/{module_name}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch microflows: {e}")


@router.get("/{app_id}/microflows/{microflow_name}", response_model=MicroflowInfo)
async def get_microflow(
    app_id: str,
    microflow_name: str,
    inspector: Annotated[ModelInspectorService, Depends(get_inspector)],
    module_name: Annotated[
        str | None,
        Query(alias="moduleName", description="Restrict the lookup to a module"),
    ] = None,
    branch: Annotated[str | None, Query(description="Branch to check out")] = None,
) -> MicroflowInfo:
    """
    Get a single microflow, including its parameters.

    ``microflow_name`` may be a plain or a qualified name; ``moduleName``
    restricts the lookup in both cases.
    """
    branch = branch or get_settings().default_branch

    try:
        microflow = await inspector.get_microflow(
            app_id, microflow_name, module_name, branch
        )
        if microflow is None:
            raise HTTPException(
                status_code=404, detail=f"Microflow '{microflow_name}' not found"
            )
        return MicroflowInfo(**microflow)
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.exception(f"Failed to fetch microflow {microflow_name} for {app_id}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch microflow: {e}")
