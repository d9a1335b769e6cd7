"""
Pydantic schemas for API request/response models.
"""

from app.schemas.model import (
    AttributeInfo,
    CreateEntityRequest,
    CreateEntityResponse,
    EntityInfo,
    EntityListResponse,
    MicroflowInfo,
    MicroflowListResponse,
    MicroflowSummary,
    ModuleInfo,
    ModuleListResponse,
)

__all__ = [
    "AttributeInfo",
    "EntityInfo",
    "EntityListResponse",
    "MicroflowInfo",
    "MicroflowListResponse",
    "MicroflowSummary",
    "ModuleInfo",
    "ModuleListResponse",
    "CreateEntityRequest",
    "CreateEntityResponse",
]
