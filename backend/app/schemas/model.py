"""
Pydantic models for model projection responses.

Field names follow the camelCase used by the model service so that
responses read the same as the SDK objects they describe.
"""

from pydantic import BaseModel, Field


class AttributeInfo(BaseModel):
    """An entity attribute and its short type name."""

    name: str | None = None
    type: str


class EntityInfo(BaseModel):
    """An entity in a domain model."""

    id: str
    name: str | None = None
    qualifiedName: str | None = None
    attributes: list[AttributeInfo] = Field(default_factory=list)


class EntityListResponse(BaseModel):
    """Response for the entity listing endpoint."""

    appId: str
    moduleName: str
    entities: list[EntityInfo]
    count: int


class ParameterInfo(BaseModel):
    """A microflow parameter."""

    name: str | None = None
    type: str


class MicroflowSummary(BaseModel):
    """
    A microflow as it appears in listings.

    ``moduleName`` carries the unresolved label when the owning module
    could not be determined.
    """

    id: str
    name: str | None = None
    qualifiedName: str | None = None
    moduleName: str
    returnType: str


class MicroflowInfo(MicroflowSummary):
    """A single microflow loaded with its parameters."""

    parameters: list[ParameterInfo] = Field(default_factory=list)


class MicroflowListResponse(BaseModel):
    """Response for the microflow listing endpoint."""

    appId: str
    moduleName: str
    microflows: list[MicroflowSummary]
    count: int


class ModuleInfo(BaseModel):
    """A module and the number of units it holds."""

    id: str
    name: str | None = None
    domainModels: int = 0
    microflows: int = 0


class ModuleListResponse(BaseModel):
    """Response for the module listing endpoint."""

    appId: str
    modules: list[ModuleInfo]
    count: int


class CreateEntityRequest(BaseModel):
    """Request body for creating an entity."""

    entityName: str | None = None
    moduleName: str | None = None


class CreateEntityResponse(BaseModel):
    """Response after creating an entity."""

    success: bool
    message: str
    entityId: str
    entityName: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    message: str
