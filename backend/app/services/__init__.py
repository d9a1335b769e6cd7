"""
Backend services for the Mendix Model API.

- Model Index: read-only views over an opened model
- Working Copy: temporary working copy lifecycle
- Inspector: enumeration and response shaping
"""

from app.services.inspector import ModelInspectorService
from app.services.model_index import ModelContainer, ModelElement, ModelIndex
from app.services.working_copy import WorkingCopy, temporary_working_copy

__all__ = [
    "ModelInspectorService",
    "ModelIndex",
    "ModelContainer",
    "ModelElement",
    "WorkingCopy",
    "temporary_working_copy",
]
