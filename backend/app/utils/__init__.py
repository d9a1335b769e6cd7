"""
Utility modules for the Mendix Model API.
"""

from app.utils.module_resolver import module_label, resolve_module_name
from app.utils.structure_types import short_type_name

__all__ = ["resolve_module_name", "module_label", "short_type_name"]
