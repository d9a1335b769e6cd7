"""
Model structure type tags.

Maps the model service's structure type discriminators to the short
type names reported in API responses.
"""

# Container kind that marks a module
MODULE_KIND = "Projects$Module"

# Unit kinds
DOMAIN_MODEL_KIND = "DomainModels$DomainModel"
MICROFLOW_KIND = "Microflows$Microflow"

# Type names reported when the model omits a type
UNKNOWN_ATTRIBUTE_TYPE = "Unknown"
VOID_RETURN_TYPE = "Void"


def short_type_name(type_info: dict | None, default: str) -> str:
    """
    Get the short type name for a structure type payload.

    Examples:
        {"structureType": "DomainModels$StringAttributeType"} -> "StringAttributeType"
        None -> default
    """
    if not type_info:
        return default

    structure_type = type_info.get("structureType")
    if not structure_type:
        return default

    return structure_type.rsplit("$", 1)[-1] or default
