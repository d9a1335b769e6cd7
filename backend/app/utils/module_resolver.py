"""
Module name resolution utilities.

Determines which module a model element belongs to by trying a fixed
sequence of strategies: the element's direct owner, a walk up its
container chain, and finally the first segment of its qualified name.
"""

import logging
from functools import partial
from typing import Any, Callable

from app.utils.structure_types import MODULE_KIND

logger = logging.getLogger(__name__)

# Label reported for elements whose module could not be determined.
# Module names are identifiers, so this never matches a real module.
UNRESOLVED_MODULE_LABEL = "(unresolved)"

QUALIFIED_NAME_DELIMITER = "."

# Upper bound on container hops; real projects nest far less deeply
DEFAULT_MAX_DEPTH = 64


def _from_direct_owner(element: Any) -> str | None:
    """Read the module name from the element's direct owner shortcut."""
    owner = getattr(element, "direct_owner", None)
    if owner is None:
        return None
    return owner.name


def _from_container_chain(element: Any, group_kind: str, max_depth: int) -> str | None:
    """
    Walk up the container chain until a module container is found.

    Stops at the project root or after ``max_depth`` hops.
    """
    node = getattr(element, "container", None)
    steps = 0
    while node is not None:
        if steps >= max_depth:
            logger.warning(
                "Container chain of %r exceeds %d levels, giving up",
                getattr(element, "name", None),
                max_depth,
            )
            return None
        if node.kind == group_kind:
            return node.name
        node = node.container
        steps += 1
    return None


def _from_qualified_name(element: Any) -> str | None:
    """Take the first segment of a dotted qualified name."""
    qualified_name = getattr(element, "qualified_name", None)
    if not qualified_name or QUALIFIED_NAME_DELIMITER not in qualified_name:
        return None
    head = qualified_name.split(QUALIFIED_NAME_DELIMITER, 1)[0]
    return head or None


ResolutionStrategy = Callable[[Any], "str | None"]


def _strategies(group_kind: str, max_depth: int) -> tuple[ResolutionStrategy, ...]:
    # Order matters: structural lookups always win over the name heuristic
    return (
        _from_direct_owner,
        partial(_from_container_chain, group_kind=group_kind, max_depth=max_depth),
        _from_qualified_name,
    )


def resolve_module_name(
    element: Any,
    group_kind: str = MODULE_KIND,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str | None:
    """
    Resolve the name of the module an element belongs to.

    Args:
        element: Model element exposing ``name``, ``container``, and
            optionally ``direct_owner`` and ``qualified_name``
        group_kind: Container kind that identifies a module
        max_depth: Maximum number of container hops to follow

    Returns:
        Module name, or None if no strategy produced one. Errors raised
        while reading the element are logged and reported as None.
    """
    try:
        for strategy in _strategies(group_kind, max_depth):
            name = strategy(element)
            if name is not None:
                return name
    except Exception as e:
        logger.warning(
            "Could not resolve module for element %r: %s",
            _safe_name(element),
            e,
        )
    return None


def module_label(name: str | None) -> str:
    """Return the module name, or the unresolved label when missing."""
    return name if name is not None else UNRESOLVED_MODULE_LABEL


def _safe_name(element: Any) -> str | None:
    try:
        return getattr(element, "name", None)
    except Exception:
        return None
