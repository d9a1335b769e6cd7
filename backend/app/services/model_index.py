"""
Read-only views over an opened model.

Builds container and element nodes from the model service's structure
payload. Nodes reference their container weakly; the ``ModelIndex``
owns every node for the lifetime of a request.
"""

import logging
import weakref
from typing import Any, Iterator

from app.utils.module_resolver import DEFAULT_MAX_DEPTH, resolve_module_name
from app.utils.structure_types import (
    DOMAIN_MODEL_KIND,
    MICROFLOW_KIND,
    MODULE_KIND,
)

logger = logging.getLogger(__name__)


class ModelNode:
    """Base class for nodes with a weak back-reference to their container."""

    def __init__(self, id: str, name: str | None, kind: str):
        self.id = id
        self.name = name
        self.kind = kind
        self._container_ref: weakref.ref | None = None

    @property
    def container(self) -> "ModelContainer | None":
        if self._container_ref is None:
            return None
        return self._container_ref()

    @container.setter
    def container(self, value: "ModelContainer | None") -> None:
        self._container_ref = weakref.ref(value) if value is not None else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, kind={self.kind!r})"


class ModelContainer(ModelNode):
    """A project, module, or folder."""


class ModelElement(ModelNode):
    """
    A model unit such as a domain model or microflow.

    ``direct_owner`` is set when the model service reports the owning
    module directly.
    """

    def __init__(
        self,
        id: str,
        name: str | None,
        kind: str,
        qualified_name: str | None = None,
    ):
        super().__init__(id, name, kind)
        self.qualified_name = qualified_name
        self._owner_ref: weakref.ref | None = None

    @property
    def direct_owner(self) -> ModelContainer | None:
        if self._owner_ref is None:
            return None
        return self._owner_ref()

    @direct_owner.setter
    def direct_owner(self, value: ModelContainer | None) -> None:
        self._owner_ref = weakref.ref(value) if value is not None else None


class ModelIndex:
    """
    Index of the containers and units of one opened model.

    Example payload:
        {
            "containers": [{"id": "p", "name": "App", "structureType": "Projects$Project"}],
            "units": [{"id": "mf1", "name": "ACT_Save", "qualifiedName": "Sales.ACT_Save",
                       "structureType": "Microflows$Microflow", "containerId": "f1"}],
        }
    """

    def __init__(
        self,
        containers: dict[str, ModelContainer],
        elements: dict[str, ModelElement],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.containers = containers
        self.elements = elements
        self.max_depth = max_depth

    @classmethod
    def from_structure(
        cls, payload: dict[str, Any], max_depth: int = DEFAULT_MAX_DEPTH
    ) -> "ModelIndex":
        """Build an index from the model service's structure payload."""
        containers: dict[str, ModelContainer] = {}
        for item in payload.get("containers", []):
            containers[item["id"]] = ModelContainer(
                id=item["id"],
                name=item.get("name"),
                kind=item.get("structureType", ""),
            )

        for item in payload.get("containers", []):
            parent_id = item.get("containerId")
            if parent_id:
                parent = containers.get(parent_id)
                if parent is None:
                    logger.debug(
                        "Container %s references unknown container %s",
                        item["id"],
                        parent_id,
                    )
                containers[item["id"]].container = parent

        elements: dict[str, ModelElement] = {}
        for item in payload.get("units", []):
            element = ModelElement(
                id=item["id"],
                name=item.get("name"),
                kind=item.get("structureType", ""),
                qualified_name=item.get("qualifiedName"),
            )
            container_id = item.get("containerId")
            if container_id:
                element.container = containers.get(container_id)
            module_id = item.get("moduleId")
            if module_id:
                element.direct_owner = containers.get(module_id)
            elements[element.id] = element

        logger.debug(
            "Indexed %d containers and %d units", len(containers), len(elements)
        )
        return cls(containers, elements, max_depth=max_depth)

    def module_of(self, element: ModelElement) -> str | None:
        """Resolve the module name of an element."""
        return resolve_module_name(element, max_depth=self.max_depth)

    def modules(self) -> list[ModelContainer]:
        """Get all module containers, sorted by name."""
        return sorted(
            (c for c in self.containers.values() if c.kind == MODULE_KIND),
            key=lambda c: c.name or "",
        )

    def units_of_kind(self, kind: str) -> Iterator[ModelElement]:
        for element in self.elements.values():
            if element.kind == kind:
                yield element

    def all_domain_models(self) -> list[ModelElement]:
        return list(self.units_of_kind(DOMAIN_MODEL_KIND))

    def all_microflows(self) -> list[ModelElement]:
        return list(self.units_of_kind(MICROFLOW_KIND))

    def find_domain_model(self, module_name: str) -> ModelElement | None:
        """Find the domain model belonging to a module (exact name match)."""
        return next(
            (
                dm
                for dm in self.all_domain_models()
                if self.module_of(dm) == module_name
            ),
            None,
        )

    def microflows_in_module(self, module_name: str | None) -> list[ModelElement]:
        """
        Get microflows whose resolved module matches ``module_name``.

        Passing None returns every microflow.
        """
        microflows = self.all_microflows()
        if module_name is None:
            return microflows
        return [mf for mf in microflows if self.module_of(mf) == module_name]
