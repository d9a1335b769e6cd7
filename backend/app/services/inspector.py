"""
Model Inspector Service.

Opens a temporary working copy per call, enumerates domain models and
microflows, and shapes model units into JSON-friendly dictionaries.
"""

import asyncio
import logging
from typing import Any

from app.clients.platform_client import MendixPlatformClient
from app.services.model_index import ModelElement, ModelIndex
from app.services.working_copy import WorkingCopy, temporary_working_copy
from app.utils.module_resolver import DEFAULT_MAX_DEPTH, module_label
from app.utils.structure_types import (
    DOMAIN_MODEL_KIND,
    MICROFLOW_KIND,
    UNKNOWN_ATTRIBUTE_TYPE,
    VOID_RETURN_TYPE,
    short_type_name,
)

logger = logging.getLogger(__name__)


class ModelInspectorService:
    """
    Service for reading and changing app models through working copies.

    Each public method opens its own working copy, so calls never share
    model state.
    """

    def __init__(
        self,
        client: MendixPlatformClient,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.client = client
        self.max_depth = max_depth

    async def _open(self, working_copy: WorkingCopy) -> ModelIndex:
        return await working_copy.open_model(max_depth=self.max_depth)

    async def list_modules(self, app_id: str, branch: str) -> list[dict[str, Any]]:
        """
        List the modules of an app with the number of units in each.

        Units are counted under the module they resolve to.
        """
        async with temporary_working_copy(self.client, app_id, branch) as wc:
            index = await self._open(wc)

            counts: dict[str, dict[str, int]] = {}
            for element in index.elements.values():
                module_name = index.module_of(element)
                if module_name is None:
                    continue
                bucket = counts.setdefault(
                    module_name, {"domainModels": 0, "microflows": 0}
                )
                if element.kind == DOMAIN_MODEL_KIND:
                    bucket["domainModels"] += 1
                elif element.kind == MICROFLOW_KIND:
                    bucket["microflows"] += 1

            return [
                {
                    "id": module.id,
                    "name": module.name,
                    **counts.get(module.name, {"domainModels": 0, "microflows": 0}),
                }
                for module in index.modules()
            ]

    async def list_entities(
        self, app_id: str, module_name: str, branch: str
    ) -> list[dict[str, Any]] | None:
        """
        List the entities of a module's domain model.

        Returns:
            Entity dictionaries, or None if the module has no domain model
        """
        async with temporary_working_copy(self.client, app_id, branch) as wc:
            index = await self._open(wc)
            domain_model = index.find_domain_model(module_name)
            if domain_model is None:
                return None

            loaded = await wc.load(domain_model)
            return [self._entity_to_dict(e) for e in loaded.get("entities", [])]

    async def list_microflows(
        self, app_id: str, module_name: str | None, branch: str
    ) -> list[dict[str, Any]]:
        """
        List microflows, optionally restricted to one module.

        Each microflow is loaded to report its return type; loads run
        concurrently.
        """
        async with temporary_working_copy(self.client, app_id, branch) as wc:
            index = await self._open(wc)
            microflows = index.microflows_in_module(module_name)
            logger.info(
                "Loading %d microflows for %s", len(microflows), module_name or "all modules"
            )

            loaded = await self._load_all(wc, microflows)
            return [
                self._microflow_to_dict(mf, data, index.module_of(mf))
                for mf, data in zip(microflows, loaded)
            ]

    async def get_microflow(
        self,
        app_id: str,
        microflow_name: str,
        module_name: str | None,
        branch: str,
    ) -> dict[str, Any] | None:
        """
        Load a single microflow by name, including its parameters.

        Matches on the microflow name, or on the qualified name when
        ``microflow_name`` contains a dot. A ``module_name`` restricts both
        kinds of lookup.
        """
        async with temporary_working_copy(self.client, app_id, branch) as wc:
            index = await self._open(wc)
            microflow = self._find_microflow(index, microflow_name, module_name)
            if microflow is None:
                return None

            data = await wc.load(microflow)
            return self._microflow_to_dict(
                microflow, data, index.module_of(microflow), include_parameters=True
            )

    async def create_entity(
        self,
        app_id: str,
        module_name: str,
        entity_name: str,
        branch: str,
    ) -> dict[str, Any] | None:
        """
        Create an entity and commit it to the branch.

        Returns:
            The created entity, or None if the module has no domain model
        """
        async with temporary_working_copy(self.client, app_id, branch) as wc:
            index = await self._open(wc)
            domain_model = index.find_domain_model(module_name)
            if domain_model is None:
                return None

            entity = await wc.create_entity(domain_model, entity_name)
            await wc.flush_changes()
            await wc.commit()
            logger.info("Created entity %s in %s", entity.get("name"), module_name)
            return entity

    async def _load_all(
        self, wc: WorkingCopy, units: list[ModelElement]
    ) -> list[dict[str, Any]]:
        """
        Load units concurrently.

        If any load fails, the remaining loads are cancelled and settled
        before the error propagates, so none outlive the working copy.
        """
        tasks = [asyncio.ensure_future(wc.load(unit)) for unit in units]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _find_microflow(
        self,
        index: ModelIndex,
        microflow_name: str,
        module_name: str | None,
    ) -> ModelElement | None:
        candidates = index.microflows_in_module(module_name)
        if "." in microflow_name:
            return next(
                (mf for mf in candidates if mf.qualified_name == microflow_name),
                None,
            )
        return next(
            (mf for mf in candidates if mf.name == microflow_name),
            None,
        )

    def _entity_to_dict(self, entity: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": entity["id"],
            "name": entity.get("name"),
            "qualifiedName": entity.get("qualifiedName"),
            "attributes": [
                {
                    "name": attr.get("name"),
                    "type": short_type_name(attr.get("type"), UNKNOWN_ATTRIBUTE_TYPE),
                }
                for attr in entity.get("attributes", [])
            ],
        }

    def _microflow_to_dict(
        self,
        microflow: ModelElement,
        data: dict[str, Any],
        module_name: str | None,
        include_parameters: bool = False,
    ) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": data.get("id", microflow.id),
            "name": data.get("name", microflow.name),
            "qualifiedName": data.get("qualifiedName", microflow.qualified_name),
            "moduleName": module_label(module_name),
            "returnType": short_type_name(
                data.get("microflowReturnType"), VOID_RETURN_TYPE
            ),
        }
        if include_parameters:
            result["parameters"] = [
                {
                    "name": param.get("name"),
                    "type": short_type_name(param.get("type"), UNKNOWN_ATTRIBUTE_TYPE),
                }
                for param in data.get("parameters", [])
            ]
        return result
