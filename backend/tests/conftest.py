"""
Shared fixtures: an in-memory model service behind httpx.MockTransport.
"""

import json
import re

import httpx
import pytest

from app.clients.platform_client import MendixPlatformClient

BASE_URL = "http://model-service.test"

MODEL_STRUCTURE = {
    "containers": [
        {"id": "project", "name": "ShopApp", "structureType": "Projects$Project"},
        {
            "id": "m_sales",
            "name": "Sales",
            "structureType": "Projects$Module",
            "containerId": "project",
        },
        {
            "id": "f_orders",
            "name": "Orders",
            "structureType": "Projects$Folder",
            "containerId": "m_sales",
        },
        {
            "id": "f_actions",
            "name": "Actions",
            "structureType": "Projects$Folder",
            "containerId": "f_orders",
        },
        {
            "id": "m_first",
            "name": "MyFirstModule",
            "structureType": "Projects$Module",
            "containerId": "project",
        },
    ],
    "units": [
        {
            "id": "dm_sales",
            "name": None,
            "structureType": "DomainModels$DomainModel",
            "containerId": "m_sales",
            "moduleId": "m_sales",
        },
        {
            "id": "dm_first",
            "name": None,
            "structureType": "DomainModels$DomainModel",
            "containerId": "m_first",
            "moduleId": "m_first",
        },
        {
            "id": "mf_create_order",
            "name": "ACT_CreateOrder",
            "qualifiedName": "Sales.ACT_CreateOrder",
            "structureType": "Microflows$Microflow",
            "containerId": "f_actions",
        },
        {
            "id": "mf_validate",
            "name": "SUB_ValidateOrder",
            "qualifiedName": "Sales.SUB_ValidateOrder",
            "structureType": "Microflows$Microflow",
            "containerId": "m_sales",
        },
        {
            "id": "mf_home",
            "name": "ACT_Home",
            "qualifiedName": "MyFirstModule.ACT_Home",
            "structureType": "Microflows$Microflow",
            "containerId": "m_first",
        },
        {
            "id": "mf_invoice",
            "name": "ProcessInvoice",
            "qualifiedName": "Billing.ProcessInvoice",
            "structureType": "Microflows$Microflow",
        },
        {
            "id": "mf_orphan",
            "name": "Orphan",
            "structureType": "Microflows$Microflow",
        },
    ],
}

LOADED_UNITS = {
    "dm_sales": {
        "id": "dm_sales",
        "entities": [
            {
                "id": "e_order",
                "name": "Order",
                "qualifiedName": "Sales.Order",
                "attributes": [
                    {
                        "name": "Number",
                        "type": {"structureType": "DomainModels$StringAttributeType"},
                    },
                    {"name": "Total", "type": None},
                ],
            },
            {
                "id": "e_customer",
                "name": "Customer",
                "qualifiedName": "Sales.Customer",
                "attributes": [],
            },
        ],
    },
    "dm_first": {"id": "dm_first", "entities": []},
    "mf_create_order": {
        "id": "mf_create_order",
        "name": "ACT_CreateOrder",
        "qualifiedName": "Sales.ACT_CreateOrder",
        "microflowReturnType": {"structureType": "DataTypes$BooleanType"},
        "parameters": [
            {"name": "Order", "type": {"structureType": "DataTypes$ObjectType"}},
        ],
    },
    "mf_validate": {
        "id": "mf_validate",
        "name": "SUB_ValidateOrder",
        "qualifiedName": "Sales.SUB_ValidateOrder",
        "microflowReturnType": None,
    },
    "mf_home": {
        "id": "mf_home",
        "name": "ACT_Home",
        "qualifiedName": "MyFirstModule.ACT_Home",
        "microflowReturnType": {"structureType": "DataTypes$VoidType"},
    },
    "mf_invoice": {"id": "mf_invoice", "name": "ProcessInvoice"},
    "mf_orphan": {"id": "mf_orphan", "name": "Orphan"},
}


class FakeModelService:
    """Minimal model service that records every request it receives."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []
        self.created_entities: list[dict] = []
        self.fail_model = False
        self.working_copies = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))
        self.requests.append(request)

        if method == "POST" and (m := re.fullmatch(r"/apps/([^/]+)/working-copies", path)):
            if m.group(1) == "unknown-app":
                return httpx.Response(404, json={"error": "App not found"})
            self.working_copies += 1
            return httpx.Response(
                201, json={"workingCopyId": f"wc-{self.working_copies}"}
            )

        if method == "GET" and re.fullmatch(r"/working-copies/[^/]+/model", path):
            if self.fail_model:
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json=MODEL_STRUCTURE)

        if method == "GET" and (m := re.fullmatch(r"/working-copies/[^/]+/units/([^/]+)", path)):
            unit = LOADED_UNITS.get(m.group(1))
            if unit is None:
                return httpx.Response(404, json={"error": "Unit not found"})
            return httpx.Response(200, json=unit)

        if method == "POST" and re.fullmatch(
            r"/working-copies/[^/]+/units/[^/]+/entities", path
        ):
            body = json.loads(request.content)
            entity = {"id": f"e_{body['name'].lower()}", "name": body["name"]}
            self.created_entities.append(entity)
            return httpx.Response(201, json=entity)

        if method == "POST" and re.fullmatch(r"/working-copies/[^/]+/(flush|commit)", path):
            return httpx.Response(204)

        if method == "DELETE" and re.fullmatch(r"/working-copies/[^/]+", path):
            return httpx.Response(204)

        return httpx.Response(404, json={"error": f"No route for {method} {path}"})

    def paths(self, method: str) -> list[str]:
        return [p for m, p in self.calls if m == method]


@pytest.fixture
def model_service() -> FakeModelService:
    return FakeModelService()


@pytest.fixture
def platform_client(model_service) -> MendixPlatformClient:
    return MendixPlatformClient(
        base_url=BASE_URL,
        token="test-token",
        transport=httpx.MockTransport(model_service.handler),
    )
