"""
Tests for module name resolution.
"""

import logging
from types import SimpleNamespace

import pytest

from app.utils.module_resolver import (
    UNRESOLVED_MODULE_LABEL,
    module_label,
    resolve_module_name,
)


def _container(name, kind="Projects$Folder", container=None):
    return SimpleNamespace(name=name, kind=kind, container=container)


def _element(name="ACT_Do", container=None, direct_owner=None, qualified_name=None):
    return SimpleNamespace(
        name=name,
        container=container,
        direct_owner=direct_owner,
        qualified_name=qualified_name,
    )


class BrokenElement:
    """Element whose container cannot be read."""

    name = "Broken"
    direct_owner = None

    @property
    def container(self):
        raise RuntimeError("container not loaded")


class CountingContainer:
    """Container that counts how often it is traversed."""

    def __init__(self, name, kind="Projects$Folder"):
        self.name = name
        self.kind = kind
        self.next = None
        self.visits = 0

    @property
    def container(self):
        self.visits += 1
        return self.next


class TestStrategyOrder:
    """Tests for the fixed strategy order."""

    def test_direct_owner_wins(self):
        """Direct owner beats both the container chain and the qualified name."""
        root = _container("App", kind="Projects$Project")
        sales = _container("Sales", kind="Projects$Module", container=root)
        element = _element(
            container=sales,
            direct_owner=_container("Admin", kind="Projects$Module"),
            qualified_name="Billing.ACT_Do",
        )

        assert resolve_module_name(element) == "Admin"

    def test_container_chain_beats_qualified_name(self):
        sales = _container("Sales", kind="Projects$Module")
        element = _element(container=sales, qualified_name="Billing.ACT_Do")

        assert resolve_module_name(element) == "Sales"

    def test_direct_owner_without_name_falls_through(self):
        sales = _container("Sales", kind="Projects$Module")
        element = _element(
            container=sales, direct_owner=_container(None, kind="Projects$Module")
        )

        assert resolve_module_name(element) == "Sales"


class TestContainerChain:
    """Tests for walking up the container chain."""

    def test_nested_three_levels(self):
        """Element three folders below a module nested under the project root."""
        root = _container("App", kind="Projects$Project")
        sales = _container("Sales", kind="Projects$Module", container=root)
        level1 = _container("Orders", container=sales)
        level2 = _container("Actions", container=level1)
        level3 = _container("Private", container=level2)

        assert resolve_module_name(_element(container=level3)) == "Sales"

    def test_chain_without_module(self):
        root = _container("App", kind="Projects$Project")
        folder = _container("Loose", container=root)

        assert resolve_module_name(_element(container=folder)) is None

    def test_no_container(self):
        assert resolve_module_name(_element()) is None

    def test_custom_group_kind(self):
        group = _container("Reports", kind="Custom$Group")
        element = _element(container=_container("Inner", container=group))

        assert resolve_module_name(element, group_kind="Custom$Group") == "Reports"
        assert resolve_module_name(element) is None


class TestQualifiedNameHeuristic:
    """Tests for the qualified name fallback."""

    def test_first_segment(self):
        element = _element(qualified_name="Billing.ProcessInvoice")

        assert resolve_module_name(element) == "Billing"

    def test_no_delimiter(self):
        element = _element(qualified_name="ProcessInvoice")

        assert resolve_module_name(element) is None

    def test_empty_first_segment(self):
        element = _element(qualified_name=".ProcessInvoice")

        assert resolve_module_name(element) is None

    def test_used_after_failed_walk(self):
        folder = _container("Loose", container=_container("App", kind="Projects$Project"))
        element = _element(container=folder, qualified_name="Billing.ProcessInvoice")

        assert resolve_module_name(element) == "Billing"


class TestFaultContainment:
    """Tests for errors raised while reading elements."""

    def test_error_returns_none(self):
        assert resolve_module_name(BrokenElement()) is None

    def test_error_is_logged_with_name(self, caplog):
        with caplog.at_level(logging.WARNING, logger="app.utils.module_resolver"):
            resolve_module_name(BrokenElement())

        assert "Broken" in caplog.text

    def test_batch_with_one_broken_element(self):
        sales = _container("Sales", kind="Projects$Module")
        elements = [
            _element(container=sales),
            BrokenElement(),
            _element(qualified_name="Billing.ProcessInvoice"),
            _element(),
        ]

        results = [resolve_module_name(e) for e in elements]

        assert results == ["Sales", None, "Billing", None]

    def test_error_in_owner_name(self):
        class Owner:
            @property
            def name(self):
                raise AttributeError("partially loaded")

        element = _element(
            direct_owner=Owner(), qualified_name="Billing.ProcessInvoice"
        )

        assert resolve_module_name(element) is None


class TestTermination:
    """Tests for the container hop limit."""

    @pytest.mark.parametrize("max_depth,expected", [(10, "Sales"), (9, None)])
    def test_depth_limit(self, max_depth, expected):
        node = _container("Sales", kind="Projects$Module")
        for i in range(9):
            node = _container(f"Folder{i}", container=node)

        assert resolve_module_name(_element(container=node), max_depth=max_depth) == expected

    def test_cycle_terminates(self):
        first = CountingContainer("A")
        second = CountingContainer("B")
        first.next = second
        second.next = first

        result = resolve_module_name(_element(container=first), max_depth=8)

        assert result is None
        assert first.visits + second.visits == 8

    def test_cycle_falls_back_to_qualified_name(self):
        first = CountingContainer("A")
        first.next = first

        element = _element(container=first, qualified_name="Billing.ProcessInvoice")

        assert resolve_module_name(element, max_depth=4) == "Billing"


class TestDeterminism:
    def test_repeated_calls_agree(self):
        sales = _container("Sales", kind="Projects$Module")
        element = _element(container=_container("Orders", container=sales))

        assert resolve_module_name(element) == resolve_module_name(element) == "Sales"


class TestModuleLabel:
    def test_resolved_name(self):
        assert module_label("Sales") == "Sales"

    def test_unresolved(self):
        assert module_label(None) == UNRESOLVED_MODULE_LABEL

    def test_label_is_not_an_identifier(self):
        assert not UNRESOLVED_MODULE_LABEL.isidentifier()
