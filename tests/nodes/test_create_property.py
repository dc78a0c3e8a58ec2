"""Tests for CreatePropertyHandler."""

import math

import pytest

from nodetree.db.seed import CPU_ID, GRAPHICS_ID
from nodetree.errors import BusinessRuleError, InvalidCommandError, NotFoundError
from nodetree.models import NodeId, NodePropertyId
from nodetree.nodes.commands import CreatePropertyCommand


class TestCreateProperty:
    async def test_adds_property(self, service):
        prop_id = await service.create_property_handler(
            CreatePropertyCommand(node_id=GRAPHICS_ID, name=" Clock ", value=1.724752)
        )
        prop = await service.properties.get_by_id(NodePropertyId.parse(prop_id))
        assert prop.name == "Clock"
        assert prop.value.value == 1.724752
        assert prop.node_id == NodeId.parse(GRAPHICS_ID)

    @pytest.mark.parametrize("value", [0, -40, 1e-9])
    async def test_accepts_zero_negative_and_tiny(self, service, value):
        prop_id = await service.create_property_handler(
            CreatePropertyCommand(node_id=CPU_ID, name="Offset", value=value)
        )
        prop = await service.properties.get_by_id(NodePropertyId.parse(prop_id))
        assert prop.value.value == value

    async def test_duplicate_name_rejected(self, service):
        with pytest.raises(BusinessRuleError) as exc_info:
            await service.create_property_handler(
                CreatePropertyCommand(node_id=CPU_ID, name="Cores", value=8)
            )
        assert str(exc_info.value) == f'Property with name "Cores" already exists for node {CPU_ID}'

    async def test_same_name_on_other_node(self, service):
        await service.create_property_handler(
            CreatePropertyCommand(node_id=GRAPHICS_ID, name="Cores", value=2048)
        )
        props = await service.properties.get_all_by_node_path("/AlphaPC/Processing/Graphics")
        assert [p.name for p in props] == ["Cores", "Memory"]

    async def test_unknown_node_not_found(self, service):
        missing = str(NodeId.new())
        with pytest.raises(NotFoundError, match=f"Node with id {missing} not found"):
            await service.create_property_handler(
                CreatePropertyCommand(node_id=missing, name="X", value=1)
            )

    async def test_invalid_command(self, service):
        with pytest.raises(InvalidCommandError) as exc_info:
            await service.create_property_handler(
                CreatePropertyCommand(node_id="invalid-uuid", name="   ", value=math.inf)
            )
        assert [(e.path, e.message) for e in exc_info.value.errors] == [
            (("node_id",), "Invalid UUID"),
            (("name",), "Property name cannot be empty"),
            (("value",), "Property value must be a valid number"),
        ]
