import json
import pytest
from pydantic import BaseModel

from ecomart.bot.errors import UnknownToolError, ArgumentDecodingError
from ecomart.bot.functions import Functions, Tool, ToolDispatcher, ShippingFunctions
from tests.common import MyFunctions, NumbersArgs


class StaticFunctions(Functions):

    def __init__(self, tools, **kwargs):
        super().__init__(**kwargs)
        self.tools = tools

    def get_tools(self):
        return self.tools


class TestToolDispatcher:

    def test_dispatch_registered_tool(self):
        dispatcher = ToolDispatcher(MyFunctions())
        assert dispatcher.dispatch("use_numbers", '{"a": 7, "b": 2}') == '{"value": 5}'

    def test_dispatch_accepts_mapping(self):
        dispatcher = ToolDispatcher(MyFunctions())
        assert json.loads(dispatcher.dispatch("use_numbers", {"a": 1, "b": 3})) == {"value": -2}

    def test_unknown_tool(self):
        dispatcher = ToolDispatcher(MyFunctions())
        with pytest.raises(UnknownToolError) as exc_info:
            dispatcher.dispatch("not_a_tool", "{}")
        assert exc_info.value.name == "not_a_tool"

    @pytest.mark.parametrize("arguments", ["{not json", "[1, 2]", '{"a": "x", "b": 1}', '{"a": 1}', ""])
    def test_argument_decoding_errors(self, arguments):
        dispatcher = ToolDispatcher(MyFunctions())
        with pytest.raises(ArgumentDecodingError):
            dispatcher.dispatch("use_numbers", arguments)

    def test_result_serialization(self):
        class Empty(BaseModel):
            pass

        class Price(BaseModel):
            value: int

        functions = StaticFunctions([
            Tool(name="as_dict", description="", args_model=Empty, handler=lambda args: {"ok": True}),
            Tool(name="as_model", description="", args_model=Empty, handler=lambda args: Price(value=3)),
            Tool(name="as_number", description="", args_model=Empty, handler=lambda args: 42),
        ])
        dispatcher = ToolDispatcher(functions)
        assert dispatcher.dispatch("as_dict", None) == '{"ok": true}'
        assert dispatcher.dispatch("as_model", "{}") == '{"value":3}'
        assert dispatcher.dispatch("as_number", "{}") == "42"

    def test_duplicate_names_rejected_at_construction(self):
        tool = Tool(name="twice", description="", args_model=NumbersArgs, handler=lambda args: 0)
        with pytest.raises(ValueError):
            ToolDispatcher(StaticFunctions([tool, tool]))

    @pytest.mark.parametrize("name", ["", "has space", "x" * 65, "dots.not.allowed"])
    def test_invalid_names_rejected_at_construction(self, name):
        tool = Tool(name=name, description="", args_model=NumbersArgs, handler=lambda args: 0)
        with pytest.raises(ValueError):
            ToolDispatcher(StaticFunctions([tool]))

    def test_non_callable_handler_rejected(self):
        tool = Tool(name="broken", description="", args_model=NumbersArgs, handler="not callable")
        with pytest.raises(ValueError):
            ToolDispatcher(StaticFunctions([tool]))


class TestShippingFunctions:

    def test_registry(self):
        dispatcher = ToolDispatcher(ShippingFunctions())
        assert dispatcher.tool_names() == ["calculate_shipping"]

    def test_calculate_shipping(self):
        dispatcher = ToolDispatcher(ShippingFunctions())
        result = dispatcher.dispatch("calculate_shipping", '{"origin": "SP", "destination": "RJ", "weight_kg": 1}')
        assert result == "12.00"

    def test_calculate_shipping_unknown_state(self):
        dispatcher = ToolDispatcher(ShippingFunctions())
        with pytest.raises(ArgumentDecodingError):
            dispatcher.dispatch("calculate_shipping", '{"origin": "ZZ", "destination": "RJ", "weight_kg": 1}')

    @pytest.mark.parametrize("arguments", [
        '{"origin": "SP", "destination": "RJ", "weight_kg": 1e30}',
        '{"origin": "SP", "destination": "RJ", "weight_kg": Infinity}',
        '{"origin": "SP", "destination": "RJ", "weight_kg": NaN}',
        '{"origin": "SP", "destination": "RJ", "weight_kg": 1, "quantity": 100000000}',
    ])
    def test_calculate_shipping_out_of_range(self, arguments):
        dispatcher = ToolDispatcher(ShippingFunctions())
        with pytest.raises(ArgumentDecodingError):
            dispatcher.dispatch("calculate_shipping", arguments)

    def test_tool_definitions(self):
        definitions = ToolDispatcher(ShippingFunctions()).tool_definitions()
        assert len(definitions) == 1
        function = definitions[0]["function"]
        assert definitions[0]["type"] == "function"
        assert function["name"] == "calculate_shipping"
        assert set(function["parameters"]["properties"]) == {"origin", "destination", "weight_kg", "quantity"}
        assert set(function["parameters"]["required"]) == {"origin", "destination", "weight_kg"}
