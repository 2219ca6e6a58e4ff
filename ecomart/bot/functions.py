import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, Union
from abc import ABC, abstractmethod
from pydantic import BaseModel, ValidationError
from ecomart.bot.errors import UnknownToolError, ArgumentDecodingError
from ecomart.bot.shipping import ShippingCalculator, ShippingRequest

LOGGER = logging.getLogger(__name__)

TOOL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]

    def definition(self) -> Dict[str, Any]:
        """The tool in the OpenAI function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(),
            }
        }


class Functions(ABC):

    def __init__(self, *args, **kwargs):
        self.config = kwargs.get('config')
        if self.config is None:
            LOGGER.debug("No config provided to functions")

    def get_config(self):
        return self.config

    @abstractmethod
    def get_tools(self) -> List[Tool]:
        pass


class ShippingFunctions(Functions):

    def __init__(self, *args, calculator: ShippingCalculator = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.calculator = calculator if calculator is not None else ShippingCalculator()

    def calculate_shipping(self, request: ShippingRequest) -> str:
        price = self.calculator.calculate(request)
        LOGGER.info(f"Calculated shipping from {request.origin} to {request.destination}: {price}")
        return str(price)

    def get_tools(self) -> List[Tool]:
        return [
            Tool(name="calculate_shipping",
                 description="Calculates the shipping price in BRL for an order between two Brazilian states.",
                 args_model=ShippingRequest,
                 handler=self.calculate_shipping),
        ]


class ToolDispatcher:
    """
    Closed mapping from tool name to local capability. The registry is built
    and validated once, at construction.
    """

    def __init__(self, functions: Functions):
        self.functions = functions
        self._tools: Dict[str, Tool] = {}
        for tool in functions.get_tools():
            if not TOOL_NAME_PATTERN.match(tool.name):
                raise ValueError(f"Invalid tool name: '{tool.name}'")
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: '{tool.name}'")
            if not callable(tool.handler):
                raise ValueError(f"Handler for tool '{tool.name}' is not callable")
            self._tools[tool.name] = tool
        LOGGER.debug(f"Registered tools: {list(self._tools.keys())}")

    def tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def tool_definitions(self) -> List[Dict[str, Any]]:
        return [tool.definition() for tool in self._tools.values()]

    def decode_arguments(self, tool: Tool, arguments: Union[str, Dict[str, Any], None]) -> BaseModel:
        if arguments is None or arguments == "":
            arguments = {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError as e:
                raise ArgumentDecodingError(tool.name, f"invalid JSON: {e}") from e
        if not isinstance(arguments, dict):
            raise ArgumentDecodingError(tool.name, f"expected a JSON object, got {type(arguments).__name__}")
        try:
            return tool.args_model.model_validate(arguments)
        except ValidationError as e:
            raise ArgumentDecodingError(tool.name, str(e)) from e

    def dispatch(self, name: str, arguments: Union[str, Dict[str, Any], None]) -> str:
        tool = self._tools.get(name)
        if tool is None:
            LOGGER.error(f"No function was defined: {name}")
            raise UnknownToolError(name)
        try:
            args = self.decode_arguments(tool, arguments)
        except ArgumentDecodingError as e:
            LOGGER.error(f"Error decoding arguments for {name}: {e}")
            raise
        LOGGER.debug(f"Calling function {name}")
        result = tool.handler(args)
        if isinstance(result, BaseModel):
            return result.model_dump_json()
        if isinstance(result, (dict, list)):
            return json.dumps(result)
        return str(result)
