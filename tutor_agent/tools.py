"""
Tool registry for the realtime tutor.

Each tool declares a name, a description, a pydantic parameter model and an
async executor returning text. The registry handed to the model is empty by
default; tools from the catalogue are enabled by name in the worker settings.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Type

import httpx
from livekit.agents import function_tool
from pydantic import BaseModel, Field, ValidationError

from .errors import ToolError

logger = logging.getLogger(__name__)

ToolExecutor = Callable[[BaseModel], Awaitable[str]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: Type[BaseModel]
    execute: ToolExecutor

    def json_schema(self) -> dict:
        schema = self.parameters.model_json_schema()
        schema.pop("title", None)
        return schema


class ToolRegistry:
    """Name -> ToolDefinition map; an empty registry is valid."""

    def __init__(self, definitions: Optional[Iterable[ToolDefinition]] = None):
        self._tools: Dict[str, ToolDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        if definition.name in self._tools:
            raise ToolError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = definition
        logger.debug(f"Registered tool {definition.name}")
        return definition

    def tool(self, name: str, description: str, parameters: Type[BaseModel]):
        """Decorator registering an async executor as a tool."""
        def decorator(execute: ToolExecutor) -> ToolExecutor:
            self.register(ToolDefinition(name, description, parameters, execute))
            return execute
        return decorator

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolError(f"Unknown tool: {name}") from None

    def names(self) -> List[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def select(self, names: Iterable[str]) -> "ToolRegistry":
        """A new registry holding only the named tools."""
        return ToolRegistry(self.get(name) for name in names)

    async def invoke(self, name: str, raw_arguments: dict) -> str:
        """Validate raw model arguments and run the tool."""
        definition = self.get(name)
        try:
            params = definition.parameters.model_validate(raw_arguments)
        except ValidationError as e:
            raise ToolError(f"Invalid arguments for {name}: {e}") from e
        return await definition.execute(params)

    def as_function_tools(self) -> list:
        """Convert every definition into a LiveKit raw-schema function tool."""
        return [self._to_function_tool(definition) for definition in self._tools.values()]

    def _to_function_tool(self, definition: ToolDefinition):
        async def _call(raw_arguments: dict[str, object]) -> str:
            return await self.invoke(definition.name, raw_arguments)

        return function_tool(
            _call,
            raw_schema={
                "name": definition.name,
                "description": definition.description,
                "parameters": definition.json_schema(),
            },
        )


class WeatherParams(BaseModel):
    location: str = Field(description="The location to get the weather for")


WEATHER_URL = "https://wttr.in/{location}"


async def get_weather(params: WeatherParams, client: Optional[httpx.AsyncClient] = None) -> str:
    """Current conditions from wttr.in, e.g. 'Sunny +21°C'."""
    logger.debug(f"executing weather function for {params.location}")
    url = WEATHER_URL.format(location=params.location)
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await client.get(url, params={"format": "%C %t"})
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        raise ToolError(f"Weather API returned status: {response.status_code}")
    weather = response.text.strip()
    return f"The weather in {params.location} right now is {weather}."


def default_catalogue() -> ToolRegistry:
    """All tools the worker knows about; none are enabled unless configured."""
    return ToolRegistry([
        ToolDefinition(
            name="weather",
            description="Get the weather in a location",
            parameters=WeatherParams,
            execute=get_weather,
        ),
    ])
