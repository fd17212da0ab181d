"""Dispatch gateway: validate, route and wrap every tool call."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import UnknownToolError, ValidationError
from .models import ToolArguments, ToolResponse
from .operations import PlaylistService
from .registry import TOOLS_BY_NAME, ToolDefinition

logger = logging.getLogger("spotify-mcp.gateway")


def _describe_errors(error: PydanticValidationError) -> list[str]:
    described = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "arguments"
        described.append(f"{field}: {detail['msg']}")
    return described


class ToolGateway:
    """Routes tool calls to PlaylistService and always returns an envelope.

    Responsibilities:
    - Reject unknown tool names
    - Validate arguments against the tool's argument model before any I/O
    - Convert every raised error into an error ToolResponse
    """

    def __init__(
        self,
        service: PlaylistService,
        tools: Mapping[str, ToolDefinition] | None = None,
    ):
        """Initialize ToolGateway.

        Args:
            service: PlaylistService that performs the remote operations.
            tools: Name to definition mapping. Defaults to the registry.
        """
        self.service = service
        self.tools = tools if tools is not None else TOOLS_BY_NAME

    async def dispatch(
        self, name: str, arguments: Mapping[str, Any] | None
    ) -> ToolResponse:
        """Run one tool call.

        Never raises for errors inside the call; they are returned as
        ToolResponse with is_error set.
        """
        logger.info(f"Dispatching tool: {name}")

        try:
            definition = self._resolve(name)
            args = self._validate(definition, arguments)
            text = await definition.handler(self.service, args)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {type(e).__name__}")
            logger.debug(f"Tool {name} failure detail", exc_info=True)
            return ToolResponse.from_error(e)

        logger.info(f"Tool {name} completed")
        return ToolResponse.success(text)

    def _resolve(self, name: str) -> ToolDefinition:
        definition = self.tools.get(name)
        if definition is None:
            raise UnknownToolError(name, known=list(self.tools))
        return definition

    def _validate(
        self, definition: ToolDefinition, arguments: Mapping[str, Any] | None
    ) -> ToolArguments:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ValidationError(
                f"Invalid arguments for {definition.name}: expected an object",
                errors=[f"arguments: got {type(arguments).__name__}"],
            )

        try:
            return definition.arguments.model_validate(dict(arguments))
        except PydanticValidationError as e:
            errors = _describe_errors(e)
            raise ValidationError(
                f"Invalid arguments for {definition.name}: {'; '.join(errors)}",
                errors=errors,
                context={"tool": definition.name},
            ) from e
