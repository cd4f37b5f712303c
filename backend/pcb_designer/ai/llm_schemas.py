"""Tool definition and structured-output validation for the LLM gateway.

The ``generate_pcb_project`` tool schema is derived from the
GeneratedProject model so that:
1. The model is told exactly which payload to emit.
2. The same model validates the streamed arguments before persistence.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from pcb_designer.schemas.project import GeneratedProject

GENERATE_PCB_TOOL_NAME = "generate_pcb_project"

GENERATED_PROJECT_SCHEMA: dict[str, Any] = GeneratedProject.model_json_schema()

GENERATE_PCB_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": GENERATE_PCB_TOOL_NAME,
        "description": (
            "Generate a complete PCB project with components, connections and "
            "power analysis. Use once the user approves the specification."
        ),
        "parameters": GENERATED_PROJECT_SCHEMA,
    },
}


def schema_to_prompt_string(schema: dict[str, Any]) -> str:
    """Format a JSON schema for embedding in an LLM prompt."""
    return json.dumps(schema, indent=2)


class ToolCallParseError(Exception):
    """Raised when tool-call arguments are not a valid project payload."""

    def __init__(self, tool: str, raw_arguments: str, errors: str):
        self.tool = tool
        self.raw_arguments = raw_arguments
        self.errors = errors
        super().__init__(f"[{tool}] Invalid tool arguments: {errors}")


def parse_tool_arguments(raw_arguments: str) -> GeneratedProject:
    """Parse accumulated tool-call JSON into a GeneratedProject."""
    try:
        data = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        raise ToolCallParseError(
            tool=GENERATE_PCB_TOOL_NAME,
            raw_arguments=raw_arguments,
            errors=f"invalid JSON: {e}",
        ) from e

    try:
        return GeneratedProject.model_validate(data)
    except ValidationError as e:
        raise ToolCallParseError(
            tool=GENERATE_PCB_TOOL_NAME,
            raw_arguments=raw_arguments,
            errors=str(e),
        ) from e
