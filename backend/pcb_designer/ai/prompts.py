"""Prompt templates for the PCB design assistant.

Each function returns plain strings so prompt engineering stays separate
from the streaming and tool-call handling in ``chat``.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from pcb_designer.ai.llm_schemas import GENERATE_PCB_TOOL_NAME, schema_to_prompt_string
from pcb_designer.catalog.library import COMPONENT_LIBRARY
from pcb_designer.schemas.component import ComponentSpec

AUTO_GENERATE_MESSAGE = (
    "Yes, generate the complete project automatically with all the specifications!"
)


def catalog_for_prompt(
    library: Mapping[str, ComponentSpec] = COMPONENT_LIBRARY,
) -> str:
    """Serialize the component catalog grouped by category."""
    grouped: dict[str, dict[str, Any]] = {}
    for comp_id, spec in library.items():
        grouped.setdefault(spec.category, {})[comp_id] = spec.model_dump(
            exclude={"id", "category", "datasheet", "symbol"},
            exclude_none=True,
        )
    return json.dumps(grouped, indent=2, ensure_ascii=False)


def system_prompt() -> str:
    """Return the staged design-assistant system prompt."""

    return f"""You are an assistant specialised in AI-driven printed circuit board (PCB) design.

YOUR MISSION: guide the user through a structured process from specification to a working prototype.

AVAILABLE COMPONENT LIBRARY:
{catalog_for_prompt()}

5-STAGE PROCESS:

STAGE 1 - REQUIREMENTS ANALYSIS:
When the user describes a project, ALWAYS ask:
1. What is the main function of the device?
2. Does it need connectivity? (WiFi, LoRa, Bluetooth)
3. Which sensors or interfaces are required?
4. How will it be powered? (USB, battery, solar)
5. Maximum board size?
6. Special requirements? (waterproof, low power)

STAGE 2 - SPECIFICATION PROPOSAL:
Based on the answers, propose a microcontroller, communication modules,
sensors, power system, consumption and battery-life estimate and board size.
Ask: "Do these specifications meet your needs, or should I generate the project automatically?"

STAGE 3 - AUTOMATIC GENERATION (once approved):
Call the `{GENERATE_PCB_TOOL_NAME}` tool with:
- Every component with a unique reference designator (U1, R1, C1, J1 ...)
- Connections between components by reference, with a signal name (VCC, GND, TX, RX ...)
- Power analysis (voltage, active and sleep current in mA)
- Board specs (width and height in mm, 2 or 4 layers)

STAGE 4 - DRC VALIDATION:
After generating, check that every component is powered, every connection
makes sense, bypass capacitors are present and total consumption is plausible.

STAGE 5 - DELIVERY:
Confirm the project is ready for 3D preview, schematic download and fabrication quotes.

RULES:
- Be technical but approachable.
- Explain component choices.
- Always validate electrical requirements (voltage, current).
- Never invent components - use only the library above.
- Answer in markdown, concise but complete."""


def generation_prompt(description: str) -> str:
    """User prompt that asks for a one-shot project generation."""

    return f"""Generate the complete PCB project for this device now, without further questions:

\"{description}\"

Call `{GENERATE_PCB_TOOL_NAME}` with the full project."""


def retry_prompt(previous_arguments: str, error_message: str, schema: dict[str, Any]) -> str:
    """Correction prompt when the tool arguments fail validation."""

    return f"""Your previous `{GENERATE_PCB_TOOL_NAME}` call had invalid arguments:
{previous_arguments}

The validation error was:
{error_message}

REQUIRED SCHEMA:
{schema_to_prompt_string(schema)}

Call `{GENERATE_PCB_TOOL_NAME}` again with corrected arguments."""
