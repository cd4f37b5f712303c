"""LLM-powered design assistant.

Talks to an OpenAI-compatible gateway in two modes:
  1. stream_chat()       — conversational turn, streamed as SSE events;
                           a ``generate_pcb_project`` tool call becomes a
                           persisted project.
  2. generate_project()  — one-shot generation with a forced tool call and
                           automatic retry on invalid arguments.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence

from openai import APIError, AsyncOpenAI

from pcb_designer.config import get_settings
from pcb_designer.ai.llm_schemas import (
    GENERATE_PCB_TOOL,
    GENERATE_PCB_TOOL_NAME,
    GENERATED_PROJECT_SCHEMA,
    ToolCallParseError,
    parse_tool_arguments,
)
from pcb_designer.ai.prompts import (
    AUTO_GENERATE_MESSAGE,
    generation_prompt,
    retry_prompt,
    system_prompt,
)
from pcb_designer.schemas.project import GeneratedProject

logger = logging.getLogger(__name__)

MAX_RETRIES = 3

ChatEvent = dict[str, Any]
ProjectHandler = Callable[[GeneratedProject, str], Awaitable[str]]
CompletionHandler = Callable[[str], Awaitable[None]]


# ─── Client Factory ───


def create_client() -> AsyncOpenAI:
    """Create an async client for the configured OpenAI-compatible gateway."""
    settings = get_settings()
    return AsyncOpenAI(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url or None,
        timeout=settings.llm_timeout,
    )


def format_sse(event: ChatEvent) -> str:
    """Encode one event as a server-sent-events frame."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def build_messages(
    message: str,
    history: Sequence[dict[str, str]] = (),
    action: str | None = None,
) -> list[dict[str, str]]:
    """System prompt, prior turns, the new user turn and optional approval."""
    messages = [{"role": "system", "content": system_prompt()}]
    messages.extend({"role": m["role"], "content": m["content"]} for m in history)
    messages.append({"role": "user", "content": message})
    if action == "generate_auto":
        messages.append({"role": "user", "content": AUTO_GENERATE_MESSAGE})
    return messages


# ─── Streaming Chat ───


async def stream_chat(
    message: str,
    client: AsyncOpenAI,
    history: Sequence[dict[str, str]] = (),
    action: str | None = None,
    on_project: ProjectHandler | None = None,
    on_complete: CompletionHandler | None = None,
) -> AsyncIterator[ChatEvent]:
    """Stream one assistant turn.

    Yields ``text``, ``tool_start``, ``project_created`` and ``error`` events.
    ``on_project`` persists a generated project and returns its id;
    ``on_complete`` receives the full assistant text when no tool was called.
    """
    settings = get_settings()
    full_response = ""
    tool_arguments = ""
    tool_called = False

    try:
        stream = await client.chat.completions.create(
            model=settings.llm_model,
            messages=build_messages(message, history, action),
            tools=[GENERATE_PCB_TOOL],
            tool_choice="auto",
            temperature=settings.llm_temperature,
            stream=True,
        )

        async for chunk in stream:
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            delta = choice.delta

            if delta is not None and delta.content:
                full_response += delta.content
                yield {"type": "text", "content": delta.content}

            if delta is not None and delta.tool_calls:
                tool_called = True
                function = delta.tool_calls[0].function
                if function is not None and function.name:
                    logger.info("Tool call started: %s", function.name)
                    yield {"type": "tool_start", "tool": function.name}
                if function is not None and function.arguments:
                    tool_arguments += function.arguments

            if choice.finish_reason == "tool_calls":
                yield await _handle_tool_call(tool_arguments, full_response, on_project)

    except APIError as e:
        logger.error("LLM gateway error: %s", e)
        yield {"type": "error", "error": f"AI gateway error: {e}"}
        return

    if not tool_called and on_complete is not None:
        try:
            await on_complete(full_response)
        except Exception as e:
            logger.exception("Failed to save chat turn")
            yield {"type": "error", "error": f"Failed to save conversation: {e}"}


async def _handle_tool_call(
    raw_arguments: str,
    full_response: str,
    on_project: ProjectHandler | None,
) -> ChatEvent:
    try:
        project = parse_tool_arguments(raw_arguments)
        project_id = await on_project(project, full_response) if on_project else None
    except ToolCallParseError as e:
        logger.warning("Rejected tool call: %s", e.errors)
        return {"type": "error", "error": f"Failed to create project: {e.errors}"}
    except Exception as e:
        logger.exception("Failed to persist generated project")
        return {"type": "error", "error": f"Failed to create project: {e}"}

    logger.info(
        "Project created — id=%s, components=%d, connections=%d",
        project_id,
        len(project.components),
        len(project.connections),
    )
    return {
        "type": "project_created",
        "projectId": project_id,
        "project": project.model_dump(mode="json", by_alias=True),
    }


# ─── One-shot Generation ───


async def _forced_tool_call(client: AsyncOpenAI, messages: list[dict[str, str]]) -> str:
    settings = get_settings()
    response = await client.chat.completions.create(
        model=settings.llm_model,
        messages=messages,
        tools=[GENERATE_PCB_TOOL],
        tool_choice={"type": "function", "function": {"name": GENERATE_PCB_TOOL_NAME}},
        temperature=settings.llm_temperature,
    )
    tool_calls = response.choices[0].message.tool_calls or []
    if not tool_calls:
        return ""
    return tool_calls[0].function.arguments or ""


async def generate_project(
    description: str,
    client: AsyncOpenAI | None = None,
) -> GeneratedProject:
    """Generate a project from a description without conversation.

    Retries with the validation error in context when the tool arguments
    do not match the GeneratedProject schema.
    """
    client = client or create_client()
    base_messages = [
        {"role": "system", "content": system_prompt()},
        {"role": "user", "content": generation_prompt(description)},
    ]
    messages = base_messages
    last_error: ToolCallParseError | None = None

    for attempt in range(MAX_RETRIES):
        if last_error is not None:
            messages = base_messages + [
                {
                    "role": "user",
                    "content": retry_prompt(
                        last_error.raw_arguments,
                        last_error.errors,
                        GENERATED_PROJECT_SCHEMA,
                    ),
                }
            ]

        raw_arguments = await _forced_tool_call(client, messages)

        try:
            project = parse_tool_arguments(raw_arguments)
            logger.info(
                "[generation] Success on attempt %d/%d", attempt + 1, MAX_RETRIES
            )
            return project
        except ToolCallParseError as e:
            last_error = e
            logger.warning(
                "[generation] Attempt %d: invalid arguments — %s", attempt + 1, e.errors
            )

    raise RuntimeError(
        f"[generation] Failed after {MAX_RETRIES} attempts. Last error: {last_error}"
    )
