"""Tests for tool-call parsing and the streamed design assistant.

The LLM gateway is replaced by a fake async client yielding
OpenAI-shaped chunks, so no network access is needed.
"""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIError

from pcb_designer.ai.chat import (
    MAX_RETRIES,
    build_messages,
    format_sse,
    generate_project,
    stream_chat,
)
from pcb_designer.ai.llm_schemas import (
    GENERATE_PCB_TOOL,
    GENERATE_PCB_TOOL_NAME,
    ToolCallParseError,
    parse_tool_arguments,
)
from pcb_designer.ai.prompts import AUTO_GENERATE_MESSAGE


# ─── Fixtures ───


def _payload(**overrides) -> dict:
    payload = {
        "project_name": "LoRa Tracker",
        "project_type": "meshtastic",
        "description": "GPS tracker with LoRa uplink",
        "components": [
            {"reference": "U1", "name": "ESP32-WROOM-32U", "x": 0, "y": 0},
            {"reference": "U2", "name": "NEO-8M", "x": 120, "y": 0},
        ],
        "connections": [
            {"from": "U1", "to": "U2", "signal": "UART_TX"},
            {"from": "U1", "to": "U2", "signal": "GND"},
        ],
        "power_analysis": {"voltage": 3.3, "current_active": 285},
        "board_specs": {"width": 60, "height": 40, "layers": 2},
    }
    payload.update(overrides)
    return payload


def _chunk(content=None, tool_name=None, tool_args=None, finish_reason=None):
    tool_calls = None
    if tool_name is not None or tool_args is not None:
        tool_calls = [
            SimpleNamespace(
                function=SimpleNamespace(name=tool_name, arguments=tool_args)
            )
        ]
    delta = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)]
    )


class _FakeStream:
    def __init__(self, chunks):
        self._chunks = chunks

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk

    def __aiter__(self):
        return self._iterate()


def _client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _streaming_client(chunks, captured: dict | None = None):
    async def create(**kwargs):
        if captured is not None:
            captured.update(kwargs)
        return _FakeStream(chunks)

    return _client(create)


def _collect(stream) -> list[dict]:
    async def run():
        return [event async for event in stream]

    return asyncio.run(run())


def _tool_chunks(arguments: str) -> list:
    half = len(arguments) // 2
    return [
        _chunk(content="Generating your board. "),
        _chunk(tool_name=GENERATE_PCB_TOOL_NAME, tool_args=""),
        _chunk(tool_args=arguments[:half]),
        _chunk(tool_args=arguments[half:]),
        _chunk(finish_reason="tool_calls"),
    ]


# ═══════════════════════════════════════════════════════════
# Tool Schema
# ═══════════════════════════════════════════════════════════


class TestToolSchema:
    def test_tool_definition(self):
        function = GENERATE_PCB_TOOL["function"]
        assert function["name"] == "generate_pcb_project"
        assert "components" in function["parameters"]["properties"]

    def test_connection_schema_uses_wire_names(self):
        connection = GENERATE_PCB_TOOL["function"]["parameters"]["$defs"]["Connection"]
        assert {"from", "to", "signal"} <= set(connection["properties"])

    def test_parse_valid_arguments(self):
        project = parse_tool_arguments(json.dumps(_payload()))
        assert project.project_name == "LoRa Tracker"
        assert project.connections[0].from_ref == "U1"
        assert project.connections[0].to_ref == "U2"
        assert project.board_specs.layers == 2

    def test_invalid_json(self):
        with pytest.raises(ToolCallParseError) as exc_info:
            parse_tool_arguments('{"project_name": ')
        assert exc_info.value.tool == GENERATE_PCB_TOOL_NAME
        assert "invalid JSON" in exc_info.value.errors

    def test_schema_violation(self):
        raw = json.dumps(_payload(project_type="spaceship"))
        with pytest.raises(ToolCallParseError) as exc_info:
            parse_tool_arguments(raw)
        assert exc_info.value.raw_arguments == raw

    def test_loosely_typed_values_accepted(self):
        payload = _payload(
            power_analysis={"voltage": "3.3V", "current_active": "240mA"},
            board_specs={"width": 60, "height": 40, "layers": 1},
        )
        payload["components"][0]["value"] = 100
        payload["components"][0]["footprint"] = 805

        project = parse_tool_arguments(json.dumps(payload))

        assert project.power_analysis.voltage == "3.3V"
        assert project.power_analysis.current_active == "240mA"
        assert project.board_specs.layers == 1
        assert project.components[0].value == "100"
        assert project.components[0].footprint == "805"


# ═══════════════════════════════════════════════════════════
# Streaming Chat
# ═══════════════════════════════════════════════════════════


class TestStreamChat:
    def test_format_sse(self):
        frame = format_sse({"type": "text", "content": "hé"})
        assert frame == 'data: {"type": "text", "content": "hé"}\n\n'

    def test_build_messages_with_history_and_approval(self):
        history = [
            {"role": "user", "content": "LoRa node"},
            {"role": "assistant", "content": "Which battery?"},
        ]
        messages = build_messages("18650", history, action="generate_auto")
        assert messages[0]["role"] == "system"
        assert [m["content"] for m in messages[1:]] == [
            "LoRa node",
            "Which battery?",
            "18650",
            AUTO_GENERATE_MESSAGE,
        ]

    def test_text_turn_completes_with_full_response(self):
        completed: list[str] = []

        async def on_complete(text):
            completed.append(text)

        client = _streaming_client(
            [_chunk(content="Which "), _chunk(content="radio?"), _chunk(finish_reason="stop")]
        )
        events = _collect(stream_chat("Build a tracker", client, on_complete=on_complete))

        assert events == [
            {"type": "text", "content": "Which "},
            {"type": "text", "content": "radio?"},
        ]
        assert completed == ["Which radio?"]

    def test_request_carries_tool_and_stream_flag(self):
        captured: dict = {}
        client = _streaming_client([], captured)
        _collect(stream_chat("hello", client, action="generate_auto"))

        assert captured["stream"] is True
        assert captured["tools"] == [GENERATE_PCB_TOOL]
        assert captured["messages"][-1]["content"] == AUTO_GENERATE_MESSAGE

    def test_tool_call_creates_project(self):
        saved = []
        completed = []

        async def on_project(project, text):
            saved.append((project, text))
            return "project-123"

        async def on_complete(text):
            completed.append(text)

        client = _streaming_client(_tool_chunks(json.dumps(_payload())))
        events = _collect(
            stream_chat(
                "go", client, on_project=on_project, on_complete=on_complete
            )
        )

        assert [e["type"] for e in events] == ["text", "tool_start", "project_created"]
        assert events[1]["tool"] == GENERATE_PCB_TOOL_NAME
        assert events[2]["projectId"] == "project-123"
        assert events[2]["project"]["connections"][0]["from"] == "U1"
        assert saved[0][0].project_name == "LoRa Tracker"
        assert saved[0][1] == "Generating your board. "
        assert completed == []

    def test_invalid_tool_arguments_become_error_event(self):
        client = _streaming_client(_tool_chunks('{"project_name": "x"}'))
        events = _collect(stream_chat("go", client))
        assert events[-1]["type"] == "error"
        assert events[-1]["error"].startswith("Failed to create project")

    def test_persistence_failure_becomes_error_event(self):
        async def on_project(project, text):
            raise ValueError("database unavailable")

        client = _streaming_client(_tool_chunks(json.dumps(_payload())))
        events = _collect(stream_chat("go", client, on_project=on_project))
        assert events[-1] == {
            "type": "error",
            "error": "Failed to create project: database unavailable",
        }

    def test_history_save_failure_becomes_error_event(self):
        async def on_complete(text):
            raise RuntimeError("connection reset")

        client = _streaming_client([_chunk(content="Hi"), _chunk(finish_reason="stop")])
        events = _collect(stream_chat("hello", client, on_complete=on_complete))

        assert events == [
            {"type": "text", "content": "Hi"},
            {"type": "error", "error": "Failed to save conversation: connection reset"},
        ]

    def test_gateway_error_becomes_error_event(self):
        async def create(**kwargs):
            raise APIError(
                "upstream down",
                httpx.Request("POST", "https://gateway.test/v1/chat/completions"),
                body=None,
            )

        completed = []

        async def on_complete(text):
            completed.append(text)

        events = _collect(stream_chat("hi", _client(create), on_complete=on_complete))
        assert len(events) == 1
        assert events[0]["type"] == "error"
        assert "upstream down" in events[0]["error"]
        assert completed == []


# ═══════════════════════════════════════════════════════════
# One-shot Generation
# ═══════════════════════════════════════════════════════════


def _tool_response(arguments: str):
    call = SimpleNamespace(function=SimpleNamespace(arguments=arguments))
    message = SimpleNamespace(tool_calls=[call])
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestGenerateProject:
    def test_retries_with_validation_error(self):
        responses = iter(['{"broken": ', json.dumps(_payload())])
        requests = []

        async def create(**kwargs):
            requests.append(kwargs)
            return _tool_response(next(responses))

        project = asyncio.run(generate_project("A LoRa GPS tracker", _client(create)))

        assert project.project_name == "LoRa Tracker"
        assert len(requests) == 2
        assert requests[0]["tool_choice"]["function"]["name"] == GENERATE_PCB_TOOL_NAME
        assert "invalid JSON" in requests[1]["messages"][-1]["content"]

    def test_gives_up_after_max_retries(self):
        calls = []

        async def create(**kwargs):
            calls.append(kwargs)
            return _tool_response("not json")

        with pytest.raises(RuntimeError):
            asyncio.run(generate_project("A LoRa GPS tracker", _client(create)))
        assert len(calls) == MAX_RETRIES
