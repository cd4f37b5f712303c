"""Pydantic schemas for generated projects, persistence and chat."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from pcb_designer.schemas.design import Component, Connection


# ─── LLM Tool Payload ───


class PowerAnalysis(BaseModel):
    """Same loose typing as PowerSpecs; DRC parses the leading number."""

    voltage: str | float | None = Field(None, description="Operating voltage (V)")
    current_active: str | float | None = Field(
        None, description="Total active current (mA)"
    )
    current_sleep: str | float | None = Field(None, description="Sleep current (mA)")
    battery_life_estimate: str | None = Field(
        None, description="Estimated battery life"
    )


class BoardSpecs(BaseModel):
    width: float | None = Field(None, description="Board width (mm)")
    height: float | None = Field(None, description="Board height (mm)")
    layers: int | None = Field(None, description="Copper layer count (2 or 4)")


class GeneratedProject(BaseModel):
    """Arguments of the ``generate_pcb_project`` tool call."""

    project_name: str = Field(..., min_length=1, description="Descriptive project name")
    project_type: Literal[
        "meshtastic", "iot_sensor", "power_supply", "robotics", "custom"
    ] = Field(..., description="Project category")
    description: str = Field(..., description="Technical description of the project")
    components: list[Component] = Field(
        ..., description="Components with unique references (U1, R1, C1)"
    )
    connections: list[Connection] = Field(
        ..., description="Nets between components, by reference"
    )
    power_analysis: PowerAnalysis = Field(default_factory=PowerAnalysis)
    board_specs: BoardSpecs = Field(default_factory=BoardSpecs)


# ─── Request Schemas ───


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    project_id: uuid.UUID | None = None
    action: Literal["generate_auto"] | None = None


class ProjectGenerateRequest(BaseModel):
    """Generate a project from natural language, without conversation."""

    description: str = Field(..., min_length=10)


# ─── Response Schemas ───


class ChatMessageResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    role: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    type: str
    status: str
    components: list | None = None
    requirements: dict | None = None
    pcb_data: dict | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectListItem(BaseModel):
    id: uuid.UUID
    name: str
    type: str
    status: str
    component_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    projects: list[ProjectListItem]
    total: int
