"""Project router — generated project persistence and per-project DRC."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from openai import APIError
from sqlalchemy.ext.asyncio import AsyncSession

from pcb_designer.ai.chat import generate_project
from pcb_designer.db.session import get_db
from pcb_designer.schemas.drc import DesignValidationReport, DRCRules
from pcb_designer.schemas.project import (
    ChatMessageResponse,
    ProjectGenerateRequest,
    ProjectListItem,
    ProjectListResponse,
    ProjectResponse,
)
from pcb_designer.services.project_service import ProjectService, design_snapshot
from pcb_designer.services.validation_service import run_design_validation

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.post("/generate", response_model=ProjectResponse, status_code=201)
async def generate_project_from_description(
    data: ProjectGenerateRequest,
    service: ProjectService = Depends(_get_service),
):
    """Generate a project in one LLM call and store it."""
    try:
        generated = await generate_project(data.description)
    except (APIError, RuntimeError) as e:
        logger.error("Project generation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Project generation failed: {e}",
        ) from e
    project = await service.create_from_generation(generated)
    return ProjectResponse.model_validate(project)


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    service: ProjectService = Depends(_get_service),
):
    """List generated projects, newest first."""
    projects, total = await service.list_all(offset=offset, limit=limit)
    items = [
        ProjectListItem(
            id=p.id,
            name=p.name,
            type=p.type,
            status=p.status,
            component_count=len(p.components or []),
            created_at=p.created_at,
            updated_at=p.updated_at,
        )
        for p in projects
    ]
    return ProjectListResponse(projects=items, total=total)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: uuid.UUID,
    service: ProjectService = Depends(_get_service),
):
    """Get a project with its design data."""
    project = await service.get_by_id(project_id)
    return ProjectResponse.model_validate(project)


@router.get("/{project_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(
    project_id: uuid.UUID,
    service: ProjectService = Depends(_get_service),
):
    """Chat history of a project, oldest first."""
    await service.get_by_id(project_id)
    messages = await service.get_messages(project_id)
    return [ChatMessageResponse.model_validate(m) for m in messages]


@router.post("/{project_id}/drc", response_model=DesignValidationReport)
async def validate_project(
    project_id: uuid.UUID,
    rules: DRCRules | None = None,
    service: ProjectService = Depends(_get_service),
):
    """Run structural validation and DRC on a persisted project."""
    project = await service.get_by_id(project_id)
    return run_design_validation(design_snapshot(project), rules=rules)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: uuid.UUID,
    service: ProjectService = Depends(_get_service),
):
    """Delete a project and its chat history."""
    await service.delete(project_id)
