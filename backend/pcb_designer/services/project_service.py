"""Project service — persistence of generated projects and chat history."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from pcb_designer.models.project import Project, ChatMessage
from pcb_designer.schemas.design import Component, Connection, DesignSnapshot, PowerSpecs
from pcb_designer.schemas.project import GeneratedProject

logger = logging.getLogger(__name__)

DEFAULT_BOARD_WIDTH_MM = 50
DEFAULT_BOARD_HEIGHT_MM = 30
DEFAULT_BOARD_LAYERS = 2


class ProjectService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_from_generation(
        self,
        generated: GeneratedProject,
        user_message: str | None = None,
        assistant_message: str | None = None,
    ) -> Project:
        """Persist a tool-call payload as a completed project."""
        board = generated.board_specs
        project = Project(
            name=generated.project_name,
            description=generated.description,
            type=generated.project_type,
            status="completed",
            components=[c.model_dump(mode="json") for c in generated.components],
            requirements={
                "power_analysis": generated.power_analysis.model_dump(mode="json"),
                "board_specs": board.model_dump(mode="json"),
            },
            pcb_data={
                "connections": [
                    c.model_dump(mode="json", by_alias=True)
                    for c in generated.connections
                ],
                "width": board.width or DEFAULT_BOARD_WIDTH_MM,
                "height": board.height or DEFAULT_BOARD_HEIGHT_MM,
                "layers": board.layers or DEFAULT_BOARD_LAYERS,
            },
        )
        self.db.add(project)
        await self.db.flush()
        await self.db.refresh(project)  # load server-side timestamps

        if user_message is not None and assistant_message is not None:
            await self.add_messages(project.id, user_message, assistant_message)

        logger.info("Project saved: %s", project.id)
        return project

    async def get_by_id(self, project_id: uuid.UUID) -> Project:
        stmt = select(Project).where(Project.id == project_id)
        result = await self.db.execute(stmt)
        project = result.scalar_one_or_none()
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Project {project_id} not found",
            )
        return project

    async def list_all(
        self, offset: int = 0, limit: int = 50
    ) -> tuple[list[Project], int]:
        # Count
        count_stmt = select(func.count()).select_from(Project)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        # Fetch
        stmt = (
            select(Project)
            .order_by(Project.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        projects = list(result.scalars().all())

        return projects, total

    async def delete(self, project_id: uuid.UUID) -> None:
        stmt = (
            select(Project)
            .where(Project.id == project_id)
            .options(selectinload(Project.messages))
        )
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Project {project_id} not found",
            )
        await self.db.delete(project)
        await self.db.flush()

    # ─── Chat History ───

    async def add_messages(
        self, project_id: uuid.UUID, user_message: str, assistant_message: str
    ) -> None:
        self.db.add_all(
            [
                ChatMessage(project_id=project_id, role="user", content=user_message),
                ChatMessage(
                    project_id=project_id, role="assistant", content=assistant_message
                ),
            ]
        )
        await self.db.flush()

    async def get_messages(self, project_id: uuid.UUID) -> list[ChatMessage]:
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.project_id == project_id)
            .order_by(ChatMessage.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_history(self, project_id: uuid.UUID) -> list[dict[str, str]]:
        """Prior turns in the role/content shape the LLM expects."""
        return [
            {"role": m.role, "content": m.content}
            for m in await self.get_messages(project_id)
        ]


def design_snapshot(project: Project) -> DesignSnapshot:
    """Rebuild the DRC input from a persisted project."""
    pcb_data = project.pcb_data or {}
    power = (project.requirements or {}).get("power_analysis") or {}
    return DesignSnapshot(
        components=[Component.model_validate(c) for c in project.components or []],
        connections=[
            Connection.model_validate(c) for c in pcb_data.get("connections", [])
        ],
        power_specs=PowerSpecs(
            voltage=power.get("voltage"),
            current_active=power.get("current_active"),
            current_sleep=power.get("current_sleep"),
        )
        if power
        else None,
    )
