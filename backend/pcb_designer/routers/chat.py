"""Chat router — streams assistant turns as server-sent events.

History is loaded before the response starts so a missing project is a
plain 404. Writes during the stream use their own session: the response
body outlives the request dependencies.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pcb_designer.ai.chat import create_client, format_sse, stream_chat
from pcb_designer.db.session import async_session_factory, get_db
from pcb_designer.schemas.project import ChatRequest, GeneratedProject
from pcb_designer.services.project_service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


async def _chat_events(
    request: ChatRequest, history: list[dict[str, str]]
) -> AsyncIterator[str]:
    async with async_session_factory() as session:
        service = ProjectService(session)

        async def on_project(project: GeneratedProject, assistant_text: str) -> str:
            saved = await service.create_from_generation(
                project,
                user_message=request.message,
                assistant_message=assistant_text,
            )
            await session.commit()
            return str(saved.id)

        async def on_complete(assistant_text: str) -> None:
            if request.project_id is None:
                return
            await service.add_messages(
                request.project_id, request.message, assistant_text
            )
            await session.commit()

        async for event in stream_chat(
            request.message,
            create_client(),
            history=history,
            action=request.action,
            on_project=on_project,
            on_complete=on_complete,
        ):
            yield format_sse(event)


@router.post("/")
async def chat(request: ChatRequest, db: AsyncSession = Depends(get_db)):
    """Stream one assistant turn as ``text/event-stream``."""
    history: list[dict[str, str]] = []
    if request.project_id is not None:
        service = ProjectService(db)
        await service.get_by_id(request.project_id)
        history = await service.get_history(request.project_id)

    logger.info(
        "Chat turn — project=%s, history=%d, action=%s",
        request.project_id,
        len(history),
        request.action,
    )
    return StreamingResponse(
        _chat_events(request, history),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
