"""PCB AI Designer — backend

Responsibilities:
  1. Design assistant chat over an LLM gateway (streamed, tool calls)
  2. Project and chat-history persistence (async SQLAlchemy)
  3. Structural validation and Design Rule Check of generated designs
  4. Component catalog and power estimates
  5. Fabrication quote comparison
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pcb_designer.config import get_settings
from pcb_designer.db.session import init_db, close_db, is_db_available
from pcb_designer.routers import chat, components, drc, project, quotes

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: check DB. Shutdown: close DB pool."""
    await init_db()
    yield
    await close_db()


def create_app() -> FastAPI:
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    application = FastAPI(
        title=settings.app_name,
        version=VERSION,
        description=(
            "Describe a device in natural language, refine it with the "
            "assistant, and get a validated PCB design.\n\n"
            "DRC is a heuristic linter over the generated design, not a "
            "certified manufacturing check."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Design assistant (streaming) ───
    application.include_router(chat.router, prefix="/api/chat", tags=["Chat"])

    # ─── Project persistence ───
    application.include_router(
        project.router, prefix="/api/projects", tags=["Projects"]
    )

    # ─── Design rule check (stateless) ───
    application.include_router(drc.router, prefix="/api/drc", tags=["DRC"])

    # ─── Component catalog ───
    application.include_router(
        components.router, prefix="/api/components", tags=["Components"]
    )

    # ─── Fabrication quotes ───
    application.include_router(quotes.router, prefix="/api/quotes", tags=["Quotes"])

    return application


app = create_app()


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "service": "pcb-ai-designer",
        "version": VERSION,
        "database": is_db_available(),
    }
