import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS
from .database import Store
from .routers import auth, calendar, reminders, tasks, voice
from .transcription import Transcriber

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 BAD_REQUEST."""
    errors = exc.errors()
    # An unparseable body is rejected before dependencies run, so the session
    # check happens here instead. Every route that reads a body requires one.
    if any(error.get("type") == "json_invalid" for error in errors):
        try:
            auth.require_session_claims(request)
        except HTTPException as e:
            return await http_exception_handler(request, e)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"code": "BAD_REQUEST", "detail": jsonable_encoder(errors)},
    )


def create_app(store: Optional[Store] = None, transcriber: Optional[Transcriber] = None) -> FastAPI:
    """Build the API. The store and transcriber are created here once and
    shared by every request through ``app.state``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store.create_tables()
        logger.info("Planner API started (database %s)", "available" if app.state.store.available else "unavailable")
        yield
        app.state.store.dispose()

    app = FastAPI(
        title="Planner API",
        description="Tasks, reminders and calendar events for signed-in users",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else Store.from_url()
    app.state.transcriber = transcriber if transcriber is not None else Transcriber()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(reminders.router, prefix="/api/reminders", tags=["reminders"])
    app.include_router(calendar.router, prefix="/api/calendar", tags=["calendar"])
    app.include_router(voice.router, prefix="/api/voice", tags=["voice"])

    @app.get("/")
    def read_root():
        return {"message": "Planner API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "database": "available" if app.state.store.available else "unavailable"}

    return app


app = create_app()
