"""Voice Translator API — FastAPI application and Socket.IO entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TranslatorError → {success: false, error} envelopes
    - CORS configured from settings (not hardcoded); ngrok tunnels via origin regex
    - Database, Gemini and Firebase initialized on startup via lifespan context manager
    - `asgi_app` is the served application: Socket.IO at /socket.io, FastAPI for the rest

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Middleware added innermost first: CORS wraps everything so 413/429 responses
      still carry CORS headers
    - Tables are only auto-created for SQLite; server databases are migrated with alembic
"""

import logging
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.middleware import (
    RateLimitMiddleware, RequestSizeLimitMiddleware, SecurityHeadersMiddleware,
    SlidingWindowLimiter, default_policies,
)
from app.api.routes import (
    catalogs, clerk, firebase_auth, gemini, health, languages, overview, rooms,
    speech, text_to_speech, translate, uploads, users,
)
from app.api.socket_events import register_socket_events
from app.config import get_settings
from app.infrastructure import database
from app.infrastructure.firebase_auth import init_firebase
from app.infrastructure.gemini_client import init_gemini
from app.infrastructure.http_clients import close_http_clients
from app.infrastructure.observability import setup_logging
from app.infrastructure.socket_manager import create_socket_server, socket_manager
from app.services.catalog_service import seed_master_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await database.db_manager.create_all()
    if settings.seed_master_data:
        async with database.db_manager.session() as db:
            await seed_master_data(db)
    init_gemini(settings)
    init_firebase(settings)
    logger.info(f"Voice Translator API started ({settings.environment})")
    yield
    logger.info("Voice Translator API shutting down")
    await close_http_clients()
    await database.db_manager.dispose()


settings = get_settings()

app = FastAPI(
    title="Voice Translator API", version=settings.app_version, lifespan=lifespan,
)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size)
app.add_middleware(
    RateLimitMiddleware,
    limiter=SlidingWindowLimiter(default_policies(
        settings.rate_limit_max_requests, settings.rate_limit_window_ms // 1000,
    )),
    enabled=settings.rate_limit_enabled,
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.all_cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(health.api_health)
app.include_router(overview.router)
app.include_router(rooms.router)
app.include_router(translate.router)
app.include_router(speech.router)
app.include_router(speech.realtime)
app.include_router(uploads.router)
app.include_router(text_to_speech.router)
app.include_router(gemini.router)
app.include_router(languages.router)
for catalog_router in catalogs.catalog_routers:
    app.include_router(catalog_router)
app.include_router(users.router)
app.include_router(firebase_auth.router)
app.include_router(clerk.router)
app.include_router(clerk.webhooks)

# Socket.IO — shares the process (and the room channels) with the REST API
sio = socket_manager.initialize(create_socket_server(settings.all_cors_origins))
register_socket_events(sio, socket_manager)
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)
