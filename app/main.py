import os
import sys
import logging
import logging.config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from contextlib import asynccontextmanager

from app.db.base import Base
from app.db.session import engine, async_session
from app.db.remote import sqlalchemy_board
from app.core.controller import SessionRegistry
from app.api.routes import auth, board, cards, suggestions, system

# Load logging config if present
if os.path.exists("logging.conf"):
    logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
else:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
logger = logging.getLogger("root")

# Detect environment (default to production)
ENV = os.getenv("APP_ENV", "production").lower()
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if not hasattr(app.state, "sessions"):
        app.state.sessions = SessionRegistry(sqlalchemy_board(async_session))
    logger.info("Database initialized")

    yield  # App runs here

    logger.info("Shutting down...")
    await engine.dispose()


# Create FastAPI app with lifespan
app = FastAPI(
    title="Brainstorm Board API",
    version="0.1",
    lifespan=lifespan,
)

# Dev-only CORS settings
if ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS allowed for development environment")
elif CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS restricted to {', '.join(CORS_ORIGINS)}")
else:
    logger.info("Running in production environment - CORS disabled")

# API routes
app.include_router(auth.router)
app.include_router(board.router)
app.include_router(cards.router)
app.include_router(suggestions.router)
app.include_router(system.router)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health(request: Request):
    status = {
        "api": "ok",
        "database": None,
    }

    http_status = 200

    # --- Database check ---
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        status["database"] = f"error: {e}"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)
