"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, cron, dms, settings as settings_api
from src.config import get_settings
from src.database import Database

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # Tests install their own database before startup
    if getattr(app.state, "database", None) is None:
        app.state.database = Database(settings.database_url)
        owns_database = True
    else:
        owns_database = False
    yield
    if owns_database:
        app.state.database.close()
        app.state.database = None


app = FastAPI(
    title="Cold DM Tracker API",
    description="Track cold DMs and get a daily email when follow-ups are due",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:3001",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(auth.router)
app.include_router(dms.router)
app.include_router(settings_api.router)
app.include_router(cron.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
