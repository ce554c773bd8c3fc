# brainpulse backend api
# fastapi app with async mongodb, jwt auth, mood analytics and the gemini pulse coach

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brainpulse.config import settings
from brainpulse.services.db import Database
from brainpulse.routers import auth, entries, analytics, coach, user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: close connection."""
    logger.info("Starting BrainPulse backend...")
    db = Database(settings.MONGODB_URI, settings.MONGODB_DATABASE)
    await db.connect()
    await db.ensure_indexes()
    app.state.db = db
    logger.info("BrainPulse backend ready")
    yield
    logger.info("Shutting down BrainPulse backend...")
    await db.close()


app = FastAPI(
    title="BrainPulse API",
    description="Backend API for BrainPulse — mood journaling, analytics and the Pulse Coach",
    version="0.1.0",
    lifespan=lifespan,
)

# cors — allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(auth.router)
app.include_router(entries.router)
app.include_router(analytics.router)
app.include_router(coach.router)
app.include_router(user.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """log unexpected failures and answer with a generic 500"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "brainpulse-api"}
