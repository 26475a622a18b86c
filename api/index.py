"""
Profile Server - FastAPI application for user profile management.

Provides:
- GET/PUT /api/profile for the authenticated user's own record
- Health check and an in-memory request log for development
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Query
from fastapi.middleware.cors import CORSMiddleware
import logging

# Import lib modules
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lib.database import init_db, close_db
from lib.logger import request_logger
from api.profile import router as profile_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool at startup and close it on shutdown."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("[Startup] Connecting to database...")
    await init_db()
    print("[Startup] Ready!")

    yield

    print("[Shutdown] Cleaning up...")
    await close_db()


app = FastAPI(
    title="Profile Server",
    description="User profile service",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Record every request and its outcome in the request log."""
    log_id = request_logger.log_request(request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception as e:
        request_logger.log_response(log_id, error=str(e))
        raise
    request_logger.log_response(log_id, status_code=response.status_code)
    return response


app.include_router(profile_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "profile-server",
        "version": "1.0.0"
    }


@app.get("/logs")
async def get_logs(limit: int = Query(default=100, ge=1, le=1000)):
    """Most recent requests, newest first."""
    return {"logs": request_logger.get_logs(limit=limit)}
