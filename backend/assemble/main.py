"""FastAPI main application."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from assemble import models
from assemble.api import documents, folders, projects
from assemble.config import get_settings
from assemble.database import SessionLocal, engine

logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(
    title="Assemble Filing API",
    description="Construction project document auto-filing and folder taxonomy",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(documents.router, prefix="/api/projects/{project_id}/documents", tags=["Documents"])
app.include_router(folders.router, prefix="/api/projects/{project_id}/folders", tags=["Folders"])


@app.on_event("startup")
def startup_schema():
    if not settings.auto_create_schema:
        return
    models.Base.metadata.create_all(bind=engine)
    logger.info("[STARTUP] tables ready: %s", ", ".join(sorted(models.Base.metadata.tables)))


@app.get("/health")
def health():
    return {"status": "ok", "service": "Assemble Filing API", "version": "1.0.0"}


@app.get("/ready")
def ready():
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "database": "ok"}
    finally:
        db.close()


@app.get("/api/health")
def api_health():
    return health()


@app.get("/api/ready")
def api_ready():
    return ready()
