"""Project APIs: create/list projects and their active disciplines/trades."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from assemble.database import get_db
from assemble.filing.taxonomy import normalize_folder_path
from assemble.models import Project

router = APIRouter()


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    active_disciplines: List[str] = Field(default_factory=list)
    active_trades: List[str] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    active_disciplines: Optional[List[str]] = None
    active_trades: Optional[List[str]] = None


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    active_disciplines: List[str] = Field(default_factory=list)
    active_trades: List[str] = Field(default_factory=list)


def _clean_list(values: List[str]) -> List[str]:
    out: List[str] = []
    for value in values:
        item = normalize_folder_path(value)
        if item and item not in out:
            out.append(item)
    return out


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(404, "Project not found")
    return project


@router.get("/", response_model=List[ProjectOut])
def list_projects(db: Session = Depends(get_db)):
    return db.query(Project).order_by(Project.name).all()


@router.post("/", response_model=ProjectOut, status_code=201)
def create_project(body: ProjectCreate, db: Session = Depends(get_db)):
    project = Project(
        name=body.name.strip(),
        active_disciplines=_clean_list(body.active_disciplines),
        active_trades=_clean_list(body.active_trades),
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: Session = Depends(get_db)):
    return get_project_or_404(db, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(project_id: int, body: ProjectUpdate, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    if body.name is not None:
        project.name = body.name.strip()
    if body.active_disciplines is not None:
        project.active_disciplines = _clean_list(body.active_disciplines)
    if body.active_trades is not None:
        project.active_trades = _clean_list(body.active_trades)
    db.commit()
    db.refresh(project)
    return project
