"""Folder APIs: canonical folder list and the annotated folder tree."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from assemble.api.projects import get_project_or_404
from assemble.database import get_db
from assemble.services import filing_service

router = APIRouter()


@router.get("/")
def list_folders(project_id: int, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    return filing_service.project_folders(project)


@router.get("/tree")
def folder_tree(project_id: int, prune: bool = False, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    tree = filing_service.project_tree(db, project, prune=prune)
    return {"tree": tree.model_dump() if tree is not None else None}
