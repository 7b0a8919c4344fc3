"""API router: filing uploads, previews, re-filing and soft delete."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from assemble.api.projects import get_project_or_404
from assemble.database import get_db
from assemble.errors import FilingError, SequenceCollisionError
from assemble.filing.classifier import (
    CARD_KINDS,
    classify_hint,
    classify_upload,
    detect_document_kind,
    infer_hint,
)
from assemble.filing.context import (
    ClassificationHint,
    ConsultantCardUpload,
    ContractorCardUpload,
    FilingContext,
    FilingOverride,
    GeneralUpload,
    ResolvedFiling,
)
from assemble.models import Document, Project
from assemble.services import filing_service

router = APIRouter()


class FileMeta(BaseModel):
    file_name: str = Field(min_length=1, max_length=500)
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = Field(default=None, ge=0)
    checksum: Optional[str] = Field(default=None, max_length=64)


class UploadIn(FileMeta):
    context: FilingContext = Field(default_factory=GeneralUpload)
    override: Optional[FilingOverride] = None


class HintUploadIn(FileMeta):
    hint: Optional[ClassificationHint] = None
    text: str = ""                       # first-page text for keyword inference
    firm_name: Optional[str] = None
    add_to_documents: bool = True


class RefileIn(BaseModel):
    context: FilingContext
    override: Optional[FilingOverride] = None


def _api_error(exc: FilingError):
    status_code = 409 if isinstance(exc, SequenceCollisionError) else 422
    raise HTTPException(status_code=status_code, detail=exc.as_detail())


def _with_detected_kind(context, file_name: str):
    """Fill an unset document_kind from the file/section name."""
    if isinstance(context, GeneralUpload) and context.document_kind is None:
        if detect_document_kind(file_name, allowed=("invoice",)) == "invoice":
            return context.model_copy(update={"document_kind": "invoice"})
    elif isinstance(context, (ConsultantCardUpload, ContractorCardUpload)) and context.document_kind is None:
        kind = detect_document_kind(file_name, context.section_name, allowed=CARD_KINDS)
        if kind:
            return context.model_copy(update={"document_kind": kind})
    return context


def _resolved_out(resolved: ResolvedFiling) -> dict:
    return {
        "folder_path": resolved.folder_path,
        "display_name": resolved.display_name,
        "storage_key": resolved.storage_key,
        "manually_overridden": resolved.manually_overridden,
        "source_context": resolved.source_context.model_dump(mode="json"),
    }


def _document_out(d: Document) -> dict:
    return {
        "id": d.id,
        "project_id": d.project_id,
        "path": d.path,
        "name": d.name,
        "display_name": d.display_name,
        "storage_key": d.storage_key,
        "version": d.version,
        "mime_type": d.mime_type,
        "size_bytes": d.size_bytes,
        "checksum": d.checksum,
        "metadata": d.filing_metadata if isinstance(d.filing_metadata, dict) else {},
        "deleted_at": str(d.deleted_at) if d.deleted_at else None,
        "created_at": str(d.created_at or ""),
    }


def _outcome_out(outcome: filing_service.FilingOutcome, response: Response) -> dict:
    if outcome.created:
        response.status_code = 201
    return {
        "filing": _resolved_out(outcome.resolved),
        "document": _document_out(outcome.document) if outcome.document is not None else None,
        "created": outcome.created,
        "duplicate": outcome.duplicate,
    }


def _document_or_404(db: Session, project: Project, doc_id: int) -> Document:
    doc = (
        db.query(Document)
        .filter(Document.id == doc_id, Document.project_id == project.id, Document.deleted_at.is_(None))
        .first()
    )
    if not doc:
        raise HTTPException(404, "Document not found")
    return doc


# ─────────────────────────────────────────────────────────────────────────────
# Documents
# ─────────────────────────────────────────────────────────────────────────────

@router.get("/")
def list_documents(project_id: int, path: Optional[str] = None, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    q = db.query(Document).filter(Document.project_id == project.id, Document.deleted_at.is_(None))
    if path is not None:
        q = q.filter(Document.path == path.strip("/"))
    docs = q.order_by(Document.path, Document.display_name).all()
    return [_document_out(d) for d in docs]


@router.post("/preview")
def preview_upload(project_id: int, body: UploadIn, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    context = _with_detected_kind(classify_upload(body.context), body.file_name)
    try:
        resolved = filing_service.preview_filing(
            db, project.id, file_name=body.file_name, context=context, override=body.override
        )
    except FilingError as exc:
        _api_error(exc)
    return _resolved_out(resolved)


@router.post("/")
def upload_document(project_id: int, body: UploadIn, response: Response, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    context = _with_detected_kind(classify_upload(body.context), body.file_name)
    try:
        outcome = filing_service.file_document(
            db,
            project,
            file_name=body.file_name,
            context=context,
            override=body.override,
            mime_type=body.mime_type,
            size_bytes=body.size_bytes,
            checksum=body.checksum,
        )
    except FilingError as exc:
        _api_error(exc)
    return _outcome_out(outcome, response)


@router.post("/from-hint")
def upload_from_hint(project_id: int, body: HintUploadIn, response: Response, db: Session = Depends(get_db)):
    """Extraction-queue entry: file by content hint, inferring one if absent."""
    project = get_project_or_404(db, project_id)
    hint = body.hint or infer_hint(
        body.file_name, body.text, firm_name=body.firm_name, taxonomy=filing_service.project_taxonomy()
    )
    context = classify_hint(hint).model_copy(update={"add_to_documents": body.add_to_documents})
    try:
        outcome = filing_service.file_document(
            db,
            project,
            file_name=body.file_name,
            context=context,
            mime_type=body.mime_type,
            size_bytes=body.size_bytes,
            checksum=body.checksum,
        )
    except FilingError as exc:
        _api_error(exc)
    payload = _outcome_out(outcome, response)
    payload["hint"] = hint.model_dump(mode="json")
    return payload


@router.post("/{doc_id}/refile")
def refile_document(project_id: int, doc_id: int, body: RefileIn, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    doc = _document_or_404(db, project, doc_id)
    context = _with_detected_kind(classify_upload(body.context), doc.name)
    try:
        outcome = filing_service.refile_document(db, doc, context=context, override=body.override)
    except FilingError as exc:
        _api_error(exc)
    return {
        "filing": _resolved_out(outcome.resolved),
        "document": _document_out(outcome.document),
    }


@router.delete("/{doc_id}")
def delete_document(project_id: int, doc_id: int, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    doc = _document_or_404(db, project, doc_id)
    filing_service.soft_delete_document(db, doc)
    return {"deleted": True, "id": doc.id}
