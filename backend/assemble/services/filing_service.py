"""Filing against the database: snapshot, resolve, insert, retry on collision."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assemble.config import get_settings
from assemble.errors import SequenceCollisionError
from assemble.filing.context import DocumentRef, FilingOverride, ResolvedFiling
from assemble.filing.naming import same_series
from assemble.filing.resolver import resolve_filing
from assemble.filing.taxonomy import FolderTaxonomy
from assemble.filing.tree import FolderNode, build_tree, filter_empty_folders
from assemble.models import LIVE_NAME_INDEX, Document, Project

logger = logging.getLogger(__name__)


@dataclass
class FilingOutcome:
    resolved: ResolvedFiling
    document: Optional[Document] = None
    created: bool = False
    duplicate: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_name_collision(exc: IntegrityError) -> bool:
    """True when the live-name unique index rejected the row."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == LIVE_NAME_INDEX
    message = str(exc.orig)
    # SQLite names the columns, not the index.
    return LIVE_NAME_INDEX in message or (
        "UNIQUE" in message and "documents.path" in message and "documents.display_name" in message
    )


@lru_cache
def project_taxonomy() -> FolderTaxonomy:
    """Taxonomy for the configured catalogs; bundled catalogs when unset."""
    settings = get_settings()
    kwargs = {}
    if settings.get_disciplines():
        kwargs["disciplines"] = settings.get_disciplines()
    if settings.get_trades():
        kwargs["trades"] = settings.get_trades()
    return FolderTaxonomy(**kwargs)


def load_live_documents(db: Session, project_id: int, exclude_id: Optional[int] = None) -> List[DocumentRef]:
    q = db.query(Document).filter(Document.project_id == project_id, Document.deleted_at.is_(None))
    if exclude_id is not None:
        q = q.filter(Document.id != exclude_id)
    return [DocumentRef.model_validate(doc) for doc in q.all()]


def find_live_duplicate(db: Session, project_id: int, checksum: Optional[str]) -> Optional[Document]:
    if not checksum:
        return None
    return (
        db.query(Document)
        .filter(
            Document.project_id == project_id,
            Document.checksum == checksum,
            Document.deleted_at.is_(None),
        )
        .first()
    )


def preview_filing(
    db: Session,
    project_id: int,
    *,
    file_name: str,
    context,
    override: Optional[FilingOverride] = None,
) -> ResolvedFiling:
    return resolve_filing(
        context,
        load_live_documents(db, project_id),
        file_name=file_name,
        override=override,
        default_extension=get_settings().default_extension,
    )


def _audit(resolved: ResolvedFiling, file_name: str) -> dict:
    return {
        "auto_filed": not resolved.manually_overridden,
        "manually_overridden": resolved.manually_overridden,
        "original_file_name": file_name,
        "filing_context": resolved.source_context.model_dump(mode="json"),
        "storage_key": resolved.storage_key,
    }


def file_document(
    db: Session,
    project: Project,
    *,
    file_name: str,
    context,
    override: Optional[FilingOverride] = None,
    mime_type: Optional[str] = None,
    size_bytes: Optional[int] = None,
    checksum: Optional[str] = None,
) -> FilingOutcome:
    """Resolve and persist one upload.

    Preview-only contexts (add_to_documents=False) are resolved but not stored.
    A live-name collision re-reads the snapshot and resolves again; a
    collision on a manually chosen name is reported straight away.
    """
    settings = get_settings()
    name_derived = override is None or override.display_name is None

    duplicate = find_live_duplicate(db, project.id, checksum)
    if duplicate is not None:
        logger.info("[FILE] %s matches existing document id=%s", file_name, duplicate.id)
        resolved = ResolvedFiling(
            folder_path=duplicate.path,
            display_name=duplicate.display_name,
            manually_overridden=bool((duplicate.filing_metadata or {}).get("manually_overridden")),
            source_context=context,
        )
        return FilingOutcome(resolved=resolved, document=duplicate, duplicate=True)

    if not context.add_to_documents:
        resolved = preview_filing(db, project.id, file_name=file_name, context=context, override=override)
        logger.info("[FILE] preview only: %s → %s", file_name, resolved.storage_key)
        return FilingOutcome(resolved=resolved)

    attempts = max(1, settings.filing_max_retries + 1)
    resolved = None
    for attempt in range(1, attempts + 1):
        resolved = resolve_filing(
            context,
            load_live_documents(db, project.id),
            file_name=file_name,
            override=override,
            default_extension=settings.default_extension,
        )
        document = Document(
            project_id=project.id,
            path=resolved.folder_path,
            name=file_name,
            display_name=resolved.display_name,
            version=1,
            mime_type=mime_type,
            size_bytes=size_bytes,
            checksum=checksum,
            filing_metadata=_audit(resolved, file_name),
        )
        db.add(document)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if not _is_name_collision(exc):
                raise
            logger.warning(
                "[FILE] collision on %s (attempt %s/%s)", resolved.storage_key, attempt, attempts
            )
            if not name_derived:
                break
            continue
        db.refresh(document)
        logger.info(
            "[FILE] %s %s → %s",
            "manually filed" if resolved.manually_overridden else "auto-filed",
            file_name,
            resolved.storage_key,
        )
        return FilingOutcome(resolved=resolved, document=document, created=True)

    raise SequenceCollisionError(resolved.folder_path, resolved.display_name)


def refile_document(
    db: Session,
    document: Document,
    *,
    context,
    override: Optional[FilingOverride] = None,
) -> FilingOutcome:
    """File an existing document again.

    A document already sitting in its resolved folder under the same name
    series is left alone, so repeating a re-file changes nothing.
    """
    settings = get_settings()
    name_derived = override is None or override.display_name is None
    attempts = max(1, settings.filing_max_retries + 1)
    resolved = None
    for attempt in range(1, attempts + 1):
        resolved = resolve_filing(
            context,
            load_live_documents(db, document.project_id, exclude_id=document.id),
            file_name=document.name,
            override=override,
            default_extension=settings.default_extension,
        )
        if document.path == resolved.folder_path and (
            document.display_name == resolved.display_name
            or (name_derived and same_series(document.display_name, resolved.display_name))
        ):
            logger.info("[REFILE] document id=%s already at %s", document.id, document.storage_key)
            current = resolved.model_copy(update={"display_name": document.display_name})
            return FilingOutcome(resolved=current, document=document)

        document.path = resolved.folder_path
        document.display_name = resolved.display_name
        document.version = (document.version or 1) + 1
        document.filing_metadata = {**(document.filing_metadata or {}), **_audit(resolved, document.name)}
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            db.refresh(document)
            if not _is_name_collision(exc):
                raise
            logger.warning(
                "[REFILE] collision on %s (attempt %s/%s)", resolved.storage_key, attempt, attempts
            )
            if not name_derived:
                break
            continue
        db.refresh(document)
        logger.info("[REFILE] document id=%s → %s (v%s)", document.id, document.storage_key, document.version)
        return FilingOutcome(resolved=resolved, document=document, created=False)

    raise SequenceCollisionError(resolved.folder_path, resolved.display_name)


def soft_delete_document(db: Session, document: Document) -> Document:
    document.deleted_at = _utc_now()
    db.commit()
    db.refresh(document)
    logger.info("[FILE] soft-deleted document id=%s (%s)", document.id, document.storage_key)
    return document


def project_folders(project: Project) -> List[str]:
    return project_taxonomy().build_canonical_folders(
        project.active_disciplines or [], project.active_trades or []
    )


def project_tree(db: Session, project: Project, prune: bool = False) -> Optional[FolderNode]:
    tree = build_tree(project_folders(project), load_live_documents(db, project.id))
    if prune:
        return filter_empty_folders(tree)
    return tree
