"""
Path & name resolver
====================
Turns a FilingContext into a folder path and a display name.

  general (invoice)   Finance/Invoices      <Firm>_Invoice_NNN.EXT
  general             Plan/Misc             original name (deduplicated)
  consultant_card     Consultants/<disc>    <Firm>_Submission_NNN.EXT
                                            <Firm>_TRR_NNN.EXT
                                            <disc>_RFT_NNN.EXT
                                            <disc>_Addendum_NNN.EXT
                                            original name (general kind)
  contractor_card     Contractors/<trade>   same naming as consultant_card
  plan_card           Plan/Misc             original name (deduplicated)

Numbers are max(existing) + 1 within the same folder and prefix, counting
only live documents. The function is pure: two concurrent uploads reading the
same snapshot get the same number, and the persistence layer's unique index on
(path, display_name) is what turns that into a retry.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from assemble.errors import OverridePathInvalid, ValidationError
from assemble.filing import naming
from assemble.filing.context import (
    ConsultantCardUpload,
    ContractorCardUpload,
    FilingOverride,
    GeneralUpload,
    PlanCardUpload,
    ResolvedFiling,
)
from assemble.filing.taxonomy import INVOICES_FOLDER, MISC_FOLDER, normalize_folder_path

CATEGORY_LABELS = {
    "invoice": "Invoice",
    "submission": "Submission",
    "TRR": "TRR",
    "RFT": "RFT",
    "addendum": "Addendum",
}
# Kinds named after the discipline/trade rather than the firm.
DISCIPLINE_NAMED_KINDS = {"RFT", "addendum"}


def resolve_folder(context) -> str:
    if isinstance(context, GeneralUpload):
        if context.is_invoice and (context.firm_name or "").strip():
            return INVOICES_FOLDER
        return MISC_FOLDER
    if isinstance(context, (ConsultantCardUpload, ContractorCardUpload)):
        discipline = normalize_folder_path(context.discipline_or_trade or "")
        if not discipline:
            raise ValidationError("discipline_or_trade")
        tier = "Consultants" if isinstance(context, ConsultantCardUpload) else "Contractors"
        return f"{tier}/{discipline}"
    if isinstance(context, PlanCardUpload):
        return MISC_FOLDER
    raise ValidationError("upload_location", f"Unsupported upload location: {context!r}")


def _document_kind(context, folder_path: str) -> str:
    if isinstance(context, GeneralUpload):
        return "invoice" if folder_path == INVOICES_FOLDER else "general"
    if isinstance(context, (ConsultantCardUpload, ContractorCardUpload)):
        return context.effective_kind
    return "general"


def _live_names_in(folder_path: str, existing_documents: Iterable) -> List[str]:
    names = []
    for doc in existing_documents:
        if getattr(doc, "deleted_at", None) is not None:
            continue
        if normalize_folder_path(getattr(doc, "path", "") or "") != folder_path:
            continue
        names.append(getattr(doc, "display_name", "") or "")
    return names


def series_prefix(context, folder_path: str) -> Optional[str]:
    """``<Entity>_<Category>`` for numbered kinds, None for kept names."""
    kind = _document_kind(context, folder_path)
    if kind not in CATEGORY_LABELS:
        return None
    if kind in DISCIPLINE_NAMED_KINDS:
        entity = naming.sanitize_entity(getattr(context, "discipline_or_trade", None))
    else:
        entity = naming.sanitize_entity(getattr(context, "firm_name", None))
    return f"{entity}_{CATEGORY_LABELS[kind]}"


def resolve_display_name(
    context,
    folder_path: str,
    file_name: str,
    existing_documents: Iterable,
    default_extension: str = "PDF",
) -> str:
    taken = _live_names_in(folder_path, existing_documents)
    prefix = series_prefix(context, folder_path)
    if prefix is None:
        return naming.unique_plain_name(file_name, taken, default_extension)
    extension = naming.file_extension(file_name, default_extension)
    return naming.compose(prefix, naming.next_sequence(prefix, taken), extension)


def resolve_filing(
    context,
    existing_documents: Iterable = (),
    file_name: str = "",
    override: Optional[FilingOverride] = None,
    default_extension: str = "PDF",
) -> ResolvedFiling:
    """Compute where ``file_name`` is filed and what it is called.

    Overridden fields are taken verbatim (after trimming) and never numbered;
    an override path may point outside the canonical taxonomy.
    """
    existing_documents = list(existing_documents)
    override = override or FilingOverride()

    if override.path is not None:
        folder_path = normalize_folder_path(override.path)
        if not folder_path:
            raise OverridePathInvalid(override.path)
    else:
        folder_path = resolve_folder(context)

    if override.display_name is not None:
        display_name = override.display_name.strip()
        if not display_name:
            raise ValidationError("display_name", "Override display name must not be blank")
    else:
        display_name = resolve_display_name(
            context, folder_path, file_name, existing_documents, default_extension
        )

    return ResolvedFiling(
        folder_path=folder_path,
        display_name=display_name,
        manually_overridden=not override.is_empty,
        source_context=context,
    )
