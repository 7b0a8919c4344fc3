"""
Filing context types
====================
The shapes passed between the classifier, the resolver and the upload
handlers.

  FilingContext   tagged union on ``upload_location``:
      general          loose upload; invoice or general document
      consultant_card  dropped on a consultant card (discipline required)
      contractor_card  dropped on a contractor card (trade required)
      plan_card        dropped on the plan card
  FilingOverride  manual path and/or display name chosen by the user
  ResolvedFiling  resolver output (folder + display name + audit info)
  DocumentRef     minimal view of an existing document used for numbering
  ClassificationHint  content-derived category from the extraction queue
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

CardDocumentKind = Literal["submission", "TRR", "RFT", "addendum", "general"]
GeneralDocumentKind = Literal["invoice", "general"]


class GeneralUpload(BaseModel):
    upload_location: Literal["general"] = "general"
    firm_name: Optional[str] = None
    # None keeps the legacy reading: a firm name on a loose upload means invoice.
    document_kind: Optional[GeneralDocumentKind] = None
    add_to_documents: bool = True

    @property
    def is_invoice(self) -> bool:
        if self.document_kind is None:
            return bool((self.firm_name or "").strip())
        return self.document_kind == "invoice"


class _CardUpload(BaseModel):
    # Left permissive here; the resolver reports a blank value as ValidationError.
    discipline_or_trade: str = ""
    firm_name: Optional[str] = None
    section_name: Optional[str] = None
    document_kind: Optional[CardDocumentKind] = None
    add_to_documents: bool = True

    @property
    def effective_kind(self) -> str:
        if self.document_kind is not None:
            return self.document_kind
        return "submission" if (self.firm_name or "").strip() else "general"


class ConsultantCardUpload(_CardUpload):
    upload_location: Literal["consultant_card"] = "consultant_card"
    card_type: Literal["CONSULTANT"] = "CONSULTANT"


class ContractorCardUpload(_CardUpload):
    upload_location: Literal["contractor_card"] = "contractor_card"
    card_type: Literal["CONTRACTOR"] = "CONTRACTOR"


class PlanCardUpload(BaseModel):
    upload_location: Literal["plan_card"] = "plan_card"
    section_name: Optional[str] = None
    add_to_documents: bool = True


FilingContext = Annotated[
    Union[GeneralUpload, ConsultantCardUpload, ContractorCardUpload, PlanCardUpload],
    Field(discriminator="upload_location"),
]

_context_adapter = TypeAdapter(FilingContext)


def parse_context(data: Dict[str, Any]):
    """Build the right FilingContext variant from a plain dict."""
    return _context_adapter.validate_python(data)


class FilingOverride(BaseModel):
    path: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.path is None and self.display_name is None


class ResolvedFiling(BaseModel):
    folder_path: str
    display_name: str
    manually_overridden: bool = False
    source_context: FilingContext

    @property
    def storage_key(self) -> str:
        if not self.folder_path:
            return self.display_name
        return f"{self.folder_path}/{self.display_name}"


class DocumentRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    display_name: str
    deleted_at: Optional[datetime] = None


class ClassificationHint(BaseModel):
    category: str = "general"
    confidence: float = 1.0
    firm_name: Optional[str] = None
    discipline_or_trade: Optional[str] = None
    section_name: Optional[str] = None
    reasons: List[str] = Field(default_factory=list)
