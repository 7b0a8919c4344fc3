"""
Filing classifier
=================
Two ways into the resolver:

  classify_upload(context)  explicit upload flow; the context is used as-is
  classify_hint(hint)       extraction-queue flow; a content-derived category
                            is mapped to the nearest FilingContext

Hint categories:
  invoice                 → general upload, invoice kind (Finance/Invoices)
  consultant_submission   → consultant card submission (Consultants/<disc>)
  contractor_submission   → contractor card submission (Contractors/<trade>)
  plan_document           → plan card (Plan/Misc)
  anything else           → general upload (Plan/Misc)

Low-confidence or incomplete hints fall back to a general upload rather than
failing the filing.
"""
import logging
import re
from typing import Iterable, List, Optional, Tuple

from assemble.config import get_settings
from assemble.filing.context import (
    ClassificationHint,
    ConsultantCardUpload,
    ContractorCardUpload,
    GeneralUpload,
    PlanCardUpload,
)
from assemble.filing.taxonomy import FolderTaxonomy, default_taxonomy

logger = logging.getLogger(__name__)

# ── Keyword rules ─────────────────────────────────────────────────────────────
# (category, [keywords]) matched against file name and first-page text.

RULES = [
    ("invoice", [
        "invoice", "tax invoice", "amount due", "payment claim",
        "remittance", "progress claim",
    ]),
    ("consultant_submission", [
        "fee proposal", "consultant proposal", "scope of services",
        "fee submission", "professional services", "design services",
    ]),
    ("contractor_submission", [
        "tender response", "tender submission", "schedule of rates",
        "trade package", "quotation", "lump sum price",
    ]),
    ("plan_document", [
        "feasibility", "site plan", "planning report", "development application",
        "masterplan", "title and survey", "environmental report",
    ]),
]

# Upload-flow document kinds, checked in order against the file name and then
# the card section name.
FILENAME_KIND_PATTERNS = [
    ("invoice", re.compile(r"invoice|\binv\b")),
    ("submission", re.compile(r"submission|tender response")),
    ("TRR", re.compile(r"\btrr\b|recommendation")),
    ("RFT", re.compile(r"\brft\b|request for tender")),
    ("addendum", re.compile(r"addendum|amendment")),
]
SECTION_KIND_PATTERNS = [
    ("addendum", re.compile(r"addendum")),
    ("submission", re.compile(r"submission")),
    ("TRR", re.compile(r"recommendation|\btrr\b")),
    ("RFT", re.compile(r"request|\brft\b")),
]
CARD_KINDS = frozenset({"submission", "TRR", "RFT", "addendum"})

SUBMISSION_CATEGORIES = {
    "consultant_submission": ConsultantCardUpload,
    "contractor_submission": ContractorCardUpload,
}


def classify_upload(context):
    """Explicit upload context: nothing to infer."""
    return context


def _fallback(hint: ClassificationHint, reason: str) -> GeneralUpload:
    logger.warning(
        "[CLASSIFY] fallback to general filing: category=%s confidence=%.2f reason=%s",
        hint.category, hint.confidence, reason,
    )
    return GeneralUpload(firm_name=hint.firm_name, document_kind="general", add_to_documents=True)


def classify_hint(hint: ClassificationHint, threshold: Optional[float] = None):
    """Map a content-derived hint to a FilingContext. Never raises."""
    if threshold is None:
        threshold = get_settings().classification_confidence_threshold

    category = (hint.category or "").strip().lower()
    if hint.confidence < threshold:
        return _fallback(hint, "low confidence")

    if category == "invoice":
        if not (hint.firm_name or "").strip():
            return _fallback(hint, "invoice without firm name")
        context = GeneralUpload(firm_name=hint.firm_name, document_kind="invoice")
    elif category in SUBMISSION_CATEGORIES:
        if not (hint.discipline_or_trade or "").strip():
            return _fallback(hint, "submission without discipline or trade")
        context = SUBMISSION_CATEGORIES[category](
            discipline_or_trade=hint.discipline_or_trade.strip(),
            firm_name=hint.firm_name,
            section_name=hint.section_name,
            document_kind="submission",
        )
    elif category == "plan_document":
        context = PlanCardUpload(section_name=hint.section_name)
    else:
        return _fallback(hint, "unknown category")

    logger.info("[CLASSIFY] %s (%.2f) → %s", category, hint.confidence, context.upload_location)
    return context


def detect_document_kind(
    file_name: str,
    section_name: Optional[str] = None,
    allowed: Optional[Iterable[str]] = None,
) -> Optional[str]:
    """Document kind suggested by the file name, then the card section name.

    With ``allowed``, kinds outside it are skipped so a later pattern can
    still match.
    """
    allowed = None if allowed is None else frozenset(allowed)
    lowered = (file_name or "").lower()
    section = (section_name or "").lower()
    for patterns, signal in ((FILENAME_KIND_PATTERNS, lowered), (SECTION_KIND_PATTERNS, section)):
        for kind, pattern in patterns:
            if allowed is not None and kind not in allowed:
                continue
            if pattern.search(signal):
                return kind
    return None


def _find_catalog_entry(signals: str, catalog) -> Optional[str]:
    for entry in catalog:
        if re.search(rf"\b{re.escape(entry.lower())}\b", signals):
            return entry
    return None


def _score(signals_name: str, signals_text: str) -> Tuple[str, int, List[str]]:
    best_category, best_score, best_reasons = "general", 0, []
    for category, keywords in RULES:
        score = 0
        reasons = []
        for kw in keywords:
            # File-name hits weigh double.
            if kw in signals_name:
                score += 2
                reasons.append(f"name:{kw}")
            elif kw in signals_text:
                score += 1
                reasons.append(f"text:{kw}")
        if score > best_score:
            best_category, best_score, best_reasons = category, score, reasons
    return best_category, best_score, best_reasons


def infer_hint(
    file_name: str,
    text: str = "",
    firm_name: Optional[str] = None,
    taxonomy: FolderTaxonomy = default_taxonomy,
) -> ClassificationHint:
    """Keyword-rule hint for documents that arrive without one."""
    signals_name = (file_name or "").lower().replace("_", " ").replace("-", " ")
    signals_text = (text or "").lower()[:3000]
    category, score, reasons = _score(signals_name, signals_text)
    confidence = 0.0 if score == 0 else min(0.95, 0.3 + 0.15 * score)

    discipline_or_trade = None
    signals = f"{signals_name} {signals_text}"
    if category == "consultant_submission":
        discipline_or_trade = _find_catalog_entry(signals, taxonomy.disciplines)
    elif category == "contractor_submission":
        discipline_or_trade = _find_catalog_entry(signals, taxonomy.trades)

    return ClassificationHint(
        category=category,
        confidence=round(confidence, 2),
        firm_name=firm_name,
        discipline_or_trade=discipline_or_trade,
        reasons=reasons,
    )
