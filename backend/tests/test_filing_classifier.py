import unittest

from assemble.filing.classifier import CARD_KINDS, classify_hint, classify_upload, detect_document_kind, infer_hint
from assemble.filing.context import (
    ClassificationHint,
    ConsultantCardUpload,
    ContractorCardUpload,
    GeneralUpload,
    PlanCardUpload,
)
from assemble.filing.resolver import resolve_filing


class ClassifyUploadTests(unittest.TestCase):
    def test_explicit_context_passes_through(self):
        ctx = ConsultantCardUpload(discipline_or_trade="Civil", firm_name="Acme", add_to_documents=False)
        self.assertIs(classify_upload(ctx), ctx)


class ClassifyHintTests(unittest.TestCase):
    def test_invoice_hint(self):
        ctx = classify_hint(ClassificationHint(category="invoice", confidence=0.9, firm_name="Acme"), threshold=0.6)
        self.assertIsInstance(ctx, GeneralUpload)
        self.assertEqual(ctx.document_kind, "invoice")
        self.assertEqual(resolve_filing(ctx, []).folder_path, "Finance/Invoices")

    def test_submission_hints(self):
        consultant = classify_hint(
            ClassificationHint(category="consultant_submission", confidence=0.8, firm_name="Acme",
                               discipline_or_trade="Structural"),
            threshold=0.6,
        )
        contractor = classify_hint(
            ClassificationHint(category="contractor_submission", confidence=0.8, discipline_or_trade=" Tiler "),
            threshold=0.6,
        )
        self.assertIsInstance(consultant, ConsultantCardUpload)
        self.assertEqual(consultant.document_kind, "submission")
        self.assertIsInstance(contractor, ContractorCardUpload)
        self.assertEqual(contractor.discipline_or_trade, "Tiler")

    def test_plan_document_hint(self):
        ctx = classify_hint(ClassificationHint(category="plan_document", confidence=0.7), threshold=0.6)
        self.assertIsInstance(ctx, PlanCardUpload)

    def test_low_confidence_falls_back_with_warning(self):
        hint = ClassificationHint(category="consultant_submission", confidence=0.2, discipline_or_trade="Civil")
        with self.assertLogs("assemble.filing.classifier", level="WARNING") as logs:
            ctx = classify_hint(hint, threshold=0.6)
        self.assertIsInstance(ctx, GeneralUpload)
        self.assertTrue(ctx.add_to_documents)
        self.assertEqual(resolve_filing(ctx, [], "scan.pdf").folder_path, "Plan/Misc")
        self.assertIn("fallback", logs.output[0])

    def test_unknown_or_incomplete_hints_never_raise(self):
        hints = [
            ClassificationHint(category="mystery", confidence=0.99),
            ClassificationHint(category="consultant_submission", confidence=0.99),
            ClassificationHint(category="invoice", confidence=0.99),
        ]
        for hint in hints:
            with self.assertLogs("assemble.filing.classifier", level="WARNING"):
                ctx = classify_hint(hint, threshold=0.6)
            self.assertIsInstance(ctx, GeneralUpload)
            self.assertEqual(resolve_filing(ctx, [], "a.pdf").folder_path, "Plan/Misc")


class DocumentKindDetectionTests(unittest.TestCase):
    def test_filename_patterns(self):
        self.assertEqual(detect_document_kind("invoice-march-2024.pdf"), "invoice")
        self.assertEqual(detect_document_kind("inv-12345.pdf"), "invoice")
        self.assertEqual(detect_document_kind("Tender Response - Acme.pdf"), "submission")
        self.assertEqual(detect_document_kind("TRR final.pdf"), "TRR")
        self.assertEqual(detect_document_kind("RFT Civil.pdf"), "RFT")
        self.assertEqual(detect_document_kind("Amendment 2.pdf"), "addendum")

    def test_section_name_fallback(self):
        self.assertEqual(detect_document_kind("drawing.pdf", "Addendum"), "addendum")
        self.assertEqual(detect_document_kind("drawing.pdf", "Tender Submission"), "submission")
        self.assertIsNone(detect_document_kind("drawing.pdf", "Scope"))

    def test_inv_needs_word_boundary(self):
        self.assertIsNone(detect_document_kind("investment summary.pdf"))

    def test_disallowed_kind_does_not_hide_section_kind(self):
        self.assertEqual(detect_document_kind("Acme invoice copy.pdf", "Tender Submission"), "invoice")
        self.assertEqual(
            detect_document_kind("Acme invoice copy.pdf", "Tender Submission", allowed=CARD_KINDS), "submission"
        )
        self.assertEqual(detect_document_kind("invoice RFT.pdf", None, allowed=CARD_KINDS), "RFT")
        self.assertIsNone(detect_document_kind("invoice.pdf", "Scope", allowed=CARD_KINDS))


class InferHintTests(unittest.TestCase):
    def test_invoice_inferred_with_confidence(self):
        hint = infer_hint("Tax_Invoice_0042.pdf", "Amount due within 30 days", firm_name="Acme")
        self.assertEqual(hint.category, "invoice")
        self.assertGreaterEqual(hint.confidence, 0.6)
        self.assertEqual(hint.firm_name, "Acme")
        self.assertGreater(len(hint.reasons), 0)

    def test_consultant_discipline_from_catalog(self):
        hint = infer_hint("fee_proposal_structural.pdf", "Scope of services for structural engineering")
        self.assertEqual(hint.category, "consultant_submission")
        self.assertEqual(hint.discipline_or_trade, "Structural")
        self.assertGreaterEqual(hint.confidence, 0.6)

    def test_ambiguous_document_has_no_confidence(self):
        hint = infer_hint("doc-123.pdf", "A general company publication.")
        self.assertEqual(hint.category, "general")
        self.assertEqual(hint.confidence, 0.0)
        self.assertEqual(hint.reasons, [])


if __name__ == "__main__":
    unittest.main()
