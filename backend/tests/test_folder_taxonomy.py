import unittest

from assemble.filing.taxonomy import (
    CONSULTANT_DISCIPLINES,
    CONTRACTOR_TRADES,
    FolderTaxonomy,
    build_canonical_folders,
    sort_folders,
    tier_of,
    tier_rank,
)


class FolderTaxonomyTests(unittest.TestCase):
    def test_active_disciplines_in_given_order_only(self):
        folders = build_canonical_folders(["Structural", "Architect"], ["Plumber"])
        consultants = [f for f in folders if f.startswith("Consultants/")]
        self.assertEqual(consultants, ["Consultants/Structural", "Consultants/Architect"])
        self.assertEqual([f for f in folders if f.startswith("Scheme/")], ["Scheme/Structural", "Scheme/Architect"])
        self.assertEqual([f for f in folders if f.startswith("Detail/")], ["Detail/Structural", "Detail/Architect"])
        self.assertEqual([f for f in folders if f.startswith("Contractors/")], ["Contractors/Plumber"])

    def test_active_entries_are_normalised_paths(self):
        folders = build_canonical_folders([" Fire / Life Safety ", "Fire//Life Safety"], ["Plumber"])
        consultants = [f for f in folders if f.startswith("Consultants/")]
        self.assertEqual(consultants, ["Consultants/Fire", "Consultants/Fire/Life Safety"])

    def test_empty_active_lists_fall_back_to_catalog(self):
        folders = build_canonical_folders([], None)
        self.assertEqual(
            [f for f in folders if f.startswith("Consultants/")],
            [f"Consultants/{d}" for d in CONSULTANT_DISCIPLINES],
        )
        self.assertEqual(
            [f for f in folders if f.startswith("Contractors/")],
            [f"Contractors/{t}" for t in CONTRACTOR_TRADES],
        )

    def test_fixed_tiers_and_parent_ordering(self):
        folders = build_canonical_folders(["Civil"], ["Roofer"])
        self.assertEqual(
            folders[:7],
            ["Plan", "Plan/Feasibility", "Plan/Environmental", "Plan/Technical",
             "Plan/Title and Survey", "Plan/Planning", "Plan/Misc"],
        )
        self.assertIn("Delivery", folders)
        self.assertNotIn("Delivery/", " ".join(folders))
        self.assertEqual(folders[-4:], ["Finance", "Finance/Invoices", "Finance/Payments", "Finance/Budget"])
        self.assertEqual(len(folders), len(set(folders)))
        for index, path in enumerate(folders):
            if "/" in path:
                parent = path.rsplit("/", 1)[0]
                self.assertLess(folders.index(parent), index)

    def test_blank_and_repeated_active_entries_ignored(self):
        folders = build_canonical_folders(["Civil", " ", "Civil", "Flood"], [])
        self.assertEqual([f for f in folders if f.startswith("Consultants/")], ["Consultants/Civil", "Consultants/Flood"])

    def test_injected_catalog_does_not_touch_default(self):
        custom = FolderTaxonomy(disciplines=["Lighting"], trades=["Rigger"])
        folders = custom.build_canonical_folders()
        self.assertIn("Scheme/Lighting", folders)
        self.assertIn("Contractors/Rigger", folders)
        self.assertNotIn("Scheme/Architect", folders)
        self.assertIn("Scheme/Architect", build_canonical_folders())

    def test_empty_catalog_omits_discipline_tiers(self):
        folders = FolderTaxonomy(disciplines=[], trades=[]).build_canonical_folders()
        self.assertNotIn("Scheme", folders)
        self.assertNotIn("Consultants", folders)
        self.assertNotIn("Contractors", folders)
        self.assertIn("Procure/Tender Pack", folders)

    def test_sort_folders_by_tier_then_name(self):
        ordered = sort_folders(["Finance/Budget", "Zeta", "Plan/Misc", "Admin", "Plan", "Alpha/x"])
        self.assertEqual(ordered, ["Plan", "Plan/Misc", "Admin", "Finance/Budget", "Alpha/x", "Zeta"])
        self.assertEqual(tier_rank("Unknown/Thing"), 9)
        self.assertEqual(tier_rank("Consultants/Civil"), 5)
        self.assertEqual(tier_of("/Finance/Invoices/"), "Finance")


if __name__ == "__main__":
    unittest.main()
