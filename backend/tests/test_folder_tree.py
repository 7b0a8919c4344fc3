import unittest

from assemble.filing.context import DocumentRef
from assemble.filing.taxonomy import build_canonical_folders
from assemble.filing.tree import build_tree, filter_empty_folders


class FolderTreeTests(unittest.TestCase):
    def test_file_counts_are_exact_path_matches(self):
        tree = build_tree(["Plan", "Plan/Misc"], [{"path": "Plan/Misc"}, {"path": "Plan/Misc"}])
        plan = tree.find("Plan")
        misc = tree.find("Plan/Misc")
        self.assertEqual(misc.file_count, 2)
        self.assertEqual(plan.file_count, 0)
        self.assertTrue(plan.is_expandable)
        self.assertTrue(misc.is_expandable)
        self.assertEqual(tree.name, "Documents")
        self.assertEqual(tree.path, "")

    def test_leaf_without_files_not_expandable(self):
        tree = build_tree(["Finance", "Finance/Budget"], [])
        self.assertFalse(tree.find("Finance/Budget").is_expandable)
        self.assertTrue(tree.find("Finance").is_expandable)

    def test_no_duplicate_siblings(self):
        tree = build_tree(["Plan/Misc", "Plan", "Plan/Misc", "Plan/Feasibility"], [])
        self.assertEqual([child.name for child in tree.children], ["Plan"])
        self.assertEqual([child.name for child in tree.children[0].children], ["Misc", "Feasibility"])

    def test_taxonomy_order_preserved(self):
        tree = build_tree(build_canonical_folders(["Civil"], ["Roofer"]), [])
        self.assertEqual(
            [child.name for child in tree.children],
            ["Plan", "Scheme", "Detail", "Procure", "Delivery", "Consultants", "Contractors", "Admin", "Finance"],
        )

    def test_unclassified_document_paths_become_nodes(self):
        docs = [
            DocumentRef(path="Zeta/Old", display_name="a.PDF"),
            DocumentRef(path="Archive/2019", display_name="b.PDF"),
            DocumentRef(path="Plan/Legacy", display_name="c.PDF"),
        ]
        tree = build_tree(["Plan", "Plan/Misc", "Finance"], docs)
        self.assertEqual([child.name for child in tree.children], ["Plan", "Finance", "Archive", "Zeta"])
        self.assertEqual([child.name for child in tree.find("Plan").children], ["Misc", "Legacy"])
        self.assertEqual(tree.find("Archive/2019").file_count, 1)

    def test_filter_keeps_only_branches_with_files(self):
        folders = build_canonical_folders(["Architect", "Electrical", "Structural"], ["Plumber"])
        tree = build_tree(folders, [{"path": "Consultants/Electrical"}])
        pruned = filter_empty_folders(tree)
        self.assertEqual([child.name for child in pruned.children], ["Consultants"])
        self.assertEqual([child.name for child in pruned.children[0].children], ["Electrical"])
        self.assertEqual(pruned.children[0].children[0].file_count, 1)
        # source tree untouched
        self.assertEqual(len(tree.find("Consultants").children), 3)

    def test_filter_empty_tree_returns_none(self):
        tree = build_tree(build_canonical_folders(), [])
        self.assertIsNone(filter_empty_folders(tree))

    def test_rebuild_reflects_new_snapshot(self):
        folders = ["Plan", "Plan/Misc"]
        first = build_tree(folders, [{"path": "Plan/Misc"}])
        second = build_tree(folders, [{"path": "Plan/Misc"}, {"path": "Plan"}])
        self.assertEqual(first.find("Plan").file_count, 0)
        self.assertEqual(second.find("Plan").file_count, 1)
        self.assertEqual(second.find("Plan/Misc").file_count, 1)


if __name__ == "__main__":
    unittest.main()
