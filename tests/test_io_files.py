import os
import tempfile
import unittest

from config import CFG
from io_files import write_table, write_layout_view_html


class WriteOutputsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self._orig_table = CFG.TABLE_OUT
        self._orig_layout = CFG.LAYOUT_HTML

    def tearDown(self) -> None:
        CFG.TABLE_OUT = self._orig_table
        CFG.LAYOUT_HTML = self._orig_layout

    def test_write_table_uses_configured_relative_path(self) -> None:
        CFG.TABLE_OUT = "outputs/custom_table.txt"
        table = [[1, 4], [3, 2]]

        path = write_table(table, True, 17, self.tmpdir.name)

        expected = os.path.join(self.tmpdir.name, "outputs", "custom_table.txt")
        self.assertEqual(path, expected)
        self.assertTrue(os.path.exists(path))

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertEqual(
            contents,
            "    1    4\n    3    2\nCalculation completed after 17 iterations.\n",
        )

    def test_write_table_reports_failure(self) -> None:
        CFG.TABLE_OUT = "table.txt"

        path = write_table([[0, 0], [0, 0]], False, 9, self.tmpdir.name)

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertEqual(contents, "No path found.\nCalculation completed after 9 iterations.\n")

    def test_write_layout_view_html_accepts_absolute_path(self) -> None:
        target = os.path.join(self.tmpdir.name, "html", "layout.html")
        CFG.LAYOUT_HTML = target

        svg = "<svg></svg>"
        legend = "<li>start</li>"

        path = write_layout_view_html(svg, legend, self.tmpdir.name, title="5 × 5")

        self.assertEqual(path, target)
        self.assertTrue(os.path.exists(path))

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn(svg, contents)
        self.assertIn(legend, contents)
        self.assertIn("<title>5 × 5</title>", contents)


if __name__ == "__main__":
    unittest.main()
