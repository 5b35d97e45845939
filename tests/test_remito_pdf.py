import tempfile
import unittest
from pathlib import Path

import pypdfium2 as pdfium

from remito_ingest import PdfParseError, parse_remito_pdf
from remito_ingest.models import ExtractedItem, PositionedRun
from remito_ingest.remito import extract_remito_items, read_glyph_pages

from pdf_fixtures import write_text_pdf


def run(x, y, text):
    return PositionedRun(x=x, y=y, text=text, width=len(text) * 5.0)


def item_line(y, code, desc, qty, unit="UN"):
    return [run(10, y, code), run(60, y, desc), run(300, y, qty), run(340, y, unit)]


class TestRemitoPages(unittest.TestCase):
    def setUp(self):
        header = [run(10, 800, "REMITO R 0001-00012345"), run(300, 800, "Fecha 12/03/2025")]
        self.page_single = header + item_line(700, "0123", "PRODUCTO X", "5,00") + item_line(
            680, "0123", "PRODUCTO X BIS", "3,00"
        )
        self.page_multi = [
            run(10, 700, "PRODUCTO Y"), run(200, 700, "0456"), run(240, 700, "/ /"),
            run(300, 680, "2,00"), run(340, 680, "UN"),
            run(10, 660, "PRODUCTO Z"), run(200, 660, "0789"), run(240, 660, "/ /"),
        ]
        self.page_duplicate = [run(250, 820, "DUPLICADO")] + item_line(700, "0999", "OTRO", "1,00")

    def test_items_across_pages_aggregated(self):
        items = extract_remito_items([self.page_single, self.page_multi])
        self.assertEqual(
            items,
            [ExtractedItem("0123", "PRODUCTO X", 8.0), ExtractedItem("0456", "PRODUCTO Y", 2.0)],
        )

    def test_duplicate_copy_stops_document(self):
        later = item_line(700, "0555", "POSTERIOR", "1,00")
        items = extract_remito_items([self.page_single, self.page_duplicate, later])
        self.assertEqual([i.code for i in items], ["0123"])

    def test_duplicate_marker_mid_page(self):
        page = item_line(700, "0123", "PRODUCTO X", "5,00") + [run(10, 650, "TRIPLICADO")] + item_line(
            600, "0456", "PRODUCTO Y", "1,00"
        )
        items = extract_remito_items([page])
        self.assertEqual(items, [ExtractedItem("0123", "PRODUCTO X", 5.0)])

    def test_duplicate_only_document_is_empty(self):
        self.assertEqual(extract_remito_items([self.page_duplicate]), [])

    def test_pending_item_does_not_cross_pages(self):
        next_page = [run(300, 700, "4,00"), run(340, 700, "UN")]
        items = extract_remito_items([self.page_multi, next_page])
        self.assertEqual([i.code for i in items], ["0456"])

    def test_deterministic(self):
        pages = [self.page_single, self.page_multi]
        self.assertEqual(extract_remito_items(pages), extract_remito_items(pages))


class TestRemitoPdfBytes(unittest.TestCase):
    def test_garbage_bytes(self):
        with self.assertRaises(PdfParseError):
            parse_remito_pdf(b"definitely not a pdf")

    def test_blank_pdf_has_no_items(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "blank.pdf"
            doc = pdfium.PdfDocument.new()
            doc.new_page(595, 842)
            doc.save(str(path))
            self.assertEqual(parse_remito_pdf(path.read_bytes()), [])


if __name__ == "__main__":
    unittest.main()


class TestRemitoPdfWithText(unittest.TestCase):
    """Round trip through pdfplumber on PDFs that actually carry text."""

    PAGES = [
        [
            (40, 780, "REMITO 0001-00012345"),
            (300, 780, "Fecha 12/03/2025"),
            (40, 700, "0123"), (90, 700, "PRODUCTO X"), (300, 700, "5,00"), (340, 700, "UN"),
        ],
        [
            (40, 700, "PRODUCTO Y"), (200, 700, "0456"), (240, 700, "/ /"),
            (300, 680, "2,00"), (340, 680, "UN"),
        ],
        [
            (250, 800, "DUPLICADO"),
            (40, 700, "0999"), (90, 700, "OTRO"), (300, 700, "1,00"), (340, 700, "UN"),
        ],
        [
            (40, 700, "0555"), (90, 700, "POSTERIOR"), (300, 700, "1,00"), (340, 700, "UN"),
        ],
    ]

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        path = Path(self._tmp.name) / "remito.pdf"
        write_text_pdf(self.PAGES, path)
        self.data = path.read_bytes()

    def tearDown(self):
        self._tmp.cleanup()

    def test_glyph_runs_in_pdf_space(self):
        pages = read_glyph_pages(self.data)
        self.assertEqual(len(pages), 4)
        runs = {r.text.strip(): r for r in pages[0]}
        code = runs["0123"]
        self.assertAlmostEqual(code.x, 40, delta=1)
        # bottom of the glyph box sits just under the baseline
        self.assertAlmostEqual(code.y, 700, delta=4)
        self.assertGreater(code.width, 10)
        self.assertLess(code.width, 40)
        # blank characters stay inside the run
        self.assertIn("PRODUCTO X", runs)
        self.assertGreater(runs["REMITO 0001-00012345"].y, code.y)

    def test_items_and_duplicate_stop(self):
        items = parse_remito_pdf(self.data)
        self.assertEqual(
            items,
            [ExtractedItem("0123", "PRODUCTO X", 5.0), ExtractedItem("0456", "PRODUCTO Y", 2.0)],
        )
