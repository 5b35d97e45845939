import csv
import json
import tempfile
import unittest
from pathlib import Path

from remito_ingest import summary, write_csv, write_json
from remito_ingest.models import ExtractedItem, InventoryItem


class TestOutputs(unittest.TestCase):
    def test_csv(self):
        items = [ExtractedItem("0123", "PRODUCTO X", 5.0), InventoryItem("0456", "TUERCA", 2.5)]
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "nested" / "items.csv"
            write_csv(items, out)
            with out.open(encoding="utf-8") as f:
                rows = list(csv.reader(f))
        self.assertEqual(rows[0], ["code", "description", "quantity", "barcode"])
        self.assertEqual(rows[1], ["0123", "PRODUCTO X", "5", ""])
        self.assertEqual(rows[2], ["0456", "TUERCA", "2.5", ""])

    def test_json_remito_list(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "items.json"
            write_json([ExtractedItem("0123", "PRODUCTO X", 5.0)], out)
            data = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(data, [{"code": "0123", "description": "PRODUCTO X", "quantity": 5.0}])

    def test_json_inventory_object(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "sheet.json"
            write_json([InventoryItem("0123", "Ñandú", 1.0)], out, inventory_id="7", with_inventory_id=True)
            data = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(
            data,
            {
                "items": [{"code": "0123", "description": "Ñandú", "quantity": 1.0, "barcode": None}],
                "inventoryId": "7",
            },
        )


class TestSummary(unittest.TestCase):
    def test_summary(self):
        stats = summary([ExtractedItem("1", "A", 2.0), ExtractedItem("2", "B", 3.5)])
        self.assertEqual(stats, {"count": 2, "total_quantity": 5.5, "codes": 2})

    def test_empty(self):
        self.assertEqual(summary([]), {"count": 0, "total_quantity": 0, "codes": 0})


if __name__ == "__main__":
    unittest.main()
