import unittest
from datetime import date, timedelta
from types import SimpleNamespace

from sekolah.core.stock_rules import (
    is_expired,
    is_expiring_soon,
    is_low_stock,
    stock_status,
)


class StockRulesTest(unittest.TestCase):
    def setUp(self):
        self.today = date(2026, 3, 1)

    def test_low_stock_is_inclusive(self):
        self.assertTrue(is_low_stock(5, 5))
        self.assertTrue(is_low_stock(0, 1))
        self.assertFalse(is_low_stock(6, 5))

    def test_expired_is_strict(self):
        self.assertTrue(is_expired(self.today - timedelta(days=1), self.today))
        self.assertFalse(is_expired(self.today, self.today))
        self.assertFalse(is_expired(None, self.today))

    def test_expiring_soon_boundaries(self):
        cases = [
            (30, True),
            (31, False),
            (0, True),
            (-3, True),
        ]
        for days, expected in cases:
            with self.subTest(days=days):
                expiry = self.today + timedelta(days=days)
                self.assertEqual(is_expiring_soon(expiry, self.today), expected)
        self.assertFalse(is_expiring_soon(None, self.today))

    def test_accepts_iso_date_string(self):
        self.assertTrue(is_expired("2026-02-28", self.today))
        self.assertTrue(is_expiring_soon("2026-03-20T00:00:00", self.today))

    def test_stock_status_labels(self):
        cases = [
            (SimpleNamespace(jumlah=10, batas_minimal=5, tanggal_kadaluarsa=None), "Stok Aman"),
            (SimpleNamespace(jumlah=5, batas_minimal=5, tanggal_kadaluarsa=None), "Stok Menipis"),
            (
                SimpleNamespace(jumlah=0, batas_minimal=5, tanggal_kadaluarsa=date(2026, 2, 1)),
                "Stok Menipis, Kadaluarsa",
            ),
            (
                SimpleNamespace(jumlah=9, batas_minimal=5, tanggal_kadaluarsa=date(2026, 3, 10)),
                "Stok Aman, Akan Kadaluarsa",
            ),
        ]
        for obat, expected in cases:
            with self.subTest(expected=expected):
                self.assertEqual(stock_status(obat, self.today), expected)


if __name__ == "__main__":
    unittest.main()
