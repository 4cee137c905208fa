import unittest
from datetime import date, timedelta

from sqlalchemy import func, select

from sekolah.core.access import locations_for_role
from sekolah.core.errors import AccessDenied, RecordNotFound, ValidationFailed
from sekolah.core.stock_rules import is_low_stock
from sekolah.models.obat import Obat
from sekolah.models.riwayat_obat import RiwayatObat
from sekolah.schemas.obat import ObatCreate, ObatUpdate
from sekolah.services.obat_service import (
    create_obat,
    get_obat,
    list_obat,
    list_riwayat,
    record_usage,
    soft_delete_obat,
    sweep_expired,
    update_obat,
)
from support import make_session

ADMIN = locations_for_role("admin")
OPERATOR_SD = locations_for_role("operator_sd")
OPERATOR_SMP = locations_for_role("operator_smp")


class ObatServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.db = make_session()
        self.today = date(2026, 5, 10)

    def tearDown(self):
        self.db.close()

    def _create(self, **overrides):
        data = {"nama_obat": "Parasetamol", "jumlah": 10, "batas_minimal": 5, "lokasi": "SD"}
        data.update(overrides)
        return create_obat(self.db, ObatCreate(**data), ADMIN)

    def _ledger(self, obat_id):
        return (
            self.db.execute(select(RiwayatObat).where(RiwayatObat.obat_id == obat_id))
            .scalars()
            .all()
        )


class RecordUsageTest(ObatServiceTestCase):
    def test_usage_decrements_stock_and_appends_ledger(self):
        obat = self._create()
        self.assertFalse(is_low_stock(obat.jumlah, obat.batas_minimal))

        updated = record_usage(self.db, obat.id, 6, OPERATOR_SD)

        self.assertEqual(updated.jumlah, 4)
        self.assertTrue(is_low_stock(updated.jumlah, updated.batas_minimal))
        ledger = self._ledger(obat.id)
        self.assertEqual(len(ledger), 1)
        self.assertEqual(ledger[0].jumlah_keluar, 6)
        self.assertEqual(ledger[0].keterangan, "Pemakaian manual")

    def test_usage_keeps_caller_note(self):
        obat = self._create()
        record_usage(self.db, obat.id, 1, OPERATOR_SD, keterangan="UKS kelas 3", user_id=None)
        self.assertEqual(self._ledger(obat.id)[0].keterangan, "UKS kelas 3")

    def test_usage_above_stock_changes_nothing(self):
        obat = self._create(jumlah=3)

        with self.assertRaises(ValidationFailed) as ctx:
            record_usage(self.db, obat.id, 4, OPERATOR_SD)

        self.assertIn("jumlah_keluar", ctx.exception.fields)
        self.assertEqual(get_obat(self.db, obat.id, ADMIN).jumlah, 3)
        self.assertEqual(self._ledger(obat.id), [])

    def test_usage_of_entire_stock_is_allowed(self):
        obat = self._create(jumlah=3)
        self.assertEqual(record_usage(self.db, obat.id, 3, OPERATOR_SD).jumlah, 0)

    def test_non_positive_usage_is_rejected(self):
        obat = self._create()
        for quantity in (0, -2):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValidationFailed):
                    record_usage(self.db, obat.id, quantity, OPERATOR_SD)
        self.assertEqual(get_obat(self.db, obat.id, ADMIN).jumlah, 10)
        self.assertEqual(self._ledger(obat.id), [])

    def test_usage_outside_visible_locations_is_not_found(self):
        obat = self._create(lokasi="SD")
        with self.assertRaises(RecordNotFound):
            record_usage(self.db, obat.id, 1, OPERATOR_SMP)
        with self.assertRaises(RecordNotFound):
            record_usage(self.db, 9999, 1, ADMIN)

    def test_usage_on_soft_deleted_medicine_is_not_found(self):
        obat = self._create()
        soft_delete_obat(self.db, obat.id, OPERATOR_SD)
        with self.assertRaises(RecordNotFound):
            record_usage(self.db, obat.id, 1, OPERATOR_SD)


class SweepExpiredTest(ObatServiceTestCase):
    def test_sweep_zeroes_expired_stock_once(self):
        obat = self._create(jumlah=20, tanggal_kadaluarsa=self.today - timedelta(days=1))

        self.assertEqual(sweep_expired(self.db, ADMIN, self.today), 1)

        self.assertEqual(get_obat(self.db, obat.id, ADMIN).jumlah, 0)
        ledger = self._ledger(obat.id)
        self.assertEqual(len(ledger), 1)
        self.assertEqual(ledger[0].jumlah_keluar, 20)
        self.assertIn("kadaluarsa pada 10/05/2026", ledger[0].keterangan)

        self.assertEqual(sweep_expired(self.db, ADMIN, self.today), 0)
        self.assertEqual(len(self._ledger(obat.id)), 1)

    def test_sweep_skips_rows_that_are_not_expired(self):
        expires_today = self._create(nama_obat="A", tanggal_kadaluarsa=self.today)
        future = self._create(nama_obat="B", tanggal_kadaluarsa=self.today + timedelta(days=3))
        no_date = self._create(nama_obat="C")
        empty = self._create(nama_obat="D", jumlah=0, tanggal_kadaluarsa=self.today - timedelta(days=9))

        self.assertEqual(sweep_expired(self.db, ADMIN, self.today), 0)
        for obat in (expires_today, future, no_date, empty):
            self.assertEqual(self._ledger(obat.id), [])

    def test_sweep_is_limited_to_given_locations(self):
        expired = self.today - timedelta(days=2)
        sd = self._create(lokasi="SD", tanggal_kadaluarsa=expired)
        smp = self._create(lokasi="SMP", tanggal_kadaluarsa=expired)

        self.assertEqual(sweep_expired(self.db, OPERATOR_SD, self.today), 1)

        self.assertEqual(get_obat(self.db, sd.id, ADMIN).jumlah, 0)
        self.assertEqual(get_obat(self.db, smp.id, ADMIN).jumlah, 10)

    def test_sweep_ignores_soft_deleted_rows(self):
        obat = self._create(tanggal_kadaluarsa=self.today - timedelta(days=2))
        soft_delete_obat(self.db, obat.id, ADMIN)
        self.assertEqual(sweep_expired(self.db, ADMIN, self.today), 0)

    def test_stock_always_matches_ledger(self):
        obat = self._create(jumlah=25, tanggal_kadaluarsa=self.today + timedelta(days=5))
        record_usage(self.db, obat.id, 4, OPERATOR_SD)
        record_usage(self.db, obat.id, 7, OPERATOR_SD)
        with self.assertRaises(ValidationFailed):
            record_usage(self.db, obat.id, 50, OPERATOR_SD)

        later = self.today + timedelta(days=6)
        sweep_expired(self.db, ADMIN, later)
        sweep_expired(self.db, ADMIN, later)

        total_out = self.db.execute(
            select(func.sum(RiwayatObat.jumlah_keluar)).where(RiwayatObat.obat_id == obat.id)
        ).scalar_one()
        current = get_obat(self.db, obat.id, ADMIN).jumlah
        self.assertEqual(current, 0)
        self.assertEqual(25 - total_out, current)
        self.assertEqual(len(self._ledger(obat.id)), 3)


class ObatCrudTest(ObatServiceTestCase):
    def test_list_is_scoped_and_newest_first(self):
        first = self._create(nama_obat="Antasida", lokasi="SD")
        second = self._create(nama_obat="Betadine", lokasi="SD")
        self._create(nama_obat="Kasa", lokasi="SMP")

        names = [obat.nama_obat for obat in list_obat(self.db, OPERATOR_SD)]
        self.assertEqual(names, [second.nama_obat, first.nama_obat])
        self.assertEqual(len(list_obat(self.db, ADMIN)), 3)

    def test_list_filters(self):
        self._create(nama_obat="Antasida", jumlah=2)
        self._create(nama_obat="Betadine", jumlah=50, keterangan="Luka ringan")

        self.assertEqual([o.nama_obat for o in list_obat(self.db, ADMIN, low_stock=True)], ["Antasida"])
        self.assertEqual([o.nama_obat for o in list_obat(self.db, ADMIN, query="LUKA")], ["Betadine"])
        with self.assertRaises(AccessDenied):
            list_obat(self.db, OPERATOR_SD, lokasi="SMP")

    def test_create_outside_scope_is_denied(self):
        payload = ObatCreate(nama_obat="Kasa", jumlah=5, lokasi="SMP")
        with self.assertRaises(AccessDenied):
            create_obat(self.db, payload, OPERATOR_SD)
        self.assertEqual(self.db.execute(select(func.count(Obat.id))).scalar_one(), 0)

    def test_update_cannot_move_medicine_out_of_scope(self):
        obat = self._create()
        payload = ObatUpdate(nama_obat="Parasetamol", jumlah=10, lokasi="SMP")
        with self.assertRaises(AccessDenied):
            update_obat(self.db, obat.id, payload, OPERATOR_SD)
        self.assertEqual(get_obat(self.db, obat.id, ADMIN).lokasi, "SD")

    def test_update_replaces_fields(self):
        obat = self._create()
        payload = ObatUpdate(
            nama_obat="Parasetamol 500mg",
            jumlah=12,
            lokasi="SD",
            satuan="strip",
            tanggal_kadaluarsa="2027-01-31",
            batas_minimal=3,
        )
        updated = update_obat(self.db, obat.id, payload, OPERATOR_SD)
        self.assertEqual(updated.nama_obat, "Parasetamol 500mg")
        self.assertEqual(updated.satuan, "strip")
        self.assertEqual(updated.tanggal_kadaluarsa, date(2027, 1, 31))

    def test_soft_delete_hides_row_but_keeps_it(self):
        obat = self._create()
        soft_delete_obat(self.db, obat.id, OPERATOR_SD)

        self.assertEqual(list_obat(self.db, ADMIN), [])
        self.assertIsNotNone(self.db.get(Obat, obat.id).deleted_at)

    def test_riwayat_is_joined_and_scoped(self):
        sd = self._create(nama_obat="Antasida", lokasi="SD")
        smp = self._create(nama_obat="Kasa", lokasi="SMP")
        record_usage(self.db, sd.id, 2, ADMIN)
        record_usage(self.db, smp.id, 1, ADMIN)

        rows = list_riwayat(self.db, OPERATOR_SD)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["nama_obat"], "Antasida")
        self.assertEqual(rows[0]["lokasi"], "SD")
        self.assertEqual(len(list_riwayat(self.db, ADMIN)), 2)


if __name__ == "__main__":
    unittest.main()
