import os
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from unittest import mock

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from sekolah.core.access import locations_for_role
from sekolah.core.errors import ValidationFailed
from sekolah.database.base import Base
from sekolah.models import Obat, RiwayatObat, import_all_models
from sekolah.services.obat_service import record_usage, sweep_expired

ADMIN = locations_for_role("admin")
TODAY = date(2026, 6, 1)


class ConcurrentWriterTestCase(unittest.TestCase):
    """Two sessions on one SQLite file; the second writes while the first
    is between its read and its conditional write."""

    def setUp(self):
        import_all_models()
        self._tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self._tmpdir.name, "inventaris.db")
        self.engine = create_engine(f"sqlite:///{db_path}", connect_args={"timeout": 5})
        Base.metadata.create_all(bind=self.engine)
        Session = sessionmaker(bind=self.engine)
        self.db = Session()
        self.other = Session()

    def tearDown(self):
        self.db.close()
        self.other.close()
        self.engine.dispose()
        self._tmpdir.cleanup()

    def _add_obat(self, **values):
        data = {"nama_obat": "Oralit", "jumlah": 5, "lokasi": "SD", "batas_minimal": 1}
        data.update(values)
        obat = Obat(**data)
        self.db.add(obat)
        self.db.commit()
        return obat.id

    def _between_read_and_write(self, change):
        """Patch the service clock, which is read after the row is selected
        and before the conditional UPDATE, to run ``change`` once."""
        calls = []

        def clock():
            if not calls:
                calls.append(True)
                change()
            return datetime.now(timezone.utc)

        return mock.patch("sekolah.services.obat_service.utcnow", side_effect=clock)

    def _change_row(self, obat_id, **values):
        def change():
            obat = self.other.get(Obat, obat_id)
            for key, value in values.items():
                setattr(obat, key, value)
            self.other.commit()

        return change

    def _fresh(self, obat_id):
        self.other.expire_all()
        obat = self.other.get(Obat, obat_id)
        ledger = self.other.execute(
            select(RiwayatObat).where(RiwayatObat.obat_id == obat_id)
        ).scalars().all()
        return obat, ledger


class UsageRaceTest(ConcurrentWriterTestCase):
    def test_usage_against_stale_stock_is_rejected(self):
        obat_id = self._add_obat(jumlah=5)

        with self._between_read_and_write(self._change_row(obat_id, jumlah=1)):
            with self.assertRaises(ValidationFailed) as ctx:
                record_usage(self.db, obat_id, 3, ADMIN)

        self.assertIn("jumlah_keluar", ctx.exception.fields)
        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 1)
        self.assertEqual(ledger, [])


class SweepRaceTest(ConcurrentWriterTestCase):
    def test_sweep_skips_row_whose_stock_changed(self):
        obat_id = self._add_obat(jumlah=5, tanggal_kadaluarsa=TODAY - timedelta(days=1))

        with self._between_read_and_write(self._change_row(obat_id, jumlah=3)):
            self.assertEqual(sweep_expired(self.db, ADMIN, TODAY), 0)

        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 3)
        self.assertEqual(ledger, [])

        self.assertEqual(sweep_expired(self.db, ADMIN, TODAY), 1)
        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 0)
        self.assertEqual([entry.jumlah_keluar for entry in ledger], [3])

    def test_sweep_skips_row_no_longer_expired(self):
        obat_id = self._add_obat(jumlah=5, tanggal_kadaluarsa=TODAY - timedelta(days=1))

        with self._between_read_and_write(
            self._change_row(obat_id, tanggal_kadaluarsa=date(2027, 1, 1))
        ):
            self.assertEqual(sweep_expired(self.db, ADMIN, TODAY), 0)

        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 5)
        self.assertEqual(obat.tanggal_kadaluarsa, date(2027, 1, 1))
        self.assertEqual(ledger, [])

    def test_sweep_skips_row_deleted_meanwhile(self):
        obat_id = self._add_obat(jumlah=5, tanggal_kadaluarsa=TODAY - timedelta(days=1))

        with self._between_read_and_write(
            self._change_row(obat_id, deleted_at=datetime.now(timezone.utc))
        ):
            self.assertEqual(sweep_expired(self.db, ADMIN, TODAY), 0)

        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 5)
        self.assertEqual(ledger, [])

    def test_sweep_skips_row_moved_out_of_scope(self):
        obat_id = self._add_obat(jumlah=5, lokasi="SD", tanggal_kadaluarsa=TODAY - timedelta(days=1))

        with self._between_read_and_write(self._change_row(obat_id, lokasi="SMP")):
            self.assertEqual(sweep_expired(self.db, locations_for_role("operator_sd"), TODAY), 0)

        obat, ledger = self._fresh(obat_id)
        self.assertEqual(obat.jumlah, 5)
        self.assertEqual(ledger, [])


if __name__ == "__main__":
    unittest.main()
