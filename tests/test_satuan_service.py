import unittest
from unittest import mock

from sqlalchemy.exc import OperationalError

from sekolah.models.master_satuan import MasterSatuan
from sekolah.services.satuan_service import add_satuan, list_satuan, seed_default_satuan
from support import make_session


class SatuanServiceTest(unittest.TestCase):
    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_falls_back_to_defaults_when_empty(self):
        self.assertEqual(list_satuan(self.db), ["pcs", "botol", "tablet", "strip", "box", "roll"])

    def test_seed_is_idempotent(self):
        self.assertEqual(seed_default_satuan(self.db), 6)
        self.assertEqual(seed_default_satuan(self.db), 0)
        self.assertEqual(list_satuan(self.db), sorted(["pcs", "botol", "tablet", "strip", "box", "roll"]))

    def test_seed_rolls_back_failed_commit(self):
        with mock.patch.object(self.db, "commit", side_effect=OperationalError("INSERT", {}, Exception("locked"))):
            with mock.patch.object(self.db, "rollback", wraps=self.db.rollback) as rollback:
                with self.assertRaises(OperationalError):
                    seed_default_satuan(self.db)
        rollback.assert_called_once_with()
        self.assertEqual(self.db.query(MasterSatuan).count(), 0)

    def test_add_reactivates_case_insensitive_match(self):
        satuan = add_satuan(self.db, "Sachet")
        satuan.is_active = False
        self.db.commit()

        again = add_satuan(self.db, " sachet ")

        self.assertEqual(again.id, satuan.id)
        self.assertTrue(again.is_active)
        self.assertEqual(self.db.query(MasterSatuan).count(), 1)
        self.assertEqual(list_satuan(self.db), ["Sachet"])


if __name__ == "__main__":
    unittest.main()
