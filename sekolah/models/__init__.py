import importlib

from sekolah.models.inventaris import Inventaris
from sekolah.models.master_satuan import MasterSatuan
from sekolah.models.obat import Obat
from sekolah.models.riwayat_obat import RiwayatObat
from sekolah.models.user import User


def import_all_models() -> None:
    for module_name in (
        "sekolah.models.inventaris",
        "sekolah.models.master_satuan",
        "sekolah.models.obat",
        "sekolah.models.riwayat_obat",
        "sekolah.models.user",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Inventaris",
    "MasterSatuan",
    "Obat",
    "RiwayatObat",
    "User",
    "import_all_models",
]
