from enum import Enum


class Lokasi(str, Enum):
    PAUD = "PAUD"
    TK = "TK"
    SD = "SD"
    SMP = "SMP"


class Kategori(str, Enum):
    PERALATAN = "Peralatan"
    PERABOT = "Perabot"
    ELEKTRONIK = "Elektronik"
    BUKU = "Buku"
    OBAT_OBATAN = "Obat-obatan"


class Kondisi(str, Enum):
    BAIK = "Baik"
    RUSAK_RINGAN = "Rusak Ringan"
    RUSAK_BERAT = "Rusak Berat"


class UserRole(str, Enum):
    ADMIN = "admin"
    OPERATOR_PAUD = "operator_paud"
    OPERATOR_TK = "operator_tk"
    OPERATOR_SD = "operator_sd"
    OPERATOR_SMP = "operator_smp"


ALL_LOKASI = tuple(Lokasi)

# Reports list locations in this order, unknown values last.
LOKASI_ORDER = {lokasi.value: index for index, lokasi in enumerate(ALL_LOKASI)}

DEFAULT_BATAS_MINIMAL = 5
MANUAL_USAGE_NOTE = "Pemakaian manual"
EXPIRED_USAGE_NOTE = "Otomatis dikurangi karena kadaluarsa pada {date}"
