from datetime import date, timedelta

from sekolah.core.dates import normalize_date

DEFAULT_EXPIRING_SOON_DAYS = 30

LOW_STOCK_LABEL = "Stok Menipis"
SAFE_STOCK_LABEL = "Stok Aman"
EXPIRED_LABEL = "Kadaluarsa"
EXPIRING_SOON_LABEL = "Akan Kadaluarsa"


def is_low_stock(jumlah, batas_minimal) -> bool:
    return (jumlah or 0) <= (batas_minimal or 0)


def is_expired(tanggal_kadaluarsa, today=None) -> bool:
    expiry = normalize_date(tanggal_kadaluarsa)
    if expiry is None:
        return False
    return expiry < (today or date.today())


def is_expiring_soon(tanggal_kadaluarsa, today=None, days=DEFAULT_EXPIRING_SOON_DAYS) -> bool:
    expiry = normalize_date(tanggal_kadaluarsa)
    if expiry is None:
        return False
    return expiry <= (today or date.today()) + timedelta(days=days)


def stock_status(obat, today=None, days=DEFAULT_EXPIRING_SOON_DAYS) -> str:
    label = LOW_STOCK_LABEL if is_low_stock(obat.jumlah, obat.batas_minimal) else SAFE_STOCK_LABEL
    if is_expired(obat.tanggal_kadaluarsa, today):
        return f"{label}, {EXPIRED_LABEL}"
    if is_expiring_soon(obat.tanggal_kadaluarsa, today, days):
        return f"{label}, {EXPIRING_SOON_LABEL}"
    return label

