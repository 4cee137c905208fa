import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from sekolah.core.constants import UserRole
from sekolah.core.logging import setup_logging
from sekolah.database import Base, SessionLocal, engine, ensure_sqlite_schema
from sekolah.models import Inventaris, MasterSatuan, Obat, RiwayatObat, User, import_all_models
from sekolah.services.auth_service import create_user
from sekolah.services.satuan_service import seed_default_satuan


def parse_args():
    parser = argparse.ArgumentParser(description="Seed users, units and sample school inventory.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    parser.add_argument(
        "--password",
        default="changeme",
        help="Password given to every seeded user (default: changeme).",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(RiwayatObat))
            db.execute(delete(Obat))
            db.execute(delete(Inventaris))
            db.execute(delete(MasterSatuan))
            db.execute(delete(User))
            db.commit()

        seed_default_satuan(db)

        has_user = db.execute(select(User.id).limit(1)).first()
        if has_user:
            print("Seed skipped: users already exist.")
            return

        for role in UserRole:
            username = "admin" if role is UserRole.ADMIN else role.value.replace("operator_", "op_")
            create_user(db, username, args.password, role.value, full_name=role.value.replace("_", " ").title())

        today = date.today()
        db.add_all(
            [
                Inventaris(nama_barang="Meja Siswa", kategori="Perabot", jumlah=30, lokasi="SD", kondisi="Baik"),
                Inventaris(nama_barang="Kursi Siswa", kategori="Perabot", jumlah=28, lokasi="SD", kondisi="Rusak Ringan"),
                Inventaris(nama_barang="Proyektor", kategori="Elektronik", jumlah=2, lokasi="SMP", kondisi="Rusak Berat"),
                Inventaris(nama_barang="Buku Cerita", kategori="Buku", jumlah=120, lokasi="PAUD", kondisi="Baik"),
                Inventaris(nama_barang="Alat Peraga", kategori="Peralatan", jumlah=15, lokasi="TK", kondisi="Baik"),
            ]
        )
        db.add_all(
            [
                Obat(
                    nama_obat="Parasetamol",
                    jumlah=40,
                    lokasi="SD",
                    satuan="tablet",
                    tanggal_kadaluarsa=today + timedelta(days=200),
                    batas_minimal=10,
                ),
                Obat(
                    nama_obat="Betadine",
                    jumlah=3,
                    lokasi="SMP",
                    satuan="botol",
                    tanggal_kadaluarsa=today + timedelta(days=20),
                    batas_minimal=5,
                ),
                Obat(
                    nama_obat="Plester",
                    jumlah=50,
                    lokasi="PAUD",
                    satuan="box",
                    batas_minimal=5,
                ),
            ]
        )
        db.commit()
        print(f"Seed data created. Users: admin, op_paud, op_tk, op_sd, op_smp (password: {args.password}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
