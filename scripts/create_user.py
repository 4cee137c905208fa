import argparse
import getpass
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import select

from sekolah.core.constants import UserRole
from sekolah.core.logging import setup_logging
from sekolah.database import Base, SessionLocal, engine, ensure_sqlite_schema
from sekolah.models import User, import_all_models
from sekolah.services.auth_service import create_user, set_password


def parse_args():
    parser = argparse.ArgumentParser(description="Create a user or reset its password.")
    parser.add_argument("username")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
    )
    parser.add_argument("--full-name", default=None)
    parser.add_argument(
        "--password",
        default=None,
        help="Password to set; prompted for when omitted.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    password = args.password or getpass.getpass("Password: ")

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == args.username)).scalars().first()
        if existing:
            set_password(db, existing, password)
            print(f"Password updated for {existing.username} ({existing.role}).")
            return
        user = create_user(db, args.username, password, args.role, full_name=args.full_name)
        print(f"Created {user.username} ({user.role}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
